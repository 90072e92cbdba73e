"""
ShiftLog Relay: Note Upload Route
===================================

What:  Handles POST /uploadNote, the relay's only business endpoint.
How:   Parses the JSON body, delegates to NoteService, returns the content
       identifier. Errors are raised as RelayError subclasses and formatted by
       the global exception handlers in main.py.
Who:   Called by the shift handover frontend.

Request Flow:
    1. Client sends {"note": "..."} as JSON
    2. NoteService validates the note (400 if missing/empty)
    3. NoteService pins it through the app's PinningClient (500 on failure)
    4. Return 200 {"ipfsHash": "<content identifier>"}
"""

import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends

from shiftrelay.dependencies import get_note_service, get_pinning_client
from shiftrelay.schemas.note import ErrorResponse, NoteSubmission, UploadNoteResponse
from shiftrelay.services.note_service import NoteService
from shiftrelay.services.pinning_base import PinningClient

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Notes"])


@router.post(
    "/uploadNote",
    status_code=200,
    response_model=UploadNoteResponse,
    responses={
        200: {"description": "Note pinned to IPFS", "model": UploadNoteResponse},
        400: {"description": "Note missing or empty", "model": ErrorResponse},
        500: {"description": "Pinning provider failed", "model": ErrorResponse},
    },
    summary="Upload a shift handover note to IPFS",
    description=(
        "Pins the note, together with its receipt timestamp, to IPFS via Pinata "
        "and returns the content identifier under which it can be retrieved."
    ),
)
async def upload_note(
    submission: Optional[NoteSubmission] = Body(default=None),
    note_service: NoteService = Depends(get_note_service),
    pinning_client: PinningClient = Depends(get_pinning_client),
) -> UploadNoteResponse:
    """
    Relay a shift handover note to the pinning provider.

    A request without a body is treated like a body without `note`.

    Error responses (handled by global exception handlers):
        HTTP 400: {"error": "Note content is required"} (ValidationError)
        HTTP 500: {"error": "Failed to upload note to IPFS"} (UpstreamError)
    """
    return await note_service.upload_note(
        submission or NoteSubmission(),
        pinning_client,
    )
