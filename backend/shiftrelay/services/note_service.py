"""
ShiftLog Relay: Note Service (Relay Orchestrator)
===================================================

What:  Validates a note submission, shapes it into a PinRequest and forwards
       it to the pinning provider.
How:   Receives the PinningClient per call; holds no state of its own.
Who:   Called by the POST /uploadNote route handler.

Per-request state machine:
    Validating ──invalid──▶ Failed (ValidationError, 400, no outbound call)
        │
        ▼
    Forwarding ──provider error──▶ Failed (UpstreamError, 500)
        │
        ▼
    Succeeded (content identifier returned)

Nothing survives the request: the PinRequest is built, sent once and dropped.
"""

import logging
from datetime import datetime, timezone
from typing import Callable

from shiftrelay.exceptions import RelayError, UpstreamError, ValidationError
from shiftrelay.schemas.note import NoteSubmission, PinRequest, UploadNoteResponse
from shiftrelay.services.pinning_base import PinningClient

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class NoteService:
    """
    Business logic for relaying shift handover notes.

    Args:
        clock: Returns the receipt time. Tests pass a fixed clock.
    """

    def __init__(self, clock: Callable[[], datetime] = utc_now):
        self._clock = clock

    def build_pin_request(self, submission: NoteSubmission) -> PinRequest:
        """
        Validate the submission and build its PinRequest.

        Raises:
            ValidationError: `note` is missing or falsy.
        """
        if not submission.note:
            raise ValidationError(context={"note_type": type(submission.note).__name__})
        return PinRequest.for_note(submission.note, received_at=self._clock())

    async def upload_note(
        self,
        submission: NoteSubmission,
        pinning_client: PinningClient,
    ) -> UploadNoteResponse:
        """
        Relay one note to the pinning provider.

        Workflow Steps:
            1. Validate: note must be present and non-empty
            2. Build PinRequest (receipt timestamp + display name)
            3. Pin exactly once through the injected client
            4. Return the content identifier

        Error Recovery:
            Step 1 fails → ValidationError (400), client never called
            Step 3 fails → UpstreamError (500), no identifier in the response

        Returns:
            UploadNoteResponse with the provider's content identifier

        Raises:
            ValidationError: Missing or empty note
            UpstreamError: Pinning failed for any reason
        """
        pin_request = self.build_pin_request(submission)

        try:
            content_identifier = await pinning_client.pin(
                pin_request.content, pin_request.metadata
            )
        except RelayError:
            raise
        except Exception as e:
            # A client implementation leaked a non-relay exception
            logger.error(
                "Unexpected error while pinning %s: %s",
                pin_request.metadata.name,
                str(e),
                exc_info=True,
            )
            raise UpstreamError(context={"error_type": type(e).__name__})

        if not content_identifier:
            logger.error("Pinning client returned no content identifier for %s", pin_request.metadata.name)
            raise UpstreamError(context={"malformed": True})

        logger.info("Note %s uploaded to IPFS: %s", pin_request.metadata.name, content_identifier)
        return UploadNoteResponse(ipfsHash=content_identifier)
