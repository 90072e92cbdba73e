"""
ShiftLog Relay: Request Dependencies
======================================

What:  FastAPI dependencies that hand request handlers their collaborators.
How:   Everything is read from `request.app.state`, which the application
       factory and lifespan populate. Handlers never touch environment
       variables or module-level singletons, so tests can build an app with
       fake settings and a fake pinning client.

Usage:
    async def upload_note(
        pinning_client: PinningClient = Depends(get_pinning_client),
    ): ...
"""

from fastapi import Request

from shiftrelay.config import Settings
from shiftrelay.exceptions import ConfigurationError
from shiftrelay.services.note_service import NoteService
from shiftrelay.services.pinning_base import PinningClient


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_note_service(request: Request) -> NoteService:
    return request.app.state.note_service


def get_pinning_client(request: Request) -> PinningClient:
    """
    Raises:
        ConfigurationError: The lifespan has not created a client and none
            was injected into create_app().
    """
    client = getattr(request.app.state, "pinning_client", None)
    if client is None:
        raise ConfigurationError(message="Pinning client is not initialized")
    return client
