"""
ShiftLog Relay: Test Configuration (conftest.py)
==================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── test_settings: Settings with a fake JWT and the real Pinata URLs
    ├── fixed_clock / note_service: NoteService with a pinned receipt time
    ├── fake_pinning_client: In-memory PinningClient recording every call
    └── test_client: HTTPX AsyncClient talking to an app built around the fakes
"""

import asyncio
import os
from datetime import datetime, timezone
from typing import List, Optional, Tuple

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Override settings for testing BEFORE any app imports
os.environ["PINATA_JWT_SECRET"] = "test-jwt-not-real"
os.environ["LOG_LEVEL"] = "WARNING"

from shiftrelay.config import Settings  # noqa: E402
from shiftrelay.exceptions import UpstreamError  # noqa: E402
from shiftrelay.main import create_app  # noqa: E402
from shiftrelay.schemas.note import PinContent, PinMetadata  # noqa: E402
from shiftrelay.services.note_service import NoteService  # noqa: E402
from shiftrelay.services.pinning_base import PinningClient  # noqa: E402


FIXED_RECEIVED_AT = datetime(2024, 1, 15, 22, 0, 0, 123000, tzinfo=timezone.utc)


class FakePinningClient(PinningClient):
    """
    PinningClient double.

    By default returns "Qm-<note>" so concurrent tests can check pairing.
    Set `result` for a fixed identifier or `error` to make pin() raise.
    """

    def __init__(self, result: Optional[str] = None, error: Optional[Exception] = None):
        self.result = result
        self.error = error
        self.healthy = True
        self.calls: List[Tuple[PinContent, PinMetadata]] = []

    async def pin(self, content: PinContent, metadata: PinMetadata) -> str:
        self.calls.append((content, metadata))
        # Yield to the loop so concurrent requests interleave
        await asyncio.sleep(0)
        if self.error is not None:
            raise self.error
        if self.result is not None:
            return self.result
        return f"Qm-{content.note}"

    async def health_check(self) -> bool:
        return self.healthy


@pytest.fixture
def test_settings() -> Settings:
    return Settings(pinata_jwt_secret="test-jwt-not-real", log_level="WARNING")


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_RECEIVED_AT


@pytest.fixture
def note_service(fixed_clock) -> NoteService:
    return NoteService(clock=fixed_clock)


@pytest.fixture
def fake_pinning_client() -> FakePinningClient:
    return FakePinningClient()


@pytest.fixture
def failing_pinning_client() -> FakePinningClient:
    return FakePinningClient(error=UpstreamError(status_code=502))


@pytest_asyncio.fixture
async def test_client(test_settings, fake_pinning_client):
    """
    HTTPX AsyncClient wired to an app built around the fake pinning client.

    ASGITransport does not run the lifespan, so the injected client is the
    one every request sees.

    Usage:
        async def test_upload(test_client):
            response = await test_client.post("/uploadNote", json={"note": "x"})
    """
    app = create_app(settings=test_settings, pinning_client=fake_pinning_client)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
