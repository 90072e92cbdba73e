"""
ShiftLog Relay: Pinata Pinning Client
=======================================

What:  PinningClient implementation backed by Pinata's REST API.
How:   POSTs the PinRequest JSON to pinJSONToIPFS with a bearer JWT through a
       shared httpx.AsyncClient, then validates the reply into a PinResult.
Who:   Created once in the application lifespan; called by NoteService.
When:  Once per valid note submission.

Failure translation (all become UpstreamError → HTTP 500):
    httpx.TimeoutException      → timed out after settings.pinata_timeout_seconds
    httpx.HTTPError             → connection refused, DNS failure, protocol error
    non-2xx status              → Pinata rejected the request (401 bad JWT, 429, 5xx)
    body is not JSON            → malformed response
    IpfsHash missing or empty   → malformed response

There is no retry and no circuit breaker: one note, one attempt.

What we log vs what we DON'T log:
    ✅ Log: status code, error type, content identifier, elapsed time
    ❌ Don't log: the JWT, the note text, Pinata's raw error body
"""

import logging
import time

import httpx
from pydantic import ValidationError as PydanticValidationError

from shiftrelay.config import Settings
from shiftrelay.exceptions import UpstreamError
from shiftrelay.schemas.note import PinContent, PinMetadata, PinRequest, PinResult
from shiftrelay.services.pinning_base import PinningClient

logger = logging.getLogger(__name__)


def build_async_client(settings: Settings) -> httpx.AsyncClient:
    """Create the shared outbound client with the configured timeout."""
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.pinata_timeout_seconds),
        headers={"Accept": "application/json"},
    )


class PinataClient(PinningClient):
    """
    Pinata implementation of PinningClient.

    The httpx client is injected and owned by the caller (the lifespan closes
    it on shutdown). Tests pass a plain httpx.AsyncClient and mock Pinata
    with respx.
    """

    def __init__(self, http_client: httpx.AsyncClient, settings: Settings):
        self._client = http_client
        self._settings = settings

    def _auth_headers(self) -> dict:
        return {"Authorization": f"Bearer {self._settings.bearer_token}"}

    async def pin(self, content: PinContent, metadata: PinMetadata) -> str:
        payload = PinRequest(content=content, metadata=metadata).model_dump(by_alias=True)
        start_time = time.perf_counter()

        try:
            response = await self._client.post(
                self._settings.pinata_api_url,
                json=payload,
                headers=self._auth_headers(),
            )
        except httpx.TimeoutException as e:
            logger.error(
                "Pinata request timed out after %.0fms (%s)",
                (time.perf_counter() - start_time) * 1000,
                type(e).__name__,
            )
            raise UpstreamError(context={"error_type": type(e).__name__, "timeout": True})
        except httpx.HTTPError as e:
            logger.error("Pinata request failed: %s: %s", type(e).__name__, str(e))
            raise UpstreamError(context={"error_type": type(e).__name__})

        duration_ms = (time.perf_counter() - start_time) * 1000

        if not response.is_success:
            logger.error(
                "Pinata rejected pin request: HTTP %d after %.0fms",
                response.status_code,
                duration_ms,
            )
            raise UpstreamError(status_code=response.status_code)

        try:
            result = PinResult.model_validate(response.json())
        except (ValueError, PydanticValidationError) as e:
            logger.error(
                "Pinata returned a malformed response (HTTP %d): %s",
                response.status_code,
                type(e).__name__,
            )
            raise UpstreamError(
                status_code=response.status_code,
                context={"error_type": type(e).__name__, "malformed": True},
            )

        logger.info(
            "Pinned %s as %s in %.0fms",
            metadata.name,
            result.content_identifier,
            duration_ms,
        )
        return result.content_identifier

    async def health_check(self) -> bool:
        """
        What:    Calls Pinata's testAuthentication endpoint.
        Returns: True on 2xx (reachable and JWT accepted), False otherwise.
        """
        try:
            response = await self._client.get(
                self._settings.pinata_auth_test_url,
                headers=self._auth_headers(),
            )
        except httpx.HTTPError as e:
            logger.warning("Pinata health check failed: %s", type(e).__name__)
            return False

        if not response.is_success:
            logger.warning("Pinata health check returned HTTP %d", response.status_code)
            return False
        return True
