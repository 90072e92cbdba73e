"""
ShiftLog Relay: Pydantic Request/Response Schemas
===================================================

What:  Pydantic models for the inbound API contract and the Pinata wire format.
How:   FastAPI parses request bodies into these models and serializes response
       models. The Pinata models use aliases so that `model_dump(by_alias=True)`
       yields Pinata's field names (pinataContent, IpfsHash, ...).

Wire shapes:
    Inbound   POST /uploadNote     {"note": "..."}
    Outbound  pinJSONToIPFS        {"pinataContent": {"note", "timestamp"},
                                    "pinataMetadata": {"name"}}
    Provider  pinJSONToIPFS reply  {"IpfsHash", "PinSize", "Timestamp"}
    Response  200                  {"ipfsHash": "..."}
    Error     4xx/5xx              {"error": "..."}
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


NOTE_NAME_PREFIX = "ShiftHandoverNote_"


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class NoteSubmission(BaseModel):
    """
    What:  Body of POST /uploadNote.

    `note` is deliberately loose here: missing, null, "" and other falsy
    values must produce the relay's own 400 "Note content is required"
    rather than FastAPI's 422, so the emptiness check lives in NoteService.
    """
    note: Any = Field(default=None, description="Shift handover note text")

    model_config = ConfigDict(extra="ignore")


# ══════════════════════════════════════════════════════════════════════════
# Pinata Wire Models
# ══════════════════════════════════════════════════════════════════════════


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 in UTC with millisecond precision and a 'Z' suffix."""
    utc = moment.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def epoch_millis(moment: datetime) -> int:
    """Whole milliseconds since the Unix epoch (truncated, like the timestamp)."""
    return (moment - _EPOCH) // timedelta(milliseconds=1)


class PinContent(BaseModel):
    """The JSON document that gets pinned to IPFS."""
    note: Any = Field(description="Note text as submitted")
    timestamp: str = Field(description="Receipt time, ISO-8601 UTC")


class PinMetadata(BaseModel):
    """Dashboard metadata. `name` is a display label, not an identifier."""
    name: str = Field(description="Label shown in the Pinata dashboard")


class PinRequest(BaseModel):
    """
    What:  Body sent to Pinata's pinJSONToIPFS endpoint.
    How:   Built once per valid submission by `PinRequest.for_note()`.
    """
    content: PinContent = Field(alias="pinataContent")
    metadata: PinMetadata = Field(alias="pinataMetadata")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def for_note(cls, note: Any, received_at: datetime) -> "PinRequest":
        """Timestamp and name are derived from the same receipt instant."""
        return cls(
            content=PinContent(note=note, timestamp=format_timestamp(received_at)),
            metadata=PinMetadata(name=f"{NOTE_NAME_PREFIX}{epoch_millis(received_at)}"),
        )


class PinResult(BaseModel):
    """
    What:  Successful pinJSONToIPFS response.
    Only `content_identifier` is forwarded to the caller.
    """
    content_identifier: str = Field(alias="IpfsHash", min_length=1)
    pin_size: Optional[int] = Field(default=None, alias="PinSize")
    timestamp: Optional[str] = Field(default=None, alias="Timestamp")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class UploadNoteResponse(BaseModel):
    """200 body of POST /uploadNote. Exactly one field."""
    ipfsHash: str = Field(description="IPFS content identifier of the pinned note")


class ErrorResponse(BaseModel):
    """
    Error body for every failure response.

    Example:
        {"error": "Note content is required"}
    """
    error: str = Field(description="Human-readable error description")


class HealthResponse(BaseModel):
    """Health check response showing service and pinning provider status."""
    status: str = Field(description="Overall service status: healthy, degraded")
    version: str = Field(description="Application version")
    pinning: str = Field(description="Pinning provider status: available, unavailable")
    uptime_seconds: float = Field(description="Seconds since service started")
