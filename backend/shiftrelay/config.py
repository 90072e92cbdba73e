"""
ShiftLog Relay: Application Configuration
===========================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and exposes a typed `Settings` object.
Who:   Built once by the application factory and stored on `app.state`.
       Request handlers receive it through dependencies (see routes/notes.py),
       never by importing a module-level instance.
When:  Constructed at app creation; validated at startup (lifespan).

The outbound Pinata credential is held as a SecretStr so it renders as
'**********' in reprs, logs and tracebacks.
"""

from typing import List

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from shiftrelay.exceptions import ConfigurationError


PINATA_PIN_JSON_URL = "https://api.pinata.cloud/pinning/pinJSONToIPFS"
PINATA_AUTH_TEST_URL = "https://api.pinata.cloud/data/testAuthentication"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings except the Pinata credential have working defaults.
    Attributes are grouped by concern for readability.
    """

    # ── Pinata (IPFS pinning provider) ────────────────────────────────────
    # What: JWT issued by Pinata, sent as `Authorization: Bearer <jwt>`
    # Required: YES. Startup fails without it (validate_required below).
    pinata_jwt_secret: SecretStr = Field(
        default=SecretStr(""),
        description="Pinata JWT used to authenticate pinning requests",
    )

    pinata_api_url: str = Field(
        default=PINATA_PIN_JSON_URL,
        description="Pinata JSON pinning endpoint",
    )

    pinata_auth_test_url: str = Field(
        default=PINATA_AUTH_TEST_URL,
        description="Pinata endpoint used by the health probe",
    )

    # What: Upper bound on a single outbound call (connect + read)
    # The relay makes exactly one attempt per note, so this is the whole
    # budget a caller waits before getting a 500.
    pinata_timeout_seconds: float = Field(default=10.0, gt=0, le=120)

    # ── CORS ──────────────────────────────────────────────────────────────
    # Format: Comma-separated origins, or "*" for any origin
    cors_origins: str = Field(default="*")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Server ────────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=5000, ge=1, le=65535)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,  # PINATA_JWT_SECRET and pinata_jwt_secret both work
        extra="ignore",
    )

    @property
    def bearer_token(self) -> str:
        """Raw credential for the Authorization header. Never log this value."""
        return self.pinata_jwt_secret.get_secret_value()

    def validate_required(self) -> None:
        """
        What:  Validates that critical settings are configured.
        When:  Called during app startup (lifespan), before the HTTP client exists.
        How:   Collects every problem and raises one ConfigurationError.
        """
        errors = []
        token = self.bearer_token.strip()
        if not token or token == "your_pinata_jwt_here":
            errors.append(
                "PINATA_JWT_SECRET is not set. "
                "Create an API key at https://app.pinata.cloud/developers/api-keys"
            )
        if errors:
            raise ConfigurationError(
                message="Configuration validation failed:\n"
                + "\n".join(f"  - {e}" for e in errors),
                context={"missing": ["PINATA_JWT_SECRET"]},
            )
