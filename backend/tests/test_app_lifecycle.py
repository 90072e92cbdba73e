"""
ShiftLog Relay: Configuration, Lifespan and Health Tests
==========================================================

What we test:
    ✅ Settings read from the environment (PORT, PINATA_JWT_SECRET, ...)
    ✅ Missing credential fails fast at startup
    ✅ Lifespan builds and closes the Pinata client
    ✅ GET /health reports pinning provider status
"""

from unittest.mock import patch

import pytest
from httpx import ASGITransport, AsyncClient

from shiftrelay.config import PINATA_PIN_JSON_URL, Settings
from shiftrelay.exceptions import ConfigurationError
from shiftrelay.main import create_app, lifespan
from shiftrelay.services.pinata_service import PinataClient

from tests.conftest import FakePinningClient


class TestSettings:

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("PORT", raising=False)
        settings = Settings(_env_file=None, pinata_jwt_secret="jwt")

        assert settings.port == 5000
        assert settings.pinata_api_url == PINATA_PIN_JSON_URL
        assert settings.pinata_timeout_seconds == 10.0
        assert settings.cors_origins_list == ["*"]

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("PORT", "8080")
        monkeypatch.setenv("PINATA_JWT_SECRET", "env-jwt")
        monkeypatch.setenv("CORS_ORIGINS", "http://a.example, http://b.example")
        monkeypatch.setenv("LOG_LEVEL", "debug")

        settings = Settings(_env_file=None)

        assert settings.port == 8080
        assert settings.bearer_token == "env-jwt"
        assert settings.cors_origins_list == ["http://a.example", "http://b.example"]
        assert settings.log_level == "DEBUG"

    def test_credential_is_not_exposed_in_repr(self):
        settings = Settings(_env_file=None, pinata_jwt_secret="super-secret-jwt")

        assert "super-secret-jwt" not in repr(settings)
        assert "super-secret-jwt" not in str(settings.model_dump())

    def test_invalid_log_level_rejected(self):
        with pytest.raises(ValueError):
            Settings(_env_file=None, pinata_jwt_secret="jwt", log_level="LOUD")

    @pytest.mark.parametrize("token", ["", "   ", "your_pinata_jwt_here"])
    def test_validate_required_fails_without_credential(self, token):
        settings = Settings(_env_file=None, pinata_jwt_secret=token)

        with pytest.raises(ConfigurationError) as exc_info:
            settings.validate_required()

        assert "PINATA_JWT_SECRET" in exc_info.value.message

    def test_validate_required_passes_with_credential(self, test_settings):
        test_settings.validate_required()


class TestLifespan:

    @pytest.mark.asyncio
    async def test_startup_fails_fast_without_credential(self):
        app = create_app(settings=Settings(_env_file=None, pinata_jwt_secret=""))

        with patch("shiftrelay.main.setup_logging"):
            with pytest.raises(ConfigurationError):
                async with lifespan(app):
                    pass

        assert app.state.pinning_client is None

    @pytest.mark.asyncio
    async def test_startup_builds_pinata_client_and_shutdown_releases_it(self, test_settings):
        app = create_app(settings=test_settings)

        with patch("shiftrelay.main.setup_logging"):
            async with lifespan(app):
                assert isinstance(app.state.pinning_client, PinataClient)

        assert app.state.pinning_client is None

    @pytest.mark.asyncio
    async def test_injected_client_is_kept(self, fake_pinning_client):
        app = create_app(
            settings=Settings(_env_file=None, pinata_jwt_secret=""),
            pinning_client=fake_pinning_client,
        )

        with patch("shiftrelay.main.setup_logging"):
            async with lifespan(app):
                assert app.state.pinning_client is fake_pinning_client

        assert app.state.pinning_client is fake_pinning_client

    @pytest.mark.asyncio
    async def test_request_without_client_returns_500(self, test_settings):
        app = create_app(settings=test_settings)

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http:
            response = await http.post("/uploadNote", json={"note": "test"})

        assert response.status_code == 500
        assert "error" in response.json()


class TestHealth:

    @pytest.mark.asyncio
    async def test_healthy_when_provider_available(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["pinning"] == "available"
        assert body["version"] == "1.0.0"

    @pytest.mark.asyncio
    async def test_degraded_when_provider_unavailable(self, test_settings):
        client = FakePinningClient()
        client.healthy = False
        app = create_app(settings=test_settings, pinning_client=client)

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http:
            response = await http.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "degraded"
        assert response.json()["pinning"] == "unavailable"
