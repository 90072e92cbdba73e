"""
ShiftLog Relay: FastAPI Application Factory
=============================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn (uvicorn shiftrelay.main:app), by run(), and by tests.
When:  Once at server startup; the returned app handles all subsequent requests.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────────────┐ ┌──────────────┐  │
    │  │  Req ID  │→│  Logging        │→│  CORS        │  │
    │  └──────────┘ └─────────────────┘ └──────────────┘  │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────────────┐ ┌─────────────────┐           │
    │  │ POST /uploadNote │ │ GET /health     │           │
    │  └──────────────────┘ └─────────────────┘           │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ ValidationError→400 │ UpstreamError→500      │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Validate configuration (fail fast on a missing Pinata JWT)
    3. Create the shared httpx client and PinataClient (unless injected)

    Shutdown:
    1. Close the httpx client created at startup
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shiftrelay import __version__
from shiftrelay.config import Settings
from shiftrelay.exceptions import (
    ConfigurationError,
    RelayError,
    UpstreamError,
    ValidationError,
)
from shiftrelay.middleware.logging import RequestLoggingMiddleware
from shiftrelay.middleware.request_id import RequestIDMiddleware, request_id_var
from shiftrelay.routes import health, notes
from shiftrelay.services.note_service import NoteService
from shiftrelay.services.pinata_service import PinataClient, build_async_client
from shiftrelay.services.pinning_base import PinningClient

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(settings: Settings) -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once during startup, before anything else logs.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
        force=True,
    )

    # httpx logs every request URL at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Manage application lifecycle: startup and shutdown procedures.

    Startup raises ConfigurationError when PINATA_JWT_SECRET is missing, which
    makes uvicorn abort instead of serving requests that could only fail.
    A pinning client injected into create_app() is used as-is and is not
    closed here; its owner is responsible for it.
    """
    settings: Settings = app.state.settings

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(settings)
    logger.info("=" * 60)
    logger.info("ShiftLog Relay starting up...")

    http_client = None
    if app.state.pinning_client is None:
        try:
            settings.validate_required()
        except ConfigurationError as e:
            logger.error("Configuration error: %s", e.message)
            logger.error("Fix the configuration and restart the server.")
            raise

        http_client = build_async_client(settings)
        app.state.pinning_client = PinataClient(http_client, settings)
        logger.info(
            "Pinning via %s (timeout %.1fs)",
            settings.pinata_api_url,
            settings.pinata_timeout_seconds,
        )

    logger.info("Server ready at http://%s:%d", settings.host, settings.port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("ShiftLog Relay shutting down...")
    if http_client is not None:
        await http_client.aclose()
        app.state.pinning_client = None
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers for consistent error responses.

    Handler hierarchy:
        ValidationError         → 400 {"error": "Note content is required"}
        RequestValidationError  → 400 {"error": "Invalid request body"}
        UpstreamError           → 500 {"error": "Failed to upload note to IPFS"}
        RelayError (base)       → 500 {"error": <message>}
        Exception (fallback)    → 500 {"error": "Internal server error"}

    Exception handlers NEVER expose internal details in the response body.
    Context (status codes, error types) is logged server-side.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Validation error: %s", rid, exc.message)
        return error_response(400, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Malformed request body: %d error(s)", rid, len(exc.errors()))
        return error_response(400, "Invalid request body")

    @app.exception_handler(UpstreamError)
    async def handle_upstream_error(request: Request, exc: UpstreamError):
        rid = request_id_var.get("")
        logger.error("[%s] Error uploading to Pinata: %s | Context: %s", rid, exc.message, exc.context)
        return error_response(500, exc.message)

    @app.exception_handler(RelayError)
    async def handle_relay_error(request: Request, exc: RelayError):
        rid = request_id_var.get("")
        logger.error("[%s] %s: %s | Context: %s", rid, type(exc).__name__, exc.message, exc.context)
        return error_response(500, exc.message)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return error_response(500, "Internal server error")


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    settings: Optional[Settings] = None,
    pinning_client: Optional[PinningClient] = None,
    note_service: Optional[NoteService] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings:       Configuration; read from the environment when omitted.
        pinning_client: Pre-built client (tests). When omitted the lifespan
                        builds a PinataClient after validating settings.
        note_service:   Pre-built service (tests pin the clock through it).

    Returns: Fully configured FastAPI instance ready to receive requests.
    """
    settings = settings or Settings()

    app = FastAPI(
        title="ShiftLog Relay API",
        description="Relays shift handover notes to IPFS via Pinata and returns their content identifier.",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.pinning_client = pinning_client
    app.state.note_service = note_service or NoteService()

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in REVERSE order of addition:
    # RequestID → Logging → CORS → route

    # Browsers may call the relay from any origin by default
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(notes.router)
    app.include_router(health.router)

    return app


def run() -> None:
    """Console entry point: serve the relay on the configured host and port."""
    import uvicorn

    settings = Settings()
    uvicorn.run(
        "shiftrelay.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


# ── Application Instance ─────────────────────────────────────────────────
# uvicorn expects `shiftrelay.main:app` to be importable
app = create_app()


if __name__ == "__main__":
    run()
