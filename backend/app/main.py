"""
MailChimp Sync Backend — FastAPI Application Factory
======================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn app.main:app).

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                      FastAPI App                         │
    │                                                          │
    │  Middleware Chain:                                       │
    │  ┌──────────┐ ┌──────────┐ ┌──────────┐                  │
    │  │  Req ID  │→│ Logging  │→│   CORS   │                  │
    │  └──────────┘ └──────────┘ └──────────┘                  │
    │                                                          │
    │  Routes:                                                 │
    │  ┌─────────────┐ ┌──────────────────────┐ ┌───────────┐  │
    │  │ /lists      │ │ /lists/{id}/members  │ │ /health   │  │
    │  └─────────────┘ └──────────────────────┘ └───────────┘  │
    │                                                          │
    │  Exception Handlers:                                     │
    │  ┌────────────────────────────────────────────────────┐  │
    │  │ NotFound→404 │ Validation/Remote→400 │ other→500   │  │
    │  └────────────────────────────────────────────────────┘  │
    └──────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Validate configuration (logged, not fatal)
    3. Create missing tables when DB_AUTO_CREATE is on

    Shutdown:
    1. Close the MailChimp HTTP connection pool
    2. Dispose database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app import __version__
from app.config import settings
from app.database import create_tables, dispose_engine
from app.exceptions import MailChimpSyncError, PayloadValidationError
from app.middleware.logging import RequestLoggingMiddleware
from app.middleware.request_id import RequestIDMiddleware, request_id_var
from app.routes import health, lists, members
from app.services.mailchimp_client import mailchimp_client

logger = logging.getLogger(__name__)

INVALID_DATA_MESSAGE = "Invalid data given"


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Access lines additionally carry the request id in their message.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Per-operation DEBUG/INFO chatter
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("MailChimp Sync Backend %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Reads keep working; writes will fail with the provider's message
        logger.error("Configuration error: %s", str(e))

    if settings.db_auto_create:
        await create_tables()
        logger.info("Database tables ensured")

    logger.info("MailChimp API root: %s", settings.mailchimp_api_root)
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("MailChimp Sync Backend shutting down...")
    await mailchimp_client.aclose()
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers for consistent error responses.

    Handler hierarchy:
        PayloadValidationError  → 400 {"message", "errors"}
        RequestValidationError  → 400 {"message", "errors"} (malformed JSON)
        MailChimpSyncError      → exc.status_code {"message"}
        Exception (fallback)    → 500 {"message"}

    Only the unexpected-error handler hides the underlying message; every
    MailChimpSyncError message is meant for the client.
    """

    @app.exception_handler(PayloadValidationError)
    async def handle_payload_validation(request: Request, exc: PayloadValidationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Invalid payload: %s", rid, sorted(exc.errors))
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.message, "errors": exc.errors},
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        """Body that is not a JSON object, or not JSON at all."""
        errors = {}
        for error in exc.errors():
            # Drop the leading "body" location FastAPI adds
            loc = [str(part) for part in error.get("loc", ())][1:] or ["body"]
            errors.setdefault(".".join(loc), []).append(error.get("msg", "Invalid value"))
        return JSONResponse(
            status_code=400,
            content={"message": INVALID_DATA_MESSAGE, "errors": errors},
        )

    @app.exception_handler(MailChimpSyncError)
    async def handle_sync_error(request: Request, exc: MailChimpSyncError):
        rid = request_id_var.get("")
        if exc.status_code >= 500:
            logger.error("[%s] %s | Context: %s", rid, exc.message, exc.context)
        else:
            logger.info("[%s] Refused (%d): %s", rid, exc.status_code, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Stack trace goes to the log only."""
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"message": "An unexpected error occurred. Please try again later."},
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    app = FastAPI(
        title="MailChimp Sync API",
        description=(
            "Keeps MailChimp lists and their members in sync with a local "
            "database. Every write goes to MailChimp first and is stored "
            "locally only when MailChimp accepted it."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Middleware executes in reverse order of addition:
    # RequestID → Logging → CORS → route
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(lists.router)
    app.include_router(members.router)
    app.include_router(health.router)

    return app


app = create_app()
