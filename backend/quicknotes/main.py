"""
QuickNotes Backend — FastAPI Application Factory
===================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Served by uvicorn (uvicorn quicknotes.main:app, or the `quicknotes`
       console script which calls run()).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────────────┐ ┌──────────────┐  │
    │  │ Req ID   │→│  Logging        │→│  CORS        │  │
    │  └──────────┘ └─────────────────┘ └──────────────┘  │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────────────────────────┐ ┌──────────────┐  │
    │  │ /notes  (list/get/CRUD)      │ │ GET /health  │  │
    │  └──────────────────────────────┘ └──────────────┘  │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ Validation→400 │ NotFound→404 │ Other→500    │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Every error response uses the envelope
    {"error": {"code": ..., "message": ..., "details": ...}}
"""

import logging
import sys
from contextlib import asynccontextmanager
from http import HTTPStatus
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from quicknotes import __version__
from quicknotes.config import settings
from quicknotes.exceptions import QuickNotesError, ValidationError
from quicknotes.middleware.logging import RequestLoggingMiddleware
from quicknotes.middleware.request_id import REQUEST_ID_HEADER, RequestIDMiddleware, request_id_var
from quicknotes.routes import health, notes
from quicknotes.schemas.note import format_issues
from quicknotes.store import note_store

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Output goes to stdout so container runtimes capture it.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # The access middleware already logs every request
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: configure logging, log the bind address.
    Shutdown: drop every stored note.
    """
    setup_logging()
    logger.info("%s %s starting up...", settings.app_name, __version__)
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("API docs: http://%s:%d/docs", settings.backend_host, settings.backend_port)

    yield

    logger.info("%s shutting down, discarding %d notes", settings.app_name, len(note_store))
    note_store.clear()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_response(status_code: int, code: str, message: str, details=None, headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": {"code": code, "message": message, "details": details}},
        headers=headers,
    )


def _request_id(request: Request) -> str:
    """ID assigned by RequestIDMiddleware; request.state shares the ASGI scope."""
    return getattr(request.state, "request_id", "") or request_id_var.get("")


def _http_error_code(status_code: int) -> str:
    """404 → NOT_FOUND, 405 → METHOD_NOT_ALLOWED, unknown → HTTP_<status>."""
    try:
        phrase = HTTPStatus(status_code).phrase
    except ValueError:
        return f"HTTP_{status_code}"
    return phrase.upper().replace(" ", "_").replace("-", "_")


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers for the shared error envelope.

    Handler hierarchy:
        ValidationError / RequestValidationError → 400 VALIDATION_ERROR
        NotFoundError                            → 404 NOTE_NOT_FOUND
        Starlette HTTPException                  → its status, code from the phrase
        Exception (fallback)                     → 500 INTERNAL_SERVER_ERROR

    The 500 response never contains exception text; the traceback is logged.
    """

    @app.exception_handler(QuickNotesError)
    async def handle_app_error(request: Request, exc: QuickNotesError):
        rid = _request_id(request)
        if isinstance(exc, ValidationError):
            logger.warning("[%s] Validation error on %s: %s", rid, request.url.path, exc.issues)
        elif exc.status_code >= 500:
            logger.error("[%s] %s: %s", rid, exc.code, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_response())

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        """Malformed requests FastAPI rejects before the handler runs, e.g. invalid JSON."""
        error = ValidationError(issues=format_issues(exc.errors()))
        logger.warning(
            "[%s] Malformed request on %s: %s", _request_id(request), request.url.path, error.issues
        )
        return JSONResponse(status_code=error.status_code, content=error.to_response())

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        message = exc.detail if isinstance(exc.detail, str) else HTTPStatus(exc.status_code).phrase
        return _error_response(
            exc.status_code,
            _http_error_code(exc.status_code),
            message,
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """
        Runs in ServerErrorMiddleware, outside RequestIDMiddleware, so the
        X-Request-ID header has to be added here.
        """
        rid = _request_id(request)
        logger.error(
            "[%s] Unexpected error on %s %s: %s",
            rid,
            request.method,
            request.url.path,
            str(exc),
            exc_info=exc,
        )
        headers = {REQUEST_ID_HEADER: rid} if rid else None
        return _error_response(500, "INTERNAL_SERVER_ERROR", "Something went wrong", headers=headers)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns: Fully configured FastAPI instance ready to receive requests.
    """
    app = FastAPI(
        title=settings.app_name,
        description="CRUD API for short text notes with pagination and keyword search.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added = first to execute: RequestID → Logging → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
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
    """Console-script entry point: serve the app with uvicorn."""
    uvicorn.run(
        "quicknotes.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
    )


# ── Application Instance ─────────────────────────────────────────────────
app = create_app()
