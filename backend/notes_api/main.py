"""
Notes API: FastAPI Application Factory
======================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance;
       run() is the `notes-api` console entry point that serves it with uvicorn.
Who:   uvicorn (uvicorn notes_api.main:app), the console script and the tests.
When:  Once at server startup; the returned app handles all subsequent requests.

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                     FastAPI App                          │
    │                                                          │
    │  Middleware:   Request ID → Logging → CORS               │
    │                                                          │
    │  Routes:       /notes, /notes/{id}                       │
    │  Docs:         /api-docs/openapi.json, /swagger-ui,      │
    │                /redoc                                    │
    │                                                          │
    │  Exception Handlers:                                     │
    │   ValidationError / BadRequest → 400 "body not valid"    │
    │   NotFoundError                → 404 "note not found"    │
    │   unmatched route / method     → 404 "not found"         │
    │   StorageError / anything else → 500 "internal error"    │
    └──────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging (LOG_LEVEL, default info)
    2. Probe the database with SELECT 1 (failure aborts startup)
    3. Wire SQLNoteRepository → NoteService onto app.state
       (skipped when a service was injected into create_app)

    Shutdown:
    1. Dispose the engine (close pooled connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional, Sequence

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from notes_api import __version__
from notes_api.config import settings
from notes_api.database import async_session_factory, check_connection, dispose_engine
from notes_api.exceptions import (
    BODY_NOT_VALID,
    INTERNAL_ERROR,
    NOTE_NOT_FOUND,
    ROUTE_NOT_FOUND,
    BadRequestError,
    NotesAPIError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from notes_api.middleware.logging import RequestLoggingMiddleware
from notes_api.middleware.request_id import RequestIDMiddleware, request_id_var
from notes_api.repositories.sql import SQLNoteRepository
from notes_api.routes import notes
from notes_api.services.note_service import NoteService

logger = logging.getLogger(__name__)

OPENAPI_URL = "/api-docs/openapi.json"


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s, to stdout.
    Level comes from LOG_LEVEL (default info).
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Our access middleware already logs every request
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("Notes API %s starting up...", __version__)

    if getattr(app.state, "note_service", None) is None:
        try:
            await check_connection()
        except Exception as e:
            logger.error("Cannot reach database at %s: %s", settings.database_url, e)
            raise
        app.state.note_service = NoteService(SQLNoteRepository(async_session_factory))
        logger.info("Database: %s", settings.database_url)

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("OpenAPI: http://%s:%d%s", settings.backend_host, settings.backend_port, OPENAPI_URL)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Notes API shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def describe_validation_errors(errors: Sequence[Dict[str, Any]]) -> str:
    """
    Flatten FastAPI/Pydantic error dicts into one line.

    Example: "body.title: Field required; body.content: Input should be a valid string"
    """
    parts = []
    for err in errors:
        loc = ".".join(str(p) for p in err.get("loc", ()))
        msg = err.get("msg", "invalid value")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts) or "request body could not be parsed"


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map internal errors to HTTP status codes and response bodies.

    Handler table:
        ValidationError          → 400 {"message": "body not valid", "error": <rule>}
        BadRequestError          → 400 {"message": "body not valid", "error": <detail>}
        RequestValidationError   → 400 {"message": "body not valid", "error": <detail>}
        NotFoundError            → 404 {"message": "note not found"}
        HTTP 404/405 (no route)  → 404 {"message": "not found"}
        StorageError             → 500 {"message": "internal error"}
        NotesAPIError            → 500 {"message": "internal error"}

    Exceptions outside the NotesAPIError family are turned into the same 500
    body by RequestLoggingMiddleware, which sits below RequestIDMiddleware so
    the response still carries X-Request-ID.

    Causes of 5xx responses are logged with traceback; they never appear in
    the response body.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        return JSONResponse(
            status_code=400,
            content={"message": BODY_NOT_VALID, "error": exc.message},
        )

    @app.exception_handler(BadRequestError)
    async def handle_bad_request(request: Request, exc: BadRequestError):
        return JSONResponse(
            status_code=400,
            content={"message": BODY_NOT_VALID, "error": exc.message},
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        """Malformed JSON or a body that does not match the request schema."""
        detail = describe_validation_errors(exc.errors())
        return await handle_bad_request(request, BadRequestError(message=detail))

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content={"message": NOTE_NOT_FOUND})

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        """Router-level errors. Unknown paths and unsupported methods both read as 404."""
        if exc.status_code in (404, 405):
            return JSONResponse(status_code=404, content={"message": ROUTE_NOT_FOUND})
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(StorageError)
    async def handle_storage_error(request: Request, exc: StorageError):
        rid = request_id_var.get("")
        logger.error(
            "[%s] Storage error: %s | Context: %s",
            rid,
            exc.message,
            exc.context,
            exc_info=exc,
        )
        return JSONResponse(status_code=500, content={"message": INTERNAL_ERROR})

    @app.exception_handler(NotesAPIError)
    async def handle_app_error(request: Request, exc: NotesAPIError):
        rid = request_id_var.get("")
        logger.error("[%s] Unhandled application error: %s", rid, exc.message, exc_info=exc)
        return JSONResponse(status_code=500, content={"message": INTERNAL_ERROR})


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(note_service: Optional[NoteService] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        note_service: Pre-built service to serve requests with. When omitted,
            the lifespan wires one backed by SQLNoteRepository.

    Returns: Fully configured FastAPI instance.
    """
    app = FastAPI(
        title="Notes API",
        description="CRUD service for notes persisted in a local relational store.",
        version=__version__,
        openapi_url=OPENAPI_URL,
        docs_url="/swagger-ui",
        redoc_url="/redoc",
        openapi_tags=[{"name": "notes", "description": "Note management endpoints."}],
        lifespan=lifespan,
        redirect_slashes=False,
    )
    app.state.note_service = note_service

    # Middleware executes in reverse order of addition: RequestID → Logging → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(notes.router)
    drop_validation_responses(app)

    return app


# uvicorn expects `notes_api.main:app` to be importable
app = create_app()


def run() -> None:
    """Console entry point: serve the app; uvicorn exits non-zero on bind or startup failure."""
    import uvicorn

    uvicorn.run(
        app,
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
        lifespan="on",
    )


if __name__ == "__main__":
    run()
