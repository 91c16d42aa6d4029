"""
FastAPI Application Entry Point.

Creates and configures the FastAPI application for tts-playground:
logging, CORS for the console dev server, gzip compression, error
handlers, the API router (at / and /api) and the browser console page.

Usage:
    # Run with uvicorn
    uvicorn tts_playground.main:app --host 127.0.0.1 --port 7069

    # Or through the CLI (reads PORT/HOST from the environment)
    tts-playground serve
"""

from __future__ import annotations

from importlib import resources

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import HTMLResponse, JSONResponse

from tts_playground import __version__
from tts_playground.api.dependencies import get_settings
from tts_playground.api.routes import router
from tts_playground.core.errors import ErrorCode
from tts_playground.core.logging import configure_logging, get_logger, info, warn

_LOG = get_logger("tts-playground.app")

# Synthesis responses carry base64 audio; compress anything over 1 KB
GZIP_MIN_SIZE = 1024


def _console_page() -> str:
    return resources.files("tts_playground.console").joinpath("static/index.html").read_text(encoding="utf-8")


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report schema violations as 400 with per-field details instead of FastAPI's 422."""
    details = jsonable_encoder(exc.errors())
    warn(_LOG, "request_rejected", path=request.url.path, errors=len(details))
    return JSONResponse(
        status_code=400,
        content={
            "ok": False,
            "error": "Bad request",
            "code": ErrorCode.INVALID_REQUEST,
            "details": details,
        },
    )


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    This factory function:
        1. Configures structured logging
        2. Adds gzip and CORS middleware (CORS origin from settings)
        3. Registers the API router at / and /api
        4. Serves the browser console at /

    Returns:
        FastAPI: Configured application instance ready to serve requests.
    """
    configure_logging()

    config = get_settings().get_config()

    app = FastAPI(title="tts-playground", version=__version__)

    app.add_middleware(GZipMiddleware, minimum_size=GZIP_MIN_SIZE)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[config.server.cors_origin],
        allow_credentials=False,
        allow_methods=["GET", "POST"],
        allow_headers=["content-type"],
    )

    app.add_exception_handler(RequestValidationError, _validation_error_handler)

    app.include_router(router)
    app.include_router(router, prefix="/api", include_in_schema=False)

    @app.get("/", response_class=HTMLResponse, include_in_schema=False)
    def console():
        return _console_page()

    info(
        _LOG,
        "app_created",
        cors_origin=config.server.cors_origin,
        voices_ttl_sec=config.voices.cache_ttl_seconds,
    )
    return app


# Global application instance for ASGI servers (uvicorn, gunicorn, etc.)
app = create_app()
