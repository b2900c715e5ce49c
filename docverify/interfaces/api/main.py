"""
FastAPI Main Application - DocVerify HTTP entry point.

Run with: uvicorn docverify.interfaces.api.main:app --reload
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from docverify import __version__
from docverify.config import Settings, configure_logging, get_settings

from .deps import cleanup_services, init_services
from .middleware import ErrorHandlerMiddleware, RequestContextMiddleware
from .routes import health, providers, validation

logger = logging.getLogger(__name__)

LOCAL_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:8000",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:8000",
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create the shared HTTP client and pipeline; close the client on shutdown."""
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info(
        "Starting DocVerify API v%s (vision=%s, analysis=%s, providers=%s)",
        __version__,
        settings.vision_provider,
        settings.analysis_provider,
        ",".join(settings.enabled_providers),
    )
    await init_services()

    yield

    logger.info("Shutting down DocVerify API...")
    await cleanup_services()


def _install_middleware(app: FastAPI, settings: Settings) -> None:
    # Last added runs first: request context wraps error handling so
    # error responses still carry the request ID header.
    app.add_middleware(ErrorHandlerMiddleware)
    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origin_regex=r"http://(localhost|127\.0\.0\.1):\d+" if settings.api_debug else None,
        allow_origins=LOCAL_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
    )


def create_app() -> FastAPI:
    """Create FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="DocVerify API",
        description="Document extraction and cross-validation with LLM providers",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    _install_middleware(app, settings)

    app.include_router(health.router, tags=["Health"])
    app.include_router(providers.router, prefix="/api/providers", tags=["Providers"])
    app.include_router(validation.router, prefix="/api/validation", tags=["Validation"])

    return app


app = create_app()
