# src/huddle/main.py
"""Main entry point for the Huddle application."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from huddle.api.v1 import auth_router, messages_router, users_router
from huddle.core import security
from huddle.core.errors import HuddleError, InternalError
from huddle.core.logging import configure_logging
from huddle.core.settings import settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    configure_logging(settings)
    # Unknown-email logins must not pay for building the dummy hash.
    security.dummy_password_hash(settings.bcrypt_rounds)
    logger.info("%s %s starting", settings.app_name, settings.app_version)
    yield


# Initialize FastAPI app
app = FastAPI(
    title="Huddle API",
    description="Employee directory with private profiles and direct messages",
    version=settings.app_version,
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

# Include API routers
app.include_router(auth_router, prefix="/api/v1")
app.include_router(users_router, prefix="/api/v1")
app.include_router(messages_router, prefix="/api/v1")


@app.exception_handler(HuddleError)
async def handle_huddle_error(request: Request, exc: HuddleError) -> JSONResponse:
    """Render core failures as ``{"detail", "code"}`` with the mapped status."""
    if isinstance(exc, InternalError):
        logger.error("Internal error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "code": exc.code},
    )


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("huddle.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
