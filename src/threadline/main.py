# src/threadline/main.py
"""Main entry point for the Threadline HTTP surface."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from threadline.api.v1 import communities_router, threads_router, users_router
from threadline.core.errors import (
    NotFound,
    StoreOperationFailed,
    StoreUnavailable,
    ThreadlineError,
    ValidationFailed,
)
from threadline.core.logging import configure_logging
from threadline.core.settings import settings
from threadline.db.session import get_store, reset_store

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: list[tuple[type[ThreadlineError], int]] = [
    (NotFound, status.HTTP_404_NOT_FOUND),
    (ValidationFailed, status.HTTP_422_UNPROCESSABLE_CONTENT),
    (StoreUnavailable, status.HTTP_503_SERVICE_UNAVAILABLE),
    (StoreOperationFailed, status.HTTP_500_INTERNAL_SERVER_ERROR),
]

app = FastAPI(
    title="Threadline API",
    description="Data-access layer for threads, replies and communities",
    version=settings.app_version,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

app.include_router(threads_router, prefix="/api/v1")
app.include_router(users_router, prefix="/api/v1")
app.include_router(communities_router, prefix="/api/v1")


@app.exception_handler(ThreadlineError)
async def threadline_error_handler(_request: Request, exc: ThreadlineError) -> JSONResponse:
    """Translate data-access errors into HTTP responses."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    for error_type, code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            status_code = code
            break
    if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("Request failed: %s", exc)
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


@app.on_event("startup")
async def on_startup() -> None:
    # Leave logging alone when the host (uvicorn --log-config, pytest) already set it up.
    if not logging.getLogger().handlers:
        configure_logging(settings.app_name.lower())
    logger.info("Starting %s %s", settings.app_name, settings.app_version)


@app.on_event("shutdown")
async def on_shutdown() -> None:
    reset_store()


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint; reports whether the store has been reached."""
    return {"status": "ok", "store": "connected" if get_store().connected else "idle"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": "Threadline API",
        "version": settings.app_version,
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("threadline.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
