"""Main entry point for the Debate Stage application."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from debate_stage.api.v1 import (
    content_router,
    follows_router,
    notifications_router,
    votes_router,
)
from debate_stage.core.errors import DebateStageError
from debate_stage.core.settings import settings
from debate_stage.schemas.common import ErrorResponse
from debate_stage.services.notifications import get_notification_dispatcher

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Debate Stage API",
    description="Vote and score consistency engine for structured debates",
    version=settings.app_version,
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
app.include_router(votes_router, prefix="/api/v1")
app.include_router(follows_router, prefix="/api/v1")
app.include_router(content_router, prefix="/api/v1")
app.include_router(notifications_router, prefix="/api/v1")


def _error_body(error: str, **extra: Any) -> dict[str, Any]:
    return ErrorResponse(error=error, **extra).model_dump(exclude_none=True)


@app.exception_handler(DebateStageError)
async def handle_domain_error(request: Request, exc: DebateStageError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            "Unhandled %s on %s %s: %s",
            type(exc).__name__,
            request.method,
            request.url.path,
            exc,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body("Internal server error"),
        )
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.message),
    )


@app.exception_handler(RequestValidationError)
async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body("Validation failed", details=jsonable_encoder(exc.errors())),
    )


@app.exception_handler(SQLAlchemyError)
async def handle_database_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("Database error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body("Internal server error"),
    )


@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body("Internal server error"),
    )


@app.on_event("startup")
async def on_startup() -> None:
    await get_notification_dispatcher().start()
    logger.info("%s %s started", settings.app_name, settings.app_version)


@app.on_event("shutdown")
async def on_shutdown() -> None:
    await get_notification_dispatcher().stop()


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": "Debate Stage API",
        "version": settings.app_version,
        "description": "Vote and score consistency engine for structured debates",
        "docs": "/docs",
        "redoc": "/redoc"
    }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("debate_stage.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
