"""Custom exceptions and centralized FastAPI error handlers."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError

from garba.config import Settings

logger = logging.getLogger(__name__)


class GarbaError(Exception):
    """Base exception with HTTP status code."""

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.status_code = status_code


class EventNotFoundError(GarbaError):
    def __init__(self, event_id: int):
        super().__init__(f"Event {event_id} not found", status_code=404)
        self.event_id = event_id


def register_error_handlers(app: FastAPI, settings: Settings) -> None:
    """Register centralized exception handlers on the FastAPI app."""

    @app.exception_handler(GarbaError)
    async def handle_garba_error(_request: Request, exc: GarbaError):
        return JSONResponse({"error": str(exc)}, status_code=exc.status_code)

    @app.exception_handler(ValueError)
    async def handle_value_error(request: Request, exc: ValueError):
        logger.warning("Validation error on %s %s: %s", request.method, request.url.path, exc)
        message = str(exc) if settings.is_development else "Validation failed"
        return JSONResponse({"error": message}, status_code=400)

    @app.exception_handler(OperationalError)
    async def handle_database_down(request: Request, exc: OperationalError):
        logger.error("Database error on %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(
            {"error": "Service temporarily unavailable. Please try again later."},
            status_code=503,
        )

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        message = str(exc) if settings.is_development else "Internal server error"
        return JSONResponse({"error": message}, status_code=500)
