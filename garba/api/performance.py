"""Request timing middleware: response-time and request-id headers, slow request warnings."""

from __future__ import annotations

import logging
import secrets
import time

from fastapi import FastAPI, Request, Response

from garba.config import Settings

logger = logging.getLogger(__name__)


def new_request_id() -> str:
    return secrets.token_hex(5)[:9]


def register_timing_middleware(app: FastAPI, settings: Settings) -> None:
    @app.middleware("http")
    async def time_request(request: Request, call_next):
        request_id = new_request_id()
        request.state.request_id = request_id
        start = time.perf_counter()
        response: Response = await call_next(request)
        duration_ms = round((time.perf_counter() - start) * 1000)

        response.headers["X-Response-Time"] = f"{duration_ms}ms"
        response.headers["X-Request-ID"] = request_id

        if duration_ms > settings.slow_request_threshold_ms:
            logger.warning(
                "Slow request detected: %s %s - %dms", request.method, request.url.path, duration_ms
            )
        if settings.is_development:
            logger.info("%s %s - %dms", request.method, request.url.path, duration_ms)
        return response
