"""Garba Rass events API: FastAPI application entry point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from garba.api.performance import register_timing_middleware
from garba.api.routes import admin_router, events_router, health_router
from garba.cache.store import TTLCache
from garba.config import Settings
from garba.errors import register_error_handlers
from garba.scheduler import start_cache_sweeper
from garba.storage.database import configure, init_db

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application around one explicitly owned response cache."""
    settings = settings or Settings.from_env()
    configure(settings.database_url)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Initializing database tables ...")
        init_db()
        scheduler = start_cache_sweeper(app.state.cache, settings.cache_sweep_seconds)
        logger.info("Garba Rass API is ready.")
        yield
        if scheduler is not None:
            scheduler.shutdown(wait=False)
        app.state.cache.clear()
        logger.info("Shutting down Garba Rass API.")

    app = FastAPI(
        title="Garba Rass API",
        description="Event catalog for the Garba Rass ticketing app, with memoized reads.",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.cache = TTLCache(default_ttl_ms=settings.cache_ttl_ms)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_timing_middleware(app, settings)
    register_error_handlers(app, settings)

    app.include_router(health_router)
    app.include_router(events_router)
    app.include_router(admin_router)

    @app.get("/", tags=["Root"])
    def root():
        return {
            "name": "Garba Rass API",
            "version": "1.0.0",
            "docs": "/docs",
        }

    return app


app = create_app()
