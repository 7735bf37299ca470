"""Centralized configuration: all env vars in one place."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from garba.cache.store import DEFAULT_TTL_MS


def _optional_float(name: str) -> float | None:
    raw = os.getenv(name)
    if not raw:
        return None
    return float(raw)


@dataclass
class Settings:
    """Application settings. Use :meth:`from_env` outside of tests."""

    database_url: str = "sqlite:///./garba.db"
    cache_ttl_ms: int = DEFAULT_TTL_MS
    cache_sweep_seconds: float | None = None
    api_key: str | None = None
    slow_request_threshold_ms: int = 1000
    cors_origins: list[str] = field(default_factory=lambda: ["*"])
    environment: str = "production"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @classmethod
    def from_env(cls) -> Settings:
        return cls(
            database_url=os.getenv("DATABASE_URL", "sqlite:///./garba.db"),
            cache_ttl_ms=int(os.getenv("GARBA_CACHE_TTL_MS", str(DEFAULT_TTL_MS))),
            cache_sweep_seconds=_optional_float("GARBA_CACHE_SWEEP_SECONDS"),
            api_key=os.getenv("GARBA_API_KEY") or None,
            slow_request_threshold_ms=int(os.getenv("SLOW_REQUEST_THRESHOLD_MS", "1000")),
            cors_origins=os.getenv("CORS_ORIGINS", "*").split(","),
            environment=os.getenv("ENVIRONMENT", "production"),
        )
