"""Tests for environment-driven settings."""

from __future__ import annotations

from garba.config import Settings


class TestSettings:
    def test_defaults(self, monkeypatch):
        for var in (
            "DATABASE_URL",
            "GARBA_CACHE_TTL_MS",
            "GARBA_CACHE_SWEEP_SECONDS",
            "GARBA_API_KEY",
            "SLOW_REQUEST_THRESHOLD_MS",
            "CORS_ORIGINS",
            "ENVIRONMENT",
        ):
            monkeypatch.delenv(var, raising=False)
        settings = Settings.from_env()
        assert settings.cache_ttl_ms == 300_000
        assert settings.cache_sweep_seconds is None
        assert settings.api_key is None
        assert settings.cors_origins == ["*"]
        assert not settings.is_development

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("GARBA_CACHE_TTL_MS", "5000")
        monkeypatch.setenv("GARBA_CACHE_SWEEP_SECONDS", "30")
        monkeypatch.setenv("GARBA_API_KEY", "s3cret")
        monkeypatch.setenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:5173")
        monkeypatch.setenv("ENVIRONMENT", "development")
        settings = Settings.from_env()
        assert settings.cache_ttl_ms == 5000
        assert settings.cache_sweep_seconds == 30.0
        assert settings.api_key == "s3cret"
        assert settings.cors_origins == ["http://localhost:3000", "http://localhost:5173"]
        assert settings.is_development

    def test_empty_api_key_means_open_mode(self, monkeypatch):
        monkeypatch.setenv("GARBA_API_KEY", "")
        assert Settings.from_env().api_key is None
