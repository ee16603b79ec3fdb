"""Unit tests for configuration, logging setup and the rate limit handler."""

import json
from unittest.mock import MagicMock

import pytest
import structlog

from core import logging as logging_module
from core.config import Settings, settings
from core.rate_limit import rate_limit_exceeded_handler


# --- Settings ---


class TestSettings:
    def test_async_database_url_rewrites_plain_postgres_scheme(self):
        s = Settings(database_url="postgresql://user:pw@db:5432/devprofiles")

        assert s.async_database_url == "postgresql+asyncpg://user:pw@db:5432/devprofiles"

    def test_async_database_url_leaves_driver_urls_alone(self):
        s = Settings(database_url="sqlite+aiosqlite:///:memory:")

        assert s.async_database_url == "sqlite+aiosqlite:///:memory:"

    def test_jwks_url_derived_from_supabase_url(self):
        s = Settings(supabase_url="https://xyzabc.supabase.co/")

        assert s.supabase_jwks_url == "https://xyzabc.supabase.co/auth/v1/.well-known/jwks.json"

    def test_jwks_url_empty_without_supabase(self):
        assert Settings(supabase_url="").supabase_jwks_url == ""

    def test_cors_origins_list(self):
        s = Settings(cors_origins="http://a.test, http://b.test,")

        assert s.cors_origins_list == ["http://a.test", "http://b.test"]

    def test_github_defaults(self):
        s = Settings()

        assert s.github_api_url == "https://api.github.com"
        assert s.github_timeout_seconds == 10.0


# --- logging ---


class TestLogging:
    def test_console_renderer_outside_production(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setattr(settings, "app_env", "development")

        processors = logging_module.get_processors()

        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)

    def test_json_renderer_in_production(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setattr(settings, "app_env", "production")

        processors = logging_module.get_processors()

        assert isinstance(processors[-1], structlog.processors.JSONRenderer)

    def test_entries_carry_app_name(self):
        event = logging_module._add_app_context(None, "info", {"event": "x"})

        assert event["app"] == settings.app_name


# --- rate limiting ---


class TestRateLimitHandler:
    @pytest.mark.asyncio
    async def test_returns_429_envelope(self):
        response = await rate_limit_exceeded_handler(MagicMock(), Exception("10 per 1 minute"))

        assert response.status_code == 429
        body = json.loads(response.body)
        assert body["error_code"] == "RATE_LIMIT_EXCEEDED"
        assert body["details"] == {"limit": "10 per 1 minute"}
