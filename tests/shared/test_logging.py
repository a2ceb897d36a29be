"""Tests for environment-driven log levels and request-scoped log context."""

import structlog
from shared.logging import bind_request_context, clear_request_context, get_environment, get_log_level


class TestLogLevel:
    def test_level_follows_environment(self, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        monkeypatch.delenv("ENV", raising=False)
        monkeypatch.delenv("ENVIRONMENT", raising=False)
        monkeypatch.setenv("PROTEAN_ENV", "production")

        assert get_environment() == "production"
        assert get_log_level() == "INFO"

    def test_explicit_level_wins(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "development")
        monkeypatch.setenv("LOG_LEVEL", "error")

        assert get_log_level() == "ERROR"

    def test_unknown_environment_defaults_to_info(self, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        monkeypatch.setenv("ENV", "qa")

        assert get_log_level() == "INFO"


class TestRequestContext:
    def test_bind_replaces_previous_request(self):
        bind_request_context(domain="storefront", path="/orders")
        bind_request_context(domain="community", path="/events")

        assert structlog.contextvars.get_contextvars() == {"domain": "community", "path": "/events"}

        clear_request_context()
        assert structlog.contextvars.get_contextvars() == {}
