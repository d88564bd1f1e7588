"""Tests for log level selection and per-request log context."""

import structlog

from commerce.utils.logging import get_log_level, request_context


class TestLogLevel:
    def test_explicit_level_wins(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "error")
        monkeypatch.setenv("ENV", "production")
        assert get_log_level() == "ERROR"

    def test_level_follows_environment(self, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        monkeypatch.setenv("ENV", "production")
        assert get_log_level() == "INFO"

    def test_unknown_environment_defaults_to_info(self, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        monkeypatch.setenv("ENV", "qa")
        assert get_log_level() == "INFO"


class TestRequestContext:
    def test_binds_fields_for_the_block(self):
        with request_context(request_id="req-1", account_id="acct-1") as request_id:
            bound = structlog.contextvars.get_contextvars()
            assert request_id == "req-1"
            assert bound["request_id"] == "req-1"
            assert bound["account_id"] == "acct-1"
            assert "session_id" not in bound

        assert "request_id" not in structlog.contextvars.get_contextvars()

    def test_generates_request_id(self):
        with request_context() as request_id:
            assert request_id
            assert structlog.contextvars.get_contextvars()["request_id"] == request_id
