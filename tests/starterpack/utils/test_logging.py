"""Tests for the starter pack logging helpers."""

import structlog
from starterpack.utils.logging import get_log_level, order_context


class TestLogLevel:
    def test_level_follows_environment(self, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        monkeypatch.setenv("PROTEAN_ENV", "production")
        assert get_log_level() == "INFO"

        monkeypatch.setenv("PROTEAN_ENV", "test")
        assert get_log_level() == "WARNING"

    def test_log_level_override(self, monkeypatch):
        monkeypatch.setenv("PROTEAN_ENV", "production")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        assert get_log_level() == "DEBUG"


class TestOrderContext:
    def test_binds_order_id_inside_block(self):
        with order_context("order-123", stage="preparing"):
            bound = structlog.contextvars.get_contextvars()
            assert bound["order_id"] == "order-123"
            assert bound["stage"] == "preparing"

        assert "order_id" not in structlog.contextvars.get_contextvars()
