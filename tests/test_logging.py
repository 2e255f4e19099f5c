"""
Tests for the logging module.

Tests verify:
- JSON lines on stderr carry service and timestamp
- DEBUG logs are suppressed at INFO level
- LogContext binds and unbinds keys
"""

import json

from calendar_spine.core.logging import (
    LogContext,
    bind_context,
    configure_logging,
    get_logger,
    unbind_context,
)


def _lines(captured: str) -> list[dict]:
    return [json.loads(line) for line in captured.splitlines() if line.strip()]


class TestConfigureLogging:
    """Test configure_logging() output."""

    def test_json_on_stderr(self, capsys):
        configure_logging(level="INFO", json_format=True)
        get_logger("calendar_spine.test").info("calendar_filtered", matched=3)

        captured = capsys.readouterr()
        assert captured.out == ""
        (entry,) = _lines(captured.err)
        assert entry["event"] == "calendar_filtered"
        assert entry["matched"] == 3
        assert entry["level"] == "info"
        assert entry["service"] == "calendar-spine"
        assert "timestamp" in entry

    def test_auto_format_is_json_when_stderr_is_not_a_tty(self, capsys):
        configure_logging(level="INFO")
        get_logger().info("calendar_configured", locale="de")

        (entry,) = _lines(capsys.readouterr().err)
        assert entry["locale"] == "de"
        assert "logger" not in entry

    def test_debug_suppressed_at_info(self, capsys):
        configure_logging(level="INFO", json_format=True)
        get_logger().debug("calendar_decomposed")

        assert capsys.readouterr().err == ""

    def test_debug_emitted_at_debug(self, capsys):
        configure_logging(level="DEBUG", json_format=True)
        get_logger().debug("calendar_decomposed", periods=12)

        (entry,) = _lines(capsys.readouterr().err)
        assert entry["periods"] == 12

    def test_custom_service_without_timestamp(self, capsys):
        configure_logging(level="INFO", json_format=True, service="planner", add_timestamp=False)
        get_logger().warning("calendar_unbounded")

        (entry,) = _lines(capsys.readouterr().err)
        assert entry["service"] == "planner"
        assert "timestamp" not in entry


class TestContext:
    """Test context binding."""

    def test_bound_context_is_merged(self, capsys):
        configure_logging(level="INFO", json_format=True)
        bind_context(command="split")
        get_logger().info("calendar_decomposed")
        unbind_context("command")
        get_logger().info("calendar_decomposed")

        first, second = _lines(capsys.readouterr().err)
        assert first["command"] == "split"
        assert "command" not in second

    def test_log_context_scope(self, capsys):
        configure_logging(level="INFO", json_format=True)
        with LogContext(command="find", path="events.json"):
            get_logger().info("calendar_filtered")
        get_logger().info("calendar_filtered")

        inside, outside = _lines(capsys.readouterr().err)
        assert inside["command"] == "find"
        assert inside["path"] == "events.json"
        assert "command" not in outside
