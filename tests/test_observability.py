# tests/test_observability.py
"""Tests for logging setup, operation timing and metrics."""
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

import pytest

from wwtt.observability import (
    MetricsCollector,
    _sanitize_error_message,
    configure_logging,
    is_logging_configured,
    timed_operation,
)


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_creates_log_file(self, tmp_path, clean_logging):
        log_dir = configure_logging(tmp_path / "logs", level=logging.DEBUG, console=False)
        logging.getLogger("wwtt.test").info("hello from the test")

        for handler in clean_logging.handlers:
            handler.flush()
        log_file = log_dir / "wwtt.log"
        assert log_file.exists()
        assert "hello from the test" in log_file.read_text(encoding="utf-8")
        assert is_logging_configured()

    def test_handlers_are_not_duplicated(self, tmp_path, clean_logging):
        configure_logging(tmp_path, console=False)
        configure_logging(tmp_path, console=False)
        file_handlers = [
            h for h in clean_logging.handlers
            if isinstance(h, RotatingFileHandler)
            and Path(h.baseFilename) == (tmp_path / "wwtt.log").resolve()
        ]
        assert len(file_handlers) == 1

    def test_sets_level(self, tmp_path, clean_logging):
        configure_logging(tmp_path, level=logging.WARNING, console=False)
        assert clean_logging.level == logging.WARNING


class TestMetricsCollector:
    """Tests for MetricsCollector."""

    def test_records_success_and_failure(self):
        collector = MetricsCollector()
        collector.record_operation("save", 10.0, True)
        collector.record_operation("save", 30.0, False, "disk full")

        m = collector.get_metrics()["save"]
        assert m["count"] == 2
        assert m["success_count"] == 1
        assert m["error_count"] == 1
        assert m["avg_duration_ms"] == 20.0
        assert m["min_duration_ms"] == 10.0
        assert m["max_duration_ms"] == 30.0
        assert m["last_error"] == "disk full"
        assert m["last_error_time"] is not None

    def test_summary(self):
        collector = MetricsCollector()
        collector.record_operation("a", 1.0, True)
        collector.record_operation("b", 1.0, False, "x")
        summary = collector.get_summary()
        assert summary["total_operations"] == 2
        assert summary["total_success"] == 1
        assert summary["total_errors"] == 1
        assert sorted(summary["operations_tracked"]) == ["a", "b"]

    def test_reset(self):
        collector = MetricsCollector()
        collector.record_operation("a", 1.0, True)
        collector.reset()
        assert collector.get_metrics() == {}
        assert collector.get_summary()["total_operations"] == 0


class TestTimedOperation:
    """Tests for the timed_operation context manager."""

    def test_success_is_recorded(self, clean_metrics):
        with timed_operation("list_notes", tag="work") as op:
            op["result_count"] = 3
        m = clean_metrics.get_metrics()["list_notes"]
        assert m["count"] == 1
        assert m["success_count"] == 1
        assert "correlation_id" in op

    def test_error_is_recorded_and_reraised(self, clean_metrics):
        with pytest.raises(RuntimeError):
            with timed_operation("save"):
                raise RuntimeError("cannot write")
        m = clean_metrics.get_metrics()["save"]
        assert m["error_count"] == 1
        assert m["last_error"] == "cannot write"


class TestSanitizeErrorMessage:
    """Tests for _sanitize_error_message."""

    def test_none(self):
        assert _sanitize_error_message(None) is None

    def test_home_directory_is_hidden(self):
        message = f"cannot open {Path.home()}/notes/wwtt.json"
        assert _sanitize_error_message(message) == "cannot open ~/notes/wwtt.json"

    def test_newlines_and_spaces_are_collapsed(self):
        assert _sanitize_error_message("line one\n  line two\r\n") == "line one line two"

    def test_truncation(self):
        result = _sanitize_error_message("x" * 300)
        assert len(result) == 200
        assert result.endswith("...")
