"""Unit tests for logging and metrics utilities."""

import logging
from datetime import datetime, timezone
from pathlib import Path
from uuid import UUID

from prometheus_client import CollectorRegistry

from taskvantage.config import Settings
from taskvantage.utils.logging import (
    get_logger,
    mask_email,
    render_identifiers,
    sanitize_for_logging,
    setup_logging,
)
from taskvantage.utils.metrics import Metrics


class TestGetLogger:
    """Tests for get_logger function."""

    def test_returns_logger(self) -> None:
        """Test get_logger returns a logger."""
        logger = get_logger("test_module")

        assert hasattr(logger, "info")
        assert hasattr(logger, "warning")
        assert hasattr(logger, "debug")

    def test_multiple_calls_same_logger(self) -> None:
        """Test multiple calls return cached logger."""
        assert get_logger("cached_test_module") is get_logger("cached_test_module")


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_json_format_to_stderr(self, test_settings: Settings) -> None:
        """Test JSON logging installs a single stderr handler at the configured level."""
        settings = test_settings.model_copy(update={"log_format": "json", "log_level": "WARNING"})

        setup_logging(settings, use_stderr=True)

        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert root.level == logging.WARNING
        get_logger("test_json").warning("test message")

    def test_console_format(self, test_settings: Settings) -> None:
        """Test console logging can be configured."""
        setup_logging(test_settings)

        assert logging.getLogger().level == logging.DEBUG
        get_logger("test_console").debug("test message")

    def test_log_file_handler(self, test_settings: Settings, tmp_path: Path) -> None:
        """Test a log file adds a second handler."""
        log_file = tmp_path / "app.log"
        settings = test_settings.model_copy(update={"log_file": str(log_file)})

        setup_logging(settings)

        root = logging.getLogger()
        assert any(isinstance(h, logging.FileHandler) for h in root.handlers)
        for handler in root.handlers:
            handler.close()


class TestSanitizeForLogging:
    """Tests for sanitize_for_logging processor.

    Note: sanitize_for_logging is a structlog processor that takes
    (logger, method_name, event_dict) and returns modified event_dict.
    """

    def test_masks_email(self) -> None:
        """Test email local parts are masked."""
        result = sanitize_for_logging(None, "info", {"event": "member_added", "email": "sarah@company.com"})

        assert result["email"] == "s***@company.com"
        assert result["event"] == "member_added"

    def test_redacts_sensitive_keys(self) -> None:
        """Test password and token values are redacted."""
        result = sanitize_for_logging(None, "info", {"password": "hunter2", "api_token": "abc", "event": "test"})

        assert result["password"] == "***REDACTED***"
        assert result["api_token"] == "***REDACTED***"

    def test_nested_dicts(self) -> None:
        """Test nested values are sanitized."""
        result = sanitize_for_logging(None, "info", {"profile": {"email": "ada@example.com", "secret": "x"}})

        assert result["profile"] == {"email": "a***@example.com", "secret": "***REDACTED***"}

    def test_mask_email_in_text(self) -> None:
        """Test every address in free text is masked."""
        assert mask_email("contact john@a.io or lisa@b.io") == "contact j***@a.io or l***@b.io"

    def test_phone_key_redacted(self) -> None:
        """Test values keyed as phone numbers are redacted."""
        result = sanitize_for_logging(None, "info", {"phone_number": "+1 555 0100"})

        assert result["phone_number"] == "***REDACTED***"

    def test_render_identifiers(self) -> None:
        """Test ids and timestamps are rendered as strings."""
        task_id = UUID("12345678-1234-5678-1234-567812345678")
        when = datetime(2026, 3, 16, 12, 0, tzinfo=timezone.utc)

        result = render_identifiers(None, "info", {"task_id": task_id, "due": when, "count": 3})

        assert result == {"task_id": str(task_id), "due": "2026-03-16T12:00:00+00:00", "count": 3}


class TestMetrics:
    """Tests for Metrics collector."""

    def test_record_operation(self, metrics: Metrics, registry: CollectorRegistry) -> None:
        """Test engine mutations are counted by operation and entity."""
        metrics.record_operation("add", "task")
        metrics.record_operation("add", "task")

        assert registry.get_sample_value("engine_operations_total", {"operation": "add", "entity": "task"}) == 2.0

    def test_record_recompute(self, metrics: Metrics, registry: CollectorRegistry) -> None:
        """Test recompute durations are observed."""
        metrics.record_recompute("project", 0.002)

        assert registry.get_sample_value("recompute_duration_seconds_count", {"target": "project"}) == 1.0

    def test_entity_counts(self, metrics: Metrics, registry: CollectorRegistry) -> None:
        """Test collection size gauges."""
        metrics.set_entity_counts(tasks=4, projects=2, team_members=3)

        assert registry.get_sample_value("entity_count", {"entity": "task"}) == 4.0
        assert registry.get_sample_value("entity_count", {"entity": "team_member"}) == 3.0

    def test_version_info(self, metrics: Metrics, registry: CollectorRegistry) -> None:
        """Test the version info metric is published."""
        from taskvantage import __version__

        assert registry.get_sample_value("taskvantage_info", {"version": __version__}) == 1.0
