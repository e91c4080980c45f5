"""
Tests for engine configuration and logging utilities.
"""

import io
import json
import logging
from pathlib import Path

import pytest

from log_facets.config import EngineConfig
from log_facets.exceptions import ConfigurationError
from log_facets.logging_utils import (
    SessionLoggerAdapter,
    StructuredJsonFormatter,
    configure_structured_logging,
    context_fields,
)


class TestEngineConfig:
    """Tests for EngineConfig sources."""

    def test_defaults(self):
        config = EngineConfig()

        assert config.lock_timeout_seconds == 5.0
        assert config.default_limit == 100
        assert config.log_level == "INFO"
        assert config.json_logs is False

    def test_from_environment(self, monkeypatch):
        monkeypatch.setenv("LOG_FACETS_LOCK_TIMEOUT", "0.5")
        monkeypatch.setenv("LOG_FACETS_DEFAULT_LIMIT", "25")
        monkeypatch.setenv("LOG_FACETS_LOG_LEVEL", "debug")
        monkeypatch.setenv("LOG_FACETS_JSON_LOGS", "TRUE")

        config = EngineConfig.from_environment()

        assert config.lock_timeout_seconds == 0.5
        assert config.default_limit == 25
        assert config.log_level == "DEBUG"
        assert config.json_logs is True

    def test_from_environment_invalid_number(self, monkeypatch):
        monkeypatch.setenv("LOG_FACETS_DEFAULT_LIMIT", "many")

        with pytest.raises(ConfigurationError) as exc_info:
            EngineConfig.from_environment()

        assert exc_info.value.field == "LOG_FACETS_DEFAULT_LIMIT"
        assert exc_info.value.value == "many"

    def test_from_file(self, tmp_path: Path):
        path = tmp_path / "settings.yaml"
        path.write_text(
            "log_facets:\n"
            "  lock_timeout_seconds: 2.5\n"
            "  default_limit: 200\n"
            "  json_logs: true\n"
            "other_tool:\n"
            "  ignored: 1\n"
        )

        config = EngineConfig.from_file(path)

        assert config.lock_timeout_seconds == 2.5
        assert config.default_limit == 200
        assert config.json_logs is True
        assert config.log_level == "INFO"

    def test_from_missing_file(self, tmp_path: Path):
        assert EngineConfig.from_file(tmp_path / "absent.yaml") == EngineConfig()

    def test_from_file_without_section(self, tmp_path: Path):
        path = tmp_path / "settings.yaml"
        path.write_text("identity:\n  user_id: me\n")

        assert EngineConfig.from_file(path) == EngineConfig()

    def test_from_file_invalid_yaml(self, tmp_path: Path):
        path = tmp_path / "settings.yaml"
        path.write_text("log_facets: [unclosed\n")

        with pytest.raises(ConfigurationError):
            EngineConfig.from_file(path)

    def test_validate_rejects_bad_values(self):
        with pytest.raises(ConfigurationError):
            EngineConfig(default_limit=-1).validate()
        with pytest.raises(ConfigurationError):
            EngineConfig(log_level="LOUD").validate()

    def test_apply_logging_plain(self):
        logger = EngineConfig(log_level="WARNING").apply_logging()

        assert logger.name == "log_facets"
        assert logger.level == logging.WARNING


class TestLoggingUtils:
    """Tests for structured logging helpers."""

    def _record(self, **extra) -> logging.LogRecord:
        record = logging.LogRecord(
            name="log_facets.registry",
            level=logging.INFO,
            pathname=__file__,
            lineno=1,
            msg="Created %s",
            args=("session",),
            exc_info=None,
        )
        for key, value in extra.items():
            setattr(record, key, value)
        return record

    def test_context_fields_only_returns_extra(self):
        record = self._record(session_id="abc", record_count=3)

        assert context_fields(record) == {"session_id": "abc", "record_count": 3}

    def test_json_formatter_includes_extra(self):
        record = self._record(session_id="abc", unserializable=object())

        payload = json.loads(StructuredJsonFormatter().format(record))

        assert payload["level"] == "INFO"
        assert payload["logger"] == "log_facets.registry"
        assert payload["message"] == "Created session"
        assert payload["session_id"] == "abc"
        assert isinstance(payload["unserializable"], str)
        assert "exception" not in payload

    def test_configure_structured_logging(self):
        stream = io.StringIO()
        logger = configure_structured_logging(logging.DEBUG, "log_facets.test_configure", stream)

        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, StructuredJsonFormatter)
        assert logger.level == logging.DEBUG

        logger.debug("ready", extra={"session_id": "s-9"})
        payload = json.loads(stream.getvalue())
        assert payload["message"] == "ready"
        assert payload["session_id"] == "s-9"

    def test_configure_twice_keeps_host_handlers(self):
        logger = logging.getLogger("log_facets.test_reconfigure")
        host_handler = logging.NullHandler()
        logger.addHandler(host_handler)
        try:
            configure_structured_logging(logging.INFO, logger.name, io.StringIO())
            configure_structured_logging(logging.INFO, logger.name, io.StringIO())

            assert host_handler in logger.handlers
            assert len(logger.handlers) == 2
        finally:
            logger.handlers.clear()

    def test_session_adapter_adds_session_id(self, caplog):
        adapter = SessionLoggerAdapter(
            logging.getLogger("log_facets.test_adapter"), {"session_id": "s-1"}
        )

        with caplog.at_level(logging.INFO, logger="log_facets.test_adapter"):
            adapter.info("hello")

        assert caplog.records[0].session_id == "s-1"

    def test_session_adapter_leaves_caller_extra_alone(self, caplog):
        adapter = SessionLoggerAdapter(
            logging.getLogger("log_facets.test_adapter"), {"session_id": "s-1"}
        )
        extra = {"record_count": 2, "session_id": "other"}

        with caplog.at_level(logging.INFO, logger="log_facets.test_adapter"):
            adapter.info("appended", extra=extra)

        assert extra == {"record_count": 2, "session_id": "other"}
        assert caplog.records[0].session_id == "s-1"
        assert caplog.records[0].record_count == 2
