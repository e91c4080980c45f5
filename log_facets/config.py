"""
Engine configuration.

Configuration can be provided directly, read from environment variables,
or loaded from the `log_facets` section of a YAML settings file:

```yaml
log_facets:
  lock_timeout_seconds: 2.5
  default_limit: 200
  log_level: DEBUG
  json_logs: true
```
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .exceptions import ConfigurationError
from .logging_utils import PACKAGE_LOGGER, configure_structured_logging

logger = logging.getLogger(__name__)

ENV_LOCK_TIMEOUT = "LOG_FACETS_LOCK_TIMEOUT"
ENV_DEFAULT_LIMIT = "LOG_FACETS_DEFAULT_LIMIT"
ENV_LOG_LEVEL = "LOG_FACETS_LOG_LEVEL"
ENV_JSON_LOGS = "LOG_FACETS_JSON_LOGS"

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


@dataclass
class EngineConfig:
    """Configuration for the session registry and command surface.

    Environment Variables:
        LOG_FACETS_LOCK_TIMEOUT: Seconds to wait for the registry lock (default: 5.0)
        LOG_FACETS_DEFAULT_LIMIT: Page size when a caller omits limit (default: 100)
        LOG_FACETS_LOG_LEVEL: Level for the package logger (default: INFO)
        LOG_FACETS_JSON_LOGS: "true" to emit single-line JSON logs

    Attributes:
        lock_timeout_seconds: Registry lock timeout; negative waits forever
        default_limit: Page size used by the tool module when none is given
        log_level: Logging level name for the package logger
        json_logs: Whether to install the structured JSON formatter
    """

    lock_timeout_seconds: float = 5.0
    default_limit: int = 100
    log_level: str = "INFO"
    json_logs: bool = False

    def validate(self) -> EngineConfig:
        """Check value ranges, raising ConfigurationError on the first problem."""
        if self.default_limit < 0:
            raise ConfigurationError(
                "default_limit", "must be >= 0", str(self.default_limit)
            )
        if self.log_level.upper() not in _LOG_LEVELS:
            raise ConfigurationError("log_level", "unknown level name", self.log_level)
        self.log_level = self.log_level.upper()
        return self

    @classmethod
    def from_environment(cls) -> EngineConfig:
        """Create configuration from environment variables."""
        defaults = cls()
        return cls(
            lock_timeout_seconds=_parse_float(
                ENV_LOCK_TIMEOUT,
                os.environ.get(ENV_LOCK_TIMEOUT),
                defaults.lock_timeout_seconds,
            ),
            default_limit=_parse_int(
                ENV_DEFAULT_LIMIT,
                os.environ.get(ENV_DEFAULT_LIMIT),
                defaults.default_limit,
            ),
            log_level=os.environ.get(ENV_LOG_LEVEL, defaults.log_level),
            json_logs=os.environ.get(ENV_JSON_LOGS, "").lower() == "true",
        ).validate()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EngineConfig:
        """Create configuration from a mapping, ignoring unknown keys."""
        defaults = cls()
        return cls(
            lock_timeout_seconds=_parse_float(
                "lock_timeout_seconds",
                data.get("lock_timeout_seconds"),
                defaults.lock_timeout_seconds,
            ),
            default_limit=_parse_int(
                "default_limit", data.get("default_limit"), defaults.default_limit
            ),
            log_level=str(data.get("log_level", defaults.log_level)),
            json_logs=bool(data.get("json_logs", defaults.json_logs)),
        ).validate()

    @classmethod
    def from_file(cls, path: Path | str) -> EngineConfig:
        """Load configuration from the `log_facets` section of a YAML file.

        A missing file or missing section yields the defaults.
        """
        config_path = Path(path).expanduser()
        if not config_path.exists():
            logger.debug("Config file %s not found, using defaults", config_path)
            return cls()

        try:
            content = yaml.safe_load(config_path.read_text()) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError("path", f"invalid YAML: {e}", str(config_path)) from e

        if not isinstance(content, dict):
            raise ConfigurationError("path", "top level must be a mapping", str(config_path))

        section = content.get("log_facets") or {}
        if not isinstance(section, dict):
            raise ConfigurationError("log_facets", "section must be a mapping")
        return cls.from_dict(section)

    def apply_logging(self) -> logging.Logger:
        """Configure the package logger according to this configuration."""
        if self.json_logs:
            return configure_structured_logging(self.log_level, PACKAGE_LOGGER)

        package_logger = logging.getLogger(PACKAGE_LOGGER)
        package_logger.setLevel(self.log_level)
        return package_logger


def _parse_float(field: str, raw: Any, default: float) -> float:
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except (TypeError, ValueError):
        raise ConfigurationError(field, "must be a number", str(raw)) from None


def _parse_int(field: str, raw: Any, default: int) -> int:
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise ConfigurationError(field, "must be an integer", str(raw)) from None
