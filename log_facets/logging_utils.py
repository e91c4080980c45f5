"""
Structured logging for the log facets engine.

Engine modules log through plain `logging.getLogger(__name__)` loggers under
the `log_facets` namespace and pass context (session id, record counts) via
`extra`. Hosts that ship logs to a collector call `configure_structured_logging`
(or set `json_logs` in EngineConfig) to render those records as JSON lines.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import IO, Any

PACKAGE_LOGGER = "log_facets"

# Attributes every LogRecord carries; anything else arrived through `extra`
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {
    "message",
    "asctime",
    "taskName",
}


def context_fields(record: logging.LogRecord) -> dict[str, Any]:
    """Fields attached to a record through `extra`, made JSON-safe."""
    fields: dict[str, Any] = {}
    for key, value in vars(record).items():
        if key in _RECORD_ATTRS or key.startswith("_"):
            continue
        if isinstance(value, (str, int, float, bool)) or value is None:
            fields[key] = value
        else:
            fields[key] = repr(value)
    return fields


class StructuredJsonFormatter(logging.Formatter):
    """
    Render log records as single-line JSON.

    Every line has `timestamp` (UTC, taken from the record), `level`,
    `logger` and `message`. Context from `extra`, such as `session_id`
    and `record_count`, is merged in at the top level.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(context_fields(record))
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def configure_structured_logging(
    level: int | str = logging.INFO,
    logger_name: str = PACKAGE_LOGGER,
    stream: IO[str] | None = None,
) -> logging.Logger:
    """
    Install a JSON handler on an engine logger.

    Calling this again replaces the handler it installed before; handlers
    the host added itself are left alone.

    Args:
        level: Logging level (default: INFO)
        logger_name: Logger to configure (default: the package logger)
        stream: Where to write (default: stdout)

    Returns:
        The configured logger
    """
    logger = logging.getLogger(logger_name)
    for handler in [h for h in logger.handlers if getattr(h, "_log_facets_json", False)]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(StructuredJsonFormatter())
    handler._log_facets_json = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.setLevel(level)
    return logger


class SessionLoggerAdapter(logging.LoggerAdapter):
    """
    Logger adapter bound to one log session.

    The adapter's context wins over per-call `extra` so every record from a
    session carries its own `session_id`. The caller's dict is not modified.
    """

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        kwargs["extra"] = {**(kwargs.get("extra") or {}), **self.extra}
        return msg, kwargs
