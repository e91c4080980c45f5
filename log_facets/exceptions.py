"""
Custom exceptions for the log facets engine.

Internal components raise these exceptions; the command surface decides
which of them become default return values and which reach the caller.
"""


class LogFacetsError(Exception):
    """Base exception for all log facets errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class SessionNotFoundError(LogFacetsError):
    """Raised when a session id is not present in the registry."""

    def __init__(self, session_id: str):
        super().__init__(f"Session not found: {session_id}", {"session_id": session_id})
        self.session_id = session_id


class MalformedRecordError(LogFacetsError):
    """Raised when raw record text is not valid JSON.

    Only the strict parser raises this; the lenient parser recovers by
    storing the text as a plain string record.
    """

    def __init__(self, text: object, cause: Exception | None = None):
        details: dict = {"length": len(str(text)), "type": type(text).__name__}
        if cause:
            details["cause"] = str(cause)
        super().__init__("Record text is not valid JSON", details)
        self.text = text
        self.cause = cause


class LockUnavailableError(LogFacetsError):
    """Raised when the session registry lock cannot be acquired.

    Either the acquisition timed out, or a previous holder failed in the
    middle of a mutation and left the registry poisoned.
    """

    def __init__(self, reason: str, timeout: float | None = None):
        details: dict = {"reason": reason}
        if timeout is not None:
            details["timeout"] = timeout
        super().__init__(f"Session registry lock unavailable: {reason}", details)
        self.reason = reason
        self.timeout = timeout


class ConfigurationError(LogFacetsError):
    """Raised when engine configuration is invalid."""

    def __init__(self, field: str, reason: str, value: str | None = None):
        details = {"field": field, "reason": reason}
        if value is not None:
            details["value"] = value
        super().__init__(f"Invalid configuration for {field}: {reason}", details)
        self.field = field
        self.reason = reason
        self.value = value
