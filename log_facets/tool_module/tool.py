"""
Tool module implementation for log facet operations.

Exposes the command surface as a single dict-in/dict-out `execute` call so a
host bridge can marshal requests without knowing the engine's types.

Implements the tool protocol:
- name: str property
- description: str property
- schema: JSON Schema for the input
- async execute(input: dict[str, Any]) -> ToolResult
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from ..commands import LogFacetCommands
from ..config import EngineConfig
from ..exceptions import LockUnavailableError
from ..facets.types import SortKey
from ..registry import SessionRegistry

logger = logging.getLogger(__name__)

OPERATIONS = [
    "start_session",
    "add_data",
    "add_facet",
    "set_facet_match_type",
    "remove_facet",
    "set_filtered_for_facet_value",
    "get_facets",
    "get_filtered_data",
    "drop_session",
]


class MissingParameterError(ValueError):
    """A required input parameter was absent."""

    def __init__(self, name: str):
        super().__init__(f"{name} is required")
        self.name = name


@dataclass
class ToolResult:
    """Result from tool execution."""

    success: bool
    output: dict[str, Any] = field(default_factory=dict)
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        result: dict[str, Any] = {"success": self.success}
        if self.success:
            result["output"] = self.output
        if self.error:
            result["error"] = self.error
        return result


def _require(params: dict[str, Any], name: str) -> Any:
    value = params.get(name)
    if value is None:
        raise MissingParameterError(name)
    return value


class LogFacetsToolModule:
    """
    Tool module that wraps LogFacetCommands.

    Parameters use the same names the log viewer frontend sends
    (`session_id`, `search_query`, `sorting`, ...). Results are plain,
    JSON-ready dicts.
    """

    def __init__(
        self,
        commands: LogFacetCommands | None = None,
        config: EngineConfig | None = None,
    ):
        """Initialize the tool module.

        Args:
            commands: Command surface to dispatch to. Built over a fresh
                registry using `config` if not provided.
            config: Engine configuration. Uses defaults if not provided.
        """
        self.config = config or EngineConfig()
        if commands is None:
            commands = LogFacetCommands(SessionRegistry(self.config))
        self._commands = commands

    @property
    def name(self) -> str:
        """Tool name for registration."""
        return "log_facets"

    @property
    def description(self) -> str:
        """Tool description."""
        return (
            "Faceted filtering and search over structured log sessions. "
            "Create a session from log lines, add facets on record fields, "
            "select facet values and fetch sorted, paged results."
        )

    @property
    def schema(self) -> dict[str, Any]:
        """JSON Schema for the tool's input parameters."""
        return {
            "type": "object",
            "properties": {
                "operation": {
                    "type": "string",
                    "description": "Operation to perform",
                    "enum": OPERATIONS,
                },
                "session_id": {
                    "type": "string",
                    "description": "Session id returned by start_session",
                },
                "data": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Raw log lines; JSON lines become objects, others stay strings",
                },
                "property": {
                    "type": "string",
                    "description": "Record field a facet inspects",
                },
                "match_type": {
                    "type": "string",
                    "description": "How the facet combines with earlier facets",
                    "enum": ["AND", "OR"],
                    "default": "OR",
                },
                "value": {
                    "type": "string",
                    "description": "Facet value to select or deselect",
                },
                "filtered": {
                    "type": "boolean",
                    "description": "Whether the facet value is an active filter",
                },
                "search_query": {
                    "type": "string",
                    "description": "Case-insensitive substring search (empty for none)",
                    "default": "",
                },
                "offset": {
                    "type": "integer",
                    "description": "Skip first N results (for pagination)",
                    "default": 0,
                },
                "limit": {
                    "type": "integer",
                    "description": "Maximum number of results",
                },
                "sorting": {
                    "type": "array",
                    "description": "Prioritized sort keys",
                    "items": {
                        "type": "object",
                        "properties": {
                            "id": {"type": "string"},
                            "desc": {"type": "boolean"},
                        },
                        "required": ["id"],
                    },
                },
            },
            "required": ["operation"],
        }

    async def execute(self, input: dict[str, Any]) -> ToolResult:
        """Execute a log facets operation.

        Args:
            input: Operation parameters from the tool call.

        Returns:
            ToolResult with success status and output/error.
        """
        operation = input.get("operation")
        handler = getattr(self, f"_{operation}", None) if operation in OPERATIONS else None
        if handler is None:
            return ToolResult(
                success=False,
                error=f"Unknown operation: {operation}",
                output={"available_operations": list(OPERATIONS)},
            )

        try:
            output = handler(input)
        except MissingParameterError as e:
            return ToolResult(success=False, error=str(e), output={"operation": operation})
        except LockUnavailableError as e:
            logger.error("Operation %s failed: %s", operation, e.message)
            return ToolResult(success=False, error=e.message, output={"operation": operation})
        except (TypeError, ValueError, KeyError) as e:
            return ToolResult(success=False, error=f"Invalid input: {e}", output={"operation": operation})

        output["operation"] = operation
        return ToolResult(success=True, output=output)

    def _start_session(self, params: dict[str, Any]) -> dict[str, Any]:
        session_id = self._commands.start_session(params.get("data") or [])
        return {"session_id": session_id}

    def _add_data(self, params: dict[str, Any]) -> dict[str, Any]:
        session_id = _require(params, "session_id")
        data = params.get("data") or []
        self._commands.add_data(session_id, data)
        return {"session_id": session_id, "count": len(data)}

    def _add_facet(self, params: dict[str, Any]) -> dict[str, Any]:
        session_id = _require(params, "session_id")
        property = _require(params, "property")
        self._commands.add_facet(session_id, property, params.get("match_type", "OR"))
        return {"session_id": session_id, "property": property}

    def _set_facet_match_type(self, params: dict[str, Any]) -> dict[str, Any]:
        session_id = _require(params, "session_id")
        property = _require(params, "property")
        self._commands.set_facet_match_type(session_id, property, params.get("match_type", "OR"))
        return {"session_id": session_id, "property": property}

    def _remove_facet(self, params: dict[str, Any]) -> dict[str, Any]:
        session_id = _require(params, "session_id")
        property = _require(params, "property")
        self._commands.remove_facet(session_id, property)
        return {"session_id": session_id, "property": property}

    def _set_filtered_for_facet_value(self, params: dict[str, Any]) -> dict[str, Any]:
        session_id = _require(params, "session_id")
        property = _require(params, "property")
        value = _require(params, "value")
        filtered = bool(_require(params, "filtered"))
        self._commands.set_filtered_for_facet_value(session_id, property, value, filtered)
        return {"session_id": session_id, "property": property, "value": value}

    def _get_facets(self, params: dict[str, Any]) -> dict[str, Any]:
        session_id = _require(params, "session_id")
        facets = self._commands.get_facets(session_id)
        return {"session_id": session_id, "facets": [f.to_dict() for f in facets]}

    def _get_filtered_data(self, params: dict[str, Any]) -> dict[str, Any]:
        session_id = _require(params, "session_id")
        limit = params.get("limit")
        search_query = params.get("search_query") or ""
        if not isinstance(search_query, str):
            raise TypeError("search_query must be a string")
        result = self._commands.get_filtered_data(
            session_id,
            search_query=search_query,
            offset=int(params.get("offset", 0)),
            limit=int(limit) if limit is not None else self.config.default_limit,
            sorting=[SortKey.from_dict(s) for s in params.get("sorting") or []],
        )
        return {"session_id": session_id, **result.to_dict()}

    def _drop_session(self, params: dict[str, Any]) -> dict[str, Any]:
        session_id = _require(params, "session_id")
        return {"session_id": session_id, "dropped": self._commands.drop_session(session_id)}


def create_tool(**config: Any) -> LogFacetsToolModule:
    """Factory function for creating the log facets tool.

    Args:
        **config: EngineConfig fields (lock_timeout_seconds, default_limit, ...).

    Returns:
        Configured LogFacetsToolModule instance.
    """
    return LogFacetsToolModule(config=EngineConfig.from_dict(config))


def mount(coordinator: Any = None, config: dict[str, Any] | None = None) -> LogFacetsToolModule:
    """Standard module entry point.

    Args:
        coordinator: Host coordinator instance (unused, for protocol compliance).
        config: Tool configuration dictionary.

    Returns:
        Configured LogFacetsToolModule instance.
    """
    config = config or {}
    return create_tool(**config)
