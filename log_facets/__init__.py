"""
Log Facets

In-memory faceted filtering and search for structured log sessions.

Provides:
- Sessions of raw log lines (JSON lines parsed, other lines kept as strings)
- Facets over record fields with discovered values and occurrence counts
- Ordered AND/OR composition of selected facet values
- Case-insensitive substring search, stable multi-key sorting and paging

Usage:

    >>> from log_facets import LogFacetCommands
    >>> commands = LogFacetCommands()
    >>> session_id = commands.start_session(['{"lvl": "a"}', '{"lvl": "b"}'])
    >>> commands.add_facet(session_id, "lvl", "OR")
    >>> commands.set_filtered_for_facet_value(session_id, "lvl", "a", True)
    >>> commands.get_filtered_data(session_id, "", 0, 50, []).filtered_total
    1

Registry Lifecycle:

    # Explicit registry passed to the command surface
    from log_facets import EngineConfig, LogFacetCommands, SessionRegistry

    registry = SessionRegistry(EngineConfig.from_environment())
    commands = LogFacetCommands(registry)

    # Process default, created on first use
    from log_facets import get_default_registry, reset_default_registry
"""

from .commands import LogFacetCommands
from .config import EngineConfig

# Exceptions
from .exceptions import (
    ConfigurationError,
    LockUnavailableError,
    LogFacetsError,
    MalformedRecordError,
    SessionNotFoundError,
)
from .facets import Facet, FacetCatalog, FacetValue, FilteredLogResult, MatchType, SortKey
from .records import RecordStore, parse_record, parse_record_strict
from .registry import SessionRegistry, get_default_registry, reset_default_registry
from .session import LogSession

__all__ = [
    # Core
    "LogFacetCommands",
    "SessionRegistry",
    "LogSession",
    "get_default_registry",
    "reset_default_registry",
    "EngineConfig",
    # Records
    "RecordStore",
    "parse_record",
    "parse_record_strict",
    # Facets
    "Facet",
    "FacetValue",
    "FacetCatalog",
    "MatchType",
    "SortKey",
    "FilteredLogResult",
    # Exceptions
    "LogFacetsError",
    "SessionNotFoundError",
    "MalformedRecordError",
    "LockUnavailableError",
    "ConfigurationError",
]

__version__ = "0.1.0"
