"""
Public operations of the log facets engine.

These are the entry points a host UI invokes. They keep the degrade-silently
contract: an unknown session id is never an error. Mutations become no-ops
and reads return an empty value. Lock failures are not part of that
contract and propagate as LockUnavailableError.

Contract:
- Inputs: session ids, raw record texts, facet properties/values, query params
- Outputs: session ids, facet copies, FilteredLogResult pages
- Side Effects: in-memory session state in the registry
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Any

from .exceptions import SessionNotFoundError
from .facets.types import Facet, FilteredLogResult, MatchType, SortKey
from .records import parse_records
from .registry import SessionRegistry, get_default_registry

logger = logging.getLogger(__name__)


def _to_sort_keys(sorting: Iterable[SortKey | dict[str, Any]] | None) -> list[SortKey]:
    if not sorting:
        return []
    return [s if isinstance(s, SortKey) else SortKey.from_dict(s) for s in sorting]


class LogFacetCommands:
    """Command surface over a SessionRegistry.

    Usage:
        commands = LogFacetCommands()
        session_id = commands.start_session(lines)
        commands.add_facet(session_id, "level", "OR")
        commands.set_filtered_for_facet_value(session_id, "level", "error", True)
        page = commands.get_filtered_data(session_id, "timeout", 0, 50, [])
    """

    def __init__(self, registry: SessionRegistry | None = None):
        """Initialize the command surface.

        Args:
            registry: Registry to operate on. Uses the process default if not provided.
        """
        self.registry = registry if registry is not None else get_default_registry()

    def start_session(self, initial_data: Iterable[str]) -> str:
        """Create a session from raw record texts and return its id."""
        return self.registry.create(initial_data)

    def add_data(self, session_id: str, data: Iterable[str]) -> None:
        """Append raw record texts to a session."""
        # Parsed outside the lock, like create
        records = parse_records(data)
        try:
            with self.registry.session(session_id, mutating=True) as session:
                session.add_records(records)
        except SessionNotFoundError:
            logger.debug("add_data ignored for unknown session %s", session_id)

    def add_facet(self, session_id: str, property: str, match_type: MatchType | str) -> None:
        """Add a facet on `property`; unrecognized match types become OR."""
        try:
            with self.registry.session(session_id, mutating=True) as session:
                session.add_facet(property, match_type)
        except SessionNotFoundError:
            logger.debug("add_facet ignored for unknown session %s", session_id)

    def set_facet_match_type(
        self, session_id: str, property: str, match_type: MatchType | str
    ) -> None:
        """Change the match type of the first facet on `property`."""
        try:
            with self.registry.session(session_id, mutating=True) as session:
                session.set_facet_match_type(property, match_type)
        except SessionNotFoundError:
            logger.debug("set_facet_match_type ignored for unknown session %s", session_id)

    def remove_facet(self, session_id: str, property: str) -> None:
        """Remove every facet on `property`."""
        try:
            with self.registry.session(session_id, mutating=True) as session:
                session.remove_facet(property)
        except SessionNotFoundError:
            logger.debug("remove_facet ignored for unknown session %s", session_id)

    def set_filtered_for_facet_value(
        self, session_id: str, property: str, value: str, filtered: bool
    ) -> None:
        """Select or deselect one facet value as an active filter."""
        try:
            with self.registry.session(session_id, mutating=True) as session:
                session.set_filtered(property, value, filtered)
        except SessionNotFoundError:
            logger.debug("set_filtered_for_facet_value ignored for unknown session %s", session_id)

    def get_facets(self, session_id: str) -> list[Facet]:
        """Copy of the session's facets; empty for unknown sessions."""
        try:
            with self.registry.session(session_id) as session:
                return session.get_facets()
        except SessionNotFoundError:
            logger.debug("get_facets returned default for unknown session %s", session_id)
            return []

    def get_filtered_data(
        self,
        session_id: str,
        search_query: str = "",
        offset: int = 0,
        limit: int = 100,
        sorting: Sequence[SortKey | dict[str, Any]] | None = None,
    ) -> FilteredLogResult:
        """One page of filtered, searched and sorted records."""
        sort_keys = _to_sort_keys(sorting)
        try:
            with self.registry.session(session_id) as session:
                return session.query(search_query, offset, limit, sort_keys)
        except SessionNotFoundError:
            logger.debug("get_filtered_data returned default for unknown session %s", session_id)
            return FilteredLogResult.empty()

    def drop_session(self, session_id: str) -> bool:
        """Discard a session. Returns False if it did not exist."""
        try:
            self.registry.drop(session_id)
            return True
        except SessionNotFoundError:
            logger.debug("drop_session ignored for unknown session %s", session_id)
            return False
