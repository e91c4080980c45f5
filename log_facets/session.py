"""
A single structured log session: its records and its facets.

Sessions are not thread-safe on their own. The registry serializes access
to them; everything here assumes the caller holds the registry lock.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Any

from .facets.catalog import FacetCatalog
from .facets.types import Facet, FilteredLogResult, MatchType, SortKey
from .logging_utils import SessionLoggerAdapter
from .query.pipeline import run_query
from .records import RecordStore, parse_records

logger = logging.getLogger(__name__)


class LogSession:
    """Record store plus facet catalog for one session id."""

    def __init__(self, session_id: str, records: RecordStore | None = None):
        self.session_id = session_id
        self.records = records if records is not None else RecordStore()
        self.catalog = FacetCatalog()
        self._log = SessionLoggerAdapter(logger, {"session_id": session_id})

    @classmethod
    def from_texts(cls, session_id: str, texts: Iterable[str]) -> LogSession:
        return cls(session_id, RecordStore.from_texts(texts))

    def add_data(self, texts: Iterable[str]) -> int:
        """Append raw record texts and refresh facet values."""
        return self.add_records(parse_records(texts))

    def add_records(self, records: Iterable[Any]) -> int:
        """Append already-parsed records and refresh facet values."""
        appended = self.records.extend(records)
        self.catalog.recompute(self.records)
        self._log.debug("Appended %d records (now %d)", appended, len(self.records))
        return appended

    def add_facet(self, property: str, match_type: MatchType | str | None) -> Facet:
        facet = self.catalog.add_facet(property, match_type, self.records)
        self._log.debug("Added facet %r (%s)", property, facet.match_type.value)
        return facet

    def set_facet_match_type(self, property: str, match_type: MatchType | str | None) -> bool:
        return self.catalog.set_match_type(property, match_type)

    def remove_facet(self, property: str) -> int:
        removed = self.catalog.remove_facet(property, self.records)
        self._log.debug("Removed %d facets on %r", removed, property)
        return removed

    def set_filtered(self, property: str, value: str, filtered: bool) -> bool:
        return self.catalog.set_filtered(property, value, filtered)

    def get_facets(self) -> list[Facet]:
        return self.catalog.get_facets()

    def query(
        self,
        search_query: str | None = "",
        offset: int = 0,
        limit: int = 100,
        sorting: Sequence[SortKey] | None = None,
    ) -> FilteredLogResult:
        """Filtered, searched, sorted page of this session's records."""
        return run_query(
            list(self.records),
            self.catalog.facets,
            search_query=search_query,
            offset=offset,
            limit=limit,
            sorting=sorting,
        )
