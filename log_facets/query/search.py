"""Case-insensitive substring search over log records."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from ..records import serialize_value


def normalize_query(query: str | None) -> str:
    """Case-fold a search query; None and empty both mean no search."""
    return (query or "").lower()


def record_matches(record: Any, query: str) -> bool:
    """Check one record against a case-folded, non-empty query.

    Only object records are searched. A top-level string field matches on
    substring; a nested object field matches if its compact JSON text
    contains the query. Other field types never match.
    """
    if not isinstance(record, dict):
        return False

    for value in record.values():
        if isinstance(value, str):
            if query in value.lower():
                return True
        elif isinstance(value, dict):
            if query in serialize_value(value).lower():
                return True
    return False


def search_records(records: Iterable[Any], query: str | None) -> list[Any]:
    """Records matching `query`, in their original order.

    An empty query returns every record unchanged.
    """
    folded = normalize_query(query)
    if not folded:
        return list(records)
    return [record for record in records if record_matches(record, folded)]
