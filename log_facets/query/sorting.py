"""
Multi-key record sorting.

Keys are tried in priority order. A key decides only when both records carry
a value for it and the two values are comparable: two strings compare
lexicographically, two numbers numerically. Anything else (absent field,
mismatched types, non-object record) defers to the next key. Records that no
key separates keep their relative order, since `sorted` is stable.
"""

from __future__ import annotations

import functools
from collections.abc import Iterable, Sequence
from typing import Any

from ..facets.types import SortKey

_MISSING = object()


def _is_number(value: Any) -> bool:
    # bool is an int subclass but JSON booleans are not numbers
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _lookup(record: Any, key: str) -> Any:
    if isinstance(record, dict) and key in record:
        return record[key]
    return _MISSING


def _compare_values(a: Any, b: Any) -> int | None:
    if isinstance(a, str) and isinstance(b, str):
        return (a > b) - (a < b)
    if _is_number(a) and _is_number(b):
        return (a > b) - (a < b)
    return None


def compare_records(a: Any, b: Any, sort_keys: Sequence[SortKey]) -> int:
    """Three-way comparison of two records under `sort_keys`."""
    for sort_key in sort_keys:
        value_a = _lookup(a, sort_key.id)
        value_b = _lookup(b, sort_key.id)
        if value_a is _MISSING or value_b is _MISSING:
            continue

        order = _compare_values(value_a, value_b)
        if order is None:
            continue
        if sort_key.desc:
            order = -order
        if order != 0:
            return order
    return 0


def sort_records(records: Iterable[Any], sort_keys: Sequence[SortKey] | None) -> list[Any]:
    """Stable sort of records by a prioritized key list."""
    records = list(records)
    if not sort_keys:
        return records
    keys = list(sort_keys)
    return sorted(records, key=functools.cmp_to_key(lambda a, b: compare_records(a, b, keys)))
