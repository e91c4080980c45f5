"""
Record storage for a single log session.

Records arrive as raw text. Text that parses as JSON is stored as the parsed
value; anything else is kept verbatim as a string record so no input is lost.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Iterator
from typing import Any

from .exceptions import MalformedRecordError

logger = logging.getLogger(__name__)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not a JSON value")


def parse_record_strict(text: str) -> Any:
    """Parse raw record text as JSON.

    NaN, Infinity and -Infinity are rejected; they are not JSON.

    Raises:
        MalformedRecordError: If the text is not a string or not valid JSON.
    """
    if not isinstance(text, str):
        raise MalformedRecordError(text, TypeError(f"expected str, got {type(text).__name__}"))
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except ValueError as e:
        raise MalformedRecordError(text, e) from e


def parse_record(text: str) -> Any:
    """Parse raw record text, falling back to the text itself.

    Non-string input falls back to its `str()` form.
    """
    try:
        return parse_record_strict(text)
    except MalformedRecordError as e:
        logger.debug("Storing unparseable record as string: %s", e.details.get("cause"))
        return text if isinstance(text, str) else str(text)


def parse_records(texts: Iterable[str]) -> list[Any]:
    """Parse a batch of raw record texts."""
    return [parse_record(text) for text in texts]


def serialize_value(value: Any) -> str:
    """Compact JSON text for a record value, as used by search matching."""
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def field_value(record: Any, key: str) -> Any:
    """Value of `key` on an object record, or None for non-objects and misses."""
    if isinstance(record, dict):
        return record.get(key)
    return None


def string_field(record: Any, key: str) -> str | None:
    """Value of `key` when it is a string; other types are invisible to facets."""
    value = field_value(record, key)
    return value if isinstance(value, str) else None


class RecordStore:
    """Ordered, append-only sequence of records.

    Insertion order is the default result order and the basis for the
    index sets produced by facet filtering.
    """

    def __init__(self, records: Iterable[Any] | None = None):
        self._records: list[Any] = list(records) if records is not None else []

    @classmethod
    def from_texts(cls, texts: Iterable[str]) -> RecordStore:
        """Build a store from raw record texts."""
        return cls(parse_records(texts))

    def extend(self, records: Iterable[Any]) -> int:
        """Append already-parsed records. Returns the number appended."""
        before = len(self._records)
        self._records.extend(records)
        return len(self._records) - before

    def __len__(self) -> int:
        return len(self._records)

    def __getitem__(self, index: int) -> Any:
        return self._records[index]

    def __iter__(self) -> Iterator[Any]:
        return iter(self._records)
