"""Offset/limit paging."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any


@dataclass
class Page:
    """A slice of a larger sequence plus the size of that sequence."""

    items: list[Any] = field(default_factory=list)
    total: int = 0


def paginate(items: Sequence[Any], offset: int, limit: int) -> Page:
    """Slice `items` to `[offset, offset + limit)`.

    An offset at or past the end yields an empty page. `total` is always the
    length of `items`, whatever the slice.
    """
    if offset < 0 or limit < 0:
        raise ValueError(f"offset and limit must be >= 0, got {offset}, {limit}")

    total = len(items)
    if offset >= total:
        return Page(items=[], total=total)

    end = min(offset + limit, total)
    return Page(items=list(items[offset:end]), total=total)
