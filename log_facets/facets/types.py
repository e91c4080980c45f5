"""
Facet data types.

A facet is a filter dimension over one record field. Each facet keeps the
distinct string values seen for that field, how often each occurs, and
whether the user has selected it as an active filter.

Serialization follows the shape the log viewer frontend consumes:
facets carry `matchType`, results carry `filtered_total` and `total`,
and sort keys arrive as `{"id": ..., "desc": ...}`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class MatchType(Enum):
    """How a facet's match set combines with the facets before it."""

    AND = "AND"  # Intersect with the running set
    OR = "OR"  # Union with the running set

    @classmethod
    def parse(cls, value: MatchType | str | None) -> MatchType:
        """Parse a match type name; anything unrecognized is OR."""
        if isinstance(value, MatchType):
            return value
        if value == "AND":
            return cls.AND
        return cls.OR


@dataclass
class FacetValue:
    """One distinct value observed for a facet's property."""

    value: str
    filtered: bool = False
    total: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {"value": self.value, "filtered": self.filtered, "total": self.total}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FacetValue:
        return cls(
            value=data["value"],
            filtered=data.get("filtered", False),
            total=data.get("total", 0),
        )


@dataclass
class Facet:
    """A filter dimension over one record property.

    Values are never removed once discovered. A value that disappears from
    the data keeps its last count and its filtered flag, so a user's
    selection survives data changes.
    """

    property: str
    match_type: MatchType = MatchType.OR
    values: list[FacetValue] = field(default_factory=list)

    def find_value(self, value: str) -> FacetValue | None:
        """First FacetValue with the given value, if any."""
        for facet_value in self.values:
            if facet_value.value == value:
                return facet_value
        return None

    def filtered_values(self) -> list[str]:
        """Values currently selected as active filters."""
        return [v.value for v in self.values if v.filtered]

    @property
    def is_filtered(self) -> bool:
        return any(v.filtered for v in self.values)

    def to_dict(self) -> dict[str, Any]:
        return {
            "property": self.property,
            "matchType": self.match_type.value,
            "values": [v.to_dict() for v in self.values],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Facet:
        return cls(
            property=data["property"],
            match_type=MatchType.parse(data.get("matchType")),
            values=[FacetValue.from_dict(v) for v in data.get("values", [])],
        )


@dataclass(frozen=True)
class SortKey:
    """One entry of a prioritized sort specification."""

    id: str
    desc: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "desc": self.desc}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SortKey:
        return cls(id=data["id"], desc=bool(data.get("desc", False)))


@dataclass
class FilteredLogResult:
    """One page of a filtered query.

    Attributes:
        data: Records on the requested page
        filtered_total: Size of the filtered and searched set before paging
        total: Number of records in the session
    """

    data: list[Any] = field(default_factory=list)
    filtered_total: int = 0
    total: int = 0

    @classmethod
    def empty(cls) -> FilteredLogResult:
        """Result returned for sessions that do not exist."""
        return cls()

    def to_dict(self) -> dict[str, Any]:
        return {
            "data": self.data,
            "filtered_total": self.filtered_total,
            "total": self.total,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FilteredLogResult:
        return cls(
            data=list(data.get("data", [])),
            filtered_total=data.get("filtered_total", 0),
            total=data.get("total", 0),
        )
