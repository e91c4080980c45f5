"""
Facet catalog for a single log session.

The catalog owns the ordered facet list. Structural changes (adding or
removing a facet, appending records) trigger a full rescan of the record
store via `recompute`; selection and match-type changes do not.

Lookups by property use first-match semantics. Nothing prevents two facets
from sharing a property; `remove_facet` removes all of them.
"""

from __future__ import annotations

import copy
import logging
from collections import Counter
from collections.abc import Iterable
from typing import Any

from ..records import string_field
from .types import Facet, FacetValue, MatchType

logger = logging.getLogger(__name__)


def count_values(records: Iterable[Any], property: str) -> Counter[str]:
    """Count string values of `property` across records, in first-seen order."""
    counts: Counter[str] = Counter()
    for record in records:
        value = string_field(record, property)
        if value is not None:
            counts[value] += 1
    return counts


class FacetCatalog:
    """Ordered list of facets with their discovered values.

    Usage:
        catalog = FacetCatalog()
        catalog.add_facet("level", MatchType.OR, records)
        catalog.set_filtered("level", "error", True)
        facets = catalog.get_facets()
    """

    def __init__(self, facets: Iterable[Facet] | None = None) -> None:
        self._facets: list[Facet] = list(facets) if facets is not None else []

    @property
    def facets(self) -> list[Facet]:
        """Live facet list, for components running under the registry lock."""
        return self._facets

    def __len__(self) -> int:
        return len(self._facets)

    def find(self, property: str) -> Facet | None:
        """First facet inspecting `property`."""
        for facet in self._facets:
            if facet.property == property:
                return facet
        return None

    def add_facet(
        self,
        property: str,
        match_type: MatchType | str | None,
        records: Iterable[Any],
    ) -> Facet:
        """Append a facet and recompute values for every facet."""
        facet = Facet(property=property, match_type=MatchType.parse(match_type))
        self._facets.append(facet)
        self.recompute(records)
        return facet

    def set_match_type(self, property: str, match_type: MatchType | str | None) -> bool:
        """Change the match type of the first facet on `property`.

        Returns True if a facet was updated.
        """
        facet = self.find(property)
        if facet is None:
            return False
        facet.match_type = MatchType.parse(match_type)
        return True

    def remove_facet(self, property: str, records: Iterable[Any]) -> int:
        """Remove every facet on `property` and recompute the rest.

        Returns the number of facets removed.
        """
        before = len(self._facets)
        self._facets = [f for f in self._facets if f.property != property]
        removed = before - len(self._facets)
        self.recompute(records)
        return removed

    def set_filtered(self, property: str, value: str, filtered: bool) -> bool:
        """Set the filter flag of one value on the first facet on `property`.

        Returns True if a value was updated; unknown facets or values are a no-op.
        """
        facet = self.find(property)
        if facet is None:
            return False
        facet_value = facet.find_value(value)
        if facet_value is None:
            return False
        facet_value.filtered = filtered
        return True

    def get_facets(self) -> list[Facet]:
        """Deep copy of the facet list."""
        return copy.deepcopy(self._facets)

    def recompute(self, records: Iterable[Any]) -> None:
        """Rescan records and refresh every facet's value table.

        Existing values get their totals replaced and keep their filtered
        flag. New values are appended unfiltered. Values no longer present
        in the data are left as they are.
        """
        records = list(records)
        counts_by_property: dict[str, Counter[str]] = {}

        for facet in self._facets:
            counts = counts_by_property.get(facet.property)
            if counts is None:
                counts = count_values(records, facet.property)
                counts_by_property[facet.property] = counts

            existing = {v.value: v for v in facet.values}
            for value, total in counts.items():
                facet_value = existing.get(value)
                if facet_value is not None:
                    facet_value.total = total
                else:
                    facet_value = FacetValue(value=value, filtered=False, total=total)
                    facet.values.append(facet_value)
                    existing[value] = facet_value

        logger.debug(
            "Recomputed %d facets over %d records (%d distinct properties)",
            len(self._facets),
            len(records),
            len(counts_by_property),
        )
