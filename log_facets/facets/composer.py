"""
Facet filter composition.

Each facet with at least one selected value yields a match set: the indices
of records whose property equals any selected value. Values within a facet
always combine with OR. The facet's own match type only governs how its set
combines with the running set built from the facets before it, so sets are
folded strictly in catalog order:

    running = set(facet_1)
    running = running | set(facet_2)   # facet_2 is OR
    running = running & set(facet_3)   # facet_3 is AND

Mixed AND/OR folds are order dependent, which is why catalog order is part
of the contract.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from ..records import string_field
from .types import Facet, MatchType


@dataclass
class FacetMatch:
    """Match set for one participating facet."""

    property: str
    match_type: MatchType
    indices: set[int] = field(default_factory=set)


@dataclass
class CompositionResult:
    """Outcome of composing facet filters.

    Attributes:
        any_filtered: Whether any facet has a selected value
        indices: Matching record indices in store order. When nothing is
            filtered this covers every record.
        matches: Per-facet match sets that took part, in catalog order
    """

    any_filtered: bool
    indices: list[int]
    matches: list[FacetMatch] = field(default_factory=list)


def facet_match_set(facet: Facet, records: Sequence[Any]) -> set[int]:
    """Indices of records whose property equals any selected value of `facet`."""
    selected = set(facet.filtered_values())
    if not selected:
        return set()
    return {
        index
        for index, record in enumerate(records)
        if string_field(record, facet.property) in selected
    }


def collect_matches(facets: Sequence[Facet], records: Sequence[Any]) -> list[FacetMatch]:
    """Match sets for every facet that has at least one selected value."""
    return [
        FacetMatch(
            property=facet.property,
            match_type=facet.match_type,
            indices=facet_match_set(facet, records),
        )
        for facet in facets
        if facet.is_filtered
    ]


def combine_matches(matches: Sequence[FacetMatch]) -> set[int]:
    """Fold match sets in order using each later facet's match type.

    The first set seeds the fold; its own match type is not consulted.
    """
    if not matches:
        return set()

    combined = set(matches[0].indices)
    for match in matches[1:]:
        if match.match_type is MatchType.AND:
            combined &= match.indices
        else:
            combined |= match.indices
    return combined


def compose_filters(facets: Sequence[Facet], records: Sequence[Any]) -> CompositionResult:
    """Apply the facet selections to the records.

    With no selection anywhere, every record passes. Once something is
    selected, a selected facet with no matching records still takes part in
    the fold, so an AND facet on a vanished value empties the result.
    """
    matches = collect_matches(facets, records)
    if not matches:
        return CompositionResult(any_filtered=False, indices=list(range(len(records))))

    combined = combine_matches(matches)
    return CompositionResult(any_filtered=True, indices=sorted(combined), matches=matches)
