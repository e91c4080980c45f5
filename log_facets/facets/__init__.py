"""
Facets module for faceted filtering of log sessions.

This module provides:
- Facet / FacetValue: filter dimensions and their discovered values
- FacetCatalog: the ordered facet list of one session and value recompute
- compose_filters: ordered AND/OR composition of per-facet match sets

Usage:
    from log_facets.facets import FacetCatalog, MatchType, compose_filters

    catalog = FacetCatalog()
    catalog.add_facet("level", MatchType.OR, records)
    catalog.set_filtered("level", "error", True)

    result = compose_filters(catalog.facets, records)
    matching = [records[i] for i in result.indices]
"""

from .catalog import FacetCatalog, count_values
from .composer import (
    CompositionResult,
    FacetMatch,
    collect_matches,
    combine_matches,
    compose_filters,
    facet_match_set,
)
from .types import Facet, FacetValue, FilteredLogResult, MatchType, SortKey

__all__ = [
    # Types
    "Facet",
    "FacetValue",
    "FilteredLogResult",
    "MatchType",
    "SortKey",
    # Catalog
    "FacetCatalog",
    "count_values",
    # Composition
    "CompositionResult",
    "FacetMatch",
    "collect_matches",
    "combine_matches",
    "compose_filters",
    "facet_match_set",
]
