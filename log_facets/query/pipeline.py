"""
Filtered data query pipeline.

Stages run in a fixed order:

1. Facet composition selects record indices (all records if nothing is selected)
2. Search narrows the selection, keeping store order
3. Sorting orders the survivors
4. Paging cuts out the requested window

`filtered_total` is measured after step 3 and `total` is the session's record
count, so neither depends on offset or limit.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Sequence
from typing import Any

from ..facets.composer import compose_filters
from ..facets.types import Facet, FilteredLogResult, SortKey
from .pagination import paginate
from .search import search_records
from .sorting import sort_records

logger = logging.getLogger(__name__)


def run_query(
    records: Sequence[Any],
    facets: Sequence[Facet],
    search_query: str | None = "",
    offset: int = 0,
    limit: int = 100,
    sorting: Sequence[SortKey] | None = None,
) -> FilteredLogResult:
    """Run the full filter, search, sort and page pipeline."""
    composition = compose_filters(facets, records)
    if composition.any_filtered:
        selected = [records[i] for i in composition.indices]
    else:
        selected = list(records)

    searched = search_records(selected, search_query)
    ordered = sort_records(searched, sorting)
    page = paginate(ordered, offset, limit)

    logger.debug(
        "Query selected %d/%d records (facets=%s, search=%r), returning %d",
        page.total,
        len(records),
        composition.any_filtered,
        search_query,
        len(page.items),
    )

    return FilteredLogResult(
        data=copy.deepcopy(page.items),
        filtered_total=page.total,
        total=len(records),
    )
