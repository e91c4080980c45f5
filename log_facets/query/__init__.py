"""
Query stages for filtered log data: search, sort, page, and the pipeline
that runs them after facet composition.
"""

from .pagination import Page, paginate
from .pipeline import run_query
from .search import normalize_query, record_matches, search_records
from .sorting import compare_records, sort_records

__all__ = [
    "Page",
    "paginate",
    "run_query",
    "normalize_query",
    "record_matches",
    "search_records",
    "compare_records",
    "sort_records",
]
