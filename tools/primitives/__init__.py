"""
Primitive tools for low-level Elasticsearch operations.
"""

from .search import execute_query, scroll_results, clear_scroll, iterate_hits
from .aggregate import execute_aggregation, group_by
from .stats import get_index_mapping, get_fields_meta

__all__ = [
    # Search operations
    "execute_query",
    "scroll_results",
    "clear_scroll",
    "iterate_hits",
    # Aggregation operations
    "execute_aggregation",
    "group_by",
    # Mapping operations
    "get_index_mapping",
    "get_fields_meta",
]
