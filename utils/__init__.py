"""
Utility functions for the query toolkit.
"""

from .connection import get_elasticsearch_client, ping_cluster
from .validation import (
    validate_index_pattern,
    validate_size,
    validate_join,
    validate_context,
    is_time_constant,
    clamp_value,
)
from .query_builder import (
    build_field_query,
    build_terms_query,
    build_range_query,
    build_any_of_query,
    build_query_string,
    build_nested_query,
    build_bool_query,
)
from .response_parser import (
    parse_hits,
    parse_total,
    parse_aggregations,
    parse_scroll_id,
)
from .mapping import fields_meta_from_mapping

__all__ = [
    # Connection
    "get_elasticsearch_client",
    "ping_cluster",
    # Validation
    "validate_index_pattern",
    "validate_size",
    "validate_join",
    "validate_context",
    "is_time_constant",
    "clamp_value",
    # Query building
    "build_field_query",
    "build_terms_query",
    "build_range_query",
    "build_any_of_query",
    "build_query_string",
    "build_nested_query",
    "build_bool_query",
    # Response parsing
    "parse_hits",
    "parse_total",
    "parse_aggregations",
    "parse_scroll_id",
    # Mappings
    "fields_meta_from_mapping",
]
