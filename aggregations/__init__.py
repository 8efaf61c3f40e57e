"""
Aggregation expansion and result flattening.
"""

from .expand import (
    parse_definition,
    parse_aggregate_string,
    expand_aggregate_string,
    is_single_stat,
    wrap_aggregations,
    order_aggregations_by,
    build_group_by,
)
from .flatten import flatten_aggregations, row_to_dict, row_values

__all__ = [
    # Expansion
    "parse_definition",
    "parse_aggregate_string",
    "expand_aggregate_string",
    "is_single_stat",
    "wrap_aggregations",
    "order_aggregations_by",
    "build_group_by",
    # Flattening
    "flatten_aggregations",
    "row_to_dict",
    "row_values",
]
