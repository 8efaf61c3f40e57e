"""
Type definitions for the query toolkit.

``Query`` lives in ``es_types.query`` and is imported from there.
"""

from .primitives import (
    AggregationResponse,
    ElasticResponse,
    SortOrder,
    TimeRange,
)

from .tokens import (
    NestedQuery,
    TokenResult,
)

from .aggregations import (
    AGG_KEY,
    AGGREGATION_TYPES,
    AggregationKind,
    AggregationNode,
    AggregationType,
    get_aggregation_type,
)

__all__ = [
    # Primitives
    "AggregationResponse",
    "ElasticResponse",
    "SortOrder",
    "TimeRange",
    # Tokens
    "NestedQuery",
    "TokenResult",
    # Aggregations
    "AGG_KEY",
    "AGGREGATION_TYPES",
    "AggregationKind",
    "AggregationNode",
    "AggregationType",
    "get_aggregation_type",
]
