"""
Aggregation request types.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


AGG_KEY = "aggregations"


class AggregationKind(str, Enum):
    """Whether an aggregation groups documents or computes values."""
    BUCKET = "bucket"
    METRIC = "metric"


@dataclass(frozen=True)
class AggregationType:
    """Catalogue entry for a supported aggregation."""
    name: str
    kind: AggregationKind
    single_stat: bool = False
    orderable: bool = False


AGGREGATION_TYPES: Dict[str, AggregationType] = {
    agg.name: agg
    for agg in (
        AggregationType("terms", AggregationKind.BUCKET, orderable=True),
        AggregationType("significant_terms", AggregationKind.BUCKET),
        AggregationType("rare_terms", AggregationKind.BUCKET),
        AggregationType("histogram", AggregationKind.BUCKET, orderable=True),
        AggregationType("date_histogram", AggregationKind.BUCKET, orderable=True),
        AggregationType("geohash_grid", AggregationKind.BUCKET),
        AggregationType("missing", AggregationKind.BUCKET),
        AggregationType("avg", AggregationKind.METRIC, single_stat=True),
        AggregationType("max", AggregationKind.METRIC, single_stat=True),
        AggregationType("min", AggregationKind.METRIC, single_stat=True),
        AggregationType("sum", AggregationKind.METRIC, single_stat=True),
        AggregationType("cardinality", AggregationKind.METRIC, single_stat=True),
        AggregationType("stats", AggregationKind.METRIC),
        AggregationType("extended_stats", AggregationKind.METRIC),
        AggregationType("percentiles", AggregationKind.METRIC),
        AggregationType("geo_centroid", AggregationKind.METRIC),
    )
}


def get_aggregation_type(name: Optional[str]) -> Optional[AggregationType]:
    if not name:
        return None
    return AGGREGATION_TYPES.get(name)


@dataclass
class AggregationNode:
    """One named aggregation parsed from an aggregate string."""
    name: str
    type: str
    field: str
    params: Dict[str, Any] = field(default_factory=dict)

    def body(self) -> Dict[str, Any]:
        """The request body for this node, without its name."""
        return {self.type: {"field": self.field, **self.params}}

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the ``{name: {type: {...}}}`` request shape."""
        return {self.name: self.body()}
