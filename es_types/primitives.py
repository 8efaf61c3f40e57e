"""
Primitive layer type definitions.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional
from enum import Enum

from aggregations.flatten import Row, flatten_aggregations
from utils.response_parser import (
    parse_aggregations,
    parse_hits,
    parse_scroll_id,
    parse_total,
)


class SortOrder(str, Enum):
    """Sort order for queries and bucket ordering."""
    ASC = "asc"
    DESC = "desc"


@dataclass
class TimeRange:
    """Time range for queries."""
    start: datetime
    end: Optional[datetime] = None

    def to_query(self) -> Dict[str, Any]:
        """Convert to Elasticsearch range bounds."""
        query = {"gte": self.start.isoformat()}
        if self.end:
            query["lte"] = self.end.isoformat()
        return query

    def to_condition(self, field: str) -> Dict[str, Any]:
        """Range condition on ``field``, suitable for ``Query.stash``."""
        return {"range": {field: self.to_query()}}


@dataclass
class ElasticResponse:
    """Elasticsearch search response."""
    took: int
    timed_out: bool
    total: int
    hits: List[Dict[str, Any]]
    aggregations: Optional[Dict[str, Any]] = None
    _scroll_id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ElasticResponse":
        """Create from Elasticsearch response dict."""
        return cls(
            took=data.get("took", 0),
            timed_out=data.get("timed_out", False),
            total=parse_total(data),
            hits=parse_hits(data),
            aggregations=parse_aggregations(data) or None,
            _scroll_id=parse_scroll_id(data),
        )


@dataclass
class AggregationResponse:
    """Elasticsearch aggregation response with its flattened rows."""
    took: int
    timed_out: bool
    aggregations: Dict[str, Any]
    rows: List[Row]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AggregationResponse":
        """Create from Elasticsearch response dict."""
        aggregations = parse_aggregations(data)
        return cls(
            took=data.get("took", 0),
            timed_out=data.get("timed_out", False),
            aggregations=aggregations,
            rows=flatten_aggregations(aggregations),
        )
