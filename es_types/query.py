"""
Mutable search request accumulator.

A Query collects bool conditions, pagination, sorting, aggregations and
scroll state for one search session. It is not thread-safe: hand a
``clone()`` to anything running concurrently.
"""

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from loguru import logger

from aggregations.expand import (
    expand_aggregate_string,
    order_aggregations_by,
    wrap_aggregations,
)
from es_types.primitives import SortOrder
from utils.query_builder import build_bool_query, build_nested_query
from utils.validation import is_time_constant


BOOL_SECTIONS = ("must", "must_not", "should", "filter")

Condition = Dict[str, Any]


@dataclass
class Query:
    """Structured search request built up across calls."""
    must: List[Condition] = field(default_factory=list)
    must_not: List[Condition] = field(default_factory=list)
    should: List[Condition] = field(default_factory=list)
    filter: List[Condition] = field(default_factory=list)
    minimum_should_match: Optional[Union[int, str]] = None
    nested: Optional[Dict[str, Any]] = None
    nested_path: Optional[str] = None

    # Request body
    from_: Optional[int] = None
    size: int = 50
    fields: Optional[List[str]] = None
    sort: Optional[List[Any]] = None
    aggregations: Optional[Dict[str, Any]] = None
    timeout: Optional[str] = None
    terminate_after: Optional[int] = None
    track_total_hits: Union[bool, int] = True
    track_scores: Optional[bool] = None

    # URI parameters
    scroll: Optional[str] = None
    search_type: Optional[str] = None
    rest_total_hits_as_int: bool = True

    fields_meta: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    query_stash: Dict[str, Condition] = field(default_factory=dict, init=False)
    scroll_id: Optional[str] = field(default=None, init=False)

    def add_bool(self, **sections: Union[Condition, List[Condition]]) -> "Query":
        """
        Append conditions to bool sections.

        Example:
            query.add_bool(must={"term": {"http_status": 200}})
            query.add_bool(must=[a, b], must_not=c)

        Unknown section names are ignored.
        """
        for section in sorted(sections):
            if section not in BOOL_SECTIONS:
                logger.debug("Ignoring unknown bool section {}", section)
                continue
            conditions = sections[section]
            if not isinstance(conditions, list):
                conditions = [conditions]
            getattr(self, section).extend(conditions)
        return self

    def stash(self, section: str, condition: Optional[Condition] = None) -> Optional[Condition]:
        """
        Set or get the replaceable condition of a bool section.

        The stashed condition is appended to its section when the query is
        rendered, so a loop can shift one clause (a moving time window, say)
        while the rest of the query stays put. Setting a condition resets
        the scroll id.
        """
        if section in BOOL_SECTIONS and condition is not None:
            logger.debug("Setting {} in stash", section)
            self.query_stash[section] = condition
            self.clear_scroll_id()
        return self.query_stash.get(section)

    def set_nested(self, path: str, query: Dict[str, Any]) -> "Query":
        self.nested_path = path
        self.nested = query
        return self

    def query(self) -> Dict[str, Any]:
        """
        Render the query section of the request body.

        A nested query replaces the whole bool query.
        """
        if self.nested:
            return build_nested_query(self.nested_path, copy.deepcopy(self.nested))

        sections: Dict[str, List[Condition]] = {}
        for section in BOOL_SECTIONS:
            conditions = copy.deepcopy(getattr(self, section))
            stashed = self.query_stash.get(section)
            if stashed is not None:
                conditions.append(copy.deepcopy(stashed))
            sections[section] = conditions

        return build_bool_query(
            minimum_should_match=self.minimum_should_match,
            **sections,
        )

    def request_body(self) -> Dict[str, Any]:
        """Render the request body, leaving out unset members."""
        body: Dict[str, Any] = {"query": self.query()}
        members = {
            "from": self.from_,
            "size": self.size,
            "_source": self.fields,
            "sort": self.sort,
            "aggregations": self.aggregations,
            "timeout": self.timeout,
            "terminate_after": self.terminate_after,
            "track_total_hits": self.track_total_hits,
            "track_scores": self.track_scores,
        }
        for key, value in members.items():
            if value is not None:
                body[key] = value
        return body

    def uri_params(self) -> Dict[str, Any]:
        """Render the URI parameters, leaving out unset members."""
        params = {
            "scroll": self.scroll,
            "search_type": self.search_type,
            "rest_total_hits_as_int": self.rest_total_hits_as_int,
        }
        return {key: value for key, value in params.items() if value is not None}

    def as_search(self, index: Optional[str] = None) -> Dict[str, Any]:
        """Keyword arguments for ``Elasticsearch.search``."""
        kwargs: Dict[str, Any] = {"body": self.request_body(), **self.uri_params()}
        if index:
            kwargs["index"] = index
        return kwargs

    def set_scan_scroll(self, ctxt_life: Optional[str] = None) -> "Query":
        """
        Sort by ``_doc`` and keep a scroll context open.

        Invalid time constants fall back to one minute.
        """
        if not is_time_constant(ctxt_life):
            ctxt_life = "1m"
        self.sort = ["_doc"]
        self.scroll = ctxt_life
        return self

    def set_match_all(self) -> "Query":
        """Reset every bool section to a match_all, leaving other settings alone."""
        self.must_not = []
        self.filter = []
        self.should = []
        self.must = [{"match_all": {}}]
        return self

    def add_aggregations(self, **aggs: Dict[str, Any]) -> "Query":
        """
        Add named aggregations, replacing any with the same name.

        Aggregation requests fetch no documents and cannot scroll.
        """
        current = self.aggregations or {}
        for name, agg in aggs.items():
            logger.debug("aggregation[{}] added to query", name)
            current[name] = agg
        self.aggregations = current
        self.size = 0
        self.scroll = None
        return self

    def add_aggregate_string(self, token: str) -> "Query":
        """Add the aggregations of a compact aggregation string."""
        return self.add_aggregations(**expand_aggregate_string(token))

    def wrap_aggregations(self, outer: Union[str, Dict[str, Any]]) -> "Query":
        """Nest the current aggregations under ``outer``."""
        self.aggregations = wrap_aggregations(outer, self.aggregations)
        return self

    def aggregations_by(self, direction: str, definitions: List[str]) -> "Query":
        """Order the top-level bucket aggregations by single-value metrics."""
        direction = SortOrder(direction.lower()).value
        if self.aggregations:
            order_aggregations_by(self.aggregations, direction, definitions)
        return self

    # Short-hand like the Elasticsearch DSL
    add_aggs = add_aggregations
    wrap_aggs = wrap_aggregations
    aggs_by = aggregations_by

    def set_scroll_id(self, scroll_id: Optional[str]) -> None:
        self.scroll_id = scroll_id

    def clear_scroll_id(self) -> None:
        self.scroll_id = None

    def clone(self) -> "Query":
        """Independent deep copy, including stash and scroll state."""
        return copy.deepcopy(self)

    def to_dict(self) -> Dict[str, Any]:
        """Request body and URI parameters, for display."""
        return {"uri_params": self.uri_params(), "body": self.request_body()}
