"""
Query DSL building utilities for Elasticsearch.
"""

from typing import Dict, Any, List, Optional, Union


FIELD_MATCHERS = (
    "term",
    "match",
    "match_phrase",
    "wildcard",
    "regexp",
    "fuzzy",
    "prefix",
)


def build_field_query(
    matcher: str,
    field: str,
    value: Any,
) -> Dict[str, Any]:
    """
    Build a single-field leaf query.

    Args:
        matcher: One of term, match, match_phrase, wildcard, regexp, fuzzy, prefix
        field: Field name
        value: Value to match, passed through untouched

    Returns:
        Leaf query dict, e.g. {"wildcard": {"user_agent": "Mozilla*"}}

    Raises:
        ValueError: If the matcher is not a single-field query type
    """
    if matcher not in FIELD_MATCHERS:
        raise ValueError(f"Unsupported field query type: {matcher}")

    return {matcher: {field: value}}


def build_terms_query(field: str, values: List[Any]) -> Dict[str, Any]:
    """
    Build a terms query for exact matching against a list of values.

    Args:
        field: Field name
        values: Values, any of which may match

    Returns:
        Terms query dict
    """
    return {"terms": {field: list(values)}}


def build_range_query(field: str, bounds: Dict[str, Any]) -> Dict[str, Any]:
    """
    Build a range query.

    Args:
        field: Field name
        bounds: Any of gt, gte, lt, lte

    Returns:
        Range query dict
    """
    return {"range": {field: dict(bounds)}}


def build_any_of_query(
    matcher: str,
    field: str,
    patterns: List[str],
) -> Dict[str, Any]:
    """
    Build a bool/should query matching any of several patterns.

    Each pattern becomes ``{matcher: {field: {"value": pattern}}}``.

    Args:
        matcher: wildcard or regexp
        field: Field name
        patterns: Patterns, at least one of which must match

    Returns:
        Bool query dict with minimum_should_match of 1
    """
    tests = [{matcher: {field: {"value": pattern}}} for pattern in patterns]
    return build_bool_query(should=tests, minimum_should_match=1)


def build_query_string(query: str) -> Dict[str, Any]:
    """Build a Lucene query_string query."""
    return {"query_string": {"query": query}}


def build_nested_query(path: str, query: Dict[str, Any]) -> Dict[str, Any]:
    """
    Build a nested query.

    Args:
        path: Path of the nested object
        query: Query to run against the nested documents

    Returns:
        Nested query dict
    """
    return {"nested": {"path": path, "query": query}}


def build_bool_query(
    must: Optional[List[Dict[str, Any]]] = None,
    must_not: Optional[List[Dict[str, Any]]] = None,
    should: Optional[List[Dict[str, Any]]] = None,
    filter: Optional[List[Dict[str, Any]]] = None,
    minimum_should_match: Optional[Union[int, str]] = None,
) -> Dict[str, Any]:
    """
    Build a bool query combining multiple conditions.

    Empty sections are left out of the result.

    Args:
        must: Queries that must match
        must_not: Queries that must not match
        should: Optional queries (OR logic)
        filter: Filter context queries (no scoring)
        minimum_should_match: Minimum number of should clauses

    Returns:
        Bool query dict
    """
    bool_query = {}

    if must:
        bool_query["must"] = must
    if must_not:
        bool_query["must_not"] = must_not
    if should:
        bool_query["should"] = should
    if filter:
        bool_query["filter"] = filter
    if minimum_should_match is not None:
        bool_query["minimum_should_match"] = minimum_should_match

    return {"bool": bool_query}
