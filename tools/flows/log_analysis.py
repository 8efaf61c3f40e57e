"""
Flow tools: query strings in, search and aggregation results out.

A flow resolves the index type to a pattern and field metadata, expands
the query string tokens, restricts the query to a time window and runs
it through the primitives.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Sequence

from loguru import logger

from aggregations.expand import Level
from aggregations.flatten import row_to_dict
from config import get_fields_meta, get_index_config, get_query_defaults
from es_types.primitives import TimeRange
from es_types.query import Query
from querystring import QueryString
from tools.primitives.aggregate import group_by
from tools.primitives.search import execute_query
from tools.primitives.stats import get_fields_meta as get_live_fields_meta


def resolve_time_range(
    timeframe_minutes: int,
    start_time: Optional[str] = None,
) -> TimeRange:
    """
    Time window ending now, or starting at ``start_time`` when given.

    Args:
        timeframe_minutes: Window length, clamped to 1-10080 (one week)
        start_time: Optional start in ISO format (e.g., '2025-06-23T00:00:00Z')
    """
    timeframe_minutes = max(1, min(timeframe_minutes, 10080))

    if start_time:
        try:
            start = datetime.fromisoformat(start_time.replace("Z", "+00:00"))
            return TimeRange(start=start, end=start + timedelta(minutes=timeframe_minutes))
        except (ValueError, TypeError) as e:
            logger.warning("Ignoring invalid start_time {!r}: {}", start_time, e)

    end = datetime.now(timezone.utc)
    return TimeRange(start=end - timedelta(minutes=timeframe_minutes), end=end)


def build_query(
    tokens: Sequence[str],
    index_type: Optional[str] = None,
    index_pattern: Optional[str] = None,
    live_mapping: bool = False,
    context: Optional[str] = None,
    default_join: Optional[str] = None,
) -> Query:
    """
    Expand query string tokens with the field metadata of an index.

    Args:
        tokens: Query string tokens, e.g. ["src_ip:10.0/8", "not", "=program:sshd"]
        index_type: Registered index type providing static field metadata
        index_pattern: Pattern to read the live mapping from
        live_mapping: Merge field metadata from the cluster's mapping
        context: query or filter
        default_join: AND or OR
    """
    fields_meta = get_fields_meta(index_type)
    if live_mapping and index_pattern:
        fields_meta.update(get_live_fields_meta(index_pattern))

    if not tokens:
        return Query(fields_meta=fields_meta).set_match_all()

    # FileExpansion reads the server host's disk, off unless ES_QUERY_FILE_EXPANSION is set
    file_expansion = get_query_defaults()["file_expansion"]
    qs = QueryString(
        context=context,
        default_join=default_join,
        fields_meta=fields_meta,
        plugin_options={"fileexpansion": {"enabled": file_expansion}},
    )
    return qs.expand_query_string(*tokens)


def _resolve_index(index_type: str, index_pattern: Optional[str]) -> Dict[str, Any]:
    config = get_index_config(index_type, override_pattern=index_pattern)
    logger.debug("Index type {} resolved to {}", index_type, config["pattern"])
    return config


def search_logs(
    tokens: Sequence[str],
    index_type: str = "logstash",
    index_pattern: Optional[str] = None,
    timeframe_minutes: int = 60,
    start_time: Optional[str] = None,
    size: Optional[int] = None,
    fields: Optional[List[str]] = None,
    live_mapping: bool = False,
) -> Dict[str, Any]:
    """
    Search documents matching query string tokens within a time window.

    Returns:
        Dictionary with the executed request, totals and the hits
    """
    index = _resolve_index(index_type, index_pattern)
    query = build_query(
        tokens,
        index_type=index_type,
        index_pattern=index["pattern"],
        live_mapping=live_mapping,
    )

    time_range = resolve_time_range(timeframe_minutes, start_time)
    query.stash("filter", time_range.to_condition(index["timestamp"]))
    query.size = size if size is not None else index.get("default_size", get_query_defaults()["size"])
    query.sort = [{index["timestamp"]: {"order": "desc"}}]
    query.fields = fields

    response = execute_query(query, index["pattern"])

    return {
        "index_pattern": index["pattern"],
        "search_period": {
            "start": time_range.start.isoformat(),
            "end": time_range.end.isoformat(),
        },
        "request": query.to_dict(),
        "took": response.took,
        "timed_out": response.timed_out,
        "total": response.total,
        "hits": response.hits,
    }


def aggregate_logs(
    tokens: Sequence[str],
    levels: Sequence[Level],
    index_type: str = "logstash",
    index_pattern: Optional[str] = None,
    timeframe_minutes: int = 60,
    start_time: Optional[str] = None,
    direction: str = "desc",
    live_mapping: bool = False,
) -> Dict[str, Any]:
    """
    Group documents matching query string tokens and flatten the buckets.

    Args:
        levels: Aggregation strings, outermost first, optionally paired
            with metric definitions to order that level by

    Returns:
        Dictionary with the executed request, the raw aggregations and
        one row per bucket path
    """
    index = _resolve_index(index_type, index_pattern)
    query = build_query(
        tokens,
        index_type=index_type,
        index_pattern=index["pattern"],
        live_mapping=live_mapping,
    )

    time_range = resolve_time_range(timeframe_minutes, start_time)
    query.stash("filter", time_range.to_condition(index["timestamp"]))

    response = group_by(query, index["pattern"], levels, direction=direction)

    return {
        "index_pattern": index["pattern"],
        "search_period": {
            "start": time_range.start.isoformat(),
            "end": time_range.end.isoformat(),
        },
        "request": query.to_dict(),
        "took": response.took,
        "timed_out": response.timed_out,
        "aggregations": response.aggregations,
        "rows": [row_to_dict(row) for row in response.rows],
    }


def levels_from_dicts(levels: Sequence[Dict[str, Any]]) -> List[Level]:
    """
    Convert JSON friendly group-by levels into aggregation levels.

        [{"agg": "src_ip:10", "by": ["sum:bytes"]}, {"agg": "dst_port"}]
    """
    result: List[Level] = []
    for level in levels:
        agg = level.get("agg")
        if not agg:
            raise ValueError(f"Group-by level without an aggregation: {level}")
        by = level.get("by") or []
        if isinstance(by, str):
            by = [by]
        result.append((agg, list(by)) if by else agg)
    return result
