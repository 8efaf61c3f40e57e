"""
FastMCP Elasticsearch Query Server.

This server exposes the query string compiler and the aggregation
expander as tools:
- health: Check Elasticsearch connectivity
- expand_query: Compile query string tokens into Query DSL, without searching
- expand_aggregations: Expand group-by levels into an aggregation tree
- search_logs: Search documents matching query string tokens
- aggregate_logs: Group matching documents and flatten the buckets into rows
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastmcp import FastMCP
from dotenv import load_dotenv

from aggregations.expand import build_group_by
from config import (
    configure_logging,
    get_current_environment,
    get_index_config,
    get_query_defaults,
)
from tools.flows import log_analysis
from utils import ping_cluster

# Load environment variables
load_dotenv()
configure_logging()

# Initialize MCP server
mcp = FastMCP("es-query-mcp")


# ========== HEALTH TOOL ==========

@mcp.tool()
def health() -> Dict[str, Any]:
    """
    Check Elasticsearch connectivity and report the query defaults.
    """
    env = get_current_environment()
    connected = ping_cluster()

    return {
        "overall_status": "healthy" if connected else "degraded",
        "environment": env,
        "services": {
            "elasticsearch": {
                "service": "elasticsearch",
                "connected": connected,
                "environment": env,
            },
        },
        "query_defaults": dict(get_query_defaults()),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


# ========== COMPILER TOOLS ==========
# Pure transformations, no cluster access unless live_mapping is set

@mcp.tool()
def expand_query(
    tokens: List[str],
    index_type: Optional[str] = None,
    context: Optional[str] = None,
    default_join: Optional[str] = None,
    live_mapping: bool = False,
) -> Dict[str, Any]:
    """
    Compile query string tokens into Elasticsearch Query DSL.

    Tokens are classified one by one:
    - field:<100, field:>=5,<10 -> range
    - src_ip:10.0/8 -> IP range of the CIDR block
    - =field:v (term), *field:v* (wildcard), /field:re (regexp),
      ~field:v (fuzzy), +field:v (match_phrase)
    - _prefix_:field:v -> prefix
    - field:values.txt[col] / .csv / .json[key.path] -> terms from a file
      (only when ES_QUERY_FILE_EXPANSION is enabled)
    - path:"field:v ..." -> nested query
    - and / or / not -> joining words; not negates the next condition
    Anything else is free text for a query_string query.

    Args:
        tokens: Query string tokens
        index_type: Registered index type (logstash, app_logs, access_logs)
            whose field types are used
        context: "query" (must) or "filter"
        default_join: AND or OR between adjacent free-text terms
        live_mapping: Read field types from the cluster mapping too

    Returns:
        The query section, request body and URI parameters
    """
    index_pattern = get_index_config(index_type)["pattern"] if index_type else None
    query = log_analysis.build_query(
        tokens,
        index_type=index_type,
        index_pattern=index_pattern,
        live_mapping=live_mapping,
        context=context,
        default_join=default_join,
    )
    return {
        "query": query.query(),
        **query.to_dict(),
    }


@mcp.tool()
def expand_aggregations(
    levels: List[Dict[str, Any]],
    ascending: bool = False,
) -> Dict[str, Any]:
    """
    Expand group-by levels into a nested aggregation tree.

    Each level is {"agg": "<aggregation string>", "by": [<metrics>]}, the
    outermost level first. Aggregation strings look like:
    - src_ip -> terms on src_ip, 20 buckets
    - src_ip:13 or ips=src_ip:size=13 -> terms with 13 buckets
    - date_histogram:@timestamp:1d, histogram:bytes:1024
    - avg:bytes+max:bytes -> several aggregations, + separated
    "by" lists single value metrics (avg, sum, min, max, cardinality) to
    order that level's buckets by.

    Args:
        levels: Group-by levels, outermost first
        ascending: Order buckets ascending instead of descending

    Returns:
        The aggregations request member
    """
    direction = "asc" if ascending else "desc"
    tree = build_group_by(log_analysis.levels_from_dicts(levels), direction=direction)
    return {"aggregations": tree}


# ========== SEARCH TOOLS ==========

@mcp.tool()
def search_logs(
    tokens: List[str],
    index_type: str = "logstash",
    index_pattern: Optional[str] = None,
    timeframe_minutes: int = 60,
    start_time: Optional[str] = None,
    size: Optional[int] = None,
    fields: Optional[List[str]] = None,
    live_mapping: bool = False,
) -> Dict[str, Any]:
    """
    Search documents matching query string tokens.

    Args:
        tokens: Query string tokens (see expand_query), empty for all documents
        index_type: Registered index type (logstash, app_logs, access_logs)
        index_pattern: Override the index type's pattern
        timeframe_minutes: Time window to search (1-10080, default 60)
        start_time: Optional start time in ISO format (e.g., '2025-06-23T00:00:00Z').
            If not provided, the window ends now.
        size: Number of documents (defaults per index type)
        fields: Source fields to return
        live_mapping: Read field types from the cluster mapping

    Returns:
        The executed request, totals and hits
    """
    return log_analysis.search_logs(
        tokens,
        index_type=index_type,
        index_pattern=index_pattern,
        timeframe_minutes=timeframe_minutes,
        start_time=start_time,
        size=size,
        fields=fields,
        live_mapping=live_mapping,
    )


@mcp.tool()
def aggregate_logs(
    tokens: List[str],
    levels: List[Dict[str, Any]],
    index_type: str = "logstash",
    index_pattern: Optional[str] = None,
    timeframe_minutes: int = 60,
    start_time: Optional[str] = None,
    ascending: bool = False,
    live_mapping: bool = False,
) -> Dict[str, Any]:
    """
    Group documents matching query string tokens into flat rows.

    Example:
        levels=[{"agg": "src_ip:10"}, {"agg": "dst_port:5"}] yields rows like
        {"src_ip": "1.2.3.4", "src_ip.hits": 13, "dst_port": 53, "dst_port.hits": 13}

    Args:
        tokens: Query string tokens (see expand_query)
        levels: Group-by levels, outermost first (see expand_aggregations)
        index_type: Registered index type (logstash, app_logs, access_logs)
        index_pattern: Override the index type's pattern
        timeframe_minutes: Time window to search (1-10080, default 60)
        start_time: Optional start time in ISO format
        ascending: Order buckets ascending instead of descending
        live_mapping: Read field types from the cluster mapping

    Returns:
        The executed request, raw aggregations and flattened rows
    """
    return log_analysis.aggregate_logs(
        tokens,
        log_analysis.levels_from_dicts(levels),
        index_type=index_type,
        index_pattern=index_pattern,
        timeframe_minutes=timeframe_minutes,
        start_time=start_time,
        direction="asc" if ascending else "desc",
        live_mapping=live_mapping,
    )


if __name__ == "__main__":
    mcp.run()
