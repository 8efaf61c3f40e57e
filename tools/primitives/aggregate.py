"""
Primitive aggregation operations for Elasticsearch.
"""

from typing import Sequence

from loguru import logger

from aggregations.expand import Level, build_group_by
from es_types.primitives import AggregationResponse
from es_types.query import Query
from utils.connection import get_elasticsearch_client
from utils.validation import validate_index_pattern


def execute_aggregation(
    query: Query,
    index_pattern: str,
) -> AggregationResponse:
    """
    Run the aggregations of a Query and flatten the result.

    Args:
        query: Query holding aggregations (see ``Query.add_aggregations``)
        index_pattern: Index pattern to search

    Returns:
        AggregationResponse with the raw aggregations and one row per
        bucket path

    Raises:
        ValueError: If the query has no aggregations or the pattern is invalid
        Exception: If the aggregation fails
    """
    validate_index_pattern(index_pattern)
    if not query.aggregations:
        raise ValueError("Query has no aggregations")

    # Aggregations only, never documents or a scroll context
    query.size = 0
    query.scroll = None

    es = get_elasticsearch_client()
    logger.debug("Aggregating {} with {}", index_pattern, query.aggregations)

    try:
        response = es.search(**query.as_search(index_pattern))
    except Exception as e:
        raise Exception(f"Elasticsearch aggregation failed: {str(e)}") from e

    return AggregationResponse.from_dict(response)


def group_by(
    query: Query,
    index_pattern: str,
    levels: Sequence[Level],
    direction: str = "desc",
) -> AggregationResponse:
    """
    Multi-level group-by of the documents matching a query.

    Args:
        query: Query selecting the documents
        index_pattern: Index pattern to search
        levels: Aggregation strings, outermost first, optionally paired
            with the metric definitions to order that level by
        direction: asc or desc

    Returns:
        AggregationResponse with one row per bucket path
    """
    tree = build_group_by(levels, direction=direction.lower())
    query.add_aggregations(**tree)
    return execute_aggregation(query, index_pattern)
