"""
Primitive search operations for Elasticsearch.
"""

from typing import Any, Dict, Iterator, Optional

from loguru import logger

from es_types.primitives import ElasticResponse
from es_types.query import Query
from utils.connection import get_elasticsearch_client
from utils.response_parser import parse_scroll_id
from utils.validation import validate_index_pattern, validate_size


def execute_query(
    query: Query,
    index_pattern: str,
) -> ElasticResponse:
    """
    Run a Query against an index pattern.

    The Query renders its own request body and URI parameters. When the
    query keeps a scroll context open, the returned scroll id is recorded
    on the query so ``scroll_results`` can continue from it.

    Args:
        query: Query built by the query string compiler or by hand
        index_pattern: Index pattern to search (e.g., "logs-*")

    Returns:
        ElasticResponse with search results

    Raises:
        ValueError: If the index pattern is invalid
        Exception: If the Elasticsearch search fails
    """
    validate_index_pattern(index_pattern)
    query.size = validate_size(query.size)

    es = get_elasticsearch_client()
    logger.debug("Searching {} with {}", index_pattern, query.to_dict())

    try:
        response = es.search(**query.as_search(index_pattern))
    except Exception as e:
        raise Exception(f"Elasticsearch search failed: {str(e)}") from e

    query.set_scroll_id(parse_scroll_id(response))
    return ElasticResponse.from_dict(response)


def scroll_results(query: Query) -> ElasticResponse:
    """
    Fetch the next page of a scrolled search.

    Must follow an ``execute_query`` with scroll enabled
    (see ``Query.set_scan_scroll``).

    Raises:
        ValueError: If the query holds no scroll id
        Exception: If the scroll fails
    """
    if not query.scroll_id:
        raise ValueError("Query has no open scroll context")

    es = get_elasticsearch_client()

    try:
        response = es.scroll(
            scroll_id=query.scroll_id,
            scroll=query.scroll or "1m",
            rest_total_hits_as_int=query.rest_total_hits_as_int,
        )
    except Exception as e:
        raise Exception(f"Elasticsearch scroll failed: {str(e)}") from e

    query.set_scroll_id(parse_scroll_id(response) or query.scroll_id)
    return ElasticResponse.from_dict(response)


def clear_scroll(query: Query) -> None:
    """
    Release the scroll context held by a query.

    Best effort: the context expires on its own after the scroll timeout.
    """
    if not query.scroll_id:
        return

    es = get_elasticsearch_client()

    try:
        es.clear_scroll(scroll_id=query.scroll_id)
    except Exception as e:
        logger.warning("Failed to clear scroll context: {}", e)
    finally:
        query.clear_scroll_id()


def iterate_hits(
    query: Query,
    index_pattern: str,
    max_hits: Optional[int] = None,
    ctxt_life: Optional[str] = None,
) -> Iterator[Dict[str, Any]]:
    """
    Yield every hit of a query, scrolling in ``_doc`` order.

    Args:
        query: Query to run; it is switched to a scan scroll
        index_pattern: Index pattern to search
        max_hits: Stop after this many hits
        ctxt_life: Scroll context lifetime, e.g. "1m"
    """
    query.set_scan_scroll(ctxt_life)
    seen = 0
    try:
        response = execute_query(query, index_pattern)
        while response.hits:
            for hit in response.hits:
                yield hit
                seen += 1
                if max_hits is not None and seen >= max_hits:
                    return
            response = scroll_results(query)
    finally:
        clear_scroll(query)
