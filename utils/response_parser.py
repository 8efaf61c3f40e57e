"""
Response parsing utilities for Elasticsearch.
"""

from typing import Dict, Any, List, Optional


def parse_hits(response: Dict[str, Any]) -> List[Dict[str, Any]]:
    """
    Extract hits from search response.

    Args:
        response: Elasticsearch response

    Returns:
        List of hit documents
    """
    return response.get("hits", {}).get("hits", [])


def parse_total(response: Dict[str, Any]) -> int:
    """
    Extract the total hit count.

    Handles both the integer form (rest_total_hits_as_int) and the
    ``{"value": n}`` object form.
    """
    total = response.get("hits", {}).get("total", 0)
    if isinstance(total, dict):
        total = total.get("value", 0)
    return total or 0


def parse_aggregations(response: Dict[str, Any]) -> Dict[str, Any]:
    """
    Extract aggregations from response.

    Args:
        response: Elasticsearch response

    Returns:
        Aggregations dict
    """
    return response.get("aggregations") or {}


def parse_scroll_id(response: Optional[Dict[str, Any]]) -> Optional[str]:
    """Scroll id of a search or scroll response, if any."""
    if not response:
        return None
    return response.get("_scroll_id")
