"""
Index mapping lookups for Elasticsearch.
"""

from typing import Dict, Any

from utils.connection import get_elasticsearch_client
from utils.mapping import fields_meta_from_mapping
from utils.validation import validate_index_pattern


def get_index_mapping(
    index_pattern: str,
) -> Dict[str, Any]:
    """
    Get field mappings for indices.

    Args:
        index_pattern: Index pattern to get mappings for

    Returns:
        Dictionary of index mappings

    Raises:
        Exception: If mapping retrieval fails
    """
    validate_index_pattern(index_pattern)

    es = get_elasticsearch_client()

    try:
        return es.indices.get_mapping(index=index_pattern)

    except Exception as e:
        raise Exception(f"Failed to get index mappings: {str(e)}") from e


def get_fields_meta(
    index_pattern: str,
) -> Dict[str, Dict[str, Any]]:
    """
    Field metadata for the query string compiler, read from the live mapping.

    Returns:
        Mapping of dotted field name to ``{"type": ..., "index": ...}``
    """
    return fields_meta_from_mapping(get_index_mapping(index_pattern))
