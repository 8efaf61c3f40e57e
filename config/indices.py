"""
Index registry with static field metadata for query expansion.

The field metadata has the same shape as the one derived from a live
mapping (see utils.mapping): ``{field_name: {"type": es_type}}``. Only
the ``type`` key is consulted, by the Text plugin, to decide when a
``field:value`` token must become a ``match`` query.
"""

from typing import Dict, Any, Optional
import os


INDEX_REGISTRY: Dict[str, Dict[str, Any]] = {
    "logstash": {
        "pattern": "logstash-*",
        "timestamp": "@timestamp",
        "fields": {
            "message": {"type": "text"},
            "host": {"type": "keyword"},
            "program": {"type": "keyword"},
            "src_ip": {"type": "ip"},
            "dst_ip": {"type": "ip"},
            "src_port": {"type": "integer"},
            "dst_port": {"type": "integer"},
            "user_agent": {"type": "keyword"},
        },
        "default_size": 50,
    },
    "app_logs": {
        "pattern": "app-logs-*",
        "timestamp": "@timestamp",
        "fields": {
            "json.message": {"type": "text"},
            "json.levelname": {"type": "keyword"},
            "json.hostname": {"type": "keyword"},
            "json.service_name": {"type": "keyword"},
            "json.user_id": {"type": "keyword"},
            "json.extra.request_time": {"type": "float"},
        },
        "default_size": 100,
    },
    "access_logs": {
        "pattern": "access-*",
        "timestamp": "@timestamp",
        "fields": {
            "request": {"type": "text"},
            "referrer": {"type": "text"},
            "clientip": {"type": "ip"},
            "verb": {"type": "keyword"},
            "response": {"type": "integer"},
            "bytes": {"type": "long"},
            "agent": {"type": "keyword"},
        },
        "default_size": 50,
    },
}


def get_index_config(
    index_type: str,
    override_pattern: Optional[str] = None
) -> Dict[str, Any]:
    """
    Get index configuration for an index type.

    Args:
        index_type: Index type (logstash, app_logs, access_logs)
        override_pattern: Optional index pattern override

    Returns:
        Index configuration dictionary

    Raises:
        KeyError: If index_type not found
    """
    index_config = INDEX_REGISTRY.get(index_type)
    if not index_config:
        raise KeyError(f"Unknown index type: {index_type}")

    # Create a copy to avoid modifying the original
    config = index_config.copy()

    if override_pattern:
        config["pattern"] = override_pattern

    # Apply environment variable overrides
    env_pattern = os.getenv(f"ELASTIC_{index_type.upper()}_PATTERN")
    if env_pattern:
        config["pattern"] = env_pattern

    return config


def get_fields_meta(index_type: Optional[str]) -> Dict[str, Dict[str, Any]]:
    """
    Get the static field metadata for an index type.

    Unknown or missing index types yield an empty mapping, which simply
    disables the text-field handling of the Text plugin.
    """
    if not index_type:
        return {}
    try:
        config = get_index_config(index_type)
    except KeyError:
        return {}
    return dict(config.get("fields", {}))
