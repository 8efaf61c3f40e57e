"""
Environment configuration management.
"""

import os
from typing import Dict, Any, Optional


# Single environment configuration - reads directly from env vars
DEFAULT_CONFIG = {
    "name": "default",
    "elasticsearch": {
        "url": os.getenv("ELASTIC_URL", os.getenv("ELASTICSEARCH_URL", "http://localhost:9200")),
        "username": os.getenv("ELASTIC_USERNAME", os.getenv("ELASTICSEARCH_USERNAME")),
        "password": os.getenv("ELASTIC_PASSWORD", os.getenv("ELASTICSEARCH_PASSWORD")),
        "api_key": os.getenv("ELASTIC_API_KEY", os.getenv("ELASTICSEARCH_API_KEY")),
        "timeout_ms": int(os.getenv("ELASTIC_TIMEOUT", os.getenv("ELASTICSEARCH_TIMEOUT", "30000"))),
        "verify_certs": True,
        "ca_certs": os.getenv("ELASTIC_CA_CERTS"),
    },
    "query": {
        "default_join": os.getenv("ES_QUERY_DEFAULT_JOIN", "AND").upper(),
        "context": os.getenv("ES_QUERY_CONTEXT", "query"),
        "size": int(os.getenv("ES_QUERY_SIZE", "50")),
        "scroll": os.getenv("ES_QUERY_SCROLL", "1m"),
        "max_nesting": int(os.getenv("ES_QUERY_MAX_NESTING", "4")),
        "file_expansion": os.getenv("ES_QUERY_FILE_EXPANSION", "false").lower() in ("1", "true", "yes"),
    },
    "log_level": os.getenv("LOG_LEVEL", "INFO").upper(),
}


def get_current_environment() -> str:
    """
    Get the current environment name.

    Returns:
        Always returns 'default' since we use a single environment
    """
    return "default"


def get_environment_config(environment: Optional[str] = None) -> Dict[str, Any]:
    """
    Get configuration for the environment.

    Args:
        environment: Ignored (kept for compatibility)

    Returns:
        Environment configuration dictionary
    """
    return DEFAULT_CONFIG


def get_elasticsearch_config(environment: Optional[str] = None) -> Dict[str, Any]:
    """
    Get Elasticsearch configuration.

    Args:
        environment: Ignored (kept for compatibility)

    Returns:
        Elasticsearch configuration dictionary
    """
    return DEFAULT_CONFIG["elasticsearch"]


def get_query_defaults(environment: Optional[str] = None) -> Dict[str, Any]:
    """
    Get the defaults used when expanding query strings.

    Keys: default_join (AND/OR), context (query/filter), size, scroll,
    max_nesting (depth bound for nested sub-queries) and file_expansion
    (whether server flows may read value files from local disk).
    """
    return DEFAULT_CONFIG["query"]


def get_log_level(environment: Optional[str] = None) -> str:
    """Log level for the loguru sink."""
    return DEFAULT_CONFIG["log_level"]
