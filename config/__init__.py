"""
Configuration management for the query toolkit.
"""

from .indices import INDEX_REGISTRY, get_index_config, get_fields_meta
from .environments import (
    get_environment_config,
    get_current_environment,
    get_elasticsearch_config,
    get_query_defaults,
)
from .logging import configure_logging

__all__ = [
    "INDEX_REGISTRY",
    "get_index_config",
    "get_fields_meta",
    "get_environment_config",
    "get_current_environment",
    "get_elasticsearch_config",
    "get_query_defaults",
    "configure_logging",
]
