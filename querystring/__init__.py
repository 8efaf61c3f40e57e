"""
Query string expansion: tokens in, Elasticsearch bool/nested queries out.
"""

from .errors import (
    QueryStringError,
    RangeConflictError,
    FileExpansionError,
    NestingDepthError,
)
from .plugin import Plugin
from .plugins import DEFAULT_PLUGINS
from .parser import QueryString

__all__ = [
    "QueryString",
    "Plugin",
    "DEFAULT_PLUGINS",
    "QueryStringError",
    "RangeConflictError",
    "FileExpansionError",
    "NestingDepthError",
]
