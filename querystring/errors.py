"""
Errors raised while expanding query strings.

These abort query construction: each one means the resulting query
would not say what the operator asked for.
"""


class QueryStringError(ValueError):
    """Base class for query string expansion errors."""


class RangeConflictError(QueryStringError):
    """A range token sets two operators on the same side of the range."""


class FileExpansionError(QueryStringError):
    """An expansion file was found but could not produce any values."""


class NestingDepthError(QueryStringError):
    """Nested sub-queries are nested deeper than allowed."""
