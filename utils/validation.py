"""
Input validation utilities.
"""

import re
from typing import Any


TIME_CONSTANT = re.compile(r"^\d+(?:nanos|micros|ms|s|m|h|d)$")

JOIN_OPERATORS = ("AND", "OR")
QUERY_CONTEXTS = ("query", "filter")


def validate_index_pattern(pattern: str) -> None:
    """
    Validate an Elasticsearch index pattern.

    Args:
        pattern: Index pattern to validate, comma separated patterns allowed

    Raises:
        ValueError: If pattern is invalid
    """
    if not pattern:
        raise ValueError("Index pattern cannot be empty")

    if pattern.startswith("_"):
        raise ValueError("Index pattern cannot start with underscore")

    invalid_chars = re.findall(r'[^a-zA-Z0-9\-_.*,]', pattern)
    if invalid_chars:
        raise ValueError(f"Invalid characters in index pattern: {invalid_chars}")


def validate_size(size: int, max_size: int = 10000) -> int:
    """
    Validate and clamp size parameter.

    Zero is allowed: aggregation-only requests fetch no documents.

    Args:
        size: Requested size
        max_size: Maximum allowed size

    Returns:
        Valid size value
    """
    return clamp_value(size, min_value=0, max_value=max_size)


def validate_join(join: str) -> str:
    """
    Validate the default joining operator for free-text fragments.

    Returns:
        The operator upper-cased

    Raises:
        ValueError: If the operator is not AND or OR
    """
    value = (join or "").upper()
    if value not in JOIN_OPERATORS:
        raise ValueError(f"default_join must be one of {JOIN_OPERATORS}, got: {join!r}")
    return value


def validate_context(context: str) -> str:
    """
    Validate the bool context conditions are added to.

    Raises:
        ValueError: If the context is not query or filter
    """
    if context not in QUERY_CONTEXTS:
        raise ValueError(f"context must be one of {QUERY_CONTEXTS}, got: {context!r}")
    return context


def is_time_constant(value: Any) -> bool:
    """Check for an Elasticsearch time unit string like 30s or 1m."""
    return isinstance(value, str) and bool(TIME_CONSTANT.match(value))


def clamp_value(value: Any, min_value: Any, max_value: Any) -> Any:
    """
    Clamp a value between min and max.

    Args:
        value: Value to clamp
        min_value: Minimum allowed value
        max_value: Maximum allowed value

    Returns:
        Clamped value
    """
    return max(min_value, min(value, max_value))
