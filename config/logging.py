"""
Logging configuration.

Everything goes to stderr: stdout carries the MCP stdio protocol.
"""

import sys
from typing import Optional

from loguru import logger

from .environments import get_log_level


LOG_FORMAT = (
    "<cyan>{time:YYYY-MM-DDTHH:mm:ss.SSSZ}</cyan> <level>{level:8}</level> "
    "{message} <cyan>{name}:{function}():{line}</cyan>"
)


def configure_logging(level: Optional[str] = None) -> int:
    """
    Replace loguru's default sink with a stderr sink.

    Args:
        level: Minimum level, defaults to LOG_LEVEL from the environment

    Returns:
        The id of the added sink
    """
    logger.remove()
    return logger.add(
        sys.stderr,
        format=LOG_FORMAT,
        colorize=True,
        backtrace=True,
        diagnose=False,
        level=level or get_log_level(),
    )
