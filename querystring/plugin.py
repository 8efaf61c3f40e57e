"""
Base class for query string token plugins.
"""

from typing import Any, List, Optional, TYPE_CHECKING

from loguru import logger

from es_types.tokens import TokenResult

if TYPE_CHECKING:
    from querystring.parser import QueryString


class Plugin:
    """
    Recognizes one token shape and rewrites it.

    Subclasses implement ``expand()``, returning ``None`` to decline the
    token or a list of TokenResults to claim it. Plugins run in ascending
    ``priority`` order, ties broken by name; the first one to claim a
    token wins.
    """

    priority: int = 50

    def __init__(self, qs: Optional["QueryString"] = None, **options: Any):
        self.qs = qs
        self.options = options
        if "priority" in options:
            self.priority = int(options["priority"])

    @property
    def name(self) -> str:
        return type(self).__name__

    @property
    def fields_meta(self):
        return self.qs.fields_meta if self.qs is not None else {}

    def handle_token(self, token: str) -> Optional[List[TokenResult]]:
        """Expand a token, tagging every result with this plugin's name."""
        logger.debug("{} - evaluating token '{}'", self.name, token)
        results = self.expand(token)
        if results is None:
            return None
        for result in results:
            result.by = self.name
        return results

    def expand(self, token: str) -> Optional[List[TokenResult]]:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"<{self.name} priority={self.priority}>"
