"""
Expand ``_<type>_`` tokens into the matching query.

    _prefix_:user_agent:Go  => {"prefix": {"user_agent": "Go"}}
    _prefix_:user_agent=Go  => {"prefix": {"user_agent": "Go"}}
"""

import re
from typing import Callable, Dict, List, Optional

from es_types.tokens import TokenResult
from querystring.plugin import Plugin
from utils.query_builder import build_field_query


FIELD_TEXT_SPLIT = re.compile(r"[:=]")


def _prefix(value: str) -> Optional[List[TokenResult]]:
    parts = FIELD_TEXT_SPLIT.split(value, maxsplit=1)
    if len(parts) < 2 or not parts[0] or not parts[1]:
        return None
    field, text = parts
    return [TokenResult.from_condition(build_field_query("prefix", field, text))]


UNDERSCORED: Dict[str, Callable[[str], Optional[List[TokenResult]]]] = {
    "_prefix_": _prefix,
}


class Underscored(Plugin):
    priority = 20

    def expand(self, token: str) -> Optional[List[TokenResult]]:
        key, sep, value = token.partition(":")
        handler = UNDERSCORED.get(key.lower())
        if handler is None or not sep:
            return None
        return handler(value)
