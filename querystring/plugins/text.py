"""
Field matching operators.

    =status:200          => {"term": {"status": "200"}}
    *user_agent:Mozilla* => {"wildcard": {"user_agent": "Mozilla*"}}
    /path:.*\\.php       => {"regexp": {"path": ".*\\.php"}}
    ~user:jonh           => {"fuzzy": {"user": "jonh"}}
    +message:login failed => {"match_phrase": {"message": "login failed"}}

Fields mapped as ``text`` are analyzed, so a term lookup would almost
never match: plain ``field:value`` and ``=field:value`` on those become
a ``match`` query instead.
"""

import re
from typing import List, Optional

from es_types.tokens import TokenResult
from querystring.plugin import Plugin
from utils.query_builder import build_field_query


OPERATORS = {
    "=": "term",
    "*": "wildcard",
    "/": "regexp",
    "~": "fuzzy",
    "+": "match_phrase",
}
FIELD_TOKEN = re.compile(r"^[^:]+:")


def _unquote(value: str) -> str:
    if len(value) > 1 and value[0] == value[-1] == '"':
        return value[1:-1]
    return value


class Text(Plugin):
    priority = 10

    def _is_text(self, field: str) -> bool:
        meta = self.fields_meta.get(field) or {}
        return meta.get("type") == "text"

    def expand(self, token: str) -> Optional[List[TokenResult]]:
        if not FIELD_TOKEN.match(token):
            return None

        field, _, value = token.partition(":")
        matcher = None
        if field[0] in OPERATORS:
            matcher = OPERATORS[field[0]]
            field = field[1:]

        if matcher in (None, "term") and self._is_text(field):
            matcher = "match"

        if matcher is None or not field or not value:
            return None
        return [TokenResult.from_condition(build_field_query(matcher, field, _unquote(value)))]
