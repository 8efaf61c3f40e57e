"""
Nested document queries.

    comments:"author:bob AND votes:>5"

expands the inner tokens with a child QueryString and scopes the result
to the ``comments`` path::

    {"nested": {"path": "comments", "query": {"bool": {...}}}}
"""

import ipaddress
import re
from typing import List, Optional

from es_types.tokens import TokenResult
from querystring.plugin import Plugin


PATH_SPLIT = re.compile(r':"?')
FIELD_VALUE = re.compile(r"^[A-Za-z_][\w.]*:.+")
MAC_ADDRESS = re.compile(r"^[0-9a-fA-F]{2}(?::[0-9a-fA-F]{2}){2,}")
URL = re.compile(r"^\w+://")
RESERVED_PATHS = frozenset(("_prefix_", "_exists_", "_missing_"))


def _is_ip_address(value: str) -> bool:
    try:
        ipaddress.ip_address(value.strip('"'))
    except ValueError:
        return False
    return True


class Nested(Plugin):
    priority = 50

    def expand(self, token: str) -> Optional[List[TokenResult]]:
        if self.qs is None:
            return None

        subtokens = token.split()
        if not subtokens:
            return None
        parts = PATH_SPLIT.split(subtokens[0], maxsplit=1)
        if len(parts) < 2:
            return None
        path, remainder = parts
        if not path or path.lower() in RESERVED_PATHS or not FIELD_VALUE.match(remainder):
            return None
        if any(MAC_ADDRESS.match(t) or URL.match(t) for t in (token, remainder)):
            return None
        if _is_ip_address(remainder):
            return None

        inner = [remainder] + subtokens[1:]
        if inner[-1].endswith('"'):
            inner[-1] = inner[-1][:-1]
        inner = [t for t in inner if t]

        subquery = self.qs.expand_nested(inner)
        return [TokenResult.from_nested(path, subquery.query())]
