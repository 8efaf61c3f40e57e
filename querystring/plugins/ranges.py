"""
Comparison operators expanded to range queries.

    price:<100       => {"range": {"price": {"lt": "100"}}}
    price:>50,<100   => {"range": {"price": {"gt": "50", "lt": "100"}}}

Supported: ``>`` gt, ``>=`` gte, ``<`` lt, ``<=`` lte. At most one
operator per side of the range; ``price:>50,>=60`` is an error.
"""

import re
from typing import Dict, List, Optional, Tuple

from es_types.tokens import TokenResult
from querystring.errors import RangeConflictError
from querystring.plugin import Plugin
from utils.query_builder import build_range_query


OPERATORS: Dict[str, Tuple[str, str]] = {
    "<": ("upper", "lt"),
    "<=": ("upper", "lte"),
    ">": ("lower", "gt"),
    ">=": ("lower", "gte"),
}
# longest operators first so <= is not read as <
OPERATOR_VALUE = re.compile(
    r"^(%s)(.+)$" % "|".join(re.escape(op) for op in sorted(OPERATORS, key=len, reverse=True))
)


class Ranges(Plugin):
    priority = 20

    def expand(self, token: str) -> Optional[List[TokenResult]]:
        field, _, value = token.partition(":")
        if not field or not value:
            return None

        sides = set()
        bounds: Dict[str, str] = {}
        for part in value.split(","):
            match = OPERATOR_VALUE.match(part)
            if not match:
                continue
            side, op = OPERATORS[match.group(1)]
            if side in sides:
                raise RangeConflictError(
                    f"attempted to set more than one {side}-bound operator in range: {token}"
                )
            sides.add(side)
            bounds[op] = match.group(2)

        if not bounds:
            return None
        return [TokenResult.from_condition(build_range_query(field, bounds))]
