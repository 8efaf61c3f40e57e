r"""
Escape characters that break Lucene query string syntax.

    path:/var/log/messages => path:\/var\/log\/messages

Characters already preceded by a backslash are left alone, so escaping
is never applied twice.
"""

import re
from typing import List, Optional

from es_types.tokens import TokenResult
from querystring.plugin import Plugin


UNESCAPED = re.compile(r"(?<!\\)([ /()])")


class AutoEscape(Plugin):
    priority = 75

    def expand(self, token: str) -> Optional[List[TokenResult]]:
        escaped = UNESCAPED.sub(r"\\\1", token)
        if escaped == token:
            return None
        return [TokenResult.fragment(escaped)]
