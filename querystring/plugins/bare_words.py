"""
Bare words: fixing case and tracking dangling words.

    and => AND
    or  => OR
    not => NOT, and the following condition is negated
"""

from typing import List, Optional

from es_types.tokens import TokenResult
from querystring.plugin import Plugin


BARE_WORDS = {
    "and": ("AND", False),
    "or": ("OR", False),
    "not": ("NOT", True),
}


class BareWords(Plugin):
    priority = 30

    def expand(self, token: str) -> Optional[List[TokenResult]]:
        word = BARE_WORDS.get(token.lower())
        if word is None:
            return None
        text, invert = word
        return [TokenResult.fragment(text, dangles=True, invert=invert)]
