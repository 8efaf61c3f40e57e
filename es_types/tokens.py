"""
Token expansion results produced by the query string plugins.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class NestedQuery:
    """A path-scoped sub-query."""
    path: str
    query: Dict[str, Any]

    def to_dict(self) -> Dict[str, Any]:
        return {"path": self.path, "query": self.query}


@dataclass
class TokenResult:
    """
    One rewritten piece of a token.

    Exactly one of ``query_string``, ``condition`` or ``nested`` is set.
    ``invert`` sends the following conditions to must_not until a result
    without it is processed. ``dangles`` marks bare words (AND, OR, NOT)
    that cannot start or end the free-text query.
    """
    query_string: Optional[str] = None
    condition: Optional[Dict[str, Any]] = None
    nested: Optional[NestedQuery] = None
    invert: bool = False
    dangles: bool = False
    by: Optional[str] = None

    @classmethod
    def fragment(
        cls,
        text: str,
        dangles: bool = False,
        invert: bool = False,
    ) -> "TokenResult":
        """Free-text fragment folded into the query_string query."""
        return cls(query_string=text, dangles=dangles, invert=invert)

    @classmethod
    def from_condition(cls, condition: Dict[str, Any]) -> "TokenResult":
        """Structured clause added to the bool query."""
        return cls(condition=condition)

    @classmethod
    def from_nested(cls, path: str, query: Dict[str, Any]) -> "TokenResult":
        return cls(nested=NestedQuery(path=path, query=query))

    @property
    def kind(self) -> str:
        if self.nested is not None:
            return "nested"
        if self.condition is not None:
            return "condition"
        return "query_string"

    def to_dict(self) -> Dict[str, Any]:
        """Debug representation, only the members that are set."""
        data: Dict[str, Any] = {}
        if self.query_string is not None:
            data["query_string"] = self.query_string
        if self.condition is not None:
            data["condition"] = self.condition
        if self.nested is not None:
            data["nested"] = self.nested.to_dict()
        if self.invert:
            data["invert"] = True
        if self.dangles:
            data["dangles"] = True
        if self.by:
            data["_by"] = self.by
        return data
