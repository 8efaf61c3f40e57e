"""
Query string assembler.

Turns command-line style tokens into a Query: every token runs through
the plugin chain, structured conditions go to the bool query and the
leftover free text is joined into a single query_string query.

Example:
    qs = QueryString(default_join="AND")
    query = qs.expand_query_string("src_ip:10.0/8", "not", "=status:200", "error")
    query.query()
    # {"bool": {"must": [{"range": {...}}, {"query_string": {"query": "error"}}],
    #           "must_not": [{"term": {"status": "200"}}]}}
"""

from typing import Any, Dict, Iterable, List, Optional

from loguru import logger

from config.environments import get_query_defaults
from es_types.query import Query
from es_types.tokens import TokenResult
from querystring.errors import NestingDepthError
from querystring.plugin import Plugin
from querystring.plugins import DEFAULT_PLUGINS
from utils.query_builder import build_query_string
from utils.validation import validate_context, validate_join


JOINING_WORDS = frozenset(("AND", "OR"))
OPERATOR_WORDS = frozenset(("AND", "OR", "NOT"))


class QueryString:
    """
    Expands query string tokens into a Query.

    Args:
        context: "query" adds conditions to must, "filter" to filter
        default_join: AND or OR, inserted between adjacent free-text terms
        fields_meta: Field name to mapping info, e.g. {"message": {"type": "text"}}
        plugin_options: Options per plugin, keyed by lower-cased plugin name;
            "priority" overrides the plugin priority, "enabled": False drops it
        extra_plugins: Additional Plugin instances
        depth: Nesting level of this instance
        max_depth: Deepest nesting level allowed
    """

    def __init__(
        self,
        context: Optional[str] = None,
        default_join: Optional[str] = None,
        fields_meta: Optional[Dict[str, Dict[str, Any]]] = None,
        plugin_options: Optional[Dict[str, Dict[str, Any]]] = None,
        extra_plugins: Optional[Iterable[Plugin]] = None,
        depth: int = 0,
        max_depth: Optional[int] = None,
    ):
        defaults = get_query_defaults()
        self.context = validate_context(context or defaults["context"])
        self.default_join = validate_join(default_join or defaults["default_join"])
        self.fields_meta = fields_meta or {}
        self.plugin_options = plugin_options or {}
        self.extra_plugins = list(extra_plugins or [])
        self.depth = depth
        self.max_depth = defaults["max_nesting"] if max_depth is None else max_depth
        self._plugins: Optional[List[Plugin]] = None

    @property
    def section(self) -> str:
        return "must" if self.context == "query" else "filter"

    @property
    def plugins(self) -> List[Plugin]:
        """Plugins in the order they are tried."""
        if self._plugins is None:
            self._plugins = self._load_plugins()
        return self._plugins

    def _load_plugins(self) -> List[Plugin]:
        plugins = []
        for cls in DEFAULT_PLUGINS:
            options = dict(self.plugin_options.get(cls.__name__.lower(), {}))
            if not options.pop("enabled", True):
                logger.debug("Plugin {} disabled", cls.__name__)
                continue
            plugins.append(cls(qs=self, **options))

        for plugin in self.extra_plugins:
            if plugin.qs is None:
                plugin.qs = self
            plugins.append(plugin)

        plugins.sort(key=lambda p: (p.priority, p.name))
        for plugin in plugins:
            logger.debug("Loaded {} with priority:{}", plugin.name, plugin.priority)
        return plugins

    def classify(self, token: str) -> List[TokenResult]:
        """Run a token through the plugins; the first claim wins."""
        for plugin in self.plugins:
            results = plugin.handle_token(token)
            if results is not None:
                return results
        return [TokenResult.fragment(token)]

    def expand_query_string(self, *tokens: str) -> Query:
        """
        Expand tokens into a Query.

        Conditions following a ``not`` land in must_not, everything else
        in the context section. Free text is joined with ``default_join``.
        """
        query = Query(fields_meta=self.fields_meta)
        processed = [result for token in tokens for result in self.classify(token)]
        logger.debug("Processed parts: {}", [part.to_dict() for part in processed])

        qs: List[str] = []
        dangling: List[str] = []
        invert = False
        for part in processed:
            if part.dangles:
                dangling.append(part.query_string)
            elif part.nested is not None:
                query.set_nested(part.nested.path, part.nested.query)
                dangling = []
            elif part.condition is not None:
                query.add_bool(**{"must_not" if invert else self.section: part.condition})
                dangling = []
            elif part.query_string is not None:
                qs.extend(dangling)
                qs.append(part.query_string)
                dangling = []
            invert = part.invert

        qs = self.join_fragments(qs)
        if qs:
            query.add_bool(**{self.section: build_query_string(" ".join(qs))})
        return query

    def join_fragments(self, qs: List[str]) -> List[str]:
        """
        Drop operators that cannot start or end the free text and insert
        ``default_join`` between adjacent terms.

            ["AND", "a", "b", "OR", "c", "NOT"] => ["a", "AND", "b", "OR", "c"]
        """
        qs = list(qs)
        while qs and qs[-1] in OPERATOR_WORDS:
            qs.pop()
        while qs and qs[0] in JOINING_WORDS:
            qs.pop(0)
        if len(qs) < 2:
            return qs

        joined = [qs[0]]
        for left, right in zip(qs, qs[1:]):
            if left not in OPERATOR_WORDS and right not in JOINING_WORDS:
                joined.append(self.default_join)
            joined.append(right)
        return joined

    def expand_nested(self, tokens: List[str]) -> Query:
        """Expand the tokens of a nested sub-query one level deeper."""
        depth = self.depth + 1
        if depth > self.max_depth:
            raise NestingDepthError(f"Nested queries deeper than {self.max_depth} levels")

        child = QueryString(
            context=self.context,
            default_join=self.default_join,
            fields_meta=self.fields_meta,
            plugin_options=self.plugin_options,
            extra_plugins=self.extra_plugins,
            depth=depth,
            max_depth=self.max_depth,
        )
        return child.expand_query_string(*tokens)
