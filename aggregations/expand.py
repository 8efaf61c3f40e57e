"""
Expansion of the compact aggregation grammar into aggregation requests.

A definition string holds one or more ``+`` separated definitions::

    [alias=]type:field[:params]
    [alias=]field

Examples::

    src_ip                 -> {"src_ip": {"terms": {"field": "src_ip", "size": 20}}}
    src_ip:13              -> {"src_ip": {"terms": {"field": "src_ip", "size": 13}}}
    ips=src_ip:size=16     -> {"ips": {"terms": {"field": "src_ip", "size": 16}}}
    date_histogram:ts:1d   -> {"date_histogram.ts": {"date_histogram": {"field": "ts", "calendar_interval": "1d"}}}
    avg:bytes+max:bytes    -> two sibling metric aggregations
"""

import copy
import re
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

from loguru import logger

from es_types.aggregations import AGG_KEY, AggregationNode, get_aggregation_type


DEFINITION_SEPARATOR = "+"
DEFAULT_TERMS_SIZE = 20
DEFAULT_PERCENTS = (25, 50, 75, 90)
DEFAULT_CALENDAR_INTERVAL = "1h"

_ALIAS = re.compile(r"^(\w+)=")
_EXPLICIT_PARAMS = re.compile(r"\w+=")
_PARAM_SPLIT = re.compile(r",(?=\w+=)")
_INTEGER = re.compile(r"^-?\d+$")
_DECIMAL = re.compile(r"^-?(?:\d+\.\d*|\.\d+)$")

Level = Union[str, Tuple[str, Sequence[str]]]


def _coerce(value: str) -> Any:
    if _INTEGER.match(value):
        return int(value)
    if _DECIMAL.match(value):
        return float(value)
    return value


def _whole_number(key: str) -> Callable[[Optional[str]], Dict[str, Any]]:
    def handler(value: Optional[str]) -> Dict[str, Any]:
        if value and value.isdigit():
            return {key: int(value)}
        return {}
    return handler


def _histogram(value: Optional[str]) -> Dict[str, Any]:
    interval = _coerce(value) if value else None
    if isinstance(interval, (int, float)) and interval > 0:
        return {"interval": interval}
    return {}


def _date_histogram(value: Optional[str]) -> Dict[str, Any]:
    return {"calendar_interval": value or DEFAULT_CALENDAR_INTERVAL}


def _percentiles(value: Optional[str]) -> Dict[str, Any]:
    percents = [_coerce(p) for p in value.split(",") if p] if value else []
    return {"percents": percents or list(DEFAULT_PERCENTS)}


POSITIONAL_PARAMS: Dict[str, Callable[[Optional[str]], Dict[str, Any]]] = {
    "terms": _whole_number("size"),
    "significant_terms": _whole_number("size"),
    "rare_terms": _whole_number("max_doc_count"),
    "histogram": _histogram,
    "date_histogram": _date_histogram,
    "geohash_grid": _whole_number("precision"),
    "percentiles": _percentiles,
}


def _explicit_params(param_str: str) -> Dict[str, Any]:
    params: Dict[str, Any] = {}
    for pair in _PARAM_SPLIT.split(param_str):
        key, _, value = pair.partition("=")
        if not key or not value:
            continue
        if "," in value:
            params[key] = [_coerce(v) for v in value.split(",") if v]
        else:
            params[key] = _coerce(value)
    return params


def parse_definition(definition: str) -> AggregationNode:
    """
    Parse a single aggregation definition.

    Unknown aggregation types are not an error: the definition falls back
    to a terms aggregation on the first segment.
    """
    alias = None
    match = _ALIAS.match(definition)
    if match:
        alias = match.group(1)
        definition = definition[match.end():]

    parts = definition.split(":", 2)
    if len(parts) == 1:
        return AggregationNode(
            name=alias or definition,
            type="terms",
            field=definition,
            params={"size": DEFAULT_TERMS_SIZE},
        )

    if get_aggregation_type(parts[0]) is not None:
        agg_type, field = parts[0], parts[1]
        param_str = parts[2] if len(parts) > 2 else None
    else:
        agg_type, field, param_str = "terms", parts[0], parts[1]

    if param_str and _EXPLICIT_PARAMS.search(param_str):
        params = _explicit_params(param_str)
    elif agg_type in POSITIONAL_PARAMS:
        params = POSITIONAL_PARAMS[agg_type](param_str)
    else:
        params = {}

    name = alias or (field if agg_type == "terms" else f"{agg_type}.{field}")
    return AggregationNode(name=name, type=agg_type, field=field, params=params)


def parse_aggregate_string(token: str) -> List[AggregationNode]:
    """Parse every ``+`` separated definition of an aggregation string."""
    return [
        parse_definition(definition)
        for definition in token.split(DEFINITION_SEPARATOR)
        if definition
    ]


def expand_aggregate_string(token: str) -> Dict[str, Any]:
    """
    Expand an aggregation string into the request shape.

    Later definitions with the same name replace earlier ones.
    """
    aggs: Dict[str, Any] = {}
    for node in parse_aggregate_string(token):
        aggs[node.name] = node.body()
    return aggs


def is_single_stat(agg_type: Optional[str]) -> bool:
    """True for metrics producing a single value usable as a bucket sort key."""
    agg = get_aggregation_type(agg_type)
    return agg is not None and agg.single_stat


def wrap_aggregations(
    outer: Union[str, Dict[str, Any]],
    existing: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Wrap an aggregation tree in another aggregation.

    Args:
        outer: Aggregation string or an already expanded aggregation dict
        existing: The tree to nest under every top-level node of ``outer``

    Returns:
        The new tree; ``existing`` is copied, never shared
    """
    wrapper = expand_aggregate_string(outer) if isinstance(outer, str) else copy.deepcopy(outer)
    if existing:
        for body in wrapper.values():
            body[AGG_KEY] = copy.deepcopy(existing)
    return wrapper


def order_aggregations_by(
    tree: Dict[str, Any],
    direction: str,
    definitions: Sequence[str],
) -> Dict[str, Any]:
    """
    Order the top-level bucket aggregations of a tree by metric values.

    Each single-value metric definition becomes a sub-aggregation of the
    orderable bucket nodes (terms, histogram, date_histogram) and a key in
    their ``order`` clause, followed by a ``_count`` tie-break. Dots in
    default names are replaced by underscores since the order path uses
    dots to address values inside multi-value metrics.

    The tree is modified in place and returned.
    """
    order: List[Dict[str, str]] = []
    metrics: Dict[str, Any] = {}
    for definition in definitions:
        for node in parse_aggregate_string(definition):
            if not is_single_stat(node.type):
                logger.debug("Cannot order by {}, not a single value metric", definition)
                continue
            name = node.name.replace(".", "_")
            metrics[name] = node.body()
            order.append({name: direction})

    if not order:
        return tree
    order.append({"_count": "desc"})

    for name, body in tree.items():
        for key in list(body):
            agg = get_aggregation_type(key)
            if key == AGG_KEY or agg is None or not agg.orderable:
                continue
            body[key]["order"] = copy.deepcopy(order)
            body.setdefault(AGG_KEY, {}).update(copy.deepcopy(metrics))
            logger.debug("Ordering aggregation {} by {}", name, list(metrics))
    return tree


def build_group_by(levels: Sequence[Level], direction: str = "desc") -> Dict[str, Any]:
    """
    Build a multi-level group-by from aggregation strings.

    Args:
        levels: Outermost level first; each item is an aggregation string
            or a tuple of the string and the metric definitions to order
            that level by
        direction: asc or desc, applied to every ordered level

    Returns:
        The nested aggregation tree
    """
    tree: Dict[str, Any] = {}
    for level in reversed(list(levels)):
        agg_string, by = (level, ()) if isinstance(level, str) else level
        tree = wrap_aggregations(agg_string, tree)
        if by:
            order_aggregations_by(tree, direction, by)
    return tree
