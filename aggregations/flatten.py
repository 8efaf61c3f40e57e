"""
Flattening of aggregation results into rows.

Every path from the root of the result to a leaf bucket becomes one row
of ``(column, value)`` pairs. Given::

    {"ip": {"buckets": [
        {"key": "1.2.3.4", "doc_count": 13,
         "ports": {"buckets": [{"key": 53, "doc_count": 13}]}}
    ]}}

the single row is::

    [("ip", "1.2.3.4"), ("ip.hits", 13), ("ports", 53), ("ports.hits", 13)]
"""

from collections import OrderedDict
from typing import Any, Dict, List, Optional, Tuple


Row = List[Tuple[str, Any]]

NOISE_KEYS = frozenset(("doc_count_error_upper_bound", "sum_other_doc_count"))
BUCKET_KEYS = frozenset(("key", "key_as_string", "doc_count"))


def flatten_aggregations(
    aggregations: Optional[Dict[str, Any]],
    parent: Optional[Row] = None,
) -> List[Row]:
    """
    Flatten an aggregation response into rows.

    Args:
        aggregations: The ``aggregations`` member of a search response
        parent: Columns to prefix every row with

    Returns:
        One row per leaf path, in depth-first order
    """
    if not aggregations:
        return []
    return _flatten(aggregations, list(parent or []), None)


def _flatten(tree: Dict[str, Any], parent: Row, name: Optional[str]) -> List[Row]:
    tree = {k: v for k, v in tree.items() if k not in NOISE_KEYS}

    row = list(parent)
    if name is not None and "key" in tree and "doc_count" in tree:
        row.append((name, tree.get("key_as_string", tree["key"])))
        row.append((f"{name}.hits", tree["doc_count"]))

    bucket_children: Dict[str, List[Dict[str, Any]]] = {}
    for child in sorted(k for k in tree if k not in BUCKET_KEYS):
        value = tree[child]
        if not isinstance(value, dict):
            continue
        if "buckets" in value:
            bucket_children[child] = _bucket_list(value["buckets"])
        else:
            row.extend(_metric_columns(child, value))

    if not bucket_children:
        return [row]

    rows: List[Row] = []
    for child in sorted(bucket_children):
        buckets = bucket_children[child]
        if not buckets:
            rows.append(list(row))
            continue
        for bucket in buckets:
            rows.extend(_flatten(bucket, row, child))
    return rows


def _bucket_list(buckets: Any) -> List[Dict[str, Any]]:
    # keyed responses (filters, ranges with keyed=true) hold a dict of buckets
    if isinstance(buckets, dict):
        return [{"key": key, **bucket} for key, bucket in buckets.items()]
    return list(buckets or [])


def _metric_columns(name: str, metric: Dict[str, Any]) -> Row:
    if "value" in metric:
        return [(name, metric["value"])]

    values = metric.get("values")
    if isinstance(values, dict):
        return [(f"{name}.{key}", value) for key, value in values.items() if value]

    columns: Row = []
    for key, value in metric.items():
        if key == "buckets":
            break
        if isinstance(value, (dict, list)):
            continue
        columns.append((f"{name}.{key}", value))
    return columns


def row_to_dict(row: Row) -> "OrderedDict[str, Any]":
    """Row as an ordered mapping, e.g. for one JSON document per line."""
    return OrderedDict(row)


def row_values(row: Row, include_hits: bool = False) -> List[Any]:
    """Row values only, optionally dropping the ``.hits`` columns."""
    return [
        value for column, value in row
        if include_hits or not column.endswith(".hits")
    ]
