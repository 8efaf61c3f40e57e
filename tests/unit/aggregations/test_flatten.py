"""
Unit tests for flattening aggregation results.
"""

from aggregations.expand import build_group_by
from aggregations.flatten import flatten_aggregations, row_to_dict, row_values


class TestFlattenAggregations:
    """Test cases for flatten_aggregations."""

    def test_two_level_buckets(self):
        result = {
            "ip": {"buckets": [
                {"key": "1.2.3.4", "doc_count": 13,
                 "ports": {"buckets": [{"key": 53, "doc_count": 13}]}},
            ]}
        }

        [row] = flatten_aggregations(result)
        assert row_values(row, include_hits=True) == ["1.2.3.4", 13, 53, 13]
        assert row == [("ip", "1.2.3.4"), ("ip.hits", 13), ("ports", 53), ("ports.hits", 13)]

    def test_one_row_per_leaf(self, two_level_result):
        rows = flatten_aggregations(two_level_result)

        assert [row_values(row) for row in rows] == [
            ["1.2.3.4", 53],
            ["1.2.3.4", 443],
            ["5.6.7.8", 22],
        ]

    def test_noise_keys_dropped(self, two_level_result):
        for row in flatten_aggregations(two_level_result):
            columns = [column for column, _ in row]
            assert "sum_other_doc_count" not in " ".join(columns)
            assert "doc_count_error_upper_bound" not in " ".join(columns)

    def test_metrics(self):
        result = {
            "src_ip": {"buckets": [{
                "key": "1.2.3.4",
                "doc_count": 4,
                "avg_bytes": {"value": 512.0},
                "rt": {"values": {"50.0": 12.0, "99.0": 0}},
                "bytes": {"count": 4, "min": 1.0, "max": 9.0},
            }]}
        }

        [row] = flatten_aggregations(result)
        assert row_to_dict(row) == {
            "src_ip": "1.2.3.4",
            "src_ip.hits": 4,
            "avg_bytes": 512.0,
            "bytes.count": 4,
            "bytes.min": 1.0,
            "bytes.max": 9.0,
            "rt.50.0": 12.0,
        }

    def test_key_as_string(self):
        result = {"ts": {"buckets": [
            {"key": 1700000000000, "key_as_string": "2023-11-14T22:13:20Z", "doc_count": 1},
        ]}}

        [row] = flatten_aggregations(result)
        assert row[0] == ("ts", "2023-11-14T22:13:20Z")

    def test_empty_bucket_list_keeps_parent_row(self):
        result = {"ip": {"buckets": [
            {"key": "1.2.3.4", "doc_count": 1, "ports": {"buckets": []}},
        ]}}

        assert flatten_aggregations(result) == [[("ip", "1.2.3.4"), ("ip.hits", 1)]]

    def test_keyed_buckets(self):
        result = {"levels": {"buckets": {
            "errors": {"doc_count": 3},
            "warnings": {"doc_count": 1},
        }}}

        assert [row_values(row) for row in flatten_aggregations(result)] == [["errors"], ["warnings"]]

    def test_empty(self):
        assert flatten_aggregations({}) == []
        assert flatten_aggregations(None) == []

    def test_parent_prefix(self):
        [row] = flatten_aggregations({"avg_bytes": {"value": 1.5}}, parent=[("window", "1h")])
        assert row == [("window", "1h"), ("avg_bytes", 1.5)]

    def test_expand_then_flatten(self):
        """A result shaped like an expanded tree yields one row per key combination."""
        tree = build_group_by(["src_ip", "dst_port"])
        outer, inner = list(tree), list(tree["src_ip"]["aggregations"])

        result = {
            outer[0]: {"buckets": [
                {"key": ip, "doc_count": 2, inner[0]: {"buckets": [
                    {"key": port, "doc_count": 1} for port in (22, 80)
                ]}}
                for ip in ("10.0.0.1", "10.0.0.2")
            ]}
        }

        rows = flatten_aggregations(result)
        assert [row_values(row) for row in rows] == [
            ["10.0.0.1", 22],
            ["10.0.0.1", 80],
            ["10.0.0.2", 22],
            ["10.0.0.2", 80],
        ]
        assert [column for column, _ in rows[0]] == [
            "src_ip", "src_ip.hits", "dst_port", "dst_port.hits",
        ]
