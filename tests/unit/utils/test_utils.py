"""
Unit tests for validation, mapping and response parsing utilities.
"""

import pytest

from es_types.primitives import AggregationResponse, ElasticResponse
from utils.mapping import fields_meta_from_mapping
from utils.response_parser import parse_aggregations, parse_hits, parse_total
from utils.validation import (
    is_time_constant,
    validate_context,
    validate_index_pattern,
    validate_join,
    validate_size,
)


class TestValidation:
    """Test cases for input validation."""

    @pytest.mark.parametrize("pattern", ["logstash-*", "app-logs-*,access-*", "logs.2024"])
    def test_valid_index_patterns(self, pattern):
        validate_index_pattern(pattern)

    @pytest.mark.parametrize("pattern", ["", "_all", "logs/*", "logs *"])
    def test_invalid_index_patterns(self, pattern):
        with pytest.raises(ValueError):
            validate_index_pattern(pattern)

    def test_validate_size(self):
        assert validate_size(0) == 0
        assert validate_size(-5) == 0
        assert validate_size(20000) == 10000

    def test_validate_join(self):
        assert validate_join("or") == "OR"
        with pytest.raises(ValueError):
            validate_join("not")
        with pytest.raises(ValueError):
            validate_join(None)

    def test_validate_context(self):
        assert validate_context("filter") == "filter"
        with pytest.raises(ValueError):
            validate_context("must")

    @pytest.mark.parametrize("value,expected", [
        ("1m", True),
        ("30s", True),
        ("500ms", True),
        ("2d", True),
        ("1 m", False),
        ("m", False),
        (60, False),
        (None, False),
    ])
    def test_time_constants(self, value, expected):
        assert is_time_constant(value) is expected


class TestFieldsMetaFromMapping:
    """Test cases for deriving field metadata from a mapping."""

    def test_walks_properties(self, mock_elasticsearch):
        meta = fields_meta_from_mapping(mock_elasticsearch.indices.get_mapping.return_value)

        assert meta["message"]["type"] == "text"
        assert meta["message.keyword"]["type"] == "keyword"
        assert meta["src_ip"]["type"] == "ip"
        assert meta["geo.country"]["type"] == "keyword"
        assert "geo" not in meta
        assert meta["comments"]["type"] == "nested"
        assert meta["comments.author"]["type"] == "keyword"

    def test_first_index_wins(self):
        response = {
            "a": {"mappings": {"properties": {"status": {"type": "keyword"}}}},
            "b": {"mappings": {"properties": {"status": {"type": "integer"}}}},
        }

        assert fields_meta_from_mapping(response)["status"] == {"type": "keyword", "index": "a"}


class TestResponseParser:
    """Test cases for response parsing."""

    @pytest.mark.parametrize("hits,expected", [
        ({"total": {"value": 7, "relation": "eq"}}, 7),
        ({"total": 3}, 3),
        ({}, 0),
    ])
    def test_parse_total(self, hits, expected):
        assert parse_total({"hits": hits}) == expected

    def test_missing_sections(self):
        assert parse_hits({}) == []
        assert parse_aggregations({"aggregations": None}) == {}

    def test_elastic_response(self, mock_elasticsearch):
        response = ElasticResponse.from_dict(mock_elasticsearch.search.return_value)

        assert response.total == 100
        assert response.hits[0]["_source"]["program"] == "sshd"
        assert response.aggregations is None
        assert response._scroll_id is None

    def test_aggregation_response_rows(self):
        response = AggregationResponse.from_dict({
            "took": 2,
            "aggregations": {
                "program": {"buckets": [{"key": "sshd", "doc_count": 4}]},
            },
        })

        assert response.rows == [[("program", "sshd"), ("program.hits", 4)]]
