"""
Pytest configuration and fixtures for the query toolkit tests.
"""

import pytest
import os
import sys
from unittest.mock import Mock, patch

from loguru import logger

# Add the project root to the Python path
project_root = os.path.dirname(os.path.dirname(__file__))
sys.path.insert(0, project_root)


@pytest.fixture
def mock_elasticsearch():
    """Mock Elasticsearch client for testing."""
    mock_es = Mock()

    # Mock search response
    mock_es.search.return_value = {
        "took": 5,
        "timed_out": False,
        "hits": {
            "total": 100,
            "hits": [
                {
                    "_index": "logstash-2024.01.15",
                    "_source": {
                        "@timestamp": "2024-01-15T10:30:00Z",
                        "message": "Failed password for root",
                        "program": "sshd",
                        "src_ip": "10.1.2.3",
                    }
                }
            ]
        }
    }

    mock_es.scroll.return_value = {
        "took": 2,
        "timed_out": False,
        "_scroll_id": "scroll-2",
        "hits": {"total": 100, "hits": []},
    }

    # Mock mapping response
    mock_es.indices.get_mapping.return_value = {
        "logstash-2024.01.15": {
            "mappings": {
                "properties": {
                    "message": {
                        "type": "text",
                        "fields": {"keyword": {"type": "keyword"}},
                    },
                    "src_ip": {"type": "ip"},
                    "geo": {"properties": {"country": {"type": "keyword"}}},
                    "comments": {
                        "type": "nested",
                        "properties": {"author": {"type": "keyword"}},
                    },
                }
            }
        }
    }

    return mock_es


@pytest.fixture
def mock_es_client(mock_elasticsearch):
    """Patch the client factory where the primitives look it up."""
    with patch('tools.primitives.search.get_elasticsearch_client', return_value=mock_elasticsearch), \
         patch('tools.primitives.aggregate.get_elasticsearch_client', return_value=mock_elasticsearch), \
         patch('tools.primitives.stats.get_elasticsearch_client', return_value=mock_elasticsearch):
        yield mock_elasticsearch


@pytest.fixture
def fields_meta():
    """Field metadata like the one derived from a mapping."""
    return {
        "message": {"type": "text"},
        "program": {"type": "keyword"},
        "src_ip": {"type": "ip"},
        "comments": {"type": "nested"},
        "comments.body": {"type": "text"},
    }


@pytest.fixture
def query_string(fields_meta):
    """QueryString with fixed defaults, independent of the environment."""
    from querystring import QueryString
    return QueryString(context="query", default_join="AND", fields_meta=fields_meta, max_depth=4)


@pytest.fixture
def in_tmp_path(tmp_path, monkeypatch):
    """Run the test from an empty temporary directory."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def two_level_result():
    """Aggregation result of src_ip terms with dst_port terms below."""
    return {
        "src_ip": {
            "doc_count_error_upper_bound": 0,
            "sum_other_doc_count": 0,
            "buckets": [
                {
                    "key": "1.2.3.4",
                    "doc_count": 13,
                    "dst_port": {
                        "doc_count_error_upper_bound": 0,
                        "sum_other_doc_count": 0,
                        "buckets": [
                            {"key": 53, "doc_count": 10},
                            {"key": 443, "doc_count": 3},
                        ],
                    },
                },
                {
                    "key": "5.6.7.8",
                    "doc_count": 2,
                    "dst_port": {
                        "doc_count_error_upper_bound": 0,
                        "sum_other_doc_count": 0,
                        "buckets": [{"key": 22, "doc_count": 2}],
                    },
                },
            ],
        }
    }


@pytest.fixture
def log_messages():
    """Messages logged through loguru while the test runs."""
    messages = []
    handler_id = logger.add(lambda message: messages.append(message.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)
