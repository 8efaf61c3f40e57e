"""
Unit tests for primitive search operations.
"""

import pytest

from es_types.primitives import ElasticResponse
from es_types.query import Query
from tools.primitives.search import clear_scroll, execute_query, iterate_hits, scroll_results


@pytest.fixture
def query():
    query = Query(size=10)
    query.add_bool(must={"term": {"program": "sshd"}})
    return query


class TestExecuteQuery:
    """Test cases for execute_query function."""

    def test_search_basic_query(self, mock_es_client, query):
        """Test basic search functionality."""
        result = execute_query(query, "logstash-*")

        assert isinstance(result, ElasticResponse)
        assert result.took == 5
        assert result.timed_out is False
        assert result.total == 100
        assert len(result.hits) == 1

        # Verify the mock was called correctly
        mock_es_client.search.assert_called_once()
        call_args = mock_es_client.search.call_args
        assert call_args[1]["index"] == "logstash-*"
        assert call_args[1]["body"]["query"] == {"bool": {"must": [{"term": {"program": "sshd"}}]}}
        assert call_args[1]["body"]["size"] == 10
        assert call_args[1]["rest_total_hits_as_int"] is True

    def test_size_validation(self, mock_es_client, query):
        """Test that size parameter is clamped."""
        query.size = 50000
        execute_query(query, "logstash-*")

        assert mock_es_client.search.call_args[1]["body"]["size"] == 10000

    def test_invalid_index_pattern(self, mock_es_client, query):
        """Test invalid index pattern handling."""
        with pytest.raises(ValueError):
            execute_query(query, "")
        with pytest.raises(ValueError):
            execute_query(query, "_internal")

        mock_es_client.search.assert_not_called()

    def test_elasticsearch_error(self, mock_es_client, query):
        """Test Elasticsearch error handling."""
        mock_es_client.search.side_effect = Exception("Connection failed")

        with pytest.raises(Exception) as exc_info:
            execute_query(query, "logstash-*")

        assert "Elasticsearch search failed" in str(exc_info.value)
        assert "Connection failed" in str(exc_info.value)

    def test_scroll_id_recorded(self, mock_es_client, query):
        """Test the scroll id of the response is kept on the query."""
        mock_es_client.search.return_value = {
            "took": 1,
            "_scroll_id": "scroll-1",
            "hits": {"total": 1, "hits": [{"_id": "1"}]},
        }
        query.set_scan_scroll("30s")

        execute_query(query, "logstash-*")

        assert query.scroll_id == "scroll-1"
        assert mock_es_client.search.call_args[1]["scroll"] == "30s"


class TestScrolling:
    """Test cases for scroll operations."""

    def test_scroll_results(self, mock_es_client, query):
        query.set_scan_scroll("1m")
        query.set_scroll_id("scroll-1")

        result = scroll_results(query)

        assert isinstance(result, ElasticResponse)
        mock_es_client.scroll.assert_called_once_with(
            scroll_id="scroll-1",
            scroll="1m",
            rest_total_hits_as_int=True,
        )
        assert query.scroll_id == "scroll-2"

    def test_scroll_without_context(self, mock_es_client, query):
        with pytest.raises(ValueError):
            scroll_results(query)

    def test_scroll_error(self, mock_es_client, query):
        query.set_scroll_id("scroll-1")
        mock_es_client.scroll.side_effect = Exception("Scroll expired")

        with pytest.raises(Exception) as exc_info:
            scroll_results(query)

        assert "Elasticsearch scroll failed" in str(exc_info.value)

    def test_clear_scroll(self, mock_es_client, query):
        query.set_scroll_id("scroll-1")
        clear_scroll(query)

        mock_es_client.clear_scroll.assert_called_once_with(scroll_id="scroll-1")
        assert query.scroll_id is None

    def test_clear_scroll_errors_ignored(self, mock_es_client, query):
        query.set_scroll_id("scroll-1")
        mock_es_client.clear_scroll.side_effect = Exception("gone")

        clear_scroll(query)

        assert query.scroll_id is None

    def test_clear_scroll_without_context(self, mock_es_client, query):
        clear_scroll(query)
        mock_es_client.clear_scroll.assert_not_called()

    def test_iterate_hits(self, mock_es_client, query):
        mock_es_client.search.return_value = {
            "_scroll_id": "scroll-1",
            "hits": {"total": 3, "hits": [{"_id": "1"}, {"_id": "2"}]},
        }
        mock_es_client.scroll.side_effect = [
            {"_scroll_id": "scroll-2", "hits": {"total": 3, "hits": [{"_id": "3"}]}},
            {"_scroll_id": "scroll-2", "hits": {"total": 3, "hits": []}},
        ]

        hits = list(iterate_hits(query, "logstash-*"))

        assert [hit["_id"] for hit in hits] == ["1", "2", "3"]
        assert mock_es_client.search.call_args[1]["body"]["sort"] == ["_doc"]
        mock_es_client.clear_scroll.assert_called_once_with(scroll_id="scroll-2")

    def test_iterate_hits_limit(self, mock_es_client, query):
        mock_es_client.search.return_value = {
            "_scroll_id": "scroll-1",
            "hits": {"total": 3, "hits": [{"_id": "1"}, {"_id": "2"}]},
        }

        hits = list(iterate_hits(query, "logstash-*", max_hits=1))

        assert len(hits) == 1
        mock_es_client.scroll.assert_not_called()
        mock_es_client.clear_scroll.assert_called_once_with(scroll_id="scroll-1")
