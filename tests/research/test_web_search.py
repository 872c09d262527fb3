"""Tests for the DuckDuckGo-backed web searcher."""

import time
from unittest.mock import patch

import pytest

from newsdesk.research.web_search import WebSearcher, WebSearchResponse, WebSearchResult, clean_query


class TestCleanQuery:
    """Conversational prefixes are stripped from chat messages."""

    @pytest.mark.parametrize("message,expected", [
        ("Please ceasefire talks", "ceasefire talks"),
        ("tell me about the rail strike", "the rail strike"),
        ("  What is inflation doing?  ", "inflation doing?"),
        ("Rail strike latest", "Rail strike latest"),
    ])
    def test_prefixes(self, message, expected):
        assert clean_query(message) == expected


class TestSearch:
    """WebSearcher.search."""

    @pytest.mark.asyncio
    async def test_maps_hits_and_drops_rows_without_links(self):
        raw = [
            {"title": "Rail strike called off", "href": "https://www.example.com/rail", "body": "Unions agreed."},
            {"title": "No link", "body": "dropped"},
        ]
        searcher = WebSearcher(timeout=1)

        with patch.object(WebSearcher, "_ddgs_search_sync", return_value=raw) as ddgs:
            response = await searcher.search("rail strike")

        ddgs.assert_called_once_with("rail strike", 5)
        assert response.success is True
        assert response.results == [
            WebSearchResult(title="Rail strike called off", url="https://www.example.com/rail", snippet="Unions agreed."),
        ]
        assert response.results[0].domain == "example.com"

    @pytest.mark.asyncio
    async def test_error_gives_unsuccessful_empty_response(self):
        searcher = WebSearcher(timeout=1)

        with patch.object(WebSearcher, "_ddgs_search_sync", side_effect=RuntimeError("rate limited")):
            response = await searcher.search("rail strike")

        assert response.success is False
        assert response.results == []
        assert "rate limited" in response.error

    @pytest.mark.asyncio
    async def test_timeout_gives_unsuccessful_response(self):
        searcher = WebSearcher(timeout=0.05)

        def slow(query, max_results):
            time.sleep(0.3)
            return []

        with patch.object(WebSearcher, "_ddgs_search_sync", side_effect=slow):
            response = await searcher.search("rail strike")

        assert response.success is False


class TestContextString:
    """Prompt formatting."""

    def test_empty(self):
        assert WebSearchResponse(query="q").to_context_string() == "No search results found for this query."

    def test_caps_results(self):
        hits = [WebSearchResult(title=f"Hit {i}", url=f"https://example.com/{i}", snippet="") for i in range(8)]

        text = WebSearchResponse(query="rail", results=hits).to_context_string(max_sources=3)

        assert text.startswith('## Internet Search Results for: "rail"')
        assert "**Search Result 3:**" in text
        assert "Hit 3" not in text
        assert "Content: No content available" in text
