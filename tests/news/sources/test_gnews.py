"""Tests for the gnews.io adapter."""

import httpx
import pytest

from newsdesk.news.models import NewsCategory
from newsdesk.news.sources.gnews import GNewsSource


def _payload(*titles):
    return {"totalArticles": len(titles), "articles": [
        {
            "title": title,
            "description": f"{title} description",
            "content": f"{title} content",
            "url": f"https://gnews.example.com/{i}",
            "image": "https://img.example.com/g.jpg",
            "publishedAt": "2025-01-01T10:00:00Z",
            "source": {"name": "GNews Wire", "url": "https://gnews.example.com"},
        }
        for i, title in enumerate(titles)
    ]}


class TestGNews:
    """GNewsSource."""

    @pytest.mark.asyncio
    async def test_category_maps_to_topic(self):
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, json=_payload("Vote tally"))

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        source = GNewsSource("gnews-key", client=client, language="fr")
        articles = await source.fetch_headlines(NewsCategory.POLITICS, 1, 5)
        await client.aclose()

        params = requests[0].url.params
        assert requests[0].url.path == "/api/v4/top-headlines"
        assert params["category"] == "nation"
        assert params["token"] == "gnews-key"
        assert params["lang"] == "fr"
        assert params["max"] == "5"
        assert articles[0].category == NewsCategory.POLITICS
        assert articles[0].source == "GNews Wire"

    @pytest.mark.asyncio
    async def test_search_sorted_by_date(self):
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, json=_payload("One", "Two"))

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        source = GNewsSource("gnews-key", client=client)
        articles = await source.search("climate", 1, 10)
        await client.aclose()

        assert requests[0].url.path == "/api/v4/search"
        assert requests[0].url.params["q"] == "climate"
        assert requests[0].url.params["sortby"] == "publishedAt"
        assert [a.title for a in articles] == ["One", "Two"]

    @pytest.mark.asyncio
    async def test_errors_payload_yields_empty(self):
        client = httpx.AsyncClient(transport=httpx.MockTransport(
            lambda request: httpx.Response(200, json={"errors": ["quota exceeded"]})
        ))
        source = GNewsSource("gnews-key", client=client)

        assert await source.fetch_headlines(None, 1, 10) == []
        await client.aclose()
