"""Tests for the newsapi.org adapter (httpx.MockTransport, no network)."""

from datetime import timedelta

import httpx
import pytest

from newsdesk.news.models import NewsCategory
from newsdesk.news.sources.newsapi import BROAD_QUERY, NewsAPISource
from newsdesk.utils.timestamps import format_timestamp, now_utc


def _row(title, url, hours_ago=1, **extra):
    row = {
        "source": {"id": None, "name": "Wire"},
        "author": "Reporter",
        "title": title,
        "description": f"{title} description",
        "url": url,
        "urlToImage": "https://img.example.com/a.jpg",
        "publishedAt": format_timestamp(now_utc() - timedelta(hours=hours_ago)),
        "content": f"{title} body [+200 chars]",
    }
    row.update(extra)
    return row


def _source(handler, **kwargs):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return NewsAPISource("test-key", client=client, **kwargs), client


class TestListings:
    """Headline listings."""

    @pytest.mark.asyncio
    async def test_all_categories_uses_broad_recent_query(self):
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, json={"status": "ok", "articles": [_row("Alpha", "https://x.com/a")]})

        source, client = _source(handler)
        articles = await source.fetch_headlines(None, 1, 20)
        await client.aclose()

        request = requests[0]
        assert request.url.path == "/v2/everything"
        assert request.url.params["q"] == BROAD_QUERY
        assert request.url.params["sortBy"] == "publishedAt"
        assert "from" in request.url.params
        assert request.headers["X-Api-Key"] == "test-key"
        assert articles[0].title == "Alpha"
        assert articles[0].source == "Wire"
        assert articles[0].content == "Alpha body"

    @pytest.mark.asyncio
    async def test_supported_category_uses_top_headlines(self):
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, json={"status": "ok", "articles": [_row("Goal", "https://x.com/g")]})

        source, client = _source(handler, country="gb")
        articles = await source.fetch_headlines(NewsCategory.SPORTS, 2, 10)
        await client.aclose()

        params = requests[0].url.params
        assert requests[0].url.path == "/v2/top-headlines"
        assert params["country"] == "gb"
        assert params["category"] == "sports"
        assert params["page"] == "2"
        assert params["pageSize"] == "10"
        assert articles[0].category == NewsCategory.SPORTS

    @pytest.mark.asyncio
    async def test_unsupported_category_becomes_query(self):
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, json={"status": "ok", "articles": []})

        source, client = _source(handler)
        await source.fetch_headlines(NewsCategory.POLITICS, 1, 20)
        await client.aclose()

        assert requests[0].url.path == "/v2/everything"
        assert requests[0].url.params["q"] == "politics"

    @pytest.mark.asyncio
    async def test_removed_and_invalid_rows_skipped(self):
        def handler(request):
            return httpx.Response(200, json={"status": "ok", "articles": [
                _row("[Removed]", "https://removed.com"),
                _row("No url", None),
                _row("", "https://x.com/blank"),
                _row("Kept", "https://x.com/kept"),
            ]})

        source, client = _source(handler)
        articles = await source.fetch_headlines(None, 1, 20)
        await client.aclose()

        assert [a.title for a in articles] == ["Kept"]


class TestFailures:
    """Failures come back as empty lists."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("response", [
        httpx.Response(401, json={"status": "error", "code": "apiKeyInvalid"}),
        httpx.Response(200, json={"status": "error", "message": "rate limited"}),
        httpx.Response(200, text="<html>not json</html>"),
        httpx.Response(200, json={"status": "ok"}),
    ])
    async def test_bad_responses_yield_empty(self, response):
        source, client = _source(lambda request: response)
        assert await source.fetch_headlines(None, 1, 20) == []
        await client.aclose()

    @pytest.mark.asyncio
    async def test_network_error_yields_empty(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        source, client = _source(handler)
        assert await source.search("anything") == []
        await client.aclose()

    @pytest.mark.asyncio
    async def test_missing_key_makes_no_request(self):
        calls = []
        client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: calls.append(r)))
        source = NewsAPISource(None, client=client)

        assert source.available is False
        assert await source.fetch_headlines(None, 1, 20) == []
        assert calls == []
        await client.aclose()


class TestTopStoryHelpers:
    """fetch_latest and fetch_international."""

    @pytest.mark.asyncio
    async def test_international_dedups_and_tags_world(self):
        def handler(request):
            country = request.url.params["country"]
            rows = [
                _row(f"{country} story", f"https://x.com/{country}", hours_ago=2 if country == "us" else 1),
                _row("Shared wire story", "https://x.com/shared", hours_ago=3),
            ]
            return httpx.Response(200, json={"status": "ok", "articles": rows})

        source, client = _source(handler)
        articles = await source.fetch_international(["us", "gb"], page_size=10)
        await client.aclose()

        assert [a.url for a in articles] == ["https://x.com/gb", "https://x.com/us", "https://x.com/shared"]
        assert {a.category for a in articles} == {NewsCategory.WORLD}

    @pytest.mark.asyncio
    async def test_international_skips_failing_country(self):
        def handler(request):
            if request.url.params["country"] == "de":
                return httpx.Response(500)
            return httpx.Response(200, json={"status": "ok", "articles": [_row("Fr", "https://x.com/fr")]})

        source, client = _source(handler)
        articles = await source.fetch_international(["de", "fr"])
        await client.aclose()

        assert [a.title for a in articles] == ["Fr"]

    @pytest.mark.asyncio
    async def test_latest(self):
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, json={"status": "ok", "articles": [_row("Latest", "https://x.com/l")]})

        source, client = _source(handler)
        articles = await source.fetch_latest(10)
        await client.aclose()

        assert requests[0].url.params["pageSize"] == "10"
        assert [a.title for a in articles] == ["Latest"]
