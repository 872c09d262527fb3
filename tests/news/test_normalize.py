"""Tests for payload normalization into Article."""

from datetime import timedelta

from newsdesk.news.models import NewsCategory
from newsdesk.news.normalize import absolute_url, build_article, clean_text, summarize
from newsdesk.utils.timestamps import now_utc


class TestBuildArticle:
    """build_article."""

    def test_full_payload(self):
        now = now_utc()
        article = build_article(
            title="  Rates <b>hold</b> steady ",
            url="https://news.example.com/rates",
            source="Wire &amp; Co",
            published="2020-01-01T10:00:00Z",
            description="Central bank keeps rates.",
            content="Full body text. [+1234 chars]",
            image_url="https://img.example.com/r.jpg",
            author="A. Writer",
            category=NewsCategory.ECONOMY,
            now=now,
        )

        assert article.title == "Rates hold steady"
        assert article.source == "Wire & Co"
        assert article.summary == "Central bank keeps rates."
        assert article.content == "Full body text."
        assert article.category == NewsCategory.ECONOMY
        assert article.published_at.year == 2020
        assert article.scraped_at == now

    def test_blank_title_or_relative_url_is_rejected(self):
        assert build_article(title="   ", url="https://x.com/a", source="S") is None
        assert build_article(title="Title", url="/a", source="S") is None
        assert build_article(title="Title", url=None, source="S") is None

    def test_future_timestamp_is_clamped(self):
        now = now_utc()
        future = (now + timedelta(hours=3)).isoformat()

        article = build_article(title="T", url="https://x.com/a", source="S", published=future, now=now)

        assert article.published_at == now

    def test_missing_fields_default(self):
        now = now_utc()
        article = build_article(title="T", url="https://x.com/a", source=None, published="garbage", now=now)

        assert article.source == "Unknown"
        assert article.published_at == now
        assert article.summary is None
        assert article.image_url is None

    def test_summary_falls_back_to_content(self):
        body = "word " * 100
        article = build_article(title="T", url="https://x.com/a", source="S", content=body)

        assert article.summary.endswith("...")
        assert len(article.summary) == 303
        assert article.content == body.strip()

    def test_content_limit(self):
        article = build_article(
            title="T", url="https://x.com/a", source="S", content="y" * 600, content_limit=500,
        )
        assert article.content == "y" * 500 + "..."


class TestHelpers:
    """Text and URL helpers."""

    def test_clean_text(self):
        assert clean_text("<p>Hello&nbsp;<i>world</i></p>\n\n") == "Hello world"
        assert clean_text("   ") is None
        assert clean_text(None) is None

    def test_absolute_url(self):
        assert absolute_url("/img.png", base="https://x.com/story") == "https://x.com/img.png"
        assert absolute_url("img.png") is None
        assert absolute_url("https://x.com/a.png") == "https://x.com/a.png"

    def test_summarize(self):
        assert summarize("desc", "content") == "desc"
        assert summarize(None, None) is None
