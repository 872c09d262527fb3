"""Normalization of provider payload fields into the canonical Article shape."""

from __future__ import annotations

import html
import re
from datetime import datetime
from typing import Optional
from urllib.parse import urljoin, urlparse

from newsdesk.constants import CONTENT_MAX_LENGTH, SUMMARY_FALLBACK_LENGTH
from newsdesk.news.models import Article, NewsCategory
from newsdesk.utils.timestamps import clamp_to_now, now_utc, parse_timestamp_lenient

_TAG_RE = re.compile(r"<[^>]+>")
_WS_RE = re.compile(r"\s+")
# NewsAPI appends "[+1234 chars]" to truncated bodies
_TRUNCATION_MARKER_RE = re.compile(r"\s*\[\+\d+ chars\]\s*$")


def is_absolute_url(url: Optional[str]) -> bool:
    """True for http(s) URLs with a host."""
    if not url or not isinstance(url, str):
        return False
    parsed = urlparse(url.strip())
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def absolute_url(url: Optional[str], base: Optional[str] = None) -> Optional[str]:
    """Resolve ``url`` against ``base`` and return it only if absolute."""
    if not url or not isinstance(url, str):
        return None
    url = url.strip()
    if base and url.startswith("/"):
        url = urljoin(base, url)
    return url if is_absolute_url(url) else None


def clean_text(value: Optional[str]) -> Optional[str]:
    """Strip HTML tags, unescape entities and collapse whitespace."""
    if not value or not isinstance(value, str):
        return None
    text = _TAG_RE.sub(" ", value)
    text = html.unescape(text)
    text = _WS_RE.sub(" ", text).strip()
    return text or None


def clip(text: Optional[str], limit: int) -> Optional[str]:
    """Clip text to ``limit`` characters, marking the cut with an ellipsis."""
    if text is None or len(text) <= limit:
        return text
    return text[:limit].rstrip() + "..."


def summarize(description: Optional[str], content: Optional[str]) -> Optional[str]:
    """Provider description, or the opening of the content when absent."""
    if description:
        return description
    if content:
        return content[:SUMMARY_FALLBACK_LENGTH] + "..."
    return None


def build_article(
    *,
    title: Optional[str],
    url: Optional[str],
    source: Optional[str],
    published: object = None,
    description: Optional[str] = None,
    content: Optional[str] = None,
    image_url: Optional[str] = None,
    author: Optional[str] = None,
    category: Optional[NewsCategory] = None,
    content_limit: int = CONTENT_MAX_LENGTH,
    now: Optional[datetime] = None,
) -> Optional[Article]:
    """Build a canonical Article from raw provider fields.

    Returns None when the payload cannot produce a valid article (blank
    title or non-absolute URL); adapters skip those entries.
    """
    now = now or now_utc()
    title = clean_text(title)
    if not title or not is_absolute_url(url):
        return None

    description = clean_text(description)
    body = clean_text(content)
    if body:
        body = _TRUNCATION_MARKER_RE.sub("", body) or None
    body = clip(body, content_limit)

    published_at = parse_timestamp_lenient(published) or now
    published_at = clamp_to_now(published_at, now)

    return Article(
        title=title,
        url=url.strip(),
        source=clean_text(source) or "Unknown",
        published_at=published_at,
        summary=summarize(description, body),
        content=body or description,
        image_url=absolute_url(image_url),
        author=clean_text(author),
        category=category,
        scraped_at=now,
    )
