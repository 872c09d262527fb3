"""Keyword-based topic classification for articles.

The keyword table is ordered: when an article matches keywords from several
categories, the one listed first wins. The lists themselves are data and can
be overridden from the ``categories:`` section of ``news_sources.yaml``.

Usage:
    categorizer = Categorizer()
    category = categorizer.classify(article.title, article.content)
"""

from __future__ import annotations

import re
from typing import Iterable, Mapping, Optional, Sequence

from newsdesk.news.models import Article, NewsCategory


DEFAULT_KEYWORDS: dict[NewsCategory, list[str]] = {
    NewsCategory.TECHNOLOGY: [
        "tech", "technology", "ai", "artificial intelligence", "software",
        "app", "digital", "cyber", "robot", "computer", "internet", "startup",
        "smartphone", "chip", "semiconductor",
    ],
    NewsCategory.POLITICS: [
        "election", "government", "congress", "senate", "parliament",
        "president", "minister", "political", "politics", "vote", "campaign",
        "legislation", "democrat", "republican",
    ],
    NewsCategory.BUSINESS: [
        "business", "company", "market", "stock", "stocks", "earnings",
        "ceo", "merger", "acquisition", "corporate", "revenue", "shares",
    ],
    NewsCategory.HEALTH: [
        "health", "medical", "hospital", "disease", "vaccine", "covid",
        "doctor", "patients", "treatment", "virus", "cancer", "mental health",
    ],
    NewsCategory.SPORTS: [
        "sport", "sports", "football", "soccer", "basketball", "baseball",
        "tennis", "olympics", "championship", "league", "match", "tournament",
    ],
    NewsCategory.ENTERTAINMENT: [
        "movie", "film", "music", "celebrity", "actor", "actress", "album",
        "concert", "tv show", "hollywood", "netflix", "streaming",
    ],
    NewsCategory.SCIENCE: [
        "science", "research", "study", "scientists", "space", "nasa",
        "physics", "biology", "discovery", "astronomy",
    ],
    NewsCategory.WORLD: [
        "international", "global", "world", "united nations", "foreign",
        "diplomatic", "embassy", "war", "conflict",
    ],
    NewsCategory.ENVIRONMENT: [
        "climate", "environment", "pollution", "emissions", "renewable",
        "wildlife", "conservation", "carbon", "drought", "wildfire",
    ],
    NewsCategory.ECONOMY: [
        "economy", "economic", "inflation", "gdp", "recession",
        "unemployment", "interest rates", "central bank", "trade deficit",
    ],
}


def _compile(keywords: Iterable[str]) -> Optional[re.Pattern[str]]:
    words = sorted({k.strip().lower() for k in keywords if k and k.strip()}, key=len, reverse=True)
    if not words:
        return None
    alternation = "|".join(re.escape(w) for w in words)
    return re.compile(rf"\b(?:{alternation})\b")


class Categorizer:
    """Assign a NewsCategory from a hint or from title/content keywords.

    Args:
        keywords: Ordered mapping of category to keyword list. Iteration
            order is the tie-break priority. Defaults to ``DEFAULT_KEYWORDS``.
    """

    def __init__(self, keywords: Optional[Mapping[NewsCategory, Sequence[str]]] = None):
        table = keywords if keywords is not None else DEFAULT_KEYWORDS
        self._patterns: list[tuple[NewsCategory, re.Pattern[str]]] = []
        for category, words in table.items():
            if category == NewsCategory.GENERAL:
                continue
            pattern = _compile(words)
            if pattern is not None:
                self._patterns.append((category, pattern))

    @property
    def order(self) -> list[NewsCategory]:
        """Categories in the order they are tried."""
        return [category for category, _ in self._patterns]

    def classify(
        self,
        title: Optional[str],
        content: Optional[str] = None,
        hinted_category: object = None,
    ) -> NewsCategory:
        """Classify an article.

        A hint that names a keyword bucket is returned as-is. Anything else
        (no hint, GENERAL, unknown label) falls through to the keyword scan.
        """
        hint = NewsCategory.parse(hinted_category) if hinted_category else None
        if hint is not None and hint in self.order:
            return hint

        text = f"{title or ''} {content or ''}".lower()
        for category, pattern in self._patterns:
            if pattern.search(text):
                return category
        return NewsCategory.GENERAL

    def categorize(self, article: Article) -> Article:
        """Return ``article`` with its category resolved."""
        category = self.classify(
            article.title,
            article.content or article.summary,
            article.category,
        )
        if category == article.category:
            return article
        return article.with_category(category)

    def categorize_all(self, articles: Iterable[Article]) -> list[Article]:
        return [self.categorize(a) for a in articles]
