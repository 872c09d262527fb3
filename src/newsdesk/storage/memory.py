"""In-process article store."""

from __future__ import annotations

import threading
from typing import Optional

from newsdesk.news.models import Article, NewsCategory
from newsdesk.storage.base import (
    DEFAULT_ORDER,
    ArticleFilter,
    ArticleStore,
    merge_article,
    sort_articles,
)


class InMemoryArticleStore(ArticleStore):
    """Dict-backed store keyed by url.

    Safe to call from the write-back worker thread and the request path at
    the same time; every operation holds one lock.
    """

    def __init__(self, articles: Optional[list[Article]] = None):
        self._lock = threading.RLock()
        self._rows: dict[str, Article] = {}
        self._pinned: set[str] = set()
        for article in articles or []:
            self.upsert(article)

    def __len__(self) -> int:
        with self._lock:
            return len(self._rows)

    def upsert(self, article: Article) -> bool:
        if article.category is None:
            article = article.with_category(NewsCategory.GENERAL)
        with self._lock:
            existing = self._rows.get(article.url)
            if existing is None:
                self._rows[article.url] = article
                created = True
            else:
                self._rows[article.url] = merge_article(existing, article)
                created = False
            self._changed()
            return created

    def find_many(
        self,
        filter: Optional[ArticleFilter] = None,
        skip: int = 0,
        take: Optional[int] = None,
        order_by: str = DEFAULT_ORDER,
    ) -> list[Article]:
        filter = filter or ArticleFilter()
        with self._lock:
            rows = [a for a in self._rows.values() if filter.matches(a)]
        rows = sort_articles(rows, order_by)
        end = None if take is None else skip + take
        return rows[skip:end]

    def count(self, filter: Optional[ArticleFilter] = None) -> int:
        filter = filter or ArticleFilter()
        with self._lock:
            return sum(1 for a in self._rows.values() if filter.matches(a))

    def delete_many(self, filter: Optional[ArticleFilter] = None) -> int:
        filter = filter or ArticleFilter()
        with self._lock:
            doomed = [
                url for url, article in self._rows.items()
                if url not in self._pinned and filter.matches(article)
            ]
            for url in doomed:
                del self._rows[url]
            if doomed:
                self._changed()
            return len(doomed)

    def get(self, url: str) -> Optional[Article]:
        with self._lock:
            return self._rows.get(url)

    def pin(self, url: str) -> None:
        with self._lock:
            self._pinned.add(url)
            self._changed()

    def unpin(self, url: str) -> None:
        with self._lock:
            self._pinned.discard(url)
            self._changed()

    def is_pinned(self, url: str) -> bool:
        with self._lock:
            return url in self._pinned

    def _changed(self) -> None:
        """Hook called under the lock after every mutation."""
