"""Article store persisted to a single JSON file.

File layout:

    {
      "version": 1,
      "articles": [{...Article.to_dict()...}, ...],
      "pinned": ["https://...", ...]
    }

The whole file is rewritten after each mutation through a temp file and an
atomic rename, so a crash mid-write leaves the previous snapshot intact.
A batch upsert writes one snapshot for the whole batch.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Iterable, Union

from newsdesk.news.models import Article
from newsdesk.storage.memory import InMemoryArticleStore

logger = logging.getLogger("news")

STORE_VERSION = 1


class JsonArticleStore(InMemoryArticleStore):
    """On-disk article cache.

    Usage:
        store = JsonArticleStore(Path("data/articles.json"))
        store.upsert(article)
        fresh = store.find_many(ArticleFilter(category=NewsCategory.SPORTS), take=20)
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._loading = True
        self._batching = False
        super().__init__()
        self._load()
        self._loading = False

    def _load(self) -> None:
        if not self.path.exists():
            logger.debug(f"ARTICLE_STORE | no store file at {self.path}, starting empty")
            return

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"ARTICLE_STORE | failed to load {self.path}: {e}")
            return
        if not isinstance(data, dict):
            logger.warning(f"ARTICLE_STORE | unexpected layout in {self.path}, starting empty")
            return

        skipped = 0
        for row in data.get("articles", []):
            try:
                article = Article.from_dict(row)
            except (KeyError, TypeError, ValueError):
                skipped += 1
                continue
            self._rows[article.url] = article
        self._pinned = set(data.get("pinned", []))

        logger.debug(
            f"ARTICLE_STORE | loaded={len(self._rows)} | pinned={len(self._pinned)} | "
            f"skipped={skipped}"
        )

    def upsert_many(self, articles: Iterable[Article]) -> int:
        articles = list(articles)
        if not articles:
            return 0
        with self._lock:
            self._batching = True
            try:
                created = super().upsert_many(articles)
            finally:
                self._batching = False
            self._changed()
        return created

    def _snapshot(self) -> dict[str, Any]:
        return {
            "version": STORE_VERSION,
            "articles": [a.to_dict() for a in self._rows.values()],
            "pinned": sorted(self._pinned),
        }

    def _changed(self) -> None:
        if self._loading or self._batching:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(self._snapshot(), f, indent=2, ensure_ascii=False)
        os.replace(tmp_path, self.path)
