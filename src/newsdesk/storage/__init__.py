"""Article persistence.

Usage:
    from newsdesk.storage import ArticleFilter, JsonArticleStore

    store = JsonArticleStore("data/articles.json")
"""

from .base import ArticleFilter, ArticleStore, merge_article, sort_articles
from .json_store import JsonArticleStore
from .memory import InMemoryArticleStore

__all__ = [
    "ArticleFilter",
    "ArticleStore",
    "InMemoryArticleStore",
    "JsonArticleStore",
    "merge_article",
    "sort_articles",
]
