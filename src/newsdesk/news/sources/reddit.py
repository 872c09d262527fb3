"""Community-link fallback: Reddit public listings (no API key).

Last resort in the chain. The external link a post points at is the
article URL; self posts have no external link and are skipped.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Optional

import httpx

from newsdesk.constants import COMMUNITY_EXCERPT_LENGTH
from newsdesk.news.errors import SourceUnavailable
from newsdesk.news.models import Article, NewsCategory
from newsdesk.news.normalize import build_article
from newsdesk.news.sources.base import NewsSource
from newsdesk.news.sources.models import CommunityConfig
from newsdesk.utils.timestamps import from_unix

logger = logging.getLogger("news.sources")


class RedditSource(NewsSource):
    """Top posts of the day from topic-mapped subreddits.

    Usage:
        source = RedditSource(CommunityConfig())
        articles = await source.fetch_headlines(NewsCategory.SCIENCE)
    """

    name = "reddit"
    requires_key = False
    BASE_URL = "https://www.reddit.com"

    def __init__(self, community: Optional[CommunityConfig] = None, **kwargs: Any):
        super().__init__(**kwargs)
        self.community = community or CommunityConfig()

    async def _fetch_subreddit(
        self,
        subreddit: str,
        limit: int,
        category: Optional[NewsCategory],
    ) -> list[Article]:
        data = await self._get_json(
            f"{self.BASE_URL}/r/{subreddit}/top.json",
            params={"limit": limit, "t": "day"},
            headers={"User-Agent": self.community.user_agent},
        )
        listing = data.get("data")
        if not isinstance(listing, dict) or not isinstance(listing.get("children"), list):
            raise SourceUnavailable(self.name, f"r/{subreddit}: unexpected listing shape")

        articles = []
        for child in listing["children"]:
            post = child.get("data") if isinstance(child, dict) else None
            if not isinstance(post, dict) or post.get("is_self") or not post.get("url"):
                continue
            selftext = post.get("selftext") or None
            created = post.get("created_utc")
            article = build_article(
                title=post.get("title"),
                url=post.get("url"),
                source=f"Reddit r/{subreddit}",
                published=from_unix(created) if isinstance(created, (int, float)) else None,
                description=selftext[:COMMUNITY_EXCERPT_LENGTH] if selftext else None,
                content=selftext,
                image_url=post.get("thumbnail"),
                author=post.get("author"),
                category=category,
            )
            if article is not None:
                articles.append(article)
        return articles

    async def _fetch_headlines(
        self,
        category: Optional[NewsCategory],
        page: int,
        page_size: int,
    ) -> list[Article]:
        # Listings are "top of the day"; there is no numbered page beyond the first.
        if page > 1:
            return []

        limit = max(1, math.ceil(page_size / 2))
        articles: list[Article] = []
        for subreddit in self.community.subreddits_for(category):
            try:
                articles.extend(await self._fetch_subreddit(subreddit, limit, category))
            except (SourceUnavailable, httpx.HTTPError) as e:
                logger.warning(f"SOURCE_UNAVAILABLE | {self.name} | r/{subreddit} | {e}")
        return articles[:page_size]
