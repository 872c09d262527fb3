"""Chat assistant over the current set of articles.

The text generator is an opaque collaborator: this module only builds the
context block it is given and chooses a fallback answer when it is missing
or fails.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from newsdesk.constants import CHAT_CONTENT_MAX_LENGTH
from newsdesk.news.models import Article, NewsCategory
from newsdesk.providers.text import TextGenerator
from newsdesk.research.web_search import WebSearcher, clean_query
from newsdesk.utils.timestamps import format_local

logger = logging.getLogger("ai_calls")

SYSTEM_PROMPT = (
    "You are a news analysis assistant. Answer using the articles below; "
    "say so when they do not cover the question, and cite article numbers."
)

NOT_CONFIGURED = (
    "The AI service is not configured. Set OPENAI_API_KEY (or enable a local "
    "provider in config/providers.yaml) to use the assistant."
)


def format_news_context(articles: Sequence[Article]) -> str:
    """Render articles as the numbered context block handed to the model."""
    blocks = []
    for index, article in enumerate(articles, start=1):
        category = (article.category or NewsCategory.GENERAL).display_name
        content = article.content or ""
        if len(content) > CHAT_CONTENT_MAX_LENGTH:
            content = content[:CHAT_CONTENT_MAX_LENGTH] + "..."
        blocks.append(
            f"**Article {index}: {article.title}**\n"
            f"Source: {article.source}\n"
            f"Category: {category}\n"
            f"Published: {format_local(article.published_at)}\n"
            f"URL: {article.url}\n\n"
            f"**Summary:** {article.summary or 'No summary available'}\n\n"
            f"**Full Content:** {content or 'Content not available'}\n\n"
            f"---\n"
        )
    return "\n".join(blocks)


def fallback_response(articles: Sequence[Article]) -> str:
    """Headline digest returned when the model cannot answer."""
    if not articles:
        return "The assistant is unavailable right now and there are no articles loaded."
    lines = ["The assistant is unavailable right now. Current headlines:", ""]
    for index, article in enumerate(articles[:10], start=1):
        lines.append(f"{index}. {article.title} ({article.source})")
    return "\n".join(lines)


class NewsChatbot:
    """Answers questions about a list of articles.

    Args:
        generator: Text generator; without one every answer is ``NOT_CONFIGURED``.
        searcher: Web searcher used when a question asks for web results.
    """

    def __init__(
        self,
        generator: Optional[TextGenerator] = None,
        searcher: Optional[WebSearcher] = None,
    ):
        self.generator = generator
        self.searcher = searcher

    @property
    def configured(self) -> bool:
        if self.generator is None:
            return False
        return getattr(self.generator, "available", True)

    async def respond(
        self,
        message: str,
        articles: Sequence[Article],
        web_search: bool = False,
    ) -> str:
        if not self.configured:
            return NOT_CONFIGURED

        context = f"{SYSTEM_PROMPT}\n\nAvailable News Articles:\n{format_news_context(articles)}"
        if web_search:
            context += await self._search_context(message)
        try:
            answer = await self.generator.generate(message, context)
        except Exception as e:
            logger.warning(f"CHAT_FAILED | {type(e).__name__}: {e}")
            return fallback_response(articles)
        return answer or fallback_response(articles)

    async def _search_context(self, message: str) -> str:
        query = clean_query(message)
        if self.searcher is None or not query:
            return ""
        response = await self.searcher.search(query)
        return f"\n\nInternet Search Results:\n{response.to_context_string()}"
