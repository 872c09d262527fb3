"""News ingestion: models, sources, aggregation, cache policy and enrichment.

The orchestration classes live in their modules
(``newsdesk.news.aggregator``, ``newsdesk.news.service``) so that importing
the data models stays cheap.
"""

from newsdesk.news.errors import (
    EnrichmentFailure,
    InvalidRequestError,
    NewsdeskError,
    SourceUnavailable,
)
from newsdesk.news.models import (
    Article,
    EnrichedContent,
    NewsCategory,
    PagedArticles,
    Pagination,
)

__all__ = [
    "Article",
    "EnrichedContent",
    "NewsCategory",
    "PagedArticles",
    "Pagination",
    "NewsdeskError",
    "SourceUnavailable",
    "EnrichmentFailure",
    "InvalidRequestError",
]
