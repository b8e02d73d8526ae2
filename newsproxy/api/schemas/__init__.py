"""API Schemas - Pydantic models for request/response validation."""

from newsproxy.api.schemas.news import (
    ArticleSource,
    ArticleSummary,
    ErrorResponse,
    MoreNewsRequest,
    NewsItem,
    NewsPage,
    RawNewsItem,
    SummarizeRequest,
)

__all__ = [
    "ArticleSource",
    "ArticleSummary",
    "ErrorResponse",
    "MoreNewsRequest",
    "NewsItem",
    "NewsPage",
    "RawNewsItem",
    "SummarizeRequest",
]
