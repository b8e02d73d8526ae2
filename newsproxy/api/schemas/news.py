"""Pydantic models for the news API and its upstream collaborators."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

NO_DATA_MESSAGE = "There is no data available"


def _coerce_text(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, (int, float)):
        return str(value)
    return value


# ---------------------------------------------------------------------------
# Upstream shapes
# ---------------------------------------------------------------------------


class RawNewsItem(BaseModel):
    """The ``news_obj`` of one upstream feed entry."""

    model_config = ConfigDict(extra="ignore")

    title: str = ""
    content: str = ""
    image_url: str = ""
    hash_id: str = ""
    source_url: str = ""

    @field_validator("title", "content", "image_url", "hash_id", "source_url", mode="before")
    @classmethod
    def _optional_text(cls, value: Any) -> Any:
        return _coerce_text(value)


class NewsPage(BaseModel):
    """One page of the upstream feed plus the cursor of the page after it."""

    items: list[RawNewsItem]
    next_cursor: Optional[str] = None


class ArticleSource(BaseModel):
    """Response of the article summarization collaborator."""

    model_config = ConfigDict(extra="ignore")

    full_text: str = ""
    title: str = ""
    img_url: str = ""
    summary: str = ""

    @field_validator("full_text", "title", "img_url", "summary", mode="before")
    @classmethod
    def _optional_text(cls, value: Any) -> Any:
        return _coerce_text(value)


# ---------------------------------------------------------------------------
# API shapes
# ---------------------------------------------------------------------------


class NewsItem(BaseModel):
    """A normalized news item as served to clients.

    ``image_url`` is the public relay URL wrapping the image token and
    ``min_news_id`` is the cursor of the page following this batch.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    index: int
    title: str
    content: str
    image_url: str
    min_news_id: Optional[str] = None
    hash_id: str
    source_url: str


class ArticleSummary(BaseModel):
    """Rewritten single article; wire keys follow the existing client contract."""

    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(alias="Title")
    full_text: str = Field(alias="fullText")
    image_url: str = Field(alias="imageUrl")
    summary: str

    @classmethod
    def no_data(cls) -> "ArticleSummary":
        """The sentinel returned when the article source has nothing to rewrite."""
        return cls(
            title=NO_DATA_MESSAGE,
            full_text=NO_DATA_MESSAGE,
            image_url="",
            summary=NO_DATA_MESSAGE,
        )


class MoreNewsRequest(BaseModel):
    """Body of ``POST /news-more``; presence of the cursor is checked by the route."""

    min_news_id: Optional[str] = Field(default=None, alias="minNewsId")

    @field_validator("min_news_id", mode="before")
    @classmethod
    def _cursor_text(cls, value: Any) -> Optional[str]:
        # Anything but a string or number counts as a missing cursor
        if isinstance(value, bool):
            return None
        if isinstance(value, (int, float)):
            return str(value)
        return value if isinstance(value, str) else None


class SummarizeRequest(BaseModel):
    """Body of ``POST /summarize``."""

    url: Optional[str] = None

    @field_validator("url", mode="before")
    @classmethod
    def _url_text(cls, value: Any) -> Optional[str]:
        return value if isinstance(value, str) else None


class ErrorResponse(BaseModel):
    error: str
