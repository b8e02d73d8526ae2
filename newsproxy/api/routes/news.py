"""News API routes: latest batch, paginated batches and article summaries."""

from typing import Optional

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse, PlainTextResponse

from newsproxy.api.dependencies import get_news_service
from newsproxy.api.schemas.news import (
    ArticleSummary,
    ErrorResponse,
    MoreNewsRequest,
    NewsItem,
    SummarizeRequest,
)
from newsproxy.core.errors import NewsProxyError
from newsproxy.services.news_service import NewsService
from newsproxy.utils.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["news"])

NEWS_ERROR = "Failed to send data"
SUMMARIZE_ERROR = "Failed to summarize article"

_ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"content": {"text/plain": {}}},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
}


def _error_response(message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": message},
    )


def _log_failure(event: str, exc: Exception) -> None:
    if isinstance(exc, NewsProxyError):
        logger.warning(event, error_type=type(exc).__name__, error=str(exc))
    else:
        logger.exception(event, error_type=type(exc).__name__)


@router.get("/news", response_model=list[NewsItem], responses=_ERROR_RESPONSES)
async def get_news(news_service: NewsService = Depends(get_news_service)):
    """Latest news batch, served from cache when fresh."""
    try:
        return await news_service.get_latest_news()
    except Exception as e:
        _log_failure("Failed to serve latest news", e)
        return _error_response(NEWS_ERROR)


@router.post("/news-more", response_model=list[NewsItem], responses=_ERROR_RESPONSES)
async def get_more_news(
    body: Optional[MoreNewsRequest] = None,
    news_service: NewsService = Depends(get_news_service),
):
    """News batch starting at the ``minNewsId`` cursor of a previous batch."""
    cursor = body.min_news_id if body else None
    if not cursor:
        return PlainTextResponse("minNewsId is required", status_code=status.HTTP_400_BAD_REQUEST)

    try:
        return await news_service.get_more_news(cursor)
    except Exception as e:
        _log_failure("Failed to serve more news", e)
        return _error_response(NEWS_ERROR)


@router.post("/summarize", response_model=ArticleSummary, responses=_ERROR_RESPONSES)
async def summarize_article(
    body: Optional[SummarizeRequest] = None,
    news_service: NewsService = Depends(get_news_service),
):
    """Rewritten full text and title of a single article."""
    url = body.url if body else None
    if not url:
        return PlainTextResponse("URL is required", status_code=status.HTTP_400_BAD_REQUEST)

    try:
        return await news_service.summarize_article(url)
    except Exception as e:
        _log_failure("Failed to summarize article", e)
        return _error_response(SUMMARIZE_ERROR)
