"""HTTP clients for the upstream news feed and the article summarizer.

Both clients share the process-wide ``httpx.AsyncClient`` created in the API
lifespan and translate every transport, status or payload problem into
``UpstreamFetchError``.
"""

import time
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from newsproxy.api.schemas.news import ArticleSource, NewsPage, RawNewsItem
from newsproxy.core.errors import UpstreamFetchError
from newsproxy.utils.logging_config import get_logger

logger = get_logger(__name__)

NO_STORE_HEADERS = {"Cache-Control": "no-store"}


def _cache_bust() -> str:
    return str(int(time.time() * 1000))


def _parse_news_page(payload: Any) -> NewsPage:
    """Map the upstream ``{"data": {"news_list": [...], "min_news_id": ...}}`` envelope."""
    data = payload.get("data") if isinstance(payload, dict) else None
    if not isinstance(data, dict):
        raise UpstreamFetchError("News feed response has no data object")

    news_list = data.get("news_list")
    if not isinstance(news_list, list):
        raise UpstreamFetchError("News feed response has no news_list")

    try:
        items = [RawNewsItem.model_validate(entry["news_obj"]) for entry in news_list]
    except (KeyError, TypeError, ValidationError) as e:
        raise UpstreamFetchError("News feed returned a malformed news entry") from e

    next_cursor = data.get("min_news_id")
    return NewsPage(
        items=items,
        next_cursor=str(next_cursor) if next_cursor not in (None, "") else None,
    )


class NewsFeedClient:
    """Fetches pages of the upstream news feed."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        feed_url: Optional[str],
        timeout_seconds: float = 30.0,
    ):
        self._http = http_client
        self._feed_url = feed_url
        self._timeout = timeout_seconds

    async def fetch_page(self, cursor: Optional[str] = None) -> NewsPage:
        """Fetch the latest page, or the page starting at *cursor*.

        Raises:
            UpstreamFetchError: Feed unreachable, non-2xx or malformed.
        """
        if not self._feed_url:
            raise UpstreamFetchError("NEWS_API_URL is not configured")

        # Merged into the query string already present on the feed URL
        params = {"cache_bust": _cache_bust()}
        if cursor:
            params["news_offset"] = cursor

        try:
            url = httpx.URL(self._feed_url).copy_merge_params(params)
            response = await self._http.get(
                url,
                headers=NO_STORE_HEADERS,
                timeout=self._timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning("News feed request failed", cursor=cursor, error_type=type(e).__name__)
            raise UpstreamFetchError("News feed is unavailable") from e
        except ValueError as e:
            raise UpstreamFetchError("News feed returned invalid JSON") from e

        page = _parse_news_page(payload)
        logger.debug("News feed page fetched", cursor=cursor, items=len(page.items), next_cursor=page.next_cursor)
        return page


class ArticleSummaryClient:
    """Fetches full text, title, image and summary of a single article."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        endpoint: str,
        timeout_seconds: float = 30.0,
    ):
        self._http = http_client
        self._endpoint = endpoint
        self._timeout = timeout_seconds

    async def fetch(self, url: str) -> ArticleSource:
        """
        Raises:
            UpstreamFetchError: Summarizer unreachable, non-2xx or malformed.
        """
        try:
            response = await self._http.post(
                self._endpoint,
                json={"url": url},
                timeout=self._timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as e:
            logger.warning("Article summarizer request failed", error_type=type(e).__name__)
            raise UpstreamFetchError("Article summarizer is unavailable") from e
        except ValueError as e:
            raise UpstreamFetchError("Article summarizer returned invalid JSON") from e

        if not isinstance(payload, dict):
            raise UpstreamFetchError("Article summarizer returned an unexpected payload")

        try:
            return ArticleSource.model_validate(payload)
        except ValidationError as e:
            raise UpstreamFetchError("Article summarizer returned a malformed article") from e
