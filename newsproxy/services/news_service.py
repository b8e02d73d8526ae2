"""News service - cache-backed orchestration of fetch, assemble and store.

Fast path returns the cached batch. On a miss, callers for the same key share
one in-flight fetch: the first caller starts it and later callers await the
same future, so concurrent misses cost a single upstream fetch and a failure
reaches every waiter at once. The in-flight entry is dropped as soon as the
fetch settles. Failed fetches are never cached.
"""

import asyncio
from typing import Optional

from newsproxy.api.schemas.news import ArticleSummary, NewsItem
from newsproxy.services.assembler import NewsBatchAssembler
from newsproxy.services.cache import LATEST_NEWS_KEY, TTLCache, more_news_key
from newsproxy.services.upstream import NewsFeedClient
from newsproxy.utils.logging_config import get_logger

logger = get_logger(__name__)


class NewsService:
    """Serves latest and paginated news batches plus single-article summaries."""

    def __init__(
        self,
        feed_client: NewsFeedClient,
        assembler: NewsBatchAssembler,
        cache: TTLCache[list[NewsItem]],
    ):
        self._feed = feed_client
        self._assembler = assembler
        self._cache = cache
        self._inflight: dict[str, asyncio.Future[list[NewsItem]]] = {}

    @property
    def cache(self) -> TTLCache[list[NewsItem]]:
        return self._cache

    @property
    def inflight_count(self) -> int:
        """Number of cache keys with an upstream fetch currently running."""
        return len(self._inflight)

    async def _fetch_and_store(self, key: str, cursor: Optional[str]) -> list[NewsItem]:
        try:
            logger.info("News cache miss, fetching upstream", cache_key=key)
            page = await self._feed.fetch_page(cursor)
            batch = await self._assembler.assemble(page.items, page.next_cursor)
            self._cache.set(key, batch)
            logger.info("News batch cached", cache_key=key, items=len(batch), next_cursor=page.next_cursor)
            return batch
        finally:
            self._inflight.pop(key, None)

    async def _cached_batch(self, key: str, cursor: Optional[str]) -> list[NewsItem]:
        cached = self._cache.get(key)
        if cached is not None:
            logger.debug("News cache hit", cache_key=key)
            return cached

        flight = self._inflight.get(key)
        if flight is None:
            flight = asyncio.ensure_future(self._fetch_and_store(key, cursor))
            self._inflight[key] = flight
        else:
            logger.debug("Joining in-flight news fetch", cache_key=key)

        # A cancelled caller must not cancel the fetch other callers are awaiting
        return await asyncio.shield(flight)

    async def get_latest_news(self) -> list[NewsItem]:
        """
        Raises:
            UpstreamFetchError: The feed could not be fetched.
        """
        return await self._cached_batch(LATEST_NEWS_KEY, None)

    async def get_more_news(self, cursor: str) -> list[NewsItem]:
        """Batch starting at *cursor*, keyed ``more:<cursor>``.

        Raises:
            UpstreamFetchError: The feed could not be fetched.
        """
        return await self._cached_batch(more_news_key(cursor), cursor)

    async def summarize_article(self, url: str) -> ArticleSummary:
        return await self._assembler.summarize(url)
