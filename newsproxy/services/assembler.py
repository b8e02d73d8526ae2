"""News batch assembler.

Normalizes raw upstream entries into the client-facing ``NewsItem`` shape:
titles are rewritten in one batched call with per-position fallback, image
URLs are swapped for relay URLs wrapping an encrypted token, and the cursor of
the next page is stamped on every item of the batch.

Enrichment failures never fail a batch; only a failure to obtain the base
data does.
"""

import asyncio
from collections.abc import Sequence
from typing import Optional

from newsproxy.api.schemas.news import ArticleSummary, NewsItem, RawNewsItem
from newsproxy.config.settings import RewriteSite
from newsproxy.core.errors import RewriteError
from newsproxy.core.token_codec import TokenCodec
from newsproxy.services.rewrite_service import RewriteService
from newsproxy.services.upstream import ArticleSummaryClient
from newsproxy.utils.logging_config import get_logger

logger = get_logger(__name__)


def merge_titles(original: Sequence[str], rewritten: Sequence[str]) -> list[str]:
    """Take rewritten title *i* when present and non-empty, else original title *i*."""
    merged = []
    for i, title in enumerate(original):
        candidate = rewritten[i].strip() if i < len(rewritten) and rewritten[i] else ""
        merged.append(candidate or title)
    return merged


class NewsBatchAssembler:
    """Builds normalized news batches and rewritten article summaries."""

    def __init__(
        self,
        codec: TokenCodec,
        rewriter: RewriteService,
        article_client: Optional[ArticleSummaryClient] = None,
    ):
        self._codec = codec
        self._rewriter = rewriter
        self._article_client = article_client

    def _image_url(self, origin_url: str) -> str:
        return self._codec.public_url(origin_url) if origin_url else ""

    async def _rewrite_titles(self, titles: list[str]) -> list[str]:
        try:
            rewritten = await self._rewriter.rewrite_titles(titles)
        except RewriteError:
            logger.warning("Title rewrite failed, keeping original titles", count=len(titles))
            return list(titles)
        return merge_titles(titles, rewritten)

    async def assemble(self, raw_items: Sequence[RawNewsItem], cursor: Optional[str]) -> list[NewsItem]:
        """Turn one upstream page into an ordered batch.

        Args:
            raw_items: Upstream entries in display order.
            cursor: Start of the next upstream page, shared by every item.
        """
        titles = [item.title for item in raw_items]
        final_titles = await self._rewrite_titles(titles) if titles else []

        return [
            NewsItem(
                index=index,
                title=final_titles[index],
                content=raw.content,
                image_url=self._image_url(raw.image_url),
                min_news_id=cursor,
                hash_id=raw.hash_id,
                source_url=raw.source_url,
            )
            for index, raw in enumerate(raw_items)
        ]

    async def _rewrite_or_keep(self, text: str, site: RewriteSite) -> str:
        try:
            return await self._rewriter.rewrite_text(text, site)
        except RewriteError:
            logger.warning("Article rewrite failed, keeping original", site=site.value)
            return text

    async def summarize(self, url: str) -> ArticleSummary:
        """Fetch one article and rewrite its text and title independently.

        Returns the "no data" sentinel when the source has no text or title.

        Raises:
            UpstreamFetchError: The article source could not be fetched.
        """
        if self._article_client is None:
            raise RuntimeError("NewsBatchAssembler was built without an article client")

        article = await self._article_client.fetch(url)
        if not article.full_text or not article.title:
            logger.info("Article source returned no data")
            return ArticleSummary.no_data()

        full_text, title = await asyncio.gather(
            self._rewrite_or_keep(article.full_text, RewriteSite.ARTICLE_TEXT),
            self._rewrite_or_keep(article.title, RewriteSite.ARTICLE_TITLE),
        )

        return ArticleSummary(
            title=title,
            full_text=full_text,
            image_url=self._image_url(article.img_url),
            summary=article.summary,
        )
