"""Service wiring for the API.

The container is built once in the application lifespan and stored on
``app.state``; routes reach it through the dependency functions below, which
tests replace with ``app.dependency_overrides``.
"""

from dataclasses import dataclass

import httpx
from fastapi import Request

from newsproxy.config.settings import AppSettings
from newsproxy.core.token_codec import TokenCodec, parse_key_material
from newsproxy.services.assembler import NewsBatchAssembler
from newsproxy.services.cache import TTLCache
from newsproxy.services.image_relay import ImageRelay
from newsproxy.services.news_service import NewsService
from newsproxy.services.rewrite_service import RewriteService
from newsproxy.services.upstream import ArticleSummaryClient, NewsFeedClient


@dataclass
class ServiceContainer:
    http_client: httpx.AsyncClient
    codec: TokenCodec
    news_service: NewsService
    image_relay: ImageRelay

    async def aclose(self) -> None:
        self.news_service.cache.clear()
        await self.http_client.aclose()


def build_token_codec(settings: AppSettings) -> TokenCodec:
    """
    Raises:
        ValueError: ENCRYPTION_KEY missing or of the wrong length.
    """
    codec_settings = settings.token_codec
    if not codec_settings.key_material:
        raise ValueError("ENCRYPTION_KEY environment variable not set")

    return TokenCodec(
        key=parse_key_material(codec_settings.key_material),
        algorithm=codec_settings.algorithm,
        public_base_url=codec_settings.public_base_url,
    )


def build_services(
    settings: AppSettings,
    http_client: httpx.AsyncClient | None = None,
) -> ServiceContainer:
    """Wire every service from resolved settings."""
    timeout = settings.upstream.timeout_seconds
    http_client = http_client or httpx.AsyncClient(timeout=timeout)
    codec = build_token_codec(settings)

    assembler = NewsBatchAssembler(
        codec=codec,
        rewriter=RewriteService(settings.rewrite),
        article_client=ArticleSummaryClient(
            http_client,
            endpoint=settings.upstream.article_summary_url,
            timeout_seconds=timeout,
        ),
    )
    news_service = NewsService(
        feed_client=NewsFeedClient(
            http_client,
            feed_url=settings.upstream.news_api_url,
            timeout_seconds=timeout,
        ),
        assembler=assembler,
        cache=TTLCache(
            ttl_seconds=settings.cache.ttl_seconds,
            check_period_seconds=settings.cache.check_period_seconds,
        ),
    )

    return ServiceContainer(
        http_client=http_client,
        codec=codec,
        news_service=news_service,
        image_relay=ImageRelay(codec, http_client, timeout_seconds=timeout),
    )


def get_services(request: Request) -> ServiceContainer:
    return request.app.state.services


def get_news_service(request: Request) -> NewsService:
    return get_services(request).news_service


def get_image_relay(request: Request) -> ImageRelay:
    return get_services(request).image_relay
