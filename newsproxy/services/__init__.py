"""Services: upstream clients, rewriting, assembly, caching and image relay."""

from newsproxy.services.assembler import NewsBatchAssembler
from newsproxy.services.cache import TTLCache
from newsproxy.services.image_relay import ImageRelay
from newsproxy.services.news_service import NewsService
from newsproxy.services.rewrite_service import RewriteService
from newsproxy.services.upstream import ArticleSummaryClient, NewsFeedClient

__all__ = [
    "ArticleSummaryClient",
    "ImageRelay",
    "NewsBatchAssembler",
    "NewsFeedClient",
    "NewsService",
    "RewriteService",
    "TTLCache",
]
