"""API Routes."""

from newsproxy.api.routes.images import router as images_router
from newsproxy.api.routes.news import router as news_router

__all__ = ["images_router", "news_router"]
