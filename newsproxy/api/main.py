"""
FastAPI Application Entry Point

Usage:
    uvicorn newsproxy.api.main:app --port 8111

Or with the CLI:
    python -m newsproxy.api.main
"""

from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from newsproxy.api.dependencies import build_services
from newsproxy.api.middleware import LoggingMiddleware
from newsproxy.api.routes import images_router, news_router
from newsproxy.config.settings import get_app_settings, resolve_api_settings
from newsproxy.utils.logging_config import configure_logging, get_logger

load_dotenv()

# Must run before any logger is used
configure_logging()

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - build services on startup, release them on shutdown."""
    settings = get_app_settings()
    services = build_services(settings)
    app.state.services = services

    logger.info(
        "News proxy ready",
        rewrite_provider=settings.rewrite.provider,
        cipher=settings.token_codec.algorithm,
        cache_ttl_seconds=settings.cache.ttl_seconds,
        feed_configured=bool(settings.upstream.news_api_url),
    )

    yield

    logger.info("Shutting down news proxy")
    await services.aclose()


def create_app() -> FastAPI:
    app = FastAPI(
        title="News Proxy API",
        description="Rewritten news batches with tokenized image relay",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(LoggingMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(news_router)
    app.include_router(images_router)

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "service": "newsproxy"}

    return app


app = create_app()


def main():
    """Run the API server."""
    import uvicorn

    api_settings = resolve_api_settings()

    uvicorn.run(
        "newsproxy.api.main:app",
        host=api_settings.host,
        port=api_settings.port,
        log_level="info",
    )


if __name__ == "__main__":
    main()
