"""Route tests for /news, /news-more and /summarize."""

from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from newsproxy.api.dependencies import get_news_service
from newsproxy.api.routes import news_router
from newsproxy.api.schemas.news import NO_DATA_MESSAGE, ArticleSource, NewsPage, RawNewsItem
from newsproxy.core.errors import UpstreamFetchError
from newsproxy.core.token_codec import TokenCodec
from newsproxy.services.assembler import NewsBatchAssembler
from newsproxy.services.cache import TTLCache
from newsproxy.services.news_service import NewsService
from newsproxy.services.rewrite_service import RewriteService
from newsproxy.services.upstream import ArticleSummaryClient, NewsFeedClient


def _page(cursor: str, *titles: str) -> NewsPage:
    return NewsPage(
        items=[
            RawNewsItem(title=t, content=f"content {t}", image_url=f"http://x/{t}.png", hash_id=f"h-{t}")
            for t in titles
        ],
        next_cursor=cursor,
    )


@pytest.fixture
def feed() -> AsyncMock:
    feed = AsyncMock(spec=NewsFeedClient)
    feed.fetch_page.return_value = _page("next-1", "A", "B")
    return feed


@pytest.fixture
def rewriter() -> AsyncMock:
    rewriter = AsyncMock(spec=RewriteService)
    rewriter.rewrite_titles.return_value = ["Rewritten A"]
    return rewriter


@pytest.fixture
def article_client() -> AsyncMock:
    return AsyncMock(spec=ArticleSummaryClient)


@pytest.fixture
def news_service(codec: TokenCodec, feed, rewriter, article_client) -> NewsService:
    return NewsService(
        feed_client=feed,
        assembler=NewsBatchAssembler(codec=codec, rewriter=rewriter, article_client=article_client),
        cache=TTLCache(ttl_seconds=3600),
    )


@pytest.fixture
def client(news_service: NewsService) -> TestClient:
    app = FastAPI()
    app.dependency_overrides[get_news_service] = lambda: news_service
    app.include_router(news_router)
    return TestClient(app)


# ---------------------------------------------------------------------------
# /news
# ---------------------------------------------------------------------------


def test_news_returns_batch_with_client_keys(client: TestClient):
    response = client.get("/news")

    assert response.status_code == 200
    body = response.json()
    assert [item["title"] for item in body] == ["Rewritten A", "B"]
    assert body[0]["index"] == 0
    assert body[0]["minNewsId"] == "next-1"
    assert body[0]["hashId"] == "h-A"
    assert body[0]["content"] == "content A"
    assert body[0]["imageUrl"].startswith("https://news.example/image-urls?url=")
    assert "http://x/" not in response.text


def test_news_is_served_from_cache(client: TestClient, feed: AsyncMock):
    client.get("/news")
    client.get("/news")

    assert feed.fetch_page.await_count == 1


def test_news_upstream_failure_returns_generic_500(client: TestClient, feed: AsyncMock):
    feed.fetch_page.side_effect = UpstreamFetchError("feed at https://internal.example failed")

    response = client.get("/news")

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to send data"}


def test_news_unexpected_error_returns_generic_500(client: TestClient, feed: AsyncMock):
    feed.fetch_page.side_effect = KeyError("boom")

    response = client.get("/news")

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to send data"}


# ---------------------------------------------------------------------------
# /news-more
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"minNewsId": ""},
        {"other": "x"},
        {"minNewsId": None},
        {"minNewsId": True},
        {"minNewsId": {"id": "next-1"}},
        {"minNewsId": ["next-1"]},
    ],
)
def test_news_more_requires_cursor(client: TestClient, feed: AsyncMock, payload: dict):
    response = client.post("/news-more", json=payload)

    assert response.status_code == 400
    assert response.text == "minNewsId is required"
    assert response.headers["content-type"].startswith("text/plain")
    feed.fetch_page.assert_not_awaited()


def test_news_more_without_body(client: TestClient):
    response = client.post("/news-more")

    assert response.status_code == 400
    assert response.text == "minNewsId is required"


def test_news_more_fetches_cursor_page(client: TestClient, feed: AsyncMock):
    feed.fetch_page.return_value = _page("next-2", "C")

    response = client.post("/news-more", json={"minNewsId": "next-1"})

    assert response.status_code == 200
    assert response.json()[0]["minNewsId"] == "next-2"
    feed.fetch_page.assert_awaited_once_with("next-1")


def test_news_more_numeric_cursor_is_stringified(client: TestClient, feed: AsyncMock):
    response = client.post("/news-more", json={"minNewsId": 12345})

    assert response.status_code == 200
    feed.fetch_page.assert_awaited_once_with("12345")


def test_news_more_cache_hit_skips_upstream(client: TestClient, feed: AsyncMock, news_service: NewsService):
    news_service.cache.set("more:next-1", [])

    response = client.post("/news-more", json={"minNewsId": "next-1"})

    assert response.status_code == 200
    assert response.json() == []
    assert feed.fetch_page.await_count == 0


def test_news_more_failure_returns_generic_500(client: TestClient, feed: AsyncMock):
    feed.fetch_page.side_effect = UpstreamFetchError("down")

    response = client.post("/news-more", json={"minNewsId": "next-1"})

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to send data"}


# ---------------------------------------------------------------------------
# /summarize
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("payload", [{}, {"url": ""}, {"url": 42}, {"url": {"href": "x"}}])
def test_summarize_requires_url(client: TestClient, payload: dict):
    response = client.post("/summarize", json=payload)

    assert response.status_code == 400
    assert response.text == "URL is required"


def test_summarize_no_data_sentinel(client: TestClient, article_client: AsyncMock, rewriter: AsyncMock):
    article_client.fetch.return_value = ArticleSource(full_text="", title="", img_url="", summary="")

    response = client.post("/summarize", json={"url": "https://article.example/1"})

    assert response.status_code == 200
    assert response.json() == {
        "Title": NO_DATA_MESSAGE,
        "fullText": NO_DATA_MESSAGE,
        "imageUrl": "",
        "summary": NO_DATA_MESSAGE,
    }
    rewriter.rewrite_text.assert_not_awaited()


def test_summarize_returns_rewritten_article(client: TestClient, article_client: AsyncMock, rewriter: AsyncMock):
    article_client.fetch.return_value = ArticleSource(
        full_text="Body", title="Title", img_url="http://x/a.png", summary="Short"
    )
    rewriter.rewrite_text.return_value = "Rewritten"

    response = client.post("/summarize", json={"url": "https://article.example/1"})

    body = response.json()
    assert response.status_code == 200
    assert body["Title"] == "Rewritten"
    assert body["fullText"] == "Rewritten"
    assert body["summary"] == "Short"
    assert body["imageUrl"].startswith("https://news.example/image-urls?url=")
    article_client.fetch.assert_awaited_once_with("https://article.example/1")


def test_summarize_upstream_failure_returns_generic_500(client: TestClient, article_client: AsyncMock):
    article_client.fetch.side_effect = UpstreamFetchError("down")

    response = client.post("/summarize", json={"url": "https://article.example/1"})

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to summarize article"}
