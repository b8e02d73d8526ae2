"""Route tests for /image-urls."""

from urllib.parse import parse_qs, urlsplit

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from newsproxy.api.dependencies import get_image_relay
from newsproxy.api.routes import images_router
from newsproxy.core.token_codec import TokenCodec
from newsproxy.services.image_relay import ImageRelay

ORIGIN = "https://private-cdn.example.com/img/1.jpg"


def _origin_handler(request: httpx.Request) -> httpx.Response:
    if request.url.path.endswith("missing.jpg"):
        return httpx.Response(404, content=b"missing")
    return httpx.Response(200, headers={"content-type": "image/jpeg"}, content=b"\xff\xd8jpeg-bytes")


@pytest.fixture
def client(codec: TokenCodec) -> TestClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(_origin_handler))
    relay = ImageRelay(codec, http)

    app = FastAPI()
    app.dependency_overrides[get_image_relay] = lambda: relay
    app.include_router(images_router)
    return TestClient(app)


def test_relays_bytes_and_content_type(client: TestClient, codec: TokenCodec):
    response = client.get("/image-urls", params={"url": codec.encode(ORIGIN)})

    assert response.status_code == 200
    assert response.headers["content-type"] == "image/jpeg"
    assert response.content == b"\xff\xd8jpeg-bytes"


def test_public_url_from_codec_resolves(client: TestClient, codec: TokenCodec):
    public = urlsplit(codec.public_url(ORIGIN))

    response = client.get(f"{public.path}?{public.query}")

    assert public.path == "/image-urls"
    assert parse_qs(public.query)["url"]
    assert response.status_code == 200


@pytest.mark.parametrize("token", ["garbage", "deadbeef:AAAA", ""])
def test_invalid_token_returns_plain_500(client: TestClient, token: str):
    response = client.get("/image-urls", params={"url": token})

    assert response.status_code == 500
    assert response.text == "Error fetching the image"


def test_missing_token_returns_plain_500(client: TestClient):
    response = client.get("/image-urls")

    assert response.status_code == 500
    assert response.text == "Error fetching the image"


def test_origin_failure_never_exposes_origin(client: TestClient, codec: TokenCodec):
    token = codec.encode("https://private-cdn.example.com/img/missing.jpg")

    response = client.get("/image-urls", params={"url": token})

    assert response.status_code == 500
    assert response.text == "Error fetching the image"
    assert "private-cdn" not in response.text
