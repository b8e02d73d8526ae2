"""Image relay - stream an origin image addressed by an opaque token.

The decoded origin URL stays inside this module: errors raised from here carry
only the failure class, never the URL.
"""

from collections.abc import AsyncIterator
from dataclasses import dataclass

import httpx

from newsproxy.core.errors import ImageRelayError
from newsproxy.core.token_codec import TokenCodec
from newsproxy.utils.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"


@dataclass
class RelayedImage:
    """An open origin response exposed as content-type plus a chunk iterator."""

    content_type: str
    chunks: AsyncIterator[bytes]


async def _iter_and_close(response: httpx.Response) -> AsyncIterator[bytes]:
    # The finally block also runs when the consumer abandons the stream
    try:
        async for chunk in response.aiter_bytes():
            yield chunk
    except httpx.HTTPError as e:
        logger.warning("Image stream interrupted", error_type=type(e).__name__)
        raise ImageRelayError("Image stream interrupted") from None
    finally:
        await response.aclose()


class ImageRelay:
    """Decodes image tokens and streams the referenced bytes."""

    def __init__(
        self,
        codec: TokenCodec,
        http_client: httpx.AsyncClient,
        timeout_seconds: float = 30.0,
    ):
        self._codec = codec
        self._http = http_client
        self._timeout = timeout_seconds

    async def open(self, token: str) -> RelayedImage:
        """Start streaming the image behind *token*.

        Raises:
            DecodeError: The token is malformed or forged.
            ImageRelayError: The origin could not be fetched.
        """
        origin_url = self._codec.decode(token)

        try:
            request = self._http.build_request("GET", origin_url, timeout=self._timeout)
            response = await self._http.send(request, stream=True, follow_redirects=True)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning("Image origin request failed", error_type=type(e).__name__)
            raise ImageRelayError("Image origin unavailable") from None

        if not response.is_success:
            status_code = response.status_code
            await response.aclose()
            logger.warning("Image origin returned an error status", status_code=status_code)
            raise ImageRelayError(f"Image origin responded with status {status_code}")

        content_type = response.headers.get("content-type") or DEFAULT_CONTENT_TYPE
        return RelayedImage(content_type=content_type, chunks=_iter_and_close(response))
