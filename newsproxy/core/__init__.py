"""Core primitives: the image token codec and the error taxonomy."""

from newsproxy.core.errors import (
    DecodeError,
    ImageRelayError,
    NewsProxyError,
    RewriteError,
    UpstreamFetchError,
)
from newsproxy.core.token_codec import TokenCodec, parse_key_material

__all__ = [
    "DecodeError",
    "ImageRelayError",
    "NewsProxyError",
    "RewriteError",
    "TokenCodec",
    "UpstreamFetchError",
    "parse_key_material",
]
