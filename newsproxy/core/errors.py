"""Error taxonomy shared by the codec, the rewrite pipeline and the relay.

Messages of these exceptions may reach logs but never carry a decrypted
origin URL; route handlers replace them with generic client bodies.
"""


class NewsProxyError(Exception):
    """Base class for expected, typed failures of the service."""


class DecodeError(NewsProxyError):
    """Raised when an image token is malformed, forged or encrypted under another key."""


class RewriteError(NewsProxyError):
    """Raised when the language model call fails or returns no usable content."""


class UpstreamFetchError(NewsProxyError):
    """Raised when the news feed or the article summarizer is unreachable or malformed."""


class ImageRelayError(NewsProxyError):
    """Raised when the origin of a relayed image cannot be streamed."""
