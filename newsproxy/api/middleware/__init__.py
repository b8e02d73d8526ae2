"""API middleware."""

from newsproxy.api.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware"]
