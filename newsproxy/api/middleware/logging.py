"""
Request Logging Middleware

Request tracing and request/response logging for FastAPI:
- Generates a short request_id per request and binds it to structlog context
- Logs method, path, status code and duration on completion
- Clears context afterwards to prevent leakage

Query strings are never logged: on ``/image-urls`` they carry image tokens.
Only the parameter names are recorded, so a request without its ``url``
parameter is still visible.
"""

import time
import uuid
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from newsproxy.utils.logging_config import bind_context, clear_context, get_logger

logger = get_logger(__name__)


class LoggingMiddleware(BaseHTTPMiddleware):
    """Adds request tracing and logging to all HTTP requests."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = str(uuid.uuid4())[:8]
        bind_context(request_id=request_id)

        method = request.method
        path = request.url.path
        client_ip = request.client.host if request.client else "unknown"
        query_params = sorted(request.query_params.keys())

        logger.debug("Request started", method=method, path=path, client_ip=client_ip)

        start_time = time.perf_counter()

        try:
            response = await call_next(request)

            duration_ms = (time.perf_counter() - start_time) * 1000
            log_method = logger.info if response.status_code < 400 else logger.warning
            log_method(
                "Request completed",
                method=method,
                path=path,
                query_params=query_params,
                status_code=response.status_code,
                duration_ms=round(duration_ms, 2),
            )

            response.headers["X-Request-ID"] = request_id
            return response

        except Exception as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.exception(
                "Request failed with exception",
                method=method,
                path=path,
                duration_ms=round(duration_ms, 2),
                error_type=type(e).__name__,
            )
            raise

        finally:
            clear_context()
