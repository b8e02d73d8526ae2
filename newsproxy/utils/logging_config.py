"""
Structured Logging Configuration

Unified structlog setup for the news proxy service:
- Development mode: colored, human-readable console output
- Production mode: JSON lines written to a rotating log file
- Both modes redact image tokens and origin URLs from event fields

Usage:
    from newsproxy.utils.logging_config import configure_logging, get_logger

    configure_logging()
    logger = get_logger(__name__)
    logger.info("Batch assembled", cache_key="news:latest", items=25)
"""

import logging
import logging.handlers
import os
import sys
from typing import Mapping, Optional

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

REDACTED = "[redacted]"

# Event keys whose values may hold an image token or a decoded origin URL
REDACTED_KEYS = frozenset({"url", "token", "origin_url", "image_url", "query_string"})


def _is_production(env: Mapping[str, str] = os.environ) -> bool:
    """Check if running in production environment."""
    value = env.get("ENV", env.get("ENVIRONMENT", "development")).lower()
    return value in ("production", "prod")


def _get_log_level(env: Mapping[str, str] = os.environ) -> int:
    """Get log level from environment variable."""
    level_name = env.get("LOG_LEVEL", "INFO").upper()
    return getattr(logging, level_name, logging.INFO)


def redact_sensitive_fields(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Replace token and origin URL values before any renderer sees them."""
    for key in REDACTED_KEYS.intersection(event_dict):
        event_dict[key] = REDACTED
    return event_dict


def configure_logging(
    json_format: Optional[bool] = None,
    log_level: Optional[int] = None,
    log_file: Optional[str] = None,
) -> None:
    """
    Configure structlog for the application.

    Args:
        json_format: If True, output JSON logs. If None, auto-detect based on ENV.
        log_level: Logging level. If None, read from LOG_LEVEL (default: INFO).
        log_file: Log file path for production (defaults to LOG_FILE or logs/newsproxy.log).
    """
    if json_format is None:
        json_format = _is_production()

    if log_level is None:
        log_level = _get_log_level()

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        structlog.processors.format_exc_info,
        redact_sensitive_fields,
    ]

    if json_format:
        if log_file is None:
            log_file = os.getenv("LOG_FILE", "logs/newsproxy.log")
        os.makedirs(os.path.dirname(log_file) or ".", exist_ok=True)
        handler: logging.Handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5,
        )
        renderer = structlog.processors.JSONRenderer(ensure_ascii=False)
    else:
        handler = logging.StreamHandler(sys.stdout)
        renderer = structlog.dev.ConsoleRenderer(
            colors=True,
            exception_formatter=structlog.dev.plain_traceback,
        )

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=shared_processors,
    )
    handler.setFormatter(formatter)

    logging.basicConfig(
        format="%(message)s",
        handlers=[handler],
        level=log_level,
    )

    # httpx logs full request URLs at INFO, which would include decoded image origins
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """
    Get a structlog logger instance.

    Args:
        name: Logger name (typically __name__).

    Example:
        logger = get_logger(__name__)
        logger.warning("Title rewrite failed", error_type="RewriteError")
    """
    return structlog.get_logger(name)


def bind_context(**kwargs) -> None:
    """Bind context variables included in all subsequent logs of this task."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all bound context variables."""
    structlog.contextvars.clear_contextvars()
