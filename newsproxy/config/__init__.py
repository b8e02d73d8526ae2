"""Configuration module for the news proxy."""

from newsproxy.config.settings import (
    AppSettings,
    RewriteProfile,
    RewriteSettings,
    RewriteSite,
    get_app_settings,
)

__all__ = [
    "AppSettings",
    "RewriteProfile",
    "RewriteSettings",
    "RewriteSite",
    "get_app_settings",
]
