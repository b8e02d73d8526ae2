"""Application settings and runtime config resolution.

This module centralizes environment-backed defaults and resolution rules used
by the API layer and the services it wires together. Every resolver accepts an
``env`` mapping so tests can inject configuration without touching os.environ.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Optional

from newsproxy.core.token_codec import DEFAULT_ALGORITHM, SUPPORTED_ALGORITHMS

# Upstream env names and defaults
ENV_NEWS_API_URL = "NEWS_API_URL"
ENV_NEWS_API_URL_LEGACY = "API"
ENV_ARTICLE_SUMMARY_URL = "ARTICLE_SUMMARY_URL"
ENV_UPSTREAM_TIMEOUT_SECONDS = "UPSTREAM_TIMEOUT_SECONDS"

DEFAULT_ARTICLE_SUMMARY_URL = "https://articalapi.vercel.app/summarize"
DEFAULT_UPSTREAM_TIMEOUT_SECONDS = 30

# Token codec env names and defaults
ENV_ENCRYPTION_KEY = "ENCRYPTION_KEY"
ENV_ALGORITHM = "ALGORITHM"
ENV_PUBLIC_BASE_URL = "PUBLIC_BASE_URL"

DEFAULT_PUBLIC_BASE_URL = "https://ournewsapi.vercel.app"

# Cache env names and defaults
ENV_NEWS_CACHE_TTL_SECONDS = "NEWS_CACHE_TTL_SECONDS"

DEFAULT_NEWS_CACHE_TTL_SECONDS = 3600
DEFAULT_CACHE_CHECK_PERIOD_SECONDS = 600

# Rewrite env names and defaults
ENV_REWRITE_PROVIDER = "REWRITE_PROVIDER"

ALLOWED_PROVIDERS = {"groq", "openai", "anthropic", "openrouter"}
DEFAULT_REWRITE_PROVIDER = "groq"

# API env names and defaults
ENV_API_HOST = "API_HOST"
ENV_API_PORT = "API_PORT"
ENV_PORT = "PORT"
DEFAULT_API_HOST = "0.0.0.0"
DEFAULT_API_PORT = 8111


class RewriteSite(str, Enum):
    """Call sites that ask the language model for a rewrite."""

    TITLES = "titles"
    ARTICLE_TEXT = "article_text"
    ARTICLE_TITLE = "article_title"


@dataclass(frozen=True)
class RewriteProfile:
    """Model and prompt template used by one rewrite call site."""

    model_name: str
    prompt_template: str


# site -> (model env, default model, prompt env, default template)
_REWRITE_SITE_DEFAULTS: dict[RewriteSite, tuple[str, str, str, str]] = {
    RewriteSite.TITLES: (
        "REWRITE_TITLES_MODEL",
        "llama-3.1-8b-instant",
        "REWRITE_TITLES_PROMPT",
        "rewrite_titles",
    ),
    RewriteSite.ARTICLE_TEXT: (
        "REWRITE_ARTICLE_TEXT_MODEL",
        "llama3-8b-8192",
        "REWRITE_ARTICLE_TEXT_PROMPT",
        "rewrite_article_text",
    ),
    RewriteSite.ARTICLE_TITLE: (
        "REWRITE_ARTICLE_TITLE_MODEL",
        "llama3-8b-8192",
        "REWRITE_ARTICLE_TITLE_PROMPT",
        "rewrite_article_title",
    ),
}


def _clamp(value: int, minimum: int, maximum: int) -> int:
    return max(minimum, min(maximum, value))


def _int_from_env(env: Mapping[str, str], name: str, default: int) -> int:
    try:
        return int(env.get(name, str(default)))
    except ValueError:
        return default


@dataclass(frozen=True)
class UpstreamSettings:
    news_api_url: Optional[str]
    article_summary_url: str
    timeout_seconds: int


@dataclass(frozen=True)
class TokenCodecSettings:
    key_material: Optional[str]
    algorithm: str
    public_base_url: str


@dataclass(frozen=True)
class CacheSettings:
    ttl_seconds: int
    check_period_seconds: int = DEFAULT_CACHE_CHECK_PERIOD_SECONDS


@dataclass(frozen=True)
class RewriteSettings:
    provider: str
    profiles: Mapping[RewriteSite, RewriteProfile] = field(default_factory=dict)

    def profile_for(self, site: RewriteSite) -> RewriteProfile:
        return self.profiles[site]


@dataclass(frozen=True)
class APISettings:
    host: str
    port: int


@dataclass(frozen=True)
class AppSettings:
    upstream: UpstreamSettings
    token_codec: TokenCodecSettings
    cache: CacheSettings
    rewrite: RewriteSettings
    api: APISettings


def resolve_upstream_settings(env: Mapping[str, str] = os.environ) -> UpstreamSettings:
    news_api_url = env.get(ENV_NEWS_API_URL) or env.get(ENV_NEWS_API_URL_LEGACY)
    if news_api_url is not None:
        news_api_url = news_api_url.strip() or None

    timeout_seconds = _int_from_env(
        env, ENV_UPSTREAM_TIMEOUT_SECONDS, DEFAULT_UPSTREAM_TIMEOUT_SECONDS
    )

    return UpstreamSettings(
        news_api_url=news_api_url,
        article_summary_url=env.get(ENV_ARTICLE_SUMMARY_URL) or DEFAULT_ARTICLE_SUMMARY_URL,
        timeout_seconds=_clamp(timeout_seconds, 1, 300),
    )


def resolve_token_codec_settings(env: Mapping[str, str] = os.environ) -> TokenCodecSettings:
    algorithm = (env.get(ENV_ALGORITHM) or DEFAULT_ALGORITHM).strip().lower()
    if algorithm not in SUPPORTED_ALGORITHMS:
        valid = ", ".join(sorted(SUPPORTED_ALGORITHMS))
        raise ValueError(f"Invalid ALGORITHM '{algorithm}'. Valid options: {valid}")

    key_material = env.get(ENV_ENCRYPTION_KEY)
    if key_material is not None:
        key_material = key_material.strip() or None

    return TokenCodecSettings(
        key_material=key_material,
        algorithm=algorithm,
        public_base_url=(env.get(ENV_PUBLIC_BASE_URL) or DEFAULT_PUBLIC_BASE_URL).rstrip("/"),
    )


def resolve_cache_settings(env: Mapping[str, str] = os.environ) -> CacheSettings:
    ttl_seconds = _int_from_env(env, ENV_NEWS_CACHE_TTL_SECONDS, DEFAULT_NEWS_CACHE_TTL_SECONDS)
    return CacheSettings(ttl_seconds=_clamp(ttl_seconds, 1, 86400))


def resolve_rewrite_settings(
    provider_override: Optional[str] = None,
    env: Mapping[str, str] = os.environ,
) -> RewriteSettings:
    provider = (provider_override or env.get(ENV_REWRITE_PROVIDER) or DEFAULT_REWRITE_PROVIDER).lower()
    if provider not in ALLOWED_PROVIDERS:
        valid = ", ".join(sorted(ALLOWED_PROVIDERS))
        raise ValueError(f"Invalid rewrite provider '{provider}'. Valid options: {valid}")

    profiles = {
        site: RewriteProfile(
            model_name=env.get(model_env) or default_model,
            prompt_template=env.get(prompt_env) or default_template,
        )
        for site, (model_env, default_model, prompt_env, default_template) in _REWRITE_SITE_DEFAULTS.items()
    }

    return RewriteSettings(provider=provider, profiles=profiles)


def resolve_api_settings(env: Mapping[str, str] = os.environ) -> APISettings:
    host = env.get(ENV_API_HOST, DEFAULT_API_HOST)
    raw_port = env.get(ENV_API_PORT) or env.get(ENV_PORT) or str(DEFAULT_API_PORT)
    try:
        port = int(raw_port)
    except ValueError:
        port = DEFAULT_API_PORT

    return APISettings(host=host, port=port)


def get_app_settings(env: Mapping[str, str] = os.environ) -> AppSettings:
    return AppSettings(
        upstream=resolve_upstream_settings(env=env),
        token_codec=resolve_token_codec_settings(env=env),
        cache=resolve_cache_settings(env=env),
        rewrite=resolve_rewrite_settings(env=env),
        api=resolve_api_settings(env=env),
    )
