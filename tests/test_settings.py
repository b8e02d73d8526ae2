"""Tests for environment-backed settings resolution."""

import pytest

from newsproxy.config.settings import (
    DEFAULT_API_PORT,
    DEFAULT_ARTICLE_SUMMARY_URL,
    DEFAULT_NEWS_CACHE_TTL_SECONDS,
    RewriteSite,
    get_app_settings,
    resolve_api_settings,
    resolve_cache_settings,
    resolve_rewrite_settings,
    resolve_token_codec_settings,
    resolve_upstream_settings,
)


def test_defaults_from_empty_env():
    settings = get_app_settings(env={})

    assert settings.upstream.news_api_url is None
    assert settings.upstream.article_summary_url == DEFAULT_ARTICLE_SUMMARY_URL
    assert settings.token_codec.algorithm == "aes-256-gcm"
    assert settings.token_codec.key_material is None
    assert settings.cache.ttl_seconds == DEFAULT_NEWS_CACHE_TTL_SECONDS == 3600
    assert settings.rewrite.provider == "groq"
    assert settings.api.port == DEFAULT_API_PORT


def test_news_api_url_accepts_legacy_name():
    assert resolve_upstream_settings(env={"API": "https://feed.example/v1?type=all"}).news_api_url == (
        "https://feed.example/v1?type=all"
    )
    assert resolve_upstream_settings(
        env={"API": "https://legacy", "NEWS_API_URL": "https://current"}
    ).news_api_url == "https://current"


def test_invalid_numbers_fall_back_and_clamp():
    assert resolve_cache_settings(env={"NEWS_CACHE_TTL_SECONDS": "soon"}).ttl_seconds == 3600
    assert resolve_cache_settings(env={"NEWS_CACHE_TTL_SECONDS": "0"}).ttl_seconds == 1
    assert resolve_upstream_settings(env={"UPSTREAM_TIMEOUT_SECONDS": "9999"}).timeout_seconds == 300


def test_unknown_algorithm_is_rejected():
    with pytest.raises(ValueError, match="Invalid ALGORITHM"):
        resolve_token_codec_settings(env={"ALGORITHM": "aes-256-cbc"})


def test_public_base_url_trailing_slash_is_trimmed():
    settings = resolve_token_codec_settings(env={"PUBLIC_BASE_URL": "https://api.example/"})
    assert settings.public_base_url == "https://api.example"


def test_unknown_rewrite_provider_is_rejected():
    with pytest.raises(ValueError, match="Invalid rewrite provider"):
        resolve_rewrite_settings(env={"REWRITE_PROVIDER": "nope"})


def test_rewrite_profiles_are_configurable_per_site():
    settings = resolve_rewrite_settings(
        env={
            "REWRITE_TITLES_MODEL": "titles-model",
            "REWRITE_ARTICLE_TITLE_PROMPT": "custom_title",
        }
    )

    assert settings.profile_for(RewriteSite.TITLES).model_name == "titles-model"
    assert settings.profile_for(RewriteSite.TITLES).prompt_template == "rewrite_titles"
    assert settings.profile_for(RewriteSite.ARTICLE_TITLE).prompt_template == "custom_title"
    assert settings.profile_for(RewriteSite.ARTICLE_TEXT).model_name == "llama3-8b-8192"


def test_port_reads_legacy_port_variable():
    assert resolve_api_settings(env={"PORT": "3000"}).port == 3000
    assert resolve_api_settings(env={"PORT": "3000", "API_PORT": "4000"}).port == 4000
    assert resolve_api_settings(env={"PORT": "abc"}).port == DEFAULT_API_PORT
