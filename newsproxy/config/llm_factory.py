"""
LLM Factory

Single place that builds chat model instances for the rewrite call sites.
Supports groq, openai, anthropic and openrouter providers; groq and
openrouter are reached through their OpenAI-compatible endpoints.
"""

import os
from typing import Optional, Union

import httpx
from langchain_anthropic import ChatAnthropic
from langchain_openai import ChatOpenAI

# Rewrites are single non-streaming completions
DEFAULT_TIMEOUT = httpx.Timeout(
    connect=15.0,
    read=120.0,
    write=15.0,
    pool=15.0,
)

GROQ_BASE_URL = "https://api.groq.com/openai/v1"
OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"


def create_llm(
    model_provider: str = "groq",
    model_name: Optional[str] = None,
) -> Union[ChatOpenAI, ChatAnthropic]:
    """
    Create a chat model instance.

    Args:
        model_provider: LLM provider (groq, openai, anthropic, openrouter).
        model_name: Model identifier; provider default when omitted.

    Returns:
        LLM instance (ChatOpenAI or ChatAnthropic).

    Raises:
        ValueError: Missing API key or unknown provider.
    """
    if model_provider == "groq":
        api_key = os.getenv("GROQ_API_KEY")
        if not api_key:
            raise ValueError("GROQ_API_KEY environment variable not set")

        return ChatOpenAI(
            model=model_name or "llama-3.1-8b-instant",
            api_key=api_key,
            base_url=os.getenv("GROQ_API_BASE_URL", GROQ_BASE_URL),
            max_retries=2,
            timeout=DEFAULT_TIMEOUT,
        )
    elif model_provider == "openai":
        return ChatOpenAI(
            model=model_name or "gpt-4o-mini",
            max_retries=2,
            timeout=DEFAULT_TIMEOUT,
        )
    elif model_provider == "anthropic":
        return ChatAnthropic(
            model=model_name or "claude-3-5-haiku-latest",
            max_retries=2,
            timeout=DEFAULT_TIMEOUT,
        )
    elif model_provider == "openrouter":
        api_key = os.getenv("OPENROUTER_API_KEY")
        if not api_key:
            raise ValueError("OPENROUTER_API_KEY environment variable not set")

        return ChatOpenAI(
            model=model_name or "meta-llama/llama-3.1-8b-instruct",
            api_key=api_key,
            base_url=OPENROUTER_BASE_URL,
            max_retries=2,
            timeout=DEFAULT_TIMEOUT,
            default_headers={
                "HTTP-Referer": os.getenv("OPENROUTER_REFERER", ""),
                "X-Title": os.getenv("OPENROUTER_APP_TITLE", "News Proxy"),
            },
        )
    else:
        raise ValueError(f"Unknown provider: {model_provider}")
