"""Shared fixtures: a deterministic-key codec and a fake chat model."""

from __future__ import annotations

from typing import Any, Callable, Union

import pytest
from langchain_core.messages import AIMessage

from newsproxy.core.token_codec import TokenCodec

TEST_KEY = bytes(range(32))
PUBLIC_BASE = "https://news.example"


class FakeLLM:
    """Stands in for a chat model; replies with a string or raises an exception."""

    def __init__(self, reply: Union[str, Exception, Callable[[str], Any]]):
        self.reply = reply
        self.prompts: list[str] = []

    async def ainvoke(self, prompt: str) -> AIMessage:
        self.prompts.append(prompt)
        result = self.reply(prompt) if callable(self.reply) else self.reply
        if isinstance(result, Exception):
            raise result
        return AIMessage(content=result)


@pytest.fixture
def codec() -> TokenCodec:
    return TokenCodec(TEST_KEY, public_base_url=PUBLIC_BASE)
