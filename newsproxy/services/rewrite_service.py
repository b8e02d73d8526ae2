"""Rewrite service - uniform failure contract around the language model.

Every call site (batch titles, article text, article title) is driven by a
``RewriteProfile`` from settings: the model to call and the prompt template to
render. A broken template, a failed provider call or an empty completion all
surface as ``RewriteError``; deciding on a fallback value is left to the caller.
"""

from collections.abc import Callable, Sequence
from typing import Any, Optional

from newsproxy.config.llm_factory import create_llm
from newsproxy.config.settings import RewriteSettings, RewriteSite
from newsproxy.core.errors import RewriteError
from newsproxy.prompts.loader import PromptLoader
from newsproxy.utils.logging_config import get_logger

logger = get_logger(__name__)


def _message_text(response: Any) -> str:
    """Extract plain text from a chat model response."""
    content = response.content if hasattr(response, "content") else response
    if isinstance(content, list):
        # Anthropic-style content blocks
        parts = []
        for block in content:
            if isinstance(block, dict):
                parts.append(str(block.get("text", "")))
            else:
                parts.append(str(block))
        content = "".join(parts)
    return str(content or "").strip()


class RewriteService:
    """Text rewriting backed by a chat model, one profile per call site."""

    def __init__(
        self,
        settings: RewriteSettings,
        llm_factory: Callable[..., Any] = create_llm,
        prompt_loader: Optional[PromptLoader] = None,
    ):
        self._settings = settings
        self._llm_factory = llm_factory
        self._prompt_loader = prompt_loader or PromptLoader.get_instance()
        self._llms: dict[str, Any] = {}  # model name -> llm

    def _get_llm(self, model_name: str) -> Any:
        llm = self._llms.get(model_name)
        if llm is None:
            llm = self._llm_factory(
                model_provider=self._settings.provider,
                model_name=model_name,
            )
            self._llms[model_name] = llm
        return llm

    async def _complete(self, site: RewriteSite, **prompt_vars: Any) -> str:
        profile = self._settings.profile_for(site)

        try:
            prompt = self._prompt_loader.load(profile.prompt_template, **prompt_vars)
            llm = self._get_llm(profile.model_name)
            response = await llm.ainvoke(prompt)
        except Exception as e:
            logger.warning(
                "Rewrite call failed",
                site=site.value,
                model=profile.model_name,
                error_type=type(e).__name__,
            )
            raise RewriteError(f"{site.value} rewrite failed") from e

        text = _message_text(response)
        if not text:
            logger.warning("Rewrite returned empty content", site=site.value, model=profile.model_name)
            raise RewriteError(f"{site.value} rewrite returned empty content")
        return text

    async def rewrite_text(self, text: str, site: RewriteSite = RewriteSite.ARTICLE_TEXT) -> str:
        """Rewrite a single piece of text with the profile of *site*.

        Raises:
            RewriteError: If the model call fails or returns nothing.
        """
        return await self._complete(site, text=text)

    async def rewrite_titles(self, titles: Sequence[str]) -> list[str]:
        """Rewrite a batch of titles with a single model call.

        The completion is split into one line per title. The returned list is
        positional and may be shorter than *titles*; a position can also hold
        an empty string when the model left a blank line.

        Raises:
            RewriteError: If the model call fails or returns nothing.
        """
        if not titles:
            return []

        content = await self._complete(RewriteSite.TITLES, titles=list(titles))
        lines = [line.strip() for line in content.split("\n")]
        if len(lines) < len(titles):
            logger.debug("Title rewrite returned fewer lines", expected=len(titles), received=len(lines))
        return lines[: len(titles)]
