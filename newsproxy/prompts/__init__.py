"""Prompts module for the rewrite call sites, rendered from Jinja2 templates."""

from newsproxy.prompts.loader import PromptLoader

__all__ = ["PromptLoader"]
