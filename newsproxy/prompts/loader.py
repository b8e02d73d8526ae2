"""
Prompt Loader Module

Loads and renders the Jinja2 prompt templates used by the rewrite call sites.
"""

from pathlib import Path
from typing import Any, Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape


class PromptLoader:
    """
    A loader for managing and rendering Jinja2 prompt templates.

    Templates are markdown files under ``templates/``; the rewrite profile of
    each call site names the template it renders.
    """

    _instance: Optional["PromptLoader"] = None

    def __init__(self, templates_dir: Optional[Path] = None):
        """
        Initialize the PromptLoader.

        Args:
            templates_dir: Directory containing prompt templates.
                          Defaults to the 'templates' subdirectory.
        """
        if templates_dir is None:
            templates_dir = Path(__file__).parent / "templates"

        self.templates_dir = templates_dir
        self._env = Environment(
            loader=FileSystemLoader(str(templates_dir)),
            autoescape=select_autoescape(enabled_extensions=()),
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    @classmethod
    def get_instance(cls) -> "PromptLoader":
        """Get or create the singleton instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def load(self, template_name: str, **kwargs: Any) -> str:
        """
        Load and render a prompt template.

        Args:
            template_name: Name of the template file (with or without .md extension).
            **kwargs: Variables to pass to the template for rendering.

        Raises:
            jinja2.TemplateNotFound: If the template file doesn't exist.
        """
        if not template_name.endswith(".md"):
            template_name = f"{template_name}.md"

        template = self._env.get_template(template_name)
        return template.render(**kwargs).strip()
