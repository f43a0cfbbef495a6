"""
Template engine wrapper for code generation.

Provides a simple interface for Jinja2 template rendering
with common utilities for code generation.
"""

from pathlib import Path
from typing import Any, Dict, Optional

from jinja2 import (
    DictLoader,
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateNotFound,
    TemplateSyntaxError,
)

from .naming import comment_text, quote_string


class TemplateError(Exception):
    """Exception raised for template-related errors."""

    def __init__(self, message: str, template_name: str = "", phase: str = "execute"):
        super().__init__(message)
        self.template_name = template_name
        self.phase = phase


class TemplateEngine:
    """Wrapper for Jinja2 template engine with code generation utilities."""

    def __init__(self, template_dir: Optional[Path] = None):
        """
        Initialize template engine.

        Args:
            template_dir: Directory containing template files
        """
        self.template_dir = template_dir
        self._env = None
        self._setup_environment()

    def _setup_environment(self):
        """Setup Jinja2 environment with code generation utilities."""
        if self.template_dir and self.template_dir.exists():
            loader = FileSystemLoader(str(self.template_dir))
        else:
            loader = DictLoader({})

        # Go source, never HTML: autoescaping stays off.
        self._env = Environment(
            loader=loader,
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )

        self._env.filters["go_string"] = quote_string
        self._env.filters["comment_text"] = comment_text
        self._env.filters["indent_lines"] = self._indent_filter

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """
        Render a template with the given context.

        Args:
            template_name: Name of template file
            context: Variables to pass to template

        Returns:
            Rendered template content

        Raises:
            TemplateError: If the template is missing, does not parse, or fails to render
        """
        try:
            template = self._env.get_template(template_name)
        except TemplateNotFound as e:
            raise TemplateError(
                f"Template not found: {template_name}", template_name, "parse"
            ) from e
        except TemplateSyntaxError as e:
            raise TemplateError(
                f"Failed to parse template {template_name}: {e}", template_name, "parse"
            ) from e

        try:
            return template.render(**context)
        except Exception as e:
            raise TemplateError(
                f"Failed to render template {template_name}: {e}", template_name, "execute"
            ) from e

    def _indent_filter(self, value: str, tabs: int = 1) -> str:
        """Indent all non-blank lines with tabs."""
        indent = "\t" * tabs
        lines = str(value).split("\n")
        return "\n".join(indent + line if line.strip() else line for line in lines)


def create_template_engine(template_dir: Optional[Path] = None) -> TemplateEngine:
    """Create a template engine, reading from ``template_dir`` when it exists."""
    return TemplateEngine(template_dir)
