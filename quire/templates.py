"""Template rendering engine for Quire.

Layouts are rendered with Jinja2. Partials are served from memory, so a
layout pulls one in by name with ``{% include "header" %}``.

Key class:
- TemplateEngine: Renders layout sources against a template context.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from jinja2 import (
    DictLoader,
    Environment,
    TemplateNotFound,
    TemplateSyntaxError,
    UndefinedError,
    select_autoescape,
)

from .errors import RenderError

__all__ = ["TemplateEngine"]


def _format_error_message(exc: Exception) -> str:
    """Describe a Jinja2 failure in one line, naming the line when known."""
    if isinstance(exc, TemplateSyntaxError):
        return f"Template syntax error on line {exc.lineno}: {exc.message}"
    if isinstance(exc, TemplateNotFound):
        return f"Partial not found: {exc.name}"
    if isinstance(exc, UndefinedError):
        return f"Undefined variable: {exc.message}"
    return f"{type(exc).__name__}: {exc}"


class TemplateEngine:
    """Template rendering engine using Jinja2.

    Attributes:
        partials: Partial name to template source.
        env: Jinja2 environment with the partials installed.
    """

    def __init__(self, partials: Mapping[str, str]):
        """Initialize the template engine.

        Args:
            partials: Partial name to template source.
        """
        self.partials = dict(partials)
        self.env = Environment(
            loader=DictLoader(self.partials),
            autoescape=select_autoescape(
                ["html", "xml"], default_for_string=True, default=True
            ),
            enable_async=False,
        )

    def render(
        self, source: str, context: Mapping[str, Any], path: Path | None = None
    ) -> str:
        """Render a template source.

        Args:
            source: Template source to render.
            context: Variables to make available in the template.
            path: Template path, for error messages.

        Returns:
            Rendered string.

        Raises:
            RenderError: If the template cannot be parsed or rendered.
        """
        try:
            template = self.env.from_string(source)
            return template.render(**context)
        except Exception as exc:
            raise RenderError(_format_error_message(exc), path) from exc
