"""Protocol definitions for Quire.

These protocols describe the collaborators the build delegates to, so a
different stylesheet compiler or template renderer can be passed in (tests
use in-memory fakes).
"""

from __future__ import annotations

from abc import abstractmethod
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class StylesheetCompiler(Protocol):
    """Protocol for compiling a stylesheet entry point to CSS."""

    @abstractmethod
    def compile(self, entry: Path) -> str:
        """Compile the entry point.

        Args:
            entry: Stylesheet entry file.

        Returns:
            Compiled CSS.

        Raises:
            StylesheetError: If compilation fails.
        """
        ...


@runtime_checkable
class TemplateRenderer(Protocol):
    """Protocol for rendering a template source against a context."""

    @abstractmethod
    def render(
        self, source: str, context: Mapping[str, Any], path: Path | None = None
    ) -> str:
        """Render a template source.

        Raises:
            RenderError: If rendering fails.
        """
        ...
