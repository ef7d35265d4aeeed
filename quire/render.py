"""Page rendering for Quire.

For every content item the driver looks up its layout by name, builds the
template context and writes the rendered HTML to the item's output path.
Outputs are never overwritten: compiling into an output directory that
already holds a page fails, and the remedy is to clean first.

Templates see exactly these variables:

- ``site``: the ProjectConfig
- ``page``: the ContentRecord being rendered
- ``loop_content``: group name to ContentRecords, or None
- ``data``: data file name to records, or None
- ``baseurl``: production or development URL, by build environment
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from .config import ProjectConfig
from .content import ContentRecord
from .errors import (
    InvalidEnvironmentError,
    LayoutNotFoundError,
    OutputExistsError,
    OutputWriteError,
)
from .project import ProjectModel
from .protocols import TemplateRenderer
from .scanner import LayoutRecord
from .templates import TemplateEngine

logger = logging.getLogger(__name__)


class BuildEnvironment(Enum):
    """Selects which base URL is embedded in rendered pages."""

    PRODUCTION = "production"
    DEVELOPMENT = "development"

    @classmethod
    def parse(cls, value: BuildEnvironment | str | None) -> BuildEnvironment:
        """Convert a user-supplied value into a BuildEnvironment.

        Raises:
            InvalidEnvironmentError: Unless value is "production" or "development".
        """
        if isinstance(value, cls):
            return value
        for member in cls:
            if value == member.value:
                return member
        raise InvalidEnvironmentError(
            'The build environment must be set to either "production" or '
            f'"development", got {value!r}.'
        )

    def base_url(self, config: ProjectConfig) -> str:
        if self is BuildEnvironment.PRODUCTION:
            return config.prod_url
        return config.dev_url


@dataclass(frozen=True)
class RenderContext:
    """Inputs visible to one template render."""

    site: ProjectConfig
    page: ContentRecord
    loop_content: dict[str, list[ContentRecord]] | None
    data: dict[str, list[dict[str, Any]]] | None
    baseurl: str

    def as_mapping(self) -> dict[str, Any]:
        return {
            "site": self.site,
            "page": self.page,
            "loop_content": self.loop_content,
            "data": self.data,
            "baseurl": self.baseurl,
        }


def resolve_layout(
    name: str, layouts: Mapping[str, LayoutRecord] | Iterable[LayoutRecord]
) -> LayoutRecord:
    """Find a layout by name.

    Args:
        name: Layout name from a content item.
        layouts: A name index, or layouts in discovery order (first match wins).

    Returns:
        The matching LayoutRecord.

    Raises:
        LayoutNotFoundError: If no layout has this name.
    """
    if isinstance(layouts, Mapping):
        layout = layouts.get(name)
    else:
        layout = next((item for item in layouts if item.name == name), None)
    if layout is None:
        raise LayoutNotFoundError(name)
    return layout


def build_context(
    model: ProjectModel,
    record: ContentRecord,
    environment: BuildEnvironment | str,
) -> RenderContext:
    """Build the template context for one content item.

    Raises:
        InvalidEnvironmentError: If environment is not a recognized value.
    """
    env = BuildEnvironment.parse(environment)
    return RenderContext(
        site=model.config,
        page=record,
        loop_content=model.loop_content,
        data=model.clean_data(),
        baseurl=env.base_url(model.config),
    )


def render_one(
    model: ProjectModel,
    record: ContentRecord,
    context: RenderContext,
    engine: TemplateRenderer | None = None,
) -> str:
    """Render a content item with its layout.

    Raises:
        LayoutNotFoundError: If the item's layout does not exist.
        RenderError: If the template engine fails.
    """
    try:
        layout = resolve_layout(record.layout, model.layout_index)
    except LayoutNotFoundError as exc:
        exc.path = record.source
        raise
    engine = engine or TemplateEngine(model.partials)
    return engine.render(layout.source, context.as_mapping(), layout.path)


def write_output(path: Path, html: str) -> None:
    """Write a rendered page, creating parent directories.

    Raises:
        OutputExistsError: If the file already exists.
        OutputWriteError: If the file or its directory cannot be written.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise OutputWriteError(
            f'Could not create the directory "{path.parent}": {exc}', path
        ) from exc
    try:
        with open(path, "x", encoding="utf-8") as f:
            f.write(html)
    except FileExistsError:
        raise OutputExistsError(
            f'Filesystem at "{path}" already exists.', path
        ) from None
    except OSError as exc:
        raise OutputWriteError(f'Could not write "{path}": {exc}', path) from exc
    logger.debug("Wrote %s", path)


def render_project(
    model: ProjectModel,
    environment: BuildEnvironment | str,
    engine: TemplateRenderer | None = None,
) -> list[Path]:
    """Render and write every content item of a project.

    Returns:
        Paths of the written pages, in content order.
    """
    env = BuildEnvironment.parse(environment)
    engine = engine or TemplateEngine(model.partials)
    written: list[Path] = []
    for record in model.content_files.values():
        context = build_context(model, record, env)
        html = render_one(model, record, context, engine)
        write_output(record.path, html)
        written.append(record.path)
    return written
