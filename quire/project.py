"""In-memory project model for Quire.

assemble_project scans a project directory once and returns a ProjectModel:
an immutable snapshot of the configuration, every content item with its
output path and URL, the loop content groups, layouts, partials, structured
data and the stylesheet entry point. A model is built fresh for every
compile and never updated in place.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import cached_property
from pathlib import Path
from typing import Any

from .config import ProjectConfig, load_config
from .content import ContentRecord
from .scanner import (
    LayoutRecord,
    StructuredDataFile,
    find_content_files,
    find_data_files,
    find_layouts,
    find_loop_content_groups,
    find_partials,
    find_stylesheet_entry,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProjectModel:
    """Snapshot of every input of a project.

    Attributes:
        root: Project root directory.
        config: Validated project configuration.
        content_files: Source path to ContentRecord.
        loop_content: Group name to records, or None when disabled.
        layouts: Layout templates in discovery order.
        stylesheet: Sass entry point, if the project has one.
        partials: Partial name to template source.
        data_files: Data file stem to StructuredDataFile, if any.
    """

    root: Path
    config: ProjectConfig
    content_files: dict[Path, ContentRecord]
    loop_content: dict[str, list[ContentRecord]] | None
    layouts: list[LayoutRecord]
    stylesheet: Path | None
    partials: dict[str, str]
    data_files: dict[str, StructuredDataFile] | None = field(default=None)

    @property
    def output_dir(self) -> Path:
        """Directory receiving every generated file."""
        return self.root / self.config.dist_dir

    @cached_property
    def layout_index(self) -> dict[str, LayoutRecord]:
        """Layouts keyed by name; the first of duplicate names wins."""
        index: dict[str, LayoutRecord] = {}
        for layout in self.layouts:
            if layout.name in index:
                logger.warning(
                    "Layout %r at %s is shadowed by %s",
                    layout.name,
                    layout.path,
                    index[layout.name].path,
                )
                continue
            index[layout.name] = layout
        return index

    def clean_data(self) -> dict[str, list[dict[str, Any]]] | None:
        """Reduce data files to their names and records for templates."""
        if self.data_files is None:
            return None
        return {data.name: data.records for data in self.data_files.values()}


def assemble_project(root: Path) -> ProjectModel:
    """Scan a project directory into a ProjectModel.

    Inputs are gathered in a fixed order and the first failure propagates
    unchanged, so callers either get a complete model or an error.

    Args:
        root: Project root directory.

    Returns:
        The assembled ProjectModel.
    """
    root = Path(root)
    config = load_config(root)
    content_files = find_content_files(root, config)
    data_files = find_data_files(root)
    loop_content = find_loop_content_groups(root, config)
    layouts = find_layouts(root)
    stylesheet = find_stylesheet_entry(root)
    partials = find_partials(root)
    logger.info(
        "Assembled %s: %d content files, %d layouts, %d partials",
        root,
        len(content_files),
        len(layouts),
        len(partials),
    )
    return ProjectModel(
        root=root,
        config=config,
        content_files=content_files,
        loop_content=loop_content,
        layouts=layouts,
        stylesheet=stylesheet,
        partials=partials,
        data_files=data_files,
    )
