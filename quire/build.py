"""Site building functionality for Quire.

This module sequences a whole compile: assemble the project model, render
every page, copy assets, compile the stylesheet, check that every loop
content item was written and emit the search engine files. The first
failure aborts the build; whatever was already written stays on disk and
the remedy is to clean and compile again.

Key functions:
- compile_project: Build a project into its output directory.
- clean_project: Remove a project's output directory.
"""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path

from .assets import AssetCopier
from .config import load_config
from .errors import MissingDirectoryError, MissingFileError, OutputWriteError
from .feeds import create_default_feed_registry
from .project import ProjectModel, assemble_project
from .protocols import StylesheetCompiler, TemplateRenderer
from .render import BuildEnvironment, render_project
from .stylesheets import SassCompiler, compile_stylesheet

logger = logging.getLogger(__name__)


@dataclass
class BuildResult:
    """Result of a compile.

    Attributes:
        model: The project model the build was made from.
        output_dir: Directory the site was built into.
        pages: Rendered page files.
        assets: Copied files and directories.
        stylesheet: Compiled CSS file, if the project has a stylesheet.
        feeds: Search engine files written.
    """

    model: ProjectModel
    output_dir: Path
    pages: list[Path]
    assets: list[Path] = field(default_factory=list)
    stylesheet: Path | None = None
    feeds: list[Path] = field(default_factory=list)


def verify_loop_content(model: ProjectModel) -> None:
    """Check that every loop content item was rendered.

    Raises:
        MissingFileError: If an item's output file does not exist.
    """
    if model.loop_content is None:
        return
    for records in model.loop_content.values():
        for record in records:
            if not record.path.exists():
                raise MissingFileError(
                    "The following file from the loop content directories could "
                    f'not be generated: "{record.path}"',
                    record.path,
                )


def compile_project(
    project_root: Path,
    environment: BuildEnvironment | str | None,
    stylesheet_compiler: StylesheetCompiler | None = None,
    template_engine: TemplateRenderer | None = None,
) -> BuildResult:
    """Build a project into its output directory.

    Args:
        project_root: Root directory of the project.
        environment: "production" or "development"; selects ``baseurl``.
        stylesheet_compiler: Optional compiler for ``sass/index.scss``.
        template_engine: Optional template renderer.

    Returns:
        BuildResult describing everything written.

    Raises:
        QuireError: On the first failing step.
        MissingDirectoryError: If the project or its output path is not a
            directory.
    """
    root = Path(project_root)
    if not root.is_dir():
        raise MissingDirectoryError(f'The directory "{root}" does not exist.', root)
    env = BuildEnvironment.parse(environment)

    model = assemble_project(root)
    output_dir = model.output_dir
    if output_dir.exists() and not output_dir.is_dir():
        raise MissingDirectoryError(f'"{output_dir}" is not a directory.', output_dir)
    try:
        output_dir.mkdir(exist_ok=True)
    except OSError as exc:
        raise OutputWriteError(
            f'Could not create the directory "{output_dir}": {exc}', output_dir
        ) from exc

    pages = render_project(model, env, template_engine)
    assets = AssetCopier(root, output_dir).run(model.config)

    stylesheet = None
    if model.stylesheet is not None:
        compiler = stylesheet_compiler or SassCompiler(root)
        stylesheet = compile_stylesheet(model.stylesheet, output_dir, compiler)
    else:
        logger.debug("No stylesheet entry point; skipping CSS")

    verify_loop_content(model)

    feeds: list[Path] = []
    if model.config.seo:
        feeds = create_default_feed_registry().generate_all(
            output_dir, model.content_files.values(), model.config
        )

    logger.info("Built %d pages into %s", len(pages), output_dir)
    return BuildResult(
        model=model,
        output_dir=output_dir,
        pages=pages,
        assets=assets,
        stylesheet=stylesheet,
        feeds=feeds,
    )


def clean_project(project_root: Path) -> bool:
    """Remove the configured output directory of a project.

    Cleaning a project that has no output directory is not an error.

    Args:
        project_root: Root directory of the project.

    Returns:
        True if a directory was removed, False if there was none.

    Raises:
        MissingDirectoryError: If the output path exists but is not a directory.
        OutputWriteError: If the directory cannot be removed.
    """
    root = Path(project_root)
    config = load_config(root)
    target = root / config.dist_dir
    if not target.exists():
        logger.info("Nothing to clean: %s does not exist", target)
        return False
    if not target.is_dir():
        raise MissingDirectoryError(f'"{target}" is not a directory.', target)
    try:
        shutil.rmtree(target)
    except OSError as exc:
        raise OutputWriteError(f'Could not remove "{target}": {exc}', target) from exc
    logger.debug("Removed %s", target)
    return True
