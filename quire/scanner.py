"""Project discovery for Quire.

This module finds and loads every input of a project: content files
anywhere under the root, loop content directories, layouts, partials, the
Sass entry point and structured data files.

Expected layout::

    project/
        config.json | config.yml
        layouts/*.jinja
        partials/*.jinja
        data/*.yml | data/*.json     (optional)
        sass/index.scss              (optional)
        **/*.markdown

Key functions:
- find_by_extension: Recursively list files with a given extension.
- find_content_files: Parse and route every content file.
- find_loop_content_groups: Parse and route the configured loop content.
- find_layouts / find_partials: Load templates.
- find_stylesheet_entry: Locate the Sass entry point.
- find_data_files: Load structured data.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

import yaml

from .config import ProjectConfig
from .content import CONTENT_EXTENSION, ContentRecord, build_content_record
from .errors import (
    InconsistentConfigError,
    MalformedContentError,
    MalformedDataError,
    MissingDirectoryError,
    MissingFileError,
    NoContentFoundError,
    ScanError,
)

logger = logging.getLogger(__name__)

TEMPLATE_EXTENSION = "jinja"
LAYOUTS_DIR = "layouts"
PARTIALS_DIR = "partials"
DATA_DIR = "data"
SASS_DIR = "sass"
SASS_ENTRY = "index.scss"
IGNORED_DIRS = ("node_modules",)


class DataFormat(Enum):
    """Serialization format of a structured data file."""

    JSON = "json"
    YAML = "yaml"


@dataclass(frozen=True)
class LayoutRecord:
    """A layout template.

    Attributes:
        name: Name content files use to select the layout.
        path: Path of the template file.
        source: Raw template source.
    """

    name: str
    path: Path
    source: str


@dataclass(frozen=True)
class StructuredDataFile:
    """A data file from the ``data`` directory.

    Attributes:
        path: Path of the data file.
        name: File stem; the key templates use under ``data``.
        format: Format the file was parsed as.
        records: Flat records in file order.
    """

    path: Path
    name: str
    format: DataFormat
    records: list[dict[str, Any]]


def template_name(path: Path) -> str:
    """Return the name a template is referenced by.

    ``post.jinja`` and ``post.html.jinja`` are both named ``post``.
    """
    name = path.name
    suffix = f".{TEMPLATE_EXTENSION}"
    if name.endswith(suffix):
        name = name[: -len(suffix)]
    if name.endswith(".html"):
        name = name[: -len(".html")]
    return name


def find_by_extension(root: Path, ext: str) -> list[Path] | None:
    """Recursively find files whose extension is exactly ``ext``.

    Args:
        root: Directory to walk.
        ext: Extension without the leading dot.

    Returns:
        Sorted list of matching files, or None if there are none.

    Raises:
        ScanError: If the directory cannot be walked.
    """

    def on_error(exc: OSError) -> None:
        raise ScanError(f'Could not scan "{root}": {exc}', root) from exc

    suffix = f".{ext}"
    found: list[Path] = []
    for dirpath, _dirnames, filenames in os.walk(root, onerror=on_error):
        for filename in filenames:
            path = Path(dirpath) / filename
            if path.suffix == suffix:
                found.append(path)
    if not found:
        return None
    return sorted(found)


def _require_dir(path: Path, description: str) -> None:
    if not path.is_dir():
        raise MissingDirectoryError(
            f'The directory for {description} "{path}" does not exist.', path
        )


def _read_template(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise MalformedContentError(
            f"Template is not valid UTF-8 text: {exc.reason}.", path
        ) from exc


def _is_skipped(relative: Path, dist_dir: str) -> bool:
    folders = relative.parts[:-1]
    if folders and folders[0] == dist_dir:
        return True
    return any(folder in IGNORED_DIRS for folder in folders)


def find_content_files(root: Path, config: ProjectConfig) -> dict[Path, ContentRecord]:
    """Parse and route every content file under the project root.

    Files inside the output directory or an ignored directory such as
    ``node_modules`` are skipped.

    Args:
        root: Project root.
        config: Project configuration.

    Returns:
        Mapping of source path to ContentRecord, in sorted path order.

    Raises:
        NoContentFoundError: If the project has no content files.
    """
    files = [
        path
        for path in find_by_extension(root, CONTENT_EXTENSION) or []
        if not _is_skipped(path.relative_to(root), config.dist_dir)
    ]
    if not files:
        raise NoContentFoundError(
            f'No files ending in ".{CONTENT_EXTENSION}" found at the path "{root}".',
            root,
        )
    return {
        path: build_content_record(path, root, config.dist_dir) for path in files
    }


def find_loop_content_groups(
    root: Path, config: ProjectConfig
) -> dict[str, list[ContentRecord]] | None:
    """Parse and route the content of every loop content directory.

    Args:
        root: Project root.
        config: Project configuration.

    Returns:
        Mapping of directory name to its records, or None when loop content
        is disabled.

    Raises:
        InconsistentConfigError: If loop content is enabled without directories.
        NoContentFoundError: If a loop content directory has no content files.
    """
    if not config.has_loop_content:
        return None
    if not config.loop_content_dirs:
        raise InconsistentConfigError(
            'The "has_loop_content" flag was set to "true" but directories '
            "containing such content were not specified."
        )
    groups: dict[str, list[ContentRecord]] = {}
    for name in config.loop_content_dirs:
        directory = root / name
        files = find_by_extension(directory, CONTENT_EXTENSION)
        if files is None:
            raise NoContentFoundError(
                f'No files ending in ".{CONTENT_EXTENSION}" found at the path '
                f'"{directory}".',
                directory,
            )
        groups[name] = [
            build_content_record(path, root, config.dist_dir) for path in files
        ]
        logger.debug("Loop content group %r has %d items", name, len(files))
    return groups


def find_layouts(root: Path) -> list[LayoutRecord]:
    """Load every layout template.

    Raises:
        MissingDirectoryError: If ``layouts`` is missing or holds no templates.
    """
    layouts_dir = root / LAYOUTS_DIR
    _require_dir(layouts_dir, "layouts")
    files = find_by_extension(layouts_dir, TEMPLATE_EXTENSION)
    if files is None:
        raise MissingDirectoryError(
            f'No layout files found at the following path: "{layouts_dir}"!',
            layouts_dir,
        )
    return [
        LayoutRecord(
            name=template_name(path),
            path=path,
            source=_read_template(path),
        )
        for path in files
    ]


def find_partials(root: Path) -> dict[str, str]:
    """Load every partial template, keyed by name.

    Raises:
        MissingDirectoryError: If ``partials`` is missing or holds no templates.
    """
    partials_dir = root / PARTIALS_DIR
    _require_dir(partials_dir, "partial templates")
    files = find_by_extension(partials_dir, TEMPLATE_EXTENSION)
    if files is None:
        raise MissingDirectoryError(
            "The directory containing partial templates cannot be empty.",
            partials_dir,
        )
    partials: dict[str, str] = {}
    for path in files:
        partials.setdefault(template_name(path), _read_template(path))
    return partials


def find_stylesheet_entry(root: Path) -> Path | None:
    """Locate ``sass/index.scss``.

    Returns:
        The entry file, or None if the project has no ``sass`` directory.

    Raises:
        MissingFileError: If ``sass`` exists without an entry file.
    """
    sass_dir = root / SASS_DIR
    if not sass_dir.is_dir():
        return None
    entry = sass_dir / SASS_ENTRY
    if not entry.is_file():
        raise MissingFileError(
            f'The SASS directory at the path "{sass_dir}" exists but does not '
            f'contain an "{SASS_ENTRY}" file.',
            sass_dir,
        )
    return entry


def _load_records(path: Path, data_format: DataFormat) -> list[dict[str, Any]]:
    with open(path, encoding="utf-8") as f:
        try:
            if data_format is DataFormat.JSON:
                payload = json.load(f)
            else:
                payload = yaml.safe_load(f)
        except (json.JSONDecodeError, yaml.YAMLError, UnicodeDecodeError) as exc:
            raise MalformedDataError(f"Could not parse data file: {exc}", path) from exc
    if not isinstance(payload, list):
        raise MalformedDataError("A data file must contain a list of records.", path)
    records: list[dict[str, Any]] = []
    for record in payload:
        if not isinstance(record, dict):
            raise MalformedDataError("Every record must be a mapping.", path)
        if any(isinstance(value, (dict, list)) for value in record.values()):
            raise MalformedDataError("Record values must not be nested.", path)
        records.append({str(key): value for key, value in record.items()})
    return records


def find_data_files(root: Path) -> dict[str, StructuredDataFile] | None:
    """Load the structured data files of the project.

    YAML files are used when the ``data`` directory has any; otherwise its
    JSON files are.

    Returns:
        Mapping of file stem to StructuredDataFile, or None without a
        ``data`` directory.

    Raises:
        MissingFileError: If ``data`` holds neither YAML nor JSON files.
        MalformedDataError: If a data file is not a list of flat records, or
            two data files share a name.
    """
    data_dir = root / DATA_DIR
    if not data_dir.is_dir():
        return None
    yaml_files = sorted(
        (find_by_extension(data_dir, "yml") or [])
        + (find_by_extension(data_dir, "yaml") or [])
    )
    if yaml_files:
        files, data_format = yaml_files, DataFormat.YAML
    else:
        json_files = find_by_extension(data_dir, "json")
        if json_files is None:
            raise MissingFileError(
                "The project's \"data\" directory cannot be empty.", data_dir
            )
        files, data_format = json_files, DataFormat.JSON
    data_files: dict[str, StructuredDataFile] = {}
    for path in files:
        if path.stem in data_files:
            raise MalformedDataError(
                f'Data files "{data_files[path.stem].path}" and "{path}" share the '
                f'name "{path.stem}".',
                path,
            )
        data_files[path.stem] = StructuredDataFile(
            path=path,
            name=path.stem,
            format=data_format,
            records=_load_records(path, data_format),
        )
    return data_files
