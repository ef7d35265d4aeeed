"""Asset copying for Quire.

When ``copy_files`` is enabled, every entry of ``copy_entities`` is copied
from the project root into the output directory: directories land under
their own name, files at the same relative path. Nothing already present in
the output directory is overwritten.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from .config import ProjectConfig
from .errors import (
    InconsistentConfigError,
    MissingFileError,
    OutputExistsError,
    OutputWriteError,
)

logger = logging.getLogger(__name__)


class AssetCopier:
    """Copies configured files and directories into the output directory.

    Attributes:
        project_root: Root directory of the project.
        output_dir: Directory receiving the copies.
    """

    def __init__(self, project_root: Path, output_dir: Path):
        self.project_root = project_root
        self.output_dir = output_dir

    def run(self, config: ProjectConfig) -> list[Path]:
        """Copy every configured entity.

        Returns:
            Destination paths, in configuration order.

        Raises:
            InconsistentConfigError: If copy_files is set without entities.
            MissingFileError: If an entity does not exist.
            OutputExistsError: If a destination already exists.
            OutputWriteError: If copying fails.
        """
        if not config.copy_files:
            return []
        if not config.copy_entities:
            raise InconsistentConfigError(
                'The "copy_files" option was set to "true" but no entities were supplied.'
            )
        return [self.copy(entity) for entity in config.copy_entities]

    def copy(self, entity: str) -> Path:
        """Copy one file or directory, given relative to the project root."""
        source = self.project_root / entity
        if source.is_dir():
            dest = self.output_dir / source.name
        elif source.is_file():
            dest = self.output_dir / entity
        else:
            raise MissingFileError(
                f'The file at the path "{source}" could not be found!', source
            )
        if dest.exists():
            raise OutputExistsError(f'Filesystem at "{dest}" already exists.', dest)
        try:
            if source.is_dir():
                shutil.copytree(source, dest)
            else:
                dest.parent.mkdir(parents=True, exist_ok=True)
                shutil.copy2(source, dest)
        except OSError as exc:
            raise OutputWriteError(f'Could not copy "{source}": {exc}', dest) from exc
        logger.debug("Copied %s -> %s", source, dest)
        return dest
