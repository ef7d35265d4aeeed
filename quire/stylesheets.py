"""Stylesheet compilation for Quire.

``sass/index.scss`` is compiled with the Dart Sass command line tool, looked
up on ``PATH`` first and then in the project's ``node_modules/.bin``. The
result is written to ``<dist_dir>/css/index.css``.

Key classes:
- SassCompiler: Runs the ``sass`` executable and returns the CSS.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path

from .errors import StylesheetError
from .protocols import StylesheetCompiler
from .render import write_output

logger = logging.getLogger(__name__)

CSS_DIR = "css"
CSS_FILE = "index.css"


def find_executable(name: str, project_root: Path | None = None) -> str | None:
    """Find an executable in PATH or the project's node_modules.

    Args:
        name: Name of the executable (e.g. 'sass').
        project_root: Optional project root for a local node_modules lookup.

    Returns:
        Full path to the executable if found, None otherwise.
    """
    found = shutil.which(name)
    if found:
        return found
    if project_root is not None:
        local = project_root / "node_modules" / ".bin" / name
        if local.exists():
            return str(local)
    return None


class SassCompiler:
    """Compiles a Sass entry point with the ``sass`` CLI.

    Attributes:
        project_root: Root directory of the project.
        executable: Name of the Sass executable.
    """

    def __init__(self, project_root: Path, executable: str = "sass"):
        self.project_root = project_root
        self.executable = executable

    def compile(self, entry: Path) -> str:
        """Compile a Sass file to CSS.

        Args:
            entry: Sass entry point.

        Returns:
            The compiled CSS.

        Raises:
            StylesheetError: If the compiler is missing or fails.
        """
        sass_bin = find_executable(self.executable, self.project_root)
        if not sass_bin:
            raise StylesheetError(
                f'Sass compiler "{self.executable}" not found. Install it with '
                "`npm install -g sass` or `npm install -D sass` in the project.",
                entry,
            )
        cmd = [sass_bin, "--no-source-map", str(entry)]
        logger.debug("Running %s", " ".join(cmd))
        try:
            result = subprocess.run(cmd, capture_output=True, text=True)
        except OSError as exc:
            raise StylesheetError(f"Could not run {sass_bin}: {exc}", entry) from exc
        if result.returncode != 0:
            raise StylesheetError(
                f"Sass compilation failed: {result.stderr.strip()}", entry
            )
        return result.stdout


def compile_stylesheet(
    entry: Path, output_dir: Path, compiler: StylesheetCompiler
) -> Path:
    """Compile the Sass entry point into the output directory.

    Returns:
        Path of the written CSS file.

    Raises:
        StylesheetError: If compilation fails.
        OutputExistsError: If the CSS file already exists.
    """
    css = compiler.compile(entry)
    target = output_dir / CSS_DIR / CSS_FILE
    write_output(target, css)
    return target
