"""Project configuration for Quire.

A project is configured by ``config.json`` or ``config.yml`` (``config.yaml``
is accepted as well) in its root directory. JSON takes priority whenever it
exists, so a project can keep a YAML copy around without it being read.

Key pieces:
- ProjectConfig: Typed configuration, exposed to templates as ``site``.
- load_config: Find, parse and validate the configuration of a project.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigNotFoundError, ConfigParseError, InconsistentConfigError

logger = logging.getLogger(__name__)

CONFIG_FILENAMES = ("config.json", "config.yml", "config.yaml")

_REQUIRED_FIELDS: dict[str, type] = {
    "domain": str,
    "seo": bool,
    "title": str,
    "dist_dir": str,
    "description": str,
    "prod_url": str,
    "dev_url": str,
    "copy_files": bool,
    "has_loop_content": bool,
}


@dataclass
class ProjectConfig:
    """Parsed project configuration.

    Attributes:
        domain: Top-level domain used for sitemap entries.
        seo: Whether to emit sitemap.xml and robots.txt.
        title: Site title.
        dist_dir: Name of the output directory under the project root.
        description: Site description.
        prod_url: Base URL for production builds.
        dev_url: Base URL for development builds.
        copy_files: Whether to copy copy_entities into the output directory.
        has_loop_content: Whether loop content groups are configured.
        copy_entities: Files and directories to copy, relative to the root.
        loop_content_dirs: Directories whose content forms loop content groups.
        user_config: Arbitrary user values for templates.
    """

    domain: str
    seo: bool
    title: str
    dist_dir: str
    description: str
    prod_url: str
    dev_url: str
    copy_files: bool
    has_loop_content: bool
    copy_entities: list[str] | None = None
    loop_content_dirs: list[str] | None = None
    user_config: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, mapping: Any, path: Path | None = None) -> ProjectConfig:
        """Deserialize a parsed config document.

        Args:
            mapping: Result of parsing the config file.
            path: Config file path, for error messages.

        Returns:
            ProjectConfig instance (not yet validated).

        Raises:
            ConfigParseError: If the document does not have the expected shape.
        """
        if not isinstance(mapping, dict):
            raise ConfigParseError(
                "The configuration must be a mapping of option names to values.", path
            )
        values: dict[str, Any] = {}
        for name, expected in _REQUIRED_FIELDS.items():
            if name not in mapping:
                raise ConfigParseError(f'Missing configuration option "{name}".', path)
            value = mapping[name]
            if not isinstance(value, expected):
                raise ConfigParseError(
                    f'Configuration option "{name}" must be of type {expected.__name__}.',
                    path,
                )
            values[name] = value
        for name in ("copy_entities", "loop_content_dirs"):
            value = mapping.get(name)
            if value is not None and not (
                isinstance(value, list) and all(isinstance(v, str) for v in value)
            ):
                raise ConfigParseError(
                    f'Configuration option "{name}" must be a list of strings.', path
                )
            values[name] = value
        user_config = mapping.get("user_config") or {}
        if not isinstance(user_config, dict):
            raise ConfigParseError(
                'Configuration option "user_config" must be a mapping.', path
            )
        values["user_config"] = {str(k): v for k, v in user_config.items()}
        return cls(**values)

    def validate(self, path: Path | None = None) -> None:
        """Check the cross-field invariants.

        Raises:
            InconsistentConfigError: If an invariant does not hold.
        """
        dist_parts = Path(self.dist_dir).parts
        if len(dist_parts) != 1 or dist_parts[0] in (".", "..", "/"):
            raise InconsistentConfigError(
                f'"dist_dir" must be a single directory name, got "{self.dist_dir}".',
                path,
            )
        if self.copy_files and not self.copy_entities:
            raise InconsistentConfigError(
                'The "copy_files" option was set to "true" but no entities were supplied.',
                path,
            )
        if self.has_loop_content and not self.loop_content_dirs:
            raise InconsistentConfigError(
                'The "has_loop_content" flag was set to "true" but directories '
                "containing such content were not specified.",
                path,
            )


def find_config_file(project_root: Path) -> Path:
    """Return the configuration file that load_config would read.

    Raises:
        ConfigNotFoundError: If no configuration file exists.
    """
    for name in CONFIG_FILENAMES:
        candidate = project_root / name
        if candidate.is_file():
            return candidate
    raise ConfigNotFoundError(
        f'No config file found in the directory "{project_root}".', project_root
    )


def load_config(project_root: Path) -> ProjectConfig:
    """Load and validate the configuration of a project.

    Args:
        project_root: Root directory of the project.

    Returns:
        Validated ProjectConfig.

    Raises:
        ConfigNotFoundError: If neither config.json nor config.yml exists.
        ConfigParseError: If the file cannot be parsed into a ProjectConfig.
        InconsistentConfigError: If the parsed configuration is inconsistent.
    """
    config_path = find_config_file(project_root)
    logger.debug("Reading configuration from %s", config_path)
    with open(config_path, encoding="utf-8") as f:
        try:
            if config_path.suffix == ".json":
                loaded = json.load(f)
            else:
                loaded = yaml.safe_load(f)
        except (json.JSONDecodeError, yaml.YAMLError, UnicodeDecodeError) as exc:
            raise ConfigParseError(
                f"Could not parse configuration: {exc}", config_path
            ) from exc
    config = ProjectConfig.from_mapping(loaded, config_path)
    config.validate(config_path)
    return config
