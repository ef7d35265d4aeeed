"""Search engine files for Quire.

When ``seo`` is enabled the build writes ``sitemap.xml`` (one entry per
content item, ``domain`` followed by the item's URL) and an allow-all
``robots.txt`` pointing at the sitemap.

Classes:
    FeedGenerator: Base class for generated files.
    SitemapGenerator: Generates sitemap.xml.
    RobotsGenerator: Generates robots.txt.
    FeedRegistry: Writes a set of generators, refusing to overwrite.

Functions:
    create_default_feed_registry: Create a registry with the SEO generators.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from pathlib import Path

from markupsafe import escape

from .config import ProjectConfig
from .content import ContentRecord
from .errors import MissingDirectoryError, OutputExistsError, OutputWriteError


class FeedGenerator(ABC):
    """Abstract base class for generated site files."""

    @property
    @abstractmethod
    def filename(self) -> str:
        """Return the output filename, such as 'sitemap.xml'."""
        ...

    @abstractmethod
    def generate(self, records: Iterable[ContentRecord], config: ProjectConfig) -> str:
        """Generate the file contents.

        Args:
            records: Content items of the site.
            config: Project configuration.

        Returns:
            File contents.
        """
        ...


class SitemapGenerator(FeedGenerator):
    """Generates sitemap.xml following the sitemaps.org protocol."""

    @property
    def filename(self) -> str:
        return "sitemap.xml"

    def generate(self, records: Iterable[ContentRecord], config: ProjectConfig) -> str:
        urls = [
            f"<url><loc>{escape(config.domain + record.url)}</loc></url>"
            for record in records
        ]
        return (
            '<?xml version="1.0" encoding="UTF-8"?>\n'
            '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">\n'
            + "\n".join(urls)
            + "</urlset>"
        )


class RobotsGenerator(FeedGenerator):
    """Generates an allow-all robots.txt pointing at the sitemap."""

    @property
    def filename(self) -> str:
        return "robots.txt"

    def generate(self, records: Iterable[ContentRecord], config: ProjectConfig) -> str:
        return f"User-Agent: *\nDisallow:\n\nSitemap: {config.domain}/sitemap.xml"


class FeedRegistry:
    """Registry of generators written together.

    Attributes:
        _generators: Registered generators, in write order.
    """

    def __init__(self) -> None:
        self._generators: list[FeedGenerator] = []

    def register(self, generator: FeedGenerator) -> None:
        self._generators.append(generator)

    def generate_all(
        self,
        output_dir: Path,
        records: Iterable[ContentRecord],
        config: ProjectConfig,
    ) -> list[Path]:
        """Generate and write every registered file.

        All targets are checked before anything is written.

        Returns:
            Paths of the written files.

        Raises:
            MissingDirectoryError: If output_dir does not exist.
            OutputExistsError: If any target file already exists.
            OutputWriteError: If a file cannot be written.
        """
        if not output_dir.is_dir():
            raise MissingDirectoryError(
                f'The directory "{output_dir}" does not exist.', output_dir
            )
        targets = [output_dir / g.filename for g in self._generators]
        existing = [target for target in targets if target.exists()]
        if existing:
            names = ", ".join(f'"{target}"' for target in existing)
            raise OutputExistsError(f"The files {names} already exist.", existing[0])
        records_list = list(records)
        for generator, target in zip(self._generators, targets):
            content = generator.generate(records_list, config)
            try:
                target.write_text(content, encoding="utf-8")
            except OSError as exc:
                raise OutputWriteError(
                    f'Could not write "{target}": {exc}', target
                ) from exc
        return targets


def create_default_feed_registry() -> FeedRegistry:
    """Create a registry with the sitemap and robots generators."""
    registry = FeedRegistry()
    registry.register(SitemapGenerator())
    registry.register(RobotsGenerator())
    return registry
