"""Content parsing for Quire.

A content file is a YAML front-matter block followed by a Markdown body::

    ---
    layout: post
    title: Hello
    ---
    # Hello

The front matter becomes the page's ``params``, its ``layout`` key selects
the layout that wraps the page, and the body is rendered to HTML.

Key pieces:
- ParsedContent: Front matter and rendered body of one file.
- ContentRecord: A parsed file together with its output path and URL.
- parse_content: Split, validate and render raw source.
- build_content_record: Read, parse and route one content file.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from markupsafe import Markup

from .errors import MalformedContentError, MissingLayoutKeyError
from .paths import derive_output_path, derive_routing_paths
from .renderers import MarkdownRenderer, default_markdown_renderer

logger = logging.getLogger(__name__)

CONTENT_EXTENSION = "markdown"

FRONTMATTER_RE = re.compile(
    r"\A---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|\Z)", re.DOTALL
)


@dataclass(frozen=True)
class ParsedContent:
    """Front matter and rendered body of one content file.

    Attributes:
        layout: Name of the layout that renders this content.
        params: Every front-matter key, ``layout`` included.
        content: Body rendered to HTML.
    """

    layout: str
    params: dict[str, Any]
    content: Markup


@dataclass(frozen=True)
class ContentRecord:
    """One content file ready to be rendered.

    Exposed to templates as ``page`` and inside ``loop_content`` groups.

    Attributes:
        layout: Name of the layout that renders this content.
        params: Front-matter values.
        content: Body rendered to HTML.
        url: Root-relative public URL of the page.
        path: Path of the HTML file this page is written to.
        source: Path of the content file.
    """

    layout: str
    params: dict[str, Any]
    content: Markup
    url: str
    path: Path
    source: Path = field(compare=False)


def extract_frontmatter(text: str) -> tuple[str, str] | None:
    """Split raw source into its front-matter block and body.

    Returns:
        Tuple of (front matter source, body), or None without a block.
    """
    match = FRONTMATTER_RE.match(text)
    if not match:
        return None
    return match.group(1), text[match.end() :]


def parse_content(
    raw: str,
    path: Path | None = None,
    renderer: MarkdownRenderer | None = None,
) -> ParsedContent:
    """Parse the source of a content file.

    Args:
        raw: Raw file contents.
        path: Source path, for error messages.
        renderer: Optional Markdown renderer.

    Returns:
        ParsedContent with the rendered body.

    Raises:
        MalformedContentError: If there is no front matter or it is not a mapping.
        MissingLayoutKeyError: If the front matter does not name a layout.
    """
    split = extract_frontmatter(raw)
    if split is None:
        raise MalformedContentError(
            "Content has no front-matter block delimited by '---' lines.", path
        )
    frontmatter, body = split
    try:
        data = yaml.safe_load(frontmatter)
    except yaml.YAMLError as exc:
        raise MalformedContentError(f"Invalid front matter: {exc}", path) from exc
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise MalformedContentError(
            "Front matter must be a mapping of keys to values.", path
        )
    params = {str(key): value for key, value in data.items()}
    layout = params.get("layout")
    if not isinstance(layout, str) or not layout:
        raise MissingLayoutKeyError(
            'The "layout" variable was not set in the front matter.', path
        )
    html = (renderer or default_markdown_renderer).render(body)
    return ParsedContent(layout=layout, params=params, content=Markup(html))


def build_content_record(
    source: Path,
    project_root: Path,
    dist_dir: str,
    renderer: MarkdownRenderer | None = None,
) -> ContentRecord:
    """Read a content file and compute where it is published.

    Args:
        source: Path of the content file under project_root.
        project_root: Root directory of the project.
        dist_dir: Output directory name.
        renderer: Optional Markdown renderer.

    Returns:
        ContentRecord for the file.
    """
    try:
        raw = source.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise MalformedContentError(
            f"Content is not valid UTF-8 text: {exc.reason}.", source
        ) from exc
    parsed = parse_content(raw, source, renderer)
    routed = derive_routing_paths(
        derive_output_path(source, project_root, dist_dir), dist_dir, project_root
    )
    logger.debug("Parsed %s -> %s (%s)", source, routed.on_disk, routed.url)
    return ContentRecord(
        layout=parsed.layout,
        params=parsed.params,
        content=parsed.content,
        url=routed.url,
        path=routed.on_disk,
        source=source,
    )
