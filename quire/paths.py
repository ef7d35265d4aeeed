"""Path segment algebra for Quire.

Output locations and public URLs are derived from source paths by treating
a path as an ordered list of segments: the output directory name is spliced
in after the project root, and the public URL is whatever follows the output
directory segment.

Key functions:
- split_segments / join_segments: Convert between paths and segment lists.
- insert_segment_at / remove_segment / truncate_at: Edit a path around an
  anchor segment.
- to_web_path: Render a relative path as a root-relative URL.
- derive_output_path: Map a content source path into the output directory.
- derive_routing_paths: Compute the on-disk HTML file and public URL of a page.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path, PurePath

from .errors import AnchorNotFoundError, PathSegmentError

INDEX_STEM = "index"
INDEX_FILE = "index.html"


class Direction(Enum):
    """Which side of the anchor a new segment goes."""

    BEFORE = "before"
    AFTER = "after"


@dataclass(frozen=True)
class RoutedPath:
    """Where a page is written and where it is served from.

    Attributes:
        on_disk: Path of the rendered HTML file.
        url: Root-relative public URL, always ending in ``/``.
    """

    on_disk: Path
    url: str


def split_segments(path: PurePath) -> list[str]:
    """Split a path into its ordered segments.

    Root and drive markers are kept as segments, so ``/srv/site`` splits into
    ``["/", "srv", "site"]``.

    Args:
        path: Path to split.

    Returns:
        List of segments.

    Raises:
        PathSegmentError: If a segment cannot be encoded as text.
    """
    segments = list(PurePath(path).parts)
    for segment in segments:
        try:
            segment.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise PathSegmentError(
                f'Error splitting path "{path!r}": segment {segment!r} is not valid text.',
                PurePath(path),
            ) from exc
    return segments


def join_segments(segments: Iterable[str]) -> Path:
    """Rebuild a path from segments produced by split_segments.

    Args:
        segments: Ordered path segments.

    Returns:
        The joined path (``.`` for no segments).
    """
    return Path(*segments)


def _anchor_index(segments: list[str], anchor: str, path: PurePath) -> int:
    try:
        return segments.index(anchor)
    except ValueError:
        raise AnchorNotFoundError(anchor, path) from None


def insert_segment_at(
    path: PurePath, segment: str, anchor: str, direction: Direction
) -> Path:
    """Insert a segment next to the first occurrence of an anchor segment.

    Args:
        path: Path to edit.
        segment: Segment to insert.
        anchor: Existing segment to insert next to.
        direction: Insert before or after the anchor.

    Returns:
        The edited path.

    Raises:
        AnchorNotFoundError: If the anchor does not occur in the path.
    """
    segments = split_segments(path)
    index = _anchor_index(segments, anchor, path)
    if direction is Direction.AFTER:
        index += 1
    segments.insert(index, segment)
    return join_segments(segments)


def remove_segment(path: PurePath, segment: str) -> Path:
    """Remove the first occurrence of a segment.

    Raises:
        AnchorNotFoundError: If the segment does not occur in the path.
    """
    segments = split_segments(path)
    del segments[_anchor_index(segments, segment, path)]
    return join_segments(segments)


def truncate_at(path: PurePath, anchor: str, include_anchor: bool) -> Path:
    """Drop every segment before the first occurrence of an anchor.

    Args:
        path: Path to truncate.
        anchor: Segment to cut at.
        include_anchor: Drop the anchor itself as well.

    Returns:
        The remaining segments as a path (``.`` if nothing remains).

    Raises:
        AnchorNotFoundError: If the anchor does not occur in the path.
    """
    segments = split_segments(path)
    index = _anchor_index(segments, anchor, path)
    if include_anchor:
        index += 1
    return join_segments(segments[index:])


def to_web_path(path: PurePath) -> str:
    """Join a path's segments with ``/`` behind a single leading ``/``.

    Examples:
        >>> to_web_path(Path("blog/post"))
        '/blog/post'

        >>> to_web_path(Path("."))
        '/'
    """
    return "/" + "/".join(split_segments(path))


def derive_output_path(source: PurePath, project_root: PurePath, dist_dir: str) -> Path:
    """Insert the output directory right after the project root.

    ``project/content/post.markdown`` becomes
    ``project/<dist_dir>/content/post.markdown``.

    Args:
        source: Content source path, located under project_root.
        project_root: Root directory of the project.
        dist_dir: Output directory name.

    Returns:
        The source path relocated into the output directory.

    Raises:
        AnchorNotFoundError: If source is not under project_root.
    """
    root = Path(project_root)
    try:
        rel = Path(source).relative_to(root)
    except ValueError:
        raise AnchorNotFoundError(str(root), source) from None
    if not root.name:
        return root / dist_dir / rel
    # Anchoring on a path that starts at the root's own name guarantees the
    # first occurrence is the root itself.
    return root.parent / insert_segment_at(
        Path(root.name) / rel, dist_dir, root.name, Direction.AFTER
    )


def derive_routing_paths(
    output_path: PurePath, dist_dir: str, project_root: PurePath | None = None
) -> RoutedPath:
    """Compute the HTML file and public URL for a page.

    ``index`` pages keep their directory and get a ``.html`` extension; every
    other page becomes ``<stem>/index.html``. The URL is the directory of the
    HTML file relative to the output directory.

    Examples:
        ``dist/content/post.markdown`` -> ``dist/content/post/index.html``,
        ``/content/post/``

        ``dist/content/index.markdown`` -> ``dist/content/index.html``,
        ``/content/``

    Args:
        output_path: Content path already relocated by derive_output_path.
        dist_dir: Output directory name.
        project_root: Root directory of the project. When given, only the
            part of the path below it is searched for ``dist_dir``, so a
            directory above the project with the same name is ignored.

    Returns:
        RoutedPath for the page.

    Raises:
        AnchorNotFoundError: If output_path is not under project_root.
    """
    output_path = Path(output_path)
    base = output_path.with_suffix("")
    if output_path.stem == INDEX_STEM:
        on_disk = base.with_suffix(".html")
    else:
        on_disk = base / INDEX_FILE
    page_dir = on_disk.parent
    if project_root is not None:
        try:
            page_dir = page_dir.relative_to(project_root)
        except ValueError:
            raise AnchorNotFoundError(str(project_root), on_disk) from None
    url = to_web_path(truncate_at(page_dir, dist_dir, include_anchor=True))
    if not url.endswith("/"):
        url += "/"
    return RoutedPath(on_disk=on_disk, url=url)
