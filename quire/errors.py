"""Error types for Quire.

Every failure raised by Quire is a QuireError carrying a human-readable
message and, where one is involved, the path of the offending file or
directory. Subclasses name the failure category so callers can catch what
they care about; none of them adds structured error codes.
"""

from __future__ import annotations

from pathlib import PurePath


class QuireError(Exception):
    """Base error for the whole build pipeline.

    Attributes:
        message: Human-readable error message.
        path: Optional path to the file or directory that caused the error.
    """

    def __init__(self, message: str, path: PurePath | None = None):
        self.message = message
        self.path = path
        super().__init__(message)


class ScanError(QuireError):
    """Walking a directory failed."""


class MissingDirectoryError(QuireError):
    """A required directory is absent or holds no usable files."""


class MissingFileError(QuireError):
    """A required file is absent."""


class ConfigNotFoundError(MissingFileError):
    """No configuration file exists in the project root."""


class NoContentFoundError(MissingFileError):
    """A content scan produced no files."""


class MalformedContentError(QuireError):
    """A content file could not be split into front matter and body."""


class MissingLayoutKeyError(MalformedContentError):
    """A content file's front matter has no usable ``layout`` key."""


class ConfigParseError(QuireError):
    """The configuration file does not deserialize into ProjectConfig."""


class MalformedDataError(QuireError):
    """A structured data file is not a list of flat records."""


class InconsistentConfigError(QuireError):
    """A configuration flag is enabled without its required companion field."""


class UnresolvedReferenceError(QuireError):
    """A name used as a cross reference does not resolve."""


class LayoutNotFoundError(UnresolvedReferenceError):
    """A content file references a layout that was not loaded.

    Attributes:
        layout: The layout name that was requested.
    """

    def __init__(self, layout: str, path: PurePath | None = None):
        self.layout = layout
        super().__init__(f'The requested layout "{layout}" could not be found.', path)


class AnchorNotFoundError(UnresolvedReferenceError):
    """An anchor segment does not occur in a path.

    Attributes:
        anchor: The missing segment.
    """

    def __init__(self, anchor: str, path: PurePath):
        self.anchor = anchor
        super().__init__(f'Segment "{anchor}" does not occur in path "{path}".', path)


class PathSegmentError(QuireError):
    """A path segment cannot be represented as text."""


class OutputExistsError(QuireError):
    """An output file or directory is already present."""


class OutputWriteError(QuireError):
    """An output file or directory could not be written."""


class InvalidEnvironmentError(QuireError):
    """The build environment is neither production nor development."""


class RenderError(QuireError):
    """The template engine failed to render a page."""


class StylesheetError(QuireError):
    """The stylesheet compiler is missing or failed."""
