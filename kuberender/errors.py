"""Exception hierarchy for kuberender.

Every error raised by the render pipeline derives from KubeRenderError so
callers can catch the whole family at once.  Configuration errors are raised
at construction time, before any render happens; everything else is raised
from ``render()``.
"""

from __future__ import annotations


class KubeRenderError(Exception):
    """Base class for all kuberender errors."""


# ---------------------------------------------------------------------------
# Construction-time errors
# ---------------------------------------------------------------------------


class ConfigurationError(KubeRenderError):
    """Renderer or engine configuration is invalid."""


class SourceRequiredError(ConfigurationError):
    """A renderer was constructed without any source."""

    def __init__(self) -> None:
        super().__init__("at least one source is required")


class FilesystemRequiredError(ConfigurationError):
    """A source has no filesystem."""

    def __init__(self, index: int) -> None:
        super().__init__(f"source[{index}]: filesystem is required")
        self.source_index = index


class PathEmptyError(ConfigurationError):
    """A source path pattern is empty or whitespace."""

    def __init__(self, index: int) -> None:
        super().__init__(f"source[{index}]: path is required")
        self.source_index = index


class InvalidPatternError(ConfigurationError):
    """A source path pattern escapes the filesystem root or is malformed."""

    def __init__(self, pattern: str, reason: str, index: int | None = None) -> None:
        prefix = f"source[{index}]: " if index is not None else ""
        super().__init__(f"{prefix}invalid path pattern {pattern!r}: {reason}")
        self.pattern = pattern
        self.reason = reason
        self.source_index = index


class InvalidOptionError(ConfigurationError):
    """A renderer option has the wrong shape (e.g. a non-callable filter)."""


# ---------------------------------------------------------------------------
# Render-time errors
# ---------------------------------------------------------------------------


class NoFilesMatchedError(KubeRenderError):
    """A pattern matched zero eligible files."""

    def __init__(self, pattern: str) -> None:
        super().__init__(f"no files matched pattern {pattern!r}")
        self.pattern = pattern


class PathIsDirectoryError(KubeRenderError):
    """An exact (non-glob) path names a directory."""

    def __init__(self, path: str) -> None:
        super().__init__(f"path {path!r} is a directory")
        self.path = path


class SourceReadError(KubeRenderError):
    """A matched file could not be read."""

    def __init__(self, path: str, cause: OSError) -> None:
        super().__init__(f"failed to read {path!r}: {cause}")
        self.path = path
        self.cause = cause


class DecodeError(KubeRenderError):
    """A file contains malformed document content."""

    def __init__(self, path: str, index: int | None, detail: str) -> None:
        where = path or "<input>"
        if index is not None:
            where = f"{where} (document {index})"
        super().__init__(f"failed to decode {where}: {detail}")
        self.path = path
        self.index = index
        self.detail = detail


class FilterError(KubeRenderError):
    """A filter raised while evaluating a document."""

    def __init__(self, document_ref: str, cause: Exception) -> None:
        super().__init__(f"filter failed on {document_ref}: {cause}")
        self.document_ref = document_ref
        self.cause = cause


class TransformError(KubeRenderError):
    """A transformer failed or returned something that is not a document."""

    def __init__(self, document_ref: str, detail: str) -> None:
        super().__init__(f"transformer failed on {document_ref}: {detail}")
        self.document_ref = document_ref
        self.detail = detail


class CacheComputationError(KubeRenderError):
    """A memoized loader raised an error that is not a KubeRenderError."""

    def __init__(self, key: str, cause: BaseException) -> None:
        super().__init__(f"cache computation for key {key!r} failed: {cause}")
        self.key = key
        self.cause = cause
