"""Resolve a glob pattern into the sorted list of manifest files it names."""

from __future__ import annotations

from kuberender.errors import NoFilesMatchedError, PathIsDirectoryError
from kuberender.fs import Filesystem, has_magic
from kuberender.observability.logging import get_logger

_logger = get_logger("source.matcher")

MANIFEST_EXTENSIONS = (".yaml", ".yml")


def is_manifest_file(path: str) -> bool:
    return path.endswith(MANIFEST_EXTENSIONS)


def match(filesystem: Filesystem, pattern: str) -> list[str]:
    """Return the manifest files *pattern* matches, sorted by path.

    Files with other extensions and directories matched by a glob are
    dropped silently.  Raises PathIsDirectoryError when an exact path names
    a directory and NoFilesMatchedError when nothing survives.
    """
    if not has_magic(pattern) and filesystem.is_dir(pattern):
        raise PathIsDirectoryError(pattern)

    candidates = filesystem.glob(pattern)
    files = sorted(
        path for path in candidates if is_manifest_file(path) and not filesystem.is_dir(path)
    )

    _logger.debug(
        "pattern_matched",
        pattern=pattern,
        candidates=len(candidates),
        files=len(files),
    )

    if not files:
        raise NoFilesMatchedError(pattern)
    return files
