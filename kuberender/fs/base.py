"""Filesystem protocol and the pattern matching shared by implementations."""

from __future__ import annotations

import re
from fnmatch import fnmatchcase
from typing import Protocol, runtime_checkable

from kuberender.errors import InvalidPatternError

_RE_MAGIC = re.compile(r"[*?\[]")

RECURSIVE = "**"


@runtime_checkable
class Filesystem(Protocol):
    """Read-only tree of files addressed by root-relative POSIX paths.

    Implementations must be safe for concurrent reads.  ``glob`` may return
    matches in any order and may include directories; callers sort and
    filter.
    """

    @property
    def fingerprint(self) -> str:
        """Stable identity of this filesystem, used in structural cache keys."""
        ...

    def glob(self, pattern: str) -> list[str]:
        """Return every file or directory path matching *pattern*."""
        ...

    def exists(self, path: str) -> bool: ...

    def is_dir(self, path: str) -> bool: ...

    def read_bytes(self, path: str) -> bytes:
        """Return the content of *path*; raises FileNotFoundError if absent."""
        ...


def has_magic(pattern: str) -> bool:
    """Return True if *pattern* contains glob metacharacters."""
    return _RE_MAGIC.search(pattern) is not None


def split_path(path: str) -> list[str]:
    return [part for part in path.split("/") if part not in ("", ".")]


def check_pattern(pattern: str) -> str:
    """Validate a root-relative pattern and return it normalised.

    Raises InvalidPatternError for absolute patterns and for ``..`` segments,
    both of which would escape the filesystem root.
    """
    if pattern.startswith("/") or re.match(r"^[A-Za-z]:[\\/]", pattern):
        raise InvalidPatternError(pattern, "must be relative to the filesystem root")
    if "\\" in pattern:
        raise InvalidPatternError(pattern, "must use '/' as the separator")
    parts = split_path(pattern)
    if ".." in parts:
        raise InvalidPatternError(pattern, "must not contain '..' segments")
    if not parts:
        raise InvalidPatternError(pattern, "names the filesystem root")
    return "/".join(parts)


def _match_parts(pat: list[str], parts: list[str]) -> bool:
    if not pat:
        return not parts
    head = pat[0]
    if head == RECURSIVE:
        return any(_match_parts(pat[1:], parts[i:]) for i in range(len(parts) + 1))
    if not parts:
        return False
    return fnmatchcase(parts[0], head) and _match_parts(pat[1:], parts[1:])


def match_path(pattern: str, path: str) -> bool:
    """Return True if root-relative *path* matches *pattern*."""
    return _match_parts(split_path(pattern), split_path(path))


def literal_prefix(pattern: str) -> list[str]:
    """Return the leading segments of *pattern* that contain no magic."""
    prefix: list[str] = []
    for part in split_path(pattern):
        if has_magic(part):
            break
        prefix.append(part)
    return prefix
