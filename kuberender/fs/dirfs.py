"""Local directory filesystem."""

from __future__ import annotations

import os
from pathlib import Path

from kuberender.fs.base import RECURSIVE, has_magic, literal_prefix, match_path, split_path


class DirFS:
    """Read-only view of a local directory.

    Only paths below *root* are reachable; symlinked directories are not
    followed while globbing.
    """

    def __init__(self, root: str | os.PathLike[str]) -> None:
        self._root = Path(root).resolve()

    def __repr__(self) -> str:
        return f"DirFS({str(self._root)!r})"

    @property
    def root(self) -> Path:
        return self._root

    @property
    def fingerprint(self) -> str:
        return f"dir:{self._root.as_posix()}"

    def _resolve(self, path: str) -> Path:
        return self._root.joinpath(*split_path(path))

    def exists(self, path: str) -> bool:
        return self._resolve(path).exists()

    def is_dir(self, path: str) -> bool:
        return self._resolve(path).is_dir()

    def read_bytes(self, path: str) -> bytes:
        return self._resolve(path).read_bytes()

    def glob(self, pattern: str) -> list[str]:
        if not has_magic(pattern):
            normalised = "/".join(split_path(pattern))
            return [normalised] if self.exists(normalised) else []

        prefix = literal_prefix(pattern)
        start = self._root.joinpath(*prefix)
        if not start.is_dir():
            return []

        segments = split_path(pattern)
        max_depth = None if RECURSIVE in segments else len(segments)
        matches: list[str] = []
        for dirpath, dirnames, filenames in os.walk(start):
            rel_dir = Path(dirpath).relative_to(self._root).as_posix()
            depth = 0 if rel_dir == "." else rel_dir.count("/") + 1
            if max_depth is not None and depth >= max_depth:
                dirnames[:] = []
            for name in dirnames + filenames:
                rel = name if rel_dir == "." else f"{rel_dir}/{name}"
                if match_path(pattern, rel):
                    matches.append(rel)
        return matches
