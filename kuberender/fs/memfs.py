"""In-memory filesystem."""

from __future__ import annotations

import uuid
from collections.abc import Iterable, Mapping

from kuberender.fs.base import has_magic, match_path, split_path


class MemoryFS:
    """Immutable ``path -> content`` map exposed as a filesystem.

    Parent directories are implied by file paths; *dirs* adds empty
    directories.  Text content is encoded as UTF-8.
    """

    def __init__(self, files: Mapping[str, bytes | str], dirs: Iterable[str] = ()) -> None:
        self._fingerprint = f"memory:{uuid.uuid4().hex}"
        self._files: dict[str, bytes] = {}
        self._dirs: set[str] = set()
        for path, content in files.items():
            key = "/".join(split_path(path))
            self._files[key] = content.encode("utf-8") if isinstance(content, str) else bytes(content)
            self._add_parents(key)
        for path in dirs:
            key = "/".join(split_path(path))
            self._dirs.add(key)
            self._add_parents(key)

    def _add_parents(self, path: str) -> None:
        parts = path.split("/")
        for i in range(1, len(parts)):
            self._dirs.add("/".join(parts[:i]))

    def __repr__(self) -> str:
        return f"MemoryFS(files={len(self._files)})"

    @property
    def fingerprint(self) -> str:
        return self._fingerprint

    def exists(self, path: str) -> bool:
        key = "/".join(split_path(path))
        return key in self._files or key in self._dirs

    def is_dir(self, path: str) -> bool:
        return "/".join(split_path(path)) in self._dirs

    def read_bytes(self, path: str) -> bytes:
        key = "/".join(split_path(path))
        try:
            return self._files[key]
        except KeyError:
            raise FileNotFoundError(path) from None

    def glob(self, pattern: str) -> list[str]:
        if not has_magic(pattern):
            key = "/".join(split_path(pattern))
            return [key] if self.exists(key) else []
        # Set iteration order is arbitrary; callers are expected to sort.
        candidates = self._dirs | self._files.keys()
        return [path for path in candidates if match_path(pattern, path)]
