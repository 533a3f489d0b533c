"""Read-only filesystem abstraction consumed by the source matcher.

Filesystem -- Protocol every implementation satisfies.
DirFS      -- A directory on local disk, addressed by root-relative paths.
MemoryFS   -- An in-memory ``path -> content`` map, used by tests and
              embedders that bundle manifests in code.

Paths are always POSIX style and relative to the filesystem root.  Pattern
syntax is shared by both implementations: ``*``, ``?`` and ``[...]`` match
within one segment, ``**`` matches zero or more whole segments.
"""

from kuberender.fs.base import Filesystem, check_pattern, has_magic, match_path
from kuberender.fs.dirfs import DirFS
from kuberender.fs.memfs import MemoryFS

__all__ = [
    "DirFS",
    "Filesystem",
    "MemoryFS",
    "check_pattern",
    "has_magic",
    "match_path",
]
