"""Source definitions."""

from __future__ import annotations

from dataclasses import dataclass

from kuberender.fs import Filesystem


@dataclass(frozen=True)
class Source:
    """A filesystem plus the glob pattern naming the manifests to read from it."""

    filesystem: Filesystem | None
    path: str

    def spec(self, renderer: str = "", source_annotations: bool = False) -> SourceSpec:
        assert self.filesystem is not None
        return SourceSpec(
            path=self.path,
            filesystem=self.filesystem.fingerprint,
            renderer=renderer,
            source_annotations=source_annotations,
        )


@dataclass(frozen=True)
class SourceSpec:
    """The cacheable description of a Source.

    Cache key functions receive this value.  ``filesystem`` is the
    filesystem's fingerprint, so the structural key tells apart identical
    patterns on different trees while the path-only key does not.
    ``renderer`` and ``source_annotations`` record how the documents were
    produced: a stamped and an unstamped load of one pattern are different
    values and must not share a structural key.
    """

    path: str
    filesystem: str = ""
    renderer: str = ""
    source_annotations: bool = False
