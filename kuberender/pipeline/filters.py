"""Built-in document filters.

Each factory returns a predicate suitable for ``RendererOptions.filters`` or
``Engine(filters=...)``.
"""

from __future__ import annotations

from kuberender.models.documents import Document, annotations, labels, object_key
from kuberender.pipeline.base import Filter


def kind(*kinds: str) -> Filter:
    """Keep documents whose ``kind`` is one of *kinds*."""
    wanted = frozenset(kinds)

    def _filter(doc: Document) -> bool:
        return object_key(doc).kind in wanted

    return _filter


def namespace(*namespaces: str) -> Filter:
    """Keep documents in one of *namespaces*; ``""`` selects cluster-scoped ones."""
    wanted = frozenset(namespaces)

    def _filter(doc: Document) -> bool:
        return object_key(doc).namespace in wanted

    return _filter


def name(*names: str) -> Filter:
    wanted = frozenset(names)

    def _filter(doc: Document) -> bool:
        return object_key(doc).name in wanted

    return _filter


def label(key: str, value: str | None = None) -> Filter:
    """Keep documents carrying label *key*, optionally with exactly *value*."""

    def _filter(doc: Document) -> bool:
        found = labels(doc)
        if key not in found:
            return False
        return value is None or found[key] == value

    return _filter


def annotation(key: str, value: str | None = None) -> Filter:
    def _filter(doc: Document) -> bool:
        found = annotations(doc)
        if key not in found:
            return False
        return value is None or found[key] == value

    return _filter


def negate(inner: Filter) -> Filter:
    """Invert *inner*: keep what it rejects."""

    def _filter(doc: Document) -> bool:
        return not inner(doc)

    return _filter
