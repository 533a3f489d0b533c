"""Filter and transformer composition.

Filters are predicates: a document survives only if every filter keeps it.
Transformers run afterwards, in order, and each returns the document to pass
on.  A transformer drops a document by returning ``REMOVED``; raising is
reserved for failures and aborts the whole render.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from enum import Enum
from typing import Final, TypeAlias

from kuberender.errors import FilterError, TransformError
from kuberender.models.documents import Document, object_key


class _Removed(Enum):
    REMOVED = "removed"

    def __repr__(self) -> str:
        return "REMOVED"


REMOVED: Final = _Removed.REMOVED

Filter: TypeAlias = Callable[[Document], bool]
Transformer: TypeAlias = Callable[[Document], "Document | _Removed"]


def _ref(doc: Document, position: int) -> str:
    return f"document {position} ({object_key(doc)})"


def keep(doc: Document, filters: Sequence[Filter], position: int = 0) -> bool:
    """Return True if every filter keeps *doc*; stops at the first rejection."""
    for check in filters:
        try:
            if not check(doc):
                return False
        except Exception as exc:
            raise FilterError(_ref(doc, position), exc) from exc
    return True


def transform(
    doc: Document,
    transformers: Sequence[Transformer],
    position: int = 0,
) -> Document | None:
    """Run *transformers* over *doc*; returns None when one removed it."""
    current = doc
    for fn in transformers:
        try:
            result = fn(current)
        except Exception as exc:
            raise TransformError(_ref(current, position), f"{type(exc).__name__}: {exc}") from exc
        if result is REMOVED:
            return None
        if not isinstance(result, dict):
            raise TransformError(
                _ref(current, position),
                f"expected a document or REMOVED, got {type(result).__name__}",
            )
        current = result
    return current


def apply_pipeline(
    documents: Iterable[Document],
    filters: Sequence[Filter] = (),
    transformers: Sequence[Transformer] = (),
) -> list[Document]:
    """Filter then transform *documents*, preserving their order."""
    out: list[Document] = []
    for position, doc in enumerate(documents):
        if not keep(doc, filters, position):
            continue
        result = transform(doc, transformers, position)
        if result is not None:
            out.append(result)
    return out
