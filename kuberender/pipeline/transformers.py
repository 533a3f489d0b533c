"""Built-in document transformers.

Every transformer returns a modified copy and leaves its input untouched.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping

from kuberender.models.documents import Document, ensure_metadata_map
from kuberender.pipeline.base import Transformer


def set_namespace(namespace: str, *, overwrite: bool = True) -> Transformer:
    """Set ``metadata.namespace``; with ``overwrite=False`` only fill it in when empty."""

    def _transform(doc: Document) -> Document:
        out = copy.deepcopy(doc)
        meta = out.get("metadata")
        if not isinstance(meta, dict):
            meta = {}
            out["metadata"] = meta
        if overwrite or not meta.get("namespace"):
            meta["namespace"] = namespace
        return out

    return _transform


def add_labels(values: Mapping[str, str], *, overwrite: bool = True) -> Transformer:
    frozen = dict(values)

    def _transform(doc: Document) -> Document:
        out = copy.deepcopy(doc)
        target = ensure_metadata_map(out, "labels")
        for key, value in frozen.items():
            if overwrite or key not in target:
                target[key] = value
        return out

    return _transform


def add_annotations(values: Mapping[str, str], *, overwrite: bool = True) -> Transformer:
    frozen = dict(values)

    def _transform(doc: Document) -> Document:
        out = copy.deepcopy(doc)
        target = ensure_metadata_map(out, "annotations")
        for key, value in frozen.items():
            if overwrite or key not in target:
                target[key] = value
        return out

    return _transform
