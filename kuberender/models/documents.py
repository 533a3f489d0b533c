"""Document helpers.

A document is an unstructured Kubernetes object: the plain ``dict`` PyYAML
produces for one YAML record.  These helpers read its identity fields and
reach into ``metadata`` without assuming any of it is present.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

Document = dict[str, Any]


@dataclass(frozen=True)
class ObjectKey:
    """Stable identity of a document."""

    api_version: str
    kind: str
    namespace: str
    name: str

    def __str__(self) -> str:
        if self.namespace:
            return f"{self.kind}/{self.namespace}/{self.name}"
        return f"{self.kind}/{self.name}"


def _metadata(doc: Document) -> dict[str, Any]:
    meta = doc.get("metadata")
    return meta if isinstance(meta, dict) else {}


def object_key(doc: Document) -> ObjectKey:
    """Return the identity of *doc*; missing fields become empty strings."""
    meta = _metadata(doc)
    return ObjectKey(
        api_version=str(doc.get("apiVersion") or ""),
        kind=str(doc.get("kind") or ""),
        namespace=str(meta.get("namespace") or ""),
        name=str(meta.get("name") or ""),
    )


def labels(doc: Document) -> dict[str, str]:
    found = _metadata(doc).get("labels")
    return found if isinstance(found, dict) else {}


def annotations(doc: Document) -> dict[str, str]:
    found = _metadata(doc).get("annotations")
    return found if isinstance(found, dict) else {}


def ensure_metadata_map(doc: Document, field_name: str) -> dict[str, Any]:
    """Return ``metadata.<field_name>`` of *doc*, creating it when absent.

    Mutates *doc*; callers copy first when they must not.
    """
    meta = doc.get("metadata")
    if not isinstance(meta, dict):
        meta = {}
        doc["metadata"] = meta
    found = meta.get(field_name)
    if not isinstance(found, dict):
        found = {}
        meta[field_name] = found
    return found
