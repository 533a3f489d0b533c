"""Multi-document YAML decoding.

A file holds zero or more documents separated by ``---`` lines.  Segments
that are empty, whitespace-only or comment-only contribute nothing; every
other segment must decode to a mapping carrying a ``kind``.  Unquoted
dates stay strings, as they would in a Kubernetes object.
"""

from __future__ import annotations

import yaml

from kuberender.errors import DecodeError
from kuberender.models.documents import Document

DOCUMENT_SEPARATOR = "---"

_TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"


class _ManifestLoader(yaml.SafeLoader):
    """SafeLoader that leaves unquoted dates and timestamps as strings."""


_ManifestLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != _TIMESTAMP_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def _check_document(value: object, path: str, index: int) -> Document:
    if not isinstance(value, dict):
        raise DecodeError(path, index, f"expected a mapping, got {type(value).__name__}")
    kind = value.get("kind")
    if not isinstance(kind, str) or not kind:
        raise DecodeError(path, index, "object 'kind' is missing")
    return value


def decode_all(data: bytes | str, path: str = "") -> list[Document]:
    """Decode every document in *data*, in file order.

    *path* is only used to label errors.  Raises DecodeError naming the
    zero-based index of the first segment that fails.
    """
    if isinstance(data, bytes):
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DecodeError(path, None, f"invalid utf-8: {exc}") from exc
    else:
        text = data

    documents: list[Document] = []
    index = 0
    try:
        for value in yaml.load_all(text, Loader=_ManifestLoader):
            if value is not None:
                documents.append(_check_document(value, path, index))
            index += 1
    except yaml.YAMLError as exc:
        raise DecodeError(path, index, str(exc)) from exc
    return documents
