"""Source provenance annotations."""

from __future__ import annotations

import copy

from kuberender.models.documents import Document, ensure_metadata_map

ANNOTATION_SOURCE_TYPE = "kuberender.io/source.type"
ANNOTATION_SOURCE_FILE = "kuberender.io/source.file"


def stamp(document: Document, source_file: str, renderer_type: str) -> Document:
    """Return a copy of *document* annotated with where it came from.

    Keys already present on the document are left untouched.
    """
    stamped = copy.deepcopy(document)
    annotations = ensure_metadata_map(stamped, "annotations")
    annotations.setdefault(ANNOTATION_SOURCE_TYPE, renderer_type)
    annotations.setdefault(ANNOTATION_SOURCE_FILE, source_file)
    return stamped
