"""Source resolution for kuberender.

Submodules:
    matcher     -- Glob pattern -> sorted manifest file paths.
    decoder     -- File bytes -> ordered list of documents.
    annotations -- Provenance stamping of decoded documents.
"""

from kuberender.source.annotations import (
    ANNOTATION_SOURCE_FILE,
    ANNOTATION_SOURCE_TYPE,
    stamp,
)
from kuberender.source.decoder import DOCUMENT_SEPARATOR, decode_all
from kuberender.source.matcher import MANIFEST_EXTENSIONS, is_manifest_file, match

__all__ = [
    "ANNOTATION_SOURCE_FILE",
    "ANNOTATION_SOURCE_TYPE",
    "DOCUMENT_SEPARATOR",
    "MANIFEST_EXTENSIONS",
    "decode_all",
    "is_manifest_file",
    "match",
    "stamp",
]
