"""Core data structures for kuberender."""

from kuberender.models.config import (
    CacheConfig,
    CacheKeyStrategy,
    KubeRenderConfig,
    LogConfig,
    RenderConfig,
)
from kuberender.models.documents import (
    Document,
    ObjectKey,
    annotations,
    ensure_metadata_map,
    labels,
    object_key,
)

__all__ = [
    "CacheConfig",
    "CacheKeyStrategy",
    "Document",
    "KubeRenderConfig",
    "LogConfig",
    "ObjectKey",
    "RenderConfig",
    "annotations",
    "ensure_metadata_map",
    "labels",
    "object_key",
]
