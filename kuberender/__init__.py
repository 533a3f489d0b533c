"""kuberender: render Kubernetes manifests from YAML sources.

Sources (a filesystem plus a glob pattern) are matched, split into documents,
optionally stamped with provenance annotations, cached per source, and run
through caller-supplied filters and transformers.
"""

from kuberender.cache import KeyedCache, NullCache, path_only_key, structural_key
from kuberender.engine import DocumentRenderer, Engine, new_engine
from kuberender.errors import KubeRenderError
from kuberender.fs import DirFS, Filesystem, MemoryFS
from kuberender.models.documents import Document, ObjectKey, object_key
from kuberender.models.source import Source, SourceSpec
from kuberender.pipeline import REMOVED, apply_pipeline
from kuberender.renderer import RENDERER_TYPE, Renderer, RendererOptions

__version__ = "0.1.0"

__all__ = [
    "REMOVED",
    "RENDERER_TYPE",
    "DirFS",
    "Document",
    "DocumentRenderer",
    "Engine",
    "Filesystem",
    "KeyedCache",
    "KubeRenderError",
    "MemoryFS",
    "NullCache",
    "ObjectKey",
    "Renderer",
    "RendererOptions",
    "Source",
    "SourceSpec",
    "__version__",
    "apply_pipeline",
    "new_engine",
    "object_key",
    "path_only_key",
    "structural_key",
]
