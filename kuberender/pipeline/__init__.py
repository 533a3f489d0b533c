"""Document pipeline: filters, then transformers.

Exports:
    apply_pipeline -- Run filters and transformers over a document list.
    REMOVED        -- Sentinel a transformer returns to drop a document.
    Filter         -- ``(Document) -> bool``.
    Transformer    -- ``(Document) -> Document | REMOVED``.
    filters        -- Built-in filter factories.
    transformers   -- Built-in transformer factories.
"""

from kuberender.pipeline import filters, transformers
from kuberender.pipeline.base import REMOVED, Filter, Transformer, apply_pipeline, keep, transform

__all__ = [
    "REMOVED",
    "Filter",
    "Transformer",
    "apply_pipeline",
    "filters",
    "keep",
    "transform",
    "transformers",
]
