"""Prometheus metrics for the render pipeline and cache."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

cache_requests_total = Counter(
    "kuberender_cache_requests_total",
    "Cache lookups by outcome (hit, miss, shared)",
    ["result"],
)

cache_loads_total = Counter(
    "kuberender_cache_loads_total",
    "Loader invocations performed on a cache miss, by outcome",
    ["outcome"],
)

documents_rendered_total = Counter(
    "kuberender_documents_rendered_total",
    "Documents returned from render() after the pipeline",
    ["renderer"],
)

render_duration_seconds = Histogram(
    "kuberender_render_duration_seconds",
    "Wall-clock duration of a single render() call",
    ["renderer"],
)
