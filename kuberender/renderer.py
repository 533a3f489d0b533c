"""YAML renderer: sources -> decoded documents -> pipeline.

Each ``render()`` call walks the configured sources in order.  For every
source the expensive part (glob, file reads, YAML decoding, provenance
stamping) goes through the cache; filters and transformers run afterwards on
every call, cache hit or not, because they are not part of the cached value.
"""

from __future__ import annotations

import asyncio
import functools
import time
from collections.abc import Sequence
from dataclasses import dataclass

from kuberender.cache import CacheKeyFunc, KeyedCache, NullCache, path_only_key
from kuberender.errors import (
    FilesystemRequiredError,
    InvalidOptionError,
    InvalidPatternError,
    KubeRenderError,
    PathEmptyError,
    SourceReadError,
    SourceRequiredError,
)
from kuberender.fs import Filesystem, check_pattern
from kuberender.models.config import CacheKeyStrategy, KubeRenderConfig
from kuberender.models.documents import Document
from kuberender.models.source import Source
from kuberender.observability.logging import get_logger
from kuberender.observability.metrics import documents_rendered_total, render_duration_seconds
from kuberender.pipeline import Filter, Transformer, apply_pipeline
from kuberender.source import decode_all, match, stamp

_logger = get_logger("renderer.yaml")

RENDERER_TYPE = "yaml"


@dataclass(frozen=True)
class RendererOptions:
    """Renderer configuration, fixed at construction.

    filters            -- Predicates; a document must pass all of them.
    transformers       -- Applied in order after filtering.
    cache              -- Enables caching of decoded sources.  None disables it.
    source_annotations -- Stamp provenance annotations on every document.
    cache_key_func     -- Derives the cache key from a SourceSpec.  When None
                          the cache's own key function is used, which hashes
                          the whole spec.
    """

    filters: Sequence[Filter] = ()
    transformers: Sequence[Transformer] = ()
    cache: KeyedCache[list[Document]] | None = None
    source_annotations: bool = False
    cache_key_func: CacheKeyFunc | None = None

    @classmethod
    def from_config(
        cls,
        config: KubeRenderConfig,
        filters: Sequence[Filter] = (),
        transformers: Sequence[Transformer] = (),
    ) -> RendererOptions:
        """Build options from loaded configuration plus caller callables."""
        cache: KeyedCache[list[Document]] | None = None
        key_func: CacheKeyFunc | None = None
        if config.cache.enabled:
            cache = KeyedCache(ttl=float(config.cache.ttl_seconds))
            if config.cache.key_strategy == CacheKeyStrategy.PATH:
                key_func = path_only_key
        return cls(
            filters=tuple(filters),
            transformers=tuple(transformers),
            cache=cache,
            source_annotations=config.render.source_annotations,
            cache_key_func=key_func,
        )


def _validate_source(index: int, source: Source) -> Source:
    if source.filesystem is None:
        raise FilesystemRequiredError(index)
    if not isinstance(source.filesystem, Filesystem):
        raise InvalidOptionError(
            f"source[{index}]: {type(source.filesystem).__name__} does not implement the Filesystem protocol"
        )
    if not isinstance(source.path, str) or not source.path.strip():
        raise PathEmptyError(index)
    try:
        pattern = check_pattern(source.path.strip())
    except InvalidPatternError as exc:
        raise InvalidPatternError(exc.pattern, exc.reason, index) from None
    return Source(filesystem=source.filesystem, path=pattern)


def _check_callables(kind: str, fns: Sequence[object]) -> tuple:
    for i, fn in enumerate(fns):
        if not callable(fn):
            raise InvalidOptionError(f"{kind}[{i}] is not callable: {fn!r}")
    return tuple(fns)


class Renderer:
    """Renders Kubernetes manifests from one or more YAML sources.

    Safe to share between concurrent tasks and between threads that each
    drive their own event loop: configuration is immutable after
    construction and the cache serialises loads per key.
    """

    def __init__(self, sources: Sequence[Source], options: RendererOptions | None = None) -> None:
        opts = options or RendererOptions()
        if not sources:
            raise SourceRequiredError()
        self._sources = tuple(_validate_source(i, s) for i, s in enumerate(sources))
        self._filters: tuple[Filter, ...] = _check_callables("filter", opts.filters)
        self._transformers: tuple[Transformer, ...] = _check_callables("transformer", opts.transformers)
        if opts.cache_key_func is not None and not callable(opts.cache_key_func):
            raise InvalidOptionError(f"cache_key_func is not callable: {opts.cache_key_func!r}")
        self._cache: KeyedCache[list[Document]] | NullCache[list[Document]] = (
            opts.cache if opts.cache is not None else NullCache()
        )
        self._cache_key_func = opts.cache_key_func
        self._source_annotations = opts.source_annotations

    @property
    def name(self) -> str:
        return RENDERER_TYPE

    @property
    def sources(self) -> tuple[Source, ...]:
        return self._sources

    @property
    def cache(self) -> KeyedCache[list[Document]] | NullCache[list[Document]]:
        return self._cache

    def _cache_key(self, source: Source) -> object:
        spec = source.spec(renderer=RENDERER_TYPE, source_annotations=self._source_annotations)
        if self._cache_key_func is not None:
            return self._cache_key_func(spec)
        return spec

    def _read_source(self, index: int, source: Source) -> list[Document]:
        """Match, read, decode and stamp one source.  Blocking."""
        fs = source.filesystem
        assert fs is not None
        documents: list[Document] = []
        try:
            for path in match(fs, source.path):
                try:
                    data = fs.read_bytes(path)
                except OSError as exc:
                    raise SourceReadError(path, exc) from exc
                decoded = decode_all(data, path)
                if self._source_annotations:
                    decoded = [stamp(doc, path, RENDERER_TYPE) for doc in decoded]
                documents.extend(decoded)
        except KubeRenderError as exc:
            exc.add_note(f"while loading source[{index}] (pattern={source.path!r})")
            raise
        _logger.debug("source_loaded", source_index=index, pattern=source.path, documents=len(documents))
        return documents

    async def _load(self, index: int, source: Source) -> list[Document]:
        return await asyncio.to_thread(self._read_source, index, source)

    async def render(self) -> list[Document]:
        """Render every source in configuration order.

        Returns the concatenated documents, or raises the first error; no
        partial result is returned.
        """
        t_start = time.monotonic()
        rendered: list[Document] = []
        for index, source in enumerate(self._sources):
            documents = await self._cache.get_or_compute(
                self._cache_key(source),
                functools.partial(self._load, index, source),
            )
            try:
                rendered.extend(apply_pipeline(documents, self._filters, self._transformers))
            except KubeRenderError as exc:
                exc.add_note(f"while processing source[{index}] (pattern={source.path!r})")
                raise

        duration = time.monotonic() - t_start
        render_duration_seconds.labels(renderer=RENDERER_TYPE).observe(duration)
        documents_rendered_total.labels(renderer=RENDERER_TYPE).inc(len(rendered))
        _logger.debug(
            "render_complete",
            sources=len(self._sources),
            documents=len(rendered),
            duration_ms=round(duration * 1000.0, 3),
        )
        return rendered
