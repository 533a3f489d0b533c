"""Engine: composes renderers into one document stream.

Usage::

    from kuberender import DirFS, RendererOptions, Source, new_engine
    from kuberender.cache import KeyedCache

    engine = new_engine(
        Source(filesystem=DirFS("/path/to/manifests"), path="*.yaml"),
        RendererOptions(cache=KeyedCache(ttl=300)),
    )
    objects = await engine.render()
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from kuberender.errors import InvalidOptionError, KubeRenderError
from kuberender.models.documents import Document
from kuberender.models.source import Source
from kuberender.observability.logging import get_logger
from kuberender.pipeline import Filter, Transformer, apply_pipeline
from kuberender.renderer import Renderer, RendererOptions

_logger = get_logger("engine")


@runtime_checkable
class DocumentRenderer(Protocol):
    """The capability the engine consumes from every renderer."""

    @property
    def name(self) -> str: ...

    async def render(self) -> list[Document]: ...


class Engine:
    """Renders each renderer in order, then applies engine-wide filters and transformers."""

    def __init__(
        self,
        renderers: Sequence[DocumentRenderer],
        filters: Sequence[Filter] = (),
        transformers: Sequence[Transformer] = (),
    ) -> None:
        if not renderers:
            raise InvalidOptionError("at least one renderer is required")
        for i, r in enumerate(renderers):
            if not isinstance(r, DocumentRenderer):
                raise InvalidOptionError(f"renderer[{i}] does not implement render(): {r!r}")
        self._renderers = tuple(renderers)
        self._filters = tuple(filters)
        self._transformers = tuple(transformers)

    @property
    def renderers(self) -> tuple[DocumentRenderer, ...]:
        return self._renderers

    async def render(self) -> list[Document]:
        collected: list[Document] = []
        for renderer in self._renderers:
            try:
                collected.extend(await renderer.render())
            except KubeRenderError as exc:
                _logger.warning("renderer_failed", renderer=renderer.name, error=str(exc))
                raise
        result = apply_pipeline(collected, self._filters, self._transformers)
        _logger.info("engine_render_complete", renderers=len(self._renderers), documents=len(result))
        return result


def new_engine(source: Source, options: RendererOptions | None = None) -> Engine:
    """Create an Engine with a single YAML renderer over *source*.

    Configuration errors from the renderer propagate unchanged.
    """
    return Engine([Renderer([source], options)])
