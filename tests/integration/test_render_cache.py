"""Integration tests for renderer caching.

Exercises cache isolation, single-flight loading under concurrent renders,
TTL expiry and the two built-in key strategies, observing source access
through a counting filesystem.
"""

from __future__ import annotations

import asyncio
import threading
import time
from concurrent.futures import ThreadPoolExecutor

from kuberender.cache import KeyedCache, path_only_key
from kuberender.errors import DecodeError
from kuberender.fs import MemoryFS
from kuberender.models.documents import object_key
from kuberender.models.source import Source
from kuberender.pipeline import filters
from kuberender.renderer import Renderer, RendererOptions
from kuberender.source import ANNOTATION_SOURCE_FILE

from .conftest import CountingFS, FakeClock, make_manifest

# ---------------------------------------------------------------------------
# Cache hits
# ---------------------------------------------------------------------------


class TestCacheHits:
    async def test_second_render_does_not_touch_the_filesystem(self, counting_fs: CountingFS) -> None:
        renderer = Renderer(
            [Source(filesystem=counting_fs, path="deployments/*")],
            RendererOptions(cache=KeyedCache()),
        )
        first = await renderer.render()
        reads_after_first = len(counting_fs.reads)
        second = await renderer.render()

        assert reads_after_first == 2
        assert len(counting_fs.reads) == reads_after_first
        assert first == second

    async def test_without_cache_every_render_reads(self, counting_fs: CountingFS) -> None:
        renderer = Renderer([Source(filesystem=counting_fs, path="deployments/*")])
        await renderer.render()
        await renderer.render()
        assert len(counting_fs.reads) == 4

    async def test_filters_run_on_every_render(self, counting_fs: CountingFS) -> None:
        calls: list[str] = []

        def record(doc: dict) -> bool:
            calls.append(object_key(doc).name)
            return True

        renderer = Renderer(
            [Source(filesystem=counting_fs, path="deployments/*")],
            RendererOptions(cache=KeyedCache(), filters=[record]),
        )
        await renderer.render()
        await renderer.render()
        assert calls == ["app", "app", "worker"] * 2

    async def test_cache_stores_unfiltered_documents(self, counting_fs: CountingFS) -> None:
        cache: KeyedCache[list[dict]] = KeyedCache()
        source = Source(filesystem=counting_fs, path="deployments/*")
        only_services = Renderer([source], RendererOptions(cache=cache, filters=[filters.kind("Service")]))
        everything = Renderer([source], RendererOptions(cache=cache))

        assert len(await only_services.render()) == 1
        assert len(await everything.render()) == 3
        assert len(counting_fs.reads) == 2


# ---------------------------------------------------------------------------
# Isolation
# ---------------------------------------------------------------------------


class TestCacheIsolation:
    async def test_mutating_result_does_not_leak_into_cache(self, manifest_fs: MemoryFS) -> None:
        renderer = Renderer(
            [Source(filesystem=manifest_fs, path="deployments/*")],
            RendererOptions(cache=KeyedCache()),
        )
        first = await renderer.render()
        first[0]["metadata"]["name"] = "hijacked"
        first[0]["metadata"].setdefault("labels", {})["evil"] = "true"
        first.clear()

        second = await renderer.render()
        assert [object_key(d).name for d in second] == ["app", "app", "worker"]
        assert "labels" not in second[0]["metadata"]

    async def test_concurrent_callers_get_independent_copies(self, manifest_fs: MemoryFS) -> None:
        renderer = Renderer(
            [Source(filesystem=manifest_fs, path="config/*.yaml")],
            RendererOptions(cache=KeyedCache()),
        )
        a, b = await asyncio.gather(renderer.render(), renderer.render())
        assert a == b
        assert a[0] is not b[0]

    async def test_shared_cache_keeps_stamped_and_plain_loads_apart(self, counting_fs: CountingFS) -> None:
        cache: KeyedCache[list[dict]] = KeyedCache()
        source = Source(filesystem=counting_fs, path="config/*.yaml")
        annotated = Renderer([source], RendererOptions(cache=cache, source_annotations=True))
        plain = Renderer([source], RendererOptions(cache=cache))

        (stamped,) = await annotated.render()
        (unstamped,) = await plain.render()
        assert stamped["metadata"]["annotations"][ANNOTATION_SOURCE_FILE] == "config/settings.yaml"
        assert "annotations" not in unstamped["metadata"]
        assert len(cache) == 2

        await annotated.render()
        await plain.render()
        assert counting_fs.reads == ["config/settings.yaml"] * 2


# ---------------------------------------------------------------------------
# Single-flight
# ---------------------------------------------------------------------------


class TestSingleFlight:
    async def test_concurrent_renders_load_once(self, counting_fs: CountingFS) -> None:
        renderer = Renderer(
            [Source(filesystem=counting_fs, path="deployments/*")],
            RendererOptions(cache=KeyedCache()),
        )
        results = await asyncio.gather(*(renderer.render() for _ in range(20)))

        # one glob and one read per matched file, for all twenty callers
        assert counting_fs.globs == 1
        assert sorted(counting_fs.reads) == ["deployments/app.yaml", "deployments/worker.yml"]
        assert all(r == results[0] for r in results)
        assert len(results[0]) == 3

    async def test_distinct_sources_load_independently(self, counting_fs: CountingFS) -> None:
        renderer = Renderer(
            [
                Source(filesystem=counting_fs, path="deployments/*"),
                Source(filesystem=counting_fs, path="config/*.yaml"),
            ],
            RendererOptions(cache=KeyedCache()),
        )
        await asyncio.gather(*(renderer.render() for _ in range(5)))
        assert counting_fs.globs == 2
        assert len(counting_fs.reads) == 3


# ---------------------------------------------------------------------------
# Renders from separate threads
# ---------------------------------------------------------------------------

_THREADS = 8


class TestThreadedRenders:
    """Each thread drives its own event loop with ``asyncio.run``."""

    def test_threads_share_one_load(self, manifest_fs: MemoryFS) -> None:
        gate = threading.Event()
        fs = CountingFS(manifest_fs, gate=gate)
        renderer = Renderer(
            [Source(filesystem=fs, path="config/*.yaml")],
            RendererOptions(cache=KeyedCache()),
        )

        with ThreadPoolExecutor(max_workers=_THREADS) as pool:
            futures = [pool.submit(lambda: asyncio.run(renderer.render())) for _ in range(_THREADS)]
            time.sleep(0.2)
            gate.set()
            results = [f.result(timeout=10) for f in futures]

        assert fs.globs == 1
        assert fs.reads == ["config/settings.yaml"]
        assert all(r == results[0] for r in results)
        assert len({id(r[0]) for r in results}) == _THREADS
        assert object_key(results[0][0]).name == "settings"

    def test_threads_share_one_failure(self) -> None:
        gate = threading.Event()
        fs = CountingFS(MemoryFS({"bad.yaml": "kind: [unclosed\n"}), gate=gate)
        renderer = Renderer(
            [Source(filesystem=fs, path="*.yaml")],
            RendererOptions(cache=KeyedCache()),
        )

        with ThreadPoolExecutor(max_workers=_THREADS) as pool:
            futures = [pool.submit(lambda: asyncio.run(renderer.render())) for _ in range(_THREADS)]
            time.sleep(0.2)
            gate.set()
            errors = [f.exception(timeout=10) for f in futures]

        assert fs.reads == ["bad.yaml"]
        assert all(isinstance(e, DecodeError) for e in errors)
        assert len(renderer.cache) == 0

    def test_threads_and_tasks_mixed(self, counting_fs: CountingFS) -> None:
        renderer = Renderer(
            [Source(filesystem=counting_fs, path="deployments/*")],
            RendererOptions(cache=KeyedCache()),
        )

        async def burst() -> list[list[dict]]:
            return await asyncio.gather(*(renderer.render() for _ in range(5)))

        with ThreadPoolExecutor(max_workers=4) as pool:
            bursts = [f.result(timeout=10) for f in [pool.submit(asyncio.run, burst()) for _ in range(4)]]

        assert counting_fs.globs == 1
        assert len(counting_fs.reads) == 2
        assert all(len(r) == 3 for burst_result in bursts for r in burst_result)


# ---------------------------------------------------------------------------
# Expiry
# ---------------------------------------------------------------------------


class TestExpiry:
    async def test_render_before_ttl_does_not_reload(self, counting_fs: CountingFS, clock: FakeClock) -> None:
        renderer = Renderer(
            [Source(filesystem=counting_fs, path="config/*.yaml")],
            RendererOptions(cache=KeyedCache(ttl=60, clock=clock)),
        )
        await renderer.render()
        clock.advance(59.9)
        await renderer.render()
        assert counting_fs.reads == ["config/settings.yaml"]

    async def test_render_after_ttl_reloads_exactly_once(self, counting_fs: CountingFS, clock: FakeClock) -> None:
        renderer = Renderer(
            [Source(filesystem=counting_fs, path="config/*.yaml")],
            RendererOptions(cache=KeyedCache(ttl=60, clock=clock)),
        )
        await renderer.render()
        clock.advance(60)
        await asyncio.gather(*(renderer.render() for _ in range(5)))
        assert counting_fs.reads == ["config/settings.yaml", "config/settings.yaml"]


# ---------------------------------------------------------------------------
# Key strategies
# ---------------------------------------------------------------------------


class TestKeyStrategies:
    def _two_trees(self) -> tuple[MemoryFS, MemoryFS]:
        return (
            MemoryFS({"cm.yaml": make_manifest(name="from-a")}),
            MemoryFS({"cm.yaml": make_manifest(name="from-b")}),
        )

    async def test_structural_key_separates_filesystems(self) -> None:
        fs_a, fs_b = self._two_trees()
        renderer = Renderer(
            [Source(filesystem=fs_a, path="*.yaml"), Source(filesystem=fs_b, path="*.yaml")],
            RendererOptions(cache=KeyedCache()),
        )
        assert [object_key(d).name for d in await renderer.render()] == ["from-a", "from-b"]
        assert len(renderer.cache) == 2

    async def test_path_only_key_treats_same_pattern_as_same_entry(self) -> None:
        fs_a, fs_b = self._two_trees()
        renderer = Renderer(
            [Source(filesystem=fs_a, path="*.yaml"), Source(filesystem=fs_b, path="*.yaml")],
            RendererOptions(cache=KeyedCache(), cache_key_func=path_only_key),
        )
        assert [object_key(d).name for d in await renderer.render()] == ["from-a", "from-a"]
        assert len(renderer.cache) == 1

    async def test_custom_key_func(self, counting_fs: CountingFS) -> None:
        seen: list[str] = []

        def key_func(spec) -> str:
            seen.append(spec.path)
            return "everything"

        renderer = Renderer(
            [
                Source(filesystem=counting_fs, path="config/*.yaml"),
                Source(filesystem=counting_fs, path="deployments/*"),
            ],
            RendererOptions(cache=KeyedCache(), cache_key_func=key_func),
        )
        documents = await renderer.render()
        assert seen == ["config/*.yaml", "deployments/*"]
        assert [object_key(d).name for d in documents] == ["settings", "settings"]
