"""TTL cache with single-flight loading and copy-on-boundary semantics.

KeyedCache -- Memoizes the result of an async loader per key.
NullCache  -- Same interface, no caching: every call runs the loader.

Concurrency model
-----------------
A cache may be shared by callers running on different threads, each with its
own event loop.  Bookkeeping is guarded by a ``threading.Lock`` that is never
held across an await.  On a miss, the first caller records a
``concurrent.futures.Future`` as in flight for the key and runs the loader as
a task on its own loop; later callers for the same key, on any loop, wait on
that future through ``asyncio.wrap_future`` instead of starting their own
load.  Waiting is shielded, so a waiter that is cancelled stops waiting
without cancelling the computation the other waiters depend on.  Lookups
never wait on the in-flight load of another key.

Values are deep-copied when stored and again on every read, so nothing a
caller does to a returned value can reach the stored entry.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import copy
import threading
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from kuberender.cache.keys import CacheKeyFunc, default_key_func
from kuberender.errors import CacheComputationError, KubeRenderError
from kuberender.observability.logging import get_logger
from kuberender.observability.metrics import cache_loads_total, cache_requests_total

_logger = get_logger("cache.keyed_cache")

V = TypeVar("V")

DEFAULT_TTL_SECONDS = 300.0

Loader = Callable[[], Awaitable[V]]


@dataclass(frozen=True)
class CacheEntry(Generic[V]):
    """A stored value and the monotonic time it stops being served."""

    value: V
    expires_at: float


class KeyedCache(Generic[V]):
    """Per-key memoization of async loaders with TTL expiry.

    Args:
        ttl:      Default lifetime of an entry, in seconds.
        key_func: Turns the caller's key into the string index.
                  Strings pass through; other values are hashed structurally.
        clock:    Monotonic time source, injectable for tests.
    """

    def __init__(
        self,
        ttl: float = DEFAULT_TTL_SECONDS,
        key_func: CacheKeyFunc | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl <= 0:
            raise ValueError(f"ttl must be positive, got {ttl}")
        self._ttl = ttl
        self._key_func = key_func or default_key_func
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: dict[str, CacheEntry[V]] = {}
        self._inflight: dict[str, concurrent.futures.Future[V]] = {}
        # Strong references to running load tasks, which the loop only holds weakly.
        self._load_tasks: set[asyncio.Task[None]] = set()

    @property
    def ttl(self) -> float:
        return self._ttl

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def key_for(self, key: Any) -> str:
        return self._key_func(key)

    async def get_or_compute(self, key: Any, loader: Loader[V], ttl: float | None = None) -> V:
        """Return a copy of the cached value for *key*, loading it on a miss.

        Concurrent misses for one key share a single ``loader()`` call and
        all receive its result or its error, whichever thread or event loop
        they run on.  A failed load leaves the cache as it was.
        """
        cache_key = self._key_func(key)
        owner = False
        with self._lock:
            entry = self._entries.get(cache_key)
            hit = entry is not None and self._clock() < entry.expires_at
            future = None if hit else self._inflight.get(cache_key)
            if not hit and future is None:
                owner = True
                future = concurrent.futures.Future()
                future.set_running_or_notify_cancel()
                self._inflight[cache_key] = future

        if hit:
            assert entry is not None
            cache_requests_total.labels(result="hit").inc()
            _logger.debug("cache_hit", key=cache_key)
            return copy.deepcopy(entry.value)

        assert future is not None
        if owner:
            cache_requests_total.labels(result="miss").inc()
            _logger.debug("cache_miss", key=cache_key, expired=entry is not None)
            task = asyncio.ensure_future(self._load(cache_key, loader, self._ttl if ttl is None else ttl, future))
            self._load_tasks.add(task)
            task.add_done_callback(self._load_tasks.discard)
        else:
            cache_requests_total.labels(result="shared").inc()
            _logger.debug("cache_wait_inflight", key=cache_key)

        value = await asyncio.shield(asyncio.wrap_future(future))
        return copy.deepcopy(value)

    async def _load(
        self,
        cache_key: str,
        loader: Loader[V],
        ttl: float,
        future: concurrent.futures.Future[V],
    ) -> None:
        try:
            value = await loader()
        except KubeRenderError as exc:
            cache_loads_total.labels(outcome="error").inc()
            _logger.debug("cache_load_failed", key=cache_key)
            self._fail(cache_key, future, exc)
            return
        except Exception as exc:
            cache_loads_total.labels(outcome="error").inc()
            _logger.warning("cache_load_failed", key=cache_key, error=str(exc))
            error = CacheComputationError(cache_key, exc)
            error.__cause__ = exc
            self._fail(cache_key, future, error)
            return
        except BaseException as exc:
            # The owning loop is going away; release waiters on other loops.
            cache_loads_total.labels(outcome="error").inc()
            _logger.warning("cache_load_aborted", key=cache_key, error=type(exc).__name__)
            error = CacheComputationError(cache_key, exc)
            error.__cause__ = exc
            self._fail(cache_key, future, error)
            raise

        stored = copy.deepcopy(value)
        with self._lock:
            self._entries[cache_key] = CacheEntry(value=stored, expires_at=self._clock() + ttl)
            self._inflight.pop(cache_key, None)
        cache_loads_total.labels(outcome="success").inc()
        _logger.debug("cache_stored", key=cache_key, ttl=ttl)
        future.set_result(stored)

    def _fail(self, cache_key: str, future: concurrent.futures.Future[V], error: BaseException) -> None:
        with self._lock:
            self._inflight.pop(cache_key, None)
        future.set_exception(error)

    def invalidate(self, key: Any) -> bool:
        """Drop the entry for *key*; returns True if one existed."""
        cache_key = self._key_func(key)
        with self._lock:
            return self._entries.pop(cache_key, None) is not None

    def clear(self) -> None:
        """Drop every entry.  In-flight loads still complete and store."""
        with self._lock:
            self._entries.clear()

    def prune(self) -> int:
        """Drop expired entries now instead of on next access.  Returns the count."""
        with self._lock:
            now = self._clock()
            expired = [k for k, e in self._entries.items() if now >= e.expires_at]
            for k in expired:
                del self._entries[k]
        if expired:
            _logger.debug("cache_pruned", count=len(expired))
        return len(expired)


class NullCache(Generic[V]):
    """Pass-through stand-in used when caching is disabled."""

    def __len__(self) -> int:
        return 0

    async def get_or_compute(self, key: Any, loader: Loader[V], ttl: float | None = None) -> V:
        return await loader()

    def invalidate(self, key: Any) -> bool:
        return False

    def clear(self) -> None:
        return None

    def prune(self) -> int:
        return 0
