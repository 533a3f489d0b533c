"""Shared fixtures for kuberender integration tests.

Provides in-memory manifest trees, a filesystem wrapper that counts reads
(to observe how often the cache actually hits the source), and a fake clock
for driving cache expiry deterministically.
"""

from __future__ import annotations

import threading

import pytest

from kuberender.fs import MemoryFS

# ---------------------------------------------------------------------------
# Manifest factory helpers
# ---------------------------------------------------------------------------


def make_manifest(
    kind: str = "ConfigMap",
    name: str = "app-config",
    namespace: str | None = "default",
    api_version: str = "v1",
    labels: dict[str, str] | None = None,
) -> str:
    """Render a minimal Kubernetes object as YAML text."""
    lines = [f"apiVersion: {api_version}", f"kind: {kind}", "metadata:", f"  name: {name}"]
    if namespace is not None:
        lines.append(f"  namespace: {namespace}")
    if labels:
        lines.append("  labels:")
        lines.extend(f"    {k}: {v}" for k, v in labels.items())
    return "\n".join(lines) + "\n"


def multi_doc(*docs: str) -> str:
    """Join documents with the YAML separator."""
    return "---\n".join(docs)


# ---------------------------------------------------------------------------
# Filesystem helpers
# ---------------------------------------------------------------------------


class CountingFS:
    """Wraps a filesystem and counts reads and globs; thread safe.

    When *gate* is given, every read blocks until the event is set, which
    holds a load in flight while other callers pile up behind it.
    """

    def __init__(self, inner: MemoryFS, gate: threading.Event | None = None) -> None:
        self._inner = inner
        self._gate = gate
        self._lock = threading.Lock()
        self.reads: list[str] = []
        self.globs = 0

    @property
    def fingerprint(self) -> str:
        return f"counting:{self._inner.fingerprint}"

    def glob(self, pattern: str) -> list[str]:
        with self._lock:
            self.globs += 1
        return self._inner.glob(pattern)

    def exists(self, path: str) -> bool:
        return self._inner.exists(path)

    def is_dir(self, path: str) -> bool:
        return self._inner.is_dir(path)

    def read_bytes(self, path: str) -> bytes:
        with self._lock:
            self.reads.append(path)
        if self._gate is not None:
            self._gate.wait(timeout=5)
        return self._inner.read_bytes(path)


class FakeClock:
    """Monotonic clock stand-in advanced by hand."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def manifest_fs() -> MemoryFS:
    """A small manifest tree.

    deployments/app.yaml   -- Deployment + Service (two documents)
    deployments/worker.yml -- Deployment
    deployments/README.md  -- ignored by the matcher
    config/settings.yaml   -- ConfigMap in namespace "ops"
    """
    return MemoryFS(
        {
            "deployments/app.yaml": multi_doc(
                make_manifest("Deployment", "app", api_version="apps/v1"),
                make_manifest("Service", "app"),
            ),
            "deployments/worker.yml": make_manifest("Deployment", "worker", api_version="apps/v1"),
            "deployments/README.md": "# not a manifest\n",
            "config/settings.yaml": make_manifest("ConfigMap", "settings", namespace="ops"),
        }
    )


@pytest.fixture
def counting_fs(manifest_fs: MemoryFS) -> CountingFS:
    return CountingFS(manifest_fs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
