"""Cache key derivation.

A key function turns whatever the caller caches under (a SourceSpec for the
renderer) into the string the cache indexes by.  Two specs with the same
derived key are treated as the same entry.
"""

from __future__ import annotations

import dataclasses
import hashlib
import json
from collections.abc import Callable
from typing import Any, TypeAlias

CacheKeyFunc: TypeAlias = Callable[[Any], str]


def _canonical(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {"__type__": type(value).__name__, **dataclasses.asdict(value)}
    return value


def structural_key(spec: Any) -> str:
    """Hash the full structure of *spec*.

    Safe default: any field added to the spec later changes the key.
    """
    key_str = json.dumps(_canonical(spec), sort_keys=True, default=str)
    return hashlib.sha256(key_str.encode()).hexdigest()


def path_only_key(spec: Any) -> str:
    """Key by the spec's ``path`` alone.

    Only valid while nothing else about the source varies (static files on a
    single filesystem).
    """
    path = getattr(spec, "path", None)
    if isinstance(path, str):
        return path
    return structural_key(spec)


def default_key_func(key: Any) -> str:
    """Pass strings through unchanged; hash everything else structurally."""
    if isinstance(key, str):
        return key
    return structural_key(key)
