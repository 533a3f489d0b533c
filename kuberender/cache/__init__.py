"""Cache layer for kuberender.

Memoizes the decoded documents of each source so repeated renders skip the
file reads and YAML parsing.  Caller-supplied filters and transformers are
never part of a cached value.

Submodules:
    keyed_cache -- TTL cache with single-flight loading (KeyedCache, NullCache).
    keys        -- Cache key functions (structural hash, path only).
"""

from kuberender.cache.keyed_cache import DEFAULT_TTL_SECONDS, CacheEntry, KeyedCache, NullCache
from kuberender.cache.keys import CacheKeyFunc, default_key_func, path_only_key, structural_key

__all__ = [
    "DEFAULT_TTL_SECONDS",
    "CacheEntry",
    "CacheKeyFunc",
    "KeyedCache",
    "NullCache",
    "default_key_func",
    "path_only_key",
    "structural_key",
]
