"""Configuration loading from environment variables."""

from __future__ import annotations

import os

from kuberender.models.config import (
    CacheConfig,
    CacheKeyStrategy,
    KubeRenderConfig,
    LogConfig,
    RenderConfig,
)


def _env(key: str, default: str = "") -> str:
    return os.environ.get(f"KUBERENDER_{key}", default)


def _env_bool(key: str, default: bool = False) -> bool:
    val = _env(key, str(default).lower())
    return val.lower() in ("true", "1", "yes")


def _env_int(key: str, default: int, min_val: int | None = None, max_val: int | None = None) -> int:
    val = int(_env(key, str(default)))
    if min_val is not None:
        val = max(val, min_val)
    if max_val is not None:
        val = min(val, max_val)
    return val


def _validate_log_level(value: str) -> str:
    valid = {"debug", "info", "warning", "error"}
    if value.lower() not in valid:
        raise ValueError(f"Invalid log level: {value}. Must be one of {valid}")
    return value.lower()


def _validate_key_strategy(value: str) -> CacheKeyStrategy:
    try:
        return CacheKeyStrategy(value.lower())
    except ValueError:
        valid = {s.value for s in CacheKeyStrategy}
        raise ValueError(f"Invalid cache key strategy: {value}. Must be one of {valid}") from None


def load_config() -> KubeRenderConfig:
    """Load configuration from KUBERENDER_* environment variables."""
    return KubeRenderConfig(
        cache=CacheConfig(
            enabled=_env_bool("CACHE_ENABLED", False),
            ttl_seconds=_env_int("CACHE_TTL", 300, min_val=1, max_val=86400),
            key_strategy=_validate_key_strategy(_env("CACHE_KEY", "structural")),
        ),
        render=RenderConfig(
            source_annotations=_env_bool("SOURCE_ANNOTATIONS", False),
        ),
        log=LogConfig(
            level=_validate_log_level(_env("LOG_LEVEL", "info")),
        ),
    )
