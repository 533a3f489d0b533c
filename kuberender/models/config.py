"""Configuration data structures."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


class CacheKeyStrategy(StrEnum):
    """How cache keys are derived from a source."""

    STRUCTURAL = "structural"
    PATH = "path"


@dataclass
class CacheConfig:
    """Render cache configuration."""

    enabled: bool = False
    ttl_seconds: int = 300
    key_strategy: CacheKeyStrategy = CacheKeyStrategy.STRUCTURAL


@dataclass
class RenderConfig:
    """Renderer behaviour configuration."""

    source_annotations: bool = False


@dataclass
class LogConfig:
    """Logging configuration."""

    level: str = "info"


@dataclass
class KubeRenderConfig:
    """Top-level kuberender configuration."""

    cache: CacheConfig = field(default_factory=CacheConfig)
    render: RenderConfig = field(default_factory=RenderConfig)
    log: LogConfig = field(default_factory=LogConfig)
