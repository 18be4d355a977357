"""Target platform model and metadata."""

from .lib import (
    PLATFORM_REGISTRY,
    Dialect,
    Platform,
    PlatformInfo,
    get_platform_info,
    list_platforms,
    parse_platform,
)

__all__ = [
    "Platform",
    "Dialect",
    "PlatformInfo",
    "PLATFORM_REGISTRY",
    "get_platform_info",
    "list_platforms",
    "parse_platform",
]
