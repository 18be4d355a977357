"""Target platform model.

Closed set of output conventions the synthesis engine can emit, with the
metadata every other layer needs to dispatch on them (dialect, framework,
file extension, template fallback).
"""

from dataclasses import dataclass
from enum import Enum


class Platform(str, Enum):
    """Target platforms for code synthesis."""

    WEB = "web"
    IOS = "ios"
    ANDROID = "android"
    DESKTOP = "desktop"


class Dialect(str, Enum):
    """Source language dialects used for literal serialization.

    - TYPESCRIPT: React/TSX component trees (web and desktop UI)
    - SWIFT: SwiftUI views (iOS)
    - KOTLIN: Jetpack Compose composables (Android)
    - RUST: Tauri shell layer (desktop)
    """

    TYPESCRIPT = "typescript"
    SWIFT = "swift"
    KOTLIN = "kotlin"
    RUST = "rust"


@dataclass(frozen=True)
class PlatformInfo:
    """Metadata for a target platform.

    Attributes:
        platform: The platform this entry describes.
        display_name: Human-readable name.
        framework: UI framework the emitted code targets.
        dialect: Dialect used for component and entry files.
        file_extension: Extension of component files (without dot).
        language: Language tag stamped on generated files.
        template_fallback: Platform whose template is reused when a capsule
            declares none for this platform.
        shell_dialect: Dialect of the native shell file, if any.
    """

    platform: Platform
    display_name: str
    framework: str
    dialect: Dialect
    file_extension: str
    language: str
    template_fallback: Platform | None = None
    shell_dialect: Dialect | None = None


PLATFORM_REGISTRY: dict[Platform, PlatformInfo] = {
    Platform.WEB: PlatformInfo(
        platform=Platform.WEB,
        display_name="Web",
        framework="React + Vite",
        dialect=Dialect.TYPESCRIPT,
        file_extension="tsx",
        language="typescript",
    ),
    Platform.IOS: PlatformInfo(
        platform=Platform.IOS,
        display_name="iOS",
        framework="SwiftUI",
        dialect=Dialect.SWIFT,
        file_extension="swift",
        language="swift",
    ),
    Platform.ANDROID: PlatformInfo(
        platform=Platform.ANDROID,
        display_name="Android",
        framework="Jetpack Compose",
        dialect=Dialect.KOTLIN,
        file_extension="kt",
        language="kotlin",
    ),
    Platform.DESKTOP: PlatformInfo(
        platform=Platform.DESKTOP,
        display_name="Desktop",
        framework="Tauri + React",
        dialect=Dialect.TYPESCRIPT,
        file_extension="tsx",
        language="typescript",
        template_fallback=Platform.WEB,
        shell_dialect=Dialect.RUST,
    ),
}


def get_platform_info(platform: Platform) -> PlatformInfo:
    """Get metadata for a platform.

    Args:
        platform: The platform to look up.

    Returns:
        PlatformInfo for the platform.
    """
    return PLATFORM_REGISTRY[Platform(platform)]


def list_platforms() -> list[Platform]:
    """List all platforms in declaration order."""
    return list(Platform)


def parse_platform(value: str | Platform) -> Platform | None:
    """Parse a platform name, case-insensitively.

    Args:
        value: Platform name (e.g. "iOS", "web") or Platform member.

    Returns:
        Platform member, or None if the name is not a known platform.
    """
    if isinstance(value, Platform):
        return value
    try:
        return Platform(str(value).strip().lower())
    except ValueError:
        return None


__all__ = [
    "Platform",
    "Dialect",
    "PlatformInfo",
    "PLATFORM_REGISTRY",
    "get_platform_info",
    "list_platforms",
    "parse_platform",
]
