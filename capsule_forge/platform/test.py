"""Unit tests for the platform model."""

import pytest

from capsule_forge.platform import (
    PLATFORM_REGISTRY,
    Dialect,
    Platform,
    get_platform_info,
    list_platforms,
    parse_platform,
)


class TestPlatformRegistry:
    """Tests for platform metadata coverage."""

    @pytest.mark.unit
    def test_every_platform_has_metadata(self):
        """Registry is exhaustive over the Platform enum."""
        assert set(PLATFORM_REGISTRY) == set(Platform)

    @pytest.mark.unit
    def test_dialects(self):
        """Each platform maps to its source dialect."""
        assert get_platform_info(Platform.WEB).dialect == Dialect.TYPESCRIPT
        assert get_platform_info(Platform.IOS).dialect == Dialect.SWIFT
        assert get_platform_info(Platform.ANDROID).dialect == Dialect.KOTLIN
        assert get_platform_info(Platform.DESKTOP).dialect == Dialect.TYPESCRIPT

    @pytest.mark.unit
    def test_desktop_falls_back_to_web(self):
        """Desktop reuses web templates and adds a Rust shell."""
        info = get_platform_info(Platform.DESKTOP)
        assert info.template_fallback == Platform.WEB
        assert info.shell_dialect == Dialect.RUST
        assert get_platform_info(Platform.WEB).template_fallback is None

    @pytest.mark.unit
    def test_list_platforms_order(self):
        """Platforms are listed in declaration order."""
        assert list_platforms() == [
            Platform.WEB,
            Platform.IOS,
            Platform.ANDROID,
            Platform.DESKTOP,
        ]


class TestParsePlatform:
    """Tests for parse_platform."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("web", Platform.WEB),
            ("iOS", Platform.IOS),
            (" ANDROID ", Platform.ANDROID),
            (Platform.DESKTOP, Platform.DESKTOP),
            ("windows", None),
            ("", None),
        ],
    )
    def test_parse(self, raw, expected):
        """Names parse case-insensitively; unknown names give None."""
        assert parse_platform(raw) == expected
