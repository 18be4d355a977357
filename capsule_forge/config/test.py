"""Tests for configuration management."""

import pytest

from .lib import (
    EnvConfig,
    EnvVar,
    get_default_targets,
    get_environment,
    get_environment_info,
    get_max_workers,
    get_render_workers,
    get_strict_templates,
    list_environment_variables,
)

# =============================================================================
# Tests for get_environment (main interface)
# =============================================================================


class TestGetEnvironment:
    """Tests for the unified get_environment interface."""

    @pytest.mark.unit
    def test_returns_default_when_not_set(self, monkeypatch):
        """Returns default value when env var is not set."""
        monkeypatch.delenv("CAPSULE_FORGE_MAX_WORKERS", raising=False)
        assert get_environment(EnvVar.MAX_WORKERS) == 4

    @pytest.mark.unit
    def test_override_takes_priority(self, monkeypatch):
        """Override parameter takes highest priority."""
        monkeypatch.setenv("CAPSULE_FORGE_MAX_WORKERS", "9")
        assert get_environment(EnvVar.MAX_WORKERS, override=2) == 2

    @pytest.mark.unit
    def test_env_var_overrides_default(self, monkeypatch):
        """Environment variable overrides default value."""
        monkeypatch.setenv("CAPSULE_FORGE_MAX_WORKERS", "7")
        result = get_environment(EnvVar.MAX_WORKERS)
        assert result == 7
        assert isinstance(result, int)

    @pytest.mark.unit
    def test_invalid_int_falls_back_to_default(self, monkeypatch):
        """Unparseable integers fall back to the default."""
        monkeypatch.setenv("CAPSULE_FORGE_RENDER_WORKERS", "many")
        assert get_environment(EnvVar.RENDER_WORKERS) == 1

    @pytest.mark.unit
    def test_bool_type_conversion(self, monkeypatch):
        """Boolean type conversion for true and false spellings."""
        for value in ("true", "1", "yes", "TRUE"):
            monkeypatch.setenv("CAPSULE_FORGE_STRICT_TEMPLATES", value)
            assert get_environment(EnvVar.STRICT_TEMPLATES) is True
        for value in ("false", "0", "no", "No"):
            monkeypatch.setenv("CAPSULE_FORGE_STRICT_TEMPLATES", value)
            assert get_environment(EnvVar.STRICT_TEMPLATES) is False

    @pytest.mark.unit
    def test_unrecognized_bool_uses_default(self, monkeypatch):
        """Unrecognized boolean spellings use the default."""
        monkeypatch.setenv("CAPSULE_FORGE_STRICT_TEMPLATES", "maybe")
        assert get_strict_templates() is False

    @pytest.mark.unit
    def test_string_type(self, monkeypatch):
        """String type returns as-is."""
        monkeypatch.setenv("CAPSULE_FORGE_APP_PACKAGE", "org.example")
        assert get_environment(EnvVar.APP_PACKAGE) == "org.example"


class TestConvenienceFunctions:
    """Tests for derived configuration helpers."""

    @pytest.mark.unit
    def test_worker_counts_never_below_one(self, monkeypatch):
        """Zero or negative worker counts clamp to 1."""
        monkeypatch.setenv("CAPSULE_FORGE_MAX_WORKERS", "0")
        assert get_max_workers() == 1
        assert get_render_workers(override=-3) == 1

    @pytest.mark.unit
    def test_default_targets_parsing(self, monkeypatch):
        """Comma-separated targets are split, trimmed and lower-cased."""
        monkeypatch.setenv("CAPSULE_FORGE_DEFAULT_TARGETS", " Web, ios,, ANDROID ")
        assert get_default_targets() == ["web", "ios", "android"]

    @pytest.mark.unit
    def test_default_targets_default(self, monkeypatch):
        """All four platforms are targeted by default."""
        monkeypatch.delenv("CAPSULE_FORGE_DEFAULT_TARGETS", raising=False)
        assert get_default_targets() == ["web", "ios", "android", "desktop"]


class TestIntrospection:
    """Tests for environment variable metadata."""

    @pytest.mark.unit
    def test_every_var_has_prefixed_name(self):
        """All variables share the CAPSULE_FORGE_ prefix."""
        for var in EnvVar:
            info = get_environment_info(var)
            assert isinstance(info, EnvConfig)
            assert info.name.startswith("CAPSULE_FORGE_")
            assert info.description

    @pytest.mark.unit
    def test_filter_by_category(self):
        """Category filter returns only matching variables."""
        export_vars = list_environment_variables("export")
        assert EnvVar.MAX_WORKERS in export_vars
        assert EnvVar.LOG_LEVEL not in export_vars
        assert len(list_environment_variables()) == len(list(EnvVar))
