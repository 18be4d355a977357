"""Unit tests for the capsule registry."""

import logging

import pytest

from capsule_forge.errors import TemplateSyntaxError
from capsule_forge.platform import Platform
from capsule_forge.registry import CapsuleFilter, CapsuleRegistry
from capsule_forge.schema import CapsuleCategory


def _capsule(capsule_id="button", name="Button", **overrides):
    data = {
        "id": capsule_id,
        "name": name,
        "category": "ui",
        "tags": ["action"],
        "props": [{"name": "text", "type": "string", "required": True}],
        "platforms": {
            "web": {"code": "export function {% component %}() {}"},
            "ios": {"code": "struct {% component %}: View {}"},
        },
    }
    data.update(overrides)
    return data


class TestRegistration:
    """Tests for register / unregister."""

    @pytest.mark.unit
    def test_register_and_get(self):
        """Registered definitions are retrievable by id."""
        registry = CapsuleRegistry()
        definition = registry.register(_capsule())
        assert registry.get("button") is definition
        assert registry.get_capsule("button") is definition
        assert "button" in registry
        assert len(registry) == 1
        assert registry.get("missing") is None

    @pytest.mark.unit
    def test_templates_parsed_once(self):
        """Templates are compiled at registration."""
        registry = CapsuleRegistry()
        registry.register(_capsule())
        compiled = registry.compiled_template("button", Platform.IOS)
        assert compiled is not None
        assert compiled is registry.compiled_template("button", Platform.IOS)

    @pytest.mark.unit
    def test_duplicate_id_replaces_with_warning(self, caplog):
        """Re-registration replaces and logs a warning, never merges."""
        registry = CapsuleRegistry()
        registry.register(_capsule())
        replacement = _capsule(
            name="Fancy Button",
            platforms={"android": {"code": "fun {% component %}() {}"}},
        )
        with caplog.at_level(logging.WARNING):
            registry.register(replacement)
        assert "registered twice" in caplog.text
        assert len(registry) == 1
        assert registry.get("button").name == "Fancy Button"
        assert registry.get_supported_platforms("button") == [Platform.ANDROID]
        assert registry.compiled_template("button", Platform.WEB) is None

    @pytest.mark.unit
    def test_template_error_recorded(self):
        """A malformed template is recorded, not fatal."""
        registry = CapsuleRegistry(strict_templates=False)
        registry.register(
            _capsule(
                platforms={
                    "web": {"code": "ok {% component %}"},
                    "ios": {"code": "broken {% props.nope %}"},
                }
            )
        )
        assert registry.template_error("button", Platform.WEB) is None
        error = registry.template_error("button", Platform.IOS)
        assert isinstance(error, TemplateSyntaxError)
        assert registry.compiled_template("button", Platform.IOS) is None
        assert registry.supports_platform("button", Platform.IOS)
        assert registry.stats().template_errors == 1

    @pytest.mark.unit
    def test_strict_mode_raises(self):
        """Strict registries reject malformed templates."""
        registry = CapsuleRegistry(strict_templates=True)
        with pytest.raises(TemplateSyntaxError):
            registry.register(_capsule(platforms={"web": {"code": "{% oops"}}))
        assert "button" not in registry

    @pytest.mark.unit
    def test_unregister(self):
        """Unregister removes definition and compiled templates."""
        registry = CapsuleRegistry()
        registry.register(_capsule())
        assert registry.unregister("button") is True
        assert registry.unregister("button") is False
        assert registry.compiled_template("button", Platform.WEB) is None


class TestLookups:
    """Tests for catalog browsing."""

    @pytest.fixture
    def registry(self):
        registry = CapsuleRegistry()
        registry.register(_capsule())
        registry.register(
            _capsule(
                "data-table",
                "DataTable",
                category="data",
                tags=["table", "list"],
                description="Sortable table",
                platforms={"android": {"code": "fun {% component %}() {}"}},
            )
        )
        return registry

    @pytest.mark.unit
    def test_supports_platform_with_fallback(self, registry):
        """Desktop is supported through the web template."""
        assert registry.supports_platform("button", Platform.DESKTOP)
        assert not registry.supports_platform("button", Platform.ANDROID)
        assert not registry.supports_platform("missing", Platform.WEB)
        assert registry.compiled_template("button", Platform.DESKTOP).platform == Platform.WEB

    @pytest.mark.unit
    def test_list_filters(self, registry):
        """Filters combine category, platform, tags and query."""
        assert [d.id for d in registry.list()] == ["button", "data-table"]
        assert [d.id for d in registry.list(CapsuleFilter(category=CapsuleCategory.DATA))] == [
            "data-table"
        ]
        assert [d.id for d in registry.list(CapsuleFilter(platform=Platform.IOS))] == [
            "button"
        ]
        assert registry.list(CapsuleFilter(tags=("table", "missing"))) == []
        assert [d.id for d in registry.search("SORTABLE")] == ["data-table"]

    @pytest.mark.unit
    def test_get_all_capsules(self, registry):
        """All capsules are listed in registration order."""
        assert [d.id for d in registry.get_all_capsules()] == ["button", "data-table"]

    @pytest.mark.unit
    def test_stats(self, registry):
        """Stats count by category and platform."""
        stats = registry.stats()
        assert stats.total == 2
        assert stats.by_category == {"ui": 1, "data": 1}
        assert stats.by_platform == {"web": 1, "ios": 1, "desktop": 1, "android": 1}
