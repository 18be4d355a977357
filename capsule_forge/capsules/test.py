"""Unit tests for the built-in capsule catalog."""

import pytest

from capsule_forge.assembler import assemble
from capsule_forge.capsules import BUILTIN_CAPSULES, create_default_registry
from capsule_forge.errors import ErrorCode
from capsule_forge.mid import CapsuleInstance, ProjectComposition
from capsule_forge.platform import Platform
from capsule_forge.registry import CapsuleRegistry


@pytest.fixture(scope="module")
def registry() -> CapsuleRegistry:
    return create_default_registry(strict_templates=True)


def _showcase() -> ProjectComposition:
    return ProjectComposition.model_validate(
        {
            "name": "Showcase",
            "root": {
                "id": "root",
                "capsuleId": "card",
                "props": {"title": "Everything"},
                "children": [
                    {"id": "heading", "capsuleId": "text", "props": {"content": "Hi", "variant": "h1"}},
                    {"id": "cta", "capsuleId": "button", "props": {"text": "Go", "onPress": "go"}},
                    {"id": "auth", "capsuleId": "auth-screen", "props": {"onLogin": "login"}},
                    {
                        "id": "table",
                        "capsuleId": "data-table",
                        "props": {"columns": ["a"], "data": [{"a": 1}]},
                    },
                    {"id": "where", "capsuleId": "map", "props": {"zoom": 4}},
                ],
            },
        }
    )


class TestCatalog:
    """Tests for catalog contents."""

    @pytest.mark.unit
    def test_all_templates_parse(self, registry):
        """Strict registration succeeds for every built-in template."""
        assert len(registry) == len(BUILTIN_CAPSULES) == 6
        assert registry.stats().template_errors == 0

    @pytest.mark.unit
    def test_ids(self, registry):
        """Catalog ids are stable."""
        assert [d.id for d in registry.list()] == [
            "button",
            "text",
            "card",
            "auth-screen",
            "data-table",
            "map",
        ]

    @pytest.mark.unit
    def test_map_has_no_ios_template(self, registry):
        """Map renders on web, desktop and android only."""
        assert registry.get_supported_platforms("map") == [
            Platform.WEB,
            Platform.ANDROID,
            Platform.DESKTOP,
        ]
        assert not registry.supports_platform("map", Platform.IOS)

    @pytest.mark.unit
    def test_card_accepts_children(self, registry):
        """Only the card is a container."""
        containers = [d.id for d in registry.list() if d.accepts_children]
        assert containers == ["card"]


class TestCatalogRendering:
    """Tests that every built-in template renders on every platform."""

    @pytest.mark.unit
    @pytest.mark.parametrize("platform", list(Platform))
    def test_showcase_renders_cleanly(self, registry, platform):
        """No template or theme problems in the built-in catalog."""
        output = assemble(_showcase(), platform, registry)
        assert not output.failed
        codes = {d.code for d in output.errors + output.warnings}
        assert ErrorCode.UNRESOLVED_THEME_TOKEN not in codes
        assert ErrorCode.TEMPLATE_SYNTAX_ERROR not in codes
        for generated in output.files:
            assert "{%" not in generated.content

    @pytest.mark.unit
    def test_only_ios_map_is_stubbed(self, registry):
        """The map is the single capability gap."""
        ios = assemble(_showcase(), Platform.IOS, registry)
        assert [e.code for e in ios.errors] == [ErrorCode.CAPABILITY_ERROR]
        assert ios.errors[0].instance_id == "where"
        web = assemble(_showcase(), Platform.WEB, registry)
        assert web.errors == []

    @pytest.mark.unit
    def test_defaults_are_literals(self, registry):
        """Component files embed defaults in platform syntax."""
        project = _showcase()
        web = {f.path: f.content for f in assemble(project, Platform.WEB, registry).files}
        ios = {f.path: f.content for f in assemble(project, Platform.IOS, registry).files}
        android = {
            f.path: f.content for f in assemble(project, Platform.ANDROID, registry).files
        }
        assert "socialProviders = [\"google\", \"apple\"]" in web[
            "src/components/AuthScreen.tsx"
        ]
        assert "var mode: Mode = .login" in ios["Sources/Showcase/Views/AuthScreen.swift"]
        table = android[
            "app/src/main/java/com/capsuleforge/showcase/ui/components/DataTable.kt"
        ]
        assert "pageSize: Int = 10," in table
        assert table.startswith("package com.capsuleforge.showcase.ui.components\n")
