"""End-to-end export scenarios over the built-in catalog."""

import pytest

from capsule_forge.capsules import AUTH_SCREEN, DATA_TABLE
from capsule_forge.errors import ErrorCode, OrchestratorPrecondition
from capsule_forge.export import (
    CancellationToken,
    CompilationStatus,
    ExportOrchestrator,
    OrchestratorState,
)
from capsule_forge.mid import CapsuleInstance, ProjectComposition
from capsule_forge.platform import Platform
from capsule_forge.providers import STUB_COMPONENT
from capsule_forge.registry import CapsuleRegistry
from capsule_forge.serialize import derive_identifier

PROFILE = {
    "id": "profile",
    "name": "Profile",
    "category": "ui",
    "props": [
        {"name": "name", "type": "string", "required": True},
        {"name": "email", "type": "string", "required": True},
        {"name": "avatar", "type": "image", "required": True},
    ],
    "platforms": {"web": {"code": "export function {% component %}() {}\n"}},
}

BROKEN = {
    "id": "broken",
    "name": "Broken",
    "category": "ui",
    "platforms": {
        "web": {"code": "export function {% component %}() {}\n"},
        "ios": {"code": "struct {% component %}: View {\n    {% props.nope %}\n}\n"},
    },
}


def _composition(root: dict, targets=("web",), name: str = "Scenario") -> ProjectComposition:
    return ProjectComposition.model_validate(
        {"name": name, "targets": list(targets), "root": root}
    )


def _card(*children: dict, **extra) -> dict:
    return {"id": "root", "capsuleId": "card", "children": list(children), **extra}


def _button(instance_id: str, text: str = "Go") -> dict:
    return {
        "id": instance_id,
        "capsuleId": "button",
        "props": {"text": text, "onPress": f"on{instance_id.title()}"},
    }


def _export(registry, composition, **kwargs):
    return ExportOrchestrator(registry, max_workers=kwargs.pop("max_workers", 4)).export_project(
        composition, **kwargs
    )


class TestDeterminism:
    """Identical inputs yield identical outputs."""

    @pytest.mark.integration
    def test_repeated_exports_match(self, default_registry, dashboard_composition):
        """Files and diagnostics do not change between runs."""
        first = _export(default_registry, dashboard_composition)
        second = _export(default_registry, dashboard_composition, max_workers=1)
        assert [r.platform for r in first] == [
            Platform.WEB,
            Platform.IOS,
            Platform.ANDROID,
            Platform.DESKTOP,
        ]
        for a, b in zip(first, second):
            assert a.files == b.files
            assert a.errors == b.errors
            assert a.warnings == b.warnings

    @pytest.mark.integration
    def test_dashboard_exports_cleanly(self, default_registry, dashboard_composition):
        """Every target completes without diagnostics."""
        results = _export(default_registry, dashboard_composition)
        for result in results:
            assert result.status == CompilationStatus.COMPLETED
            assert result.errors == []
            assert result.metadata.capsule_count == 4
            assert result.metadata.total_size == sum(f.size for f in result.files)


class TestValidationCompleteness:
    """Binding accumulates every problem of an instance."""

    @pytest.mark.integration
    def test_two_missing_required_props(self):
        """Two absent required props yield exactly two errors."""
        registry = CapsuleRegistry()
        registry.register(PROFILE)
        composition = _composition(
            {"id": "me", "capsuleId": "profile", "props": {"name": "Ada"}}
        )
        [result] = _export(registry, composition)
        missing = [e for e in result.errors if e.code == ErrorCode.MISSING_REQUIRED_PROP]
        assert len(missing) == 2
        assert {e.prop_name for e in missing} == {"email", "avatar"}
        assert result.status == CompilationStatus.COMPLETED
        assert STUB_COMPONENT in result.get_file("src/App.tsx").content


class TestCapabilityGap:
    """Capsules without a template for a target are stubbed."""

    @pytest.mark.integration
    def test_map_on_ios(self, default_registry):
        """iOS gets a stub file and a CapabilityError; web renders the map."""
        composition = _composition(
            _card({"id": "where", "capsuleId": "map"}), targets=["web", "ios"]
        )
        web, ios = _export(default_registry, composition)

        assert web.errors == []
        assert "react-leaflet" in web.get_file("src/components/Map.tsx").content

        assert ios.status == CompilationStatus.COMPLETED
        assert [e.code for e in ios.errors] == [ErrorCode.CAPABILITY_ERROR]
        stub = ios.get_file("Sources/Scenario/Views/Map.swift")
        assert stub is not None
        assert "no iOS template" in stub.content
        assert "CapsuleStub(" in ios.get_file("Sources/Scenario/ScenarioApp.swift").content


class TestDeduplication:
    """One component file per capsule, one call site per instance."""

    @pytest.mark.integration
    def test_three_buttons(self, default_registry):
        """Three sibling buttons share one Button file."""
        composition = _composition(
            _card(_button("save"), _button("cancel"), _button("help"))
        )
        [web] = _export(default_registry, composition)
        assert [f.path for f in web.files] == [
            "src/components/Card.tsx",
            "src/components/Button.tsx",
            "src/App.tsx",
        ]
        entry = web.get_file("src/App.tsx").content
        assert entry.count("<Button ") == 3
        for handler in ("onSave", "onCancel", "onHelp"):
            assert f"{handler}: () =>" in entry


class TestIdentifierSanitization:
    """Free-form names become legal, unique identifiers."""

    @pytest.mark.unit
    def test_punctuation_dropped(self):
        """'My Button!' loses its punctuation."""
        assert derive_identifier("My Button!") == "MyButton"
        assert derive_identifier("2 buttons") == "_2Buttons"

    @pytest.mark.integration
    def test_colliding_names_get_suffixes(self):
        """Capsules whose names sanitize alike get Name, Name2, Name3."""
        registry = CapsuleRegistry()
        for capsule_id, name in [("a", "My Button!"), ("b", "my button?"), ("c", "My-Button")]:
            registry.register(
                {
                    "id": capsule_id,
                    "name": name,
                    "category": "ui",
                    "children": True,
                    "platforms": {
                        "web": {"code": "export function {% component %}() {}\n"},
                        "android": {"code": "@Composable\nfun {% component %}() {}\n"},
                    },
                }
            )
        composition = ProjectComposition(
            name="Names",
            targets=["web", "android"],
            root=CapsuleInstance(
                id="ia",
                capsule_id="a",
                children=[
                    CapsuleInstance(id="ib", capsule_id="b"),
                    CapsuleInstance(id="ic", capsule_id="c"),
                ],
            ),
        )

        web, android = _export(registry, composition)
        assert [f.path for f in web.files][:3] == [
            "src/components/MyButton.tsx",
            "src/components/MyButton2.tsx",
            "src/components/MyButton3.tsx",
        ]
        assert "fun MyButton3()" in android.files[2].content


class TestPartialFailure:
    """A broken target never affects its siblings."""

    @pytest.mark.integration
    def test_template_error_only_fails_ios(self, default_registry):
        """web succeeds, ios fails with the broken file stubbed."""
        default_registry.register(BROKEN)
        composition = _composition(
            _card(_button("go"), {"id": "bad", "capsuleId": "broken"}),
            targets=["web", "ios"],
        )
        web, ios = _export(default_registry, composition)

        assert web.success
        assert web.errors == []
        assert ios.status == CompilationStatus.FAILED
        assert not ios.success
        errors = [e for e in ios.errors if e.code == ErrorCode.TEMPLATE_SYNTAX_ERROR]
        assert len(errors) == 1
        assert errors[0].file == "Sources/Scenario/Views/Broken.swift"
        stub = ios.get_file("Sources/Scenario/Views/Broken.swift")
        assert "malformed" in stub.content
        assert ios.get_file("Sources/Scenario/Views/Button.swift") is not None


class TestAuthDataScenario:
    """AuthScreen and DataTable exported to iOS and web."""

    @pytest.fixture
    def registry(self) -> CapsuleRegistry:
        registry = CapsuleRegistry()
        registry.register(AUTH_SCREEN.model_copy(update={"accepts_children": True}))
        registry.register(DATA_TABLE)
        return registry

    @pytest.fixture
    def composition(self) -> ProjectComposition:
        return _composition(
            {
                "id": "auth",
                "capsuleId": "auth-screen",
                "props": {"onLogin": "handleLogin"},
                "children": [
                    {
                        "id": "users",
                        "capsuleId": "data-table",
                        "props": {"columns": ["email"], "data": [{"email": "a@b.c"}]},
                    }
                ],
            },
            targets=["ios", "web"],
            name="Team Portal",
        )

    @pytest.mark.integration
    def test_three_files_per_target(self, registry, composition):
        """Each target has both components plus one entry file."""
        ios, web = _export(registry, composition)
        assert (ios.platform, web.platform) == (Platform.IOS, Platform.WEB)

        assert [f.path for f in ios.files] == [
            "Sources/TeamPortal/Views/AuthScreen.swift",
            "Sources/TeamPortal/Views/DataTable.swift",
            "Sources/TeamPortal/TeamPortalApp.swift",
        ]
        ios_entry = ios.files[-1].content
        assert "AuthScreen(" in ios_entry
        assert "DataTable(" in ios_entry

        assert [f.path for f in web.files] == [
            "src/components/AuthScreen.tsx",
            "src/components/DataTable.tsx",
            "src/App.tsx",
        ]
        web_entry = web.files[-1].content
        assert "import { AuthScreen } from './components/AuthScreen'" in web_entry
        assert "import { DataTable } from './components/DataTable'" in web_entry

        for result in (ios, web):
            assert result.success
            assert result.errors == []
            assert result.metadata.total_files == 3

    @pytest.mark.integration
    def test_invalid_enum_value(self, registry, composition):
        """'banana' yields one InvalidEnumValue and a stub; the table still renders."""
        root = composition.root.model_copy(
            update={"props": {"onLogin": "handleLogin", "mode": "banana"}}
        )
        composition = composition.model_copy(update={"root": root})
        ios, web = _export(registry, composition)
        for result in (ios, web):
            assert [e.code for e in result.errors] == [ErrorCode.INVALID_ENUM_VALUE]
            assert result.errors[0].instance_id == "auth"
        entry = web.get_file("src/App.tsx").content
        assert f"<{STUB_COMPONENT} capsule={{\"AuthScreen\"}}" in entry
        assert "banana" in entry
        assert "<AuthScreen" not in entry
        assert web.get_file("src/components/DataTable.tsx") is not None


class TestCancellation:
    """Cancelling between targets yields a distinct marker."""

    @pytest.mark.integration
    def test_cancel_after_first_target(self, default_registry):
        """web completes; ios is cancelled with no files."""
        token = CancellationToken()
        orchestrator = ExportOrchestrator(default_registry, max_workers=1)
        composition = _composition(_card(_button("go")), targets=["web", "ios"])

        def on_done(result):
            if result.platform == Platform.WEB:
                token.cancel()

        web, ios = orchestrator.export_project(
            composition, cancel=token, on_target_done=on_done
        )
        assert web.status == CompilationStatus.COMPLETED
        assert len(web.files) == 3
        assert ios.status == CompilationStatus.CANCELLED
        assert ios.cancelled and not ios.success
        assert ios.files == []
        assert orchestrator.state == OrchestratorState.CANCELLED


class TestPreconditions:
    """Malformed requests produce no results."""

    @pytest.mark.integration
    def test_empty_targets(self, default_registry):
        """An explicitly empty target list is rejected."""
        composition = _composition(_card())
        with pytest.raises(OrchestratorPrecondition, match="No target platforms"):
            _export(default_registry, composition, targets=[])

    @pytest.mark.integration
    def test_duplicate_instance_ids(self, default_registry):
        """Duplicate ids abort before generation."""
        composition = _composition(_card(_button("x"), _button("x")))
        orchestrator = ExportOrchestrator(default_registry)
        with pytest.raises(OrchestratorPrecondition, match="appears 2 times"):
            orchestrator.export_project(composition)
        assert orchestrator.state == OrchestratorState.IDLE

    @pytest.mark.integration
    def test_default_targets_from_environment(self, default_registry, monkeypatch):
        """A composition without targets uses CAPSULE_FORGE_DEFAULT_TARGETS."""
        monkeypatch.setenv("CAPSULE_FORGE_DEFAULT_TARGETS", "android, desktop")
        composition = _composition(_card(), targets=[])
        results = _export(default_registry, composition)
        assert [r.platform for r in results] == [Platform.ANDROID, Platform.DESKTOP]


class TestDesktopShell:
    """Desktop reuses web components and adds a Tauri shell."""

    @pytest.mark.integration
    def test_shell_registers_handlers(self, default_registry):
        """Action handlers become Tauri commands."""
        composition = _composition(_card(_button("save")), targets=["desktop"])
        [desktop] = _export(default_registry, composition)
        paths = [f.path for f in desktop.files]
        assert paths[-2:] == ["src/App.tsx", "src-tauri/src/main.rs"]
        shell = desktop.get_file("src-tauri/src/main.rs")
        assert shell.language == "rust"
        assert "pub fn on_save()" in shell.content
        assert "handlers::on_save" in shell.content
        assert "@tauri-apps/api" in desktop.metadata.dependencies


class TestLegalIdentifiers:
    """Generated package and handler names are legal in every target."""

    @pytest.mark.integration
    def test_keyword_project_name_on_android(self, default_registry):
        """A project named after a Kotlin keyword gets a legal package."""
        composition = _composition(_card(), targets=["android"], name="Fun")
        [android] = _export(default_registry, composition)
        entry = android.get_file("app/src/main/java/com/capsuleforge/appfun/MainActivity.kt")
        assert entry is not None
        assert entry.content.startswith("package com.capsuleforge.appfun\n")
        card = android.get_file(
            "app/src/main/java/com/capsuleforge/appfun/ui/components/Card.kt"
        )
        assert card.content.startswith("package com.capsuleforge.appfun.ui.components\n")
        assert "package com.capsuleforge.fun" not in entry.content

    @pytest.mark.integration
    def test_handler_names_that_sanitize_alike(self, default_registry):
        """Distinct action names never share one handler stub."""
        first = {
            "id": "first",
            "capsuleId": "button",
            "props": {"text": "A", "onPress": "onLogin"},
        }
        second = {
            "id": "second",
            "capsuleId": "button",
            "props": {"text": "B", "onPress": "on_login"},
        }
        composition = _composition(_card(first, second), targets=["web", "android"])
        web, android = _export(default_registry, composition)

        entry = web.get_file("src/App.tsx").content
        assert entry.count("onLogin: () =>") == 1
        assert entry.count("onLogin2: () =>") == 1
        assert "onPress={handlers.onLogin}" in entry
        assert "onPress={handlers.onLogin2}" in entry

        main = android.get_file(
            "app/src/main/java/com/capsuleforge/scenario/MainActivity.kt"
        ).content
        assert "    fun onLogin() {" in main
        assert "    fun onLogin2() {" in main
        assert "Handlers::onLogin2" in main


BADGE = {
    "id": "badge",
    "name": "Badge",
    "category": "ui",
    "props": [
        {"name": "tint", "type": "color", "default": "primary"},
        {"name": "ring", "type": "color", "default": "brand"},
    ],
    "platforms": {
        "web": {
            "code": (
                "export function {% component %}"
                "({ tint = {% props.tint %}, ring = {% props.ring %} }) {}\n"
            )
        },
        "android": {
            "code": (
                "fun {% component %}(tint: Color = {% props.tint %}, "
                "ring: Color? = {% props.ring %}) {}\n"
            )
        },
    },
}


class TestComponentThemeDefaults:
    """Component files carry literal colors for theme-token defaults."""

    @pytest.mark.integration
    def test_token_defaults_are_inlined(self):
        """Token defaults resolve through the composition theme."""
        registry = CapsuleRegistry()
        registry.register(BADGE)
        composition = _composition(
            {"id": "badge", "capsuleId": "badge"}, targets=["web", "android"]
        )
        web, android = _export(registry, composition)

        badge = web.get_file("src/components/Badge.tsx").content
        assert 'tint = "#3B82F6"' in badge
        assert "ring = null" in badge
        assert "theme.colors" not in badge

        badge = android.get_file(
            "app/src/main/java/com/capsuleforge/scenario/ui/components/Badge.kt"
        ).content
        assert "tint: Color = Color(0xFF3B82F6)" in badge
        assert "AppTheme" not in badge

        for result in (web, android):
            assert not result.has_errors
            unresolved = [
                w for w in result.warnings if w.code == ErrorCode.UNRESOLVED_THEME_TOKEN
            ]
            assert len(unresolved) == 1
            assert "brand" in unresolved[0].message
