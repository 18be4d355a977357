"""Unit tests for the SwiftUI emitter."""

import pytest

from capsule_forge.mid import Theme
from capsule_forge.providers import (
    STUB_COMPONENT,
    AppNames,
    ComponentRef,
    EntryContext,
    PropArgument,
)
from capsule_forge.providers.ios import IOSEmitter
from capsule_forge.schema import PropSpec, PropType

APP = AppNames(display_name="Demo", identifier="Demo", package="com.example.demo")


class TestCallSites:
    """Tests for SwiftUI call-site rendering."""

    @pytest.mark.unit
    def test_labelled_arguments(self):
        """Arguments render as labelled Swift arguments."""
        spec = PropSpec(name="mode", type="enum", options=["login", "signup"])
        call = IOSEmitter().render_call(
            "AuthScreen", [PropArgument("mode", "login", spec)], [], []
        )
        assert call == "AuthScreen(mode: .login)"

    @pytest.mark.unit
    def test_children_trailing_closure(self):
        """Children render in a trailing view-builder closure."""
        call = IOSEmitter().render_call("Card", [], ["Text()"], [])
        assert call == "Card() {\n    Text()\n}"

    @pytest.mark.unit
    def test_slot_closure_argument(self):
        """Slots render as closure arguments."""
        spec = PropSpec(name="title", type=PropType.STRING)
        call = IOSEmitter().render_call(
            "Card", [PropArgument("title", "Hi", spec)], [], [("footer", "Text()")]
        )
        assert call == 'Card(title: "Hi", footer: {\n    Text()\n})'

    @pytest.mark.unit
    def test_stub_call(self):
        """Stub call sites carry a comment and the stub view."""
        call = IOSEmitter().stub_call("Map", "unsupported")
        assert call == (
            f'// unsupported\n{STUB_COMPONENT}(capsule: "Map", reason: "unsupported")'
        )


class TestFiles:
    """Tests for file naming and entry generation."""

    @pytest.mark.unit
    def test_paths(self):
        """Views live under Sources/<App>/Views."""
        emitter = IOSEmitter()
        assert emitter.component_path("Card", APP) == "Sources/Demo/Views/Card.swift"
        assert emitter.entry_path(APP) == "Sources/Demo/DemoApp.swift"

    @pytest.mark.unit
    def test_app_struct_name_reserved(self):
        """Components cannot take the @main struct name."""
        scope = IOSEmitter().component_scope(APP)
        assert scope.claim("Demo App", key="demo-app") == "DemoApp2"
        assert scope.claim("Theme", key="theme") == "Theme2"

    @pytest.mark.unit
    def test_entry_file(self):
        """The entry declares Theme, Handlers, ContentView and the app."""
        ctx = EntryContext(
            app=APP,
            theme=Theme(),
            components=[
                ComponentRef("card", "Card", "Card", "Sources/Demo/Views/Card.swift")
            ],
            root="Card()",
            handlers={"onSave": "onSave"},
        )
        source = IOSEmitter().entry_source(ctx)
        assert source.startswith("import SwiftUI\n")
        assert "static let primary = Color(red: 0.231, green: 0.510, blue: 0.965)" in source
        assert "static let spacing: CGFloat = 16" in source
        assert "static func onSave() {" in source
        assert "        Card()\n" in source
        assert "struct DemoApp: App {" in source
        assert f"struct {STUB_COMPONENT}" not in source
