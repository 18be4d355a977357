"""Unit tests for the React emitter."""

import pytest

from capsule_forge.mid import Theme
from capsule_forge.providers import (
    STUB_COMPONENT,
    AppNames,
    ComponentRef,
    EntryContext,
    PropArgument,
)
from capsule_forge.providers.web import WebEmitter
from capsule_forge.schema import PropSpec, PropType

APP = AppNames(display_name="Demo", identifier="Demo", package="com.example.demo")


def _arg(name: str, value, prop_type: PropType, **extra) -> PropArgument:
    return PropArgument(name, value, PropSpec(name=name, type=prop_type, **extra))


class TestCallSites:
    """Tests for JSX call-site rendering."""

    @pytest.mark.unit
    def test_self_closing(self):
        """Instances without children render self-closing."""
        call = WebEmitter().render_call(
            "Button",
            [
                _arg("label", "Sign in", PropType.STRING),
                _arg("onPress", "onLogin", PropType.ACTION),
                _arg("size", "md", PropType.SIZE),
            ],
            [],
            [],
        )
        assert call == '<Button label="Sign in" onPress={handlers.onLogin} size={16} />'

    @pytest.mark.unit
    def test_children_nested(self):
        """Children render indented between open and close tags."""
        call = WebEmitter().render_call("Card", [], ["<Text />", "<Text />"], [])
        assert call == "<Card>\n  <Text />\n  <Text />\n</Card>"

    @pytest.mark.unit
    def test_slot_as_fragment_attribute(self):
        """Slot contents are passed as a fragment-valued attribute."""
        call = WebEmitter().render_call("Card", [], [], [("footer", "<Button />")])
        assert call == "<Card footer={<>\n  <Button />\n</>} />"

    @pytest.mark.unit
    def test_stub_call_is_single_fragment(self):
        """A stub call site is one JSX expression with a comment."""
        call = WebEmitter().stub_call("Map", "no */ web template")
        assert call.startswith("<>\n")
        assert call.endswith("\n</>")
        assert "{/* no * / web template */}" in call
        assert f'<{STUB_COMPONENT} capsule={{"Map"}}' in call


class TestFiles:
    """Tests for file naming and entry generation."""

    @pytest.mark.unit
    def test_component_path(self):
        """Components live under src/components."""
        assert WebEmitter().component_path("Button", APP) == "src/components/Button.tsx"

    @pytest.mark.unit
    def test_stub_component_exports_identifier(self):
        """Stub component files export the claimed identifier."""
        source = WebEmitter().stub_component("Map", "map", "unsupported")
        assert "export function Map(" in source
        assert "// unsupported" in source

    @pytest.mark.unit
    def test_entry_file(self):
        """The entry imports components, declares theme and handlers."""
        ctx = EntryContext(
            app=APP,
            theme=Theme(),
            components=[
                ComponentRef("button", "Button", "Button", "src/components/Button.tsx")
            ],
            root="<Button onPress={handlers.onLogin} />",
            handlers={"onLogin": "onLogin", "on login": "onLogin2"},
        )
        files = WebEmitter().entry_files(ctx)
        assert [f.path for f in files] == ["src/App.tsx"]
        source = files[0].content
        assert "import { Button } from './components/Button'" in source
        assert 'primary: "#3B82F6",' in source
        assert "spacing: 16," in source
        assert source.count("onLogin: () => {") == 1
        assert "onLogin2: () => {" in source
        assert "export default function App()" in source
        assert "    <Button onPress={handlers.onLogin} />" in source
        assert STUB_COMPONENT not in source

    @pytest.mark.unit
    def test_entry_declares_stub_when_needed(self):
        """The stub component is defined only when a call site uses it."""
        ctx = EntryContext(app=APP, theme=Theme(), root="<div />", needs_stub=True)
        source = WebEmitter().entry_source(ctx)
        assert f"function {STUB_COMPONENT}(" in source
        assert "export const handlers = {}" in source
