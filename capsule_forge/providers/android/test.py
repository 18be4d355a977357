"""Unit tests for the Jetpack Compose emitter."""

import pytest

from capsule_forge.mid import Theme
from capsule_forge.providers import (
    AppNames,
    ComponentRef,
    EntryContext,
    PropArgument,
)
from capsule_forge.providers.android import AndroidEmitter
from capsule_forge.schema import PropSpec, PropType

APP = AppNames(display_name="Demo", identifier="Demo", package="com.example.demo")


class TestCallSites:
    """Tests for Compose call-site rendering."""

    @pytest.mark.unit
    def test_named_arguments(self):
        """Arguments render as Kotlin named arguments."""
        call = AndroidEmitter().render_call(
            "Button",
            [
                PropArgument("label", "Pay $5", PropSpec(name="label", type="string")),
                PropArgument("padding", "compact", PropSpec(name="padding", type="spacing")),
            ],
            [],
            [],
        )
        assert call == 'Button(label = "Pay \\$5", padding = 8.dp)'

    @pytest.mark.unit
    def test_children_trailing_lambda(self):
        """Children render in a trailing lambda; empty parens are dropped."""
        emitter = AndroidEmitter()
        assert emitter.render_call("Card", [], ["Text()"], []) == "Card {\n    Text()\n}"
        spec = PropSpec(name="elevated", type=PropType.BOOLEAN)
        call = emitter.render_call(
            "Card", [PropArgument("elevated", True, spec)], ["Text()"], []
        )
        assert call == "Card(elevated = true) {\n    Text()\n}"

    @pytest.mark.unit
    def test_slot_lambda_argument(self):
        """Slots render as composable lambda arguments."""
        call = AndroidEmitter().render_call("Card", [], [], [("footer", "Text()")])
        assert call == "Card(footer = {\n    Text()\n})"


class TestFiles:
    """Tests for file naming, package headers and entry generation."""

    @pytest.mark.unit
    def test_paths(self):
        """Component and entry paths follow the app package."""
        emitter = AndroidEmitter()
        assert emitter.component_path("Card", APP) == (
            "app/src/main/java/com/example/demo/ui/components/Card.kt"
        )
        assert emitter.entry_path(APP) == (
            "app/src/main/java/com/example/demo/MainActivity.kt"
        )

    @pytest.mark.unit
    def test_component_file_gets_package(self):
        """Component files are prefixed with their package declaration."""
        emitter = AndroidEmitter()
        ref = ComponentRef("card", "Card", "Card", emitter.component_path("Card", APP))
        file = emitter.component_file("\n@Composable\nfun Card() {}\n\n", ref, APP)
        assert file.content == (
            "package com.example.demo.ui.components\n\n@Composable\nfun Card() {}\n"
        )
        assert file.language == "kotlin"

    @pytest.mark.unit
    def test_entry_file(self):
        """The entry imports components and declares AppTheme and Handlers."""
        ctx = EntryContext(
            app=APP,
            theme=Theme(),
            components=[ComponentRef("card", "Card", "Card", "Card.kt")],
            root="Card()",
            handlers={"onSave": "onSave"},
            needs_stub=True,
        )
        source = AndroidEmitter().entry_source(ctx)
        assert source.startswith("package com.example.demo\n")
        assert "import com.example.demo.ui.components.Card" in source
        assert "    val Primary = Color(0xFF3B82F6)" in source
        assert "    val Spacing = 16.dp" in source
        assert "    const val Shadows = true" in source
        assert "    fun onSave() {" in source
        assert "fun CapsuleStub(capsule: String, reason: String)" in source
        assert "fun AppContent() {\n    Card()\n}" in source
        assert "class MainActivity : ComponentActivity()" in source
