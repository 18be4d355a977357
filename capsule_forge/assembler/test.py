"""Unit tests for the file tree assembler."""

import threading

import pytest

from capsule_forge.assembler import assemble, inline_theme_colors
from capsule_forge.binding import PropBinder
from capsule_forge.errors import ErrorCode, ExportCancelled
from capsule_forge.mid import CapsuleInstance, ProjectComposition, Theme
from capsule_forge.platform import Platform
from capsule_forge.providers import STUB_COMPONENT
from capsule_forge.registry import CapsuleRegistry
from capsule_forge.schema import CapsuleDefinition

BUTTON = {
    "id": "button",
    "name": "Button",
    "category": "ui",
    "props": [
        {"name": "label", "type": "string", "required": True},
        {"name": "onPress", "type": "action"},
        {
            "name": "variant",
            "type": "enum",
            "options": ["primary", "secondary"],
            "default": "primary",
        },
    ],
    "platforms": {
        "web": {
            "code": (
                "export function {% component %}({ label, onPress, variant = "
                "{% props.variant %} }: ButtonProps) {\n"
                "  return <button className={variant} onClick={onPress}>{label}</button>\n"
                "}\n"
            ),
            "dependencies": ["clsx"],
        },
        "ios": {"code": "import SwiftUI\n\nstruct {% component %}: View {}\n"},
        "android": {"code": "@Composable\nfun {% component %}() {}\n"},
    },
}

CARD = {
    "id": "card",
    "name": "Card",
    "category": "layout",
    "children": True,
    "props": [
        {"name": "title", "type": "string", "default": ""},
        {"name": "footer", "type": "slot"},
    ],
    "platforms": {
        "web": {"code": "export function {% component %}() {}\n"},
        "ios": {"code": "struct {% component %}: View {}\n"},
        "android": {"code": "fun {% component %}() {}\n"},
    },
}

MAP = {
    "id": "map",
    "name": "Map",
    "category": "media",
    "platforms": {"web": {"code": "export function {% component %}() {}\n"}},
}

BROKEN = {
    "id": "broken",
    "name": "Broken",
    "category": "ui",
    "platforms": {
        "web": {"code": "export function {% component %}() {}\n"},
        "ios": {"code": "struct {% component %}: View { {% props.missing %} }\n"},
    },
}


@pytest.fixture
def registry() -> CapsuleRegistry:
    registry = CapsuleRegistry(strict_templates=False)
    registry.register_many([BUTTON, CARD, MAP, BROKEN])
    return registry


def _button(instance_id: str, **props) -> CapsuleInstance:
    props.setdefault("label", instance_id)
    return CapsuleInstance(id=instance_id, capsule_id="button", props=props)


def _project(*children: CapsuleInstance, **root_kwargs) -> ProjectComposition:
    root = CapsuleInstance(
        id="root",
        capsule_id="card",
        props={"title": "Hi"},
        children=list(children),
        **root_kwargs,
    )
    return ProjectComposition(name="Demo", root=root, targets=["web"])


def _paths(output) -> list[str]:
    return [f.path for f in output.files]


class TestFileTree:
    """Tests for file ordering, dedup and entry wiring."""

    @pytest.mark.unit
    def test_one_file_per_capsule(self, registry):
        """Three instances of one capsule share one component file."""
        project = _project(_button("a"), _button("b"), _button("c"))
        output = assemble(project, Platform.WEB, registry)
        assert _paths(output) == [
            "src/components/Card.tsx",
            "src/components/Button.tsx",
            "src/App.tsx",
        ]
        entry = output.files[-1].content
        assert entry.count("<Button ") == 3
        assert output.capsule_count == 2
        assert output.errors == []

    @pytest.mark.unit
    def test_deterministic(self, registry):
        """Assembling twice yields identical files."""
        project = _project(_button("a", onPress="onLogin"), _button("b"))
        first = assemble(project, Platform.IOS, registry)
        second = assemble(project, Platform.IOS, registry)
        assert first.files == second.files

    @pytest.mark.unit
    def test_parallel_render_matches_sequential(self, registry):
        """Worker threads do not change content or order."""
        project = _project(_button("a"), CapsuleInstance(id="m", capsule_id="map"))
        sequential = assemble(project, Platform.ANDROID, registry)
        parallel = assemble(project, Platform.ANDROID, registry, render_workers=4)
        assert parallel.files == sequential.files

    @pytest.mark.unit
    def test_defaults_render_in_component_file(self, registry):
        """Component files see binder defaults."""
        output = assemble(_project(_button("a")), Platform.WEB, registry)
        button = output.files[1].content
        assert 'variant = "primary" }: ButtonProps' in button

    @pytest.mark.unit
    def test_handlers_declared(self, registry):
        """Action props produce handler stubs in the entry file."""
        project = _project(_button("a", onPress="onLogin"))
        entry = assemble(project, Platform.WEB, registry).files[-1].content
        assert "onPress={handlers.onLogin}" in entry
        assert "  onLogin: () => {" in entry

    @pytest.mark.unit
    def test_slots_rendered(self, registry):
        """Slot contents are rendered at the call site."""
        project = _project(slots={"footer": [_button("f")]})
        entry = assemble(project, Platform.ANDROID, registry).files[-1].content
        assert 'footer = {\n        Button(label = "f", variant = "primary")\n    }' in entry

    @pytest.mark.unit
    def test_dependencies_merged(self, registry):
        """Emitter and template dependencies are merged in order."""
        output = assemble(_project(_button("a")), Platform.WEB, registry)
        assert output.dependencies == ["react", "react-dom", "clsx"]


class TestDiagnostics:
    """Tests for stubs and error reporting."""

    @pytest.mark.unit
    def test_capability_stub(self, registry):
        """A capsule without an iOS template is stubbed, not dropped."""
        project = _project(CapsuleInstance(id="m", capsule_id="map"))
        output = assemble(project, Platform.IOS, registry)
        assert "Sources/Demo/Views/Map.swift" in _paths(output)
        errors = [e for e in output.errors if e.code == ErrorCode.CAPABILITY_ERROR]
        assert len(errors) == 1
        assert errors[0].instance_id == "m"
        assert f"{STUB_COMPONENT}(capsule: \"Map\"" in output.files[-1].content
        assert not output.failed

    @pytest.mark.unit
    def test_unknown_capsule_stubbed(self, registry):
        """Unregistered capsule ids are reported as capability gaps."""
        project = _project(CapsuleInstance(id="x", capsule_id="ghost"))
        output = assemble(project, Platform.WEB, registry)
        assert "src/components/Ghost.tsx" in _paths(output)
        assert output.errors[0].code == ErrorCode.CAPABILITY_ERROR
        assert "not registered" in output.errors[0].message

    @pytest.mark.unit
    def test_binding_error_isolated(self, registry):
        """An invalid instance becomes a stub call; siblings render."""
        project = _project(_button("ok"), _button("bad", variant="banana"))
        output = assemble(project, Platform.WEB, registry)
        assert [e.code for e in output.errors] == [ErrorCode.INVALID_ENUM_VALUE]
        assert output.errors[0].instance_id == "bad"
        assert output.errors[0].platform == "web"
        entry = output.files[-1].content
        assert '<Button label="ok"' in entry
        assert f'<{STUB_COMPONENT} capsule={{"Button"}}' in entry
        assert not output.failed

    @pytest.mark.unit
    def test_template_error_fails_target(self, registry):
        """A malformed template stubs its file and fails the target."""
        project = _project(CapsuleInstance(id="b", capsule_id="broken"))
        ios = assemble(project, Platform.IOS, registry)
        assert ios.failed
        error = next(e for e in ios.errors if e.code == ErrorCode.TEMPLATE_SYNTAX_ERROR)
        assert error.file == "Sources/Demo/Views/Broken.swift"
        assert not any(e.code == ErrorCode.CAPABILITY_ERROR for e in ios.errors)
        assert not assemble(project, Platform.WEB, registry).failed

    @pytest.mark.unit
    def test_children_of_leaf_capsule_warned(self, registry):
        """Children under a capsule that takes none are reported."""
        leaf = _button("leaf")
        leaf = leaf.model_copy(update={"children": [_button("inner")]})
        output = assemble(_project(leaf), Platform.WEB, registry)
        assert any(w.code == ErrorCode.INVALID_COMPOSITION for w in output.warnings)
        assert 'label="inner"' not in output.files[-1].content


class TestCancellation:
    """Tests for progress and cooperative cancellation."""

    @pytest.mark.unit
    def test_progress_counts_component_files(self, registry):
        """Progress reports emitted/total component files."""
        events = []
        assemble(
            _project(_button("a")),
            Platform.WEB,
            registry,
            progress=lambda emitted, total: events.append((emitted, total)),
        )
        assert events == [(1, 2), (2, 2)]

    @pytest.mark.unit
    def test_cancelled_before_start(self, registry):
        """A set flag aborts before any file is emitted."""
        cancel = threading.Event()
        cancel.set()
        with pytest.raises(ExportCancelled):
            assemble(_project(_button("a")), Platform.WEB, registry, cancel=cancel)

    @pytest.mark.unit
    def test_cancelled_between_files(self, registry):
        """Cancellation is honoured between component-file emissions."""
        cancel = threading.Event()
        events = []

        def progress(emitted: int, total: int) -> None:
            events.append(emitted)
            cancel.set()

        with pytest.raises(ExportCancelled) as info:
            assemble(
                _project(_button("a")),
                Platform.WEB,
                registry,
                cancel=cancel,
                progress=progress,
            )
        assert events == [1]
        assert info.value.platform == "web"


class TestInlineThemeColors:
    """Tests for color-token defaults in component files."""

    @pytest.mark.unit
    def test_tokens_become_hex(self):
        """Tokens in colors, color arrays and color fields resolve to hex."""
        definition = CapsuleDefinition.model_validate(
            {
                "id": "chart",
                "name": "Chart",
                "props": [
                    {"name": "tint", "type": "color", "default": "primary"},
                    {"name": "edge", "type": "color", "default": "#000"},
                    {
                        "name": "palette",
                        "type": "array",
                        "itemType": "color",
                        "default": ["colors.secondary", "brand"],
                    },
                    {
                        "name": "style",
                        "type": "object",
                        "fields": {"fill": "color", "label": "string"},
                        "default": {"fill": "primary", "label": "primary"},
                    },
                ],
                "platforms": {"web": {"code": "x"}},
            }
        )
        theme = Theme(colors={"primary": "#111111", "secondary": "#222222"})
        bound, missing = inline_theme_colors(PropBinder().defaults(definition), theme)
        assert bound.value("tint") == "#111111"
        assert bound.value("edge") == "#000"
        assert bound.value("palette") == ["#222222", None]
        assert bound.value("style") == {"fill": "#111111", "label": "primary"}
        assert missing == ["brand"]
        assert bound["tint"].explicit is False
