"""Unit tests for validation module."""

import pytest

from capsule_forge.errors import ErrorCode
from capsule_forge.mid import CapsuleInstance, ProjectComposition
from capsule_forge.registry import CapsuleRegistry
from capsule_forge.validation import is_valid, validate_composition


def _project(root: CapsuleInstance, name: str = "Demo") -> ProjectComposition:
    return ProjectComposition(name=name, root=root, targets=["web"])


def _node(instance_id: str, capsule_id: str = "card", **kwargs) -> CapsuleInstance:
    return CapsuleInstance(id=instance_id, capsule_id=capsule_id, **kwargs)


class TestValidateComposition:
    """Tests for validate_composition function."""

    @pytest.mark.unit
    def test_valid_tree(self):
        """Well-formed composition passes validation."""
        root = _node("root", children=[_node("a"), _node("b")])
        report = validate_composition(_project(root))
        assert report.ok
        assert report.errors == []
        assert is_valid(_project(root))

    @pytest.mark.unit
    def test_empty_name(self):
        """A blank project name is an error."""
        report = validate_composition(_project(_node("root"), name="   "))
        assert not report.ok
        assert "name" in report.errors[0].message

    @pytest.mark.unit
    def test_duplicate_ids(self):
        """Duplicate ids are detected, including inside slots."""
        root = _node(
            "root",
            children=[_node("dupe")],
            slots={"footer": [_node("dupe")]},
        )
        report = validate_composition(_project(root))
        assert len(report.errors) == 1
        assert report.errors[0].code == ErrorCode.INVALID_COMPOSITION
        assert report.errors[0].instance_id == "dupe"
        assert "2 times" in report.errors[0].message

    @pytest.mark.unit
    def test_empty_ids(self):
        """Blank instance and capsule ids are errors."""
        root = _node("root", children=[_node(""), _node("x", capsule_id=" ")])
        messages = [e.message for e in validate_composition(_project(root)).errors]
        assert any("empty id" in m for m in messages)
        assert any("empty capsule id" in m for m in messages)

    @pytest.mark.unit
    def test_cycle_detected(self):
        """An instance reachable from itself is reported once."""
        root = _node("root")
        child = _node("child")
        root.children.append(child)
        child.children.append(root)
        report = validate_composition(_project(root))
        cycles = [e for e in report.errors if "Cycle" in e.message]
        assert len(cycles) == 1
        assert cycles[0].instance_id == "root"

    @pytest.mark.unit
    def test_undeclared_slot_is_warning(self):
        """Slot keys the capsule does not declare are warnings."""
        registry = CapsuleRegistry()
        registry.register(
            {
                "id": "card",
                "name": "Card",
                "category": "layout",
                "props": [{"name": "footer", "type": "slot"}],
                "platforms": {"web": {"code": "x"}},
            }
        )
        root = _node("root", slots={"footer": [], "header": []})
        report = validate_composition(_project(root), registry)
        assert report.ok
        assert [w.prop_name for w in report.warnings] == ["header"]
        assert report.warnings[0].code == ErrorCode.UNKNOWN_SLOT

    @pytest.mark.unit
    def test_slot_check_needs_registry(self):
        """Without a registry slot keys are not checked."""
        root = _node("root", slots={"header": []})
        assert validate_composition(_project(root)).warnings == []
