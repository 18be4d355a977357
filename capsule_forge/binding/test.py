"""Unit tests for the prop binder."""

import pytest

from capsule_forge.errors import ErrorCode
from capsule_forge.mid import CapsuleInstance, Theme
from capsule_forge.registry import CapsuleRegistry
from capsule_forge.schema import CapsuleDefinition, PropType
from capsule_forge.binding import BoundProps, BoundValue, PropBinder


@pytest.fixture
def binder():
    return PropBinder()


def _definition(props):
    return CapsuleDefinition.model_validate(
        {
            "id": "widget",
            "name": "Widget",
            "props": props,
            "platforms": {"web": {"code": "x"}},
        }
    )


def _instance(props=None, slots=None, instance_id="w1"):
    return CapsuleInstance(
        id=instance_id, capsule_id="widget", props=props or {}, slots=slots or {}
    )


def _codes(result):
    return [e.code for e in result.errors]


class TestResolution:
    """Tests for defaults and required props."""

    @pytest.mark.unit
    def test_defaults_applied(self, binder):
        """Absent props with a default resolve to it, marked implicit."""
        definition = _definition(
            [{"name": "title", "type": "string", "default": "Welcome"}]
        )
        result = binder.bind(_instance(), definition)
        assert result.ok
        assert result.props["title"] == BoundValue(
            definition.get_prop("title"), "Welcome", explicit=False
        )

    @pytest.mark.unit
    def test_optional_without_default_skipped(self, binder):
        """Optional props with no default are absent from BoundProps."""
        result = binder.bind(_instance(), _definition([{"name": "icon", "type": "icon"}]))
        assert result.ok
        assert "icon" not in result.props

    @pytest.mark.unit
    def test_errors_accumulate(self, binder):
        """Two missing required props out of three yield two errors."""
        definition = _definition(
            [
                {"name": "a", "type": "string", "required": True},
                {"name": "b", "type": "number", "required": True},
                {"name": "c", "type": "action", "required": True},
            ]
        )
        result = binder.bind(_instance({"a": "present"}), definition)
        assert _codes(result) == [
            ErrorCode.MISSING_REQUIRED_PROP,
            ErrorCode.MISSING_REQUIRED_PROP,
        ]
        assert [e.prop_name for e in result.errors] == ["b", "c"]
        assert result.props.value("a") == "present"

    @pytest.mark.unit
    def test_required_with_default_is_satisfied(self, binder):
        """A default satisfies a required prop."""
        definition = _definition(
            [{"name": "mode", "type": "enum", "options": ["a", "b"], "default": "a", "required": True}]
        )
        assert binder.bind(_instance(), definition).ok

    @pytest.mark.unit
    def test_unknown_prop_warns(self, binder):
        """Undeclared props warn without failing."""
        result = binder.bind(_instance({"extra": 1}), _definition([]))
        assert result.ok
        assert [w.code for w in result.warnings] == [ErrorCode.UNKNOWN_PROP]

    @pytest.mark.unit
    def test_bound_props_immutable(self, binder):
        """BoundProps cannot be modified."""
        props = BoundProps()
        with pytest.raises(TypeError):
            props["x"] = 1


class TestTypeChecks:
    """Tests for per-type validation."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "prop,value,code",
        [
            ({"type": "string"}, 5, ErrorCode.INVALID_PROP_TYPE),
            ({"type": "string", "pattern": "[a-z]+"}, "abc1", ErrorCode.INVALID_PROP_TYPE),
            ({"type": "string", "max": 3}, "abcd", ErrorCode.OUT_OF_RANGE),
            ({"type": "number"}, True, ErrorCode.INVALID_PROP_TYPE),
            ({"type": "number"}, float("nan"), ErrorCode.INVALID_PROP_TYPE),
            ({"type": "number", "min": 0, "max": 5}, 6, ErrorCode.OUT_OF_RANGE),
            ({"type": "boolean"}, "yes", ErrorCode.INVALID_PROP_TYPE),
            ({"type": "color"}, "#12", ErrorCode.INVALID_PROP_TYPE),
            ({"type": "size"}, "huge", ErrorCode.INVALID_PROP_TYPE),
            ({"type": "spacing"}, [], ErrorCode.INVALID_PROP_TYPE),
            ({"type": "action"}, "alert(1)", ErrorCode.INVALID_PROP_TYPE),
            ({"type": "enum", "options": ["login", "signup"]}, "banana", ErrorCode.INVALID_ENUM_VALUE),
            ({"type": "array"}, "x", ErrorCode.INVALID_PROP_TYPE),
            ({"type": "array", "itemType": "number"}, [1, "2"], ErrorCode.INVALID_PROP_TYPE),
            ({"type": "array", "max": 1}, [1, 2], ErrorCode.OUT_OF_RANGE),
            ({"type": "object"}, {1: "x"}, ErrorCode.INVALID_PROP_TYPE),
            ({"type": "object", "fields": {"lat": "number"}}, {"lng": 1}, ErrorCode.INVALID_PROP_TYPE),
            ({"type": "object", "fields": {"lat": "number"}}, {"lat": "n"}, ErrorCode.INVALID_PROP_TYPE),
        ],
    )
    def test_invalid_values(self, binder, prop, value, code):
        """Invalid values produce the matching error code."""
        definition = _definition([{"name": "p", **prop}])
        result = binder.bind(_instance({"p": value}), definition)
        assert _codes(result) == [code]
        assert "p" not in result.props

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "prop,value",
        [
            ({"type": "string", "pattern": "[a-z]+", "min": 1}, "abc"),
            ({"type": "number", "min": 0, "max": 5}, 5),
            ({"type": "number"}, 2.5),
            ({"type": "color"}, "#3B82F6"),
            ({"type": "color"}, "#3B82F6CC"),
            ({"type": "color"}, "primary"),
            ({"type": "size"}, "lg"),
            ({"type": "spacing"}, 12),
            ({"type": "action"}, "onLogin"),
            ({"type": "array", "itemType": "string"}, ["google", "apple"]),
            ({"type": "object", "fields": {"lat": "number", "lng": "number"}}, {"lat": 1.0, "lng": 2}),
        ],
    )
    def test_valid_values(self, binder, prop, value):
        """Valid values bind explicitly."""
        result = binder.bind(_instance({"p": value}), _definition([{"name": "p", **prop}]))
        assert result.ok, result.errors
        assert result.props["p"].explicit is True

    @pytest.mark.unit
    def test_color_token_checked_against_theme(self, binder):
        """With a theme, color tokens must exist in it."""
        definition = _definition([{"name": "c", "type": "color"}])
        theme = Theme()
        assert binder.bind(_instance({"c": "primary"}), definition, theme).ok
        assert binder.bind(_instance({"c": "colors.accent"}), definition, theme).ok
        result = binder.bind(_instance({"c": "brand"}), definition, theme)
        assert _codes(result) == [ErrorCode.INVALID_PROP_TYPE]

    @pytest.mark.unit
    @pytest.mark.parametrize("prop_type", list(PropType))
    def test_every_type_is_checked(self, binder, prop_type):
        """No prop type lets an arbitrary Python object through."""
        prop = {"name": "p", "type": prop_type.value}
        if prop_type == PropType.ENUM:
            prop["options"] = ["a", "b"]
        result = binder.bind(_instance({"p": object()}), _definition([prop]))
        assert not result.ok
        assert "p" not in result.props


class TestSlots:
    """Tests for slot props."""

    @pytest.mark.unit
    def test_slot_bound_from_slots(self, binder):
        """Slot props read instance.slots."""
        definition = _definition([{"name": "footer", "type": "slot", "required": True}])
        child = CapsuleInstance(id="c", capsule_id="text")
        result = binder.bind(_instance(slots={"footer": [child]}), definition)
        assert result.ok
        assert result.props.value("footer") == [child]

    @pytest.mark.unit
    def test_missing_required_slot(self, binder):
        """An empty required slot is missing."""
        definition = _definition([{"name": "footer", "type": "slot", "required": True}])
        result = binder.bind(_instance(slots={"footer": []}), definition)
        assert _codes(result) == [ErrorCode.MISSING_REQUIRED_PROP]

    @pytest.mark.unit
    def test_unknown_slot_warns(self, binder):
        """Undeclared slot keys warn."""
        child = CapsuleInstance(id="c", capsule_id="text")
        result = binder.bind(_instance(slots={"aside": [child]}), _definition([]))
        assert result.ok
        assert [w.code for w in result.warnings] == [ErrorCode.UNKNOWN_SLOT]


class TestBindTree:
    """Tests for whole-tree binding."""

    @pytest.mark.unit
    def test_bind_tree_isolates_instances(self, binder):
        """One bad instance does not affect its siblings."""
        registry = CapsuleRegistry()
        registry.register(
            {
                "id": "widget",
                "name": "Widget",
                "props": [{"name": "mode", "type": "enum", "options": ["login", "signup"]}],
                "platforms": {"web": {"code": "x"}},
            }
        )
        root = CapsuleInstance(
            id="root",
            capsule_id="widget",
            children=[
                CapsuleInstance(id="bad", capsule_id="widget", props={"mode": "banana"}),
                CapsuleInstance(id="good", capsule_id="widget", props={"mode": "signup"}),
                CapsuleInstance(id="ghost", capsule_id="unknown"),
            ],
        )
        results = binder.bind_tree(root, registry)
        assert list(results) == ["root", "bad", "good"]
        assert _codes(results["bad"]) == [ErrorCode.INVALID_ENUM_VALUE]
        assert results["good"].ok
        assert results["root"].ok

    @pytest.mark.unit
    def test_defaults_record(self, binder):
        """defaults() exposes binder defaults for a definition."""
        definition = _definition(
            [
                {"name": "title", "type": "string", "default": "Hi"},
                {"name": "icon", "type": "icon"},
            ]
        )
        assert dict((k, v.value) for k, v in binder.defaults(definition).items()) == {
            "title": "Hi"
        }
