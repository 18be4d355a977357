"""Unit tests for the capsule schema module."""

import pytest
from pydantic import ValidationError

from capsule_forge.platform import Platform
from capsule_forge.schema import (
    CapsuleCategory,
    CapsuleDefinition,
    PlatformTemplate,
    PropSpec,
    PropType,
    export_json_schema,
)


def _definition(**overrides) -> CapsuleDefinition:
    data = {
        "id": "button",
        "name": "Button",
        "props": [
            {"name": "text", "type": "string", "required": True},
            {"name": "variant", "type": "select", "options": ["primary", "ghost"]},
            {"name": "content", "type": "slot"},
        ],
        "platforms": {
            "web": {"code": "export function {% component %}() {}"},
            "ios": {"code": "struct {% component %}: View {}"},
        },
    }
    data.update(overrides)
    return CapsuleDefinition.model_validate(data)


class TestPropSpec:
    """Tests for PropSpec validation."""

    @pytest.mark.unit
    def test_select_alias_maps_to_enum(self):
        """The legacy 'select' type is read as enum."""
        spec = PropSpec.model_validate(
            {"name": "mode", "type": "select", "options": ["a", "b"]}
        )
        assert spec.type == PropType.ENUM

    @pytest.mark.unit
    def test_enum_requires_options(self):
        """An enum without options is rejected."""
        with pytest.raises(ValidationError):
            PropSpec(name="mode", type=PropType.ENUM)

    @pytest.mark.unit
    def test_enum_default_must_be_option(self):
        """An enum default outside its options is rejected."""
        with pytest.raises(ValidationError):
            PropSpec(
                name="mode", type=PropType.ENUM, options=("a", "b"), default="c"
            )

    @pytest.mark.unit
    def test_min_greater_than_max(self):
        """Inverted bounds are rejected."""
        with pytest.raises(ValidationError):
            PropSpec(name="n", type=PropType.NUMBER, min=10, max=1)

    @pytest.mark.unit
    def test_invalid_pattern(self):
        """A pattern that does not compile is rejected."""
        with pytest.raises(ValidationError):
            PropSpec(name="s", type=PropType.STRING, pattern="([a-z")

    @pytest.mark.unit
    def test_platform_mapping(self):
        """platformMapping overrides the argument name per platform."""
        spec = PropSpec.model_validate(
            {
                "name": "icon",
                "type": "icon",
                "platformMapping": {"ios": "systemImage"},
            }
        )
        assert spec.name_for(Platform.IOS) == "systemImage"
        assert spec.name_for(Platform.ANDROID) == "icon"

    @pytest.mark.unit
    def test_spec_is_frozen(self):
        """PropSpecs are immutable."""
        spec = PropSpec(name="text", type=PropType.STRING)
        with pytest.raises(ValidationError):
            spec.required = True


class TestCapsuleDefinition:
    """Tests for CapsuleDefinition helpers."""

    @pytest.mark.unit
    def test_camel_case_aliases(self):
        """Definitions load from original-style dicts."""
        definition = _definition()
        assert definition.category == CapsuleCategory.UI
        assert definition.prop_names() == ["text", "variant", "content"]
        assert isinstance(definition.platform_templates[Platform.WEB], PlatformTemplate)

    @pytest.mark.unit
    def test_default_file_name_template(self):
        """File names default to the component identifier."""
        template = _definition().platform_templates[Platform.WEB]
        assert template.file_name_template == "{% component %}"

    @pytest.mark.unit
    def test_slot_names(self):
        """Slot-typed props are listed as slots."""
        assert _definition().slot_names() == ["content"]

    @pytest.mark.unit
    def test_desktop_falls_back_to_web(self):
        """Desktop reuses the web template when none is declared."""
        definition = _definition()
        assert definition.template_source(Platform.DESKTOP) == Platform.WEB
        assert definition.template_for(Platform.DESKTOP) is (
            definition.platform_templates[Platform.WEB]
        )
        assert definition.template_for(Platform.ANDROID) is None

    @pytest.mark.unit
    def test_supported_platforms(self):
        """Supported platforms include fallbacks, in Platform order."""
        assert _definition().supported_platforms() == [
            Platform.WEB,
            Platform.IOS,
            Platform.DESKTOP,
        ]

    @pytest.mark.unit
    def test_duplicate_prop_names_rejected(self):
        """A prop declared twice is rejected."""
        with pytest.raises(ValidationError):
            _definition(
                props=[
                    {"name": "text", "type": "string"},
                    {"name": "text", "type": "number"},
                ]
            )

    @pytest.mark.unit
    def test_get_prop(self):
        """Props are looked up by name."""
        definition = _definition()
        assert definition.get_prop("text").required is True
        assert definition.get_prop("missing") is None


class TestSchemaExport:
    """Tests for JSON schema export."""

    @pytest.mark.unit
    def test_export_json_schema(self):
        """Schema describes the definition model."""
        schema = export_json_schema()
        assert schema["title"] == "CapsuleDefinition"
        assert "prop_specs" in schema["properties"]
