"""Authoritative schema for capsule definitions.

A capsule is a reusable UI component: an id, a typed prop schema, and one
source template per supported platform. This module holds the prop type
vocabulary, the keyword scales shared by binding and serialization, and the
immutable definition records the registry stores.
"""

import math
import re
from enum import Enum
from typing import Any

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

from capsule_forge.platform import PLATFORM_REGISTRY, Platform


class PropType(str, Enum):
    """Platform-agnostic prop types."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    COLOR = "color"
    SIZE = "size"
    SPACING = "spacing"
    ICON = "icon"
    IMAGE = "image"
    ACTION = "action"
    ARRAY = "array"
    OBJECT = "object"
    ENUM = "enum"
    SLOT = "slot"


# Legacy spelling accepted when loading definitions from dicts
PROP_TYPE_ALIASES: dict[str, PropType] = {"select": PropType.ENUM}


class CapsuleCategory(str, Enum):
    """High-level capsule groupings."""

    UI = "ui"
    LAYOUT = "layout"
    NAVIGATION = "navigation"
    FORMS = "forms"
    DATA = "data"
    MEDIA = "media"
    FEEDBACK = "feedback"
    FEATURE = "feature"


# =============================================================================
# Keyword Scales
# =============================================================================

SIZE_SCALE: dict[str, int] = {"xs": 12, "sm": 14, "md": 16, "lg": 20, "xl": 24}
SPACING_SCALE: dict[str, int] = {"compact": 8, "normal": 16, "relaxed": 24}
RADIUS_SCALE: dict[str, int] = {"none": 0, "sm": 4, "md": 8, "lg": 12, "full": 9999}

HEX_COLOR_PATTERN = re.compile(r"#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})")


def _coerce_prop_type(value: Any) -> Any:
    if isinstance(value, str) and not isinstance(value, PropType):
        return PROP_TYPE_ALIASES.get(value.lower(), value.lower())
    return value


# =============================================================================
# Definition Records
# =============================================================================


class PropSpec(BaseModel):
    """Declared prop of a capsule.

    Attributes:
        name: Prop name as used in compositions.
        type: Prop type.
        required: Whether a value (explicit or default) must resolve.
        default: Value used when the instance supplies none.
        options: Allowed values (enum only).
        min: Lower bound (numbers, string length, array length).
        max: Upper bound (numbers, string length, array length).
        pattern: Regular expression a string value must fully match.
        description: Human-readable description.
        item_type: Element type for arrays.
        fields: Allowed keys and their types for objects.
        platform_names: Per-platform argument name override.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(..., min_length=1)
    type: PropType
    required: bool = False
    default: Any = None
    options: tuple[str, ...] | None = None
    min: float | None = None
    max: float | None = None
    pattern: str | None = None
    description: str = ""
    item_type: PropType | None = Field(
        default=None, validation_alias=AliasChoices("item_type", "itemType")
    )
    fields: dict[str, PropType] | None = None
    platform_names: dict[Platform, str] = Field(
        default_factory=dict,
        validation_alias=AliasChoices(
            "platform_names", "platformNames", "platformMapping"
        ),
    )

    @field_validator("type", "item_type", mode="before")
    @classmethod
    def _accept_aliases(cls, value: Any) -> Any:
        return _coerce_prop_type(value)

    @field_validator("fields", mode="before")
    @classmethod
    def _accept_field_aliases(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return {k: _coerce_prop_type(v) for k, v in value.items()}
        return value

    @model_validator(mode="after")
    def _check_consistency(self) -> "PropSpec":
        if self.type == PropType.ENUM:
            if not self.options:
                raise ValueError(f"enum prop '{self.name}' declares no options")
            if self.default is not None and self.default not in self.options:
                raise ValueError(
                    f"default {self.default!r} of prop '{self.name}' "
                    "is not one of its options"
                )
        if self.min is not None and self.max is not None and self.min > self.max:
            raise ValueError(
                f"prop '{self.name}' has min {self.min} greater than max {self.max}"
            )
        for bound in (self.min, self.max):
            if bound is not None and not math.isfinite(bound):
                raise ValueError(f"prop '{self.name}' bounds must be finite")
        if self.pattern is not None:
            try:
                re.compile(self.pattern)
            except re.error as e:
                raise ValueError(f"prop '{self.name}' pattern is invalid: {e}")
        return self

    @property
    def is_slot(self) -> bool:
        return self.type == PropType.SLOT

    def name_for(self, platform: Platform) -> str:
        """Argument name used on a platform (override or declared name)."""
        return self.platform_names.get(platform, self.name)


class PlatformTemplate(BaseModel):
    """Source template of a capsule for one platform.

    Attributes:
        raw_source: Component file body with ``{% ... %}`` placeholders.
        file_name_template: Template for the component file stem.
        declared_dependencies: Packages the component file needs.
        usage_template: Optional call-site template rendered per instance.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    raw_source: str = Field(
        ..., validation_alias=AliasChoices("raw_source", "rawSource", "code")
    )
    file_name_template: str = Field(
        default="{% component %}",
        validation_alias=AliasChoices("file_name_template", "fileNameTemplate"),
    )
    declared_dependencies: tuple[str, ...] = Field(
        default=(),
        validation_alias=AliasChoices(
            "declared_dependencies", "declaredDependencies", "dependencies"
        ),
    )
    usage_template: str | None = Field(
        default=None,
        validation_alias=AliasChoices("usage_template", "usageTemplate"),
    )


class CapsuleDefinition(BaseModel):
    """Immutable capsule definition stored in the registry.

    Attributes:
        id: Unique registry key.
        name: Display name; also the source of the component identifier.
        description: Human-readable description.
        category: Catalog grouping.
        tags: Search tags.
        version: Definition version string.
        prop_specs: Declared props in declaration order.
        platform_templates: Source template per supported platform.
        accepts_children: Whether instances may nest child capsules.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    description: str = ""
    category: CapsuleCategory = CapsuleCategory.UI
    tags: tuple[str, ...] = ()
    version: str = "1.0.0"
    prop_specs: tuple[PropSpec, ...] = Field(
        default=(),
        validation_alias=AliasChoices("prop_specs", "propSpecs", "props"),
    )
    platform_templates: dict[Platform, PlatformTemplate] = Field(
        default_factory=dict,
        validation_alias=AliasChoices(
            "platform_templates", "platformTemplates", "platforms"
        ),
    )
    accepts_children: bool = Field(
        default=False,
        validation_alias=AliasChoices("accepts_children", "acceptsChildren", "children"),
    )

    @model_validator(mode="after")
    def _check_unique_props(self) -> "CapsuleDefinition":
        seen: set[str] = set()
        for spec in self.prop_specs:
            if spec.name in seen:
                raise ValueError(
                    f"capsule '{self.id}' declares prop '{spec.name}' twice"
                )
            seen.add(spec.name)
        return self

    def get_prop(self, name: str) -> PropSpec | None:
        """Get a declared prop by name."""
        for spec in self.prop_specs:
            if spec.name == name:
                return spec
        return None

    def prop_names(self) -> list[str]:
        """Declared prop names in declaration order."""
        return [spec.name for spec in self.prop_specs]

    def slot_names(self) -> list[str]:
        """Names of slot-typed props in declaration order."""
        return [spec.name for spec in self.prop_specs if spec.is_slot]

    def required_props(self) -> list[PropSpec]:
        return [spec for spec in self.prop_specs if spec.required]

    def template_source(self, platform: Platform) -> Platform | None:
        """Platform whose template serves the given platform, if any.

        A platform without its own template borrows the template of its
        configured fallback (desktop reuses web).
        """
        platform = Platform(platform)
        if platform in self.platform_templates:
            return platform
        fallback = PLATFORM_REGISTRY[platform].template_fallback
        if fallback is not None and fallback in self.platform_templates:
            return fallback
        return None

    def template_for(self, platform: Platform) -> PlatformTemplate | None:
        """Template used to emit this capsule on a platform, if any."""
        source = self.template_source(platform)
        return self.platform_templates[source] if source is not None else None

    def supported_platforms(self) -> list[Platform]:
        """Platforms this capsule can render on, in Platform order."""
        return [p for p in Platform if self.template_source(p) is not None]


def export_json_schema() -> dict[str, Any]:
    """Export the CapsuleDefinition JSON schema."""
    return CapsuleDefinition.model_json_schema()


__all__ = [
    "PropType",
    "PROP_TYPE_ALIASES",
    "CapsuleCategory",
    "SIZE_SCALE",
    "SPACING_SCALE",
    "RADIUS_SCALE",
    "HEX_COLOR_PATTERN",
    "PropSpec",
    "PlatformTemplate",
    "CapsuleDefinition",
    "export_json_schema",
]
