"""Composition model: the platform-agnostic description of one project.

A ProjectComposition is the contract between the project editor and the
synthesis engine. It carries the theme, the requested target platforms and
the recursive tree of capsule instances. The engine only reads it.
"""

from collections.abc import Iterator
from enum import Enum
from typing import Any, NamedTuple

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)

from capsule_forge.platform import Platform, parse_platform
from capsule_forge.schema import (
    HEX_COLOR_PATTERN,
    RADIUS_SCALE,
    SPACING_SCALE,
    PropType,
)


class SpacingScale(str, Enum):
    """Global spacing density."""

    COMPACT = "compact"
    NORMAL = "normal"
    RELAXED = "relaxed"


class BorderRadius(str, Enum):
    """Global corner radius scale."""

    NONE = "none"
    SM = "sm"
    MD = "md"
    LG = "lg"
    FULL = "full"


class TypeScale(str, Enum):
    """Global typography scale."""

    COMPACT = "compact"
    NORMAL = "normal"
    LARGE = "large"


TYPE_SCALE_FACTORS: dict[TypeScale, float] = {
    TypeScale.COMPACT: 0.875,
    TypeScale.NORMAL: 1.0,
    TypeScale.LARGE: 1.125,
}

DEFAULT_COLORS: dict[str, str] = {
    "primary": "#3B82F6",
    "secondary": "#8B5CF6",
    "accent": "#F59E0B",
    "background": "#FFFFFF",
    "surface": "#F9FAFB",
    "error": "#EF4444",
    "success": "#10B981",
    "warning": "#F59E0B",
    "textPrimary": "#111827",
    "textSecondary": "#6B7280",
    "textDisabled": "#9CA3AF",
}


class ThemeToken(NamedTuple):
    """A resolved theme value with its prop type."""

    type: PropType
    value: Any


class Typography(BaseModel):
    """Font configuration.

    Attributes:
        font_family: Body font family.
        heading_font: Heading font family (defaults to the body font).
        mono_font: Monospace font family.
        scale: Global type scale.
    """

    model_config = ConfigDict(populate_by_name=True)

    font_family: str = Field(
        default="Inter",
        validation_alias=AliasChoices("font_family", "fontFamily"),
    )
    heading_font: str | None = Field(
        default=None,
        validation_alias=AliasChoices("heading_font", "headingFont"),
    )
    mono_font: str = Field(
        default="JetBrains Mono",
        validation_alias=AliasChoices("mono_font", "monoFont"),
    )
    scale: TypeScale = TypeScale.NORMAL


class Theme(BaseModel):
    """Shared design tokens applied across every target.

    Attributes:
        name: Theme name.
        colors: Named hex colors. Nested ``text`` groups are flattened to
            ``textPrimary``, ``textSecondary``, ...
        typography: Font configuration.
        spacing: Global spacing density.
        border_radius: Global corner radius.
        shadows: Whether elevation shadows are rendered.
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str = "default"
    colors: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_COLORS))
    typography: Typography = Field(default_factory=Typography)
    spacing: SpacingScale = SpacingScale.NORMAL
    border_radius: BorderRadius = Field(
        default=BorderRadius.MD,
        validation_alias=AliasChoices("border_radius", "borderRadius"),
    )
    shadows: bool = True

    @field_validator("colors", mode="before")
    @classmethod
    def _flatten_colors(cls, value: Any) -> Any:
        if not isinstance(value, dict):
            return value
        flat = dict(DEFAULT_COLORS)
        for key, color in value.items():
            if isinstance(color, dict):
                for sub, sub_color in color.items():
                    flat[f"{key}{sub[:1].upper()}{sub[1:]}"] = sub_color
            else:
                flat[key] = color
        return flat

    @field_validator("colors")
    @classmethod
    def _check_hex(cls, value: dict[str, str]) -> dict[str, str]:
        for key, color in value.items():
            if not HEX_COLOR_PATTERN.fullmatch(color):
                raise ValueError(f"theme color '{key}' is not a hex color: {color!r}")
        return value

    def color(self, name: str) -> str | None:
        """Get a theme color by token name (``primary`` or ``colors.primary``)."""
        return self.colors.get(name.removeprefix("colors."))

    def tokens(self) -> dict[str, ThemeToken]:
        """Flatten the theme into token path -> typed value.

        Paths are what templates reference after ``theme.``:
        ``colors.primary``, ``typography.fontFamily``, ``spacing``,
        ``radius``, ``shadows``, ``name``.
        """
        typography = self.typography
        result: dict[str, ThemeToken] = {
            "name": ThemeToken(PropType.STRING, self.name),
        }
        for key, color in self.colors.items():
            result[f"colors.{key}"] = ThemeToken(PropType.COLOR, color)
        result["typography.fontFamily"] = ThemeToken(
            PropType.STRING, typography.font_family
        )
        result["typography.headingFont"] = ThemeToken(
            PropType.STRING, typography.heading_font or typography.font_family
        )
        result["typography.monoFont"] = ThemeToken(
            PropType.STRING, typography.mono_font
        )
        result["typography.scale"] = ThemeToken(
            PropType.NUMBER, TYPE_SCALE_FACTORS[typography.scale]
        )
        result["spacing"] = ThemeToken(
            PropType.NUMBER, SPACING_SCALE[self.spacing.value]
        )
        result["radius"] = ThemeToken(
            PropType.NUMBER, RADIUS_SCALE[self.border_radius.value]
        )
        result["shadows"] = ThemeToken(PropType.BOOLEAN, self.shadows)
        return result


class CapsuleInstance(BaseModel):
    """Recursive node of a composition tree.

    Attributes:
        id: Unique identifier within the composition.
        capsule_id: Registry key of the capsule definition.
        props: Raw prop values as authored in the editor.
        children: Nested child instances.
        slots: Named slot contents.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="Unique identifier for the instance")
    capsule_id: str = Field(
        ...,
        validation_alias=AliasChoices("capsule_id", "capsuleId"),
        description="Registry key of the capsule definition",
    )
    props: dict[str, Any] = Field(default_factory=dict)
    children: list["CapsuleInstance"] = Field(default_factory=list)
    slots: dict[str, list["CapsuleInstance"]] = Field(default_factory=dict)

    def iter_tree(self) -> Iterator["CapsuleInstance"]:
        """Yield this instance and its descendants in pre-order.

        Order: the instance itself, its children, then each slot's contents
        in slot insertion order.
        """
        yield self
        for child in self.children:
            yield from child.iter_tree()
        for contents in self.slots.values():
            for child in contents:
                yield from child.iter_tree()

    def count(self) -> int:
        """Number of instances in this subtree."""
        return sum(1 for _ in self.iter_tree())


class ProjectComposition(BaseModel):
    """Complete description of one project handed to the exporter.

    Attributes:
        name: Project name; source of the app identifier.
        description: Free-text description.
        version: Project version string.
        theme: Shared design tokens.
        target_platforms: Requested targets, deduplicated in order.
        root: Root of the instance tree.
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str
    description: str = ""
    version: str = "1.0.0"
    theme: Theme = Field(default_factory=Theme)
    target_platforms: list[Platform] = Field(
        default_factory=list,
        validation_alias=AliasChoices(
            "target_platforms", "targetPlatforms", "targets"
        ),
    )
    root: CapsuleInstance

    @field_validator("target_platforms", mode="before")
    @classmethod
    def _normalize_targets(cls, value: Any) -> Any:
        if not isinstance(value, (list, tuple, set)):
            return value
        result: list[Any] = []
        for raw in value:
            platform = parse_platform(raw) if isinstance(raw, str) else raw
            item = platform if platform is not None else raw
            if item not in result:
                result.append(item)
        return result

    def iter_instances(self) -> Iterator[CapsuleInstance]:
        """Yield every instance in pre-order."""
        return self.root.iter_tree()

    def capsule_ids(self) -> list[str]:
        """Distinct capsule ids in first-seen pre-order."""
        seen: dict[str, None] = {}
        for instance in self.iter_instances():
            seen.setdefault(instance.capsule_id, None)
        return list(seen)


def export_json_schema() -> dict[str, Any]:
    """Export the ProjectComposition JSON schema."""
    return ProjectComposition.model_json_schema()


__all__ = [
    "SpacingScale",
    "BorderRadius",
    "TypeScale",
    "TYPE_SCALE_FACTORS",
    "DEFAULT_COLORS",
    "ThemeToken",
    "Typography",
    "Theme",
    "CapsuleInstance",
    "ProjectComposition",
    "export_json_schema",
]
