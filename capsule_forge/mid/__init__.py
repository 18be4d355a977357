"""Composition model - theme, instance tree and project composition.

Example usage:
    >>> from capsule_forge.mid import CapsuleInstance, ProjectComposition
    >>> root = CapsuleInstance(id="root", capsule_id="card")
    >>> project = ProjectComposition(name="Demo", root=root, targets=["web"])
"""

from .lib import (
    DEFAULT_COLORS,
    TYPE_SCALE_FACTORS,
    BorderRadius,
    CapsuleInstance,
    ProjectComposition,
    SpacingScale,
    Theme,
    ThemeToken,
    TypeScale,
    Typography,
    export_json_schema,
)

__all__ = [
    # Theme
    "SpacingScale",
    "BorderRadius",
    "TypeScale",
    "TYPE_SCALE_FACTORS",
    "DEFAULT_COLORS",
    "ThemeToken",
    "Typography",
    "Theme",
    # Composition
    "CapsuleInstance",
    "ProjectComposition",
    "export_json_schema",
]
