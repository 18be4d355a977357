"""Capsule schema: prop types, prop specs and capsule definitions.

Example usage:
    >>> from capsule_forge.schema import CapsuleDefinition, PropSpec, PropType
    >>> spec = PropSpec(name="text", type=PropType.STRING, required=True)
"""

from .lib import (
    HEX_COLOR_PATTERN,
    PROP_TYPE_ALIASES,
    RADIUS_SCALE,
    SIZE_SCALE,
    SPACING_SCALE,
    CapsuleCategory,
    CapsuleDefinition,
    PlatformTemplate,
    PropSpec,
    PropType,
    export_json_schema,
)

__all__ = [
    # Vocabulary
    "PropType",
    "PROP_TYPE_ALIASES",
    "CapsuleCategory",
    # Scales
    "SIZE_SCALE",
    "SPACING_SCALE",
    "RADIUS_SCALE",
    "HEX_COLOR_PATTERN",
    # Records
    "PropSpec",
    "PlatformTemplate",
    "CapsuleDefinition",
    "export_json_schema",
]
