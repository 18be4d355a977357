"""Prop binding: resolve an instance's raw props against its capsule schema.

The binder is the only place defaults are applied and values are checked.
It produces an immutable BoundProps record that the serializer and the
template engine consume without re-validating. Problems are accumulated,
never short-circuited, so one pass surfaces every issue of an instance.
"""

import logging
import math
import re
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from capsule_forge.errors import (
    Diagnostic,
    ErrorCode,
    PropError,
    Severity,
    invalid_enum_value,
    invalid_prop_type,
    missing_required_prop,
    out_of_range,
    unknown_prop,
)
from capsule_forge.mid import CapsuleInstance, Theme
from capsule_forge.schema import (
    HEX_COLOR_PATTERN,
    SIZE_SCALE,
    SPACING_SCALE,
    CapsuleDefinition,
    PropSpec,
    PropType,
)

logger = logging.getLogger(__name__)

_TOKEN_PATTERN = re.compile(r"(?:colors\.)?[A-Za-z_][A-Za-z0-9_]*")
_HANDLER_PATTERN = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*")


@dataclass(frozen=True)
class BoundValue:
    """A resolved prop value.

    Attributes:
        spec: Declaring PropSpec.
        value: Resolved value (explicit or default).
        explicit: True if the instance supplied the value.
    """

    spec: PropSpec
    value: Any
    explicit: bool


class BoundProps(Mapping[str, BoundValue]):
    """Immutable mapping of prop name to BoundValue, in declaration order."""

    def __init__(self, values: Mapping[str, BoundValue] | None = None):
        self._values = MappingProxyType(dict(values or {}))

    def __getitem__(self, name: str) -> BoundValue:
        return self._values[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        inner = ", ".join(f"{k}={v.value!r}" for k, v in self._values.items())
        return f"BoundProps({inner})"

    def value(self, name: str, default: Any = None) -> Any:
        bound = self._values.get(name)
        return bound.value if bound is not None else default

    def explicit_names(self) -> list[str]:
        return [name for name, bound in self._values.items() if bound.explicit]


@dataclass
class BindingResult:
    """Outcome of binding one instance.

    Attributes:
        instance_id: Bound instance.
        capsule_id: Capsule the instance uses.
        props: Resolved values (only valid ones).
        errors: Binding errors; a non-empty list means the instance must
            not be rendered.
        warnings: Non-fatal findings (unknown props, unknown slots).
    """

    instance_id: str
    capsule_id: str
    props: BoundProps = field(default_factory=BoundProps)
    errors: list[PropError] = field(default_factory=list)
    warnings: list[Diagnostic] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def has_warnings(self) -> bool:
        return len(self.warnings) > 0


def _is_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and math.isfinite(value)


class PropBinder:
    """Resolves and validates instance props against a CapsuleDefinition.

    Per declared PropSpec, in declaration order:
        - absent, optional, no default: skipped
        - absent with a default: default used (explicit=False)
        - absent, required, no default: MissingRequiredProp
        - present: type-checked (InvalidPropType, InvalidEnumValue,
          OutOfRange)

    Slot props read their value from ``instance.slots`` when not given in
    ``instance.props``. Supplied props that are not declared produce an
    UnknownProp warning; slot keys that are not declared slots produce an
    UnknownSlot warning.
    """

    def bind(
        self,
        instance: CapsuleInstance,
        definition: CapsuleDefinition,
        theme: Theme | None = None,
    ) -> BindingResult:
        """Bind one instance.

        Args:
            instance: Instance whose props are resolved.
            definition: Definition of the instance's capsule.
            theme: Theme used to check color tokens (optional).

        Returns:
            BindingResult with bound props and accumulated diagnostics.
        """
        result = BindingResult(instance_id=instance.id, capsule_id=definition.id)
        values: dict[str, BoundValue] = {}

        for spec in definition.prop_specs:
            raw = instance.props.get(spec.name)
            if raw is None and spec.is_slot:
                raw = instance.slots.get(spec.name) or None

            if raw is None:
                if spec.default is not None:
                    values[spec.name] = BoundValue(spec, spec.default, explicit=False)
                elif spec.required:
                    result.errors.append(
                        missing_required_prop(instance.id, definition.id, spec.name)
                    )
                continue

            problems = self._check(spec, raw, theme, instance.id, definition.id)
            if problems:
                result.errors.extend(problems)
            else:
                values[spec.name] = BoundValue(spec, raw, explicit=True)

        declared = set(definition.prop_names())
        for name in instance.props:
            if name not in declared:
                result.warnings.append(unknown_prop(instance.id, definition.id, name))

        slots = set(definition.slot_names())
        for name in instance.slots:
            if name not in slots:
                result.warnings.append(
                    Diagnostic(
                        code=ErrorCode.UNKNOWN_SLOT,
                        message=f"Slot '{name}' is not declared by capsule '{definition.id}'",
                        severity=Severity.WARNING,
                        instance_id=instance.id,
                        capsule_id=definition.id,
                        prop_name=name,
                    )
                )

        result.props = BoundProps(values)
        if result.errors:
            logger.debug(
                f"Instance '{instance.id}' ({definition.id}) has "
                f"{len(result.errors)} binding error(s)"
            )
        return result

    def defaults(self, definition: CapsuleDefinition) -> BoundProps:
        """Bound defaults of a definition, for instance-independent output."""
        return BoundProps(
            {
                spec.name: BoundValue(spec, spec.default, explicit=False)
                for spec in definition.prop_specs
                if spec.default is not None
            }
        )

    def bind_tree(
        self,
        root: CapsuleInstance,
        registry: Any,
        theme: Theme | None = None,
    ) -> dict[str, BindingResult]:
        """Bind every instance of a tree whose capsule is registered.

        Args:
            root: Root instance.
            registry: CapsuleRegistry providing definitions.
            theme: Theme used to check color tokens.

        Returns:
            Instance id -> BindingResult, in pre-order. Instances of
            unknown capsules are omitted.
        """
        results: dict[str, BindingResult] = {}
        for instance in root.iter_tree():
            definition = registry.get(instance.capsule_id)
            if definition is not None:
                results[instance.id] = self.bind(instance, definition, theme)
        return results

    # -------------------------------------------------------------------------
    # Checks
    # -------------------------------------------------------------------------

    def _check(
        self,
        spec: PropSpec,
        value: Any,
        theme: Theme | None,
        instance_id: str,
        capsule_id: str,
    ) -> list[PropError]:
        def type_error(expected: str) -> list[PropError]:
            return [invalid_prop_type(instance_id, capsule_id, spec.name, expected, value)]

        def range_errors(measured: float, what: str) -> list[PropError]:
            if (spec.min is not None and measured < spec.min) or (
                spec.max is not None and measured > spec.max
            ):
                return [
                    out_of_range(
                        instance_id, capsule_id, spec.name, measured, spec.min, spec.max, what
                    )
                ]
            return []

        match spec.type:
            case PropType.STRING | PropType.ICON | PropType.IMAGE:
                if not isinstance(value, str):
                    return type_error("a string")
                if spec.pattern is not None and not re.fullmatch(spec.pattern, value):
                    return type_error(f"a string matching /{spec.pattern}/")
                return range_errors(len(value), "length")

            case PropType.NUMBER:
                if not _is_number(value):
                    return type_error("a finite number")
                return range_errors(value, "value")

            case PropType.BOOLEAN:
                return [] if isinstance(value, bool) else type_error("a boolean")

            case PropType.COLOR:
                return [] if self._is_color(value, theme) else type_error(
                    "a hex color or theme color token"
                )

            case PropType.SIZE | PropType.SPACING:
                scale = SIZE_SCALE if spec.type == PropType.SIZE else SPACING_SCALE
                if isinstance(value, str):
                    if value in scale:
                        return []
                    return type_error(f"a number or one of {', '.join(scale)}")
                if not _is_number(value):
                    return type_error(f"a number or one of {', '.join(scale)}")
                return range_errors(value, "value")

            case PropType.ACTION:
                if isinstance(value, str) and _HANDLER_PATTERN.fullmatch(value):
                    return []
                return type_error("a handler name")

            case PropType.ENUM:
                if isinstance(value, str) and value in (spec.options or ()):
                    return []
                return [
                    invalid_enum_value(
                        instance_id, capsule_id, spec.name, value, list(spec.options or ())
                    )
                ]

            case PropType.ARRAY:
                if not isinstance(value, (list, tuple)):
                    return type_error("an array")
                if spec.item_type is not None:
                    for item in value:
                        if not self._item_ok(item, spec.item_type, theme):
                            return type_error(f"an array of {spec.item_type.value}")
                return range_errors(len(value), "length")

            case PropType.OBJECT:
                if not isinstance(value, dict) or not all(
                    isinstance(k, str) for k in value
                ):
                    return type_error("an object with string keys")
                if spec.fields is not None:
                    for key, item in value.items():
                        field_type = spec.fields.get(key)
                        if field_type is None:
                            return type_error(
                                f"an object with keys {', '.join(spec.fields)}"
                            )
                        if not self._item_ok(item, field_type, theme):
                            return type_error(f"'{key}' to be {field_type.value}")
                return []

            case PropType.SLOT:
                if isinstance(value, list) and all(
                    isinstance(v, CapsuleInstance) for v in value
                ):
                    return []
                return type_error("a list of capsule instances")

        return []

    def _is_color(self, value: Any, theme: Theme | None) -> bool:
        if not isinstance(value, str):
            return False
        if value.startswith("#"):
            return HEX_COLOR_PATTERN.fullmatch(value) is not None
        if not _TOKEN_PATTERN.fullmatch(value):
            return False
        return theme is None or theme.color(value) is not None

    def _item_ok(self, value: Any, prop_type: PropType, theme: Theme | None) -> bool:
        if value is None:
            return True
        match prop_type:
            case PropType.STRING | PropType.ICON | PropType.IMAGE | PropType.ENUM:
                return isinstance(value, str)
            case PropType.NUMBER:
                return _is_number(value)
            case PropType.BOOLEAN:
                return isinstance(value, bool)
            case PropType.COLOR:
                return self._is_color(value, theme)
            case PropType.SIZE:
                return _is_number(value) or (isinstance(value, str) and value in SIZE_SCALE)
            case PropType.SPACING:
                return _is_number(value) or (
                    isinstance(value, str) and value in SPACING_SCALE
                )
            case PropType.ACTION:
                return isinstance(value, str) and bool(_HANDLER_PATTERN.fullmatch(value))
            case PropType.ARRAY:
                return isinstance(value, (list, tuple))
            case PropType.OBJECT:
                return isinstance(value, dict) and all(isinstance(k, str) for k in value)
        return False


__all__ = [
    "BoundValue",
    "BoundProps",
    "BindingResult",
    "PropBinder",
]
