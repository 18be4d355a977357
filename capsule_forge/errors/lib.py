"""Diagnostics and exceptions for capsule synthesis.

Instance-scoped problems (bad props, missing templates, identifier
fallbacks) are accumulated as Diagnostic records and attached to the
CompilationResult of the target they occurred in. Only boundary failures
raise: malformed templates at parse time, orchestrator preconditions, and
cancellation unwinding.
"""

from dataclasses import asdict, dataclass, replace
from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Machine-readable diagnostic classification."""

    # PropBinder
    MISSING_REQUIRED_PROP = "MissingRequiredProp"
    INVALID_PROP_TYPE = "InvalidPropType"
    INVALID_ENUM_VALUE = "InvalidEnumValue"
    OUT_OF_RANGE = "OutOfRange"
    UNKNOWN_PROP = "UnknownProp"

    # Assembly
    CAPABILITY_ERROR = "CapabilityError"
    IDENTIFIER_COLLISION = "IdentifierCollisionError"
    TEMPLATE_SYNTAX_ERROR = "TemplateSyntaxError"
    UNRESOLVED_THEME_TOKEN = "UnresolvedThemeToken"
    UNKNOWN_SLOT = "UnknownSlot"

    # Composition well-formedness
    INVALID_COMPOSITION = "InvalidComposition"

    # Unexpected failure inside a target task
    INTERNAL_ERROR = "InternalError"


class Severity(str, Enum):
    """Diagnostic severity."""

    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class Diagnostic:
    """A single problem found while binding, rendering or assembling.

    Attributes:
        code: Error classification.
        message: Human-readable description.
        severity: Whether this is an error or a warning.
        instance_id: Instance the problem belongs to, if any.
        capsule_id: Capsule definition involved, if any.
        prop_name: Prop involved, if any.
        file: Generated file path involved, if any.
        platform: Target platform value, if known.
        line: 1-based template line (template errors only).
        column: 1-based template column (template errors only).
    """

    code: ErrorCode
    message: str
    severity: Severity = Severity.ERROR
    instance_id: str | None = None
    capsule_id: str | None = None
    prop_name: str | None = None
    file: str | None = None
    platform: str | None = None
    line: int | None = None
    column: int | None = None

    @property
    def is_error(self) -> bool:
        return self.severity == Severity.ERROR

    def with_context(self, **changes: Any) -> "Diagnostic":
        """Return a copy with additional context fields set."""
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict, dropping empty fields."""
        data = asdict(self)
        data["code"] = self.code.value
        data["severity"] = self.severity.value
        return {k: v for k, v in data.items() if v is not None}

    def __str__(self) -> str:
        where = self.instance_id or self.capsule_id or self.file or "-"
        return f"[{self.code.value}] {where}: {self.message}"


# Binder diagnostics are plain Diagnostics; the alias names the role.
PropError = Diagnostic


# =============================================================================
# Diagnostic Constructors
# =============================================================================


def missing_required_prop(
    instance_id: str, capsule_id: str, prop_name: str
) -> Diagnostic:
    return Diagnostic(
        code=ErrorCode.MISSING_REQUIRED_PROP,
        message=f"Required prop '{prop_name}' has no value and no default",
        instance_id=instance_id,
        capsule_id=capsule_id,
        prop_name=prop_name,
    )


def invalid_prop_type(
    instance_id: str,
    capsule_id: str,
    prop_name: str,
    expected: str,
    value: Any,
) -> Diagnostic:
    return Diagnostic(
        code=ErrorCode.INVALID_PROP_TYPE,
        message=(
            f"Prop '{prop_name}' expects {expected}, "
            f"got {type(value).__name__} {value!r}"
        ),
        instance_id=instance_id,
        capsule_id=capsule_id,
        prop_name=prop_name,
    )


def invalid_enum_value(
    instance_id: str,
    capsule_id: str,
    prop_name: str,
    value: Any,
    options: list[str],
) -> Diagnostic:
    return Diagnostic(
        code=ErrorCode.INVALID_ENUM_VALUE,
        message=(
            f"Prop '{prop_name}' value {value!r} is not one of "
            f"{', '.join(options)}"
        ),
        instance_id=instance_id,
        capsule_id=capsule_id,
        prop_name=prop_name,
    )


def out_of_range(
    instance_id: str,
    capsule_id: str,
    prop_name: str,
    measured: float,
    minimum: float | None,
    maximum: float | None,
    what: str = "value",
) -> Diagnostic:
    bounds = f"[{'-inf' if minimum is None else minimum}, "
    bounds += f"{'inf' if maximum is None else maximum}]"
    return Diagnostic(
        code=ErrorCode.OUT_OF_RANGE,
        message=f"Prop '{prop_name}' {what} {measured} outside {bounds}",
        instance_id=instance_id,
        capsule_id=capsule_id,
        prop_name=prop_name,
    )


def unknown_prop(instance_id: str, capsule_id: str, prop_name: str) -> Diagnostic:
    return Diagnostic(
        code=ErrorCode.UNKNOWN_PROP,
        message=f"Prop '{prop_name}' is not declared by capsule '{capsule_id}'",
        severity=Severity.WARNING,
        instance_id=instance_id,
        capsule_id=capsule_id,
        prop_name=prop_name,
    )


def capability_error(
    instance_id: str | None, capsule_id: str, platform: str, reason: str
) -> Diagnostic:
    return Diagnostic(
        code=ErrorCode.CAPABILITY_ERROR,
        message=reason,
        instance_id=instance_id,
        capsule_id=capsule_id,
        platform=platform,
    )


# =============================================================================
# Exceptions
# =============================================================================


class CapsuleForgeError(Exception):
    """Base class for capsule-forge exceptions."""


class TemplateSyntaxError(CapsuleForgeError):
    """Malformed placeholder syntax in a platform template."""

    def __init__(self, message: str, line: int, column: int):
        super().__init__(f"{message} (line {line}, column {column})")
        self.message = message
        self.line = line
        self.column = column

    def to_diagnostic(
        self,
        capsule_id: str | None = None,
        platform: str | None = None,
        file: str | None = None,
    ) -> Diagnostic:
        """Convert to a diagnostic attached to a capsule file."""
        return Diagnostic(
            code=ErrorCode.TEMPLATE_SYNTAX_ERROR,
            message=self.message,
            capsule_id=capsule_id,
            platform=platform,
            file=file,
            line=self.line,
            column=self.column,
        )


class OrchestratorPrecondition(CapsuleForgeError):
    """Export request rejected before any generation started."""

    def __init__(self, message: str, problems: list[Diagnostic] | None = None):
        super().__init__(message)
        self.problems = list(problems or [])


class ExportCancelled(CapsuleForgeError):
    """Raised inside a target task to unwind a cancelled assembly."""

    def __init__(self, platform: str | None = None):
        super().__init__(f"Export cancelled for {platform or 'target'}")
        self.platform = platform


class SerializationError(CapsuleForgeError, ValueError):
    """A value cannot be expressed as a literal in the target dialect."""


__all__ = [
    "ErrorCode",
    "Severity",
    "Diagnostic",
    "PropError",
    "missing_required_prop",
    "invalid_prop_type",
    "invalid_enum_value",
    "out_of_range",
    "unknown_prop",
    "capability_error",
    "CapsuleForgeError",
    "TemplateSyntaxError",
    "OrchestratorPrecondition",
    "ExportCancelled",
    "SerializationError",
]
