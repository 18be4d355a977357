"""Diagnostic records and exception types."""

from .lib import (
    CapsuleForgeError,
    Diagnostic,
    ErrorCode,
    ExportCancelled,
    OrchestratorPrecondition,
    PropError,
    SerializationError,
    Severity,
    TemplateSyntaxError,
    capability_error,
    invalid_enum_value,
    invalid_prop_type,
    missing_required_prop,
    out_of_range,
    unknown_prop,
)

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
