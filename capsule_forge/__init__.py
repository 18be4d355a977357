"""capsule-forge: multi-platform source generation from capsule compositions."""

from capsule_forge.capsules import create_default_registry, load_builtin_capsules
from capsule_forge.errors import Diagnostic, ErrorCode, OrchestratorPrecondition
from capsule_forge.export import (
    CancellationToken,
    CompilationResult,
    CompilationStatus,
    ExportOrchestrator,
)
from capsule_forge.mid import CapsuleInstance, ProjectComposition, Theme
from capsule_forge.platform import Platform
from capsule_forge.registry import CapsuleRegistry
from capsule_forge.schema import CapsuleDefinition, PropSpec, PropType
from capsule_forge.validation import is_valid, validate_composition

__all__ = [
    # Model
    "ProjectComposition",
    "CapsuleInstance",
    "Theme",
    "Platform",
    # Catalog
    "CapsuleDefinition",
    "PropSpec",
    "PropType",
    "CapsuleRegistry",
    "create_default_registry",
    "load_builtin_capsules",
    # Export
    "ExportOrchestrator",
    "CancellationToken",
    "CompilationResult",
    "CompilationStatus",
    # Validation
    "validate_composition",
    "is_valid",
    # Diagnostics
    "Diagnostic",
    "ErrorCode",
    "OrchestratorPrecondition",
]
