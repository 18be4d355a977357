"""Multi-target export orchestration."""

from .lib import (
    CancellationToken,
    CompilationMetadata,
    CompilationResult,
    CompilationStatus,
    ExportOrchestrator,
    ExportSummary,
    OrchestratorState,
    ProgressEvent,
    TargetState,
    summarize,
)

__all__ = [
    "CompilationStatus",
    "TargetState",
    "OrchestratorState",
    "CompilationMetadata",
    "CompilationResult",
    "ProgressEvent",
    "ExportSummary",
    "summarize",
    "CancellationToken",
    "ExportOrchestrator",
]
