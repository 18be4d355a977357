"""Multi-target export orchestration.

One task per requested platform runs the FileTreeAssembler against the
shared, read-only registry and composition. Every task produces exactly one
CompilationResult; an exception inside one target never affects another.

Example:
    >>> orchestrator = ExportOrchestrator(create_default_registry())
    >>> results = orchestrator.export_project(project, targets=["web", "ios"])
    >>> summarize(results).successful
    2
"""

import logging
import threading
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from capsule_forge.assembler import assemble
from capsule_forge.config import (
    get_app_package,
    get_default_targets,
    get_max_workers,
    get_render_workers,
)
from capsule_forge.errors import (
    Diagnostic,
    ErrorCode,
    ExportCancelled,
    OrchestratorPrecondition,
)
from capsule_forge.mid import ProjectComposition
from capsule_forge.platform import Platform, parse_platform
from capsule_forge.providers import GeneratedFile
from capsule_forge.registry import CapsuleRegistry
from capsule_forge.validation import validate_composition

logger = logging.getLogger(__name__)


# =============================================================================
# States
# =============================================================================


class CompilationStatus(str, Enum):
    """Terminal status of one target."""

    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


class TargetState(str, Enum):
    """Lifecycle of one target task."""

    IDLE = "idle"
    VALIDATING = "validating"
    GENERATING = "generating"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


class OrchestratorState(str, Enum):
    """Lifecycle of one export call."""

    IDLE = "idle"
    VALIDATING = "validating"
    GENERATING = "generating"
    ALL_DONE = "all_done"
    CANCELLED = "cancelled"


_TERMINAL_TARGET_STATE = {
    CompilationStatus.COMPLETED: TargetState.COMPLETED,
    CompilationStatus.FAILED: TargetState.FAILED,
    CompilationStatus.CANCELLED: TargetState.CANCELLED,
}


# =============================================================================
# Results
# =============================================================================


@dataclass
class CompilationMetadata:
    """Aggregate facts about one target's output.

    Attributes:
        capsule_count: Distinct capsules used.
        total_files: Number of generated files.
        total_size: Total UTF-8 bytes of generated files.
        compiled_at: ISO-8601 UTC timestamp of completion.
        dependencies: Packages the generated project needs.
    """

    capsule_count: int = 0
    total_files: int = 0
    total_size: int = 0
    compiled_at: str = ""
    dependencies: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "capsule_count": self.capsule_count,
            "total_files": self.total_files,
            "total_size": self.total_size,
            "compiled_at": self.compiled_at,
            "dependencies": list(self.dependencies),
        }


@dataclass
class CompilationResult:
    """Output of one target.

    Attributes:
        platform: Target platform.
        status: completed, failed or cancelled.
        files: Generated files (empty when cancelled).
        errors: Error diagnostics.
        warnings: Warning diagnostics.
        metadata: Aggregate facts.
    """

    platform: Platform
    status: CompilationStatus
    files: list[GeneratedFile] = field(default_factory=list)
    errors: list[Diagnostic] = field(default_factory=list)
    warnings: list[Diagnostic] = field(default_factory=list)
    metadata: CompilationMetadata = field(default_factory=CompilationMetadata)

    @property
    def success(self) -> bool:
        return self.status == CompilationStatus.COMPLETED

    @property
    def cancelled(self) -> bool:
        return self.status == CompilationStatus.CANCELLED

    @property
    def has_errors(self) -> bool:
        return len(self.errors) > 0

    @property
    def has_warnings(self) -> bool:
        return len(self.warnings) > 0

    def get_file(self, path: str) -> GeneratedFile | None:
        return next((f for f in self.files if f.path == path), None)

    def to_dict(self) -> dict[str, Any]:
        return {
            "platform": self.platform.value,
            "status": self.status.value,
            "success": self.success,
            "files": [f.to_dict() for f in self.files],
            "errors": [e.to_dict() for e in self.errors],
            "warnings": [w.to_dict() for w in self.warnings],
            "metadata": self.metadata.to_dict(),
        }


@dataclass(frozen=True)
class ProgressEvent:
    """Component-file progress of one target."""

    platform: Platform
    emitted: int
    total: int
    percent: float


@dataclass(frozen=True)
class ExportSummary:
    """Counts over the results of one export call."""

    total: int
    successful: int
    failed: int
    cancelled: int

    @property
    def all_successful(self) -> bool:
        return self.total > 0 and self.successful == self.total

    def __str__(self) -> str:
        text = f"{self.successful} of {self.total} platforms exported cleanly"
        if self.cancelled:
            text += f", {self.cancelled} cancelled"
        return text


def summarize(results: Iterable[CompilationResult]) -> ExportSummary:
    """Count successful, failed and cancelled results."""
    results = list(results)
    return ExportSummary(
        total=len(results),
        successful=sum(1 for r in results if r.status == CompilationStatus.COMPLETED),
        failed=sum(1 for r in results if r.status == CompilationStatus.FAILED),
        cancelled=sum(1 for r in results if r.status == CompilationStatus.CANCELLED),
    )


# =============================================================================
# Cancellation
# =============================================================================


class CancellationToken:
    """Cooperative cancellation flag shared with running targets."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    def is_set(self) -> bool:
        return self._event.is_set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


# =============================================================================
# Orchestrator
# =============================================================================


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class ExportOrchestrator:
    """Runs one assembly task per target platform.

    Args:
        registry: Capsule definitions shared by all targets.
        max_workers: Parallel target tasks (1 runs targets in order).
        render_workers: Parallel component renders inside a target.
        app_package: Base package of generated mobile apps.
    """

    def __init__(
        self,
        registry: CapsuleRegistry,
        max_workers: int | None = None,
        render_workers: int | None = None,
        app_package: str | None = None,
    ):
        self.registry = registry
        self.max_workers = get_max_workers(max_workers)
        self.render_workers = get_render_workers(render_workers)
        self.app_package = get_app_package(app_package)
        self._lock = threading.Lock()
        self._state = OrchestratorState.IDLE
        self._target_states: dict[Platform, TargetState] = {}

    @property
    def state(self) -> OrchestratorState:
        with self._lock:
            return self._state

    @property
    def target_states(self) -> dict[Platform, TargetState]:
        with self._lock:
            return dict(self._target_states)

    def _set_state(self, state: OrchestratorState) -> None:
        with self._lock:
            self._state = state

    def _set_target_state(self, platform: Platform, state: TargetState) -> None:
        with self._lock:
            self._target_states[platform] = state

    # -------------------------------------------------------------------------
    # Preconditions
    # -------------------------------------------------------------------------

    def _resolve_targets(
        self,
        composition: ProjectComposition,
        targets: Iterable[Platform | str] | None,
    ) -> list[Platform]:
        if targets is None:
            requested: list[Any] = list(composition.target_platforms)
            if not requested:
                requested = get_default_targets()
        else:
            requested = list(targets)

        if not requested:
            raise OrchestratorPrecondition("No target platforms requested")

        resolved: list[Platform] = []
        unknown: list[str] = []
        for target in requested:
            if isinstance(target, Platform):
                platform = target
            else:
                platform = parse_platform(str(target))
            if platform is None:
                unknown.append(str(target))
            elif platform not in resolved:
                resolved.append(platform)
        if unknown:
            raise OrchestratorPrecondition(
                f"Unknown target platform(s): {', '.join(unknown)}. "
                f"Valid: {', '.join(p.value for p in Platform)}"
            )
        return resolved

    # -------------------------------------------------------------------------
    # Export
    # -------------------------------------------------------------------------

    def export_project(
        self,
        composition: ProjectComposition,
        targets: Iterable[Platform | str] | None = None,
        cancel: CancellationToken | None = None,
        on_progress: Callable[[ProgressEvent], None] | None = None,
        on_target_done: Callable[[CompilationResult], None] | None = None,
    ) -> list[CompilationResult]:
        """Export a composition to every requested target.

        Args:
            composition: Project to export.
            targets: Platforms or platform names; defaults to the
                composition's targets, then CAPSULE_FORGE_DEFAULT_TARGETS.
            cancel: Checked between targets and between component files.
            on_progress: Receives a ProgressEvent per emitted component file.
            on_target_done: Receives each result as its target finishes.

        Returns:
            One CompilationResult per target, in requested order.

        Raises:
            OrchestratorPrecondition: If no valid targets are requested or
                the composition is malformed. No result is produced.
        """
        self._set_state(OrchestratorState.VALIDATING)
        try:
            platforms = self._resolve_targets(composition, targets)
            report = validate_composition(composition, self.registry)
            if not report.ok:
                raise OrchestratorPrecondition(
                    f"Composition '{composition.name}' is malformed: "
                    + "; ".join(e.message for e in report.errors),
                    report.errors,
                )
        except OrchestratorPrecondition:
            self._set_state(OrchestratorState.IDLE)
            raise

        with self._lock:
            self._target_states = {p: TargetState.IDLE for p in platforms}
            self._state = OrchestratorState.GENERATING

        def run(platform: Platform) -> CompilationResult:
            result = self._run_target(
                composition, platform, report.warnings, cancel, on_progress
            )
            if on_target_done is not None:
                on_target_done(result)
            return result

        workers = min(self.max_workers, len(platforms))
        if workers <= 1:
            results = [run(p) for p in platforms]
        else:
            by_platform: dict[Platform, CompilationResult] = {}
            with ThreadPoolExecutor(max_workers=workers) as executor:
                future_to_platform = {executor.submit(run, p): p for p in platforms}
                for future in as_completed(future_to_platform):
                    by_platform[future_to_platform[future]] = future.result()
            results = [by_platform[p] for p in platforms]

        if any(r.cancelled for r in results):
            self._set_state(OrchestratorState.CANCELLED)
        else:
            self._set_state(OrchestratorState.ALL_DONE)
        summary = summarize(results)
        logger.info(f"Export of '{composition.name}': {summary}")
        return results

    def _run_target(
        self,
        composition: ProjectComposition,
        platform: Platform,
        shared_warnings: list[Diagnostic],
        cancel: CancellationToken | None,
        on_progress: Callable[[ProgressEvent], None] | None,
    ) -> CompilationResult:
        """Run one target; never raises."""
        if cancel is not None and cancel.is_set():
            return self._cancelled(platform)

        def progress(emitted: int, total: int) -> None:
            if on_progress is not None:
                percent = round(100.0 * emitted / total, 1) if total else 100.0
                on_progress(ProgressEvent(platform, emitted, total, percent))

        self._set_target_state(platform, TargetState.VALIDATING)
        logger.info(f"[{platform.value}] export started")
        try:
            self._set_target_state(platform, TargetState.GENERATING)
            output = assemble(
                composition,
                platform,
                self.registry,
                cancel=cancel,
                progress=progress,
                render_workers=self.render_workers,
                app_package=self.app_package,
            )
        except ExportCancelled:
            return self._cancelled(platform)
        except Exception as e:
            logger.exception(f"[{platform.value}] export failed unexpectedly")
            result = CompilationResult(
                platform=platform,
                status=CompilationStatus.FAILED,
                errors=[
                    Diagnostic(
                        code=ErrorCode.INTERNAL_ERROR,
                        message=f"{type(e).__name__}: {e}",
                        platform=platform.value,
                    )
                ],
                metadata=CompilationMetadata(compiled_at=_now()),
            )
            return self._finish(result)

        status = CompilationStatus.COMPLETED
        if output.failed:
            status = CompilationStatus.FAILED
        result = CompilationResult(
            platform=platform,
            status=status,
            files=output.files,
            errors=output.errors,
            warnings=[
                *(w.with_context(platform=platform.value) for w in shared_warnings),
                *output.warnings,
            ],
            metadata=CompilationMetadata(
                capsule_count=output.capsule_count,
                total_files=len(output.files),
                total_size=output.total_size,
                compiled_at=_now(),
                dependencies=output.dependencies,
            ),
        )
        return self._finish(result)

    def _cancelled(self, platform: Platform) -> CompilationResult:
        logger.warning(f"[{platform.value}] export cancelled")
        return self._finish(
            CompilationResult(platform=platform, status=CompilationStatus.CANCELLED)
        )

    def _finish(self, result: CompilationResult) -> CompilationResult:
        self._set_target_state(result.platform, _TERMINAL_TARGET_STATE[result.status])
        if result.status != CompilationStatus.CANCELLED:
            logger.info(
                f"[{result.platform.value}] export {result.status.value}: "
                f"{result.metadata.total_files} file(s), {len(result.errors)} error(s)"
            )
        return result


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
