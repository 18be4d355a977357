"""Unit tests for the export orchestrator."""

import pytest

from capsule_forge.errors import ErrorCode, OrchestratorPrecondition
from capsule_forge.export import (
    CancellationToken,
    CompilationResult,
    CompilationStatus,
    ExportOrchestrator,
    OrchestratorState,
    TargetState,
    summarize,
)
from capsule_forge.export import lib as export_lib
from capsule_forge.mid import CapsuleInstance, ProjectComposition
from capsule_forge.platform import Platform
from capsule_forge.registry import CapsuleRegistry

LABEL = {
    "id": "label",
    "name": "Label",
    "category": "ui",
    "props": [{"name": "text", "type": "string", "default": "Hello"}],
    "platforms": {
        "web": {"code": "export const {% component %} = () => {% props.text %}\n"},
        "ios": {"code": "struct {% component %}: View {}\n"},
        "android": {"code": "fun {% component %}() {}\n"},
    },
}

BROKEN = {
    "id": "broken",
    "name": "Broken",
    "category": "ui",
    "platforms": {
        "web": {"code": "export function {% component %}() {}\n"},
        "ios": {"code": "struct {% component %} {% oops"},
    },
}


@pytest.fixture
def registry() -> CapsuleRegistry:
    registry = CapsuleRegistry(strict_templates=False)
    registry.register_many([LABEL, BROKEN])
    return registry


def _project(*children: CapsuleInstance, targets=("web", "ios")) -> ProjectComposition:
    return ProjectComposition(
        name="Demo",
        root=CapsuleInstance(id="root", capsule_id="label", children=list(children)),
        targets=list(targets),
    )


class TestPreconditions:
    """Tests for request validation before generation."""

    @pytest.mark.unit
    def test_empty_targets(self, registry):
        """An explicitly empty target list is rejected."""
        orchestrator = ExportOrchestrator(registry, max_workers=1)
        with pytest.raises(OrchestratorPrecondition, match="No target"):
            orchestrator.export_project(_project(), targets=[])
        assert orchestrator.state == OrchestratorState.IDLE

    @pytest.mark.unit
    def test_unknown_target(self, registry):
        """Unknown platform names are rejected."""
        with pytest.raises(OrchestratorPrecondition, match="linux"):
            ExportOrchestrator(registry).export_project(_project(), targets=["web", "linux"])

    @pytest.mark.unit
    def test_malformed_composition(self, registry):
        """Duplicate instance ids abort the export with problems attached."""
        project = _project(
            CapsuleInstance(id="dup", capsule_id="label"),
            CapsuleInstance(id="dup", capsule_id="label"),
        )
        with pytest.raises(OrchestratorPrecondition) as info:
            ExportOrchestrator(registry).export_project(project)
        assert info.value.problems[0].code == ErrorCode.INVALID_COMPOSITION

    @pytest.mark.unit
    def test_default_targets_from_environment(self, registry, monkeypatch):
        """A composition without targets uses the configured defaults."""
        monkeypatch.setenv("CAPSULE_FORGE_DEFAULT_TARGETS", "android, web")
        results = ExportOrchestrator(registry).export_project(_project(targets=()))
        assert [r.platform for r in results] == [Platform.ANDROID, Platform.WEB]


class TestExport:
    """Tests for per-target results."""

    @pytest.mark.unit
    @pytest.mark.parametrize("workers", [1, 4])
    def test_results_in_requested_order(self, registry, workers):
        """Results follow the requested order regardless of workers."""
        orchestrator = ExportOrchestrator(registry, max_workers=workers)
        results = orchestrator.export_project(
            _project(), targets=["android", "web", "ios"]
        )
        assert [r.platform for r in results] == [
            Platform.ANDROID,
            Platform.WEB,
            Platform.IOS,
        ]
        assert all(r.success for r in results)
        assert orchestrator.state == OrchestratorState.ALL_DONE
        assert set(orchestrator.target_states.values()) == {TargetState.COMPLETED}

    @pytest.mark.unit
    def test_metadata(self, registry):
        """Metadata counts files and bytes."""
        (result,) = ExportOrchestrator(registry).export_project(_project(), targets=["web"])
        assert result.metadata.capsule_count == 1
        assert result.metadata.total_files == len(result.files) == 2
        assert result.metadata.total_size == sum(f.size for f in result.files)
        assert result.metadata.compiled_at.endswith("+00:00")
        assert result.metadata.dependencies == ["react", "react-dom"]

    @pytest.mark.unit
    def test_partial_failure(self, registry):
        """A template error fails only the affected target."""
        project = _project(CapsuleInstance(id="b", capsule_id="broken"))
        web, ios = ExportOrchestrator(registry).export_project(project)
        assert web.success and not web.has_errors
        assert ios.status == CompilationStatus.FAILED
        assert ios.errors[0].code == ErrorCode.TEMPLATE_SYNTAX_ERROR
        assert ios.get_file("Sources/Demo/Views/Broken.swift") is not None

    @pytest.mark.unit
    def test_unexpected_exception_isolated(self, registry, monkeypatch):
        """An exception inside one target yields a failed result for it."""
        real_assemble = export_lib.assemble

        def flaky(composition, platform, *args, **kwargs):
            if platform == Platform.IOS:
                raise RuntimeError("boom")
            return real_assemble(composition, platform, *args, **kwargs)

        monkeypatch.setattr(export_lib, "assemble", flaky)
        web, ios = ExportOrchestrator(registry, max_workers=2).export_project(_project())
        assert web.success
        assert ios.status == CompilationStatus.FAILED
        assert ios.errors[0].code == ErrorCode.INTERNAL_ERROR
        assert "boom" in ios.errors[0].message
        assert ios.files == []

    @pytest.mark.unit
    def test_progress_events(self, registry):
        """Progress is reported per component file."""
        events = []
        ExportOrchestrator(registry).export_project(
            _project(CapsuleInstance(id="b", capsule_id="broken")),
            targets=["web"],
            on_progress=events.append,
        )
        assert [(e.emitted, e.total, e.percent) for e in events] == [
            (1, 2, 50.0),
            (2, 2, 100.0),
        ]


class TestCancellation:
    """Tests for cooperative cancellation."""

    @pytest.mark.unit
    def test_cancel_between_targets(self, registry):
        """A target cancelled before it starts is marked, with no files."""
        token = CancellationToken()
        orchestrator = ExportOrchestrator(registry, max_workers=1)
        results = orchestrator.export_project(
            _project(),
            cancel=token,
            on_target_done=lambda result: token.cancel(),
        )
        assert results[0].status == CompilationStatus.COMPLETED
        assert results[1].status == CompilationStatus.CANCELLED
        assert results[1].files == []
        assert orchestrator.state == OrchestratorState.CANCELLED
        assert orchestrator.target_states[Platform.IOS] == TargetState.CANCELLED

    @pytest.mark.unit
    def test_cancel_before_start(self, registry):
        """Every target is cancelled when the token is already set."""
        token = CancellationToken()
        token.cancel()
        results = ExportOrchestrator(registry).export_project(_project(), cancel=token)
        assert [r.status for r in results] == [CompilationStatus.CANCELLED] * 2


class TestResults:
    """Tests for result helpers."""

    @pytest.mark.unit
    def test_summarize(self):
        """summarize counts statuses."""
        results = [
            CompilationResult(Platform.WEB, CompilationStatus.COMPLETED),
            CompilationResult(Platform.IOS, CompilationStatus.FAILED),
            CompilationResult(Platform.ANDROID, CompilationStatus.CANCELLED),
        ]
        summary = summarize(results)
        assert (summary.total, summary.successful, summary.failed, summary.cancelled) == (
            3,
            1,
            1,
            1,
        )
        assert str(summary) == "1 of 3 platforms exported cleanly, 1 cancelled"
        assert not summary.all_successful

    @pytest.mark.unit
    def test_to_dict(self, registry):
        """to_dict is JSON-ready."""
        (result,) = ExportOrchestrator(registry).export_project(_project(), targets=["web"])
        data = result.to_dict()
        assert data["platform"] == "web"
        assert data["status"] == "completed"
        assert data["success"] is True
        assert data["files"][0]["path"] == "src/components/Label.tsx"
        assert data["metadata"]["total_files"] == 2
