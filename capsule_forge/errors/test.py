"""Unit tests for diagnostics and exceptions."""

import pytest

from capsule_forge.errors import (
    CapsuleForgeError,
    Diagnostic,
    ErrorCode,
    ExportCancelled,
    OrchestratorPrecondition,
    SerializationError,
    Severity,
    TemplateSyntaxError,
    missing_required_prop,
    out_of_range,
    unknown_prop,
)


class TestDiagnostic:
    """Tests for Diagnostic records."""

    @pytest.mark.unit
    def test_missing_required_prop_fields(self):
        """Constructor fills instance, capsule and prop context."""
        diag = missing_required_prop("btn-1", "button", "text")
        assert diag.code == ErrorCode.MISSING_REQUIRED_PROP
        assert diag.instance_id == "btn-1"
        assert diag.capsule_id == "button"
        assert diag.prop_name == "text"
        assert diag.is_error

    @pytest.mark.unit
    def test_unknown_prop_is_warning(self):
        """Undeclared props are reported as warnings."""
        diag = unknown_prop("btn-1", "button", "colour")
        assert diag.severity == Severity.WARNING
        assert not diag.is_error

    @pytest.mark.unit
    def test_with_context_returns_copy(self):
        """with_context does not mutate the original."""
        diag = missing_required_prop("a", "b", "c")
        located = diag.with_context(platform="ios", file="X.swift")
        assert located.platform == "ios"
        assert diag.platform is None

    @pytest.mark.unit
    def test_to_dict_drops_empty_fields(self):
        """Serialized form uses enum values and omits None fields."""
        data = out_of_range("a", "slider", "value", 150, 0, 100).to_dict()
        assert data["code"] == "OutOfRange"
        assert data["severity"] == "error"
        assert "file" not in data
        assert "150" in data["message"]

    @pytest.mark.unit
    def test_str_includes_code(self):
        """String form is prefixed with the code."""
        diag = Diagnostic(code=ErrorCode.CAPABILITY_ERROR, message="no ios")
        assert str(diag).startswith("[CapabilityError]")


class TestExceptions:
    """Tests for exception types."""

    @pytest.mark.unit
    def test_template_syntax_error_position(self):
        """TemplateSyntaxError carries line and column."""
        err = TemplateSyntaxError("Unterminated placeholder", line=3, column=7)
        assert err.line == 3
        assert err.column == 7
        assert "line 3, column 7" in str(err)
        diag = err.to_diagnostic(capsule_id="broken", platform="ios")
        assert diag.code == ErrorCode.TEMPLATE_SYNTAX_ERROR
        assert diag.line == 3

    @pytest.mark.unit
    def test_precondition_problems(self):
        """OrchestratorPrecondition keeps its problem list."""
        problem = Diagnostic(code=ErrorCode.INVALID_COMPOSITION, message="dup")
        err = OrchestratorPrecondition("bad composition", [problem])
        assert err.problems == [problem]
        assert OrchestratorPrecondition("x").problems == []

    @pytest.mark.unit
    def test_hierarchy(self):
        """All exceptions share a common base."""
        assert issubclass(TemplateSyntaxError, CapsuleForgeError)
        assert issubclass(ExportCancelled, CapsuleForgeError)
        assert issubclass(SerializationError, ValueError)
        assert ExportCancelled("web").platform == "web"
