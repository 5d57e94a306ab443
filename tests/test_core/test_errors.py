"""Tests for the error taxonomy."""

import pytest

from schemaview.core.errors import (
    CONFLICTING_VISIBILITY,
    INVALID_SCHEMA,
    UNDECLARED_VIEW,
    UNKNOWN_DIRECTIVE,
    ConflictingVisibilityError,
    Diagnostic,
    DiagnosticError,
    SchemaSyntaxError,
    SchemaViewError,
    UnknownDirectiveError,
    ViewGenerationError,
)
from schemaview.core.options import DEFAULT_OPTIONS, LENIENT_OPTIONS, for_mode
from schemaview.core.types import SourceLocation


class TestDiagnostic:
    """Tests for Diagnostic."""

    def test_format(self):
        diagnostic = Diagnostic(
            code=UNDECLARED_VIEW,
            message="undeclared view: internal",
            location=SourceLocation(path="models.py", line=7, column=30),
        )
        assert diagnostic.format() == "models.py:7:30: error[UNDECLARED_VIEW]: undeclared view: internal"

    def test_hashable(self):
        diagnostic = Diagnostic(code=INVALID_SCHEMA, message="bad")
        assert len({diagnostic, Diagnostic(code=INVALID_SCHEMA, message="bad")}) == 1


class TestDiagnosticError:
    """Tests for DiagnosticError."""

    def test_requires_diagnostics(self):
        with pytest.raises(ValueError):
            DiagnosticError([])

    def test_message_defaults_to_first_diagnostic(self):
        error = DiagnosticError([Diagnostic(code=INVALID_SCHEMA, message="bad schema")])
        assert error.message == "bad schema"
        assert error.code == "DIAGNOSTIC_ERROR"
        assert len(error.diagnostics) == 1

    def test_str_lists_every_diagnostic(self):
        error = ViewGenerationError(
            [Diagnostic(code=UNDECLARED_VIEW, message="one"), Diagnostic(code=UNDECLARED_VIEW, message="two")],
            message="cannot generate view PublicUser of User",
        )
        text = str(error)
        assert text.startswith("cannot generate view PublicUser of User")
        assert "error[UNDECLARED_VIEW]: one" in text
        assert "error[UNDECLARED_VIEW]: two" in text

    def test_to_dict(self):
        error = SchemaSyntaxError("bad", location=SourceLocation(path="m.py", line=1))
        data = error.to_dict()
        assert data["code"] == INVALID_SCHEMA
        assert data["message"] == "bad"
        assert data["diagnostics"][0]["location"]["line"] == 1

    def test_hierarchy(self):
        assert issubclass(ViewGenerationError, DiagnosticError)
        assert issubclass(DiagnosticError, SchemaViewError)


class TestDirectiveErrors:
    """Tests for the directive error messages."""

    def test_unknown_directive(self):
        error = UnknownDirectiveError("skip")
        assert error.diagnostics[0].code == UNKNOWN_DIRECTIVE
        assert error.message == "unsupported directive `skip`, expected one of: hide, show, optional"
        assert error.details == {"category": "skip"}
        assert error.hints

    def test_conflicting_visibility(self):
        error = ConflictingVisibilityError("email")
        assert error.diagnostics[0].code == CONFLICTING_VISIBILITY
        assert error.message == "conflicting visibility declarations for field email"


class TestOptions:
    """Tests for generator options."""

    def test_defaults(self):
        assert DEFAULT_OPTIONS.decorator_name == "views"
        assert DEFAULT_OPTIONS.collect_all_errors is False
        assert DEFAULT_OPTIONS.optional_style == "union"

    def test_with_overrides(self):
        options = DEFAULT_OPTIONS.with_overrides(module_name="user_views")
        assert options.module_name == "user_views"
        assert DEFAULT_OPTIONS.module_name == "views"

    def test_modes(self):
        assert for_mode("lenient") is LENIENT_OPTIONS
        assert for_mode("strict") is DEFAULT_OPTIONS
        with pytest.raises(ValueError):
            for_mode("loose")  # type: ignore[arg-type]
