"""
Error taxonomy for schemaview.

All schemaview errors inherit from SchemaViewError and include:
- A unique error code for programmatic handling
- A human-readable message
- Optional hints on how to fix the schema

Problems found in a schema are reported as ``Diagnostic`` records. Errors
that carry diagnostics derive from ``DiagnosticError``; one error may carry
several diagnostics when a single field has more than one problem.
"""

from typing import Any

from pydantic import BaseModel, Field

from schemaview.core.types import SourceLocation

# Diagnostic codes
INVALID_SCHEMA = "INVALID_SCHEMA"
DIRECTIVE_SYNTAX = "DIRECTIVE_SYNTAX"
UNKNOWN_DIRECTIVE = "UNKNOWN_DIRECTIVE"
CONFLICTING_VISIBILITY = "CONFLICTING_VISIBILITY"
CONFLICTING_SHOW_HIDE = "CONFLICTING_SHOW_HIDE"
CONFLICTING_HIDE_OPTIONAL = "CONFLICTING_HIDE_OPTIONAL"
UNDECLARED_VIEW = "UNDECLARED_VIEW"
DUPLICATE_VIEW_NAME = "DUPLICATE_VIEW_NAME"


class Diagnostic(BaseModel):
    """A single problem found in a schema, with where it was found."""

    code: str
    message: str
    location: SourceLocation = Field(default_factory=SourceLocation)

    model_config = {"frozen": True}

    def format(self) -> str:
        """Format as ``path:line:col: error[CODE]: message``."""
        return f"{self.location}: error[{self.code}]: {self.message}"


class SchemaViewError(Exception):
    """
    Base class for all schemaview errors.

    Attributes:
        code: Unique error code for programmatic handling
        message: Human-readable error message
        hints: Suggestions for how to fix the error
        details: Additional error context
    """

    code: str = "SCHEMAVIEW_ERROR"

    def __init__(
        self,
        message: str,
        *,
        hints: list[str] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.hints = hints or []
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert error to a dictionary for serialization."""
        return {
            "code": self.code,
            "message": self.message,
            "hints": self.hints,
            "details": self.details,
        }


class DiagnosticError(SchemaViewError):
    """An error carrying one or more diagnostics."""

    code = "DIAGNOSTIC_ERROR"

    def __init__(
        self,
        diagnostics: list[Diagnostic],
        message: str | None = None,
        **kwargs: Any,
    ) -> None:
        if not diagnostics:
            raise ValueError("DiagnosticError requires at least one diagnostic")
        self.diagnostics = list(diagnostics)
        super().__init__(message or diagnostics[0].message, **kwargs)

    def __str__(self) -> str:
        if len(self.diagnostics) == 1:
            return self.diagnostics[0].format()
        lines = [self.message]
        lines.extend(f"  {d.format()}" for d in self.diagnostics)
        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["diagnostics"] = [d.model_dump() for d in self.diagnostics]
        return result


class SchemaSyntaxError(DiagnosticError):
    """The schema source is not a valid schema definition."""

    code = INVALID_SCHEMA

    def __init__(
        self,
        message: str,
        location: SourceLocation | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            [Diagnostic(code=INVALID_SCHEMA, message=message, location=location or SourceLocation())],
            **kwargs,
        )


class DirectiveSyntaxError(DiagnosticError):
    """A directive block is malformed (e.g. a multi-segment pseudonym)."""

    code = DIRECTIVE_SYNTAX

    def __init__(
        self,
        message: str,
        location: SourceLocation | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            [Diagnostic(code=DIRECTIVE_SYNTAX, message=message, location=location or SourceLocation())],
            **kwargs,
        )


class UnknownDirectiveError(DiagnosticError):
    """A directive block names a category other than hide, show or optional."""

    code = UNKNOWN_DIRECTIVE

    def __init__(
        self,
        category: str,
        location: SourceLocation | None = None,
        allowed: list[str] | None = None,
        **kwargs: Any,
    ) -> None:
        allowed = allowed or ["hide", "show", "optional"]
        message = f"unsupported directive `{category}`, expected one of: {', '.join(allowed)}"
        super().__init__(
            [Diagnostic(code=UNKNOWN_DIRECTIVE, message=message, location=location or SourceLocation())],
            hints=[f"Use one of: {', '.join(allowed)}"],
            details={"category": category},
            **kwargs,
        )


class ConflictingVisibilityError(DiagnosticError):
    """A field declares both hide and show blocks."""

    code = CONFLICTING_VISIBILITY

    def __init__(
        self,
        field: str,
        location: SourceLocation | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            [
                Diagnostic(
                    code=CONFLICTING_VISIBILITY,
                    message=f"conflicting visibility declarations for field {field}",
                    location=location or SourceLocation(),
                )
            ],
            hints=[
                "Use either hide(...) (shown by default) or show(...) "
                "(hidden by default) on a field, not both"
            ],
            details={"field": field},
            **kwargs,
        )


class ViewGenerationError(DiagnosticError):
    """One or more views could not be generated."""

    code = "VIEW_GENERATION_FAILED"
