"""
schemaview - derive several views of one schema from per-field directives.

A schema class declares its views once with ``@views(...)``; each field
says which views hide it, show it, or carry it as optional. schemaview
generates one model per view, either as Python source (``schemaview
generate``) or as Pydantic models when the schema class is imported.
"""

__version__ = "0.1.0"

from schemaview.codegen import GenerationResult, ViewCodeGenerator, generate_views
from schemaview.core.errors import (
    ConflictingVisibilityError,
    Diagnostic,
    DiagnosticError,
    DirectiveSyntaxError,
    SchemaSyntaxError,
    SchemaViewError,
    UnknownDirectiveError,
    ViewGenerationError,
)
from schemaview.core.options import GeneratorOptions
from schemaview.directives import hide, optional, show
from schemaview.models import BaseView, derive_views, project, views
from schemaview.parser import ClassSchemaReader, SourceSchemaReader

__all__ = [
    # Version
    "__version__",
    # Declaration
    "views",
    "derive_views",
    "hide",
    "show",
    "optional",
    # Generation
    "generate_views",
    "ViewCodeGenerator",
    "GenerationResult",
    "GeneratorOptions",
    "ClassSchemaReader",
    "SourceSchemaReader",
    # Views
    "BaseView",
    "project",
    # Errors
    "SchemaViewError",
    "Diagnostic",
    "DiagnosticError",
    "SchemaSyntaxError",
    "DirectiveSyntaxError",
    "UnknownDirectiveError",
    "ConflictingVisibilityError",
    "ViewGenerationError",
]
