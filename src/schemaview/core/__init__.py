"""
schemaview Core Module.

Contains the schema data model, error taxonomy, and generator options.
"""

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
from schemaview.core.options import DEFAULT_OPTIONS, GeneratorOptions, for_mode
from schemaview.core.types import (
    DefaultPolicy,
    DirectiveBlock,
    DirectiveCategory,
    DirectiveSet,
    FieldDefinition,
    GeneratedField,
    GeneratedView,
    PseudonymRef,
    SchemaDeclaration,
    SchemaDefinition,
    SourceLocation,
    ViewMapping,
    ViewNamespace,
    Visibility,
)

__all__ = [
    # Errors
    "SchemaViewError",
    "Diagnostic",
    "DiagnosticError",
    "SchemaSyntaxError",
    "DirectiveSyntaxError",
    "UnknownDirectiveError",
    "ConflictingVisibilityError",
    "ViewGenerationError",
    # Options
    "GeneratorOptions",
    "DEFAULT_OPTIONS",
    "for_mode",
    # Types
    "DefaultPolicy",
    "DirectiveBlock",
    "DirectiveCategory",
    "DirectiveSet",
    "FieldDefinition",
    "GeneratedField",
    "GeneratedView",
    "PseudonymRef",
    "SchemaDeclaration",
    "SchemaDefinition",
    "SourceLocation",
    "ViewMapping",
    "ViewNamespace",
    "Visibility",
]
