"""
schemaview Code Generation Module.

Emits views from schemas and renders them as Python source.
"""

from schemaview.codegen.emitter import (
    ViewEmitter,
    ViewGenerationReport,
    ViewGenerator,
    generate_views,
    resolve_field,
)
from schemaview.codegen.views import (
    GeneratedModule,
    GenerationResult,
    SkippedView,
    ViewCodeGenerator,
)

__all__ = [
    # Emission
    "ViewEmitter",
    "ViewGenerator",
    "ViewGenerationReport",
    "generate_views",
    "resolve_field",
    # Rendering
    "GeneratedModule",
    "GenerationResult",
    "SkippedView",
    "ViewCodeGenerator",
]
