"""
schemaview Directives Module.

Directive markers, the per-field directive interpreter and the
conflict/reference validator.
"""

from schemaview.directives.interpreter import DirectiveInterpreter, interpret_directives
from schemaview.directives.markers import Directive, hide, optional, show
from schemaview.directives.validator import DirectiveValidator, validate_directives

__all__ = [
    # Markers
    "Directive",
    "hide",
    "show",
    "optional",
    # Interpreter
    "DirectiveInterpreter",
    "interpret_directives",
    # Validator
    "DirectiveValidator",
    "validate_directives",
]
