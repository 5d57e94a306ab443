"""
Conflict and reference validation for directive sets.

The validator is pure: it reads a DirectiveSet and the namespace and returns
diagnostics, so it can be re-run for every (field, view) pair.
"""

from schemaview.core.errors import (
    CONFLICTING_HIDE_OPTIONAL,
    CONFLICTING_SHOW_HIDE,
    UNDECLARED_VIEW,
    Diagnostic,
)
from schemaview.core.types import (
    DirectiveCategory,
    DirectiveSet,
    FieldDefinition,
    PseudonymRef,
    ViewNamespace,
)


class DirectiveValidator:
    """
    Validates directive sets against the declared views.

    Checks:
    - every referenced pseudonym is declared
    - no pseudonym is both hidden and shown on the same field
    - no pseudonym is both hidden and optional on the same field
    """

    def __init__(self, namespace: ViewNamespace) -> None:
        """
        Initialize the validator.

        Args:
            namespace: The views declared for the schema being validated
        """
        self.namespace = namespace
        self._declared = frozenset(namespace.pseudonyms)

    def validate(self, field: FieldDefinition) -> list[Diagnostic]:
        """Validate the directives of one field."""
        return self.validate_directives(field.directives)

    def validate_directives(self, directives: DirectiveSet) -> list[Diagnostic]:
        """Validate a directive set; returns an empty list when it is valid."""
        diagnostics = self._check_references(directives)
        diagnostics.extend(self._check_conflicts(directives))
        return diagnostics

    def _check_references(self, directives: DirectiveSet) -> list[Diagnostic]:
        diagnostics = []
        for _, ref in directives.all_references():
            if ref.name not in self._declared:
                diagnostics.append(
                    Diagnostic(
                        code=UNDECLARED_VIEW,
                        message=f"undeclared view: {ref.name}",
                        location=ref.location,
                    )
                )
        return diagnostics

    def _check_conflicts(self, directives: DirectiveSet) -> list[Diagnostic]:
        hidden = directives.names(DirectiveCategory.HIDE)
        if not hidden:
            return []

        shown = directives.names(DirectiveCategory.SHOW)
        optional = directives.names(DirectiveCategory.OPTIONAL)

        diagnostics = []
        for ref in _first_mentions(directives.hide):
            if ref.name in shown:
                diagnostics.append(
                    Diagnostic(
                        code=CONFLICTING_SHOW_HIDE,
                        message=f"conflicting show/hide for {ref.name}",
                        location=ref.location,
                    )
                )
            elif ref.name in optional:
                diagnostics.append(
                    Diagnostic(
                        code=CONFLICTING_HIDE_OPTIONAL,
                        message=f"conflicting hide/optional for {ref.name}",
                        location=ref.location,
                    )
                )
        return diagnostics


def _first_mentions(refs: tuple[PseudonymRef, ...]) -> list[PseudonymRef]:
    seen: set[str] = set()
    result = []
    for ref in refs:
        if ref.name not in seen:
            seen.add(ref.name)
            result.append(ref)
    return result


def validate_directives(
    directives: DirectiveSet,
    namespace: ViewNamespace,
) -> list[Diagnostic]:
    """Validate a directive set against a namespace."""
    return DirectiveValidator(namespace).validate_directives(directives)
