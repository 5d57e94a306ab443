"""
Import-time view declaration.

Example:
    @views(public="PublicUser", admin="AdminUser")
    class User(BaseModel):
        id: int
        secret: Annotated[str, hide("public")]
        note: Annotated[str, optional("public")]

    PublicUser(id=1)  # note defaults to None, secret is not a field
"""

import sys
from collections.abc import Callable
from typing import TypeVar

from pydantic import BaseModel

from schemaview.codegen.emitter import generate_views
from schemaview.core.options import DEFAULT_OPTIONS, GeneratorOptions
from schemaview.logging import get_logger, with_log_context
from schemaview.models.factory import ViewFactory
from schemaview.parser.introspect import ClassSchemaReader

logger = get_logger(__name__)

C = TypeVar("C", bound=type)


def derive_views(
    cls: type,
    mapping: dict[str, str],
    *,
    options: GeneratorOptions | None = None,
    export: bool = True,
) -> dict[str, type[BaseModel]]:
    """
    Derive the view models of a schema class.

    Args:
        cls: The schema class
        mapping: Pseudonym to view name, e.g. ``{"public": "PublicUser"}``
        options: Generator options
        export: Also bind each view name in the module defining ``cls``

    Returns:
        Dict mapping view names to model classes, in declaration order.
        The same dict is stored on the class as ``__views__``.

    Raises:
        DiagnosticError: the class cannot be read as a schema
        ViewGenerationError: any view failed; no view is built
    """
    options = options or DEFAULT_OPTIONS
    declaration = ClassSchemaReader(options).read(cls, mapping)

    report = generate_views(declaration.schema_def, declaration.namespace, options)
    report.raise_for_errors()

    models = ViewFactory(cls).build_all(report.views)
    cls.__views__ = models  # type: ignore[attr-defined]

    if export:
        module = sys.modules.get(cls.__module__)
        if module is not None:
            with with_log_context(schema_name=cls.__name__):
                for view_name, model in models.items():
                    if view_name in vars(module):
                        logger.warning("Replacing module attribute with view", view_name=view_name)
                    setattr(module, view_name, model)

    return models


def views(**mapping: str) -> Callable[[C], C]:
    """
    Declare the views of a schema class.

    Each keyword maps a pseudonym used in the field directives to the name
    of the view model to generate. The class itself is returned unchanged
    apart from its ``__views__`` attribute.
    """

    def decorator(cls: C) -> C:
        derive_views(cls, mapping)
        return cls

    return decorator
