"""
View emission.

Resolves every field of a schema against one view's pseudonym and emits the
GeneratedView, or fails the view with the diagnostics of the first field
that does not validate.
"""

from dataclasses import dataclass, field

from schemaview.core.errors import DUPLICATE_VIEW_NAME, Diagnostic, ViewGenerationError
from schemaview.core.options import DEFAULT_OPTIONS, GeneratorOptions
from schemaview.core.types import (
    DefaultPolicy,
    DirectiveCategory,
    FieldDefinition,
    GeneratedField,
    GeneratedView,
    SchemaDefinition,
    ViewMapping,
    ViewNamespace,
)
from schemaview.directives.validator import DirectiveValidator
from schemaview.logging import get_logger, with_log_context

logger = get_logger(__name__)


def resolve_field(field_def: FieldDefinition, pseudonym: str) -> GeneratedField | None:
    """
    Resolve one field for one view.

    Returns the generated field, or None when the field is omitted.
    Order of precedence: optional, hide, show, then the default policy.
    """
    directives = field_def.directives
    if pseudonym in directives.names(DirectiveCategory.OPTIONAL):
        return _generated(field_def, optional=True)
    if pseudonym in directives.names(DirectiveCategory.HIDE):
        return None
    if pseudonym in directives.names(DirectiveCategory.SHOW):
        return _generated(field_def, optional=False)
    if directives.default_policy == DefaultPolicy.SHOW:
        return _generated(field_def, optional=False)
    return None


def _generated(field_def: FieldDefinition, *, optional: bool) -> GeneratedField:
    return GeneratedField(
        name=field_def.name,
        type_source=field_def.type_source,
        annotation=field_def.annotation,
        optional=optional,
        visibility=field_def.visibility,
        default_source=None if optional else field_def.default_source,
    )


class ViewEmitter:
    """
    Emits the views of one schema.

    Field validation results are cached per field, so checking every
    (field, view) pair costs one validation per field.
    """

    def __init__(
        self,
        schema: SchemaDefinition,
        namespace: ViewNamespace,
        options: GeneratorOptions | None = None,
    ) -> None:
        """
        Initialize the emitter.

        Args:
            schema: The canonical schema
            namespace: Views declared for the schema
            options: Generator options
        """
        self.schema = schema
        self.namespace = namespace
        self.options = options or DEFAULT_OPTIONS
        self._validator = DirectiveValidator(namespace)
        self._validated: dict[str, tuple[Diagnostic, ...]] = {}

    def validate_field(self, field_def: FieldDefinition) -> list[Diagnostic]:
        """Validate a field's directives (cached)."""
        if field_def.name not in self._validated:
            self._validated[field_def.name] = tuple(self._validator.validate(field_def))
        return list(self._validated[field_def.name])

    def emit(self, mapping: ViewMapping) -> GeneratedView:
        """
        Emit the view declared by a mapping.

        Fields are processed in declaration order. Unless
        ``collect_all_errors`` is set, processing stops at the first field
        with diagnostics and only that field's diagnostics are reported.

        Raises:
            ViewGenerationError: a field failed validation
        """
        with with_log_context(view_name=mapping.view_name):
            fields: list[GeneratedField] = []
            failures: list[Diagnostic] = []

            for field_def in self.schema.fields:
                diagnostics = self.validate_field(field_def)
                if diagnostics:
                    logger.debug(
                        "Field failed validation",
                        field_name=field_def.name,
                        codes=[d.code for d in diagnostics],
                    )
                    failures.extend(diagnostics)
                    if not self.options.collect_all_errors:
                        break
                    continue

                generated = resolve_field(field_def, mapping.pseudonym)
                if generated is not None:
                    fields.append(generated)

            if failures:
                raise ViewGenerationError(
                    failures,
                    message=f"cannot generate view {mapping.view_name} of {self.schema.name}",
                    details={"view": mapping.view_name, "schema": self.schema.name},
                )

            logger.debug(
                "Emitted view",
                pseudonym=mapping.pseudonym,
                field_count=len(fields),
            )
            return GeneratedView(
                name=mapping.view_name,
                pseudonym=mapping.pseudonym,
                schema_name=self.schema.name,
                visibility=self.schema.visibility,
                fields=tuple(fields),
                decorators=self.schema.decorators,
                bases=self.schema.bases,
                keywords=self.schema.keywords,
                docstring=self.schema.docstring,
                body=self.schema.body,
            )


@dataclass
class ViewGenerationReport:
    """Result of generating every view of one schema."""

    schema_def: SchemaDefinition
    namespace: ViewNamespace
    views: list[GeneratedView] = field(default_factory=list)
    # pseudonym -> diagnostics of the failed view
    failures: dict[str, list[Diagnostic]] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def diagnostics(self) -> list[Diagnostic]:
        """
        All diagnostics, in view order.

        Field validation does not depend on the view, so every view failed
        by the same fields carries the same list. Each distinct list is
        reported once; entries inside a list are never merged, even when
        two references share a location.
        """
        seen: set[tuple[Diagnostic, ...]] = set()
        result = []
        for diagnostics in self.failures.values():
            key = tuple(diagnostics)
            if key not in seen:
                seen.add(key)
                result.extend(diagnostics)
        return result

    def get_view(self, name: str) -> GeneratedView | None:
        """Get a generated view by view name."""
        for view in self.views:
            if view.name == name:
                return view
        return None

    def raise_for_errors(self) -> None:
        """Raise ViewGenerationError if any view failed."""
        if self.failures:
            failed = [
                mapping.view_name
                for mapping in self.namespace.mappings
                if mapping.pseudonym in self.failures
            ]
            raise ViewGenerationError(
                self.diagnostics,
                message=f"cannot generate views of {self.schema_def.name}: {', '.join(failed)}",
                details={"schema": self.schema_def.name, "views": failed},
            )


class ViewGenerator:
    """
    Runs the emitter for every declared view of a schema.

    Views are independent: a failing view is recorded in the report and the
    remaining views are still emitted.
    """

    def __init__(
        self,
        schema: SchemaDefinition,
        namespace: ViewNamespace,
        options: GeneratorOptions | None = None,
    ) -> None:
        self.schema = schema
        self.namespace = namespace
        self.options = options or DEFAULT_OPTIONS
        self._emitter = ViewEmitter(schema, namespace, self.options)

    def generate(self) -> ViewGenerationReport:
        """Generate all views declared in the namespace."""
        report = ViewGenerationReport(schema_def=self.schema, namespace=self.namespace)

        with with_log_context(schema_name=self.schema.name):
            if not self.namespace.mappings:
                logger.warning("Schema declares no views")

            emitted_names: set[str] = set()
            for mapping in self.namespace.mappings:
                if mapping.view_name in emitted_names:
                    report.failures[mapping.pseudonym] = [
                        Diagnostic(
                            code=DUPLICATE_VIEW_NAME,
                            message=f"duplicate view name: {mapping.view_name}",
                            location=mapping.location,
                        )
                    ]
                    continue
                emitted_names.add(mapping.view_name)

                try:
                    view = self._emitter.emit(mapping)
                except ViewGenerationError as exc:
                    logger.warning(
                        "View generation failed",
                        view_name=mapping.view_name,
                        codes=[d.code for d in exc.diagnostics],
                    )
                    report.failures[mapping.pseudonym] = exc.diagnostics
                    continue
                report.views.append(view)

        return report


def generate_views(
    schema: SchemaDefinition,
    namespace: ViewNamespace,
    options: GeneratorOptions | None = None,
) -> ViewGenerationReport:
    """Generate every view of a schema."""
    return ViewGenerator(schema, namespace, options).generate()
