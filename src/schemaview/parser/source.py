"""
Source schema reader.

Reads schema classes out of Python source text with ``ast``, without
importing it:

    @views(public="PublicUser", admin="AdminUser")
    class User(BaseModel):
        id: int
        secret: Annotated[str, hide(public)]

Everything else in the module is kept so the generated module can replace
each schema class with its views in place.
"""

import ast
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path

from schemaview.core.errors import (
    Diagnostic,
    DiagnosticError,
    DirectiveSyntaxError,
    SchemaSyntaxError,
)
from schemaview.core.options import DEFAULT_OPTIONS, GeneratorOptions
from schemaview.core.types import (
    DirectiveBlock,
    FieldDefinition,
    PseudonymRef,
    SchemaDeclaration,
    SchemaDefinition,
    SourceLocation,
    ViewMapping,
    ViewNamespace,
    Visibility,
)
from schemaview.directives.interpreter import DirectiveInterpreter
from schemaview.logging import get_logger, with_log_context

logger = get_logger(__name__)

PACKAGE_NAME = "schemaview"


@dataclass
class SourceModule:
    """
    A parsed schema module.

    ``items`` holds the module's top-level statements in order: plain
    statements as source text, schema classes as SchemaDeclaration. The
    module docstring is kept apart in ``docstring``.
    """

    path: str | None = None
    docstring: str | None = None
    items: list[str | SchemaDeclaration] = field(default_factory=list)

    @property
    def declarations(self) -> list[SchemaDeclaration]:
        return [item for item in self.items if isinstance(item, SchemaDeclaration)]

    @property
    def statements(self) -> list[str]:
        return [item for item in self.items if isinstance(item, str)]


class SourceSchemaReader:
    """Reads schema declarations from Python source."""

    def __init__(
        self,
        options: GeneratorOptions | None = None,
        interpreter: DirectiveInterpreter | None = None,
    ) -> None:
        self.options = options or DEFAULT_OPTIONS
        self.interpreter = interpreter or DirectiveInterpreter()

    def read_file(self, path: Path | str) -> SourceModule:
        """Read a schema module from disk."""
        path = Path(path)
        return self.read(path.read_text(encoding="utf-8"), path=str(path))

    def read(self, source: str, path: str | None = None) -> SourceModule:
        """
        Read a schema module from source text.

        Raises:
            SchemaSyntaxError: the source is not valid Python or a schema
                class is malformed
            DiagnosticError: a field's directives cannot be interpreted
        """
        try:
            tree = ast.parse(source, filename=path or "<string>")
        except SyntaxError as exc:
            raise SchemaSyntaxError(
                f"invalid Python syntax: {exc.msg}",
                location=SourceLocation(path=path, line=exc.lineno, column=exc.offset),
            ) from exc

        module = SourceModule(path=path, docstring=ast.get_docstring(tree, clean=True))
        failures = _Failures(self.options.collect_all_errors)

        with with_log_context(source_path=path):
            for index, node in enumerate(tree.body):
                if index == 0 and module.docstring is not None:
                    continue

                if isinstance(node, (ast.Import, ast.ImportFrom)):
                    statement = self._strip_own_imports(node)
                    if statement is not None:
                        module.items.append(statement)
                    continue

                if isinstance(node, ast.ClassDef):
                    decorator = self._find_decorator(node)
                    if decorator is not None:
                        with failures.guard():
                            module.items.append(self._read_class(node, decorator, path))
                        continue

                module.items.append(ast.unparse(node))

        failures.raise_if_any(f"cannot read schemas from {path or '<string>'}")
        logger.debug(
            "Read schema module",
            schema_count=len(module.declarations),
            statement_count=len(module.statements),
        )
        return module

    # === Module level ===

    def _strip_own_imports(self, node: ast.Import | ast.ImportFrom) -> str | None:
        """Drop imports of this package; the generated module does not need them."""
        if isinstance(node, ast.ImportFrom):
            if node.module and _is_own_module(node.module) and node.level == 0:
                return None
            return ast.unparse(node)

        names = [alias for alias in node.names if not _is_own_module(alias.name)]
        if not names:
            return None
        return ast.unparse(ast.Import(names=names))

    def _find_decorator(self, node: ast.ClassDef) -> ast.expr | None:
        for decorator in node.decorator_list:
            target = decorator.func if isinstance(decorator, ast.Call) else decorator
            if isinstance(target, ast.Name) and target.id == self.options.decorator_name:
                return decorator
            if isinstance(target, ast.Attribute) and target.attr == self.options.decorator_name:
                return decorator
        return None

    # === Schema classes ===

    def _read_class(
        self, node: ast.ClassDef, decorator: ast.expr, path: str | None
    ) -> SchemaDeclaration:
        with with_log_context(schema_name=node.name):
            namespace = self._read_namespace(node, decorator, path)

            docstring = ast.get_docstring(node, clean=True)
            body_nodes = node.body[1:] if docstring is not None else node.body

            fields: list[FieldDefinition] = []
            body: list[str] = []
            seen: set[str] = set()
            failures = _Failures(self.options.collect_all_errors)

            for stmt in body_nodes:
                if isinstance(stmt, ast.AnnAssign):
                    if _is_classvar(stmt.annotation):
                        body.append(ast.unparse(stmt))
                        continue
                    if not stmt.simple or not isinstance(stmt.target, ast.Name):
                        raise SchemaSyntaxError(
                            "schema fields must be simple names",
                            location=_location(stmt, path),
                        )
                    name = stmt.target.id
                    if name in seen:
                        raise SchemaSyntaxError(
                            f"duplicate field {name} in {node.name}",
                            location=_location(stmt, path, f"{node.name}.{name}"),
                        )
                    seen.add(name)
                    with failures.guard():
                        fields.append(self._read_field(node.name, stmt, path))
                elif isinstance(stmt, ast.Assign):
                    body.append(ast.unparse(stmt))
                elif isinstance(stmt, ast.Pass):
                    continue
                elif isinstance(stmt, ast.Expr) and _is_string(stmt.value):
                    continue
                else:
                    raise SchemaSyntaxError(
                        f"unsupported statement in schema body: {type(stmt).__name__}",
                        location=_location(stmt, path),
                        hints=["Schema classes may only contain fields and class-level assignments"],
                    )

            failures.raise_if_any(f"cannot read schema {node.name}")

            schema = SchemaDefinition(
                name=node.name,
                visibility=Visibility.of(node.name),
                fields=tuple(fields),
                decorators=tuple(
                    f"@{ast.unparse(d)}" for d in node.decorator_list if d is not decorator
                ),
                bases=tuple(ast.unparse(base) for base in node.bases),
                keywords=tuple(ast.unparse(keyword) for keyword in node.keywords),
                docstring=docstring,
                body=tuple(body),
                location=_location(node, path, node.name),
            )
            logger.debug(
                "Read schema",
                field_count=len(schema.fields),
                view_count=len(namespace.mappings),
            )
            return SchemaDeclaration(schema_def=schema, namespace=namespace)

    def _read_namespace(
        self, node: ast.ClassDef, decorator: ast.expr, path: str | None
    ) -> ViewNamespace:
        usage = f"@{self.options.decorator_name}(pseudonym=ViewName, ...)"
        if not isinstance(decorator, ast.Call):
            raise SchemaSyntaxError(f"expected {usage}", location=_location(decorator, path))
        if decorator.args:
            raise SchemaSyntaxError(
                f"views must be declared as keyword arguments: {usage}",
                location=_location(decorator.args[0], path),
            )

        mappings = []
        for keyword in decorator.keywords:
            if keyword.arg is None:
                raise SchemaSyntaxError(
                    "unpacked view declarations are not supported",
                    location=_location(keyword, path),
                )
            value = keyword.value
            if isinstance(value, ast.Name):
                view_name = value.id
            elif _is_string(value) and value.value.isidentifier():
                view_name = value.value
            elif isinstance(value, ast.Attribute):
                raise SchemaSyntaxError(
                    f"expected single-segment identifier, got `{ast.unparse(value)}`",
                    location=_location(value, path),
                )
            else:
                raise SchemaSyntaxError(
                    f"expected a view name for {keyword.arg}, got `{ast.unparse(value)}`",
                    location=_location(value, path),
                )
            mappings.append(
                ViewMapping(
                    pseudonym=keyword.arg,
                    view_name=view_name,
                    location=_location(keyword, path, node.name),
                )
            )
        return ViewNamespace(mappings=tuple(mappings))

    # === Fields ===

    def _read_field(
        self, class_name: str, stmt: ast.AnnAssign, path: str | None
    ) -> FieldDefinition:
        name = stmt.target.id  # type: ignore[union-attr]
        symbol = f"{class_name}.{name}"
        type_node, metadata = _split_annotated(stmt.annotation)

        with with_log_context(field_name=name):
            blocks = [self._read_block(item, path, symbol) for item in metadata]
            directives = self.interpreter.interpret(name, blocks)

        return FieldDefinition(
            name=name,
            type_source=ast.unparse(type_node),
            visibility=Visibility.of(name),
            default_source=ast.unparse(stmt.value) if stmt.value is not None else None,
            directives=directives,
            location=_location(stmt, path, symbol),
        )

    def _read_block(self, node: ast.expr, path: str | None, symbol: str) -> DirectiveBlock:
        if not isinstance(node, ast.Call) or not isinstance(node.func, ast.Name):
            raise DirectiveSyntaxError(
                f"expected directive call like hide(a, b), got `{ast.unparse(node)}`",
                location=_location(node, path, symbol),
            )
        if node.keywords:
            raise DirectiveSyntaxError(
                "directive arguments must be view pseudonyms, not keywords",
                location=_location(node.keywords[0], path, symbol),
            )
        return DirectiveBlock(
            category=node.func.id,
            references=tuple(self._read_reference(arg, path, symbol) for arg in node.args),
            location=_location(node, path, symbol),
        )

    def _read_reference(self, node: ast.expr, path: str | None, symbol: str) -> PseudonymRef:
        location = _location(node, path, symbol)
        segments = _dotted_name(node)
        if segments is not None:
            return PseudonymRef(segments=segments, location=location)
        if _is_string(node):
            ref = PseudonymRef.parse(node.value, location)
            if all(segment.isidentifier() for segment in ref.segments):
                return ref
        raise DirectiveSyntaxError(
            f"expected view pseudonym, got `{ast.unparse(node)}`",
            location=location,
        )


class _Failures:
    """Re-raises the first DiagnosticError, or collects all of them."""

    def __init__(self, collect: bool) -> None:
        self.collect = collect
        self.diagnostics: list[Diagnostic] = []

    @contextmanager
    def guard(self) -> Iterator[None]:
        try:
            yield
        except DiagnosticError as exc:
            if not self.collect:
                raise
            self.diagnostics.extend(exc.diagnostics)

    def raise_if_any(self, message: str) -> None:
        if self.diagnostics:
            raise DiagnosticError(self.diagnostics, message=message)


def _location(node: ast.AST, path: str | None, symbol: str | None = None) -> SourceLocation:
    line = getattr(node, "lineno", None)
    column = getattr(node, "col_offset", None)
    return SourceLocation(
        path=path,
        line=line,
        column=column + 1 if column is not None else None,
        symbol=symbol,
    )


def _is_own_module(name: str) -> bool:
    return name == PACKAGE_NAME or name.startswith(f"{PACKAGE_NAME}.")


def _is_string(node: ast.AST) -> bool:
    return isinstance(node, ast.Constant) and isinstance(node.value, str)


def _is_named(node: ast.expr, name: str) -> bool:
    if isinstance(node, ast.Name):
        return node.id == name
    if isinstance(node, ast.Attribute):
        return node.attr == name
    return False


def _is_classvar(annotation: ast.expr) -> bool:
    if isinstance(annotation, ast.Subscript):
        annotation = annotation.value
    return _is_named(annotation, "ClassVar")


def _split_annotated(annotation: ast.expr) -> tuple[ast.expr, list[ast.expr]]:
    """Split ``Annotated[T, *meta]`` into ``T`` and its metadata."""
    if isinstance(annotation, ast.Subscript) and _is_named(annotation.value, "Annotated"):
        inner = annotation.slice
        if isinstance(inner, ast.Tuple) and len(inner.elts) >= 2:
            return inner.elts[0], list(inner.elts[1:])
        return inner, []
    return annotation, []


def _dotted_name(node: ast.expr) -> tuple[str, ...] | None:
    """``a`` -> ("a",), ``a.b.c`` -> ("a", "b", "c"), anything else -> None."""
    parts: list[str] = []
    while isinstance(node, ast.Attribute):
        parts.append(node.attr)
        node = node.value
    if not isinstance(node, ast.Name):
        return None
    parts.append(node.id)
    return tuple(reversed(parts))
