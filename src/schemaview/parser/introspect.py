"""
Class schema reader.

Reads a schema declaration from a live class, using the directive markers
found in its ``Annotated`` field annotations.

Locations come from the class's source when ``inspect`` can find it: each
field points at its own line and each pseudonym at its argument. Classes
without retrievable source (built dynamically, or defined in a REPL) are
located at the class only.
"""

import ast
import inspect
import textwrap
from typing import Annotated, Any, ClassVar, get_args, get_origin

from schemaview.core.errors import (
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
from schemaview.directives.markers import Directive
from schemaview.logging import get_logger, with_log_context

logger = get_logger(__name__)


class ClassSchemaReader:
    """Reads schema declarations from classes."""

    def __init__(
        self,
        options: GeneratorOptions | None = None,
        interpreter: DirectiveInterpreter | None = None,
    ) -> None:
        self.options = options or DEFAULT_OPTIONS
        self.interpreter = interpreter or DirectiveInterpreter()

    def read(self, cls: type, mapping: dict[str, str]) -> SchemaDeclaration:
        """
        Read a class and its view mapping.

        Only the class's own annotations are fields; ``ClassVar`` annotations
        are skipped.

        Raises:
            SchemaSyntaxError: annotations cannot be resolved or a view name
                is not an identifier
            DiagnosticError: a field's directives cannot be interpreted
        """
        source = _ClassSource.of(cls)
        location = source.location

        with with_log_context(source_path=location.path, schema_name=cls.__name__):
            namespace = self._read_namespace(mapping, location)

            try:
                hints = inspect.get_annotations(cls, eval_str=True)
            except NameError as exc:
                raise SchemaSyntaxError(
                    f"cannot resolve annotations of {cls.__qualname__}: {exc}",
                    location=location,
                ) from exc

            fields: list[FieldDefinition] = []
            diagnostics = []
            for name, hint in hints.items():
                if hint is ClassVar or get_origin(hint) is ClassVar:
                    continue
                try:
                    fields.append(self._read_field(name, hint, source))
                except DiagnosticError as exc:
                    if not self.options.collect_all_errors:
                        raise
                    diagnostics.extend(exc.diagnostics)

            if diagnostics:
                raise DiagnosticError(diagnostics, message=f"cannot read schema {cls.__qualname__}")

            schema = SchemaDefinition(
                name=cls.__name__,
                visibility=Visibility.of(cls.__name__),
                fields=tuple(fields),
                bases=tuple(_qualified_name(base) for base in cls.__bases__),
                docstring=inspect.cleandoc(cls.__dict__["__doc__"])
                if cls.__dict__.get("__doc__")
                else None,
                location=location,
            )
            logger.debug(
                "Read schema class",
                field_count=len(schema.fields),
                view_count=len(namespace.mappings),
            )
            return SchemaDeclaration(schema_def=schema, namespace=namespace)

    def _read_namespace(self, mapping: dict[str, str], location: SourceLocation) -> ViewNamespace:
        mappings = []
        for pseudonym, view_name in mapping.items():
            if not isinstance(view_name, str) or not view_name.isidentifier():
                raise SchemaSyntaxError(
                    f"expected a view name for {pseudonym}, got {view_name!r}",
                    location=location,
                )
            mappings.append(ViewMapping(pseudonym=pseudonym, view_name=view_name, location=location))
        return ViewNamespace(mappings=tuple(mappings))

    def _read_field(self, name: str, hint: Any, source: "_ClassSource") -> FieldDefinition:
        inner, metadata = _split_annotated(hint)
        location = source.field_location(name)
        block_nodes = source.directive_nodes(name, len(metadata))

        blocks = []
        for item, node in zip(metadata, block_nodes):
            block_location = source.node_location(node, location)
            if not isinstance(item, Directive):
                raise DirectiveSyntaxError(
                    f"expected directive marker like hide('a'), got {item!r}",
                    location=block_location,
                )

            argument_nodes: list[ast.expr | None] = [None] * len(item.names)
            if isinstance(node, ast.Call) and len(node.args) == len(item.names):
                argument_nodes = list(node.args)

            references = []
            for pseudonym, argument in zip(item.names, argument_nodes):
                reference_location = source.node_location(argument, block_location)
                if not isinstance(pseudonym, str):
                    raise DirectiveSyntaxError(
                        f"view pseudonyms must be strings, got {pseudonym!r}",
                        location=reference_location,
                    )
                references.append(PseudonymRef.parse(pseudonym, reference_location))
            blocks.append(
                DirectiveBlock(
                    category=item.category, references=tuple(references), location=block_location
                )
            )

        with with_log_context(field_name=name):
            directives = self.interpreter.interpret(name, blocks)

        return FieldDefinition(
            name=name,
            type_source=_type_source(inner),
            annotation=inner,
            visibility=Visibility.of(name),
            directives=directives,
            location=location,
        )


class _ClassSource:
    """Source positions of a class, its fields and their directive calls."""

    def __init__(
        self,
        cls: type,
        path: str | None = None,
        start: int | None = None,
        indent: int = 0,
        node: ast.ClassDef | None = None,
    ) -> None:
        self.qualname = cls.__qualname__
        self.location = SourceLocation(path=path, line=start, symbol=self.qualname)
        self._start = start
        self._indent = indent
        self._fields: dict[str, ast.AnnAssign] = {}
        if node is not None:
            for stmt in node.body:
                if isinstance(stmt, ast.AnnAssign) and isinstance(stmt.target, ast.Name):
                    self._fields[stmt.target.id] = stmt

    @classmethod
    def of(cls, target: type) -> "_ClassSource":
        try:
            path = inspect.getsourcefile(target)
            lines, start = inspect.getsourcelines(target)
        except (OSError, TypeError):
            return cls(target)

        text = "".join(lines)
        dedented = textwrap.dedent(text)
        indent = _leading_spaces(lines[0]) - _leading_spaces(dedented.splitlines()[0])
        try:
            tree = ast.parse(dedented)
        except SyntaxError:
            return cls(target, path, start)

        node = next(
            (n for n in tree.body if isinstance(n, ast.ClassDef) and n.name == target.__name__),
            None,
        )
        return cls(target, path, start, indent, node)

    def field_location(self, name: str) -> SourceLocation:
        symbol = f"{self.qualname}.{name}"
        stmt = self._fields.get(name)
        if stmt is None:
            return self.location.model_copy(update={"symbol": symbol})
        return self.node_location(stmt, self.location).model_copy(update={"symbol": symbol})

    def directive_nodes(self, name: str, count: int) -> list[ast.expr | None]:
        """
        The source expressions of a field's ``Annotated`` metadata.

        Falls back to ``None`` for each item when the source does not spell
        out the same number of items (aliases, nested ``Annotated``).
        """
        stmt = self._fields.get(name)
        annotation = stmt.annotation if stmt is not None else None
        if (
            isinstance(annotation, ast.Subscript)
            and isinstance(annotation.slice, ast.Tuple)
            and len(annotation.slice.elts) == count + 1
        ):
            return list(annotation.slice.elts[1:])
        return [None] * count

    def node_location(self, node: ast.AST | None, fallback: SourceLocation) -> SourceLocation:
        if node is None or self._start is None:
            return fallback
        return fallback.model_copy(
            update={
                "line": self._start + node.lineno - 1,  # type: ignore[attr-defined]
                "column": node.col_offset + self._indent + 1,  # type: ignore[attr-defined]
            }
        )


def _leading_spaces(line: str) -> int:
    return len(line) - len(line.lstrip())


def _split_annotated(hint: Any) -> tuple[Any, tuple[Any, ...]]:
    if get_origin(hint) is Annotated:
        inner, *metadata = get_args(hint)
        return inner, tuple(metadata)
    return hint, ()


def _type_source(tp: Any) -> str:
    """Render a type the way it would be written in source."""
    if isinstance(tp, type) and not get_args(tp):
        return tp.__qualname__
    return repr(tp).replace("typing.", "")


def _qualified_name(cls: type) -> str:
    if cls.__module__ in ("builtins", None):
        return cls.__qualname__
    return f"{cls.__module__}.{cls.__qualname__}"
