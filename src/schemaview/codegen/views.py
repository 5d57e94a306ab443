"""
View model code generator.

Renders the views of every schema in a source module as Python source. The
generated module keeps the source module's other statements in order and
replaces each schema class with its views.

Example output:
    class PublicUser(BaseModel):
        id: int
        note: str | None = None


    class AdminUser(BaseModel):
        id: int
        secret: str
        note: str
"""

from dataclasses import dataclass, field
from pathlib import Path

from schemaview.codegen.emitter import ViewGenerationReport, generate_views
from schemaview.core.errors import Diagnostic
from schemaview.core.options import DEFAULT_OPTIONS, GeneratorOptions
from schemaview.core.types import GeneratedField, GeneratedView, SchemaDeclaration
from schemaview.logging import get_logger
from schemaview.parser.source import SourceModule, SourceSchemaReader

logger = get_logger(__name__)

_BLOCK_PREFIXES = ("class ", "def ", "async def ", "@")


@dataclass
class GeneratedModule:
    """The rendered view module."""

    module_name: str
    content: str

    @property
    def filename(self) -> str:
        return f"{self.module_name}.py"

    def write(self, directory: Path | str) -> Path:
        """Write the module into a directory, creating the directory if needed."""
        path = Path(directory) / self.filename
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.content, encoding="utf-8")
        return path


@dataclass
class SkippedView:
    """A declared view that failed and is missing from the module."""

    schema_name: str
    view_name: str


@dataclass
class GenerationResult:
    """
    The rendered module plus what was left out of it.

    The module is always rendered; a failed view is skipped and its
    diagnostics are collected here.
    """

    module: GeneratedModule
    diagnostics: list[Diagnostic] = field(default_factory=list)
    skipped: list[SkippedView] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.diagnostics

    @property
    def warnings(self) -> list[str]:
        return [
            f"View {view.view_name} of {view.schema_name} was not generated"
            for view in self.skipped
        ]

    def write(self, directory: Path | str) -> Path:
        return self.module.write(directory)


class ViewCodeGenerator:
    """
    Generates view model source code for a schema module.

    Failed views are never rendered; their diagnostics are returned in the
    GenerationResult instead.
    """

    def __init__(
        self,
        module: SourceModule,
        reports: list[ViewGenerationReport],
        options: GeneratorOptions | None = None,
    ) -> None:
        """
        Initialize the generator.

        Args:
            module: The parsed schema module
            reports: One report per schema declaration, in module order
            options: Generator options
        """
        if len(reports) != len(module.declarations):
            raise ValueError("expected one report per schema declaration")
        self.module = module
        self.reports = reports
        self.options = options or DEFAULT_OPTIONS

    @classmethod
    def from_module(
        cls, module: SourceModule, options: GeneratorOptions | None = None
    ) -> "ViewCodeGenerator":
        """Run the view pipeline for every schema of a parsed module."""
        reports = [
            generate_views(declaration.schema_def, declaration.namespace, options)
            for declaration in module.declarations
        ]
        return cls(module, reports, options)

    @classmethod
    def from_source(
        cls,
        source: str,
        path: str | None = None,
        options: GeneratorOptions | None = None,
    ) -> "ViewCodeGenerator":
        """Read schema source text and run the view pipeline."""
        module = SourceSchemaReader(options).read(source, path=path)
        return cls.from_module(module, options)

    @classmethod
    def from_file(
        cls, path: Path | str, options: GeneratorOptions | None = None
    ) -> "ViewCodeGenerator":
        """Read a schema file and run the view pipeline."""
        module = SourceSchemaReader(options).read_file(path)
        return cls.from_module(module, options)

    def generate(self) -> GenerationResult:
        """Generate the view module."""
        result = GenerationResult(
            module=GeneratedModule(
                module_name=self.options.module_name,
                content=self._generate_views_file(),
            )
        )

        for report in self.reports:
            result.diagnostics.extend(report.diagnostics)
            result.skipped.extend(
                SkippedView(schema_name=report.schema_def.name, view_name=mapping.view_name)
                for mapping in report.namespace.mappings
                if mapping.pseudonym in report.failures
            )

        logger.debug(
            "Generated view module",
            module_name=result.module.module_name,
            view_count=sum(len(report.views) for report in self.reports),
            codes=[d.code for d in result.diagnostics],
        )
        return result

    def _generate_views_file(self) -> str:
        """Generate the module content."""
        chunks: list[str] = []
        reports = iter(self.reports)

        for item in self.module.items:
            if isinstance(item, SchemaDeclaration):
                report = next(reports)
                chunks.extend("\n".join(self._generate_view_class(view)) for view in report.views)
            else:
                chunks.append(item)

        if self._needs_optional_import():
            chunks.insert(self._future_import_count(chunks), "from typing import Optional")

        lines: list[str] = []
        if self.options.header:
            lines.extend(self._generate_header())
        elif self.module.docstring is not None:
            lines.extend([*_docstring_lines(self.module.docstring), ""])

        previous: str | None = None
        for chunk in chunks:
            if previous is not None:
                lines.extend(["", ""] if _is_block(previous) or _is_block(chunk) else [])
            lines.append(chunk)
            previous = chunk

        return "\n".join(lines) + "\n"

    def _generate_header(self) -> list[str]:
        lines = ['"""', "Auto-generated view models.", ""]
        if self.module.path:
            lines.append(f"Generated from: {Path(self.module.path).name}")
        lines.extend(['Do not edit manually - regenerate from the schema definition.', '"""', ""])
        return lines

    def _generate_view_class(self, view: GeneratedView) -> list[str]:
        """Generate a single view class."""
        arguments = [*view.bases, *view.keywords]
        header = f"class {view.name}({', '.join(arguments)}):" if arguments else f"class {view.name}:"
        lines = [*view.decorators, header]

        sections: list[list[str]] = []
        if view.docstring:
            sections.append(_docstring_lines(view.docstring))
        if view.body:
            sections.append(list(view.body))
        if view.fields:
            sections.append([self._generate_field(field) for field in view.fields])

        if not sections:
            lines.append("    pass")
            return lines

        for index, section in enumerate(sections):
            if index:
                lines.append("")
            lines.extend(_indented(text) for text in section)
        return lines

    def _generate_field(self, field: GeneratedField) -> str:
        """Generate a field definition line."""
        type_str = field.render_type(self.options.optional_style)
        if field.optional:
            return f"{field.name}: {type_str} = None"
        if field.default_source is not None:
            return f"{field.name}: {type_str} = {field.default_source}"
        return f"{field.name}: {type_str}"

    def _needs_optional_import(self) -> bool:
        if self.options.optional_style != "optional":
            return False
        return any(
            field.optional
            for report in self.reports
            for view in report.views
            for field in view.fields
        )

    def _future_import_count(self, chunks: list[str]) -> int:
        count = 0
        for chunk in chunks:
            if not chunk.startswith("from __future__ import"):
                break
            count += 1
        return count


def _is_block(chunk: str) -> bool:
    return chunk.startswith(_BLOCK_PREFIXES) or "\n" in chunk


def _docstring_lines(text: str) -> list[str]:
    lines = text.strip().split("\n")
    if len(lines) == 1:
        return [f'"""{lines[0]}"""']
    return ['"""', *lines, '"""']


def _indented(text: str) -> str:
    """Indent every non-blank line of a class body statement by one level."""
    return "\n".join(f"    {line}" if line else line for line in text.split("\n"))
