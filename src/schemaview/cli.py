"""
schemaview command line interface.

Commands:
    generate  Write the view module for a schema file
    check     Report diagnostics for a schema file
    inspect   Show which fields each view keeps
"""

import argparse
import sys
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from schemaview import __version__
from schemaview.codegen.views import ViewCodeGenerator
from schemaview.core.errors import Diagnostic, DiagnosticError
from schemaview.core.options import GeneratorOptions, for_mode
from schemaview.logging import LogFormat, LogLevel, configure_logging, get_logger

logger = get_logger(__name__)

console = Console()
err_console = Console(stderr=True)


def _options(args: argparse.Namespace) -> GeneratorOptions:
    profile = for_mode("lenient" if args.collect_all_errors else "strict")
    return profile.with_overrides(
        optional_style=getattr(args, "optional_style", profile.optional_style),
        module_name=getattr(args, "module_name", None) or Path(args.schema).stem + "_views",
    )


def _print_diagnostics(diagnostics: list[Diagnostic]) -> None:
    for diagnostic in diagnostics:
        err_console.print(
            diagnostic.format(), style="red", markup=False, highlight=False, soft_wrap=True
        )


def _load(args: argparse.Namespace, options: GeneratorOptions) -> ViewCodeGenerator | None:
    """Read the schema file; prints the problem and returns None on failure."""
    try:
        return ViewCodeGenerator.from_file(args.schema, options)
    except OSError as exc:
        err_console.print(f"[red]Error: cannot read {args.schema}: {exc.strerror}[/red]")
    except DiagnosticError as exc:
        _print_diagnostics(exc.diagnostics)
    return None


def cmd_generate(args: argparse.Namespace) -> int:
    """Generate the view module."""
    options = _options(args)
    generator = _load(args, options)
    if generator is None:
        return 1

    result = generator.generate()
    if not result.ok:
        _print_diagnostics(result.diagnostics)
        for warning in result.warnings:
            err_console.print(f"[yellow]{warning}[/yellow]", highlight=False)
        return 1

    path = result.write(args.output)
    console.print(f"[green]Wrote {escape(str(path))}[/green]", highlight=False, soft_wrap=True)
    return 0


def cmd_check(args: argparse.Namespace) -> int:
    """Run the pipeline without writing anything."""
    options = _options(args)
    generator = _load(args, options)
    if generator is None:
        return 1

    result = generator.generate()
    if not result.ok:
        _print_diagnostics(result.diagnostics)
        return 1

    view_count = sum(len(report.views) for report in generator.reports)
    console.print(
        f"[green]OK[/green]: {len(generator.reports)} schema(s), {view_count} view(s)",
        highlight=False,
    )
    return 0


def cmd_inspect(args: argparse.Namespace) -> int:
    """Print a fields x views table per schema."""
    options = _options(args)
    generator = _load(args, options)
    if generator is None:
        return 1

    for report in generator.reports:
        table = Table(title=report.schema_def.name)
        table.add_column("Field", style="bold")
        for view in report.views:
            table.add_column(view.name)

        for field_def in report.schema_def.fields:
            cells = []
            for view in report.views:
                field = view.get_field(field_def.name)
                if field is None:
                    cells.append("-")
                else:
                    type_str = f"{field.type_source}?" if field.optional else field.type_source
                    cells.append(escape(type_str))
            table.add_row(escape(field_def.name), *cells)

        console.print(table)

    diagnostics = [d for report in generator.reports for d in report.diagnostics]
    _print_diagnostics(diagnostics)
    return 1 if diagnostics else 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="schemaview",
        description="Generate hide/show/optional views of annotated schema classes",
    )
    parser.add_argument("--version", action="version", version=f"schemaview {__version__}")
    parser.add_argument(
        "--log-level",
        choices=[level.value for level in LogLevel],
        default=LogLevel.WARNING.value,
        help="Log level (default: WARNING)",
    )
    parser.add_argument(
        "--log-format",
        choices=[fmt.value for fmt in LogFormat],
        default=LogFormat.TEXT.value,
        help="Log output format (default: text)",
    )

    # Common arguments
    schema_parser = argparse.ArgumentParser(add_help=False)
    schema_parser.add_argument("schema", type=Path, help="Path to the schema module")
    schema_parser.add_argument(
        "--collect-all-errors",
        action="store_true",
        help="Report every failing field instead of stopping at the first one",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    generate_parser = subparsers.add_parser(
        "generate", help="Write the generated view module", parents=[schema_parser]
    )
    generate_parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=Path("."),
        help="Output directory (default: current directory)",
    )
    generate_parser.add_argument(
        "--module-name",
        default=None,
        help="Name of the generated module (default: <schema>_views)",
    )
    generate_parser.add_argument(
        "--optional-style",
        choices=["union", "optional"],
        default="union",
        help="Render optional fields as 'T | None' or 'Optional[T]' (default: union)",
    )

    subparsers.add_parser("check", help="Report diagnostics", parents=[schema_parser])
    subparsers.add_parser("inspect", help="Show fields kept by each view", parents=[schema_parser])

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(level=args.log_level, format=args.log_format)
    logger.debug("Running command", command=args.command)

    if args.command == "generate":
        return cmd_generate(args)
    if args.command == "check":
        return cmd_check(args)
    if args.command == "inspect":
        return cmd_inspect(args)

    parser.print_help()
    return 2


if __name__ == "__main__":
    sys.exit(main())
