"""
Command-line interface for pbc-gen.

Reads a PocketBase schema export, assembles the Go emission model and
writes the rendered models file.
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any, Dict, List, Sequence

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import __version__
from .codegen.core.config import ConfigError, ConfigManager, GeneratorConfig
from .codegen.core.generator import (
    ErrorType,
    GenerationResult,
    GeneratorError,
    generate_code,
    wrap_file_error,
)
from .codegen.core.schema import CollectionSchema, SchemaParseError
from .codegen.core.version import (
    SchemaLoadResult,
    SchemaVersion,
    SchemaVersionDetector,
    SchemaVersionError,
    load_schema,
)
from .codegen.languages.go import build_emission_model
from .codegen.registry import get_generator
from .logging_config import get_logger, setup_logging
from .utils import SchemaLoaderError, read_schema

logger = get_logger(__name__)

console = Console()

# Field types accepted by --validate-schema without a warning.
SUPPORTED_FIELD_TYPES = frozenset(
    {
        "text", "email", "url", "number", "bool", "select", "json",
        "file", "relation", "user", "date", "autodate", "password",
        "editor", "richtext", "datetime", "time", "uuid", "slug", "color",
    }
)

FATAL_ERRORS = (
    SchemaVersionError,
    SchemaParseError,
    SchemaLoaderError,
    ConfigError,
    GeneratorError,
    FileNotFoundError,
)


def create_parser() -> argparse.ArgumentParser:
    """Build the pbc-gen argument parser."""
    parser = argparse.ArgumentParser(
        prog="pbc-gen",
        description="Generate typed Go models from a PocketBase schema export",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  pbc-gen --schema ./pb_schema.json --path ./models/models.gen.go
  pbc-gen --url http://127.0.0.1:8090/pb_schema.json --pkgname models
  pbc-gen --no-files --force-version legacy --validate-schema
        """.strip(),
    )

    io_group = parser.add_argument_group("input/output")
    io_group.add_argument("--schema", metavar="FILE", help="Schema export (default: ./pb_schema.json)")
    io_group.add_argument("--url", help="Fetch the schema export from a URL instead of a file")
    io_group.add_argument("--path", metavar="FILE", help="Output file (default: ./models.gen.go)")
    io_group.add_argument("--config", metavar="FILE", help="JSON configuration file")

    go_group = parser.add_argument_group("Go output")
    go_group.add_argument("--pkgname", metavar="NAME", help="Go package name (default: models)")
    go_group.add_argument(
        "--jsonlib",
        metavar="IMPORT",
        help="JSON library providing json.RawMessage (default: github.com/goccy/go-json)",
    )
    style = go_group.add_mutually_exclusive_group()
    style.add_argument(
        "--generic",
        dest="use_generic",
        action="store_true",
        default=None,
        help="Use generic Get[T] accessors",
    )
    style.add_argument(
        "--legacy",
        dest="use_generic",
        action="store_false",
        help="Use typed Get*/Get*Pointer accessors (default)",
    )

    feature_group = parser.add_argument_group("generated features")
    feature_group.add_argument(
        "--enums",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Enum constants for select fields (default: on)",
    )
    feature_group.add_argument(
        "--relations",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Relation handle types (default: on)",
    )
    feature_group.add_argument(
        "--files",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="File reference types (default: on)",
    )

    schema_group = parser.add_argument_group("schema handling")
    schema_group.add_argument(
        "--force-version",
        metavar="{latest,legacy}",
        help="Use this schema format instead of the detected one",
    )
    schema_group.add_argument(
        "--validate-schema",
        action="store_true",
        default=None,
        help="Check the schema format before generating",
    )

    parser.add_argument("--verbose", "-v", action="store_true", default=None, help="Debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def build_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """Map parsed arguments onto GeneratorConfig keys; unset options stay None."""
    return {
        "schema_path": args.schema,
        "output_file": args.path,
        "package_name": args.pkgname,
        "json_library": args.jsonlib,
        "use_generic": args.use_generic,
        "generate_enums": args.enums,
        "generate_relations": args.relations,
        "generate_files": args.files,
        "force_version": args.force_version,
        "validate_schema": args.validate_schema,
        "verbose": args.verbose,
    }


def validate_collection(schema: CollectionSchema, version: SchemaVersion) -> List[str]:
    """
    Check one collection against the expected format.

    Returns:
        Warnings for field types the generator may not handle

    Raises:
        GeneratorError: With the schema_validate category
    """
    if schema.system:
        return []

    problem = ""
    if version is SchemaVersion.LATEST and not schema.fields:
        problem = "latest schema should have a fields array"
    elif version is SchemaVersion.LEGACY and not schema.fields and schema.type != "view":
        problem = "legacy schema should have a schema array"
    elif version is SchemaVersion.UNKNOWN:
        problem = "cannot validate unknown schema version"
    else:
        missing = next((f for f in schema.fields if not f.type), None)
        if missing is not None:
            problem = f"field {missing.name!r} missing type"

    if problem:
        raise (
            GeneratorError(ErrorType.SCHEMA_VALIDATE, f"collection {schema.name!r} validation failed: {problem}")
            .with_detail("collection", schema.name)
            .with_detail("schema_version", str(version))
        )

    return [
        f"Field {schema.name}.{f.name} has potentially unsupported type: {f.type}"
        for f in schema.fields
        if f.type not in SUPPORTED_FIELD_TYPES
    ]


def validate_schema_format(data: bytes, loaded: SchemaLoadResult) -> List[str]:
    """
    Check the whole document against the version generation will use.

    A forced version that differs from the detected one is reported as a
    warning; the collections are then checked against the forced version.
    """
    warnings: List[str] = []
    if loaded.is_forced:
        warnings.append(
            f"Forced version ({loaded.schema_version}) differs from detected "
            f"version ({loaded.detected_version})"
        )
    else:
        SchemaVersionDetector().validate_schema(data, loaded.schema_version)

    for schema in loaded.schemas:
        warnings.extend(validate_collection(schema, loaded.schema_version))

    logger.info("Schema validation passed for %d collections", len(loaded.schemas))
    return warnings


def write_output(path: str | Path, code: str) -> Path:
    """Write generated code, creating the parent directory when missing."""
    output = Path(path)
    try:
        output.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise wrap_file_error(e, "create", str(output.parent)) from e
    try:
        output.write_text(code, encoding="utf-8")
    except OSError as e:
        raise wrap_file_error(e, "write", str(output)) from e
    logger.info("Wrote %d bytes to %s", len(code.encode("utf-8")), output)
    return output


def print_summary(
    config: GeneratorConfig, source: str, loaded: SchemaLoadResult, result: GenerationResult
) -> None:
    """Render a rich summary of the run."""
    version = str(loaded.schema_version)
    if loaded.is_forced:
        version += f" (forced, detected {loaded.detected_version})"

    table = Table(
        title="📊 Generation Summary",
        box=box.SIMPLE,
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("Property", style="bold")
    table.add_column("Value", style="green")

    table.add_row("Schema", escape(source))
    table.add_row("Schema Version", version)
    table.add_row("Package", config.package_name)
    table.add_row("Output", escape(str(config.output_file)))
    table.add_row("Accessors", "generic Get[T]" if config.use_generic else "typed")
    for key in ("collections", "enums", "relation_types", "file_types"):
        table.add_row(key.replace("_", " ").title(), str(result.metadata.get(key, 0)))

    console.print()
    console.print(table)


def print_warnings(warnings: Sequence[str]) -> None:
    if not warnings:
        return
    console.print("\n[yellow]⚠️  Warnings:[/yellow]")
    for warning in warnings:
        console.print(f"  [yellow]•[/yellow] {escape(warning)}")
    console.print()


def run(config: GeneratorConfig, url: str | None = None) -> int:
    """
    Run one generation with a resolved configuration.

    Raises:
        Any of FATAL_ERRORS; ``main`` reports them.
    """
    source, data = read_schema(file_path=None if url else config.schema_path, url=url)
    loaded = load_schema(data, config.force_version)

    warnings: List[str] = []
    if config.validate_schema:
        warnings.extend(validate_schema_format(data, loaded))

    model = build_emission_model(loaded.schemas, config, loaded.schema_version)
    result = generate_code(get_generator("go"), model)
    if not result.success:
        console.print(f"[red]✗ {escape(result.error_message or 'Code generation failed')}[/red]")
        return 1

    output = write_output(config.output_file, result.code)

    print_warnings(warnings + result.warnings)
    print_summary(config, source, loaded, result)
    console.print(f"[green]✓[/green] Generated models saved to [cyan]{escape(str(output))}[/cyan]")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """
    Entry point for the pbc-gen command.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    args = create_parser().parse_args(argv)
    setup_logging(verbose=bool(args.verbose))

    manager = ConfigManager()
    try:
        config = manager.get_config(build_overrides(args), args.config)
        if config.verbose and not args.verbose:
            setup_logging(verbose=True)

        report = manager.validate_config(config, check_files=not args.url)
        for issue in report.warnings:
            console.print(f"[yellow]⚠️  {escape(str(issue))}[/yellow]")
        if report.has_errors():
            for issue in report.errors:
                console.print(f"[red]✗ {escape(str(issue))}[/red]")
            return 1

        logger.info("Generating Go models from %s", args.url or config.schema_path)
        return run(config, url=args.url)

    except FATAL_ERRORS as e:
        logger.debug("Generation aborted", exc_info=True)
        console.print(f"[red]✗ Error:[/red] {escape(str(e))}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
