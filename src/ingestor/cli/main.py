"""
Main CLI entry point for data-ingestor using Click.

Usage:
    data-ingestor detect FILE
    data-ingestor preview FILE [--lines N]
    data-ingestor parse FILE [--start-row N] [--types] [--output DIR --format json|parquet]
    data-ingestor validate FILE [--max-size BYTES | --upload]
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click

from ingestor.config import MAX_FILE_SIZE, IngestConfig
from ingestor.errors import IngestError
from ingestor.models import ParsedTable
from ingestor.pipeline import IngestPipeline
from ingestor.tools import SourceFile, detect_file
from ingestor.validation import UploadValidator
from ingestor.workflow import ColumnTypeMap, infer_table_types
from ingestor.writers import write_table


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """Configure logging based on verbosity."""
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


class Config:
    """Shared configuration for CLI commands."""

    def __init__(self) -> None:
        self.verbose = False
        self.debug = False


pass_config = click.make_pass_decorator(Config, ensure=True)


def _source(file: str) -> SourceFile:
    try:
        return SourceFile.from_path(file)
    except IngestError as e:
        raise click.ClickException(e.message)


def _fail(error: IngestError) -> click.ClickException:
    return click.ClickException(f"{error.user_message}\n  [{error.kind}] {error.message}")


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
@click.option("--debug", is_flag=True, help="Enable debug output")
@click.version_option(version="0.1.0", prog_name="data-ingestor")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, debug: bool) -> None:
    """Tabular file ingestion: CSV and Excel uploads into typed tables."""
    ctx.ensure_object(Config)
    ctx.obj.verbose = verbose
    ctx.obj.debug = debug
    setup_logging(verbose=verbose, debug=debug)


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@pass_config
def detect(config: Config, file: str, as_json: bool) -> None:
    """Detect file format and parsing strategy.

    Example:
        data-ingestor detect sales.csv
    """
    source = _source(file)
    info = detect_file(source.name, source.size)

    if as_json:
        output = {
            "filename": info.name,
            "size": info.size,
            "extension": info.extension,
            "format": info.file_format.value,
            "strategy": info.strategy.value,
            "mime_type": info.mime_type,
            "is_large": info.is_large,
        }
        click.echo(json.dumps(output, indent=2))
    else:
        click.echo(f"File: {info.name}")
        click.echo(f"Size: {info.size} bytes")
        click.echo(f"Format: {info.file_format.value}")
        click.echo(f"Strategy: {info.strategy.value}")
        click.echo(f"MIME type: {info.mime_type}")

    if not info.is_supported:
        sys.exit(1)


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--lines", "-n", type=click.IntRange(min=1), default=20, help="Rows to show")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@pass_config
def preview(config: Config, file: str, lines: int, as_json: bool) -> None:
    """Show the first raw rows and suggest a header row.

    Use the suggested value with `parse --start-row`.

    Example:
        data-ingestor preview report.xlsx --lines 10
    """
    source = _source(file)
    try:
        result = IngestPipeline().preview(source, max_lines=lines)
    except IngestError as e:
        raise _fail(e)

    if as_json:
        output = {
            "rows": [list(row) for row in result.raw.rows],
            "encoding": result.raw.encoding,
            "truncated": result.raw.truncated,
            "recommended_start_row": result.recommended_start_row,
            "recommended_header_row": result.recommended_header_row,
        }
        click.echo(json.dumps(output, indent=2))
        return

    for position, row in enumerate(result.raw.rows):
        marker = ">" if position == result.recommended_start_row else " "
        click.echo(f"{marker} {position:>3}  " + " | ".join(row))
    if result.raw.truncated:
        click.echo(click.style("(preview truncated)", fg="yellow"))
    click.echo()
    click.echo(f"Data appears to start at row {result.recommended_start_row}")
    click.echo(f"Suggested --start-row: {result.recommended_header_row}")


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--start-row", type=click.IntRange(min=0), default=0, help="Physical row to use as header")
@click.option("--chunk-size", type=click.IntRange(min=1), default=None, help="Bytes per read for CSV files")
@click.option("--encoding", default=None, help="Force a text encoding")
@click.option("--types", "show_types", is_flag=True, help="Infer and show column types")
@click.option(
    "--output",
    "-o",
    type=click.Path(file_okay=False),
    help="Directory to write the table to",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "parquet"]),
    default="parquet",
    help="Output file format",
)
@click.option("--json", "as_json", is_flag=True, help="Output result as JSON")
@pass_config
def parse(
    config: Config,
    file: str,
    start_row: int,
    chunk_size: Optional[int],
    encoding: Optional[str],
    show_types: bool,
    output: Optional[str],
    output_format: str,
    as_json: bool,
) -> None:
    """Parse a file into a table.

    Example:
        data-ingestor parse sales.csv --start-row 2 --types -o ./out --format json
    """
    logger = logging.getLogger("parse")

    settings = {"encoding": encoding}
    if chunk_size:
        settings["chunk_size"] = chunk_size
    pipeline = IngestPipeline(IngestConfig(**settings))

    source = _source(file)
    logger.info(f"Parsing: {file}")
    try:
        table = pipeline.ingest(
            source,
            start_row=start_row,
            on_progress=lambda fraction: logger.debug(f"Progress: {fraction:.0%}"),
        )
    except IngestError as e:
        raise _fail(e)

    types = infer_table_types(table) if show_types else None

    if as_json:
        output_data = table.to_dict()
        output_data.pop("rows")
        if types is not None:
            output_data["columnTypes"] = {header: t.value for header, t in types.items()}
        click.echo(json.dumps(output_data, indent=2))
    else:
        _print_table_summary(table, types)

    if output:
        logger.info(f"Writing to: {output}")
        try:
            path = write_table(table, Path(output), output_format)
        except (OSError, ValueError) as e:
            raise click.ClickException(f"Error writing output: {e}")
        click.echo(click.style(f"\nOutput file: {path}", fg="green"))


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--max-size", type=click.IntRange(min=1), default=MAX_FILE_SIZE, help="Largest accepted size in bytes")
@click.option("--upload", is_flag=True, help="Apply the upload size limit instead of --max-size")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@pass_config
def validate(config: Config, file: str, max_size: int, upload: bool, as_json: bool) -> None:
    """Run pre-flight checks on a file.

    Checks the extension and size without parsing the content.

    Example:
        data-ingestor validate upload.xls --upload
    """
    if upload:
        max_size = IngestConfig().upload_limit
    source = _source(file)
    validation = UploadValidator(max_size=max_size).validate(source)

    if as_json:
        output = {
            "is_valid": validation.is_valid,
            "errors": [
                {"field": i.field, "message": i.message, "severity": i.severity}
                for i in validation.errors
            ],
            "warnings": [
                {"field": i.field, "message": i.message, "severity": i.severity}
                for i in validation.warnings
            ],
        }
        click.echo(json.dumps(output, indent=2))
    else:
        status = (
            click.style("PASSED", fg="green")
            if validation.is_valid
            else click.style("FAILED", fg="red")
        )
        click.echo(f"Validation: {status}")

        if validation.errors:
            click.echo(click.style("Errors:", fg="red"))
            for issue in validation.errors:
                click.echo(f"  ✗ {issue.field}: {issue.message}")

        if validation.warnings:
            click.echo(click.style("Warnings:", fg="yellow"))
            for issue in validation.warnings:
                click.echo(f"  ⚠ {issue.field}: {issue.message}")

    if not validation.is_valid:
        sys.exit(1)


def _print_table_summary(table: ParsedTable, types: Optional[ColumnTypeMap]) -> None:
    """Print a summary of a parsed table."""
    click.echo(f"Table: {table.source_name or 'unnamed'}")
    if table.delimiter:
        click.echo(f"  Delimiter: {table.delimiter!r}")
    if table.encoding:
        click.echo(f"  Encoding: {table.encoding}")
    if table.sheet_name:
        click.echo(f"  Sheet: {table.sheet_name}")
    click.echo(f"  Rows: {table.row_count}")
    click.echo(f"  Columns: {len(table.headers)}")

    for position, header in enumerate(table.headers):
        suffix = f" ({types[header].value})" if types is not None else ""
        click.echo(f"    {position}: {header}{suffix}")

    if table.preview:
        click.echo("  Preview:")
        for record in table.preview:
            click.echo("    " + " | ".join("" if v is None else str(v) for v in record.values_tuple))


def app(args: Optional[list[str]] = None) -> int:
    """
    Main application entry point (for testing).

    Args:
        args: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success)
    """
    try:
        cli(args, standalone_mode=False)
        return 0
    except click.ClickException as e:
        e.show()
        return 1
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else 1
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        return 1


def main() -> None:
    """CLI entry point."""
    cli()


if __name__ == "__main__":
    main()
