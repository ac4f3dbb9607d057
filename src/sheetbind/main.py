from __future__ import annotations

import importlib
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

import typer
from pythonjsonlogger.json import JsonFormatter

from sheetbind.config import settings
from sheetbind.data.workbook import read_raw_table
from sheetbind.exceptions import SheetBindError
from sheetbind.formulas.builder import build
from sheetbind.formulas.templates import CATALOG
from sheetbind.mapping.row_mapper import from_table
from sheetbind.reconcile.headers import check_structure, diff
from sheetbind.schema.resolver import check_record_type, resolve, validate
from sheetbind.sheets.layout import sheet_config_from_schema
from sheetbind.sheets.messages import has_errors

cli = typer.Typer(help="sheetbind: typed records over spreadsheet tables")
logger = logging.getLogger(__name__)


CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
JSON_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def log_handler(log_format: str) -> logging.Handler:
    """stderr handler for `logging.format` (console | json)."""
    handler = logging.StreamHandler(sys.stderr)
    if log_format.lower() == "json":
        # extra={...} fields become top-level keys
        handler.setFormatter(
            JsonFormatter(JSON_FORMAT, rename_fields={"asctime": "time", "levelname": "level", "name": "logger"})
        )
    else:
        handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    return handler


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else getattr(logging, settings.logging.level.upper(), logging.INFO)
    logging.basicConfig(level=level, handlers=[log_handler(settings.logging.format)])


def import_record_type(target: str) -> type:
    """'package.module:ClassName' -> class."""
    module_name, _, attr = target.partition(":")
    if not module_name or not attr:
        raise typer.BadParameter(f"expected module:Class, got '{target}'")
    try:
        module = importlib.import_module(module_name)
        return getattr(module, attr)
    except (ImportError, AttributeError) as exc:
        raise typer.BadParameter(f"cannot import {target}: {exc}") from exc


def _parse_bindings(pairs: List[str]) -> dict[str, str]:
    bindings = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep:
            raise typer.BadParameter(f"binding must look like name=value, got '{pair}'")
        bindings[key.strip()] = value
    return bindings


@cli.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging")) -> None:
    setup_logging(verbose)


@cli.command()
def version() -> None:
    """Print runtime version."""
    typer.echo(f"{settings.app.name} {settings.app.version}")


@cli.command()
def templates() -> None:
    """List formula templates and their placeholders."""
    for name, template in CATALOG.items():
        typer.echo(f"{name}: {', '.join(template.placeholders)}")


@cli.command()
def formula(
    name: str = typer.Argument(..., help="Template name"),
    bind: List[str] = typer.Option([], "--bind", "-b", help="Placeholder binding, name=value"),
) -> None:
    """Render a formula template."""
    try:
        typer.echo(build(name, _parse_bindings(bind)))
    except SheetBindError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1)


@cli.command()
def check(
    workbook: Path = typer.Argument(..., help="XLSX export to inspect"),
    record: str = typer.Option(..., "--record", "-r", help="Record type as module:Class"),
    sheet: Optional[str] = typer.Option(None, "--sheet", "-s", help="Worksheet name (active sheet by default)"),
) -> None:
    """Compare a worksheet's header row with a record type."""
    record_type = import_record_type(record)
    try:
        table = read_raw_table(workbook, sheet)
    except SheetBindError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1)

    header = table[0] if table else []
    messages = check_structure(table, sheet_name=sheet or "")
    messages += check_record_type(record_type) + validate(record_type, header)
    messages += diff(header, resolve(record_type), sheet_name=sheet or "")
    for message in messages:
        typer.echo(f"{message.level.value}: {message.message}")
    if not messages:
        typer.echo("Headers match.")
    if has_errors(messages):
        raise typer.Exit(code=1)


@cli.command()
def load(
    workbook: Path = typer.Argument(..., help="XLSX export to read"),
    record: str = typer.Option(..., "--record", "-r", help="Record type as module:Class"),
    sheet: Optional[str] = typer.Option(None, "--sheet", "-s", help="Worksheet name (active sheet by default)"),
) -> None:
    """Map a worksheet to records and print them as JSON."""
    record_type = import_record_type(record)
    try:
        table = read_raw_table(workbook, sheet)
    except SheetBindError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1)
    records = from_table(table, record_type)
    typer.echo(json.dumps([r.model_dump(mode="json") for r in records], ensure_ascii=False, indent=2))


@cli.command()
def layout(
    record: str = typer.Option(..., "--record", "-r", help="Record type as module:Class"),
    name: str = typer.Option(..., "--name", "-n", help="Sheet name"),
) -> None:
    """Print the sheet configuration generated for a record type."""
    config = sheet_config_from_schema(import_record_type(record), name)
    typer.echo(config.model_dump_json(indent=2, exclude_none=True))


@cli.command()
def pull(
    sheet: str = typer.Argument(..., help="Sheet (tab) name"),
    record: str = typer.Option(..., "--record", "-r", help="Record type as module:Class"),
    spreadsheet_id: Optional[str] = typer.Option(None, "--spreadsheet", help="Overrides google.spreadsheet_id"),
) -> None:
    """Fetch a hosted sheet and print records and header findings as JSON."""
    from sheetbind.sync.provider import GoogleSheetsValuesProvider
    from sheetbind.sync.service import SheetSync

    record_type = import_record_type(record)
    provider = GoogleSheetsValuesProvider.from_settings(settings.google)
    sync = SheetSync(provider, spreadsheet_id or settings.google.spreadsheet_id or "", settings.mapping.id_field)
    try:
        result = sync.load(record_type, sheet)
    except SheetBindError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1)
    typer.echo(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))


if __name__ == "__main__":
    cli()
