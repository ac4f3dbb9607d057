"""
Sheet layout: builds a `SheetConfig` from a record schema and answers the
column/range questions formula builders need (which letter is "Pay", what is
the A1 range of that column, ...).
"""
from typing import Any, Iterable, Mapping, Optional, Union

from sheetbind.domain.formats import NUMBER_FORMATS, infer_format
from sheetbind.domain.models import (
    CellData,
    CellFormat,
    ColumnSpec,
    ExtendedValue,
    NumberFormat,
    SheetCell,
    SheetConfig,
    TextFormat,
)
from sheetbind.reconcile.headers import column_letter
from sheetbind.schema.resolver import Schema, as_schema


def _note(column: ColumnSpec) -> Optional[str]:
    pattern = column.effective_pattern
    if not pattern or pattern == "@":
        return column.note
    line = f"NumberFormat:{pattern}"
    return f"{column.note}\n{line}" if column.note else line


def header_cell(column: ColumnSpec) -> SheetCell:
    fmt = column.effective_format
    if fmt is None and column.format_pattern:
        fmt = infer_format(column.format_pattern)
    return SheetCell(
        name=column.header,
        format=fmt,
        format_pattern=column.effective_pattern,
        validation=column.effective_validation,
        note=_note(column),
    )


def assign_columns(config: SheetConfig) -> SheetConfig:
    """Copy of `config` with index and column letter set from header position."""
    headers = [
        header.model_copy(update={"index": index, "column": column_letter(index)})
        for index, header in enumerate(config.headers)
    ]
    return config.model_copy(update={"headers": headers})


def sheet_config_from_schema(
    schema_or_type: Union[Schema, type],
    name: str,
    extra_headers: Iterable[Union[str, SheetCell]] = (),
    **sheet_attrs: Any,
) -> SheetConfig:
    schema = as_schema(schema_or_type)
    headers = [header_cell(column) for column in schema.columns]
    present = {h.name for h in headers}
    for extra in extra_headers:
        cell = extra if isinstance(extra, SheetCell) else SheetCell(name=str(extra).strip())
        if cell.name and cell.name not in present:
            present.add(cell.name)
            headers.append(cell)
    return assign_columns(SheetConfig(name=name, headers=headers, **sheet_attrs))


def apply_formulas(config: SheetConfig, formulas: Mapping[str, str]) -> SheetConfig:
    """Sets formula text on the named headers; formula headers become protected."""
    unknown = set(formulas) - set(config.header_names)
    if unknown:
        raise KeyError(f"sheet {config.name} has no headers {sorted(unknown)}")
    headers = [
        header.model_copy(update={"formula": formulas[header.name], "protect": True})
        if header.name in formulas
        else header
        for header in config.headers
    ]
    return config.model_copy(update={"headers": headers})


def column_of(config: SheetConfig, header: str) -> Optional[str]:
    cell = config.get(header)
    if cell is None:
        return None
    return cell.column or column_letter(config.headers.index(cell))


def _require_column(config: SheetConfig, header: str) -> str:
    column = column_of(config, header)
    if column is None:
        raise KeyError(f"sheet {config.name} has no header '{header}'")
    return column


def local_range(config: SheetConfig, header: str, row: int = 1) -> str:
    """'B1:B' style open-ended column range without the sheet prefix."""
    column = _require_column(config, header)
    return f"{column}{row}:{column}"


def sheet_range(config: SheetConfig, header: str, row: int = 1) -> str:
    return f"{config.name}!{local_range(config, header, row)}"


def range_between(config: SheetConfig, start_header: str, end_header: str) -> str:
    return f"{config.name}!{_require_column(config, start_header)}:{_require_column(config, end_header)}"


def header_row(config: SheetConfig) -> list[str]:
    """Row-1 values: formula text where a header has one, otherwise its name."""
    return [header.formula or header.name for header in config.headers]


def header_row_cells(config: SheetConfig) -> list[CellData]:
    cells = []
    for header in config.headers:
        if header.formula:
            value = ExtendedValue(formula_value=header.formula)
        else:
            value = ExtendedValue(string_value=header.name)
        cells.append(
            CellData(
                user_entered_value=value,
                user_entered_format=CellFormat(text_format=TextFormat(bold=True)),
                note=header.note,
            )
        )
    return cells


def format_row(config: SheetConfig) -> list[CellData]:
    cells = []
    for header in config.headers:
        if header.format is None:
            cells.append(CellData())
            continue
        number_type, default_pattern = NUMBER_FORMATS[header.format]
        cells.append(
            CellData(
                user_entered_format=CellFormat(
                    number_format=NumberFormat(type=number_type, pattern=header.format_pattern or default_pattern)
                )
            )
        )
    return cells
