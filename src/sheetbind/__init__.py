from sheetbind.domain.formats import FieldKind, FormatKind
from sheetbind.domain.models import (
    UNORDERED,
    CellData,
    ColumnSpec,
    DiagnosticMessage,
    MessageCategory,
    MessageLevel,
    SheetCell,
    SheetConfig,
)
from sheetbind.formulas.builder import build
from sheetbind.mapping.row_mapper import RowMapper, from_table, to_flat_rows, to_format_row, to_structured_rows
from sheetbind.reconcile.headers import diff, reorder
from sheetbind.schema.columns import Column, SheetOrder, SheetRow
from sheetbind.schema.resolver import Schema, resolve, validate
from sheetbind.schema.sheet_order import sheet_order, validate_sheet_order

__all__ = [
    "UNORDERED",
    "CellData",
    "Column",
    "ColumnSpec",
    "DiagnosticMessage",
    "FieldKind",
    "FormatKind",
    "MessageCategory",
    "MessageLevel",
    "RowMapper",
    "Schema",
    "SheetCell",
    "SheetConfig",
    "SheetOrder",
    "SheetRow",
    "build",
    "diff",
    "from_table",
    "reorder",
    "resolve",
    "sheet_order",
    "to_flat_rows",
    "to_format_row",
    "to_structured_rows",
    "validate",
    "validate_sheet_order",
]
