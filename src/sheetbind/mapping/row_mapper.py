"""
Row mapping between raw cell grids and record instances.

Reading never fails on bad cell content: the first column decides whether a
row exists at all, each cell is coerced by its column kind, and anything
missing falls back to the kind's default. Writing only ever emits values for
input columns so formula (output) columns in the sheet are left alone.
"""
import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Iterable, Optional, Sequence, Union

from sheetbind.config import settings
from sheetbind.domain.formats import NUMBER_FORMATS, SERIAL_KINDS
from sheetbind.domain.models import CellData, CellFormat, ColumnSpec, ExtendedValue, NumberFormat
from sheetbind.mapping.coercion import cell_text, coerce, match_annotation, serial_number
from sheetbind.schema.resolver import Schema, as_schema, field_base_type

logger = logging.getLogger(__name__)

RawTable = list[list[Any]]


def _header_name(header: Any) -> str:
    return cell_text(getattr(header, "name", header))


def header_index(header_row: Sequence[Any]) -> dict[str, int]:
    """Trimmed header text -> first column index carrying it."""
    lookup: dict[str, int] = {}
    for index, value in enumerate(header_row):
        name = cell_text(value)
        if name and name not in lookup:
            lookup[name] = index
    return lookup


def _is_blank_row(row: Optional[Sequence[Any]]) -> bool:
    return not row or cell_text(row[0]) == ""


def from_table(
    raw_table: Iterable[Sequence[Any]],
    schema_or_type: Union[Schema, type],
    id_field: Optional[str] = None,
    saved_field: Optional[str] = None,
) -> list[Any]:
    """
    Builds one record per populated data row. The record's identifier is the
    row's 1-based position in the table as given, blank rows included.
    """
    schema = as_schema(schema_or_type)
    record_type = schema.record_type
    id_field = id_field or settings.mapping.id_field
    saved_field = saved_field or settings.mapping.saved_field
    model_fields = record_type.model_fields
    base_types = {c.field_name: field_base_type(record_type, c.field_name) for c in schema.columns}

    numbered = [(position, row) for position, row in enumerate(raw_table, start=1) if not _is_blank_row(row)]
    if not numbered:
        return []

    _, header_row = numbered[0]
    lookup = header_index(header_row)
    records = []
    for position, row in numbered[1:]:
        values: dict[str, Any] = {}
        for column in schema.columns:
            index = lookup.get(column.header)
            raw = row[index] if index is not None and index < len(row) else None
            value = match_annotation(coerce(raw, column.kind), base_types[column.field_name])
            if value is None and not column.nullable:
                # leave the declared default in place
                continue
            values[column.field_name] = value
        if id_field in model_fields:
            values[id_field] = position
        if saved_field in model_fields:
            values[saved_field] = True
        records.append(record_type.model_construct(**values))

    logger.debug(
        "rows mapped",
        extra={"record_type": record_type.__name__, "records": len(records), "table_rows": numbered[-1][0]},
    )
    return records


def _loose_value(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, bool):
        return value
    if isinstance(value, Decimal):
        return format(value, "f")
    if isinstance(value, float):
        return format(Decimal(repr(value)), "f")
    if isinstance(value, int):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat(sep=" ")
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def _typed_value(value: Any, column: ColumnSpec) -> ExtendedValue:
    if value is None:
        return ExtendedValue()
    if column.kind in SERIAL_KINDS:
        serial = serial_number(value, column.kind)
        if serial is not None:
            return ExtendedValue(number_value=serial)
        return ExtendedValue(string_value=cell_text(value))
    if isinstance(value, bool):
        return ExtendedValue(bool_value=value)
    if isinstance(value, (int, float, Decimal)):
        return ExtendedValue(number_value=float(value))
    return ExtendedValue(string_value=str(value))


def to_flat_row(record: Any, headers: Sequence[Any], schema: Optional[Schema] = None) -> list[Any]:
    """
    One slot per target header: input columns carry a loose value, everything
    else is None so the cell is skipped on write.
    """
    schema = schema or as_schema(type(record))
    row: list[Any] = []
    for header in headers:
        column = schema.get(_header_name(header))
        if column is None or column.is_output:
            row.append(None)
            continue
        row.append(_loose_value(getattr(record, column.field_name, None)))
    return row


def to_flat_rows(records: Iterable[Any], headers: Sequence[Any], schema: Optional[Schema] = None) -> list[list[Any]]:
    return [to_flat_row(record, headers, schema) for record in records]


def to_structured_row(record: Any, headers: Sequence[Any], schema: Optional[Schema] = None) -> list[CellData]:
    """
    Typed cells for input columns; output and unknown columns get an empty
    CellData, which the backend treats as "leave unchanged".
    """
    schema = schema or as_schema(type(record))
    row: list[CellData] = []
    for header in headers:
        column = schema.get(_header_name(header))
        if column is None or column.is_output:
            row.append(CellData())
            continue
        row.append(CellData(user_entered_value=_typed_value(getattr(record, column.field_name, None), column)))
    return row


def to_structured_rows(
    records: Iterable[Any], headers: Sequence[Any], schema: Optional[Schema] = None
) -> list[list[CellData]]:
    return [to_structured_row(record, headers, schema) for record in records]


def cell_format(column: ColumnSpec) -> Optional[CellFormat]:
    fmt = column.effective_format
    if fmt is None:
        return None
    number_type, default_pattern = NUMBER_FORMATS[fmt]
    return CellFormat(number_format=NumberFormat(type=number_type, pattern=column.effective_pattern or default_pattern))


def to_format_row(headers: Sequence[Any], schema_or_type: Union[Schema, type]) -> list[CellData]:
    schema = as_schema(schema_or_type)
    row: list[CellData] = []
    for header in headers:
        column = schema.get(_header_name(header))
        fmt = cell_format(column) if column is not None else None
        row.append(CellData(user_entered_format=fmt) if fmt is not None else CellData())
    return row


class RowMapper:
    """
    Binds the mapping functions to one record type.
    """

    def __init__(self, record_type: type):
        self.record_type = record_type
        self.schema = as_schema(record_type)

    def from_table(self, raw_table: Iterable[Sequence[Any]]) -> list[Any]:
        return from_table(raw_table, self.schema)

    def to_flat_rows(self, records: Iterable[Any], headers: Sequence[Any]) -> list[list[Any]]:
        return to_flat_rows(records, headers, self.schema)

    def to_structured_rows(self, records: Iterable[Any], headers: Sequence[Any]) -> list[list[CellData]]:
        return to_structured_rows(records, headers, self.schema)

    def to_format_row(self, headers: Sequence[Any]) -> list[CellData]:
        return to_format_row(headers, self.schema)
