"""
Field markers used inside `typing.Annotated` to bind record fields to sheet columns.

    class TripRow(SheetRow):
        date: Annotated[str, Column("Date", FieldKind.DATE, is_input=True)] = ""
        total: Annotated[Optional[Decimal], Column("Total", FieldKind.CURRENCY)] = None
"""
from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel

from sheetbind.domain.formats import FieldKind, FormatKind
from sheetbind.domain.models import UNORDERED


@dataclass(frozen=True)
class Column:
    header: str
    kind: FieldKind = FieldKind.TEXT
    is_input: bool = False
    format: Optional[FormatKind] = None
    format_pattern: Optional[str] = None
    order: int = UNORDERED
    note: Optional[str] = None
    validation: Optional[str] = None
    enable_validation: bool = False
    json_name: Optional[str] = None


@dataclass(frozen=True)
class SheetOrder:
    """Places a sheet (named by the field) at a position in the workbook tab strip."""
    order: int
    sheet_name: str


class SheetRow(BaseModel):
    """
    Convenience base for record types: carries the row identifier and the
    persisted-origin flag filled in while reading a table.
    """
    row_id: int = 0
    saved: bool = False
