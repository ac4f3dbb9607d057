import re
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from sheetbind.domain.formats import (
    KIND_FORMATS,
    KIND_PATTERNS,
    NUMBER_FORMATS,
    VALIDATION_PATTERNS,
    FieldKind,
    FormatKind,
)

UNORDERED = -1


def camel_case(header: str) -> str:
    """'Start Address' -> 'startAddress'."""
    parts = [p for p in re.split(r"[^0-9A-Za-z]+", header) if p]
    if not parts:
        return ""
    return parts[0].lower() + "".join(p[:1].upper() + p[1:].lower() for p in parts[1:])


class MessageLevel(str, Enum):
    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"


class MessageCategory(str, Enum):
    GENERAL = "GENERAL"
    CHECK_SHEET = "CHECK_SHEET"
    VALIDATION = "VALIDATION"
    SCHEMA = "SCHEMA"
    SHEET_ORDER = "SHEET_ORDER"


class DiagnosticMessage(BaseModel):
    """
    A single finding about data or headers. Returned to callers, never raised.
    """
    level: MessageLevel
    category: MessageCategory = MessageCategory.GENERAL
    message: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_error(self) -> bool:
        return self.level == MessageLevel.ERROR


class ColumnSpec(BaseModel):
    """
    Resolved column descriptor: one record field bound to one sheet header.
    """
    model_config = ConfigDict(frozen=True)

    field_name: str
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
    nullable: bool = False

    @property
    def is_output(self) -> bool:
        return not self.is_input

    @property
    def has_explicit_order(self) -> bool:
        return self.order >= 0

    @property
    def json_key(self) -> str:
        return self.json_name or camel_case(self.header)

    @property
    def effective_format(self) -> Optional[FormatKind]:
        return self.format or KIND_FORMATS[self.kind]

    @property
    def effective_pattern(self) -> Optional[str]:
        if self.format_pattern:
            return self.format_pattern
        if self.format:
            return NUMBER_FORMATS[self.format][1]
        return KIND_PATTERNS[self.kind]

    @property
    def effective_validation(self) -> Optional[str]:
        if self.validation:
            return self.validation
        if self.enable_validation:
            return VALIDATION_PATTERNS.get(self.kind)
        return None


class _ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_api(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class ExtendedValue(_ApiModel):
    string_value: Optional[str] = None
    number_value: Optional[float] = None
    bool_value: Optional[bool] = None
    formula_value: Optional[str] = None


class NumberFormat(_ApiModel):
    type: str
    pattern: Optional[str] = None


class TextFormat(_ApiModel):
    bold: Optional[bool] = None


class CellFormat(_ApiModel):
    number_format: Optional[NumberFormat] = None
    text_format: Optional[TextFormat] = None


class CellData(_ApiModel):
    """
    Structured cell payload in the shape of the Sheets API `CellData`.
    An instance with every member unset leaves the target cell untouched.
    """
    user_entered_value: Optional[ExtendedValue] = None
    user_entered_format: Optional[CellFormat] = None
    note: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return self.user_entered_value is None and self.user_entered_format is None and self.note is None


class SheetCell(BaseModel):
    """Header cell of a sheet configuration."""
    name: str
    index: int = 0
    column: str = ""
    formula: Optional[str] = None
    format: Optional[FormatKind] = None
    format_pattern: Optional[str] = None
    validation: Optional[str] = None
    note: Optional[str] = None
    protect: bool = False


class SheetConfig(BaseModel):
    """
    Declarative description of one sheet tab: headers plus sheet-level presentation.
    """
    name: str
    headers: list[SheetCell] = Field(default_factory=list)
    tab_color: Optional[str] = None
    cell_color: Optional[str] = None
    freeze_row_count: int = 1
    freeze_column_count: int = 0
    protect_sheet: bool = False

    @property
    def header_names(self) -> list[str]:
        return [h.name for h in self.headers]

    def get(self, name: str) -> Optional[SheetCell]:
        for header in self.headers:
            if header.name == name:
                return header
        return None
