"""
Field kinds, display formats and the number-format patterns attached to them.
"""
from enum import Enum
from typing import Optional


class FieldKind(str, Enum):
    TEXT = "text"
    INTEGER = "integer"
    DECIMAL = "decimal"
    CURRENCY = "currency"
    PERCENTAGE = "percentage"
    BOOLEAN = "boolean"
    DATE = "date"
    TIME = "time"
    DURATION = "duration"
    PHONE = "phone"
    EMAIL = "email"
    URL = "url"


class FormatKind(str, Enum):
    ACCOUNTING = "ACCOUNTING"
    CURRENCY = "CURRENCY"
    DATE = "DATE"
    DISTANCE = "DISTANCE"
    DURATION = "DURATION"
    NUMBER = "NUMBER"
    PERCENT = "PERCENT"
    TEXT = "TEXT"
    TIME = "TIME"
    WEEKDAY = "WEEKDAY"


NUMERIC_KINDS = frozenset({FieldKind.DECIMAL, FieldKind.CURRENCY, FieldKind.PERCENTAGE})
SERIAL_KINDS = frozenset({FieldKind.DATE, FieldKind.TIME, FieldKind.DURATION})

# FormatKind -> (Sheets NumberFormat.type, pattern)
NUMBER_FORMATS: dict[FormatKind, tuple[str, str]] = {
    FormatKind.ACCOUNTING: ("NUMBER", '_("$"* #,##0.00_);_("$"* \\(#,##0.00\\);_("$"* "-"??_);_(@_)'),
    FormatKind.CURRENCY: ("CURRENCY", "$#,##0.00"),
    FormatKind.DATE: ("DATE", "yyyy-MM-dd"),
    FormatKind.DISTANCE: ("NUMBER", "#,##0.0"),
    FormatKind.DURATION: ("TIME", "[h]:mm"),
    FormatKind.NUMBER: ("NUMBER", "#,##0"),
    FormatKind.PERCENT: ("PERCENT", "0.00%"),
    FormatKind.TEXT: ("TEXT", "@"),
    FormatKind.TIME: ("TIME", "hh:mm am/pm"),
    FormatKind.WEEKDAY: ("DATE", "ddd"),
}

KIND_FORMATS: dict[FieldKind, Optional[FormatKind]] = {
    FieldKind.TEXT: FormatKind.TEXT,
    FieldKind.INTEGER: FormatKind.NUMBER,
    FieldKind.DECIMAL: FormatKind.NUMBER,
    FieldKind.CURRENCY: FormatKind.CURRENCY,
    FieldKind.PERCENTAGE: FormatKind.PERCENT,
    FieldKind.BOOLEAN: None,
    FieldKind.DATE: FormatKind.DATE,
    FieldKind.TIME: FormatKind.TIME,
    FieldKind.DURATION: FormatKind.DURATION,
    FieldKind.PHONE: FormatKind.TEXT,
    FieldKind.EMAIL: FormatKind.TEXT,
    FieldKind.URL: FormatKind.TEXT,
}

KIND_PATTERNS: dict[FieldKind, Optional[str]] = {
    FieldKind.TEXT: "@",
    FieldKind.INTEGER: "0",
    FieldKind.DECIMAL: "#,##0.00",
    FieldKind.CURRENCY: '"$"#,##0.00',
    FieldKind.PERCENTAGE: "0.00%",
    FieldKind.BOOLEAN: None,
    FieldKind.DATE: "yyyy-MM-dd",
    FieldKind.TIME: "hh:mm am/pm",
    FieldKind.DURATION: "[h]:mm",
    FieldKind.PHONE: "@",
    FieldKind.EMAIL: "@",
    FieldKind.URL: "@",
}

VALIDATION_PATTERNS: dict[FieldKind, str] = {
    FieldKind.EMAIL: r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$",
    FieldKind.PHONE: r"^\+?1?\d{9,15}$",
    FieldKind.URL: r"^https?://.+$",
}


def infer_format(pattern: Optional[str]) -> FormatKind:
    """
    Best-effort guess of the display format a raw number-format pattern implies.
    """
    if not pattern or pattern == "@":
        return FormatKind.TEXT
    lowered = pattern.lower()
    if "[h]" in lowered:
        return FormatKind.DURATION
    if "am/pm" in lowered or ("h" in lowered and ":" in lowered and "y" not in lowered and "d" not in lowered):
        return FormatKind.TIME
    if lowered.strip() in {"ddd", "dddd"}:
        return FormatKind.WEEKDAY
    if "y" in lowered or ("d" in lowered and "m" in lowered):
        return FormatKind.DATE
    if "$" in pattern:
        return FormatKind.ACCOUNTING if "_(" in pattern else FormatKind.CURRENCY
    if "%" in pattern:
        return FormatKind.PERCENT
    if "#" in pattern or "0" in pattern:
        return FormatKind.NUMBER
    return FormatKind.TEXT
