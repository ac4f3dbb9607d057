"""
Cell coercion: untyped cell values -> field values, and field values -> spreadsheet serial numbers.

Nothing in here raises for malformed cell content; bad input degrades to the
kind's default (or the original text, for date-like kinds).
"""
import re
from datetime import date, datetime, time, timedelta
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from sheetbind.domain.formats import NUMERIC_KINDS, FieldKind

SERIAL_EPOCH = datetime(1899, 12, 30)

_NON_DIGIT = re.compile(r"[^0-9]")
_NON_DECIMAL = re.compile(r"[^0-9.\-]")

_DATE_FORMATS = (
    "%Y-%m-%d",
    "%m-%d-%Y",
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%m/%d/%y",
    "%d.%m.%Y",
    "%b %d, %Y",
    "%B %d, %Y",
    "%d %b %Y",
    "%d %B %Y",
)

_TIME_FORMATS = ("%H:%M:%S", "%H:%M", "%I:%M:%S %p", "%I:%M %p", "%I:%M%p")


def cell_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def default_for(kind: FieldKind) -> Any:
    if kind == FieldKind.INTEGER:
        return 0
    if kind == FieldKind.BOOLEAN:
        return False
    if kind in NUMERIC_KINDS:
        return None
    return ""


def parse_integer(value: Any) -> int:
    text = cell_text(value)
    if not text or "." in text:
        return 0
    negative = text.startswith("-")
    digits = _NON_DIGIT.sub("", text)
    if not digits:
        return 0
    number = int(digits)
    return -number if negative else number


def parse_decimal(value: Any) -> Optional[Decimal]:
    if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
        # native numbers from UNFORMATTED_VALUE reads; repr keeps exponent form intact
        try:
            number = Decimal(repr(value)) if isinstance(value, float) else Decimal(value)
        except InvalidOperation:
            return None
        return number if number.is_finite() else None
    cleaned = _NON_DECIMAL.sub("", cell_text(value))
    if cleaned in ("", "-"):
        return None
    try:
        return Decimal(cleaned)
    except InvalidOperation:
        return None


def match_annotation(value: Any, base: Any) -> Any:
    """
    Narrows a coerced number to the field's declared numeric type:
    Decimal or int into a `float` field, Decimal into an `int` field (truncated).
    """
    if value is None or isinstance(value, bool):
        return value
    if base is float and isinstance(value, (int, Decimal)):
        return float(value)
    if base is int and isinstance(value, Decimal):
        return int(value)
    return value


def parse_boolean(value: Any) -> bool:
    return cell_text(value).upper() == "TRUE"


def parse_date_text(text: str) -> Optional[datetime]:
    text = text.strip()
    if not text:
        return None
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def parse_date(value: Any) -> str:
    """
    10-character dashed dates are normalized to YYYY-MM-DD; anything else is kept as typed.
    """
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    text = cell_text(value)
    if len(text) == 10 and "-" in text:
        parsed = parse_date_text(text)
        if parsed is not None:
            return parsed.date().isoformat()
    return text


def coerce(value: Any, kind: FieldKind) -> Any:
    if value is None:
        return default_for(kind)
    if kind == FieldKind.INTEGER:
        return parse_integer(value)
    if kind in NUMERIC_KINDS:
        return parse_decimal(value)
    if kind == FieldKind.BOOLEAN:
        return parse_boolean(value)
    if kind == FieldKind.DATE:
        return parse_date(value)
    if isinstance(value, time):
        return value.strftime("%H:%M:%S")
    return cell_text(value)


def serial_date(value: Any) -> Optional[float]:
    """Days since 1899-12-30; time-of-day becomes the fractional part."""
    if isinstance(value, datetime):
        moment = value.replace(tzinfo=None)
    elif isinstance(value, date):
        moment = datetime(value.year, value.month, value.day)
    else:
        moment = parse_date_text(cell_text(value))
        if moment is None:
            return None
    delta = moment - SERIAL_EPOCH
    return delta.days + delta.seconds / 86400


def serial_time(value: Any) -> Optional[float]:
    """Fraction of a day."""
    if isinstance(value, datetime):
        value = value.time()
    if isinstance(value, time):
        moment = value
    else:
        text = cell_text(value).upper()
        moment = None
        for fmt in _TIME_FORMATS:
            try:
                moment = datetime.strptime(text, fmt).time()
                break
            except ValueError:
                continue
        if moment is None:
            return None
    seconds = moment.hour * 3600 + moment.minute * 60 + moment.second + moment.microsecond / 1_000_000
    return seconds / 86400


def serial_duration(value: Any) -> Optional[float]:
    """'[-]H:MM:SS[.fff]' -> days."""
    if isinstance(value, timedelta):
        return value.total_seconds() / 86400
    text = cell_text(value)
    negative = text.startswith("-")
    parts = text.lstrip("-").split(":")
    if len(parts) != 3:
        return None
    try:
        hours, minutes = int(parts[0]), int(parts[1])
        seconds = float(parts[2])
    except ValueError:
        return None
    days = (hours * 3600 + minutes * 60 + seconds) / 86400
    return -days if negative else days


def serial_number(value: Any, kind: FieldKind) -> Optional[float]:
    if kind == FieldKind.DATE:
        return serial_date(value)
    if kind == FieldKind.TIME:
        return serial_time(value)
    if kind == FieldKind.DURATION:
        return serial_duration(value)
    return None
