"""
Header reconciliation: compares a live header row with what a record type
expects, and computes a stable column order for regenerated headers.
"""
import logging
from typing import Any, Iterable, Optional, Sequence, Union

from pydantic import BaseModel

from sheetbind.domain.models import DiagnosticMessage, MessageCategory, SheetConfig
from sheetbind.mapping.coercion import cell_text
from sheetbind.schema.resolver import Schema, resolve
from sheetbind.sheets.messages import create_error, create_info, create_warning

logger = logging.getLogger(__name__)

Expected = Union[Schema, SheetConfig, type, Sequence[str]]


def column_letter(index: int) -> str:
    """0 -> A, 25 -> Z, 26 -> AA."""
    if index < 0:
        raise ValueError(f"column index must be >= 0, got {index}")
    letters = ""
    index += 1
    while index > 0:
        index, remainder = divmod(index - 1, 26)
        letters = chr(ord("A") + remainder) + letters
    return letters


def expected_headers(expected: Expected) -> list[str]:
    if isinstance(expected, Schema):
        return expected.headers
    if isinstance(expected, SheetConfig):
        return expected.header_names
    if isinstance(expected, type) and issubclass(expected, BaseModel):
        return resolve(expected).headers
    return [cell_text(name) for name in expected]


def _location(sheet_name: str, index: int) -> str:
    letter = column_letter(index)
    return f"{sheet_name}!{letter}" if sheet_name else letter


def diff(actual_header_row: Sequence[Any], expected: Expected, sheet_name: str = "") -> list[DiagnosticMessage]:
    """
    ERROR for each expected header the sheet lacks, WARNING for each expected
    header sitting in another column, WARNING for each unexpected non-empty header.
    """
    actual = [cell_text(value) for value in actual_header_row]
    wanted = expected_headers(expected)
    wanted_set = set(wanted)
    messages: list[DiagnosticMessage] = []

    for index, name in enumerate(wanted):
        if name not in actual:
            messages.append(
                create_error(f"[{_location(sheet_name, index)}]: Missing column [{name}]", MessageCategory.CHECK_SHEET)
            )
            continue
        if index < len(actual) and actual[index] != name:
            found = actual[index]
            messages.append(
                create_warning(
                    f"[{_location(sheet_name, index)}]: Column [{found}] should be [{name}]",
                    MessageCategory.CHECK_SHEET,
                )
            )

    for index, name in enumerate(actual):
        if name and name not in wanted_set:
            messages.append(
                create_warning(f"[{_location(sheet_name, index)}]: Extra column [{name}]", MessageCategory.CHECK_SHEET)
            )

    logger.debug("headers compared", extra={"sheet": sheet_name, "findings": len(messages)})
    return messages


def _item_name(item: Any) -> str:
    return cell_text(getattr(item, "name", item))


def reorder(fresh_headers: Sequence[Any], schema_order: Iterable[str], fallback_order: Iterable[str] = ()) -> list[Any]:
    """
    Returns a new list: items named in `schema_order` first, then those named
    in `fallback_order`, then everything else in its original relative order.
    Items may be header names or objects with a `name` attribute.
    """
    remaining = list(fresh_headers)
    result: list[Any] = []
    for name in [*schema_order, *fallback_order]:
        wanted = cell_text(name)
        for position, item in enumerate(remaining):
            if _item_name(item) == wanted:
                result.append(remaining.pop(position))
                break
    result.extend(remaining)
    return result


def check_sheets(expected_sheets: Iterable[str], actual_sheets: Iterable[str]) -> list[DiagnosticMessage]:
    present = {cell_text(name).lower() for name in actual_sheets}
    messages = [
        create_error(f"Unable to find sheet [{name}]", MessageCategory.CHECK_SHEET)
        for name in expected_sheets
        if cell_text(name).lower() not in present
    ]
    if not messages:
        messages.append(create_info("All sheets found", MessageCategory.CHECK_SHEET))
    return messages


def check_structure(
    raw_table: Sequence[Sequence[Any]],
    expected_columns: Optional[int] = None,
    min_data_rows: int = 0,
    sheet_name: str = "",
) -> list[DiagnosticMessage]:
    """
    Shape checks on a raw table: emptiness, minimum number of data rows and
    per-row column counts.
    """
    label = sheet_name or "sheet"
    if not raw_table:
        return [create_error(f"[{label}]: no data", MessageCategory.VALIDATION)]
    messages: list[DiagnosticMessage] = []
    data_rows = len(raw_table) - 1
    if data_rows < min_data_rows:
        messages.append(
            create_error(
                f"[{label}]: expected at least {min_data_rows} data rows, found {data_rows}",
                MessageCategory.VALIDATION,
            )
        )
    if expected_columns is not None:
        for number, row in enumerate(raw_table[1:], start=2):
            if len(row) != expected_columns:
                messages.append(
                    create_warning(
                        f"[{label}]: row {number} has {len(row)} columns, expected {expected_columns}",
                        MessageCategory.VALIDATION,
                    )
                )
    return messages
