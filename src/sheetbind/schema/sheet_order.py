"""
Workbook tab ordering declared with `SheetOrder` markers.

    class WorkbookTabs(BaseModel):
        trips: Annotated[str, SheetOrder(0, "Trips")] = "Trips"
        shifts: Annotated[str, SheetOrder(1, "Shifts")] = "Shifts"
"""
from collections import Counter
from typing import Iterable, Optional

from pydantic import BaseModel

from sheetbind.domain.models import UNORDERED, DiagnosticMessage, MessageCategory
from sheetbind.exceptions import SchemaDefinitionError
from sheetbind.schema.columns import SheetOrder
from sheetbind.sheets.messages import create_error


def sheet_order_markers(order_type: type) -> list[tuple[str, SheetOrder]]:
    """(field name, marker) pairs in declaration order, base classes first."""
    if not (isinstance(order_type, type) and issubclass(order_type, BaseModel)):
        raise SchemaDefinitionError(f"{order_type!r} is not a pydantic model class")
    pairs = []
    for name, info in order_type.model_fields.items():
        marker = next((m for m in info.metadata if isinstance(m, SheetOrder)), None)
        if marker is not None:
            pairs.append((name, marker))
    return pairs


def sheet_order(order_type: type) -> list[str]:
    """
    Sheet names sorted by declared order; UNORDERED sheets follow in declaration order.
    """
    markers = [m for _, m in sheet_order_markers(order_type)]
    ordered = sorted((m for m in markers if m.order != UNORDERED), key=lambda m: m.order)
    unordered = [m for m in markers if m.order == UNORDERED]
    return [m.sheet_name for m in ordered + unordered]


def validate_sheet_order(
    order_type: type, available_sheets: Optional[Iterable[str]] = None
) -> list[DiagnosticMessage]:
    messages: list[DiagnosticMessage] = []
    type_name = order_type.__name__
    pairs = sheet_order_markers(order_type)

    for field_name, marker in pairs:
        if marker.order < UNORDERED:
            messages.append(
                create_error(
                    f"{type_name}.{field_name}: order {marker.order} is below {UNORDERED}",
                    MessageCategory.SHEET_ORDER,
                )
            )

    order_counts = Counter(m.order for _, m in pairs if m.order != UNORDERED)
    for field_name, marker in pairs:
        if order_counts.get(marker.order, 0) > 1:
            messages.append(
                create_error(
                    f"{type_name}.{field_name}: duplicate order {marker.order} for sheet [{marker.sheet_name}]",
                    MessageCategory.SHEET_ORDER,
                )
            )

    name_counts = Counter(m.sheet_name for _, m in pairs)
    reported: set[str] = set()
    for field_name, marker in pairs:
        if name_counts[marker.sheet_name] > 1 and marker.sheet_name not in reported:
            reported.add(marker.sheet_name)
            messages.append(
                create_error(
                    f"{type_name}.{field_name}: sheet [{marker.sheet_name}] is listed more than once",
                    MessageCategory.SHEET_ORDER,
                )
            )

    if available_sheets is not None:
        known = set(available_sheets)
        for field_name, marker in pairs:
            if marker.sheet_name not in known:
                messages.append(
                    create_error(
                        f"{type_name}.{field_name}: unknown sheet [{marker.sheet_name}]",
                        MessageCategory.SHEET_ORDER,
                    )
                )
    return messages
