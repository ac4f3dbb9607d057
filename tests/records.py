"""Record types shared by the test suite."""
from decimal import Decimal
from typing import Annotated, Optional

from pydantic import BaseModel

from sheetbind import Column, FieldKind, FormatKind, SheetOrder, SheetRow


class PayRow(SheetRow):
    date: Annotated[str, Column("Date", FieldKind.DATE, is_input=True)] = ""
    pay: Annotated[Optional[Decimal], Column("Pay", FieldKind.DECIMAL, is_input=True)] = None


class FloatPayRow(SheetRow):
    name: Annotated[str, Column("Name", is_input=True)] = ""
    pay: Annotated[float, Column("Pay", FieldKind.DECIMAL, is_input=True)] = 0.0
    count: Annotated[int, Column("Count", FieldKind.DECIMAL, is_input=True)] = 0


class TripRow(SheetRow):
    date: Annotated[str, Column("Date", FieldKind.DATE, is_input=True, note="YYYY-MM-DD")] = ""
    service: Annotated[str, Column("Service", FieldKind.TEXT, is_input=True)] = ""
    number: Annotated[int, Column("#", FieldKind.INTEGER, is_input=True)] = 0
    exclude: Annotated[bool, Column("X", FieldKind.BOOLEAN, is_input=True)] = False
    pickup: Annotated[str, Column("Pickup", FieldKind.TIME, is_input=True)] = ""
    duration: Annotated[str, Column("Duration", FieldKind.DURATION, is_input=True)] = ""
    pay: Annotated[Optional[Decimal], Column("Pay", FieldKind.CURRENCY, is_input=True)] = None
    tips: Annotated[Optional[Decimal], Column("Tips", FieldKind.CURRENCY, is_input=True)] = None
    total: Annotated[Optional[Decimal], Column("Total", FieldKind.CURRENCY)] = None


class AddressRow(SheetRow):
    start_address: Annotated[str, Column("Start Address", is_input=True)] = ""


class DeliveryRow(AddressRow):
    email: Annotated[str, Column("Email", FieldKind.EMAIL, is_input=True, enable_validation=True)] = ""
    distance: Annotated[
        Optional[Decimal], Column("Distance", FieldKind.DECIMAL, is_input=True, format=FormatKind.DISTANCE)
    ] = None


class ShadowingRow(AddressRow):
    start_address: Annotated[str, Column("Origin", is_input=True)] = ""
    note: Annotated[str, Column("Note", is_input=True)] = ""


class ExplicitOrderRow(BaseModel):
    third: Annotated[str, Column("C", order=2)] = ""
    first: Annotated[str, Column("A", order=0)] = ""
    second: Annotated[str, Column("B", order=1)] = ""


class BrokenKindRow(BaseModel):
    count: Annotated[str, Column("Count", FieldKind.INTEGER)] = ""
    also_count: Annotated[int, Column("Count", FieldKind.INTEGER)] = 0


class WorkbookTabs(BaseModel):
    trips: Annotated[str, SheetOrder(0, "Trips")] = "Trips"
    shifts: Annotated[str, SheetOrder(1, "Shifts")] = "Shifts"
    setup: Annotated[str, SheetOrder(-1, "Setup")] = "Setup"
    daily: Annotated[str, SheetOrder(2, "Daily")] = "Daily"


class ClashingTabs(BaseModel):
    trips: Annotated[str, SheetOrder(0, "Trips")] = "Trips"
    shifts: Annotated[str, SheetOrder(0, "Shifts")] = "Shifts"
    again: Annotated[str, SheetOrder(3, "Trips")] = "Trips"
    bad: Annotated[str, SheetOrder(-5, "Weekly")] = "Weekly"
