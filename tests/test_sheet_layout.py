import pytest

from records import DeliveryRow, TripRow
from sheetbind import FormatKind, SheetCell
from sheetbind.domain.formats import VALIDATION_PATTERNS, FieldKind, infer_format
from sheetbind.formulas import builder
from sheetbind.sheets import layout


@pytest.fixture
def trips():
    return layout.sheet_config_from_schema(TripRow, "Trips", extra_headers=["Date", "Comments"], tab_color="BLUE")


def test_config_follows_schema_then_extra_headers(trips):
    assert trips.header_names == ["Date", "Service", "#", "X", "Pickup", "Duration", "Pay", "Tips", "Total", "Comments"]
    assert [h.column for h in trips.headers][:3] == ["A", "B", "C"]
    assert trips.get("Comments").index == 9
    assert trips.tab_color == "BLUE"


def test_header_cells_carry_format_and_notes(trips):
    date = trips.get("Date")
    assert date.format == FormatKind.DATE
    assert date.note == "YYYY-MM-DD\nNumberFormat:yyyy-MM-dd"
    assert trips.get("Service").note is None
    assert trips.get("X").format is None


def test_validation_rules_from_kind():
    config = layout.sheet_config_from_schema(DeliveryRow, "Deliveries")
    assert config.get("Email").validation == VALIDATION_PATTERNS[FieldKind.EMAIL]
    assert config.get("Start Address").validation is None
    assert config.get("Distance").format == FormatKind.DISTANCE


def test_ranges(trips):
    assert layout.column_of(trips, "Pay") == "G"
    assert layout.column_of(trips, "Nope") is None
    assert layout.local_range(trips, "Pay") == "G1:G"
    assert layout.local_range(trips, "Pay", row=2) == "G2:G"
    assert layout.sheet_range(trips, "Date") == "Trips!A1:A"
    assert layout.range_between(trips, "Date", "Total") == "Trips!A:I"
    with pytest.raises(KeyError):
        layout.local_range(trips, "Nope")


def test_apply_formulas_sets_header_formula(trips):
    total = builder.build(
        "header-guard",
        key=layout.local_range(trips, "Date"),
        header="Total",
        formula=f"{layout.local_range(trips, 'Pay')}+{layout.local_range(trips, 'Tips')}",
    )
    config = layout.apply_formulas(trips, {"Total": total})
    assert config.get("Total").formula == total
    assert config.get("Total").protect is True
    assert trips.get("Total").formula is None

    row = layout.header_row(config)
    assert row[0] == "Date"
    assert row[8].startswith("=ARRAYFORMULA(IFS(ROW(A1:A)=1,\"Total\"")

    cells = layout.header_row_cells(config)
    assert cells[8].user_entered_value.formula_value == total
    assert cells[0].user_entered_value.string_value == "Date"
    assert cells[0].user_entered_format.text_format.bold is True


def test_apply_formulas_rejects_unknown_headers(trips):
    with pytest.raises(KeyError):
        layout.apply_formulas(trips, {"Missing": "=1"})


def test_format_row_for_config(trips):
    cells = layout.format_row(trips)
    assert cells[0].user_entered_format.number_format.pattern == "yyyy-MM-dd"
    assert cells[3].is_empty
    assert cells[-1].is_empty


def test_assign_columns_returns_copy():
    config = layout.SheetConfig(name="S", headers=[SheetCell(name="a"), SheetCell(name="b")])
    assigned = layout.assign_columns(config)
    assert [h.column for h in assigned.headers] == ["A", "B"]
    assert [h.column for h in config.headers] == ["", ""]


@pytest.mark.parametrize("pattern,expected", [
    ("[h]:mm", FormatKind.DURATION),
    ("hh:mm am/pm", FormatKind.TIME),
    ("ddd", FormatKind.WEEKDAY),
    ("yyyy-MM-dd", FormatKind.DATE),
    ("$#,##0.00", FormatKind.CURRENCY),
    ('_("$"* #,##0.00_)', FormatKind.ACCOUNTING),
    ("0.00%", FormatKind.PERCENT),
    ("#,##0.0", FormatKind.NUMBER),
    ("@", FormatKind.TEXT),
])
def test_infer_format(pattern, expected):
    assert infer_format(pattern) == expected
