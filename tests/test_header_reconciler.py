import pytest

from records import PayRow, TripRow
from sheetbind import MessageCategory, MessageLevel, SheetCell, diff, reorder, resolve
from sheetbind.reconcile.headers import check_sheets, check_structure, column_letter


@pytest.mark.parametrize("index,letter", [(0, "A"), (1, "B"), (25, "Z"), (26, "AA"), (51, "AZ"), (52, "BA"), (701, "ZZ"), (702, "AAA")])
def test_column_letter(index, letter):
    assert column_letter(index) == letter


def test_matching_headers_produce_no_findings():
    assert diff(["Date", "Pay"], PayRow) == []
    assert diff([" Date ", "Pay", ""], resolve(PayRow)) == []


def test_missing_header_is_an_error():
    messages = diff(["Date"], PayRow, sheet_name="Trips")
    assert len(messages) == 1
    assert messages[0].level == MessageLevel.ERROR
    assert messages[0].category == MessageCategory.CHECK_SHEET
    assert messages[0].message == "[Trips!B]: Missing column [Pay]"


def test_misplaced_header_is_a_warning():
    messages = diff(["Pay", "Date"], ["Date", "Pay"])
    assert [m.level for m in messages] == [MessageLevel.WARNING, MessageLevel.WARNING]
    assert messages[0].message == "[A]: Column [Pay] should be [Date]"


def test_duplicate_header_at_its_own_position_is_not_misplaced():
    messages = diff(["A", "A"], ["X", "A"])
    assert len(messages) == 1
    assert messages[0].level == MessageLevel.ERROR
    assert messages[0].message == "[A]: Missing column [X]"


def test_extra_headers_are_warnings():
    messages = diff(["Date", "Pay", "Mood", "", None], PayRow, sheet_name="Trips")
    assert len(messages) == 1
    assert messages[0].level == MessageLevel.WARNING
    assert messages[0].message == "[Trips!C]: Extra column [Mood]"


def test_diff_reports_every_kind_of_drift():
    actual = ["Service", "Date", "Mood"]
    messages = diff(actual, TripRow, sheet_name="Trips")
    errors = [m for m in messages if m.level == MessageLevel.ERROR]
    warnings = [m for m in messages if m.level == MessageLevel.WARNING]
    assert len(errors) == len(resolve(TripRow).headers) - 2
    assert {m.message for m in warnings} == {
        "[Trips!A]: Column [Service] should be [Date]",
        "[Trips!B]: Column [Date] should be [Service]",
        "[Trips!C]: Extra column [Mood]",
    }


def test_reorder_uses_schema_then_fallback_then_original_order():
    fresh = ["Notes", "Pay", "Extra", "Date", "Total"]
    result = reorder(fresh, ["Date", "Pay"], ["Total"])
    assert result == ["Date", "Pay", "Total", "Notes", "Extra"]
    assert fresh == ["Notes", "Pay", "Extra", "Date", "Total"]


def test_reorder_ignores_names_that_are_not_present():
    assert reorder(["B", "A"], ["C", "A"], ["D"]) == ["A", "B"]


def test_reorder_accepts_header_cells():
    cells = [SheetCell(name="Pay"), SheetCell(name="Date")]
    result = reorder(cells, ["Date"], [])
    assert [c.name for c in result] == ["Date", "Pay"]
    assert result[0] is cells[1]


def test_check_sheets():
    messages = check_sheets(["Trips", "Shifts"], ["trips", "Setup"])
    assert len(messages) == 1
    assert messages[0].level == MessageLevel.ERROR
    assert "Shifts" in messages[0].message

    [info] = check_sheets(["Trips"], ["Trips"])
    assert info.level == MessageLevel.INFO
    assert info.message == "All sheets found"


def test_check_structure():
    assert check_structure([])[0].level == MessageLevel.ERROR
    messages = check_structure([["A", "B"], ["1", "2"], ["3"]], expected_columns=2, min_data_rows=3)
    assert [m.level for m in messages] == [MessageLevel.ERROR, MessageLevel.WARNING]
    assert "row 3" in messages[1].message
