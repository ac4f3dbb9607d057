from pathlib import Path

import pytest
from openpyxl import Workbook

from sheetbind.schema.resolver import clear_cache


@pytest.fixture(autouse=True)
def fresh_schema_cache():
    clear_cache()
    yield
    clear_cache()


@pytest.fixture
def trip_table():
    return [
        ["Date", "Service", "#", "X", "Pickup", "Duration", "Pay", "Tips", "Total"],
        ["2023-10-01", "Uber", "1", "FALSE", "9:30", "0:25:00", "10.50", "2", "=G2+H2"],
        [None, "", "", "", "", "", "", "", ""],
        ["10/02/2023", " Lyft ", "2", "true", "10:15", "1:05:30", "$1,234.56", "-", "1236.56"],
    ]


@pytest.fixture
def write_workbook(tmp_path):
    """Writes rows into a fresh XLSX and returns its path."""

    def _write(rows, title="Trips", name="book.xlsx", extra_sheets=()) -> Path:
        wb = Workbook()
        ws = wb.active
        ws.title = title
        for row in rows:
            ws.append(row)
        for sheet in extra_sheets:
            wb.create_sheet(sheet)
        path = tmp_path / name
        wb.save(path)
        return path

    return _write
