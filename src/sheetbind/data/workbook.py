import logging
import zipfile
from pathlib import Path
from typing import Any, Optional

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from sheetbind.exceptions import DataSourceError

logger = logging.getLogger(__name__)


def _open(file_path: Path):
    file_path = Path(file_path)
    if not file_path.exists():
        raise DataSourceError(f"Workbook not found: {file_path}")
    try:
        return load_workbook(file_path, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, OSError, KeyError) as exc:
        raise DataSourceError(f"Unable to open workbook {file_path}: {exc}") from exc


def sheet_names(file_path: Path) -> list[str]:
    wb = _open(file_path)
    try:
        return list(wb.sheetnames)
    finally:
        wb.close()


def read_raw_table(file_path: Path, sheet: Optional[str] = None) -> list[list[Any]]:
    """
    Reads one worksheet (the active one by default) as a list of rows of raw cell values.
    Trailing empty cells and trailing empty rows are dropped.
    """
    wb = _open(file_path)
    try:
        if sheet is None:
            ws = wb.active
        elif sheet in wb.sheetnames:
            ws = wb[sheet]
        else:
            raise DataSourceError(f"Sheet [{sheet}] not found in {file_path}")
        rows = []
        for values in ws.iter_rows(values_only=True):
            row = list(values)
            while row and (row[-1] is None or row[-1] == ""):
                row.pop()
            rows.append(row)
    finally:
        wb.close()
    while rows and not rows[-1]:
        rows.pop()
    logger.info("workbook read", extra={"file": str(file_path), "sheet": sheet, "rows": len(rows)})
    return rows
