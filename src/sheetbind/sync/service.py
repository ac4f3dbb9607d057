import logging
from dataclasses import dataclass, field
from typing import Any, Iterable

from sheetbind.domain.models import DiagnosticMessage
from sheetbind.mapping.row_mapper import from_table, to_flat_rows
from sheetbind.reconcile.headers import column_letter, diff
from sheetbind.schema.resolver import resolve
from sheetbind.sheets.messages import has_errors

logger = logging.getLogger(__name__)


@dataclass
class LoadResult:
    sheet: str
    records: list[Any] = field(default_factory=list)
    messages: list[DiagnosticMessage] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not has_errors(self.messages)

    def to_dict(self) -> dict:
        return {
            "sheet": self.sheet,
            "records": [r.model_dump(mode="json") for r in self.records],
            "messages": [m.model_dump(mode="json") for m in self.messages],
        }


class SheetSync:
    """
    Reads and writes one record type against a hosted spreadsheet through a
    values provider. Rows are addressed by the identifier assigned on read.
    """

    def __init__(self, provider, spreadsheet_id: str, id_field: str = "row_id"):
        self.provider = provider
        self.spreadsheet_id = spreadsheet_id
        self.id_field = id_field

    def load(self, record_type: type, sheet_name: str) -> LoadResult:
        table = self.provider.get_values(self.spreadsheet_id, sheet_name)
        header = table[0] if table else []
        messages = diff(header, resolve(record_type), sheet_name=sheet_name)
        records = from_table(table, record_type, id_field=self.id_field)
        logger.info("sheet loaded", extra={"sheet": sheet_name, "records": len(records), "findings": len(messages)})
        return LoadResult(sheet=sheet_name, records=records, messages=messages)

    def save(self, records: Iterable[Any], record_type: type, sheet_name: str) -> dict[str, int]:
        """
        Existing rows (non-zero identifier) are updated in place, the rest appended.
        Only input columns are written.
        """
        header_rows = self.provider.get_values(self.spreadsheet_id, f"{sheet_name}!1:1")
        headers = header_rows[0] if header_rows else []
        if not headers:
            headers = resolve(record_type).headers
        last_column = column_letter(max(len(headers), 1) - 1)
        schema = resolve(record_type)

        updated = 0
        fresh = []
        for record in records:
            row_id = getattr(record, self.id_field, 0) or 0
            if row_id > 1:
                [values] = to_flat_rows([record], headers, schema)
                self.provider.update_values(
                    self.spreadsheet_id, f"{sheet_name}!A{row_id}:{last_column}{row_id}", [values]
                )
                updated += 1
            else:
                fresh.append(record)
        if fresh:
            self.provider.append_values(
                self.spreadsheet_id, f"{sheet_name}!A:{last_column}", to_flat_rows(fresh, headers, schema)
            )
        logger.info("sheet saved", extra={"sheet": sheet_name, "updated": updated, "appended": len(fresh)})
        return {"updated": updated, "appended": len(fresh)}
