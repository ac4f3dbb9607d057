"""
Catalog of spreadsheet formula templates.

Placeholders are written `{name}`. Most aggregate templates come in two forms:
the bare expression (e.g. `sumif`) and the same expression already nested in
the header guard (e.g. `sum-by-key`), which prints the header text on row 1,
stays blank where the key cell is blank and otherwise evaluates the expression
for the whole column.
"""
import re
from dataclasses import dataclass
from typing import Any, Mapping

from sheetbind.exceptions import FormulaTemplateError

PLACEHOLDER = re.compile(r"\{([A-Za-z_][A-Za-z0-9_]*)\}")


@dataclass(frozen=True)
class FormulaTemplate:
    name: str
    text: str
    description: str = ""

    @property
    def placeholders(self) -> list[str]:
        seen: list[str] = []
        for match in PLACEHOLDER.finditer(self.text):
            if match.group(1) not in seen:
                seen.append(match.group(1))
        return seen

    def render(self, bindings: Mapping[str, Any]) -> str:
        missing = [p for p in self.placeholders if p not in bindings]
        if missing:
            raise FormulaTemplateError(f"template '{self.name}' is missing bindings: {', '.join(missing)}")
        # one pass over the template text: substituted values are never rescanned
        return PLACEHOLDER.sub(lambda m: _render_value(bindings[m.group(1)]), self.text)


def _render_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    return str(value)


HEADER_GUARD = '=ARRAYFORMULA(IFS(ROW({key})=1,"{header}",ISBLANK({key}), "", true, {formula}))'

SUMIF = "SUMIF({lookup},{key},{sum})"
COUNTIF = "COUNTIF({lookup},{key})"
UNIQUE_SORTED = "SORT(UNIQUE({source}))"
UNIQUE_SORTED_FILTERED = 'SORT(UNIQUE(FILTER({source}, {source}<>"")), 1)'
SAFE_DIVISION = "{numerator}/IF({denominator}=0,1,{denominator})"
SORTED_LOOKUP = (
    'IFERROR(VLOOKUP({key},SORT(QUERY({sheet}!{date_column}:{key_column},'
    '"SELECT {key_column}, {date_column}"),2,{is_first}),2,0),"")'
)
SPLIT_BY_INDEX = 'IFERROR(INDEX(SPLIT({source}, "{delimiter}"), 0, {index}), 0)'
ROLLING_AVERAGE = 'SUMIF(ROW({total}),"<="&ROW({total}),{total})/(ROW({total})-1)'
SAFE_VLOOKUP = 'IFERROR(VLOOKUP({search_key},{search_range},{column_index},false),"")'
WEEKDAY_NUMBER = "WEEKDAY({date},2)"
ZERO_GUARD = "IF({value}=0,1,{value})"


def _guarded(inner: str) -> str:
    return HEADER_GUARD.replace("{formula}", inner)


def _catalog(*templates: FormulaTemplate) -> dict[str, FormulaTemplate]:
    return {t.name: t for t in templates}


CATALOG: dict[str, FormulaTemplate] = _catalog(
    FormulaTemplate("header-guard", HEADER_GUARD, "Header on row 1, blank for blank keys, else {formula}"),
    FormulaTemplate("sum-by-key", _guarded(SUMIF), "Per-key sum of {sum} where {lookup} matches {key}"),
    FormulaTemplate("count-by-key", _guarded(COUNTIF), "Per-key count of {key} in {lookup}"),
    FormulaTemplate("unique-sorted", _guarded(UNIQUE_SORTED), "Sorted distinct values of {source}"),
    FormulaTemplate(
        "unique-sorted-filtered", _guarded(UNIQUE_SORTED_FILTERED), "Sorted distinct non-empty values of {source}"
    ),
    FormulaTemplate("safe-division", _guarded(SAFE_DIVISION), "{numerator} / {denominator}, zero denominators as 1"),
    FormulaTemplate(
        "sorted-lookup", _guarded(SORTED_LOOKUP), "First or last {date_column} per key from another sheet"
    ),
    FormulaTemplate("split-by-index", _guarded(SPLIT_BY_INDEX), "The {index}-th piece of {source} split on {delimiter}"),
    FormulaTemplate("rolling-average", _guarded(ROLLING_AVERAGE), "Running average of {total} down the column"),
    FormulaTemplate("sumif", SUMIF),
    FormulaTemplate("countif", COUNTIF),
    FormulaTemplate("unique", UNIQUE_SORTED),
    FormulaTemplate("unique-filtered", UNIQUE_SORTED_FILTERED),
    FormulaTemplate("divide", SAFE_DIVISION),
    FormulaTemplate("vlookup-sorted", SORTED_LOOKUP),
    FormulaTemplate("split", SPLIT_BY_INDEX),
    FormulaTemplate("running-average", ROLLING_AVERAGE),
    FormulaTemplate("safe-vlookup", SAFE_VLOOKUP, "VLOOKUP that yields an empty string when nothing matches"),
    FormulaTemplate("weekday", WEEKDAY_NUMBER, "Monday=1 weekday number"),
    FormulaTemplate("zero-guard", ZERO_GUARD),
)


def get_template(name: str) -> FormulaTemplate:
    try:
        return CATALOG[name]
    except KeyError:
        raise FormulaTemplateError(f"unknown formula template '{name}'") from None
