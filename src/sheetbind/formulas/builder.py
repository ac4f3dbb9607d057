import logging
from typing import Any, Mapping, Optional

from sheetbind.formulas.templates import get_template

logger = logging.getLogger(__name__)


def build(template_name: str, bindings: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> str:
    """
    Renders a catalog template. Bindings may be given as a mapping, as keyword
    arguments, or both (keywords win). Unused bindings are ignored.
    """
    template = get_template(template_name)
    values = {**(bindings or {}), **kwargs}
    unused = set(values) - set(template.placeholders)
    if unused:
        logger.debug("unused formula bindings", extra={"template": template_name, "unused": sorted(unused)})
    return template.render(values)


def wrap(key: str, header: str, formula: str) -> str:
    """Nests an expression in the header guard."""
    return build("header-guard", key=key, header=header, formula=formula)


def sum_by_key(key: str, header: str, lookup: str, sum: str) -> str:
    return build("sum-by-key", key=key, header=header, lookup=lookup, sum=sum)


def count_by_key(key: str, header: str, lookup: str) -> str:
    return build("count-by-key", key=key, header=header, lookup=lookup)


def unique_sorted(key: str, header: str, source: str, skip_blank: bool = False) -> str:
    name = "unique-sorted-filtered" if skip_blank else "unique-sorted"
    return build(name, key=key, header=header, source=source)


def safe_division(key: str, header: str, numerator: str, denominator: str) -> str:
    return build("safe-division", key=key, header=header, numerator=numerator, denominator=denominator)


def sorted_lookup(key: str, header: str, sheet: str, date_column: str, key_column: str, first: bool = True) -> str:
    return build(
        "sorted-lookup",
        key=key,
        header=header,
        sheet=sheet,
        date_column=date_column,
        key_column=key_column,
        is_first=first,
    )


def split_by_index(key: str, header: str, source: str, delimiter: str, index: int) -> str:
    return build("split-by-index", key=key, header=header, source=source, delimiter=delimiter, index=index)


def rolling_average(key: str, header: str, total: str) -> str:
    return build("rolling-average", key=key, header=header, total=total)
