"""
Turn a raw sheet matrix into a clean (header, rows) table.

Attendance sheets carry report titles above the header and TOTAL rows mixed
into the data, so the header row is found by keyword and the rest is a stable
filter over the rows that follow it.
"""
from typing import Any, Iterable, List, Sequence, Tuple

from core.config import TableRules
from core.errors import EmptyDataError
from sheets.table import EMPTY_TABLE, NormalizedTable, RawSheet, cell_text


def _row_text(row: Sequence[Any]) -> str:
    return " ".join(cell_text(c) for c in (row or ()))


def detect_header_row(raw: RawSheet, keywords: Iterable[str]) -> int:
    """
    Index of the first row with a cell containing any keyword (case-insensitive).

    Defaults to 0 when no row matches.
    """
    lowered = [k.lower() for k in keywords if k]
    for idx, row in enumerate(raw or ()):
        for cell in row or ():
            text = cell_text(cell).lower()
            if any(k in text for k in lowered):
                return idx
    return 0


def is_total_row(row: Sequence[Any], markers: Iterable[str], exemptions: Iterable[str] = ()) -> bool:
    """
    True when the row is an aggregate line rather than a record.

    A marker counts unless an exemption that itself contains the marker is
    also present in the row ("TOTAL PERMISSION" does not make a TOTAL row).
    """
    text = _row_text(row).upper()
    exemptions = [e.upper() for e in exemptions]
    for marker in markers:
        marker = marker.upper()
        if marker not in text:
            continue
        if any(marker in ex and ex in text for ex in exemptions):
            continue
        return True
    return False


def is_blank_row(row: Sequence[Any]) -> bool:
    return all(cell_text(c).strip() == "" for c in (row or ()))


def normalize_sheet(raw: RawSheet, rules: TableRules = None) -> NormalizedTable:
    """
    Locate the header row and keep the data rows after it.

    Rows at or above the header, total rows and blank rows are dropped; the
    remaining rows keep their original order. An empty sheet or a sheet with
    no surviving rows gives the empty table.
    """
    rules = rules or TableRules()
    if not raw:
        return EMPTY_TABLE

    header_idx = detect_header_row(raw, rules.header_keywords)
    header = tuple(cell_text(c) for c in (raw[header_idx] or ()))

    rows = tuple(
        tuple(row)
        for idx, row in enumerate(raw)
        if idx > header_idx
        and not is_total_row(row, rules.total_markers, rules.total_exemptions)
        and not is_blank_row(row)
    )
    if not rows:
        return EMPTY_TABLE

    return NormalizedTable(header=header, rows=rows, header_index=header_idx)


def _replace_text(value: Any, replacements: Sequence[Tuple[str, str]]) -> Any:
    if not isinstance(value, str):
        return value
    for old, new in replacements:
        if old and old in value:
            value = value.replace(old, new)
    return value


def apply_cell_replacements(table: NormalizedTable, replacements: Sequence[Tuple[str, str]]) -> NormalizedTable:
    """Dataset-specific text substitutions over string cells of header and rows."""
    if not replacements or table.is_empty:
        return table
    return NormalizedTable(
        header=tuple(_replace_text(h, replacements) for h in table.header),
        rows=tuple(tuple(_replace_text(c, replacements) for c in row) for row in table.rows),
        header_index=table.header_index,
    )


def _is_matrix(payload: Any) -> bool:
    return isinstance(payload, list) and all(
        row is None or isinstance(row, (list, tuple)) for row in payload
    )


def build_table(payload: Any, rules: TableRules = None) -> NormalizedTable:
    """
    Normalize a provider payload, raising EmptyDataError when there is nothing to show.
    """
    rules = rules or TableRules()
    if not _is_matrix(payload) or not payload:
        raise EmptyDataError("Sheet is empty or has no data")

    raw: List[List[Any]] = [list(row or ()) for row in payload]
    table = normalize_sheet(raw, rules)
    if table.is_empty:
        raise EmptyDataError("Sheet has no data rows")
    return apply_cell_replacements(table, rules.cell_replacements)
