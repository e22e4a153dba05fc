"""
Free-text filtering, name sorting and lenient number parsing over table rows.
"""
import math
import re
from typing import Any, Optional, Sequence, Tuple

from core.config import ColumnAliases
from sheets.header_matcher import find_column
from sheets.table import Row, cell_text, row_cell

_NUMBER = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$", re.ASCII)


def parse_number(value: Any) -> Tuple[float, bool]:
    """
    Parse a loosely formatted cell ("1,234", " 12 ") into a float.

    Returns (number, ok). Empty text is 0 and counts as parsed; anything
    non-numeric or non-finite is (0, False).
    """
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        number = float(value)
        return (number, True) if math.isfinite(number) else (0.0, False)

    text = cell_text(value).replace(",", "").strip()
    if text == "":
        return 0.0, True
    if not _NUMBER.match(text):
        return 0.0, False
    number = float(text)
    if not math.isfinite(number):
        return 0.0, False
    return number, True


def to_number(value: Any) -> float:
    """Lenient number: unparseable input silently counts as 0."""
    return parse_number(value)[0]


def row_matches(row: Sequence[Any], keyword: str) -> bool:
    joined = " ".join(cell_text(c) for c in (row or ())).lower()
    return keyword in joined


def filter_rows(rows: Sequence[Row], keyword: Optional[str]) -> Tuple[Row, ...]:
    """Rows whose joined text contains the keyword, case-insensitively."""
    kw = (keyword or "").strip().lower()
    if not kw:
        return tuple(rows)
    return tuple(row for row in rows if row_matches(row, kw))


def sort_column(header: Sequence[Any], aliases: ColumnAliases = None) -> int:
    """Name column if found, else the ID column, else column 0."""
    aliases = aliases or ColumnAliases()
    idx = find_column(header, aliases.name)
    if idx is None:
        idx = find_column(header, aliases.id)
    return 0 if idx is None else idx


def sort_rows(
    rows: Sequence[Row],
    header: Sequence[Any],
    ascending: bool = True,
    aliases: ColumnAliases = None,
) -> Tuple[Row, ...]:
    """Stable case-insensitive sort on the best name-like column."""
    idx = sort_column(header, aliases)
    # sorted() keeps equal keys in input order for reverse=True as well
    return tuple(sorted(
        rows,
        key=lambda row: cell_text(row_cell(row, idx)).casefold(),
        reverse=not ascending,
    ))
