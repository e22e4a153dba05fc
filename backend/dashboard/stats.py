"""
Summary statistics over the current result set.
"""
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional, Sequence

import pandas as pd

from core.config import ColumnAliases
from dashboard.query import to_number
from sheets.header_matcher import find_column
from sheets.table import Row, cell_text, row_cell

UNAVAILABLE = "-"


def format_number(value: Optional[float]) -> str:
    """Display form of a stat: integral floats without decimals, None as "-"."""
    if value is None:
        return UNAVAILABLE
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


@dataclass(frozen=True)
class Stats:
    """
    Quick stats for the dashboard cards.

    A None field means the column could not be found in the header, which is
    different from a column that is present and sums to zero.
    """

    row_count: int
    scan_total: Optional[float] = None
    permission_total: Optional[float] = None
    late_absent_count: Optional[int] = None
    remark_p_count: Optional[int] = None
    remark_m_count: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def display(self) -> Dict[str, str]:
        return {key: format_number(value) for key, value in asdict(self).items()}


def _column(rows: Sequence[Row], idx: int) -> pd.Series:
    return pd.Series([row_cell(row, idx) for row in rows], dtype=object)


def column_sum(rows: Sequence[Row], idx: Optional[int]) -> Optional[float]:
    if idx is None:
        return None
    if not rows:
        return 0.0
    return float(_column(rows, idx).map(to_number).sum())


def flagged_count(rows: Sequence[Row], idx: Optional[int]) -> Optional[int]:
    """Rows whose flag cell is non-empty and not "0"."""
    if idx is None:
        return None
    if not rows:
        return 0
    values = _column(rows, idx).map(cell_text).str.strip()
    return int(((values != "") & (values != "0")).sum())


def marker_count(rows: Sequence[Row], idx: Optional[int], marker: str) -> Optional[int]:
    if idx is None:
        return None
    if not rows:
        return 0
    values = _column(rows, idx).map(cell_text).str.strip()
    return int((values == marker).sum())


def aggregate(rows: Sequence[Row], header: Sequence[Any], aliases: ColumnAliases = None) -> Stats:
    aliases = aliases or ColumnAliases()
    remark_idx = find_column(header, aliases.remark)
    return Stats(
        row_count=len(rows),
        scan_total=column_sum(rows, find_column(header, aliases.scan_total)),
        permission_total=column_sum(rows, find_column(header, aliases.permission_total)),
        late_absent_count=flagged_count(rows, find_column(header, aliases.late_absent)),
        remark_p_count=marker_count(rows, remark_idx, "P"),
        remark_m_count=marker_count(rows, remark_idx, "M"),
    )
