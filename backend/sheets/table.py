"""
Table types shared by the normalizer and the dashboard pipeline.
"""
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence, Tuple

RawSheet = List[List[Any]]
Row = Tuple[Any, ...]


def cell_text(value: Any) -> str:
    """String form of a sheet cell, as it would be displayed."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return ""
        if value.is_integer():
            return str(int(value))
    return str(value)


def row_cell(row: Sequence[Any], index: int) -> Any:
    """Cell at `index`, or "" when the row is shorter than the header."""
    if row is None or index < 0 or index >= len(row):
        return ""
    value = row[index]
    return "" if value is None else value


@dataclass(frozen=True)
class NormalizedTable:
    """Header plus data rows after header/blank/total rows were dropped."""

    header: Tuple[str, ...] = ()
    rows: Tuple[Row, ...] = ()
    header_index: int = -1

    @property
    def is_empty(self) -> bool:
        return not self.rows

    @property
    def column_count(self) -> int:
        return len(self.header)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "header": list(self.header),
            "rows": [list(row) for row in self.rows],
        }


EMPTY_TABLE = NormalizedTable()
