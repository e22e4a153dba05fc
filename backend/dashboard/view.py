"""
Display-side projections: pagination, display cells and the print document.
"""
import html
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence, Tuple

import pandas as pd

from sheets.table import Row, cell_text, row_cell

DEFAULT_PAGE_SIZE = 25

# Compact (mobile) layout limits: (max length, kept characters)
COMPACT_HEADER_LIMIT = (16, 13)
COMPACT_CELL_LIMIT = (24, 20)


@dataclass(frozen=True)
class Page:
    rows: Tuple[Row, ...]
    page_index: int
    page_size: int
    total_pages: int
    row_count: int

    @property
    def has_previous(self) -> bool:
        return self.page_index > 1

    @property
    def has_next(self) -> bool:
        return self.page_index < self.total_pages

    def info_text(self) -> str:
        return f"{self.row_count} rows • page {self.page_index} / {self.total_pages}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "page_index": self.page_index,
            "page_size": self.page_size,
            "total_pages": self.total_pages,
            "row_count": self.row_count,
            "has_previous": self.has_previous,
            "has_next": self.has_next,
        }


def total_pages(row_count: int, page_size: int) -> int:
    return max(1, math.ceil(row_count / page_size))


def paginate(rows: Sequence[Row], page_index: int = 1, page_size: int = DEFAULT_PAGE_SIZE) -> Page:
    """
    Slice one page out of the result set.

    Out-of-range page numbers are clamped into [1, total_pages].
    """
    if page_size < 1:
        raise ValueError("page_size must be at least 1")
    pages = total_pages(len(rows), page_size)
    page_index = min(max(1, int(page_index)), pages)
    start = (page_index - 1) * page_size
    return Page(
        rows=tuple(rows[start:start + page_size]),
        page_index=page_index,
        page_size=page_size,
        total_pages=pages,
        row_count=len(rows),
    )


def truncate(text: str, limit: Tuple[int, int]) -> str:
    max_len, keep = limit
    if len(text) > max_len:
        return text[:keep] + "..."
    return text


def project_header(header: Sequence[Any], compact: bool = False) -> List[str]:
    labels = [cell_text(h) for h in header]
    if compact:
        labels = [truncate(label, COMPACT_HEADER_LIMIT) for label in labels]
    return labels


def project_rows(header: Sequence[Any], rows: Sequence[Row], compact: bool = False) -> List[List[str]]:
    """One display string per header column for every row; missing cells become ""."""
    width = len(header)
    projected = []
    for row in rows:
        cells = [cell_text(row_cell(row, idx)) for idx in range(width)]
        if compact:
            cells = [truncate(cell, COMPACT_CELL_LIMIT) for cell in cells]
        projected.append(cells)
    return projected


_PRINT_TEMPLATE = """<!DOCTYPE html>
<html lang="km">
<head>
  <meta charset="UTF-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1.0" />
  <title>{title}</title>
  <link href="https://fonts.googleapis.com/css2?family=Noto+Sans+Khmer:wght@400;700&family=Moul&display=swap" rel="stylesheet" />
  <style>
    body{{ font-family:"Noto Sans Khmer", Arial, sans-serif; padding:16px; }}
    h1{{ font-family:"Moul","Noto Sans Khmer",sans-serif; font-size:16px; margin:0 0 6px; }}
    .sub{{ color:#555; font-size:12px; margin-bottom:12px; }}
    table{{ width:100%; border-collapse:collapse; }}
    th, td{{ border:1px solid #ddd; padding:6px 8px; font-size:11px; white-space:nowrap; }}
    th{{ background:#f3f6fb; }}
    @media print{{ body{{ padding:0; }} }}
  </style>
</head>
<body>
  <h1>{title}</h1>
  <div class="sub">{subtitle}</div>
  {table}
  <script>window.onload=()=>window.print();</script>
</body>
</html>
"""


def render_print_html(title: str, subtitle: str, header: Sequence[Any], rows: Sequence[Row]) -> str:
    """Standalone printable document for the full (unpaginated) result set."""
    labels = project_header(header)
    # Positional columns: duplicate or blank labels are common in sheet headers
    frame = pd.DataFrame(project_rows(header, rows), columns=range(len(labels)))
    with pd.option_context("display.max_colwidth", None):
        table_html = frame.to_html(index=False, header=False, escape=True, border=0)
    head_html = "".join(f"<th>{html.escape(label)}</th>" for label in labels)
    table_html = table_html.replace("<tbody>", f"<thead><tr>{head_html}</tr></thead>\n  <tbody>", 1)
    return _PRINT_TEMPLATE.format(
        title=html.escape(title),
        subtitle=html.escape(subtitle),
        table=table_html,
    )
