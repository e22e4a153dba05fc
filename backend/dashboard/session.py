"""
Dashboard session state.

One immutable value holds everything the user has chosen (sheet, search
text, sort direction, page). Each action produces a new state; the visible
result set is always recomputed from the table, never patched.
"""
from dataclasses import dataclass, field, replace
from typing import Optional, Sequence, Tuple

from core.config import ColumnAliases
from dashboard.months import DEFAULT_MONTH, extract_month, month_year_label
from dashboard.query import filter_rows, sort_rows
from dashboard.stats import Stats, aggregate
from dashboard.view import DEFAULT_PAGE_SIZE, Page, paginate, total_pages
from sheets.table import EMPTY_TABLE, NormalizedTable, Row

SUMMARY_MARKER = "summary"


def is_summary_sheet(name: Optional[str]) -> bool:
    return SUMMARY_MARKER in str(name or "").lower()


def pick_start_sheet(names: Sequence[str]) -> Optional[str]:
    """The summary sheet if there is one, else the first sheet."""
    for name in names or ():
        if is_summary_sheet(name):
            return name
    return names[0] if names else None


@dataclass(frozen=True)
class DashboardState:
    sheet_names: Tuple[str, ...] = ()
    sheet_name: Optional[str] = None
    table: NormalizedTable = EMPTY_TABLE
    keyword: str = ""
    sort_ascending: Optional[bool] = None
    page_index: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    summary: Optional[NormalizedTable] = None
    month: str = DEFAULT_MONTH
    year: str = "២០២៦"
    aliases: ColumnAliases = field(default_factory=ColumnAliases)

    @property
    def result(self) -> Tuple[Row, ...]:
        rows = filter_rows(self.table.rows, self.keyword)
        if self.sort_ascending is not None:
            rows = sort_rows(rows, self.table.header, self.sort_ascending, self.aliases)
        return rows

    @property
    def page(self) -> Page:
        return paginate(self.result, self.page_index, self.page_size)

    @property
    def stats(self) -> Stats:
        return aggregate(self.result, self.table.header, self.aliases)

    @property
    def month_year(self) -> str:
        return month_year_label(self.month, self.year)

    @property
    def summary_sheet_name(self) -> Optional[str]:
        for name in self.sheet_names:
            if is_summary_sheet(name):
                return name
        return None


def initial_state(settings) -> DashboardState:
    return DashboardState(
        page_size=settings.page_size,
        year=settings.report_year,
        aliases=settings.column_aliases,
    )


def with_sheet_names(state: DashboardState, names: Sequence[str]) -> DashboardState:
    return replace(state, sheet_names=tuple(names))


def with_table(state: DashboardState, sheet_name: str, table: NormalizedTable) -> DashboardState:
    """Replace the table wholesale; search, sort and page start over."""
    summary = table if is_summary_sheet(sheet_name) else state.summary
    return replace(
        state,
        sheet_name=sheet_name,
        table=table,
        keyword="",
        sort_ascending=None,
        page_index=1,
        summary=summary,
        month=extract_month(sheet_name, state.month),
    )


def with_filter(state: DashboardState, keyword: Optional[str]) -> DashboardState:
    return replace(state, keyword=(keyword or "").strip(), page_index=1)


def with_sort(state: DashboardState, ascending: bool) -> DashboardState:
    return replace(state, sort_ascending=bool(ascending), page_index=1)


def with_page(state: DashboardState, page_index: int) -> DashboardState:
    pages = total_pages(len(state.result), state.page_size)
    return replace(state, page_index=min(max(1, int(page_index)), pages))


def next_page(state: DashboardState) -> DashboardState:
    return with_page(state, state.page_index + 1)


def previous_page(state: DashboardState) -> DashboardState:
    return with_page(state, state.page_index - 1)
