"""
Interactive dashboard session driven by user actions.

Only sheet fetches suspend; every other action runs to completion on the
current state. Failures are reported through `notify` and leave the previous
state untouched.
"""
import asyncio
from typing import Callable, List, Optional

from core.config import Settings
from core.errors import DashboardError
from core.logger import logger
from dashboard import session
from dashboard.session import DashboardState
from sheets.normalizer import build_table
from sheets.table import NormalizedTable


class DashboardController:
    """Holds the current DashboardState and applies actions to it."""

    def __init__(
        self,
        fetcher,
        settings: Optional[Settings] = None,
        notify: Optional[Callable[[DashboardError], None]] = None,
    ):
        self.fetcher = fetcher
        self.settings = settings or Settings()
        self.notify = notify
        self.state: DashboardState = session.initial_state(self.settings)

        # Bumped on every sheet request; responses for older tokens are dropped.
        self._generation = 0
        self._pending_search: Optional[asyncio.Task] = None

    def _report(self, error: DashboardError) -> None:
        logger.error(f"Dashboard action failed: {error}")
        if self.notify:
            self.notify(error)

    async def start(self) -> DashboardState:
        """Load the sheet list and open the summary sheet (or the first one)."""
        try:
            names: List[str] = await self.fetcher.list_sheet_names()
        except DashboardError as e:
            self._report(e)
            return self.state

        self.state = session.with_sheet_names(self.state, names)
        start = session.pick_start_sheet(names)
        if start:
            await self.select_sheet(start)
        return self.state

    async def select_sheet(self, name: str) -> bool:
        """
        Fetch and show a sheet. Returns True when the new table was applied.

        A response that arrives after a newer selection was made is discarded.
        """
        if not name:
            return False

        self._generation += 1
        token = self._generation

        try:
            raw = await self.fetcher.fetch_sheet(name)
            table: NormalizedTable = build_table(raw, self.settings.table_rules)
        except DashboardError as e:
            if token == self._generation:
                self._report(e)
            else:
                logger.debug(f"Ignoring error from stale request for '{name}': {e}")
            return False

        if token != self._generation:
            logger.debug(f"Discarding stale response for sheet '{name}'")
            return False

        self._cancel_pending_search()
        self.state = session.with_table(self.state, name, table)
        logger.info(f"Loaded sheet '{name}' with {len(table.rows)} rows")
        return True

    async def open_summary(self) -> Optional[NormalizedTable]:
        """Cached summary table, loading the summary sheet on first use."""
        if self.state.summary is not None:
            return self.state.summary
        name = self.state.summary_sheet_name
        if not name:
            logger.warning("No summary sheet found")
            return None
        await self.select_sheet(name)
        return self.state.summary

    def _cancel_pending_search(self) -> None:
        if self._pending_search and not self._pending_search.done():
            self._pending_search.cancel()
        self._pending_search = None

    async def _debounced_filter(self, keyword: str, delay: float) -> None:
        await asyncio.sleep(delay)
        self.state = session.with_filter(self.state, keyword)

    def search(self, keyword: str) -> asyncio.Task:
        """
        Schedule a filter after the input has been quiet for the debounce delay.

        A newer call cancels the pending one. Must be called from a running loop.
        """
        self._cancel_pending_search()
        task = asyncio.ensure_future(
            self._debounced_filter(keyword, self.settings.filter_debounce_seconds)
        )
        self._pending_search = task
        return task

    def clear_search(self) -> DashboardState:
        self._cancel_pending_search()
        self.state = session.with_filter(self.state, "")
        return self.state

    def sort(self, ascending: bool = True) -> DashboardState:
        if not self.state.table.is_empty:
            self.state = session.with_sort(self.state, ascending)
        return self.state

    def goto_page(self, page_index: int) -> DashboardState:
        self.state = session.with_page(self.state, page_index)
        return self.state

    def next_page(self) -> DashboardState:
        self.state = session.next_page(self.state)
        return self.state

    def previous_page(self) -> DashboardState:
        self.state = session.previous_page(self.state)
        return self.state
