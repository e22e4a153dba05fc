"""
Dashboard query pipeline and session model.

Re-exports the pure transforms for convenient imports.
"""

from .query import filter_rows, parse_number, sort_rows, to_number  # noqa: F401
from .session import DashboardState, pick_start_sheet  # noqa: F401
from .stats import Stats, aggregate  # noqa: F401
from .view import Page, paginate, project_rows, render_print_html  # noqa: F401
