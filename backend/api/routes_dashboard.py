"""
Dashboard routes: table view, summary sheet and print view.

Every request rebuilds the view from the fetched sheet; nothing is kept
between requests.
"""
from dataclasses import replace
from typing import Any, Dict, Optional

from flask import Blueprint, Response, jsonify, request

from api.responses import error_response, not_configured
from core.config import Settings
from core.errors import DashboardError, EmptyDataError
from core.logger import logger
from dashboard import session
from dashboard.session import DashboardState
from dashboard.view import project_header, project_rows, render_print_html
from sheets.normalizer import build_table
from validators import ValidationError, validate_dashboard_query


async def load_state(fetcher, settings: Settings, query: Dict[str, Any]) -> DashboardState:
    """Fetch the requested (or start) sheet and replay the query onto a fresh state."""
    state = replace(session.initial_state(settings), page_size=query["page_size"])

    name = query["sheet"]
    if not name:
        names = await fetcher.list_sheet_names()
        state = session.with_sheet_names(state, names)
        name = session.pick_start_sheet(names)
        if not name:
            raise EmptyDataError("No sheets available")

    table = build_table(await fetcher.fetch_sheet(name), settings.table_rules)
    state = session.with_table(state, name, table)
    state = session.with_filter(state, query["keyword"])
    if query["ascending"] is not None:
        state = session.with_sort(state, query["ascending"])
    return session.with_page(state, query["page"])


def register_dashboard_routes(
    api: Blueprint,
    fetcher: Optional[object],
    settings: Settings,
    fetcher_error: Optional[str] = None,
) -> None:
    """Register dashboard view routes on the given blueprint."""

    @api.route("/dashboard", methods=["GET"])
    async def dashboard_view():
        """Current page of the filtered/sorted table plus quick stats."""
        if not fetcher:
            return not_configured(fetcher_error)
        try:
            query = validate_dashboard_query(request.args, settings.page_size)
        except ValidationError as e:
            return jsonify({"error": str(e)}), 400

        try:
            state = await load_state(fetcher, settings, query)
        except DashboardError as e:
            return error_response(e)
        except Exception as e:  # pragma: no cover - defensive
            logger.error(f"Error building dashboard view: {str(e)}", exc_info=True)
            return jsonify({"error": str(e)}), 500

        page = state.page
        stats = state.stats
        header = state.table.header
        return jsonify({
            "sheet": state.sheet_name,
            "month": state.month_year,
            "header": project_header(header, query["compact"]),
            "rows": project_rows(header, page.rows, query["compact"]),
            "page": page.to_dict(),
            "info": page.info_text(),
            "stats": stats.to_dict(),
            "stats_display": stats.display(),
            "query": {
                "q": state.keyword,
                "sort": None if state.sort_ascending is None else ("asc" if state.sort_ascending else "desc"),
            },
        }), 200

    @api.route("/dashboard/summary", methods=["GET"])
    async def dashboard_summary():
        """The whole summary sheet, unfiltered."""
        if not fetcher:
            return not_configured(fetcher_error)
        try:
            names = await fetcher.list_sheet_names()
            name = next((n for n in names if session.is_summary_sheet(n)), None)
            if not name:
                return jsonify({"error": "Summary sheet not found", "kind": "empty"}), 404
            table = build_table(await fetcher.fetch_sheet(name), settings.table_rules)
        except DashboardError as e:
            return error_response(e)
        except Exception as e:  # pragma: no cover - defensive
            logger.error(f"Error loading summary sheet: {str(e)}", exc_info=True)
            return jsonify({"error": str(e)}), 500

        state = session.with_table(session.initial_state(settings), name, table)
        return jsonify({
            "sheet": name,
            "month": state.month_year,
            "header": project_header(table.header),
            "rows": project_rows(table.header, table.rows),
        }), 200

    @api.route("/dashboard/print", methods=["GET"])
    async def dashboard_print():
        """Printable HTML of the full filtered/sorted result."""
        if not fetcher:
            return not_configured(fetcher_error)
        try:
            query = validate_dashboard_query(request.args, settings.page_size)
        except ValidationError as e:
            return jsonify({"error": str(e)}), 400

        try:
            state = await load_state(fetcher, settings, query)
        except DashboardError as e:
            return error_response(e)
        except Exception as e:  # pragma: no cover - defensive
            logger.error(f"Error building print view: {str(e)}", exc_info=True)
            return jsonify({"error": str(e)}), 500

        title = f"របាយការណ៍ - {state.sheet_name or ''}".strip()
        document = render_print_html(title, state.month_year, state.table.header, state.result)
        return Response(document, status=200, mimetype="text/html")
