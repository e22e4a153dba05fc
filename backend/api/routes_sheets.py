"""
Sheet proxy routes: pass sheet names and raw sheet data through to the browser.
"""
from typing import Optional

from flask import Blueprint, jsonify, request

from api.responses import error_response, not_configured
from core.errors import DashboardError
from core.logger import logger


def register_sheet_routes(
    api: Blueprint,
    fetcher: Optional[object],
    fetcher_error: Optional[str] = None,
) -> None:
    """Register the /sheets and /sheet proxy routes on the given blueprint."""

    @api.route("/sheets", methods=["GET"])
    async def list_sheets():
        """List worksheet names."""
        if not fetcher:
            return not_configured(fetcher_error)
        try:
            names = await fetcher.list_sheet_names()
            return jsonify({"names": names}), 200
        except DashboardError as e:
            return error_response(e, application_status=200)
        except Exception as e:  # pragma: no cover - defensive
            logger.error(f"Error listing sheets: {str(e)}", exc_info=True)
            return jsonify({"error": str(e)}), 500

    @api.route("/sheet", methods=["GET"])
    async def get_sheet():
        """Raw cell matrix of one worksheet."""
        if not fetcher:
            return not_configured(fetcher_error)

        name = request.args.get("name")
        if not name:
            return jsonify({"error": "Missing query: name"}), 400

        try:
            data = await fetcher.fetch_sheet(name)
            return jsonify({"data": data}), 200
        except DashboardError as e:
            return error_response(e, application_status=200)
        except Exception as e:  # pragma: no cover - defensive
            logger.error(f"Error reading sheet '{name}': {str(e)}", exc_info=True)
            return jsonify({"error": str(e)}), 500
