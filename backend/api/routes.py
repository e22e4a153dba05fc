from typing import Optional

from flask import Blueprint

from api.routes_dashboard import register_dashboard_routes
from api.routes_sheets import register_sheet_routes
from core.config import Settings
from core.logger import logger
from sheets.fetcher import build_sheet_fetcher


def create_api_blueprint(settings: Settings, fetcher: Optional[object] = None) -> Blueprint:
    """Build the /api blueprint around one sheet fetcher."""
    api = Blueprint("api", __name__)

    fetcher_error = None
    if fetcher is None:
        # Initialize the sheet provider; routes answer 500 when it is missing
        try:
            fetcher = build_sheet_fetcher(settings)
        except Exception as e:
            logger.warning(f"Sheet provider not initialized: {type(e).__name__}: {e}")
            fetcher_error = str(e)
            fetcher = None

    # Register route groups on the shared blueprint
    register_sheet_routes(api, fetcher, fetcher_error)
    register_dashboard_routes(api, fetcher, settings, fetcher_error)
    return api
