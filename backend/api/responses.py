"""
Translate dashboard errors into JSON responses.
"""
from typing import Tuple

from flask import Response, jsonify

from core.errors import ApplicationError, DashboardError, EmptyDataError, ProviderError


def error_response(error: DashboardError, application_status: int = 502) -> Tuple[Response, int]:
    """
    JSON body and status for an error raised while serving a request.

    The proxy routes pass `application_status=200` so an `error` body from the
    Apps Script reaches the browser the way the script sent it.
    """
    if isinstance(error, ProviderError):
        status = error.status if 400 <= (error.status or 0) <= 599 else 502
        return jsonify({"error": "Upstream error", "detail": error.detail or error.message}), status
    if isinstance(error, ApplicationError):
        return jsonify({"error": error.message}), application_status
    if isinstance(error, EmptyDataError):
        return jsonify(error.to_dict()), 404
    return jsonify(error.to_dict()), 500


def not_configured(message: str) -> Tuple[Response, int]:
    return jsonify({"error": message or "Sheet provider not configured"}), 500
