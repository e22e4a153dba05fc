"""
Error kinds surfaced by the dashboard.

All of them are caught where the user-triggered action started (a route or a
controller action) and reported as-is. None of them is retried.
"""
from typing import Any, Dict, Optional


class DashboardError(Exception):
    """Base class for errors shown to the dashboard user."""

    kind = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message, "kind": self.kind}


class ProviderError(DashboardError):
    """Network, HTTP or malformed-body failure while talking to the sheet provider."""

    kind = "provider"

    def __init__(self, status: int, message: str, detail: Optional[str] = None):
        super().__init__(message)
        self.status = status
        self.detail = detail

    def __str__(self) -> str:
        return f"HTTP {self.status}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        payload = super().to_dict()
        payload["status"] = self.status
        if self.detail:
            payload["detail"] = self.detail
        return payload


class ApplicationError(DashboardError):
    """The provider answered successfully but the body carries an `error` field."""

    kind = "application"


class EmptyDataError(DashboardError):
    """The payload is not a matrix, or no data rows survive normalization."""

    kind = "empty"
