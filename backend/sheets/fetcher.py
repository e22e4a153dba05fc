"""
Async clients that pull sheet names and raw sheet matrices from a provider.

Two HTTP flavours exist: the dashboard proxy (`/sheets`, `/sheet?name=`) and
the Apps Script web app (`?action=sheets`, `?action=sheet&name=`). Both answer
with the same body shapes. A single failed attempt surfaces immediately.
"""
from typing import Any, Dict, List, Optional

import httpx

from core.errors import ApplicationError, ProviderError
from core.logger import logger
from sheets.table import RawSheet

# Status used for failures that never produced an HTTP response.
BAD_GATEWAY = 502


def parse_names_payload(payload: Any) -> List[str]:
    """Accept `{"names": [...]}` or a bare list of names."""
    if isinstance(payload, dict):
        if payload.get("error"):
            raise ApplicationError(str(payload["error"]))
        payload = payload.get("names")
    if not isinstance(payload, list):
        raise ProviderError(BAD_GATEWAY, "Malformed sheet list response")
    return [str(name) for name in payload if name is not None]


def parse_sheet_payload(payload: Any) -> RawSheet:
    """
    Accept `{"data": [...]}` or a bare matrix; `{"error": ...}` is an application error.

    The matrix shape itself is checked by the normalizer, which reports an
    empty/non-matrix payload as EmptyDataError.
    """
    if isinstance(payload, dict):
        if payload.get("error"):
            raise ApplicationError(str(payload["error"]))
        if "data" not in payload:
            raise ProviderError(BAD_GATEWAY, "Malformed sheet response: missing 'data'")
        return payload["data"]
    if isinstance(payload, list):
        return payload
    raise ProviderError(BAD_GATEWAY, "Malformed sheet response")


class HttpSheetFetcher:
    """Fetches sheets from the dashboard proxy endpoints."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not base_url:
            raise ValueError("base_url is required")
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        # Tests swap in httpx.MockTransport here.
        self._transport = transport

    def _sheets_request(self) -> tuple:
        return f"{self.base_url}/sheets", {}

    def _sheet_request(self, name: str) -> tuple:
        return f"{self.base_url}/sheet", {"name": name}

    async def _get_json(self, url: str, params: Dict[str, str]) -> Any:
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                transport=self._transport,
                headers={"Accept": "application/json"},
                follow_redirects=True,
            ) as client:
                response = await client.get(url, params=params)
        except httpx.HTTPError as e:
            logger.error(f"Sheet provider request failed ({url}): {e}")
            raise ProviderError(BAD_GATEWAY, f"Request failed: {e}") from e

        if not response.is_success:
            logger.error(f"Sheet provider returned HTTP {response.status_code} ({url})")
            raise ProviderError(
                response.status_code,
                f"HTTP {response.status_code} ({url})",
                detail=response.text or None,
            )

        try:
            return response.json()
        except ValueError as e:
            logger.error(f"Sheet provider returned invalid JSON ({url}): {e}")
            raise ProviderError(BAD_GATEWAY, "Malformed response body", detail=response.text or None) from e

    async def list_sheet_names(self) -> List[str]:
        url, params = self._sheets_request()
        names = parse_names_payload(await self._get_json(url, params))
        logger.debug(f"Fetched {len(names)} sheet names")
        return names

    async def fetch_sheet(self, name: str) -> RawSheet:
        url, params = self._sheet_request(name)
        data = parse_sheet_payload(await self._get_json(url, params))
        logger.info(f"Fetched sheet '{name}'")
        return data


class AppsScriptFetcher(HttpSheetFetcher):
    """Fetches sheets straight from a Google Apps Script web app."""

    def _sheets_request(self) -> tuple:
        return self.base_url, {"action": "sheets"}

    def _sheet_request(self, name: str) -> tuple:
        return self.base_url, {"action": "sheet", "name": name}


def build_sheet_fetcher(settings):
    """
    Fetcher for the configured provider.

    Raises ValueError when the provider's required settings are missing.
    """
    provider = settings.sheets_provider
    if provider == "gas":
        if not settings.gas_webapp_url:
            raise ValueError("Missing env: GAS_WEBAPP_URL")
        return AppsScriptFetcher(settings.gas_webapp_url, timeout=settings.request_timeout)
    if provider == "proxy":
        return HttpSheetFetcher(settings.api_base_url, timeout=settings.request_timeout)
    if provider == "gspread":
        from sheets.google_sheets_manager import GoogleSheetsManager, GspreadSheetFetcher

        manager = GoogleSheetsManager(settings.spreadsheet_id, cache_ttl=settings.cache_ttl)
        return GspreadSheetFetcher(manager)
    raise ValueError(f"Unknown sheets provider: {provider}")
