"""
Google Sheets Manager for reading attendance sheets with a service account.
Read-only: the dashboard never writes back to the spreadsheet.
"""
import asyncio
import base64
import json
import os
import threading
import time
from typing import Any, List, Optional

from google.oauth2 import service_account
import gspread
import gspread.exceptions

from core.errors import ProviderError
from core.logger import logger
from sheets.table import RawSheet

SCOPES = [
    'https://www.googleapis.com/auth/spreadsheets.readonly',
    'https://www.googleapis.com/auth/drive.readonly',
]


class GoogleSheetsManager:
    """Reads worksheet titles and cell values from one spreadsheet."""

    def __init__(self, spreadsheet_id: Optional[str], cache_ttl: int = 300, client: Optional[gspread.Client] = None):
        """Initialize Google Sheets client with service account credentials."""
        if not spreadsheet_id:
            raise ValueError("GOOGLE_SHEETS_SPREADSHEET_ID environment variable is required")
        self.spreadsheet_id = spreadsheet_id

        self.client = client or self._initialize_client()

        # Simple cache to reduce API calls (helps with rate limits)
        self._cache = {}
        self._cache_ttl = cache_ttl

        # Rate limiting: track last request time to throttle requests
        self._last_request_time = 0
        self._min_request_interval = 0.2  # Minimum 200ms between requests

        self._spreadsheet = None
        self._lock = threading.Lock()

    def _initialize_client(self) -> gspread.Client:
        """Initialize gspread client with service account credentials."""
        try:
            # 1. Try Base64 encoded JSON (Best for Render/Production)
            service_account_base64 = os.getenv('SERVICE_ACCOUNT_BASE64')
            # 2. Try Raw JSON string
            service_account_json = os.getenv('SERVICE_ACCOUNT_JSON')

            if service_account_base64:
                try:
                    decoded_json = base64.b64decode(service_account_base64).decode('utf-8')
                    service_account_info = json.loads(decoded_json)
                    credentials = service_account.Credentials.from_service_account_info(
                        service_account_info, scopes=SCOPES
                    )
                except Exception as e:
                    raise ValueError(f"Invalid SERVICE_ACCOUNT_BASE64: {e}")
            elif service_account_json:
                try:
                    service_account_info = json.loads(service_account_json)
                    credentials = service_account.Credentials.from_service_account_info(
                        service_account_info, scopes=SCOPES
                    )
                except json.JSONDecodeError as e:
                    raise ValueError(f"Invalid SERVICE_ACCOUNT_JSON format: {e}")
            else:
                # Fall back to file path (for local development)
                service_account_path = os.getenv('GOOGLE_SERVICE_ACCOUNT_PATH', './service_account.json')

                if not os.path.exists(service_account_path):
                    raise FileNotFoundError(
                        f"Service account file not found: {service_account_path}. "
                        "Either set SERVICE_ACCOUNT_JSON environment variable or provide a valid file path."
                    )

                credentials = service_account.Credentials.from_service_account_file(
                    service_account_path, scopes=SCOPES
                )

            client = gspread.authorize(credentials)
            logger.info("Google Sheets client initialized successfully")
            return client

        except Exception as e:
            logger.error(f"Error initializing Google Sheets client: {str(e)}", exc_info=True)
            raise

    def _throttle_request(self):
        """Throttle requests to avoid hitting rate limits."""
        current_time = time.time()
        time_since_last = current_time - self._last_request_time
        if time_since_last < self._min_request_interval:
            time.sleep(self._min_request_interval - time_since_last)
        self._last_request_time = time.time()

    def _get_cached_data(self, cache_key: str) -> Any:
        """Cached value if still valid, else None."""
        entry = self._cache.get(cache_key)
        if entry is None:
            return None
        data, timestamp = entry
        if time.time() - timestamp < self._cache_ttl:
            return data
        self._cache.pop(cache_key, None)
        return None

    def _set_cached_data(self, cache_key: str, data: Any):
        self._cache[cache_key] = (data, time.time())

    def _get_spreadsheet(self) -> gspread.Spreadsheet:
        if self._spreadsheet is None:
            self._throttle_request()
            self._spreadsheet = self.client.open_by_key(self.spreadsheet_id)
        return self._spreadsheet

    def _provider_error(self, e: Exception, what: str) -> ProviderError:
        if isinstance(e, gspread.exceptions.SpreadsheetNotFound):
            return ProviderError(404, f"Spreadsheet not found: {self.spreadsheet_id}")
        if isinstance(e, gspread.exceptions.WorksheetNotFound):
            return ProviderError(404, f"Worksheet not found: {what}")
        if isinstance(e, gspread.exceptions.APIError):
            status = getattr(getattr(e, 'response', None), 'status_code', None) or 502
            return ProviderError(status, f"Google Sheets API error reading {what}", detail=str(e))
        return ProviderError(502, f"Failed to read {what}: {e}")

    def get_sheet_names(self) -> List[str]:
        """Titles of all worksheets, in spreadsheet order."""
        cache_key = 'sheet_names'
        cached = self._get_cached_data(cache_key)
        if cached is not None:
            logger.debug("Using cached sheet names")
            return list(cached)

        with self._lock:
            try:
                spreadsheet = self._get_spreadsheet()
                self._throttle_request()
                names = [ws.title for ws in spreadsheet.worksheets()]
            except (gspread.exceptions.GSpreadException, OSError) as e:
                logger.error(f"Error listing worksheets: {str(e)}", exc_info=True)
                raise self._provider_error(e, 'worksheet list') from e

        self._set_cached_data(cache_key, names)
        logger.info(f"Read {len(names)} worksheet names")
        return list(names)

    def get_sheet_values(self, name: str) -> RawSheet:
        """All cell values of a worksheet as a list of rows."""
        cache_key = f"values_{name}"
        cached = self._get_cached_data(cache_key)
        if cached is not None:
            logger.debug(f"Using cached values for '{name}'")
            return [list(row) for row in cached]

        with self._lock:
            try:
                spreadsheet = self._get_spreadsheet()
                self._throttle_request()
                worksheet = spreadsheet.worksheet(name)
                self._throttle_request()
                values = worksheet.get_all_values()
            except (gspread.exceptions.GSpreadException, OSError) as e:
                logger.error(f"Error reading worksheet '{name}': {str(e)}", exc_info=True)
                raise self._provider_error(e, f"'{name}'") from e

        self._set_cached_data(cache_key, values)
        logger.info(f"Read {len(values)} rows from worksheet '{name}'")
        return [list(row) for row in values]

    def invalidate_all_caches(self):
        self._cache.clear()
        self._spreadsheet = None
        logger.info("Cleared Google Sheets caches")


class GspreadSheetFetcher:
    """Async face of GoogleSheetsManager; gspread calls run in a worker thread."""

    def __init__(self, manager: GoogleSheetsManager):
        self.manager = manager

    async def list_sheet_names(self) -> List[str]:
        return await asyncio.to_thread(self.manager.get_sheet_names)

    async def fetch_sheet(self, name: str) -> RawSheet:
        return await asyncio.to_thread(self.manager.get_sheet_values, name)
