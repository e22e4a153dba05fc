"""
Runtime configuration read from environment variables.

Keyword lists used by the header heuristics live here too, so additional
locales or label variants can be added without touching the matching code.
"""
import json
import os
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional, Tuple

PROVIDERS = ('gas', 'gspread', 'proxy')

DEFAULT_HEADER_KEYWORDS = (
    'Reference',
    'Employee',
    'អត្តលេខ',
    'ID',
    'Total Permission',
    'Total Scan',
    'Name',
    'Teachers',
)
DEFAULT_TOTAL_MARKERS = ('សរុប', 'TOTAL')
# Per-employee "Total Permission" labels repeat inside data rows of one dataset.
DEFAULT_TOTAL_EXEMPTIONS = ('TOTAL PERMISSION',)
DEFAULT_CELL_REPLACEMENTS = (('BRAK', 'BRORSER'),)


@dataclass(frozen=True)
class ColumnAliases:
    """Ordered candidate labels per logical column."""

    name: Tuple[str, ...] = ('NAME', 'TEACHER', 'EMPLOYEE', 'FULL NAME', 'NAMES', 'ឈ្មោះ')
    id: Tuple[str, ...] = ('ID', 'អត្តលេខ', 'REFERENCE', 'EMPLOYEE ID')
    scan_total: Tuple[str, ...] = ('TOTAL SCAN', 'SCAN', 'TOTALSCAN')
    permission_total: Tuple[str, ...] = ('TOTAL PERMISSION', 'PERMISSION', 'LEAVE', 'PERM')
    late_absent: Tuple[str, ...] = ('LATE', 'ABSENT', 'អវត្តមាន', 'យឺត')
    remark: Tuple[str, ...] = ('REMARK', 'REMARKS', 'NOTE', 'កំណត់សម្គាល់')

    def with_overrides(self, overrides: Dict[str, Any]) -> 'ColumnAliases':
        """Return a copy with some alias lists replaced."""
        unknown = set(overrides) - set(self.__dataclass_fields__)
        if unknown:
            raise ValueError(f"Unknown column alias fields: {sorted(unknown)}")
        cleaned = {}
        for key, values in overrides.items():
            if isinstance(values, str) or not isinstance(values, (list, tuple)):
                raise ValueError(f"Column aliases for '{key}' must be a list of strings")
            cleaned[key] = tuple(str(v) for v in values)
        return replace(self, **cleaned)


@dataclass(frozen=True)
class TableRules:
    """Keyword sets driving header detection and total-row exclusion."""

    header_keywords: Tuple[str, ...] = DEFAULT_HEADER_KEYWORDS
    total_markers: Tuple[str, ...] = DEFAULT_TOTAL_MARKERS
    total_exemptions: Tuple[str, ...] = DEFAULT_TOTAL_EXEMPTIONS
    cell_replacements: Tuple[Tuple[str, str], ...] = DEFAULT_CELL_REPLACEMENTS


@dataclass(frozen=True)
class Settings:
    sheets_provider: str = 'gas'
    gas_webapp_url: Optional[str] = None
    api_base_url: str = 'http://localhost:5000/api'
    spreadsheet_id: Optional[str] = None
    request_timeout: float = 30.0
    cache_ttl: int = 300
    page_size: int = 25
    filter_debounce_ms: int = 180
    report_year: str = '២០២៦'
    cors_origins: str = ''
    flask_env: str = 'production'
    table_rules: TableRules = field(default_factory=TableRules)
    column_aliases: ColumnAliases = field(default_factory=ColumnAliases)

    @property
    def is_development(self) -> bool:
        return self.flask_env == 'development'

    @property
    def filter_debounce_seconds(self) -> float:
        return self.filter_debounce_ms / 1000.0

    @classmethod
    def from_env(cls) -> 'Settings':
        """Build settings from the process environment."""
        provider = os.getenv('SHEETS_PROVIDER', 'gas').strip().lower()
        if provider not in PROVIDERS:
            raise ValueError(f"SHEETS_PROVIDER must be one of {', '.join(PROVIDERS)}, got '{provider}'")

        rules = TableRules()
        replacements = _json_env('DASHBOARD_CELL_REPLACEMENTS')
        if replacements is not None:
            if not isinstance(replacements, dict):
                raise ValueError("DASHBOARD_CELL_REPLACEMENTS must be a JSON object")
            rules = replace(rules, cell_replacements=tuple(
                (str(k), str(v)) for k, v in replacements.items()
            ))
        exemptions = _json_env('DASHBOARD_TOTAL_EXEMPTIONS')
        if exemptions is not None:
            if not isinstance(exemptions, list):
                raise ValueError("DASHBOARD_TOTAL_EXEMPTIONS must be a JSON list")
            rules = replace(rules, total_exemptions=tuple(str(e).upper() for e in exemptions))

        aliases = ColumnAliases()
        alias_overrides = _json_env('DASHBOARD_COLUMN_ALIASES')
        if alias_overrides is not None:
            if not isinstance(alias_overrides, dict):
                raise ValueError("DASHBOARD_COLUMN_ALIASES must be a JSON object")
            aliases = aliases.with_overrides(alias_overrides)

        page_size = _int_env('DASHBOARD_PAGE_SIZE', 25)
        if page_size < 1:
            raise ValueError("DASHBOARD_PAGE_SIZE must be a positive integer")

        return cls(
            sheets_provider=provider,
            gas_webapp_url=os.getenv('GAS_WEBAPP_URL') or None,
            api_base_url=os.getenv('DASHBOARD_API_BASE_URL', 'http://localhost:5000/api'),
            spreadsheet_id=os.getenv('GOOGLE_SHEETS_SPREADSHEET_ID') or None,
            request_timeout=_float_env('SHEETS_REQUEST_TIMEOUT', 30.0),
            cache_ttl=_int_env('SHEETS_CACHE_TTL', 300),
            page_size=page_size,
            filter_debounce_ms=_int_env('DASHBOARD_FILTER_DEBOUNCE_MS', 180),
            report_year=os.getenv('DASHBOARD_REPORT_YEAR', '២០២៦'),
            cors_origins=os.getenv('CORS_ORIGINS', ''),
            flask_env=os.getenv('FLASK_ENV', 'production'),
            table_rules=rules,
            column_aliases=aliases,
        )


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == '':
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got '{raw}'")


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == '':
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got '{raw}'")


def _json_env(name: str) -> Any:
    raw = os.getenv(name)
    if not raw:
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid {name} format: {e}")
