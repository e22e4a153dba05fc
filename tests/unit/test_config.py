from __future__ import annotations

import pytest

from core.config import ColumnAliases, Settings, TableRules

ENV_VARS = [
    "SHEETS_PROVIDER",
    "GAS_WEBAPP_URL",
    "DASHBOARD_PAGE_SIZE",
    "DASHBOARD_COLUMN_ALIASES",
    "DASHBOARD_CELL_REPLACEMENTS",
    "DASHBOARD_TOTAL_EXEMPTIONS",
    "SHEETS_REQUEST_TIMEOUT",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = Settings.from_env()

    assert settings.sheets_provider == "gas"
    assert settings.page_size == 25
    assert settings.filter_debounce_seconds == pytest.approx(0.18)
    assert settings.table_rules == TableRules()
    assert settings.column_aliases == ColumnAliases()


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("SHEETS_PROVIDER", "Proxy")
    monkeypatch.setenv("DASHBOARD_PAGE_SIZE", "50")
    monkeypatch.setenv("DASHBOARD_COLUMN_ALIASES", '{"scan_total": ["SCAN COUNT"]}')
    monkeypatch.setenv("DASHBOARD_CELL_REPLACEMENTS", '{"OLD": "NEW"}')
    monkeypatch.setenv("DASHBOARD_TOTAL_EXEMPTIONS", '["total leave"]')

    settings = Settings.from_env()

    assert settings.sheets_provider == "proxy"
    assert settings.page_size == 50
    assert settings.column_aliases.scan_total == ("SCAN COUNT",)
    assert settings.column_aliases.name == ColumnAliases().name
    assert settings.table_rules.cell_replacements == (("OLD", "NEW"),)
    assert settings.table_rules.total_exemptions == ("TOTAL LEAVE",)


@pytest.mark.parametrize(
    "name, value",
    [
        ("SHEETS_PROVIDER", "excel"),
        ("DASHBOARD_PAGE_SIZE", "many"),
        ("DASHBOARD_PAGE_SIZE", "0"),
        ("SHEETS_REQUEST_TIMEOUT", "soon"),
        ("DASHBOARD_COLUMN_ALIASES", "{not json"),
        ("DASHBOARD_COLUMN_ALIASES", '{"unknown": ["X"]}'),
        ("DASHBOARD_COLUMN_ALIASES", '{"name": "NAME"}'),
        ("DASHBOARD_CELL_REPLACEMENTS", '["a"]'),
    ],
)
def test_invalid_values_raise(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ValueError):
        Settings.from_env()
