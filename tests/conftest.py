# Shared pytest fixtures
from __future__ import annotations

import asyncio
import os

# Keep test runs from writing log files into the source tree
os.environ.setdefault("LOG_DIR", "")

import pytest

from core.config import Settings
from core.errors import ProviderError


SAMPLE_SHEET = [
    ["Report"],
    ["ID", "Name", "Total Scan"],
    ["1", "Alice", "20"],
    ["2", "Bob", "0"],
    ["", "", "TOTAL", "20"],
]


class FakeFetcher:
    """In-memory sheet provider with optional per-sheet delays and failures."""

    def __init__(self, sheets: dict, delays: dict | None = None, errors: dict | None = None):
        self.sheets = sheets
        self.delays = delays or {}
        self.errors = errors or {}
        self.calls: list[str] = []

    async def list_sheet_names(self) -> list[str]:
        if "__names__" in self.errors:
            raise self.errors["__names__"]
        return list(self.sheets)

    async def fetch_sheet(self, name: str):
        self.calls.append(name)
        if name in self.delays:
            await asyncio.sleep(self.delays[name])
        if name in self.errors:
            raise self.errors[name]
        if name not in self.sheets:
            raise ProviderError(404, f"Worksheet not found: '{name}'")
        return [list(row) for row in self.sheets[name]]


@pytest.fixture()
def sample_sheet() -> list[list[str]]:
    return [list(row) for row in SAMPLE_SHEET]


@pytest.fixture()
def attendance_sheet() -> list[list[object]]:
    return [
        ["សាលាបឋមសិក្សា", "", "", "", "", ""],
        ["របាយការណ៍វត្តមាន ខែមករា", "", "", "", "", ""],
        ["អត្តលេខ", "Teachers Name", "Total Scan", "Total Permission", "Late", "Remark"],
        ["T003", "chan dara", "1,200", "2", "", "P"],
        ["T001", "Bopha", " 18 ", "0", "1", "M"],
        ["", "", "", "", "", ""],
        ["T002", "Anh Sok BRAK", "abc", "1", "0", "P"],
        ["សរុប", "", "1218", "3", "", ""],
    ]


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        sheets_provider="gas",
        gas_webapp_url="https://script.example.com/exec",
        cors_origins="http://localhost:5173",
        filter_debounce_ms=20,
    )


@pytest.fixture()
def fake_fetcher(sample_sheet, attendance_sheet) -> FakeFetcher:
    return FakeFetcher({
        "January": attendance_sheet,
        "Summary 2026": sample_sheet,
    })


@pytest.fixture()
def fetcher_factory():
    return FakeFetcher
