from __future__ import annotations

import pytest

from dashboard.months import extract_month, month_year_label


@pytest.mark.parametrize(
    "sheet_name, expected",
    [
        ("January 2026", "មករា"),
        ("FEB", "កុម្ភៈ"),
        ("ខែមីនា", "មីនា"),
        ("Attendance December", "ធ្នូ"),
    ],
)
def test_extract_month(sheet_name, expected):
    assert extract_month(sheet_name) == expected


def test_unknown_name_keeps_default():
    assert extract_month("Teachers", default="តុលា") == "តុលា"
    assert extract_month(None) == "មករា"


def test_month_year_label():
    assert month_year_label("មករា", "២០២៦") == "ខែមករា ឆ្នាំ ២០២៦"
