"""
Khmer month labels for report headings, guessed from the sheet name.
"""
from typing import Dict, Tuple

DEFAULT_MONTH = "មករា"

# The first month, in calendar order, with a keyword in the name wins.
MONTH_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    "មករា": ("january", "jan", "មករា", "១"),
    "កុម្ភៈ": ("february", "feb", "កុម្ភៈ", "២"),
    "មីនា": ("march", "mar", "មីនា", "៣"),
    "មេសា": ("april", "apr", "មេសា", "៤"),
    "ឧសភា": ("may", "ឧសភា", "៥"),
    "មិថុនា": ("june", "jun", "មិថុនា", "៦"),
    "កក្កដា": ("july", "jul", "កក្កដា", "៧"),
    "សីហា": ("august", "aug", "សីហា", "៨"),
    "កញ្ញា": ("september", "sep", "កញ្ញា", "៩"),
    "តុលា": ("october", "oct", "តុលា", "១០"),
    "វិច្ឆិកា": ("november", "nov", "វិច្ឆិកា", "១១"),
    "ធ្នូ": ("december", "dec", "ធ្នូ", "១២"),
}


def extract_month(sheet_name: str, default: str = DEFAULT_MONTH) -> str:
    lowered = str(sheet_name or "").lower()
    for month, keywords in MONTH_KEYWORDS.items():
        if any(k.lower() in lowered for k in keywords):
            return month
    return default


def month_year_label(month: str, year: str) -> str:
    return f"ខែ{month} ឆ្នាំ {year}"
