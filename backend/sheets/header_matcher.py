"""
Fuzzy lookup of a logical column ("the name column", "the scan total") in a
sheet header whose labels vary in language, spacing and abbreviation.
"""
import re
import unicodedata
from typing import Any, Iterable, List, Optional, Sequence

from sheets.table import cell_text

_WHITESPACE = re.compile(r"\s+")


def normalize_label(value: Any) -> str:
    """
    Uppercase, drop punctuation/symbol characters and collapse whitespace.

    Combining marks are kept so Khmer labels survive normalization.
    """
    text = cell_text(value).upper()
    text = "".join(
        ch for ch in text
        if not unicodedata.category(ch).startswith(("P", "S"))
    )
    return _WHITESPACE.sub(" ", text).strip()


def _compact(label: str) -> str:
    return label.replace(" ", "")


def find_column(header: Sequence[Any], candidates: Iterable[str]) -> Optional[int]:
    """
    Index of the first column matching the highest-priority candidate.

    Each candidate is tried in order: an exact normalized match first, then a
    substring match (label contains the candidate, or does so once spaces are
    removed). Returns None when no candidate resolves.
    """
    labels: List[str] = [normalize_label(h) for h in header or ()]

    for candidate in candidates:
        wanted = normalize_label(candidate)
        if not wanted:
            continue

        for idx, label in enumerate(labels):
            if label and label == wanted:
                return idx

        wanted_compact = _compact(wanted)
        for idx, label in enumerate(labels):
            if not label:
                continue
            if wanted in label or wanted_compact in _compact(label):
                return idx

    return None
