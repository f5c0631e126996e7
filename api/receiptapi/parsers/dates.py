# api/receiptapi/parsers/dates.py
from __future__ import annotations

import re
from datetime import datetime
from typing import List, Optional, Tuple

from .common import Observer, ReceiptText, notify

DATE_PATTERNS: List[Tuple[str, re.Pattern]] = [
    # '15 Oct 2024 05:03 pm', '28 Sep 2024, 4:13 PM'
    ("named_with_time", re.compile(r"(\d{1,2}\s*\w{3,}\s*\d{4})\s*,?\s*\d{1,2}:\d{2}\s*(AM|PM)?", re.I)),
    # '15 Oct 2024'
    ("named", re.compile(r"(\d{1,2}\s*\w{3,}\s*\d{4})", re.I)),
    # '16/10/2024', '16-10-2024'
    ("numeric", re.compile(r"(\d{1,2}[-/]\d{1,2}[-/]\d{4})", re.I)),
    # '22-Nov-2024'
    ("named_dashed", re.compile(r"(\d{1,2}-\w{3,}-\d{4})", re.I)),
    # '15 Oct 2024 05:05:14 PM'
    ("named_with_seconds", re.compile(r"(\d{1,2}\s*\w{3,}\s*\d{4})\s*(\d{1,2}:\d{2}:\d{2}\s*(AM|PM)?)", re.I)),
]

_DIGIT_LETTER_EDGE = re.compile(r"(?<=\d)(?=[A-Za-z])|(?<=[A-Za-z])(?=\d)")
_SEPT = re.compile(r"\bSept\b", re.I)

# day-month-name-year, day/month/year, day-month-year, day-month-name-year with dashes
DATE_FORMATS = (
    "%d %b %Y", "%d %B %Y",
    "%d/%m/%Y",
    "%d-%m-%Y",
    "%d-%b-%Y", "%d-%B-%Y",
)


def parse_date_string(raw: str, observer: Optional[Observer] = None) -> Optional[str]:
    """Try each format in order; first one that parses wins. Returns YYYY-MM-DD."""
    # "15Oct2024" -> "15 Oct 2024"; strptime needs the separators
    candidate = _DIGIT_LETTER_EDGE.sub(" ", raw)
    candidate = _SEPT.sub("Sep", " ".join(candidate.split()))
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(candidate, fmt).date().isoformat()
        except ValueError as e:
            notify(observer, "date.format_rejected", value=candidate, format=fmt, error=str(e))
    return None


def extract_date(text: ReceiptText | str, observer: Optional[Observer] = None) -> Optional[str]:
    views = text if isinstance(text, ReceiptText) else ReceiptText(text)
    corrected = views.date_view
    for name, pattern in DATE_PATTERNS:
        m = pattern.search(corrected)
        if not m:
            continue
        parsed = parse_date_string(m.group(1), observer)
        if parsed:
            notify(observer, "date.matched", pattern=name, value=m.group(1), date=parsed)
            return parsed
        notify(observer, "date.parse_failed", pattern=name, value=m.group(1))
    return None
