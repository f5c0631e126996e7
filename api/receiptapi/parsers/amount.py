# api/receiptapi/parsers/amount.py
from __future__ import annotations

import re
from typing import List, Optional, Tuple

from .common import Observer, ReceiptText, notify

NUM = r"([0-9]+(?:\.[0-9]{2})?)"

AMOUNT_PATTERNS: List[Tuple[str, re.Pattern]] = [
    # "RM 12.00", "-RM12.00", "RM-12.00"
    ("rm_prefix", re.compile(r"(?<!\S)-?\s*RM[\s-]*" + NUM, re.I)),
    ("myr_prefix", re.compile(r"MYR\s*" + NUM, re.I)),
    ("myr_suffix", re.compile(NUM + r"\s*MYR", re.I)),
    ("paren_myr", re.compile(r"\(MYR\)\s*" + NUM, re.I)),
    ("paren_myr_loose", re.compile(r"\(MYR\).*?" + NUM, re.I)),
]


def extract_amount(text: ReceiptText | str, observer: Optional[Observer] = None) -> Optional[str]:
    """
    First currency-marked number in the text, returned exactly as printed.

    "7" stays "7" and "7.00" stays "7.00"; callers validate the numeric range.
    """
    views = text if isinstance(text, ReceiptText) else ReceiptText(text)
    normalized = views.amount_view
    for name, pattern in AMOUNT_PATTERNS:
        m = pattern.search(normalized)
        if m:
            notify(observer, "amount.matched", pattern=name, value=m.group(1))
            return m.group(1)
    return None
