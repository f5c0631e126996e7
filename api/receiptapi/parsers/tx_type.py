# api/receiptapi/parsers/tx_type.py
from __future__ import annotations

import re
from typing import Optional

from .common import Observer, ReceiptText, notify

# most specific first; a bare "Payment" must never shadow a named QR type
TRANSACTION_TYPES = (
    "DuitNow QR TNGD",
    "DuitNow QR TNGo",
    "DuitNow QR",
    "QR Payment",
    "Payment",
    "Transfer",
)

TYPE_WINDOW = 40
TYPE_LABEL = re.compile(r"Transaction Type\s*[:\-]?\s*(.{0,%d})" % TYPE_WINDOW, re.I)


def _first_known_type(haystack: str) -> Optional[str]:
    low = haystack.lower()
    for label in TRANSACTION_TYPES:
        if label.lower() in low:
            return label
    return None


def extract_transaction_type(text: ReceiptText | str, observer: Optional[Observer] = None) -> Optional[str]:
    views = text if isinstance(text, ReceiptText) else ReceiptText(text)
    normalized = views.normalized

    m = TYPE_LABEL.search(normalized)
    if m:
        window = m.group(1).strip()
        found = _first_known_type(window)
        if found:
            notify(observer, "tx_type.matched", source="label", window=window, value=found)
            return found

    found = _first_known_type(normalized)
    if found:
        notify(observer, "tx_type.matched", source="full_text", value=found)
    return found
