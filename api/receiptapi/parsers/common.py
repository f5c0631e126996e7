# api/receiptapi/parsers/common.py
from __future__ import annotations

import re
from functools import cached_property
from typing import Callable, Dict, Optional

Observer = Callable[[str, Dict], None]

# letter -> digit look-alikes, context-insensitive
REFERENCE_CONFUSIONS = str.maketrans({"I": "1", "O": "0", "S": "5"})
AMOUNT_CONFUSIONS = str.maketrans({"I": "1", "O": "0"})
DATE_CONFUSIONS = str.maketrans({"I": "1", "S": "5"})

_LINE_BREAKS = re.compile(r"[\r\n]+")
_WHITESPACE = re.compile(r"\s+")
_MYR_MARKER = re.compile(r"\(\s*MY\s*R\s*\)", re.IGNORECASE)
# tokens that already carry a digit; only these get the date corrections
_DIGIT_TOKEN = re.compile(r"\b[0-9IS]*[0-9][0-9IS]*\b")

_DIGIT_TWIN = {"I": "1", "O": "0", "S": "5"}


def normalize_whitespace(s: str | None) -> str:
    if not s:
        return ""
    s = _LINE_BREAKS.sub(" ", s)
    return _WHITESPACE.sub(" ", s)


def tolerant(label: str) -> str:
    """
    Regex source for a literal label that still matches after REFERENCE_CONFUSIONS.

    tolerant("Reference No") matches "Reference No" as well as "Reference N0".
    """
    out = []
    for ch in label:
        twin = _DIGIT_TWIN.get(ch.upper())
        if twin:
            out.append(f"[{ch}{twin}]")
        elif ch == " ":
            out.append(" ")
        else:
            out.append(re.escape(ch))
    return "".join(out)


def notify(observer: Optional[Observer], event: str, **fields) -> None:
    if observer is not None:
        observer(event, fields)


class ReceiptText:
    """Derived views of one recognized receipt text, each computed once."""

    def __init__(self, raw: str | None):
        self.raw = raw or ""

    @cached_property
    def normalized(self) -> str:
        return normalize_whitespace(self.raw)

    @cached_property
    def corrected(self) -> str:
        # never use this view for vendor-name checks, the table rewrites their letters
        return self.normalized.translate(REFERENCE_CONFUSIONS)

    @cached_property
    def date_view(self) -> str:
        return _DIGIT_TOKEN.sub(lambda m: m.group(0).translate(DATE_CONFUSIONS), self.normalized)

    @cached_property
    def amount_view(self) -> str:
        text = self.normalized.translate(AMOUNT_CONFUSIONS)
        return _MYR_MARKER.sub("(MYR)", text)

    def view(self, name: str) -> str:
        return getattr(self, name)
