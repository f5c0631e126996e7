# api/receiptapi/parsers/receipt.py
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from .amount import extract_amount
from .common import Observer, ReceiptText
from .dates import extract_date
from .detect import VendorTag, classify_vendor
from .reference import extract_reference
from .tx_type import extract_transaction_type


@dataclass
class ExtractionResult:
    reference_id: Optional[str] = None
    date: Optional[str] = None
    amount: Optional[str] = None
    transaction_type: Optional[str] = None
    vendor: VendorTag = VendorTag.UNKNOWN

    def to_dict(self) -> Dict[str, Any]:
        out = asdict(self)
        out["vendor"] = self.vendor.value
        return out

    @property
    def missing(self) -> list[str]:
        return [k for k in ("reference_id", "date", "amount", "transaction_type") if getattr(self, k) is None]


def parse_receipt(text: str | None, observer: Optional[Observer] = None) -> ExtractionResult:
    """
    Extract the four slip fields from recognized text.

    Each field is independent: a miss on one never blocks the others, and a
    miss is reported as None rather than a default.
    """
    views = ReceiptText(text)
    vendor = classify_vendor(views, observer)
    return ExtractionResult(
        reference_id=extract_reference(views, vendor, observer),
        date=extract_date(views, observer),
        amount=extract_amount(views, observer),
        transaction_type=extract_transaction_type(views, observer),
        vendor=vendor,
    )


def parse_text_rules(text: str) -> dict:
    return parse_receipt(text).to_dict()
