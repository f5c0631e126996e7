"""
Rule-based field extraction for recognized payment-slip text.

The extractors are pure functions over a string. Only router.py reaches the
recognizer.
"""

from .amount import extract_amount
from .common import ReceiptText, normalize_whitespace
from .dates import extract_date
from .detect import VendorTag, classify_vendor
from .receipt import ExtractionResult, parse_receipt, parse_text_rules
from .reference import extract_reference
from .tx_type import extract_transaction_type

__all__ = [
    "ExtractionResult",
    "ReceiptText",
    "VendorTag",
    "classify_vendor",
    "extract_amount",
    "extract_date",
    "extract_reference",
    "extract_transaction_type",
    "normalize_whitespace",
    "parse_receipt",
    "parse_text_rules",
]
