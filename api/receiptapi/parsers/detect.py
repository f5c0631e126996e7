# api/receiptapi/parsers/detect.py
from __future__ import annotations

from enum import Enum
from typing import List, Optional, Tuple

from .common import Observer, ReceiptText, notify


class VendorTag(str, Enum):
    AMBANK = "ambank"
    CIMB_OCTO = "cimb_octo"
    MAYBANK = "maybank"
    RHB = "rhb"
    TNG_WALLET = "tng_wallet"
    HONG_LEONG = "hong_leong"
    PUBLIC_BANK = "public_bank"
    ALLIANCE = "alliance"
    BANK_ISLAM = "bank_islam"
    UNKNOWN = "unknown"


# (tag, token, view). Checked top to bottom, first hit wins.
# "0CT0" only exists in the corrected view; "Maybank", "HLB" etc. must be
# checked on the uncorrected one.
VENDOR_MARKERS: List[Tuple[VendorTag, str, str]] = [
    (VendorTag.AMBANK, "BANK@AM", "corrected"),
    (VendorTag.CIMB_OCTO, "0CT0", "corrected"),
    (VendorTag.MAYBANK, "Maybank", "normalized"),
    (VendorTag.RHB, "RHB", "normalized"),
    (VendorTag.TNG_WALLET, "Wallet", "corrected"),
    (VendorTag.HONG_LEONG, "HLB", "normalized"),
    (VendorTag.PUBLIC_BANK, "PUBLIC BANK", "normalized"),
    (VendorTag.ALLIANCE, "alliance", "normalized"),
    (VendorTag.BANK_ISLAM, "Al-Awfar", "normalized"),
]


def classify_vendor(text: ReceiptText | str, observer: Optional[Observer] = None) -> VendorTag:
    views = text if isinstance(text, ReceiptText) else ReceiptText(text)
    for tag, token, view in VENDOR_MARKERS:
        if token in views.view(view):
            notify(observer, "vendor.detected", vendor=tag.value, token=token)
            return tag
    notify(observer, "vendor.detected", vendor=VendorTag.UNKNOWN.value, token=None)
    return VendorTag.UNKNOWN
