# api/receiptapi/parsers/reference.py
"""
Reference-number rules per issuing bank / wallet.

Every vendor owns an ordered tuple of rules. Order matters: later rules are
looser fallbacks for the earlier ones and would match too early on degraded
OCR text if they were tried first.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

from .common import Observer, ReceiptText, notify, tolerant
from .detect import VendorTag, classify_vendor

Assembler = Callable[[re.Match], Optional[str]]


def group(n: int) -> Assembler:
    def _assemble(m: re.Match) -> Optional[str]:
        return m.group(n)
    return _assemble


def strip_spaces(n: int) -> Assembler:
    def _assemble(m: re.Match) -> Optional[str]:
        return m.group(n).replace(" ", "")
    return _assemble


def concat(*groups: int) -> Assembler:
    def _assemble(m: re.Match) -> Optional[str]:
        return "".join(m.group(g) for g in groups)
    return _assemble


def last_token(n: int) -> Assembler:
    # the label is followed by free text; the id is whatever comes last
    def _assemble(m: re.Match) -> Optional[str]:
        segments = m.group(n).strip().split()
        return segments[-1] if segments else None
    return _assemble


def hlb_join(m: re.Match) -> Optional[str]:
    return (m.group(1) + m.group(2) + "QR" + m.group(3)).replace(" ", "")


@dataclass(frozen=True)
class ReferenceRule:
    name: str
    pattern: re.Pattern
    assemble: Assembler = group(1)


@dataclass(frozen=True)
class RuleSet:
    view: str
    rules: Tuple[ReferenceRule, ...]


def _rule(name: str, source: str, assemble: Assembler = group(1), flags: int = 0) -> ReferenceRule:
    return ReferenceRule(name=name, pattern=re.compile(source, re.IGNORECASE | flags), assemble=assemble)


_TXN_NO = tolerant("Transaction No")

VENDOR_RULES: Dict[VendorTag, RuleSet] = {
    VendorTag.AMBANK: RuleSet("corrected", (
        _rule("reference_no", tolerant("Reference No") + r".\s*(\w+)"),
    )),
    VendorTag.CIMB_OCTO: RuleSet("corrected", (
        # "<9 digits> <8 digits>" - only the 8-digit half is the reference
        _rule("duitnow_reference_no", tolerant("DuitNow Reference No") + r".*?(\d{9})\s(\d{8})", group(2)),
    )),
    VendorTag.MAYBANK: RuleSet("normalized", (
        _rule("reference_i_d", r"Reference I D.*?(\d{8})"),
        _rule("reference_id", r"Reference ID.*?(\d{8})"),
    )),
    VendorTag.RHB: RuleSet("normalized", (
        _rule("rhbbmykl_qr_split", r"(\d{8}RHBBMYKL[\w\d]+QR\s*\d{3}\s*\d{5})", strip_spaces(1)),
        _rule("rhbbmykl_qr", r"(\d{8}RHBBMYKL[\w\d]+QR[\w\d]+)"),
    )),
    VendorTag.TNG_WALLET: RuleSet("corrected", (
        _rule("tngdmynb_qr", r"(\d{8}TNGDMYNB\d{4}QR)\s*" + _TXN_NO + r"\.\s*([\w\d]+)", concat(1, 2)),
        _rule("transaction_no_tail", _TXN_NO + r"\.\s*(.+)", last_token(1)),
    )),
    VendorTag.HONG_LEONG: RuleSet("normalized", (
        _rule("hlbbmyklo_qr", r"(\d{8}HLBBMYKLO)\s*(\d{3,4})QR(\d{8})", hlb_join),
        _rule("hlbbmykl0_qr", r"(\d{8}HLBBMYKL0)\s*(\d{3,4})QR(\d{8})", hlb_join),
        # "QR" read as "R M"
        _rule("hlbbmyklo_rm", r"(\d{8}HLBBMYKLO)\s*(\d{3,4})R\s*M(\d{8})", hlb_join),
        _rule("hlbbmykl0_rm", r"(\d{8}HLBBMYKL0)\s*(\d{3,4})R\s*M(\d{8})", hlb_join),
    )),
    VendorTag.PUBLIC_BANK: RuleSet("normalized", (
        _rule("duitnow_qr_ref_no", r"DuitNow QR Ref No.*?(\d{8})"),
    )),
    VendorTag.ALLIANCE: RuleSet("normalized", (
        _rule("duitnow_qr_reference_number", r"DuitNow QR Reference.*?Number.*?(\d{8})", flags=re.DOTALL),
    )),
    VendorTag.BANK_ISLAM: RuleSet("normalized", (
        _rule("duitnow_qr_ref_no", r"DuitNow\s*QR\s*Ref\s*No\s*[:\-]?\s*(\d{8})"),
    )),
    VendorTag.UNKNOWN: RuleSet("normalized", (
        _rule("reference_id", r"Reference ID\s*(\w+)"),
        _rule("transaction_no", r"Transaction No.\s*(\w+)"),
        _rule("reference_no", r"Reference No.\s*(\w+)"),
        _rule("reference_number", r"Reference Number\s*(\w+)"),
    )),
}


def apply_rules(rule_set: RuleSet, views: ReceiptText, observer: Optional[Observer] = None) -> Optional[str]:
    text = views.view(rule_set.view)
    for rule in rule_set.rules:
        m = rule.pattern.search(text)
        if not m:
            continue
        value = rule.assemble(m)
        notify(observer, "reference.rule_matched", rule=rule.name, groups=m.groups(), value=value)
        if value:
            return value
    return None


def extract_reference(
    text: ReceiptText | str,
    vendor: VendorTag | None = None,
    observer: Optional[Observer] = None,
) -> Optional[str]:
    views = text if isinstance(text, ReceiptText) else ReceiptText(text)
    if vendor is None:
        vendor = classify_vendor(views, observer)
    value = apply_rules(VENDOR_RULES[vendor], views, observer)
    if value is None:
        notify(observer, "reference.miss", vendor=vendor.value)
    return value
