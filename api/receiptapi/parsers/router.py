# api/receiptapi/parsers/router.py
import time
from typing import Any, Dict, Optional, Tuple

from ..ocr import OCR_BACKEND, recognize_text
from .common import Observer
from .receipt import parse_receipt

TEXT_SUFFIXES = (".txt",)


def extract_text(filename: str | None, data: bytes) -> Tuple[str, bool]:
    """Return (text, ocr_used). Plain-text transcripts skip the recognizer."""
    if filename and filename.lower().endswith(TEXT_SUFFIXES):
        return data.decode("utf-8", errors="ignore"), False
    return recognize_text(data, filename), True


def parse_text(text: str, observer: Optional[Observer] = None, ocr_used: bool = False, t0: float | None = None):
    t0 = t0 or time.time()
    result = parse_receipt(text, observer)
    meta: Dict[str, Any] = {
        "processing_ms": int((time.time() - t0) * 1000),
        "ocr_used": ocr_used,
        "ocr_backend": OCR_BACKEND if ocr_used else None,
        "detected_vendor": result.vendor.value,
        "missing_fields": result.missing,
        "text_length": len(text or ""),
    }
    return result.to_dict(), meta, result.vendor.value


def parse_any(filename: str, data: bytes, observer: Optional[Observer] = None):
    t0 = time.time()
    text, ocr_used = extract_text(filename, data)
    return parse_text(text, observer, ocr_used=ocr_used, t0=t0)
