# api/receiptapi/ocr.py
"""
Recognizer adapter: image bytes in, best single text transcription out.

Two backends, picked by OCR_BACKEND:
  ocrspace  - OCR.space HTTP API (default)
  tesseract - local pytesseract, for offline development
"""
from __future__ import annotations

import io
import logging
import os

import requests

try:
    from PIL import Image
    import pytesseract
except Exception:
    Image = None
    pytesseract = None

logger = logging.getLogger(__name__)

OCR_BACKEND = os.getenv("OCR_BACKEND", "ocrspace").lower()
OCR_SPACE_URL = os.getenv("OCR_SPACE_URL", "https://api.ocr.space/parse/image")
OCR_SPACE_API_KEY = os.getenv("OCR_SPACE_API_KEY", "")
OCR_TIMEOUT = float(os.getenv("OCR_TIMEOUT", "30"))


class OCRError(RuntimeError):
    """The recognizer could not produce any text for the image."""


def ocr_space(data: bytes, filename: str | None = None, *, api_key: str | None = None,
              url: str | None = None, timeout: float | None = None) -> str:
    try:
        resp = requests.post(
            url or OCR_SPACE_URL,
            files={"file": (filename or "image.jpg", data)},
            data={
                "apikey": api_key if api_key is not None else OCR_SPACE_API_KEY,
                "language": "eng",
                "isOverlayRequired": "false",
            },
            timeout=timeout or OCR_TIMEOUT,
        )
        resp.raise_for_status()
        payload = resp.json()
    except (requests.RequestException, ValueError) as e:
        raise OCRError(f"OCR.space request failed: {e}") from e

    try:
        return payload["ParsedResults"][0]["ParsedText"]
    except (KeyError, IndexError, TypeError):
        logger.error("OCR.space API error", extra={"response": payload})
        raise OCRError("OCR.space returned no parsed text")


def ocr_page(img, lang: str = "eng") -> str:
    """Run Tesseract on a PIL image."""
    if not pytesseract:
        raise OCRError("pytesseract is not installed")
    try:
        return pytesseract.image_to_string(img, lang=lang, config="--psm 6") or ""
    except Exception as e:
        raise OCRError(f"Tesseract failed: {e}") from e


def ocr_tesseract(data: bytes, filename: str | None = None) -> str:
    if Image is None:
        raise OCRError("Pillow is not installed")
    try:
        img = Image.open(io.BytesIO(data))
    except Exception as e:
        raise OCRError(f"Could not open image {filename or ''}: {e}") from e
    return ocr_page(img)


BACKENDS = {
    "ocrspace": ocr_space,
    "tesseract": ocr_tesseract,
}


def recognize_text(data: bytes, filename: str | None = None, backend: str | None = None) -> str:
    name = (backend or OCR_BACKEND).lower()
    try:
        fn = BACKENDS[name]
    except KeyError:
        raise OCRError(f"Unknown OCR backend: {name!r} (ocrspace / tesseract)")
    # blank text is not an error here; the extractors just report every field missing
    return fn(data, filename) or ""
