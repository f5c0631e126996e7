import pytest
import requests

import receiptapi.ocr as ocr
from receiptapi.ocr import OCRError, ocr_space, recognize_text


class FakeResponse:
    def __init__(self, payload=None, status_error=None, bad_json=False):
        self._payload = payload
        self._status_error = status_error
        self._bad_json = bad_json

    def raise_for_status(self):
        if self._status_error:
            raise self._status_error

    def json(self):
        if self._bad_json:
            raise ValueError("not json")
        return self._payload


def test_ocr_space_returns_first_parsed_text(monkeypatch):
    calls = {}

    def fake_post(url, files=None, data=None, timeout=None):
        calls.update(url=url, files=files, data=data, timeout=timeout)
        return FakeResponse({"ParsedResults": [{"ParsedText": "BANK@AM\r\nReference No. AB12345"}]})

    monkeypatch.setattr(ocr.requests, "post", fake_post)
    text = ocr_space(b"img", "slip.jpg", api_key="k", url="http://ocr.test/parse", timeout=5)

    assert text == "BANK@AM\r\nReference No. AB12345"
    assert calls["url"] == "http://ocr.test/parse"
    assert calls["files"] == {"file": ("slip.jpg", b"img")}
    assert calls["data"]["apikey"] == "k"
    assert calls["data"]["language"] == "eng"
    assert calls["timeout"] == 5


def test_ocr_space_without_results_raises(monkeypatch):
    monkeypatch.setattr(ocr.requests, "post",
                        lambda *a, **k: FakeResponse({"IsErroredOnProcessing": True, "ErrorMessage": ["bad"]}))
    with pytest.raises(OCRError):
        ocr_space(b"img")


def test_ocr_space_transport_errors_become_ocr_errors(monkeypatch):
    def fail(*a, **k):
        raise requests.ConnectionError("down")

    monkeypatch.setattr(ocr.requests, "post", fail)
    with pytest.raises(OCRError, match="request failed"):
        ocr_space(b"img")


def test_ocr_space_http_error(monkeypatch):
    monkeypatch.setattr(ocr.requests, "post",
                        lambda *a, **k: FakeResponse(status_error=requests.HTTPError("500")))
    with pytest.raises(OCRError):
        ocr_space(b"img")


def test_ocr_space_bad_json(monkeypatch):
    monkeypatch.setattr(ocr.requests, "post", lambda *a, **k: FakeResponse(bad_json=True))
    with pytest.raises(OCRError):
        ocr_space(b"img")


def test_recognize_text_dispatches_on_backend(monkeypatch):
    monkeypatch.setitem(ocr.BACKENDS, "ocrspace", lambda data, filename=None: "from ocrspace")
    monkeypatch.setitem(ocr.BACKENDS, "tesseract", lambda data, filename=None: None)
    assert recognize_text(b"x", "a.png", backend="ocrspace") == "from ocrspace"
    # blank output is an empty string, not an error
    assert recognize_text(b"x", "a.png", backend="TESSERACT") == ""


def test_unknown_backend():
    with pytest.raises(OCRError, match="Unknown OCR backend"):
        recognize_text(b"x", backend="nope")


def test_tesseract_rejects_garbage_bytes():
    if ocr.Image is None:
        pytest.skip("Pillow not installed")
    with pytest.raises(OCRError):
        ocr.ocr_tesseract(b"definitely not an image", "x.png")
