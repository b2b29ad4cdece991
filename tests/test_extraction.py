import asyncio

import pytest

from backend.core.errors import ExtractionError
from backend.core.schema import UploadCandidate
from backend.infrastructure import extraction
from backend.infrastructure.extraction import PdfPlumberTextExtractor


class _FakePage:
    def __init__(self, text):
        self._text = text

    def extract_text(self):
        return self._text


class _FakePdf:
    def __init__(self, pages):
        self.pages = [_FakePage(text) for text in pages]

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        return False


def test_pages_are_joined_in_order(monkeypatch):
    captured = {}

    def fake_open(stream):
        captured["bytes"] = stream.read()
        return _FakePdf(["Investment Allocation Report", None, "Total Portfolio $1,000.00"])

    monkeypatch.setattr(extraction.pdfplumber, "open", fake_open)
    candidate = UploadCandidate(filename="allocation.pdf", content=b"%PDF-1.7 fake")

    document = asyncio.run(PdfPlumberTextExtractor().extract(candidate))

    assert captured["bytes"] == b"%PDF-1.7 fake"
    assert document.full_text == "Investment Allocation Report\nTotal Portfolio $1,000.00"
    assert document.page_count == 3
    assert document.filename == "allocation.pdf"


def test_unreadable_pdf_raises_extraction_error(monkeypatch):
    def fake_open(stream):
        raise ValueError("No /Root object! - Is this really a PDF?")

    monkeypatch.setattr(extraction.pdfplumber, "open", fake_open)

    with pytest.raises(ExtractionError, match="No /Root object"):
        asyncio.run(PdfPlumberTextExtractor().extract(UploadCandidate(filename="bad.pdf", content=b"junk")))


def test_empty_upload_raises_extraction_error():
    with pytest.raises(ExtractionError):
        PdfPlumberTextExtractor().extract_pages(UploadCandidate(filename="empty.pdf", content=b""))


def test_configured_extractor_is_returned():
    class Dummy:
        async def extract(self, candidate):
            raise NotImplementedError

    dummy = Dummy()
    extraction.configure_text_extractor(dummy)
    try:
        assert extraction.get_text_extractor() is dummy
    finally:
        extraction.reset_text_extractor()
    assert isinstance(extraction.get_text_extractor(), PdfPlumberTextExtractor)
