"""Text extraction hooks for uploaded reports.

The pipeline asks a :class:`TextExtractor` for the plain text of a PDF.  The
default implementation reads the text layer with pdfplumber; image-only PDFs
come back empty and are rejected by the orchestrator.  Tests and alternative
integrations install their own client with :func:`configure_text_extractor`.
"""
from __future__ import annotations

import asyncio
import io
import logging
from typing import Protocol

import pdfplumber

from backend.core.errors import ExtractionError
from backend.core.schema import ExtractedDocument, UploadCandidate

logger = logging.getLogger(__name__)


class TextExtractor(Protocol):
    """Contract for text extraction integrations."""

    async def extract(self, candidate: UploadCandidate) -> ExtractedDocument:
        """Extract the text content of the uploaded file."""


class PdfPlumberTextExtractor:
    """Reads the embedded text layer of a PDF page by page."""

    def extract_pages(self, candidate: UploadCandidate) -> list[str]:
        if not candidate.content:
            raise ExtractionError(f"empty upload: {candidate.filename}")
        try:
            pages: list[str] = []
            with pdfplumber.open(io.BytesIO(candidate.content)) as pdf:
                for page in pdf.pages:
                    pages.append(page.extract_text() or "")
            return pages
        except Exception as exc:  # noqa: BLE001 - pdfminer raises a wide range of errors
            raise ExtractionError(str(exc)) from exc

    async def extract(self, candidate: UploadCandidate) -> ExtractedDocument:
        pages = await asyncio.to_thread(self.extract_pages, candidate)
        full_text = "\n".join(text for text in pages if text).strip()
        logger.debug("extracted %s characters from %s (%s pages)", len(full_text), candidate.filename, len(pages))
        return ExtractedDocument(full_text=full_text, pages=pages, filename=candidate.filename)


_extractor: TextExtractor = PdfPlumberTextExtractor()


def configure_text_extractor(extractor: TextExtractor) -> None:
    """Install the text extractor used by newly created intake sessions."""

    global _extractor
    _extractor = extractor


def get_text_extractor() -> TextExtractor:
    """Return the currently configured text extractor."""

    return _extractor


def reset_text_extractor() -> None:
    configure_text_extractor(PdfPlumberTextExtractor())
