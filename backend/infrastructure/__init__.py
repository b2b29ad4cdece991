"""Infrastructure layer exports."""

from .extraction import (
    PdfPlumberTextExtractor,
    TextExtractor,
    configure_text_extractor,
    get_text_extractor,
    reset_text_extractor,
)
from .sessions import InMemorySessionRepository, SessionRecord, SessionRepository

__all__ = [
    "InMemorySessionRepository",
    "PdfPlumberTextExtractor",
    "SessionRecord",
    "SessionRepository",
    "TextExtractor",
    "configure_text_extractor",
    "get_text_extractor",
    "reset_text_extractor",
]
