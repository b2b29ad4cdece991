"""Error types raised by intake collaborators and recorded on slots.

Collaborators raise the exception classes below; the orchestrator converts
every failure into a :class:`SlotError` attached to the affected slot, so
nothing past the orchestrator boundary ever sees an exception for a failed
upload.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


EXTRACTION_FAILURE_MESSAGE = "Could not extract text from PDF. The file may be image-based or corrupted."
UNKNOWN_REPORT_NAME = "Unknown report type"


class IntakeErrorKind(str, Enum):
    SELECTION = "selection"
    EXTRACTION = "extraction"
    TYPE_MISMATCH = "type_mismatch"
    PARSE = "parse"


class ExtractionError(Exception):
    """Raised when text cannot be pulled out of an uploaded document."""


class InsufficientContentError(ExtractionError):
    """Raised when extraction succeeds but yields too little text to use."""

    def __init__(self, length: int, minimum: int) -> None:
        super().__init__(f"extracted {length} characters, need at least {minimum}")
        self.length = length
        self.minimum = minimum


class ParseError(Exception):
    """Raised when an identified document cannot be parsed into fields."""


class SlotConfigurationError(ValueError):
    """Raised when the slot definitions handed to the orchestrator are invalid."""


@dataclass(frozen=True, slots=True)
class SlotError:
    """Failure recorded on a slot: a kind plus the parameters behind the message."""

    kind: IntakeErrorKind
    message: str
    detail: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind.value, "message": self.message, "detail": dict(self.detail)}


def format_type_mismatch(expected_title: str, actual_name: str | None) -> str:
    actual = actual_name or UNKNOWN_REPORT_NAME
    return f"This appears to be a {actual}. Please upload a {expected_title} for this step."


def selection_error(message: str) -> SlotError:
    return SlotError(kind=IntakeErrorKind.SELECTION, message=message)


def extraction_error(reason: str | None = None) -> SlotError:
    detail = {"reason": reason} if reason else {}
    return SlotError(kind=IntakeErrorKind.EXTRACTION, message=EXTRACTION_FAILURE_MESSAGE, detail=detail)


def type_mismatch_error(
    *,
    expected_type: str,
    expected_title: str,
    actual_type: str | None,
    actual_name: str | None,
) -> SlotError:
    return SlotError(
        kind=IntakeErrorKind.TYPE_MISMATCH,
        message=format_type_mismatch(expected_title, actual_name),
        detail={
            "expected_type": expected_type,
            "expected_title": expected_title,
            "actual_type": actual_type,
            "actual_name": actual_name,
        },
    )


def parse_error(reason: str) -> SlotError:
    return SlotError(kind=IntakeErrorKind.PARSE, message=reason)
