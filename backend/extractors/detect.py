"""Report type detection for extracted PDF text.

The detector scores the text against keyword lists for each report type the
intake supports:

* Investment Allocation / Asset Allocation → ``asset_allocation``
* Investment Movement and Returns / TWR → ``performance``

The goal is not to be bullet proof but to cover the canonical statements the
MVP supports.  A document that scores too low, or scores equally for both
types, is reported as unidentified (``type=None``) and the caller treats it as
a mismatch.
"""

from __future__ import annotations

import re
from typing import Iterable

from backend.core.schema import REPORT_NAMES, IdentificationResult, ReportType


KEYWORDS_ASSET_ALLOCATION: list[tuple[str, int]] = [
    ("investment allocation", 3),
    ("asset allocation", 3),
    ("asset class", 2),
    ("holdings", 1),
    ("% of portfolio", 1),
    ("portfolio weight", 1),
    ("target allocation", 1),
]
KEYWORDS_PERFORMANCE: list[tuple[str, int]] = [
    ("investment movement", 3),
    ("time weighted return", 3),
    ("performance report", 3),
    ("twr", 2),
    ("opening market value", 1),
    ("closing market value", 1),
    ("dollar return", 1),
    ("since inception", 1),
]

MIN_SCORE = 3


def _pattern(phrase: str) -> re.Pattern[str]:
    return re.compile(rf"(?<!\w){re.escape(phrase)}(?!\w)")


def _score(text: str, keywords: Iterable[tuple[str, int]]) -> int:
    return sum(weight for phrase, weight in keywords if _pattern(phrase).search(text))


def identify(full_text: str) -> IdentificationResult:
    lowered = (full_text or "").lower()
    scores = {
        ReportType.ASSET_ALLOCATION: _score(lowered, KEYWORDS_ASSET_ALLOCATION),
        ReportType.PERFORMANCE: _score(lowered, KEYWORDS_PERFORMANCE),
    }
    raw_scores = {report_type.value: score for report_type, score in scores.items()}

    ranked = sorted(scores.items(), key=lambda item: item[1], reverse=True)
    (best_type, best_score), (_, runner_up) = ranked[0], ranked[1]
    if best_score < MIN_SCORE or best_score == runner_up:
        return IdentificationResult(type=None, name=None, confidence=0.0, scores=raw_scores)

    confidence = round(best_score / sum(scores.values()), 4)
    return IdentificationResult(
        type=best_type,
        name=REPORT_NAMES[best_type],
        confidence=confidence,
        scores=raw_scores,
    )


class KeywordReportIdentifier:
    """Default :class:`TypeIdentifier` used by intake sessions."""

    def identify(self, full_text: str) -> IdentificationResult:
        return identify(full_text)
