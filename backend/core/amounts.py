from __future__ import annotations

import math
import re


AMOUNT_PATTERN = r"\(?-?\$?\s?\d[\d,]*(?:\.\d+)?\)?"
PERCENT_PATTERN = r"\(?-?\d+(?:\.\d+)?\)?\s?%"

_TRAILING_NUMBERS = re.compile(r"(?:\s+\(?-?\$?[\d,]+(?:\.\d+)?\)?)+$")


def parse_amount(value: str | None) -> float | None:
    """Parse statement amounts such as ``$1,234.50`` or ``(4,000.00)``."""

    if value is None:
        return None
    text = str(value).replace("%", "").strip()
    if not text or text in {"-", "—", "n/a", "N/A"}:
        return None
    negative = text.startswith("(") and text.endswith(")")
    cleaned = text.strip("()").replace("$", "").replace(",", "").replace(" ", "")
    try:
        number = float(cleaned)
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return -abs(number) if negative else number


def parse_percent(value: str | None) -> float | None:
    return parse_amount(value)


def strip_trailing_numbers(label: str) -> str:
    """Drop unit/price columns that sit between a holding name and its value."""

    return _TRAILING_NUMBERS.sub("", label).strip(" .:-\t")
