"""Parser for Investment Movement and Returns (performance) statements."""

from __future__ import annotations

import re

from backend.core.amounts import AMOUNT_PATTERN, PERCENT_PATTERN, parse_amount, parse_percent
from backend.core.errors import ParseError
from backend.core.schema import ExtractedDocument, PerformanceReport, ReportPeriod, TimeWeightedReturns


DATE_PATTERN = r"\d{1,2}(?:st|nd|rd|th)?\s+[A-Za-z]+\s+\d{4}|\d{1,2}/\d{1,2}/\d{2,4}"
PERIOD_RE = re.compile(rf"(?:from\s+)?(?P<start>{DATE_PATTERN})\s+(?:to|until|-|–)\s+(?P<end>{DATE_PATTERN})", re.IGNORECASE)
AMOUNT_LINE_RE = re.compile(rf"^(?P<label>.*?[A-Za-z].*?)\s*:?\s+(?P<value>{AMOUNT_PATTERN})\s*$")

MOVEMENT_FIELDS: list[tuple[str, list[str]]] = [
    ("dollar_return_after_expenses", ["dollar return after expenses", "return after expenses", "net investment return"]),
    ("opening_market_value", ["opening market value", "beginning market value", "opening balance", "opening value"]),
    ("ending_market_value", ["closing market value", "ending market value", "closing balance", "closing value"]),
    ("net_contributions", ["net contributions"]),
    ("contributions", ["contributions", "transfers in"]),
    ("withdrawals", ["withdrawals", "benefit payments", "transfers out"]),
    ("income", ["income", "dividends and distributions"]),
    ("expenses", ["expenses", "fees"]),
]
# A label may only carry a date or "as at" qualifier after the phrase, so
# "Contributions Tax" or "Income Tax" are not read as contributions or income.
LABEL_QUALIFIER = r"(?:\s+(?:as\s+at|at|on|for)\b.*|\s+\d.*|\s*\(.*\))?"
MOVEMENT_RES: list[tuple[str, re.Pattern[str]]] = [
    (field, re.compile(rf"^{re.escape(phrase)}{LABEL_QUALIFIER}$", re.IGNORECASE))
    for field, phrases in MOVEMENT_FIELDS
    for phrase in phrases
]

TWR_LABELS: list[tuple[str, str]] = [
    ("one_month", r"1\s*month"),
    ("three_months", r"3\s*months"),
    ("six_months", r"6\s*months"),
    ("one_year", r"(?:1\s*year|12\s*months)"),
    ("three_years", r"3\s*years(?:\s*p\.?a\.?)?"),
    ("since_inception", r"since\s+inception(?:\s*p\.?a\.?)?"),
]
TWR_LINE_RES = {
    field: re.compile(rf"^{label}\s*(?:twr|return)?\s*:?\s+(?P<value>{PERCENT_PATTERN})", re.IGNORECASE)
    for field, label in TWR_LABELS
}
TWR_HEADER_RES = {field: re.compile(label, re.IGNORECASE) for field, label in TWR_LABELS}
TWR_ROW_RE = re.compile(r"^(?:twr|time\s+weighted\s+return)", re.IGNORECASE)
PERCENT_RE = re.compile(PERCENT_PATTERN)


def _extract_period(text: str) -> ReportPeriod:
    match = PERIOD_RE.search(text)
    if match is None:
        return ReportPeriod()
    return ReportPeriod(from_=match.group("start").strip(), to=match.group("end").strip())


def _match_field(label: str) -> str | None:
    cleaned = " ".join(label.split()).strip(" .:-")
    for field, pattern in MOVEMENT_RES:
        if pattern.match(cleaned):
            return field
    return None


def _header_columns(line: str) -> list[str]:
    """Return the TWR period columns named in a table header, in order."""

    found: list[tuple[int, str]] = []
    for field, pattern in TWR_HEADER_RES.items():
        match = pattern.search(line)
        if match:
            found.append((match.start(), field))
    found.sort()
    return [field for _, field in found]


def _scan(text: str) -> tuple[dict[str, float], dict[str, float]]:
    movements: dict[str, float] = {}
    returns: dict[str, float] = {}
    header: list[str] = []

    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line:
            continue

        if TWR_ROW_RE.match(line) and header:
            values = [parse_percent(token) for token in PERCENT_RE.findall(line)]
            for field, value in zip(header, values):
                if value is not None:
                    returns.setdefault(field, value)
            continue

        matched_twr = False
        for field, pattern in TWR_LINE_RES.items():
            match = pattern.match(line)
            if match:
                value = parse_percent(match.group("value"))
                if value is not None:
                    returns.setdefault(field, value)
                matched_twr = True
                break
        if matched_twr:
            continue

        columns = _header_columns(line)
        if len(columns) >= 2 and not PERCENT_RE.search(line):
            header = columns
            continue

        match = AMOUNT_LINE_RE.match(line)
        if match is None:
            continue
        field = _match_field(match.group("label"))
        value = parse_amount(match.group("value"))
        if field is None or value is None:
            continue
        movements.setdefault(field, value)

    return movements, returns


def parse(document: ExtractedDocument) -> PerformanceReport:
    movements, returns = _scan(document.full_text)
    if "ending_market_value" not in movements and not returns:
        raise ParseError("No performance figures were found in the document.")

    net_contributions = movements.get("net_contributions")
    if net_contributions is None and ("contributions" in movements or "withdrawals" in movements):
        net_contributions = movements.get("contributions", 0.0) - abs(movements.get("withdrawals", 0.0))

    expenses = movements.get("expenses")
    if expenses is not None:
        expenses = abs(expenses)

    opening = movements.get("opening_market_value")
    ending = movements.get("ending_market_value")
    dollar_return = movements.get("dollar_return_after_expenses")
    if dollar_return is None and opening is not None and ending is not None:
        dollar_return = round(ending - opening - (net_contributions or 0.0), 2)

    return PerformanceReport(
        period=_extract_period(document.full_text),
        opening_market_value=opening,
        ending_market_value=ending,
        net_contributions=net_contributions,
        income=movements.get("income"),
        expenses=expenses,
        dollar_return_after_expenses=dollar_return,
        twr=TimeWeightedReturns(**returns),
    )
