"""Parser for Investment Allocation (asset allocation) statements."""

from __future__ import annotations

import re
from typing import Any

import pandas as pd

from backend.core.amounts import AMOUNT_PATTERN, PERCENT_PATTERN, parse_amount, parse_percent, strip_trailing_numbers
from backend.core.errors import ParseError
from backend.core.schema import AssetAllocationReport, AssetClassAllocation, ExtractedDocument, Holding


ROW_RE = re.compile(
    rf"^(?P<label>.*?[A-Za-z].*?)\s+(?P<value>{AMOUNT_PATTERN})(?:\s+(?P<weight>{PERCENT_PATTERN}))?\s*$"
)
AS_AT_RE = re.compile(
    r"as\s+at\s*:?\s*("
    r"\d{1,2}(?:st|nd|rd|th)?\s+[A-Za-z]+\s+\d{4}"
    r"|\d{1,2}[/-]\d{1,2}[/-]\d{2,4}"
    r"|[A-Za-z]+\s+\d{1,2},?\s+\d{4}"
    r")",
    re.IGNORECASE,
)

CLASS_HEADERS = ["asset class", "asset allocation summary", "allocation by asset class"]
HOLDING_HEADERS = ["holdings", "investment holdings", "holding details"]
GRAND_TOTAL_HINTS = ["portfolio", "grand", "overall", "total value", "total investments"]
COLUMN_HINTS = ["value", "weight", "units", "price", "%"]
SKIP_PREFIXES = ("as at", "page", "date", "account")


def _is_header(line: str, headers: list[str]) -> bool:
    lowered = line.lower().rstrip(":")
    return any(header in lowered for header in headers)


def _extract_as_at(text: str) -> str | None:
    match = AS_AT_RE.search(text)
    return match.group(1).strip() if match else None


def _scan_rows(text: str) -> tuple[list[dict[str, Any]], list[dict[str, Any]], float | None]:
    classes: list[dict[str, Any]] = []
    holdings: list[dict[str, Any]] = []
    total_value: float | None = None
    section: str | None = None
    current_class: str | None = None

    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line:
            continue

        match = ROW_RE.match(line)
        if match is None:
            if _is_header(line, HOLDING_HEADERS):
                section = "holdings"
                current_class = None
            elif section == "holdings" and any(hint in line.lower() for hint in COLUMN_HINTS):
                continue
            elif _is_header(line, CLASS_HEADERS):
                section = "classes"
            elif section == "holdings":
                # Bare lines inside the holdings table are asset class group headings.
                current_class = line.rstrip(":").strip()
            continue

        label = strip_trailing_numbers(match.group("label"))
        value = parse_amount(match.group("value"))
        if not label or value is None or section is None:
            continue
        weight = parse_percent(match.group("weight")) if match.group("weight") else None

        lowered = label.lower()
        if lowered.startswith(SKIP_PREFIXES):
            continue
        if lowered.startswith("total"):
            if section == "classes" or any(hint in lowered for hint in GRAND_TOTAL_HINTS):
                total_value = value
            continue

        if section == "classes":
            classes.append({"name": label, "value": value, "weight": weight})
        else:
            holdings.append({"name": label, "asset_class": current_class, "value": value, "weight": weight})

    return classes, holdings, total_value


def _fill_weights(frame: pd.DataFrame, total: float | None) -> pd.DataFrame:
    if frame.empty or not total:
        return frame
    computed = (frame["value"] / total * 100).round(2)
    frame["weight"] = frame["weight"].fillna(computed)
    return frame


def _records(frame: pd.DataFrame) -> list[dict[str, Any]]:
    records = frame.to_dict(orient="records")
    for record in records:
        for key, value in record.items():
            if isinstance(value, float) and pd.isna(value):
                record[key] = None
    return records


def parse(document: ExtractedDocument) -> AssetAllocationReport:
    classes, holdings, total_value = _scan_rows(document.full_text)
    if not classes and not holdings:
        raise ParseError("No asset allocation rows were found in the document.")

    holdings_frame = pd.DataFrame(holdings, columns=["name", "asset_class", "value", "weight"])
    classes_frame = pd.DataFrame(classes, columns=["name", "value", "weight"])

    if classes_frame.empty and holdings_frame["asset_class"].notna().any():
        grouped = (
            holdings_frame.dropna(subset=["asset_class"])
            .groupby("asset_class", sort=False)["value"]
            .sum()
            .reset_index()
            .rename(columns={"asset_class": "name"})
        )
        grouped["weight"] = None
        classes_frame = grouped[["name", "value", "weight"]]

    if total_value is None:
        source = classes_frame if not classes_frame.empty else holdings_frame
        total_value = round(float(source["value"].sum()), 2)

    classes_frame = _fill_weights(classes_frame.astype({"weight": "float64"}), total_value)
    holdings_frame = _fill_weights(holdings_frame.astype({"weight": "float64"}), total_value)

    return AssetAllocationReport(
        as_at_date=_extract_as_at(document.full_text),
        asset_classes=[AssetClassAllocation(**row) for row in _records(classes_frame)],
        holdings=[Holding(**row) for row in _records(holdings_frame)],
        total_value=total_value,
    )
