"""Dispatch identified documents to the parser for their report type."""

from __future__ import annotations

from typing import Callable

from pydantic import BaseModel

from backend.core.errors import ParseError
from backend.core.schema import ExtractedDocument, ParsedReport, ReportType
from backend.extractors import asset_allocation, performance


ParserFn = Callable[[ExtractedDocument], BaseModel]

PARSERS: dict[ReportType, ParserFn] = {
    ReportType.ASSET_ALLOCATION: asset_allocation.parse,
    ReportType.PERFORMANCE: performance.parse,
}


def parse_report(document: ExtractedDocument, report_type: ReportType) -> ParsedReport:
    parser = PARSERS.get(report_type)
    if parser is None:
        raise ParseError(f"No parser is registered for {report_type.value} reports.")
    model = parser(document)
    return ParsedReport(report_type=report_type, data=model.model_dump(mode="json", by_alias=True))


class RegistryReportParser:
    """Default :class:`ReportParser` backed by :data:`PARSERS`."""

    def parse(self, document: ExtractedDocument, report_type: ReportType) -> ParsedReport:
        return parse_report(document, report_type)
