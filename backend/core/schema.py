from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ReportType(str, Enum):
    ASSET_ALLOCATION = "asset_allocation"
    PERFORMANCE = "performance"


REPORT_NAMES: dict[ReportType, str] = {
    ReportType.ASSET_ALLOCATION: "Asset Allocation Report",
    ReportType.PERFORMANCE: "Performance Report",
}


class SlotStatus(str, Enum):
    IDLE = "idle"
    PROCESSING = "processing"
    SUCCESS = "success"
    ERROR = "error"


class SlotDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str
    expected_type: ReportType
    display_title: str
    description: str = ""


REPORT_SLOTS: tuple[SlotDefinition, ...] = (
    SlotDefinition(
        key="asset_allocation",
        expected_type=ReportType.ASSET_ALLOCATION,
        display_title="Asset Allocation Report",
        description="Upload the Investment Allocation PDF",
    ),
    SlotDefinition(
        key="performance",
        expected_type=ReportType.PERFORMANCE,
        display_title="Performance Report",
        description="Upload the Investment Movement and Returns PDF",
    ),
)


class UploadCandidate(BaseModel):
    """A file handed to the orchestrator for one slot."""

    filename: str
    content: bytes
    content_type: str | None = None


class ExtractedDocument(BaseModel):
    full_text: str
    pages: list[str] = Field(default_factory=list)
    filename: str | None = None

    @property
    def page_count(self) -> int:
        return len(self.pages)


class IdentificationResult(BaseModel):
    type: ReportType | None = None
    name: str | None = None
    confidence: float = 0.0
    scores: dict[str, int] = Field(default_factory=dict)


class ParsedReport(BaseModel):
    report_type: ReportType
    data: dict[str, Any]


class AssetClassAllocation(BaseModel):
    name: str
    value: float
    weight: float | None = None


class Holding(BaseModel):
    name: str
    asset_class: str | None = None
    value: float
    weight: float | None = None


class AssetAllocationReport(BaseModel):
    as_at_date: str | None = None
    asset_classes: list[AssetClassAllocation] = Field(default_factory=list)
    holdings: list[Holding] = Field(default_factory=list)
    total_value: float | None = None


class ReportPeriod(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_: str | None = Field(default=None, alias="from")
    to: str | None = None


class TimeWeightedReturns(BaseModel):
    one_month: float | None = None
    three_months: float | None = None
    six_months: float | None = None
    one_year: float | None = None
    three_years: float | None = None
    since_inception: float | None = None


class PerformanceReport(BaseModel):
    period: ReportPeriod = Field(default_factory=ReportPeriod)
    opening_market_value: float | None = None
    ending_market_value: float | None = None
    net_contributions: float | None = None
    income: float | None = None
    expenses: float | None = None
    dollar_return_after_expenses: float | None = None
    twr: TimeWeightedReturns = Field(default_factory=TimeWeightedReturns)


class SlotSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str
    expected_type: ReportType
    display_title: str
    status: SlotStatus
    parsed_data: dict[str, Any] | None = None
    last_error: dict[str, Any] | None = None
    filename: str | None = None
    attempt: int = 0
    updated_at: datetime | None = None


class SessionSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    slots: dict[str, SlotSnapshot]
    is_complete: bool
