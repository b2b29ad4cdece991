from backend.core.errors import IntakeErrorKind
from backend.core.schema import REPORT_SLOTS, IdentificationResult, ReportType
from backend.core.validation import Accept, Reject, validate


ALLOCATION_SLOT, PERFORMANCE_SLOT = REPORT_SLOTS


def test_matching_type_is_accepted():
    identification = IdentificationResult(type=ReportType.PERFORMANCE, name="Performance Report", confidence=0.9)

    verdict = validate(PERFORMANCE_SLOT, identification)

    assert isinstance(verdict, Accept)
    assert verdict.accepted is True


def test_mismatch_names_detected_and_expected_reports():
    identification = IdentificationResult(type=ReportType.PERFORMANCE, name="Performance Report")

    verdict = validate(ALLOCATION_SLOT, identification)

    assert isinstance(verdict, Reject)
    assert verdict.error.kind is IntakeErrorKind.TYPE_MISMATCH
    assert verdict.reason == (
        "This appears to be a Performance Report. Please upload a Asset Allocation Report for this step."
    )
    assert verdict.error.detail["expected_type"] == "asset_allocation"
    assert verdict.error.detail["actual_type"] == "performance"


def test_unidentified_document_is_rejected():
    verdict = validate(PERFORMANCE_SLOT, IdentificationResult(type=None, name=None))

    assert isinstance(verdict, Reject)
    assert "Unknown report type" in verdict.reason
    assert "Performance Report" in verdict.reason


def test_missing_identification_is_rejected():
    verdict = validate(ALLOCATION_SLOT, None)

    assert isinstance(verdict, Reject)
    assert verdict.error.detail["actual_name"] is None
    assert "Unknown report type" in verdict.reason
