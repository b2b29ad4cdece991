"""Application service layer for intake sessions."""
from __future__ import annotations

import logging
from typing import Any

from backend.application.intake import IntakeOrchestrator, ReportParser, TypeIdentifier
from backend.core.config import get_settings
from backend.core.schema import REPORT_SLOTS, SessionSnapshot, SlotSnapshot, UploadCandidate
from backend.extractors.detect import KeywordReportIdentifier
from backend.extractors.registry import RegistryReportParser
from backend.infrastructure import InMemorySessionRepository, SessionRecord, SessionRepository, get_text_extractor

logger = logging.getLogger(__name__)


class IntakeService:
    """Coordinates intake sessions for the HTTP layer."""

    def __init__(
        self,
        repository: SessionRepository,
        *,
        identifier: TypeIdentifier | None = None,
        parser: ReportParser | None = None,
    ) -> None:
        self._repository = repository
        self._identifier = identifier or KeywordReportIdentifier()
        self._parser = parser or RegistryReportParser()

    # ------------------------------------------------------------------
    # session lifecycle
    # ------------------------------------------------------------------
    def create_session(self) -> str:
        session_id = self._repository.next_session_id()
        orchestrator = IntakeOrchestrator(
            get_text_extractor(),
            self._identifier,
            self._parser,
            REPORT_SLOTS,
            min_text_length=get_settings().MIN_TEXT_LENGTH,
        )
        record = SessionRecord(session_id=session_id, orchestrator=orchestrator)
        orchestrator.subscribe(
            on_partial_data=lambda slot_key, data: record.events.append(
                {"event": "partial_data", "slot": slot_key, "data": data}
            ),
            on_complete=lambda aggregate: record.events.append({"event": "complete", "data": aggregate}),
        )
        self._repository.add(record)
        logger.info("created intake session %s", session_id)
        return session_id

    def get_record(self, session_id: str) -> SessionRecord | None:
        return self._repository.get(session_id)

    def close_session(self, session_id: str) -> bool:
        """Drop a finished intake from the store; returns False for unknown ids."""

        removed = self._repository.remove(session_id)
        if removed:
            logger.info("closed intake session %s", session_id)
        return removed

    def list_sessions(self) -> list[dict[str, object]]:
        summaries: list[dict[str, object]] = []
        for record in self._repository.list_sessions():
            snapshot = record.orchestrator.get_session()
            summaries.append(
                {
                    "session_id": record.session_id,
                    "created_at": record.created_at.isoformat(),
                    "is_complete": snapshot.is_complete,
                    "statuses": {key: slot.status.value for key, slot in snapshot.slots.items()},
                }
            )
        return summaries

    # ------------------------------------------------------------------
    # slot operations
    # ------------------------------------------------------------------
    def has_slot(self, session_id: str, slot_key: str) -> bool:
        record = self._repository.get(session_id)
        return record is not None and record.orchestrator.has_slot(slot_key)

    def get_session(self, session_id: str) -> SessionSnapshot | None:
        record = self._repository.get(session_id)
        return record.orchestrator.get_session() if record else None

    async def submit_file(
        self,
        session_id: str,
        slot_key: str,
        candidate: UploadCandidate | None,
        selection_error: str | None = None,
    ) -> SlotSnapshot:
        record = self._require(session_id)
        return await record.orchestrator.submit_file(slot_key, candidate, selection_error)

    def reset_slot(self, session_id: str, slot_key: str) -> SlotSnapshot | None:
        record = self._require(session_id)
        record.orchestrator.reset_slot(slot_key)
        return record.orchestrator.get_session().slots.get(slot_key)

    def restart_session(self, session_id: str) -> SessionSnapshot:
        record = self._require(session_id)
        record.orchestrator.reset()
        record.events.clear()
        return record.orchestrator.get_session()

    def get_results(self, session_id: str) -> dict[str, Any] | None:
        snapshot = self.get_session(session_id)
        if snapshot is None:
            return None
        items = {key: slot.parsed_data for key, slot in snapshot.slots.items() if slot.parsed_data is not None}
        return {"session_id": session_id, "is_complete": snapshot.is_complete, "items": items}

    def list_events(self, session_id: str) -> list[dict[str, Any]] | None:
        record = self._repository.get(session_id)
        return list(record.events) if record else None

    def _require(self, session_id: str) -> SessionRecord:
        record = self._repository.get(session_id)
        if record is None:
            raise KeyError(session_id)
        return record

    # ------------------------------------------------------------------
    # testing helpers
    # ------------------------------------------------------------------
    def reset(self) -> None:
        self._repository.reset()


_repository = InMemorySessionRepository()
_service = IntakeService(_repository)


def get_intake_service() -> IntakeService:
    """Return the singleton intake service for the process."""

    return _service


def reset_intake_state() -> None:
    """Reset the in-memory store (used in tests)."""

    _service.reset()
