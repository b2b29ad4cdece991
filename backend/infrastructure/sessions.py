"""Infrastructure layer for intake session storage."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:  # pragma: no cover
    from backend.application.intake import IntakeOrchestrator


@dataclass(slots=True)
class SessionRecord:
    """An intake session together with the notifications it has emitted."""

    session_id: str
    orchestrator: "IntakeOrchestrator"
    events: list[dict[str, Any]] = field(default_factory=list)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class SessionRepository(Protocol):
    """Storage contract for intake sessions."""

    def next_session_id(self) -> str: ...

    def add(self, record: SessionRecord) -> None: ...

    def get(self, session_id: str) -> SessionRecord | None: ...

    def remove(self, session_id: str) -> bool: ...

    def list_sessions(self) -> list[SessionRecord]: ...

    def reset(self) -> None: ...


class InMemorySessionRepository:
    """Keeps sessions for the lifetime of the process only."""

    def __init__(self) -> None:
        self._sessions: dict[str, SessionRecord] = {}
        self._session_counter = 0

    def next_session_id(self) -> str:
        self._session_counter += 1
        return f"session-{self._session_counter:05d}"

    def add(self, record: SessionRecord) -> None:
        self._sessions[record.session_id] = record

    def get(self, session_id: str) -> SessionRecord | None:
        return self._sessions.get(session_id)

    def remove(self, session_id: str) -> bool:
        return self._sessions.pop(session_id, None) is not None

    def list_sessions(self) -> list[SessionRecord]:
        return sorted(self._sessions.values(), key=lambda record: record.created_at, reverse=True)

    def reset(self) -> None:
        self._sessions.clear()
        self._session_counter = 0
