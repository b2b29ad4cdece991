"""Domain entities for report intake sessions."""
from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterable

from backend.core.errors import SlotConfigurationError, SlotError
from backend.core.schema import SessionSnapshot, SlotDefinition, SlotSnapshot, SlotStatus


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class Slot:
    """One expected document position and its lifecycle state.

    ``parsed_data`` is only set while the slot is ``success`` and
    ``last_error`` only while it is ``error``.  Every attempt bumps
    ``attempt`` so results belonging to a superseded attempt can be told apart.
    """

    definition: SlotDefinition
    status: SlotStatus = SlotStatus.IDLE
    parsed_data: dict[str, Any] | None = None
    last_error: SlotError | None = None
    attempt: int = 0
    filename: str | None = None
    updated_at: datetime | None = None

    @property
    def key(self) -> str:
        return self.definition.key

    def _clear(self) -> None:
        self.parsed_data = None
        self.last_error = None

    def is_current(self, token: int) -> bool:
        return self.attempt == token

    def begin_attempt(self, filename: str | None) -> int:
        self.attempt += 1
        self._clear()
        self.status = SlotStatus.PROCESSING
        self.filename = filename
        self.updated_at = _now()
        return self.attempt

    def reject(self, error: SlotError) -> None:
        """Record an error that arrived without a processing attempt."""

        self.attempt += 1
        self._clear()
        self.status = SlotStatus.ERROR
        self.last_error = error
        self.filename = None
        self.updated_at = _now()

    def fail(self, error: SlotError) -> None:
        self.parsed_data = None
        self.status = SlotStatus.ERROR
        self.last_error = error
        self.updated_at = _now()

    def succeed(self, data: dict[str, Any]) -> None:
        self.last_error = None
        self.status = SlotStatus.SUCCESS
        self.parsed_data = data
        self.updated_at = _now()

    def reset(self) -> bool:
        """Return to ``idle``; returns ``False`` when there was nothing to reset."""

        if self.status is SlotStatus.IDLE:
            return False
        self.attempt += 1
        self._clear()
        self.status = SlotStatus.IDLE
        self.filename = None
        self.updated_at = _now()
        return True

    def snapshot(self) -> SlotSnapshot:
        return SlotSnapshot(
            key=self.key,
            expected_type=self.definition.expected_type,
            display_title=self.definition.display_title,
            status=self.status,
            parsed_data=deepcopy(self.parsed_data),
            last_error=self.last_error.to_dict() if self.last_error is not None else None,
            filename=self.filename,
            attempt=self.attempt,
            updated_at=self.updated_at,
        )


@dataclass(slots=True)
class IntakeSession:
    """Fixed mapping of slot key to :class:`Slot` for one intake run."""

    slots: dict[str, Slot] = field(default_factory=dict)

    @classmethod
    def from_definitions(cls, definitions: Iterable[SlotDefinition]) -> "IntakeSession":
        slots: dict[str, Slot] = {}
        for definition in definitions:
            if definition.key in slots:
                raise SlotConfigurationError(f"duplicate slot key: {definition.key}")
            slots[definition.key] = Slot(definition=definition)
        if not slots:
            raise SlotConfigurationError("at least one slot definition is required")
        return cls(slots=slots)

    @property
    def is_complete(self) -> bool:
        return all(slot.status is SlotStatus.SUCCESS for slot in self.slots.values())

    def get(self, key: str) -> Slot | None:
        return self.slots.get(key)

    def aggregate(self) -> dict[str, dict[str, Any] | None]:
        return {key: slot.parsed_data for key, slot in self.slots.items()}

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            slots={key: slot.snapshot() for key, slot in self.slots.items()},
            is_complete=self.is_complete,
        )
