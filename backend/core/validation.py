"""Gate that checks an identified document against the slot it was sent to."""
from __future__ import annotations

from dataclasses import dataclass

from backend.core.errors import SlotError, type_mismatch_error
from backend.core.schema import IdentificationResult, SlotDefinition


@dataclass(frozen=True, slots=True)
class Accept:
    accepted: bool = True


@dataclass(frozen=True, slots=True)
class Reject:
    error: SlotError
    accepted: bool = False

    @property
    def reason(self) -> str:
        return self.error.message


def validate(definition: SlotDefinition, identification: IdentificationResult | None) -> Accept | Reject:
    """Accept only when the identified type equals the slot's expected type.

    A missing identification, or one whose ``type`` is ``None``, never matches.
    """

    actual_type = identification.type if identification is not None else None
    if actual_type is not None and actual_type == definition.expected_type:
        return Accept()

    return Reject(
        error=type_mismatch_error(
            expected_type=definition.expected_type.value,
            expected_title=definition.display_title,
            actual_type=actual_type.value if actual_type is not None else None,
            actual_name=identification.name if identification is not None else None,
        )
    )
