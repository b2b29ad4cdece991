"""Domain layer definitions."""

from .slots import IntakeSession, Slot

__all__ = [
    "IntakeSession",
    "Slot",
]
