"""Application services."""

from .intake import IntakeOrchestrator
from .sessions import IntakeService, get_intake_service, reset_intake_state

__all__ = [
    "IntakeOrchestrator",
    "IntakeService",
    "get_intake_service",
    "reset_intake_state",
]
