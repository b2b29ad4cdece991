"""Report intake orchestration.

The orchestrator owns one :class:`~backend.domain.IntakeSession` and is the
only writer of its slots.  Each upload runs ``extract → identify → validate →
parse`` for the addressed slot; every failure lands on that slot as a
:class:`~backend.core.errors.SlotError` and never propagates to the caller or
to other slots.

Listeners are notified with ``on_partial_data(slot_key, data)`` after every
successful parse and with ``on_complete(aggregate)`` each time the session
goes from incomplete to complete.
"""
from __future__ import annotations

import inspect
import logging
from copy import deepcopy
from typing import Any, Awaitable, Callable, Iterable, Protocol

from backend.core import errors
from backend.core.config import get_settings
from backend.core.errors import (
    ExtractionError,
    InsufficientContentError,
    ParseError,
    SlotError,
    extraction_error,
    parse_error,
)
from backend.core.schema import (
    REPORT_SLOTS,
    ExtractedDocument,
    IdentificationResult,
    ParsedReport,
    ReportType,
    SessionSnapshot,
    SlotDefinition,
    SlotSnapshot,
    UploadCandidate,
)
from backend.core.validation import Reject, validate
from backend.domain import IntakeSession, Slot
from backend.infrastructure.extraction import TextExtractor

logger = logging.getLogger(__name__)


PartialDataListener = Callable[[str, dict[str, Any]], Any]
CompleteListener = Callable[[dict[str, dict[str, Any]]], Any]


class TypeIdentifier(Protocol):
    def identify(self, full_text: str) -> IdentificationResult | Awaitable[IdentificationResult]: ...


class ReportParser(Protocol):
    def parse(
        self, document: ExtractedDocument, report_type: ReportType
    ) -> ParsedReport | Awaitable[ParsedReport]: ...


async def _resolve(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


class IntakeOrchestrator:
    """Drives the slot state machine for one intake session."""

    def __init__(
        self,
        extractor: TextExtractor,
        identifier: TypeIdentifier,
        parser: ReportParser,
        definitions: Iterable[SlotDefinition] = REPORT_SLOTS,
        *,
        min_text_length: int | None = None,
        on_partial_data: PartialDataListener | None = None,
        on_complete: CompleteListener | None = None,
    ) -> None:
        self._definitions = tuple(definitions)
        self._session = IntakeSession.from_definitions(self._definitions)
        self._extractor = extractor
        self._identifier = identifier
        self._parser = parser
        self._min_text_length = (
            min_text_length if min_text_length is not None else get_settings().MIN_TEXT_LENGTH
        )
        self._partial_listeners: list[PartialDataListener] = []
        self._complete_listeners: list[CompleteListener] = []
        self.subscribe(on_partial_data=on_partial_data, on_complete=on_complete)

    # ------------------------------------------------------------------
    # listeners & queries
    # ------------------------------------------------------------------
    def subscribe(
        self,
        *,
        on_partial_data: PartialDataListener | None = None,
        on_complete: CompleteListener | None = None,
    ) -> None:
        if on_partial_data is not None:
            self._partial_listeners.append(on_partial_data)
        if on_complete is not None:
            self._complete_listeners.append(on_complete)

    @property
    def is_complete(self) -> bool:
        return self._session.is_complete

    def has_slot(self, slot_key: str) -> bool:
        return self._session.get(slot_key) is not None

    def get_session(self) -> SessionSnapshot:
        return self._session.snapshot()

    # ------------------------------------------------------------------
    # transitions
    # ------------------------------------------------------------------
    async def submit_file(
        self,
        slot_key: str,
        file: UploadCandidate | None = None,
        selection_error: str | None = None,
    ) -> SlotSnapshot:
        slot = self._session.get(slot_key)
        if slot is None:
            raise KeyError(slot_key)

        if selection_error:
            logger.info("slot %s rejected at selection: %s", slot_key, selection_error)
            slot.reject(errors.selection_error(selection_error))
            return slot.snapshot()

        if file is None:
            return slot.snapshot()

        token = slot.begin_attempt(file.filename)
        logger.info("slot %s attempt %s: processing %s", slot_key, token, file.filename)

        outcome = await self._run_pipeline(slot, token, file)
        if outcome is None or not self._is_live(slot, token):
            logger.info("slot %s attempt %s superseded; discarding result", slot_key, token)
            return self._session.slots[slot_key].snapshot()

        if isinstance(outcome, SlotError):
            logger.warning("slot %s attempt %s failed (%s): %s", slot_key, token, outcome.kind.value, outcome.message)
            slot.fail(outcome)
            return slot.snapshot()

        # the slot is still processing here, so a re-upload of a complete session re-completes it
        was_complete = self._session.is_complete
        slot.succeed(outcome.data)
        became_complete = not was_complete and self._session.is_complete
        aggregate = deepcopy(self._session.aggregate()) if became_complete else None
        logger.info("slot %s attempt %s succeeded", slot_key, token)

        await self._notify(self._partial_listeners, slot_key, deepcopy(outcome.data))
        if aggregate is not None:
            logger.info("intake session complete: %s", ", ".join(aggregate))
            await self._notify(self._complete_listeners, aggregate)
        return slot.snapshot()

    def reset_slot(self, slot_key: str) -> None:
        slot = self._session.get(slot_key)
        if slot is None:
            logger.debug("reset requested for unknown slot %s", slot_key)
            return
        if slot.reset():
            logger.info("slot %s reset", slot_key)

    def reset(self) -> None:
        """Start a new intake: every slot returns to ``idle`` and in-flight results are dropped."""

        self._session = IntakeSession.from_definitions(self._definitions)
        logger.info("intake session reset")

    # ------------------------------------------------------------------
    # pipeline
    # ------------------------------------------------------------------
    def _is_live(self, slot: Slot, token: int) -> bool:
        return self._session.get(slot.key) is slot and slot.is_current(token)

    async def _run_pipeline(
        self, slot: Slot, token: int, candidate: UploadCandidate
    ) -> ParsedReport | SlotError | None:
        definition = slot.definition

        try:
            document: ExtractedDocument = await _resolve(self._extractor.extract(candidate))
            full_text = document.full_text or ""
        except ExtractionError as exc:
            return extraction_error(str(exc))
        except Exception as exc:  # noqa: BLE001 - any extractor failure is an extraction failure
            logger.exception("text extraction crashed for %s", candidate.filename)
            return extraction_error(str(exc))

        if len(full_text) < self._min_text_length:
            return extraction_error(str(InsufficientContentError(len(full_text), self._min_text_length)))
        if not self._is_live(slot, token):
            return None

        try:
            identification: IdentificationResult | None = await _resolve(self._identifier.identify(full_text))
        except Exception:  # noqa: BLE001 - an identifier crash means the type is unknown
            logger.exception("report identification crashed for %s", candidate.filename)
            identification = None
        logger.info(
            "slot %s identified %s as %s",
            slot.key,
            candidate.filename,
            identification.type.value if identification is not None and identification.type else "unknown",
        )

        verdict = validate(definition, identification)
        if isinstance(verdict, Reject):
            return verdict.error
        if not self._is_live(slot, token):
            return None

        try:
            parsed: ParsedReport = await _resolve(self._parser.parse(document, definition.expected_type))
        except ParseError as exc:
            return parse_error(str(exc))
        except Exception as exc:  # noqa: BLE001 - any parser failure is a parse failure
            logger.exception("report parsing crashed for %s", candidate.filename)
            return parse_error(str(exc) or f"Could not read the {definition.display_title}.")
        return parsed

    async def _notify(self, listeners: list[Callable[..., Any]], *args: Any) -> None:
        for listener in listeners:
            try:
                await _resolve(listener(*args))
            except Exception:  # noqa: BLE001 - listener errors must not change slot state
                logger.exception("intake listener %r failed", listener)
