from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, File, HTTPException, UploadFile

from backend.application import get_intake_service
from backend.core.config import Settings, get_settings
from backend.core.schema import UploadCandidate

router = APIRouter(prefix="/sessions", tags=["upload"])


def check_selection(filename: str | None, content: bytes, settings: Settings) -> str | None:
    """Apply the file picker rules; returns the selection error message, if any."""

    suffix = Path(filename or "").suffix.lower()
    if suffix not in settings.ALLOWED_SUFFIXES:
        return "Please upload a PDF file."
    if len(content) > settings.max_upload_bytes:
        return f"File is too large. Maximum size is {settings.MAX_UPLOAD_MB}MB."
    if not content:
        return "The selected file is empty."
    return None


@router.post("/{session_id}/slots/{slot_key}/upload")
async def upload_report(session_id: str, slot_key: str, file: UploadFile = File(...)) -> dict:
    """Upload one report into a slot and run it through the intake pipeline."""
    service = get_intake_service()
    if service.get_record(session_id) is None:
        raise HTTPException(status_code=404, detail="session not found")
    if not service.has_slot(session_id, slot_key):
        raise HTTPException(status_code=404, detail="slot not found")

    try:
        content = await file.read()
    finally:
        await file.close()

    safe_name = Path(file.filename or "").name
    error = check_selection(safe_name, content, get_settings())
    candidate = None if error else UploadCandidate(filename=safe_name, content=content, content_type=file.content_type)

    slot = await service.submit_file(session_id, slot_key, candidate, error)
    session = service.get_session(session_id)
    return {
        "slot": slot.model_dump(mode="json"),
        "is_complete": session.is_complete if session else False,
    }
