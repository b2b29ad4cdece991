from __future__ import annotations

from fastapi import APIRouter, HTTPException

from backend.application import get_intake_service
from backend.core.schema import REPORT_SLOTS

router = APIRouter(prefix="/sessions", tags=["sessions"])


@router.get("")
async def list_sessions() -> dict:
    service = get_intake_service()
    return {"items": service.list_sessions()}


@router.post("")
async def create_session() -> dict:
    service = get_intake_service()
    session_id = service.create_session()
    return {
        "session_id": session_id,
        "slots": [definition.model_dump(mode="json") for definition in REPORT_SLOTS],
    }


@router.get("/{session_id}")
async def get_session(session_id: str) -> dict:
    service = get_intake_service()
    snapshot = service.get_session(session_id)
    if snapshot is None:
        raise HTTPException(status_code=404, detail="session not found")
    return {"session_id": session_id, **snapshot.model_dump(mode="json")}


@router.delete("/{session_id}")
async def restart_session(session_id: str) -> dict:
    """Start a new intake in place: all slots return to idle and events are cleared."""
    service = get_intake_service()
    if service.get_session(session_id) is None:
        raise HTTPException(status_code=404, detail="session not found")
    snapshot = service.restart_session(session_id)
    return {"session_id": session_id, **snapshot.model_dump(mode="json")}


@router.post("/{session_id}/close")
async def close_session(session_id: str) -> dict:
    """Remove a finished intake and its events from the store."""
    service = get_intake_service()
    if not service.close_session(session_id):
        raise HTTPException(status_code=404, detail="session not found")
    return {"session_id": session_id, "closed": True}


@router.post("/{session_id}/slots/{slot_key}/reset")
async def reset_slot(session_id: str, slot_key: str) -> dict:
    service = get_intake_service()
    if service.get_record(session_id) is None:
        raise HTTPException(status_code=404, detail="session not found")
    if not service.has_slot(session_id, slot_key):
        raise HTTPException(status_code=404, detail="slot not found")
    slot = service.reset_slot(session_id, slot_key)
    return {"slot": slot.model_dump(mode="json") if slot else None}


@router.get("/{session_id}/results")
async def get_results(session_id: str) -> dict:
    service = get_intake_service()
    results = service.get_results(session_id)
    if results is None:
        raise HTTPException(status_code=404, detail="session not found")
    return results


@router.get("/{session_id}/events")
async def list_events(session_id: str) -> dict:
    service = get_intake_service()
    events = service.list_events(session_id)
    if events is None:
        raise HTTPException(status_code=404, detail="session not found")
    return {"session_id": session_id, "items": events}
