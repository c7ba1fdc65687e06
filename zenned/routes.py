from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, HTTPException, Query

from .config import NOTE_TITLE_FALLBACK_CHARS, MAX_TITLE_CHARS
from .models import (
    EventCreate,
    EventUpdate,
    EventDelete,
    ScheduleRequest,
    ScheduleImportRequest,
    ScheduleImportResult,
)
from .utils import (
    _clean_optional_str,
    _normalize_time_value,
    _parse_iso_date,
    _require_user_id,
)
from .nlp import preview_schedule_core, import_schedule_core
from . import state

router = APIRouter()
logger = logging.getLogger(__name__)


def _coerce_time(value: Any, label: str) -> Optional[str]:
  if value is None:
    return None
  if isinstance(value, str) and not value.strip():
    return None
  normalized = _normalize_time_value(value)
  if not normalized:
    raise HTTPException(status_code=400, detail=f"Invalid {label} (expected HH:MM)")
  return normalized


@router.get("/health")
def health():
  return {"ok": True}


# -------------------------
# Events API
# -------------------------
@router.get("/api/events")
def list_events(user_id: Optional[int] = Query(None, alias="userId")):
  uid = _require_user_id(user_id)
  return state.list_events(uid)


@router.post("/api/events")
def create_event(event_in: EventCreate):
  uid = _require_user_id(event_in.user_id)
  title = _clean_optional_str(event_in.title) or ""
  description = _clean_optional_str(event_in.description) or ""
  resolved_title = title or description[:NOTE_TITLE_FALLBACK_CHARS]
  if not resolved_title:
    raise HTTPException(status_code=400, detail="title or description required")

  event_date: Optional[str] = None
  start_time: Optional[str] = None
  end_time: Optional[str] = None
  if not event_in.note_only:
    if not event_in.date:
      raise HTTPException(status_code=400, detail="date required for events")
    parsed = _parse_iso_date(event_in.date)
    if parsed is None:
      raise HTTPException(status_code=400, detail="Invalid date (expected YYYY-MM-DD)")
    event_date = parsed.isoformat()
    start_time = _coerce_time(event_in.start_time, "startTime")
    end_time = _coerce_time(event_in.end_time, "endTime")

  stored = state.store_event(user_id=uid,
                             title=resolved_title[:MAX_TITLE_CHARS],
                             date=event_date,
                             start_time=start_time,
                             end_time=end_time,
                             completed=bool(event_in.completed),
                             description=description or None)
  return {"insertedId": stored.id}


@router.patch("/api/events")
def update_event(payload: EventUpdate):
  if not payload.user_id or not payload.id:
    raise HTTPException(status_code=400, detail="userId and id required")

  changes: Dict[str, Any] = {}
  fields_set = payload.model_fields_set
  if "start_time" in fields_set:
    changes["start_time"] = _coerce_time(payload.start_time, "start_time")
  if "end_time" in fields_set:
    changes["end_time"] = _coerce_time(payload.end_time, "end_time")
  if "completed" in fields_set:
    changes["completed"] = bool(payload.completed)
  if not changes:
    raise HTTPException(status_code=400, detail="No fields to update")

  updated = state.update_event(payload.user_id, payload.id, changes)
  if updated is None:
    raise HTTPException(status_code=404, detail="Event not found")
  return {"success": True}


@router.delete("/api/events")
def delete_event(payload: EventDelete):
  if not payload.user_id or not payload.id:
    raise HTTPException(status_code=400, detail="userId and id required")
  if not state.delete_event(payload.user_id, payload.id):
    raise HTTPException(status_code=404, detail="Event not found or already deleted")
  return {"success": True}


# -------------------------
# AI schedule API
# -------------------------
@router.post("/api/ai-schedule")
async def ai_schedule(body: ScheduleRequest):
  try:
    return await preview_schedule_core(body.prompt, body.anchor_date)
  except HTTPException as exc:
    if exc.status_code >= 500:
      logger.warning("ai-schedule failed: %s %s", exc.status_code, exc.detail)
    raise
  except Exception as exc:
    logger.exception("ai-schedule error")
    raise HTTPException(status_code=500, detail=str(exc) or "AI error") from exc


@router.post("/api/ai-schedule/import", response_model=ScheduleImportResult)
async def ai_schedule_import(body: ScheduleImportRequest):
  try:
    result = await import_schedule_core(body.user_id, body.prompt, body.anchor_date)
  except HTTPException as exc:
    if exc.status_code >= 500:
      logger.warning("ai-schedule import failed: %s %s", exc.status_code, exc.detail)
    raise
  except Exception as exc:
    logger.exception("ai-schedule import error")
    raise HTTPException(status_code=500, detail=str(exc) or "AI error") from exc
  if result.failed:
    logger.warning("ai-schedule import partial: imported=%d failed=%d",
                   result.imported, result.failed)
  return result
