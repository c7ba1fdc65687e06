from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

from fastapi import HTTPException

from .config import (
    AI_SCHEDULE_MAX_WEEKS,
    MAX_TITLE_CHARS,
    MAX_DESCRIPTION_CHARS,
)
from .models import Event, ScheduleImportResult
from .importer import (
    SchedulePrompt,
    ScheduleEventRecord,
    ScheduleParseState,
    build_prompt,
    parse_schedule,
)
from .utils import _log_debug, _parse_iso_date, _require_user_id, _today
from .state import store_event
from . import llm

logger = logging.getLogger(__name__)


def _max_weeks() -> Optional[int]:
  return AI_SCHEDULE_MAX_WEEKS if AI_SCHEDULE_MAX_WEEKS > 0 else None


def _require_prompt_text(text: Optional[str]) -> str:
  t = (text or "").strip()
  if not t:
    raise HTTPException(status_code=400, detail="prompt required")
  return t


def _imported_description(record: ScheduleEventRecord) -> str:
  description = record.description.strip()
  if not description:
    time_label = ""
    if record.start_time and record.end_time:
      time_label = f" ({record.start_time}-{record.end_time})"
    description = f"AI scheduled: {record.title}{time_label}."
  return description[:MAX_DESCRIPTION_CHARS]


async def _run_schedule_pipeline(
    text: Optional[str],
    anchor_date: Optional[str]) -> Tuple[SchedulePrompt, str, List[ScheduleEventRecord], ScheduleParseState]:
  prompt = build_prompt(_require_prompt_text(text), _today(), anchor_date)
  ai_text = await llm.fetch_schedule_text(prompt)

  parse_state = ScheduleParseState.for_anchor(_parse_iso_date(prompt.anchor_date))
  records = parse_schedule(ai_text,
                           prompt.anchor_date,
                           max_weeks=_max_weeks(),
                           state=parse_state)
  _log_debug(f"[AI SCHEDULE] anchor={prompt.anchor_date} records={len(records)} "
             f"skipped_lines={parse_state.skipped_lines} "
             f"skipped_segments={parse_state.skipped_segments} "
             f"truncated_lines={parse_state.truncated_lines}")
  if parse_state.skipped_segments:
    logger.warning("AI schedule dropped %d unparseable slots",
                   parse_state.skipped_segments)
  return prompt, ai_text, records, parse_state


# -------------------------
# AI 일정 미리보기
# -------------------------
async def preview_schedule_core(text: Optional[str],
                                anchor_date: Optional[str] = None) -> Dict[str, Any]:
  prompt, ai_text, records, parse_state = await _run_schedule_pipeline(text, anchor_date)
  return {
      "text": ai_text,
      "anchorDate": prompt.anchor_date,
      "events": [record.model_dump() for record in records],
      "dropped_slots": parse_state.skipped_segments,
      "skipped_lines": parse_state.skipped_lines,
      "truncated_lines": parse_state.truncated_lines,
  }


# -------------------------
# AI 일정 가져오기 (저장까지)
# -------------------------
def persist_schedule_records(user_id: int,
                             records: List[ScheduleEventRecord]) -> Tuple[List[Event], int]:
  """Stores records one at a time. A failed insert does not undo earlier ones."""
  created: List[Event] = []
  failed = 0
  for record in records:
    try:
      created.append(
          store_event(user_id=user_id,
                      title=record.title[:MAX_TITLE_CHARS],
                      date=record.date,
                      start_time=record.start_time,
                      end_time=record.end_time,
                      description=_imported_description(record)))
    except Exception:
      failed += 1
      logger.exception("AI schedule insert failed (user=%s, date=%s, title=%s)",
                       user_id, record.date, record.title)
  return created, failed


async def import_schedule_core(user_id: Optional[int],
                               text: Optional[str],
                               anchor_date: Optional[str] = None) -> ScheduleImportResult:
  uid = _require_user_id(user_id)
  prompt, _, records, parse_state = await _run_schedule_pipeline(text, anchor_date)
  created, failed = persist_schedule_records(uid, records)
  return ScheduleImportResult(
      anchor_date=prompt.anchor_date,
      imported=len(created),
      failed=failed,
      dropped_slots=parse_state.skipped_segments,
      skipped_lines=parse_state.skipped_lines,
      truncated_lines=parse_state.truncated_lines,
      events=created,
  )
