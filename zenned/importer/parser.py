from __future__ import annotations

from datetime import date, timedelta
from typing import Any, Dict, List, Optional, Tuple
import re

from pydantic import BaseModel, ConfigDict

from ..utils import _parse_iso_date, _today
from .prompts import resolve_anchor_date

DAY_NAME_TO_INDEX = {"sun": 0, "mon": 1, "tue": 2, "wed": 3, "thu": 4, "fri": 5, "sat": 6}

DAY_SEGMENT_RE = re.compile(r"^([A-Za-z]{3})(?:\s*\((\d{4}-\d{2}-\d{2})\))?")
SLOT_RE = re.compile(r"(.+?)\s*\((\d{2}:\d{2})-(\d{2}:\d{2})\)")
FALLBACK_SEPARATORS = (" — ", " - ", " : ")


class ScheduleEventRecord(BaseModel):
  model_config = ConfigDict(frozen=True)

  date: str
  title: str
  description: str = ""
  start_time: str
  end_time: str

  def to_event_payload(self) -> Dict[str, Any]:
    return {
        "title": self.title,
        "date": self.date,
        "startTime": self.start_time,
        "endTime": self.end_time,
        "description": self.description,
    }


class ScheduleParseState(BaseModel):
  """Chronological position of the line scan.

  week_start is the Sunday of the anchor's week and never changes.
  week_offset counts 7-day blocks past week_start for lines without an
  explicit date; it grows when a weekday index is <= last_weekday_index.
  """

  week_start: date
  last_weekday_index: int
  week_offset: int = 0
  skipped_lines: int = 0
  skipped_segments: int = 0
  truncated_lines: int = 0

  @classmethod
  def for_anchor(cls, anchor: date) -> "ScheduleParseState":
    weekday = (anchor.weekday() + 1) % 7
    return cls(week_start=anchor - timedelta(days=weekday),
               last_weekday_index=weekday - 1)

  def resolve_date(self, weekday: int, explicit: Optional[date] = None) -> date:
    if explicit is not None:
      self.last_weekday_index = weekday
      computed = ((explicit - self.week_start).days - weekday) // 7
      if computed >= 0:
        self.week_offset = computed
      return explicit
    if weekday <= self.last_weekday_index:
      self.week_offset += 1
    self.last_weekday_index = weekday
    return self.week_start + timedelta(days=weekday + self.week_offset * 7)


def split_title_description(label: str) -> Tuple[str, str]:
  parts = label.split("::")
  if len(parts) > 1:
    return parts[0].strip(), "::".join(parts[1:]).strip()
  for sep in FALLBACK_SEPARATORS:
    idx = label.find(sep)
    if idx != -1:
      return label[:idx].strip(), label[idx + len(sep):].strip()
  return label.strip(), ""


def parse_day_segment(segment: str) -> Optional[Tuple[int, Optional[date]]]:
  match = DAY_SEGMENT_RE.match(segment.strip())
  if not match:
    return None
  weekday = DAY_NAME_TO_INDEX.get(match.group(1).lower())
  if weekday is None:
    return None
  # 형식만 맞고 존재하지 않는 날짜는 명시 날짜가 없는 것으로 본다
  return weekday, _parse_iso_date(match.group(2))


def parse_slot(segment: str) -> Optional[Tuple[str, str, str, str]]:
  match = SLOT_RE.search(segment)
  if not match:
    return None
  title, description = split_title_description(match.group(1))
  if not title:
    return None
  return title, description, match.group(2), match.group(3)


def parse_line(line: str,
               state: ScheduleParseState,
               max_weeks: Optional[int] = None) -> List[ScheduleEventRecord]:
  parts = line.split("/")
  if len(parts) < 2:
    state.skipped_lines += 1
    return []
  day = parse_day_segment(parts[0])
  if day is None:
    state.skipped_lines += 1
    return []

  weekday, explicit = day
  line_date = state.resolve_date(weekday, explicit)
  if max_weeks and (line_date - state.week_start).days >= max_weeks * 7:
    state.truncated_lines += 1
    return []

  date_str = line_date.isoformat()
  records: List[ScheduleEventRecord] = []
  for raw_segment in parts[1:]:
    segment = raw_segment.strip()
    if not segment:
      continue
    slot = parse_slot(segment)
    if slot is None:
      state.skipped_segments += 1
      continue
    title, description, start_time, end_time = slot
    records.append(ScheduleEventRecord(date=date_str,
                                       title=title,
                                       description=description,
                                       start_time=start_time,
                                       end_time=end_time))
  return records


def parse_schedule(text: str,
                   anchor_date: Any,
                   max_weeks: Optional[int] = None,
                   state: Optional[ScheduleParseState] = None) -> List[ScheduleEventRecord]:
  """Turns schedule lines into dated event records.

  Malformed lines and slots are dropped, never raised. Pass a state to
  inspect the tracking fields and the skip counters after the scan.
  """
  if state is None:
    anchor = anchor_date if isinstance(anchor_date, date) else resolve_anchor_date(anchor_date, _today())
    state = ScheduleParseState.for_anchor(anchor)
  records: List[ScheduleEventRecord] = []
  for raw_line in (text or "").splitlines():
    line = raw_line.strip()
    if not line:
      continue
    records.extend(parse_line(line, state, max_weeks=max_weeks))
  return records
