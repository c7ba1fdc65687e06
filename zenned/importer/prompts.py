from __future__ import annotations

from datetime import date
from typing import Any, Optional

from pydantic import BaseModel

from ..utils import _parse_iso_date

SCHEDULE_SYSTEM_PROMPT_TEMPLATE = """You are a schedule planner that writes plain-text calendar lines. Return ONLY schedule lines. No explanation.
Reference information:
- Current date: {TODAY} ({TODAY_DAY})
- Anchor date: {ANCHOR} ({ANCHOR_DAY})

Line format (one line per day that has tasks):
<DayAbbrev> (<YYYY-MM-DD>)/<Title> :: <description> (<HH:MM>-<HH:MM>)/<Title> :: <description> (<HH:MM>-<HH:MM>)/...

Example:
{ANCHOR_DAY} ({ANCHOR})/Chemistry mock exam review :: focus on thermodynamics (13:00-15:00)/Walk :: short break outside (15:00-15:30)

Rules:
1. DayAbbrev is one of Sun, Mon, Tue, Wed, Thu, Fri, Sat and must match the weekday of the date in parentheses.
2. The first line must be the anchor date {ANCHOR} ({ANCHOR_DAY}).
3. Dates must never decrease from one line to the next. The schedule may span several weeks; keep counting forward.
4. If the request talks about "N days before" or "N weeks before" something, count relative to the anchor date.
5. Times are 24-hour HH:MM and the end time is later than the start time.
6. Every slot needs a real, specific title. Never write placeholders such as "Task", "Event", "TBD" or "...".
7. Separate the title from the description with " :: ". The description is one short sentence.
8. Separate slots with "/" and do not use "/" anywhere else.
9. Do not add headings, bullets, numbering, markdown, quotation marks or commentary.
"""

USER_PROMPT_SUFFIX = (
    "Hard instruction: reply with schedule lines only. Do not use quotation marks, "
    "do not write escaped or duplicated newlines, and follow the line format exactly."
)

DAY_ABBREVIATIONS = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")


class SchedulePrompt(BaseModel):
  system_prompt: str
  user_prompt: str
  current_date: str
  anchor_date: str


def day_abbreviation(value: date) -> str:
  # date.weekday(): 0=Mon, 여기서는 0=Sun
  return DAY_ABBREVIATIONS[(value.weekday() + 1) % 7]


def resolve_anchor_date(anchor_date: Any, current_date: date) -> date:
  """Anchor date if it is a real YYYY-MM-DD date, otherwise current_date."""
  parsed = _parse_iso_date(anchor_date)
  return parsed if parsed is not None else current_date


def build_system_prompt(current_date: date, anchor: date) -> str:
  return (SCHEDULE_SYSTEM_PROMPT_TEMPLATE
          .replace("{TODAY}", current_date.isoformat())
          .replace("{TODAY_DAY}", day_abbreviation(current_date))
          .replace("{ANCHOR}", anchor.isoformat())
          .replace("{ANCHOR_DAY}", day_abbreviation(anchor)))


def build_user_prompt(user_text: str) -> str:
  text = (user_text or "").strip()
  return f"{text}\n\n{USER_PROMPT_SUFFIX}"


def build_prompt(user_text: str,
                 current_date: date,
                 anchor_date: Optional[str] = None) -> SchedulePrompt:
  anchor = resolve_anchor_date(anchor_date, current_date)
  return SchedulePrompt(
      system_prompt=build_system_prompt(current_date, anchor),
      user_prompt=build_user_prompt(user_text),
      current_date=current_date.isoformat(),
      anchor_date=anchor.isoformat(),
  )
