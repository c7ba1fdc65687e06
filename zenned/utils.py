from __future__ import annotations

from datetime import datetime, date
from typing import Any, Optional

from fastapi import HTTPException

from .config import LLM_DEBUG, ISO_DATE_RE, HHMM_RE


def _log_debug(message: str) -> None:
    if LLM_DEBUG:
        print(message, flush=True)


def _now_iso_minute() -> str:
    return datetime.now().strftime("%Y-%m-%dT%H:%M")


def _today() -> date:
    return datetime.now().date()


def _clean_optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        return None
    trimmed = value.strip()
    return trimmed or None


def _parse_iso_date(value: Any) -> Optional[date]:
    """Strict YYYY-MM-DD parse. Returns None for anything else."""
    if not isinstance(value, str):
        return None
    raw = value.strip()
    if not ISO_DATE_RE.match(raw):
        return None
    try:
        return datetime.strptime(raw, "%Y-%m-%d").date()
    except ValueError:
        return None


def _normalize_time_value(value: Any) -> Optional[str]:
    """Accepts HH:MM or HH:MM:SS and returns HH:MM."""
    if not isinstance(value, str):
        return None
    raw = value.strip()
    if len(raw) == 8 and raw[5] == ":":
        raw = raw[:5]
    if not HHMM_RE.match(raw):
        return None
    return raw



def _require_user_id(user_id: Optional[int]) -> int:
    if not user_id or user_id <= 0:
        raise HTTPException(status_code=400, detail="userId required")
    return user_id
