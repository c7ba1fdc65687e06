from __future__ import annotations

from threading import Lock
from typing import Any, Dict, List, Optional
import json

from .config import EVENTS_DATA_FILE
from .models import Event
from .utils import _log_debug, _now_iso_minute

# 메모리 저장
# NOTE: 상태 변경은 이 모듈 내 함수에서 처리한다.
events_by_user: Dict[int, List[Event]] = {}
next_id: int = 1
_store_lock = Lock()


def _serialize_events_payload() -> Dict[str, Any]:
    return {
        "version": 1,
        "users": {
            str(user_id): [e.model_dump() for e in items]
            for user_id, items in events_by_user.items()
        },
    }


def _save_events_to_disk() -> None:
    try:
        payload = _serialize_events_payload()
        EVENTS_DATA_FILE.write_text(json.dumps(payload, ensure_ascii=False, indent=2),
                                    encoding="utf-8")
    except Exception as exc:
        _log_debug(f"[EVENT STORE] save failed: {exc}")


def _load_events_from_disk() -> None:
    global next_id
    events_by_user.clear()
    next_id = 1
    if not EVENTS_DATA_FILE.exists():
        return
    try:
        data = json.loads(EVENTS_DATA_FILE.read_text(encoding="utf-8"))
    except Exception as exc:
        _log_debug(f"[EVENT STORE] load failed: {exc}")
        return

    users = data.get("users") if isinstance(data, dict) else None
    if not isinstance(users, dict):
        return

    max_id = 0
    for raw_user_id, items in users.items():
        try:
            user_id = int(raw_user_id)
        except (TypeError, ValueError):
            continue
        if not isinstance(items, list):
            continue
        loaded: List[Event] = []
        for item in items:
            if not isinstance(item, dict):
                continue
            item.setdefault("user_id", user_id)
            if not item.get("created_at"):
                item["created_at"] = _now_iso_minute()
            try:
                ev = Event(**item)
            except Exception:
                continue
            loaded.append(ev)
            if ev.id > max_id:
                max_id = ev.id
        events_by_user[user_id] = loaded
    next_id = max_id + 1 if max_id else 1


def _sort_key(ev: Event):
    # NULL 날짜(노트)와 NULL 시간이 먼저 온다
    return (ev.date or "", ev.start_time or "", ev.id)


def list_events(user_id: int) -> List[Event]:
    with _store_lock:
        return sorted(events_by_user.get(user_id, []), key=_sort_key)


def store_event(
        user_id: int,
        title: str,
        date: Optional[str],
        start_time: Optional[str] = None,
        end_time: Optional[str] = None,
        completed: bool = False,
        description: Optional[str] = None,
        created_at: Optional[str] = None,
) -> Event:
    global next_id
    with _store_lock:
        new_event = Event(
            id=next_id,
            user_id=user_id,
            title=title,
            date=date,
            start_time=start_time,
            end_time=end_time,
            completed=bool(completed),
            description=description,
            created_at=created_at or _now_iso_minute(),
        )
        next_id += 1
        events_by_user.setdefault(user_id, []).append(new_event)
        _save_events_to_disk()
    return new_event


def update_event(user_id: int, event_id: int, changes: Dict[str, Any]) -> Optional[Event]:
    """Applies start_time / end_time / completed changes. None if not found."""
    allowed = {k: v for k, v in changes.items()
               if k in ("start_time", "end_time", "completed")}
    with _store_lock:
        items = events_by_user.get(user_id, [])
        for idx, ev in enumerate(items):
            if ev.id != event_id:
                continue
            if "completed" in allowed:
                allowed["completed"] = bool(allowed["completed"])
            updated = ev.model_copy(update=allowed)
            items[idx] = updated
            _save_events_to_disk()
            return updated
    return None


def delete_event(user_id: int, event_id: int) -> bool:
    with _store_lock:
        items = events_by_user.get(user_id, [])
        remaining = [ev for ev in items if ev.id != event_id]
        if len(remaining) == len(items):
            return False
        events_by_user[user_id] = remaining
        _save_events_to_disk()
        return True


def reset_events() -> None:
    global next_id
    with _store_lock:
        events_by_user.clear()
        next_id = 1
