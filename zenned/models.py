from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional


class Event(BaseModel):
    id: int
    user_id: int
    title: str
    date: Optional[str] = None  # "YYYY-MM-DD", note 이면 None
    start_time: Optional[str] = None  # "HH:MM"
    end_time: Optional[str] = None
    completed: bool = False
    description: Optional[str] = None
    created_at: Optional[str] = None


class EventCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: Optional[int] = Field(default=None, alias="userId")
    title: Optional[str] = None
    date: Optional[str] = None
    start_time: Optional[str] = Field(default=None, alias="startTime")
    end_time: Optional[str] = Field(default=None, alias="endTime")
    completed: Optional[bool] = None
    description: Optional[str] = None
    note_only: bool = Field(default=False, alias="noteOnly")


class EventUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: Optional[int] = Field(default=None, alias="userId")
    id: Optional[int] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    completed: Optional[bool] = None


class EventDelete(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: Optional[int] = Field(default=None, alias="userId")
    id: Optional[int] = None


class ScheduleRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    prompt: Optional[str] = None
    anchor_date: Optional[str] = Field(default=None, alias="anchorDate")


class ScheduleImportRequest(ScheduleRequest):
    user_id: Optional[int] = Field(default=None, alias="userId")


class ScheduleImportResult(BaseModel):
    anchor_date: str
    imported: int
    failed: int
    dropped_slots: int
    skipped_lines: int = 0
    truncated_lines: int = 0
    events: List[Event]
