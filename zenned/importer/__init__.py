"""
AI schedule import: prompt building, response text extraction, line parsing
"""

from .prompts import SchedulePrompt, build_prompt, resolve_anchor_date
from .extractor import extract_text, extract_reply_text, decode_provider_body
from .parser import ScheduleEventRecord, ScheduleParseState, parse_schedule

__all__ = [
    "SchedulePrompt",
    "build_prompt",
    "resolve_anchor_date",
    "extract_text",
    "extract_reply_text",
    "decode_provider_body",
    "ScheduleEventRecord",
    "ScheduleParseState",
    "parse_schedule",
]
