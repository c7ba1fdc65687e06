from __future__ import annotations

import os
from typing import Dict, List, Optional

from fastapi import HTTPException
from openai import APIConnectionError, APIStatusError, AsyncOpenAI

from .config import (
    API_KEY_ENV_NAMES,
    AI_API_BASE,
    AI_SCHEDULE_MODEL,
    AI_SCHEDULE_TEMPERATURE,
    AI_SCHEDULE_TOP_P,
    AI_SCHEDULE_MAX_TOKENS,
    AI_SCHEDULE_TIMEOUT_SECONDS,
)
from .importer import SchedulePrompt, decode_provider_body, extract_reply_text
from .utils import _log_debug

_schedule_client: Optional[AsyncOpenAI] = None
_schedule_api_key_cached: str = ""


def _resolve_api_key() -> str:
  for name in API_KEY_ENV_NAMES:
    value = os.getenv(name, "").strip()
    if value:
      return value
  return ""


def get_schedule_client() -> AsyncOpenAI:
  """OpenAI-compatible client for the completion endpoint.

  The key is read per call so the server can start without one. Retries are
  disabled: a failed call is reported, never repeated.
  """
  global _schedule_client, _schedule_api_key_cached
  api_key = _resolve_api_key()
  if not api_key:
    raise HTTPException(
        status_code=500,
        detail="server missing API key (set NVIDIA_API_KEY or OPENAI_API_KEY)")
  if _schedule_client is None or _schedule_api_key_cached != api_key:
    _schedule_client = AsyncOpenAI(api_key=api_key,
                                   base_url=AI_API_BASE,
                                   timeout=AI_SCHEDULE_TIMEOUT_SECONDS,
                                   max_retries=0)
    _schedule_api_key_cached = api_key
  return _schedule_client


def _compose_schedule_messages(prompt: SchedulePrompt) -> List[Dict[str, str]]:
  return [
      {
          "role": "system",
          "content": prompt.system_prompt,
      },
      {
          "role": "user",
          "content": prompt.user_prompt,
      },
  ]


def _print_raw_output(kind: str, raw_output: str) -> None:
  _log_debug(f"[AI SCHEDULE RAW] kind={kind} model={AI_SCHEDULE_MODEL}")
  _log_debug(raw_output if raw_output else "(empty)")
  _log_debug("[AI SCHEDULE RAW END]")


async def request_schedule_completion(prompt: SchedulePrompt) -> str:
  """Sends the prompt and returns the provider's raw response body."""
  client = get_schedule_client()
  try:
    raw = await client.chat.completions.with_raw_response.create(
        model=AI_SCHEDULE_MODEL,
        messages=_compose_schedule_messages(prompt),
        temperature=AI_SCHEDULE_TEMPERATURE,
        top_p=AI_SCHEDULE_TOP_P,
        max_tokens=AI_SCHEDULE_MAX_TOKENS,
        stream=False,
    )
  except APIStatusError as exc:
    details = ""
    try:
      details = exc.response.text
    except Exception:
      details = str(exc)
    _print_raw_output("error", details)
    raise HTTPException(status_code=502,
                        detail={
                            "error": "AI provider returned error",
                            "status": exc.status_code,
                            "details": details,
                        }) from exc
  except APIConnectionError as exc:
    raise HTTPException(status_code=502,
                        detail=f"AI provider request failed: {exc}") from exc

  body = raw.http_response.text
  _print_raw_output("completion", body)
  return body


async def fetch_schedule_text(prompt: SchedulePrompt) -> str:
  body = await request_schedule_completion(prompt)
  text = extract_reply_text(decode_provider_body(body))
  if not text:
    raise HTTPException(status_code=502, detail="AI returned empty response")
  return text
