from __future__ import annotations

import json
from typing import Any, Dict, List

from ..utils import _log_debug

# 우선 수집하는 텍스트 키 (순서 유지)
TEXT_KEYS = ("text", "content", "output_text")
# 모델 응답 본문이 들어 있는 최상위 키
REPLY_CONTAINER_KEYS = ("choices", "outputs", "output")
# 응답 본문 안에서 텍스트를 감싸는 키
REPLY_WRAPPER_KEYS = ("message", "delta")


class _TextCollector:
  """Depth-first visitor over decoded JSON values.

  Providers nest the reply differently (choices[].message.content,
  choices[].text, outputs[].content, ...), so every string leaf is collected.
  Known text keys of an object are visited before the remaining keys.
  """

  def __init__(self) -> None:
    self.chunks: List[str] = []
    self._seen: set = set()

  def _add(self, value: str) -> None:
    text = value.strip()
    if not text or text in self._seen:
      return
    self._seen.add(text)
    self.chunks.append(text)

  def visit(self, value: Any) -> None:
    if value is None:
      return
    # bool 은 int 의 하위 타입이므로 먼저 검사
    if isinstance(value, bool):
      self.visit_bool(value)
    elif isinstance(value, (int, float)):
      self.visit_number(value)
    elif isinstance(value, str):
      self._add(value)
    elif isinstance(value, list):
      self.visit_array(value)
    elif isinstance(value, dict):
      self.visit_object(value)

  def visit_bool(self, value: bool) -> None:
    self._add("true" if value else "false")

  def visit_number(self, value: Any) -> None:
    self._add(str(value))

  def visit_array(self, value: List[Any]) -> None:
    for item in value:
      self.visit(item)

  def visit_object(self, value: Dict[str, Any]) -> None:
    consumed = set()
    for key in TEXT_KEYS:
      if key in value:
        consumed.add(key)
        self.visit(value[key])
    for key, item in value.items():
      if key in consumed:
        continue
      self.visit(item)


def extract_text(raw: Any) -> str:
  """Joins every distinct string leaf of a provider response, first seen first.

  Never raises: an empty string means no schedule text could be recovered.
  """
  try:
    collector = _TextCollector()
    collector.visit(raw)
    return "\n".join(collector.chunks).strip()
  except Exception as exc:
    _log_debug(f"[AI SCHEDULE] extract failed: {exc}")
    return ""


class _ReplyCollector(_TextCollector):
  """Only follows text keys and message wrappers, skipping role/finish_reason/index."""

  def visit_object(self, value: Dict[str, Any]) -> None:
    for key in TEXT_KEYS + REPLY_WRAPPER_KEYS:
      if key in value:
        self.visit(value[key])


def extract_reply_text(raw: Any) -> str:
  """Model reply text only, when the body carries a choices/outputs container.

  Response metadata (id, model, usage, ...) is left out so an empty reply
  stays empty. Bodies without such a container go through extract_text.
  """
  if not isinstance(raw, dict):
    return extract_text(raw)
  containers = [raw[key] for key in REPLY_CONTAINER_KEYS if key in raw]
  if not containers:
    return extract_text(raw)
  try:
    collector = _ReplyCollector()
    collector.visit(containers)
    return "\n".join(collector.chunks).strip()
  except Exception as exc:
    _log_debug(f"[AI SCHEDULE] reply extract failed: {exc}")
    return ""


def decode_provider_body(body: Any) -> Any:
  if not isinstance(body, (str, bytes)):
    return body
  if isinstance(body, bytes):
    body = body.decode("utf-8", errors="replace")
  try:
    return json.loads(body)
  except (ValueError, RecursionError):
    return body
