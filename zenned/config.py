from __future__ import annotations

import os
import pathlib
import re

LLM_DEBUG = os.getenv("LLM_DEBUG", "0") == "1"

ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
HHMM_RE = re.compile(r"^\d{2}:\d{2}$")

# -------------------------
# AI schedule provider
# -------------------------
API_KEY_ENV_NAMES = ("NVIDIA_API_KEY", "OPENAI_API_KEY")
AI_API_BASE = os.getenv("NVIDIA_API_BASE",
                        "https://integrate.api.nvidia.com/v1").rstrip("/")
AI_SCHEDULE_MODEL = os.getenv("AI_SCHEDULE_MODEL",
                              "nvidia/llama-3.1-nemotron-ultra-253b-v1")
AI_SCHEDULE_TEMPERATURE = float(os.getenv("AI_SCHEDULE_TEMPERATURE", "0"))
AI_SCHEDULE_TOP_P = float(os.getenv("AI_SCHEDULE_TOP_P", "0.95"))
AI_SCHEDULE_MAX_TOKENS = int(os.getenv("AI_SCHEDULE_MAX_TOKENS", "800"))
AI_SCHEDULE_TIMEOUT_SECONDS = float(
    os.getenv("AI_SCHEDULE_TIMEOUT_SECONDS", "60"))
# 0 이하이면 무제한
AI_SCHEDULE_MAX_WEEKS = int(os.getenv("AI_SCHEDULE_MAX_WEEKS", "0") or "0")

# -------------------------
# 저장소 / 서버
# -------------------------
BASE_DIR = pathlib.Path(__file__).resolve().parent.parent
EVENTS_DATA_FILE = pathlib.Path(
    os.getenv("EVENTS_DATA_FILE", str(BASE_DIR / "events_data.json")))

CORS_ALLOW_ORIGINS = os.getenv("CORS_ALLOW_ORIGINS", "")
cors_origins: list[str] = []
if CORS_ALLOW_ORIGINS:
    cors_origins.extend(
        [origin.strip() for origin in CORS_ALLOW_ORIGINS.split(",") if origin.strip()])

# -------------------------
# 런타임 제한/기본값
# -------------------------
MAX_TITLE_CHARS = 255
MAX_DESCRIPTION_CHARS = 500
NOTE_TITLE_FALLBACK_CHARS = 60
