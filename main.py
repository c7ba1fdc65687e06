from __future__ import annotations

import logging
import os

from zenned.app import app

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

print("AI API key configured:", bool(os.getenv("NVIDIA_API_KEY") or os.getenv("OPENAI_API_KEY")))
print("LLM_DEBUG:", os.getenv("LLM_DEBUG", "0"))


if __name__ == "__main__":
  import uvicorn

  host = os.getenv("HOST", "0.0.0.0")
  port = int(os.getenv("PORT", "8000"))
  uvicorn.run(app, host=host, port=port)
