# core/config.py
"""Image Check configuration, loaded from environment variables."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent.parent / ".env")

# Anthropic Messages API (AI narrator)
ANTHROPIC_API_KEY = os.environ.get("ANTHROPIC_API_KEY", "")
NARRATOR_MODEL = os.environ.get("NARRATOR_MODEL", "claude-sonnet-4-5-20250929")
NARRATOR_TIMEOUT = int(os.environ.get("NARRATOR_TIMEOUT", "30"))
NARRATOR_MAX_TOKENS = int(os.environ.get("NARRATOR_MAX_TOKENS", "1500"))

# Minimum gap between two narrator calls in one session
NARRATOR_COOLDOWN_SECONDS = float(os.environ.get("NARRATOR_COOLDOWN_SECONDS", "2.0"))

# Funnel targets
SALES_PAGE_URL = os.environ.get("SALES_PAGE_URL", "")

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
