"""
config.py
---------
Central configuration for Taipei Explorer.
All secrets loaded from environment variables, never hard-coded.
"""

import os
from pathlib import Path

# Load .env from the backend directory (if it exists) so env vars in that file
# are picked up by os.getenv() below.  Won't override vars already set in the shell.
from dotenv import load_dotenv

_env_path = Path(__file__).parent / ".env"
if _env_path.exists():
    load_dotenv(_env_path)


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


# ── Gemini ────────────────────────────────────────────────────────────────────
# API_KEY is accepted as an alias. Absence is not checked here: calls fail at
# the backend and are handled by each client's failure policy.
GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY", "")

SUMMARY_MODEL_NAME: str = os.getenv("SUMMARY_MODEL_NAME", "gemini-3-flash-preview")
CHAT_MODEL_NAME: str    = os.getenv("CHAT_MODEL_NAME",    "gemini-2.5-flash-lite-latest")

SUMMARY_TEMPERATURE: float = float(os.getenv("SUMMARY_TEMPERATURE", "0.7"))
SUMMARY_TOP_P: float       = float(os.getenv("SUMMARY_TOP_P",       "0.9"))

# Transport timeout for Gemini HTTP calls (seconds)
LLM_TIMEOUT_SECONDS: int = int(os.getenv("LLM_TIMEOUT_SECONDS", "60"))

# ── Taipei open-data API ──────────────────────────────────────────────────────
# Docs: https://www.travel.taipei/open-api/swagger/ui/index
ATTRACTIONS_API_BASE: str = os.getenv("ATTRACTIONS_API_BASE", "https://www.travel.taipei/open-api")
ATTRACTIONS_LOCALE: str   = os.getenv("ATTRACTIONS_LOCALE",   "zh-tw")
# Only the first page is fetched; the collection is not paginated further.
ATTRACTIONS_PAGE: int     = int(os.getenv("ATTRACTIONS_PAGE", "1"))
ATTRACTIONS_REQUEST_TIMEOUT: int = int(os.getenv("ATTRACTIONS_REQUEST_TIMEOUT", "30"))

# The upstream URL is URL-encoded and appended to the relay host.
CORS_PROXY_URL: str  = os.getenv("CORS_PROXY_URL", "https://corsproxy.io/?")
USE_CORS_PROXY: bool = _flag("USE_CORS_PROXY", "true")

# Offline mode: return the hard-coded Taipei dataset, no network access.
USE_STUB_ATTRACTIONS: bool = _flag("USE_STUB_ATTRACTIONS", "false")

# ── Categories ────────────────────────────────────────────────────────────────
ALL_CATEGORY: str = "全部"
CATEGORIES: list[str] = [
    ALL_CATEGORY,
    "自然風景",
    "歷史建築",
    "藝文館所",
    "宗教信仰",
    "其他",
]

# ── Display fallbacks ─────────────────────────────────────────────────────────
DEFAULT_COVER_IMAGE: str = (
    "https://images.unsplash.com/photo-1518173946687-a4c8a9ba332f"
    "?auto=format&fit=crop&w=800&q=80"
)
DEFAULT_CATEGORY_LABEL: str = "一般景點"
DEFAULT_INTRODUCTION: str   = "探索台北隱藏的瑰寶..."
SUMMARY_FALLBACK_TEXT: str  = "無法取得 AI 摘要。"

# ── Observability ─────────────────────────────────────────────────────────────
# JSONL session journal: logs/<session_id>.jsonl
EVENT_LOG_ENABLED: bool = _flag("EVENT_LOG_ENABLED", "false")
EVENT_LOG_DIR: str      = os.getenv("EVENT_LOG_DIR", str(Path(__file__).parent / "logs"))
