import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load environment variables from a .env file if present.
# We call load_dotenv twice: once with the default search behaviour (which
# respects the current working directory), and once explicitly pointing to a
# .env file that sits next to this config module. This ensures the bot works
# whether it is started from the project root or from another working
# directory.
load_dotenv()
load_dotenv(Path(__file__).resolve().parent / ".env")


def _first_non_empty(*values: Optional[str]) -> str:
    for value in values:
        if value is None:
            continue

        candidate = str(value).strip()
        if candidate:
            return candidate

    return ""


def _parse_float(value: Optional[str], default: float) -> float:
    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return default


BOT_TOKEN = _first_non_empty(os.getenv("BOT_TOKEN"), os.getenv("TELEGRAM_BOT_TOKEN"))

DEBUG = os.getenv("DEBUG", "false").lower() == "true"

# The Veo credential is never read from here: every user supplies their own
# key inside the chat and it only lives in that chat's session.
_DEFAULT_VEO_API_URL = "https://generativelanguage.googleapis.com/v1beta"
VEO_API_URL = (_first_non_empty(os.getenv("VEO_API_URL")) or _DEFAULT_VEO_API_URL).rstrip("/")
VEO_MODEL = _first_non_empty(os.getenv("VEO_MODEL")) or "veo-2.0-generate-001"
VEO_REQUEST_TIMEOUT = max(1.0, _parse_float(os.getenv("VEO_REQUEST_TIMEOUT"), 30.0))
VEO_DOWNLOAD_TIMEOUT = max(1.0, _parse_float(os.getenv("VEO_DOWNLOAD_TIMEOUT"), 300.0))

DEFAULT_LANG = _first_non_empty(os.getenv("DEFAULT_LANG")) or "en"
