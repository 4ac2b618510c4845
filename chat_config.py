"""
Central configuration for the wellness chat assistant.

- UI_TEST_MODE: if True, never call the chat-completion API, always use canned replies.
- OPENAI_BASE_URL / OPENAI_API_KEY / CHAT_MODEL_NAME: OpenAI-style chat endpoint.
- CONTENT_API_URL / CONTENT_API_TOKEN / CONTENT_WHITELABEL_ID: content library CMS.
- DATA_DIR: where per-user state.json files live.
- TYPING_DELAY_SCALE: multiplier for the simulated typing pauses (0 disables them).
"""

import os


def _bool_env(name: str, default: str = "false") -> bool:
    value = os.getenv(name, default).strip().lower()
    return value in {"1", "true", "yes", "y"}


def _float_env(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, str(default)))
    except ValueError:
        return default


# If True, do not call any real LLM and always return canned replies.
UI_TEST_MODE: bool = _bool_env("UI_TEST_MODE", "false")

# OpenAI-compatible chat completion server
OPENAI_BASE_URL: str = os.getenv("OPENAI_BASE_URL", "https://api.openai.com").rstrip("/")
OPENAI_API_KEY: str | None = os.getenv("OPENAI_API_KEY", None)
CHAT_MODEL_NAME: str = os.getenv("CHAT_MODEL_NAME", "gpt-4o-mini")
OPENAI_TIMEOUT: float = _float_env("OPENAI_TIMEOUT", 30.0)

# Content library (Strapi-style CMS)
CONTENT_API_URL: str = os.getenv(
    "CONTENT_API_URL", "https://cms.strove.ai/api/library-contents"
).rstrip("/")
CONTENT_API_TOKEN: str | None = os.getenv("CONTENT_API_TOKEN", None)
CONTENT_WHITELABEL_ID: str = os.getenv(
    "CONTENT_WHITELABEL_ID", "0ba3f986-b35d-47ac-9bd4-0fcdca675461"
)
CONTENT_TIMEOUT: float = _float_env("CONTENT_TIMEOUT", 15.0)

# Local persistence
DATA_DIR: str = os.getenv("DATA_DIR", "user_data")

# Typing indicator pauses are recorded in ms; the UI multiplies them by this.
TYPING_DELAY_SCALE: float = _float_env("TYPING_DELAY_SCALE", 0.0)

FACE_SCAN_TIMEZONE: str = os.getenv("FACE_SCAN_TIMEZONE", "Africa/Johannesburg")

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
