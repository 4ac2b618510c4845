"""
WhatsApp-compatible text helpers used by every flow.
"""

WHATSAPP_LIMITS = {
    "MAX_BUTTONS": 3,
    "MAX_LIST_ITEMS": 10,
    "MAX_BUTTON_TEXT": 20,
    "MAX_LIST_TITLE": 24,
    "MAX_LIST_DESC": 72,
    "MAX_MESSAGE_LENGTH": 1600,
    "MAX_CAROUSEL_CARDS": 10,
    "MAX_CAROUSEL_BODY": 160,
}

# Features that need a browser (camera, OAuth, checkout) live in the web app.
WEB_APP_URLS = {
    "FACE_SCAN": "https://app.strove.ai/face-scan",
    "CONNECT_APP": "https://app.strove.ai/connect",
    "DASHBOARD": "https://app.strove.ai/dashboard",
    "REWARDS": "https://app.strove.ai/rewards",
}


def bold(text: str) -> str:
    return f"*{text}*"


def italic(text: str) -> str:
    return f"_{text}_"


def strike(text: str) -> str:
    return f"~{text}~"


def mono(text: str) -> str:
    return f"```{text}```"


def link(label: str, url: str) -> str:
    return f"{label}: {url}"


def text_progress_bar(current: float, total: float, length: int = 10) -> str:
    """Render progress as block characters, e.g. '███░░░░░░░ 30%'."""
    if total <= 0:
        percentage = 100
    else:
        percentage = min(100, round(current / total * 100))
    percentage = max(0, percentage)
    filled = round(percentage / 100 * length)
    return "█" * filled + "░" * (length - filled) + f" {percentage}%"


def truncate_for_button(text: str, max_len: int = WHATSAPP_LIMITS["MAX_BUTTON_TEXT"]) -> str:
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


def truncate_for_list_title(text: str) -> str:
    return truncate_for_button(text, WHATSAPP_LIMITS["MAX_LIST_TITLE"])


def truncate_for_list_desc(text: str) -> str:
    return truncate_for_button(text, WHATSAPP_LIMITS["MAX_LIST_DESC"])


def truncate_message(text: str) -> str:
    return truncate_for_button(text, WHATSAPP_LIMITS["MAX_MESSAGE_LENGTH"])


def format_thousands(n) -> str:
    return f"{n:,}"
