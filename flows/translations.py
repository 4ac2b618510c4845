"""
User-facing strings. Only English ships; other languages fall back to it.
"""

from typing import Any, Dict

SUPPORTED_LANGUAGES = ["English", "isiZulu", "Afrikaans"]

TRANSLATIONS: Dict[str, Dict[str, str]] = {
    "English": {
        "menu_back": "Menu",
        "menu_settings": "⚙️ Settings",
        "what_to_do": "What would you like to do today?",
        "hey_name": "Hey {name}! What would you like to do?",
        "welcome_back": "Welcome back, {name}! 👋",
        "checkin_start": "Let's do your daily check-in! This helps us track your wellness journey.",
        "checkin_sleep": "How did you sleep last night?",
        "checkin_stress": "How are your stress levels today?",
        "checkin_active": "Have you been active today?",
        "checkin_mood": "How are you feeling right now?",
        "checkin_complete": "🎉 Check-in complete!",
        "checkin_streak": "🔥 {days}-day streak! Keep it up!",
        "language_updated": "✅ Done. Language updated.",
        "language_prompt": "Choose your language:\nKhetha ulimi lwakho:\nKies jou taal:",
        "onboard_link_account": "Let's link you to your Strove account.\n\nPlease enter your email or member ID.",
        "onboard_code_sent": (
            "Thanks — we're securing your account.\n\n"
            "We've sent a 6-digit code to your email.\nPlease enter it here."
        ),
        "onboard_verified": "✅ Verified.\n\nWhat's your first name?",
        "onboard_surname": "Thanks, {name}. What's your surname?",
        "onboard_account_created": "✅ Account created!\n\nLet's get started, {name}.",
        "onboard_first_action": (
            "Do your first check-in or connect a fitness app to pull your steps "
            "and workouts automatically."
        ),
        "onboard_first_checkin": "✅ Do first check-in",
        "onboard_connect_app": "🔗 Connect fitness app",
        "onboard_skip": "Skip for now",
        "onboard_code_resent": "Done — we've sent a new code. Please enter it here.",
        "onboard_code_error": (
            "Hmm, that code didn't match. Double-check your email and try again, "
            "or type RESEND."
        ),
        "not_understood": (
            "Sorry — I didn't understand that.\n\n"
            "Type MENU to see options, or type HELP for support."
        ),
        "unsubscribed": "You've been unsubscribed.\n\nTo restart anytime, type START.",
        "error_generic": "Something went wrong. Please try again.",
    },
}


def t(state: Dict[str, Any], key: str, **params: Any) -> str:
    """Look up `key` in the user's language, falling back to English, then to the key."""
    lang = (state.get("user") or {}).get("language") or "English"
    strings = TRANSLATIONS.get(lang, TRANSLATIONS["English"])
    text = strings.get(key) or TRANSLATIONS["English"].get(key) or key
    for name, value in params.items():
        text = text.replace("{" + name + "}", str(value))
    return text
