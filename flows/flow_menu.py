import re

from state_io import Flow

from .formatting import bold
from .session import FlowSession, button
from .translations import t

MENU_ENTRIES = [
    ("1", "1. ✅ Check-in", "menu_checkin"),
    ("2", "2. 📊 Health Summary", "menu_summary"),
    ("3", "3. 🏆 Challenges", "menu_challenges"),
    ("4", "4. 🏃 Log Activity", "menu_log"),
    ("5", "5. 🍽 Meal Scan", "menu_meal"),
    ("6", "6. 🪙 Coins", "menu_coins"),
    ("7", "7. 📚 Content", "menu_content"),
    ("8", "8. 🤖 AI Chat", "menu_ai"),
    ("9", "9. ⚙️ Settings", "menu_settings"),
    ("0", "0. ❓ Help", "menu_help"),
]

# Free-text keywords, checked in order.
MENU_KEYWORDS = [
    (("check",), "checkin"),
    (("summary", "health"), "summary"),
    (("challenge",), "challenges"),
    (("score",), "score"),
    (("log", "activity"), "log"),
    (("coin", "reward"), "coins"),
    (("face",), "facescan"),
    (("meal", "scan"), "meal"),
    (("content", "library"), "content"),
    (("setting",), "settings"),
    (("insight", "chat"), "ai"),
]
AI_WORD_RE = re.compile(r"\bai\b")


def show_main_menu(session: FlowSession) -> None:
    session.goto(Flow.MAIN_MENU)
    state = session.state
    name = session.user.get("first_name")
    greeting = t(state, "hey_name", name=name) if name else t(state, "what_to_do")

    streak_badge = f"🔥 {state['streak']} day streak" if state.get("streak", 0) > 0 else ""
    coins_badge = f"🪙 {state.get('coins', 0)} coins"
    stats_line = " • ".join(part for part in (streak_badge, coins_badge) if part)

    session.say(
        f"{greeting}\n{stats_line}\n\n{bold('What would you like to do?')}\n"
        "Tap a button below or type the number."
    )
    session.set_buttons(
        [
            button(label, action, type="primary" if key == "1" else None)
            for key, label, action in MENU_ENTRIES
        ]
    )


def match_menu_text(text: str) -> str | None:
    """Map a typed menu choice (digit or keyword) to a menu action name."""
    lower = text.strip().lower()
    for key, _label, action in MENU_ENTRIES:
        if lower == key:
            return action.replace("menu_", "")
    for keywords, name in MENU_KEYWORDS:
        if any(k in lower for k in keywords):
            return name
    if AI_WORD_RE.search(lower):
        return "ai"
    return None


def handle_text(session: FlowSession, text: str) -> None:
    from . import dispatch, flow_ai_chat

    name = match_menu_text(text)
    if name is not None:
        dispatch.handle_menu_action(session, name)
        return
    session.goto(Flow.AI_CHAT)
    flow_ai_chat.process_ai_chat(session, text)
