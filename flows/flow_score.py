from typing import Any, Dict, Optional

from state_io import Flow

from . import flow_profile, flow_summary
from .formatting import bold, italic, text_progress_bar
from .session import FlowSession, button, menu_button

BASE_SCORE = 65


def compute_score(state: Dict[str, Any]) -> int:
    streak_bonus = min(state.get("streak", 0) * 2, 20)
    activity_bonus = 10 if state.get("check_in_today") else 0
    return BASE_SCORE + streak_bonus + activity_bonus


def weekly_change(state: Dict[str, Any]) -> int:
    return 5 if state.get("streak", 0) > 3 else -2


def show_my_score(session: FlowSession) -> None:
    session.goto(Flow.MY_SCORE, 0)
    state = session.state

    if flow_summary.needs_profile(session):
        session.say("To calculate your Strove Score, we need a few more details.")
        session.pause(500)
        flow_profile.start_extended_profile(session, Flow.MY_SCORE)
        return

    if not flow_summary.has_activity_data(state):
        session.say(
            f"⭐ {bold('Your Strove Score')}\n\n"
            "We need a bit more data to calculate your score reliably.\n\n"
            "Connect a fitness app or log activity manually for a few days."
        )
        session.set_buttons(
            [
                button("🔗 Connect app", "goto_connect", type="primary"),
                button("🏃 Log activity", "menu_log"),
                menu_button(session),
            ]
        )
        return

    score = compute_score(state)
    change = weekly_change(state)
    change_line = f"⬆️ +{change}" if change > 0 else f"⬇️ {change}"

    session.say(
        f"⭐ {bold('Your Strove Score')}\n\n"
        f"{bold(str(score))} / 100\n"
        f"{text_progress_bar(score, 100)}\n\n"
        f"{change_line} this week\n\n"
        f"{bold('Top drivers:')}\n"
        "• Check-in consistency\n"
        "• Activity levels\n\n"
        + italic("Next: complete tomorrow's check-in to maintain your streak.")
    )
    session.set_buttons(
        [
            button("📈 Improve score", "improve_score", type="primary"),
            button("📊 Health summary", "menu_summary"),
            menu_button(session),
        ]
    )


def show_improve_score(session: FlowSession) -> None:
    session.say(
        "To improve your score fastest this week, we suggest:\n\n"
        f"{bold('Do your daily check-in tomorrow morning')}\n\n"
        "Consistency is the #1 score driver.\n\n"
        "Want to do something now?"
    )
    session.set_buttons(
        [
            button("Check-in", "menu_checkin", type="primary"),
            button("Log activity", "menu_log"),
            menu_button(session),
        ]
    )


def handle_button(session: FlowSession, action: Optional[str], value: Any) -> None:
    if action == "improve_score":
        show_improve_score(session)
