from typing import Any, Optional

from state_io import Flow

from .formatting import bold, text_progress_bar
from .session import FlowSession, button, menu_button

MINUTES_PER_ACTIVE_DAY = 20


def challenge_title(session: FlowSession) -> str:
    return f"Move More {session.clock().strftime('%B')}"


def challenge_status(percentage: int) -> str:
    if percentage < 30:
        return "📉 A little behind"
    if percentage > 70:
        return "🔥 Great pace!"
    return "📈 On track"


def show_challenges(session: FlowSession) -> None:
    session.goto(Flow.CHALLENGES, 0)
    state = session.state

    if state.get("challenge_joined"):
        show_challenge_progress(session)
        return

    heading = bold("This Month's Challenge")
    session.say(
        f"🏆 {heading}\n\n"
        f"{bold(challenge_title(session))}\n"
        f"Move {state['challenge_target']} minutes this month.\n\n"
        "Want to join?"
    )
    session.set_buttons(
        [
            button("✅ Join", "join_challenge", type="primary"),
            button("📊 Progress", "challenge_progress"),
            menu_button(session),
        ]
    )


def join_challenge(session: FlowSession) -> None:
    state = session.state
    state["challenge_joined"] = True
    # Minutes already logged this month count towards the challenge.
    state["challenge_progress"] = state["weekly_activity"]["active_minutes"]

    if session.user.get("connected_apps") or state.get("check_in_today"):
        session.say(
            "✅ You're in!\n\n"
            "We've included your past activity from this month.\n\n"
            "Track progress any time by tapping My progress."
        )
        session.set_buttons(
            [
                button("My progress", "challenge_progress", type="primary"),
                button("Log activity", "menu_log"),
                menu_button(session),
            ]
        )
    else:
        session.say(
            "✅ You're in!\n\n"
            "To track progress automatically, connect a fitness app.\n"
            "Or log activity manually when you exercise."
        )
        session.set_buttons(
            [
                button("🔗 Connect", "goto_connect", type="primary"),
                button("Log activity", "menu_log"),
                button("My progress", "challenge_progress"),
                menu_button(session),
            ]
        )


def show_challenge_progress(session: FlowSession) -> None:
    state = session.state
    progress = state.get("challenge_progress", 0)
    target = state.get("challenge_target") or 150
    percentage = min(100, round(progress / target * 100))

    session.say(
        f"🏃 {bold('Your Challenge Progress')}\n\n"
        f"{text_progress_bar(progress, target)}\n"
        f"{progress} of {target} active minutes\n\n"
        f"Days active: {progress // MINUTES_PER_ACTIVE_DAY}\n\n"
        f"{challenge_status(percentage)}"
    )
    session.set_buttons(
        [
            button("🏃 Log activity", "menu_log", type="primary"),
            button("📊 Health summary", "menu_summary"),
            menu_button(session),
        ]
    )


def handle_button(session: FlowSession, action: Optional[str], value: Any) -> None:
    if action == "join_challenge":
        join_challenge(session)
    elif action == "challenge_progress":
        show_challenge_progress(session)
