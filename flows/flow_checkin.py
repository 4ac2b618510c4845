from typing import Any, Optional

from state_io import Flow
from storage import today_str, yesterday_str

from . import flow_coins, flow_menu
from .formatting import bold
from .session import FlowSession, button, menu_button, parse_int
from .translations import t

SKIP_HINT = '\n_(Type "skip" to skip)_'
HISTORY_LIMIT = 14

SLEEP_LABELS = {1: "😫 Poor", 3: "😐 OK", 5: "😴 Great"}
STRESS_LABELS = {1: "😌 Low", 3: "😐 Moderate", 5: "😰 High"}
MOOD_LABELS = {1: "😔 Low", 3: "😐 Okay", 5: "😊 Great"}


def _scale_input(action: Optional[str], expected_action: str, value: Any):
    """
    Return (ok, score) for a 1-5 answer. Buttons send the score; typed input
    may be a number or "skip" (score None).
    """
    if action == expected_action:
        return True, parse_int(value)
    if action is not None:
        return False, None
    text = str(value).strip().lower()
    if text == "skip":
        return True, None
    score = parse_int(text)
    if score is not None and 1 <= score <= 5:
        return True, score
    return False, None


def _label(labels, score, prefix: str) -> str:
    if score is None:
        return "Skipped"
    return labels.get(score) or f"{prefix}: {score}"


def start_check_in(session: FlowSession) -> None:
    session.goto(Flow.CHECK_IN, 0)
    state = session.state
    today = session.today()

    if state.get("last_check_in") == today_str(today):
        session.say("You've already checked in today ✅\n\nWould you like to update it?")
        session.set_buttons(
            [
                button("Update check-in", "update_checkin", type="primary"),
                button("Done", "checkin_done", type="secondary"),
            ]
        )
        return

    last = state.get("last_check_in")
    if last and last != yesterday_str(today) and state.get("streak", 0) > 0:
        session.say("Missed yesterday? No stress, let's get back on track! 💪")
        session.pause(500)

    session.say(t(state, "checkin_start"))
    session.set_step(1)
    show_sleep_question(session)


def show_sleep_question(session: FlowSession) -> None:
    session.say(t(session.state, "checkin_sleep") + SKIP_HINT)
    session.set_buttons([button(label, "sleep", score) for score, label in sorted(SLEEP_LABELS.items())])


def _step_already_done(session: FlowSession, action: Optional[str], value: Any) -> None:
    if action == "update_checkin" or (action is None and str(value).strip().lower() in {"update", "yes"}):
        session.set_step(1)
        show_sleep_question(session)
    else:
        flow_menu.show_main_menu(session)


def _step_sleep(session: FlowSession, action: Optional[str], value: Any) -> None:
    ok, score = _scale_input(action, "sleep", value)
    if not ok:
        session.say("Please choose an option, type a number from 1 to 5, or type skip.")
        return
    if action is not None:
        session.echo(_label(SLEEP_LABELS, score, "Sleep"))
    session.temp["sleep"] = score
    session.set_step(2)
    session.say(t(session.state, "checkin_stress") + SKIP_HINT)
    session.set_buttons([button(label, "stress", score) for score, label in sorted(STRESS_LABELS.items())])


def _step_stress(session: FlowSession, action: Optional[str], value: Any) -> None:
    ok, score = _scale_input(action, "stress", value)
    if not ok:
        session.say("Please choose an option, type a number from 1 to 5, or type skip.")
        return
    if action is not None:
        session.echo(_label(STRESS_LABELS, score, "Stress"))
    session.temp["stress"] = score
    session.set_step(3)
    session.say(t(session.state, "checkin_active"))
    session.set_buttons(
        [
            button("✅ Yes", "active", "yes"),
            button("❌ Not yet", "active", "no"),
        ]
    )


def _step_active(session: FlowSession, action: Optional[str], value: Any) -> None:
    if action is None:
        text = str(value).strip().lower()
        if text in {"yes", "y"}:
            value = "yes"
        elif text in {"no", "n", "not yet"}:
            value = "no"
        else:
            session.say("Please answer yes or no.")
            return
    elif action != "active":
        return
    else:
        session.echo("✅ Yes" if value == "yes" else "❌ Not yet")

    session.temp["active"] = value
    session.set_step(4)
    session.say(t(session.state, "checkin_mood") + SKIP_HINT)
    session.set_buttons(
        [button(label, "mood", score) for score, label in sorted(MOOD_LABELS.items(), reverse=True)]
    )


def _step_mood(session: FlowSession, action: Optional[str], value: Any) -> None:
    ok, score = _scale_input(action, "mood", value)
    if not ok:
        session.say("Please choose an option, type a number from 1 to 5, or type skip.")
        return
    if action is not None:
        session.echo(_label(MOOD_LABELS, score, "Mood"))
    session.temp["mood"] = score
    complete_check_in(session)


def focus_for_answers(answers: dict) -> tuple[str, str]:
    """Pick today's focus action and an empathy note from the answers."""
    sleep = answers.get("sleep")
    stress = answers.get("stress")
    if sleep and sleep < 3:
        return (
            "Try to get to bed 30 minutes earlier tonight.",
            "Rough night? That's okay — today's a fresh start. ",
        )
    if stress and stress > 3:
        return (
            "Take 5 minutes for deep breathing between tasks.",
            "Sounds like a lot on your plate. You're doing great just by checking in. ",
        )
    return "Take a 10-minute walk after lunch — fresh air does wonders.", ""


def update_streak(state: dict, today) -> None:
    if state.get("last_check_in") == yesterday_str(today):
        state["streak"] = state.get("streak", 0) + 1
    elif state.get("last_check_in") != today_str(today):
        state["streak"] = 1
    state["last_check_in"] = today_str(today)
    state["check_in_today"] = True


def complete_check_in(session: FlowSession) -> None:
    state = session.state
    today = session.today()
    update_streak(state, today)

    coins_earned = 10 + (5 if state["streak"] > 7 else 0)
    milestone = flow_coins.award_coins(session, coins_earned)

    answers = dict(session.temp)
    focus_action, empathy_note = focus_for_answers(answers)

    history = state.setdefault("check_in_history", [])
    history.insert(
        0,
        {
            "date": today_str(today),
            "sleep": answers.get("sleep"),
            "stress": answers.get("stress"),
            "active": answers.get("active"),
            "mood": answers.get("mood"),
        },
    )
    del history[HISTORY_LIMIT:]

    milestone_message = f"\n\n🎉 {bold('Milestone:')} {milestone}" if milestone else ""
    focus_title = bold("Today's focus:")
    session.say(
        f"{t(state, 'checkin_complete')}\n\n"
        f"{empathy_note}{focus_title}\n{focus_action}\n\n"
        f"You earned 🪙 {bold(f'{coins_earned} coins')}\n"
        f"{t(state, 'checkin_streak', days=state['streak'])}{milestone_message}"
    )

    state["temp_data"] = {}

    if not session.user.get("connected_apps"):
        session.pause(1000)
        session.say(
            "Want more accurate summaries and challenge tracking?\n\n"
            "Connect a fitness app in 2 minutes."
        )
        session.set_buttons(
            [
                button("🔗 Connect", "goto_connect", type="primary"),
                button("Not now", "goto_menu", type="secondary"),
            ]
        )
    else:
        session.set_buttons(
            [
                button("Health summary", "menu_summary"),
                button("Log activity", "menu_log"),
                menu_button(session),
            ]
        )


STEPS = {
    0: _step_already_done,
    1: _step_sleep,
    2: _step_stress,
    3: _step_active,
    4: _step_mood,
}
