import re
from typing import Any, Optional

from state_io import Flow

from . import flow_coins
from .formatting import bold, italic
from .session import FlowSession, button, menu_button, parse_int

MAX_DURATION_MIN = 480
MAX_ACTIVITY_COINS = 30

HOURS_RE = re.compile(r"(\d+)\s*h")
MINUTES_RE = re.compile(r"(\d+)\s*m")

DURATION_HINT = "Please enter a valid duration (e.g. 45m, 1h, 1h30m)"


def parse_duration(text: Any) -> Optional[int]:
    """
    "45m" -> 45, "1h" -> 60, "1h30m" -> 90, "20" -> 20.
    Returns None unless the result is between 1 and 480 minutes.
    """
    lower = str(text or "").strip().lower()
    minutes = 0
    hours = HOURS_RE.search(lower)
    mins = MINUTES_RE.search(lower)
    if hours:
        minutes += int(hours.group(1)) * 60
    if mins:
        minutes += int(mins.group(1))
    if minutes == 0 and lower.isdigit():
        minutes = int(lower)
    if 0 < minutes <= MAX_DURATION_MIN:
        return minutes
    return None


def activity_coins(duration: int) -> int:
    return min(duration // 10 * 5, MAX_ACTIVITY_COINS)


def show_log_activity(session: FlowSession) -> None:
    session.goto(Flow.LOG_ACTIVITY, 0)
    session.say("How would you like to log activity?")
    session.set_buttons(
        [
            button("Log manually", "log_manual", type="primary"),
            button("Connect fitness app", "goto_connect"),
            menu_button(session),
        ]
    )


def _step_choice(session: FlowSession, action: Optional[str], value: Any) -> None:
    if action is None and str(value).strip().lower() != "manual":
        show_log_activity(session)
        return
    if action not in (None, "log_manual"):
        return
    session.set_step(1)
    hint = italic('Choose below or type your own (e.g., "Yoga", "Swimming")')
    session.say(f"What type of activity?\n\n{hint}")
    session.set_buttons(
        [
            button("🚶 Walk/Run", "activity_type", "Walk/Run"),
            button("💪 Strength", "activity_type", "Strength"),
            button("🚴 Other", "activity_type", "Other"),
        ]
    )


def _step_type(session: FlowSession, action: Optional[str], value: Any) -> None:
    if action not in (None, "activity_type"):
        return
    activity = str(value or "").strip()
    if not activity:
        return
    if action is not None:
        session.echo(activity)
    session.temp["activity_type"] = activity
    session.set_step(2)
    hint = italic('Or type a custom duration like "45m" or "1h"')
    session.say(f"How long?\n\n{hint}")
    session.set_buttons(
        [
            button("15-30 min", "activity_duration", 25),
            button("30-60 min", "activity_duration", 45),
            button("60+ min", "activity_duration", 75),
        ]
    )


def _step_duration(session: FlowSession, action: Optional[str], value: Any) -> None:
    if action == "activity_custom" or (action is None and str(value).strip().lower() == "custom"):
        session.set_step(3)
        session.say("Type duration (e.g. 45m, 1h, 1h30m)")
        session.clear_buttons()
        return

    if action == "activity_duration":
        duration = parse_int(value)
        if duration is None:
            return
        session.echo(f"{duration} min")
    elif action is None:
        duration = parse_duration(value)
        if duration is None:
            session.say(DURATION_HINT)
            return
    else:
        return

    session.temp["duration"] = duration
    session.set_step(4)
    show_intensity_question(session)


def _step_custom_duration(session: FlowSession, action: Optional[str], value: Any) -> None:
    duration = parse_duration(value)
    if duration is None:
        session.say(DURATION_HINT)
        return
    session.temp["duration"] = duration
    session.set_step(4)
    show_intensity_question(session)


def show_intensity_question(session: FlowSession) -> None:
    hint = italic('Reply "skip" to skip this question')
    session.say(f"How hard did it feel?\n\n{hint}")
    session.set_buttons(
        [
            button("😌 Easy", "activity_intensity", "Easy"),
            button("💪 Moderate", "activity_intensity", "Moderate"),
            button("🔥 Hard", "activity_intensity", "Hard"),
        ]
    )


def _step_intensity(session: FlowSession, action: Optional[str], value: Any) -> None:
    if action not in (None, "activity_intensity"):
        return
    intensity = str(value or "").strip()
    if intensity.lower() == "skip":
        intensity = ""
    if action is not None:
        session.echo(intensity or "Skip")
    session.temp["intensity"] = intensity or None
    complete_activity_log(session)


def complete_activity_log(session: FlowSession) -> None:
    state = session.state
    activity = session.temp.get("activity_type", "Activity")
    duration = session.temp.get("duration", 0)

    coins = activity_coins(duration)
    milestone = flow_coins.award_coins(session, coins)

    if state.get("challenge_joined"):
        state["challenge_progress"] = state.get("challenge_progress", 0) + duration
    state["weekly_activity"]["active_minutes"] += duration

    message = f"✅ Logged: {activity} — {duration} min.\n\nYou earned 🪙 {bold(str(coins))} coins."
    if milestone:
        message += f"\n\n🎉 {bold('Milestone:')} {milestone}"
    session.say(message)

    state["temp_data"] = {}
    session.set_buttons(
        [
            button("Health summary", "menu_summary"),
            button("Challenges", "menu_challenges"),
            menu_button(session),
        ]
    )


STEPS = {
    0: _step_choice,
    1: _step_type,
    2: _step_duration,
    3: _step_custom_duration,
    4: _step_intensity,
}
