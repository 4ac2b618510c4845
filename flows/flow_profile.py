"""
Extended profile: the details needed for scores and summaries, asked lazily
the first time a feature needs them (or from Settings).
"""

from typing import Any, Optional

from state_io import Flow

from . import flow_menu, flow_score, flow_settings, flow_summary
from .session import FlowSession, button, parse_int

GOAL_CHOICES = ["Weight loss", "Improve fitness", "Build strength", "Reduce stress"]
ALL_GOALS = GOAL_CHOICES + ["Better sleep", "More energy", "Improve nutrition"]

HEIGHT_RANGE = (50, 300)
WEIGHT_RANGE = (20, 500)

HEIGHT_PROMPT = "What's your height in cm?\n\nExample: 175 (or type SKIP)"
WEIGHT_PROMPT = "What's your weight in kg?\n\nExample: 82 (or type SKIP)"


def start_extended_profile(session: FlowSession, return_flow: str, goals_only: bool = False) -> None:
    session.goto(Flow.EXTENDED_PROFILE, 0)
    session.state["temp_data"] = {"return_flow": return_flow}

    if goals_only:
        session.set_step(4)
        ask_first_goal(session)
        return

    session.say(
        "To calculate your scores and summaries, we need a few more details.\n\n"
        "What's your gender? (Optional)"
    )
    session.set_buttons(
        [
            button("Female", "set_gender", "Female"),
            button("Male", "set_gender", "Male"),
            button("Prefer not to say", "set_gender", None),
        ]
    )


def _is_skip(value: Any) -> bool:
    return str(value).strip().upper() == "SKIP"


def _step_gender(session: FlowSession, action: Optional[str], value: Any) -> None:
    if action is None:
        text = str(value).strip().capitalize()
        value = text if text in {"Female", "Male"} else None
    elif action != "set_gender":
        return
    if action is not None:
        session.echo(value or "Prefer not to say")
    session.user["gender"] = value
    session.set_step(1)
    session.say(HEIGHT_PROMPT)
    session.clear_buttons()


def _step_height(session: FlowSession, action: Optional[str], value: Any) -> None:
    if not _is_skip(value):
        height = parse_int(value)
        if height is None or not HEIGHT_RANGE[0] <= height <= HEIGHT_RANGE[1]:
            session.say("Please enter a number in cm (example: 175) or type SKIP.")
            return
        session.user["height"] = height
    session.set_step(2)
    session.say(WEIGHT_PROMPT)


def _step_weight(session: FlowSession, action: Optional[str], value: Any) -> None:
    if not _is_skip(value):
        weight = parse_int(value)
        if weight is None or not WEIGHT_RANGE[0] <= weight <= WEIGHT_RANGE[1]:
            session.say("Please enter a number in kg (example: 82) or type SKIP.")
            return
        session.user["weight"] = weight
    session.set_step(3)
    show_pavs_question(session)


def show_pavs_question(session: FlowSession) -> None:
    session.say(
        "Physical activity check ✅\n\n"
        "In a typical week, on how many days do you do moderate or hard physical activity?\n\n"
        "(A brisk walk counts.)"
    )
    session.set_buttons(
        [
            button("0", "set_pavs", "0"),
            button("1-2", "set_pavs", "1"),
            button("3-4", "set_pavs", "3"),
            button("5-7", "set_pavs", "5"),
        ]
    )


def _step_pavs(session: FlowSession, action: Optional[str], value: Any) -> None:
    days = parse_int(value)
    if days is None or not 0 <= days <= 7:
        session.say("Please choose an option or type a number of days from 0 to 7.")
        return
    if action is not None:
        session.echo(value)
    session.user["pavs_days"] = days
    session.set_step(4)
    ask_first_goal(session)


def ask_first_goal(session: FlowSession) -> None:
    session.say("What are your main goals right now?\n\nChoose up to 2. (You can change this later.)")
    session.set_buttons([button(goal, "add_goal", goal) for goal in GOAL_CHOICES])


def _step_first_goal(session: FlowSession, action: Optional[str], value: Any) -> None:
    goal = str(value or "").strip()
    if not goal:
        return
    if action is not None:
        session.echo(goal)
    session.user["goals"] = [goal]
    session.set_step(5)
    session.say(f"Got it: {goal}.\n\nWould you like to add a second goal?")
    session.set_buttons(
        [
            button("Add another goal", "add_second_goal", type="primary"),
            button("No, continue", "finish_goals", type="secondary"),
        ]
    )


def _step_second_goal_choice(session: FlowSession, action: Optional[str], value: Any) -> None:
    wants_more = action == "add_second_goal" or (
        action is None and str(value).strip().lower() in {"yes", "y", "add"}
    )
    if not wants_more:
        finish_extended_profile(session)
        return
    session.set_step(6)
    session.say("Choose your second goal.")
    remaining = [g for g in ALL_GOALS if g not in session.user["goals"]]
    session.set_buttons([button(goal, "add_goal", goal) for goal in remaining[:4]])


def _step_second_goal(session: FlowSession, action: Optional[str], value: Any) -> None:
    goal = str(value or "").strip()
    if not goal:
        return
    if action is not None:
        session.echo(goal)
    if goal not in session.user["goals"]:
        session.user["goals"].append(goal)
    finish_extended_profile(session)


def finish_extended_profile(session: FlowSession) -> None:
    user = session.user
    user["profile_complete"] = True

    goals = user.get("goals") or []
    if len(goals) > 1:
        goals_text = f"{goals[0]} and {goals[1]}"
    else:
        goals_text = goals[0] if goals else "your goals"
    session.say(f"✅ Profile updated!\n\nWe'll tailor your experience around {goals_text}.")

    return_flow = session.temp.get("return_flow")
    session.state["temp_data"] = {}
    session.pause(500)

    if return_flow == Flow.HEALTH_SUMMARY:
        flow_summary.show_health_summary(session)
    elif return_flow == Flow.MY_SCORE:
        flow_score.show_my_score(session)
    elif return_flow == Flow.SETTINGS:
        flow_settings.show_settings(session)
    else:
        flow_menu.show_main_menu(session)


STEPS = {
    0: _step_gender,
    1: _step_height,
    2: _step_weight,
    3: _step_pavs,
    4: _step_first_goal,
    5: _step_second_goal_choice,
    6: _step_second_goal,
}
