from typing import Any, Dict, List, Optional

from state_io import Flow

from . import flow_profile
from .formatting import bold, format_thousands
from .session import FlowSession, button, menu_button

# Simulated previous-week baseline for the active-minutes trend.
LAST_WEEK_FACTOR = 0.85
MONTH_FACTOR = 4


def needs_profile(session: FlowSession) -> bool:
    return session.user.get("registered") and not session.user.get("profile_complete")


def has_activity_data(state: Dict[str, Any]) -> bool:
    return bool(state["user"].get("connected_apps")) or bool(state.get("check_in_today"))


def average_meal_score(meals: List[Dict[str, Any]]) -> str:
    scores = [m["score"] for m in meals if m.get("score") is not None]
    if not scores:
        return "N/A"
    return f"{sum(scores) / len(scores):.1f}"


def step_trend(daily_steps: List[int]) -> str:
    """Compare the last three days with the first three: ↑/↓ beyond 5 %, else stable."""
    recent = daily_steps[-3:]
    earlier = daily_steps[:3]
    if not recent or not earlier:
        return "→ stable"
    earlier_avg = sum(earlier) / len(earlier)
    if earlier_avg == 0:
        return "→ stable"
    recent_avg = sum(recent) / len(recent)
    change = round((recent_avg - earlier_avg) / earlier_avg * 100)
    if change > 5:
        return f"↑ {change}%"
    if change < -5:
        return f"↓ {abs(change)}%"
    return "→ stable"


def minutes_trend(active_minutes: int) -> str:
    last_week = round(active_minutes * LAST_WEEK_FACTOR)
    if last_week == 0:
        return ""
    change = round((active_minutes - last_week) / last_week * 100)
    if change > 0:
        return f"↑ {change}%"
    if change < 0:
        return f"↓ {abs(change)}%"
    return ""


def show_no_data(session: FlowSession) -> None:
    session.say(
        "📊 Health summary\n\n"
        "We don't have enough recent activity data to build a summary yet.\n\n"
        "To fix that, you can either:\n"
        "• connect a fitness app, or\n"
        "• log activity manually."
    )
    session.set_buttons(
        [
            button("🔗 Connect", "goto_connect", type="primary"),
            button("Log activity", "menu_log"),
            menu_button(session),
        ]
    )


def show_health_summary(session: FlowSession) -> None:
    session.goto(Flow.HEALTH_SUMMARY, 0)
    state = session.state

    if needs_profile(session):
        session.say("To show your personalized health summary, we need a few more details.")
        session.pause(500)
        flow_profile.start_extended_profile(session, Flow.HEALTH_SUMMARY)
        return

    if not has_activity_data(state):
        show_no_data(session)
        return

    data = state["weekly_activity"]
    meals = state.get("meal_history", [])
    minutes = f"{data['active_minutes']} min"
    steps = format_thousands(data["steps"])

    session.say(
        f"📊 {bold('Your Weekly Health Summary')}\n\n"
        f"{bold('🏃 Activity')}\n"
        f"• Active minutes: {bold(minutes)} {minutes_trend(data['active_minutes'])}\n"
        f"• Total steps: {bold(steps)} {step_trend(data['daily_steps'])}\n"
        f"• Distance: {bold(str(data['distance']) + ' km')}\n"
        f"• Workouts: {bold(str(len(data['workouts'])))} sessions\n\n"
        f"{bold('❤️ Vitals')}\n"
        f"• Avg heart rate: {bold(str(data['heart_rate_avg']))} bpm\n"
        f"• Resting HR: {bold(str(data['resting_hr']))} bpm\n"
        f"• Calories: ~{bold(str(data['calories']) + '/day')}\n\n"
        f"{bold('😴 Sleep')}\n"
        f"• Average: {bold(data['avg_sleep'])}\n"
        f"• Quality: {bold(str(data['sleep_quality']) + '/100')}\n\n"
        f"{bold('🍽 Nutrition')}\n"
        f"• Meals logged: {bold(str(len(meals)))}\n"
        f"• Avg score: {bold(average_meal_score(meals) + '/10')}\n\n"
        f"🔥 {bold('Streak:')} {state['streak']} days"
    )

    if data["workouts"]:
        session.pause(500)
        workout_list = "\n".join(
            f"• {w['day']}: {w['type']} ({w['duration']}min)" for w in data["workouts"]
        )
        title = bold("This Week's Workouts")
        session.say(f"💪 {title}\n\n{workout_list}")

    session.set_buttons(
        [
            button("🤖 AI Insights", "menu_ai", type="primary"),
            button("📅 Monthly", "monthly_summary"),
            menu_button(session),
        ]
    )


def show_monthly_summary(session: FlowSession) -> None:
    state = session.state
    data = state["weekly_activity"]
    minutes = data["active_minutes"] * MONTH_FACTOR
    steps = data["steps"] * MONTH_FACTOR
    distance = data["distance"] * MONTH_FACTOR

    session.say(
        f"📊 {bold('Your Monthly Health Summary')}\n\n"
        f"{bold('🏃 Activity (30 days)')}\n"
        f"• Active minutes: {bold(f'{minutes} min')}\n"
        f"• Total steps: {bold(format_thousands(steps))}\n"
        f"• Distance: {bold(f'{distance:.1f} km')}\n"
        f"• Avg daily: {bold(format_thousands(round(steps / 30)) + ' steps')}\n\n"
        f"{bold('😴 Sleep')}\n"
        f"• Average: {bold(data['avg_sleep'])}\n"
        f"• Trend: {bold('Stable')}\n\n"
        f"{bold('🎯 Progress')}\n"
        f"• Streak: {bold(str(state['streak']) + ' days')} 🔥\n"
        f"• Coins: {bold(str(state['coins']))} 🪙\n\n"
        f"💡 {bold('Tip:')} Consistency matters more than intensity!"
    )
    session.set_buttons(
        [
            button("🤖 AI Insights", "menu_ai", type="primary"),
            button("📊 Weekly", "menu_summary"),
            menu_button(session),
        ]
    )


def handle_button(session: FlowSession, action: Optional[str], value: Any) -> None:
    if action == "monthly_summary":
        show_monthly_summary(session)
