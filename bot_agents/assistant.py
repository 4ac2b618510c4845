import logging
import random
from typing import Any, Dict, List, Optional

import requests

from bot_agents.base import OpenAIStyleClient
from bot_agents.fallback import fallback_response
from bot_agents.prompt_assistant import build_system_prompt
from chat_config import (
    CHAT_MODEL_NAME,
    OPENAI_API_KEY,
    OPENAI_BASE_URL,
    OPENAI_TIMEOUT,
    UI_TEST_MODE,
)

logger = logging.getLogger(__name__)

HISTORY_WINDOW = 6
HISTORY_LIMIT = 20
CONTEXT_ITEMS = 5


def build_health_context(state: Dict[str, Any]) -> str:
    """Render profile, activity, meals, check-ins and the last face scan as plain text."""
    user = state["user"]
    activity = state["weekly_activity"]
    goals = ", ".join(user.get("goals") or []) or "Not set"
    workouts = ", ".join(
        f"{w['day']}: {w['type']} ({w['duration']}min, {w.get('intensity', 'n/a')})"
        for w in activity.get("workouts", [])
    )
    daily_steps = ", ".join(str(s) for s in activity.get("daily_steps", []))

    lines = [
        "USER PROFILE:",
        f"- Name: {user.get('first_name') or ''} {user.get('surname') or ''}".rstrip(),
        f"- Goals: {goals}",
        f"- Height: {user.get('height') or 'Unknown'} cm",
        f"- Weight: {user.get('weight') or 'Unknown'} kg",
        f"- Activity level: {user.get('pavs_days') if user.get('pavs_days') is not None else 'Unknown'} days/week",
        "",
        "WEEKLY ACTIVITY DATA:",
        f"- Active minutes: {activity['active_minutes']} min",
        f"- Steps this week: {activity['steps']:,}",
        f"- Distance: {activity['distance']} km",
        f"- Average sleep: {activity['avg_sleep']}",
        f"- Sleep quality score: {activity['sleep_quality']}/100",
        f"- Daily calories burned: ~{activity['calories']}",
        f"- Workouts: {workouts or 'None'}",
        f"- Daily steps pattern: {daily_steps} (Mon-Sun)",
        f"- Average heart rate: {activity['heart_rate_avg']} bpm",
        f"- Resting heart rate: {activity['resting_hr']} bpm",
        f"- Current streak: {state.get('streak', 0)} days",
        f"- Challenge progress: {state.get('challenge_progress', 0)}/{state.get('challenge_target', 150)} minutes",
        "",
        "RECENT MEALS:",
    ]
    for m in state.get("meal_history", [])[-CONTEXT_ITEMS:]:
        lines.append(
            f"- {m['date']} {m['meal']}: {m.get('notes', '')} "
            f"(Score: {m.get('score')}/10, ~{m.get('calories')} cal)"
        )
    lines += ["", "RECENT CHECK-INS:"]
    for c in state.get("check_in_history", [])[:CONTEXT_ITEMS]:
        lines.append(
            f"- {c['date']}: Sleep {c.get('sleep')}/5, Stress {c.get('stress')}/5, "
            f"Active: {c.get('active')}, Mood: {c.get('mood')}/5"
        )

    scan = state.get("face_scan_results")
    if scan:
        lines += [
            "",
            "LATEST FACE SCAN RESULTS:",
            f"- Heart Health Score: {scan['heart_score']}/100",
            f"- Blood Pressure: {scan['systolic']}/{scan['diastolic']} mmHg ({scan['bp_status']})",
            f"- Heart Rate: {scan['heart_rate']} bpm",
            f"- BMI: {scan['bmi']} ({scan['bmi_status']})",
            f"- SpO2: {scan['spo2']}%",
            f"- 10-Year Heart Risk: {scan['cvd_risk']}%",
        ]
    return "\n".join(lines)


class AssistantAgent:
    """
    Free-text health assistant.

    Uses the chat-completion endpoint when an API key is configured and falls
    back to canned, data-aware answers otherwise (or on any API error).
    """

    def __init__(
        self,
        api_key: Optional[str] = OPENAI_API_KEY,
        test_mode: bool = UI_TEST_MODE,
        client: Optional[OpenAIStyleClient] = None,
    ):
        self.api_key = api_key
        self.test_mode = test_mode
        self.client = client or OpenAIStyleClient(
            OPENAI_BASE_URL, CHAT_MODEL_NAME, api_key=api_key, timeout=OPENAI_TIMEOUT
        )

    @property
    def enabled(self) -> bool:
        return bool(self.api_key) and not self.test_mode

    def build_messages(self, state: Dict[str, Any], user_message: str) -> List[Dict[str, str]]:
        history = state.get("conversation_history", [])[-HISTORY_WINDOW:]
        return (
            [{"role": "system", "content": build_system_prompt(build_health_context(state))}]
            + [{"role": h["role"], "content": h["content"]} for h in history]
            + [{"role": "user", "content": user_message}]
        )

    def reply(self, state: Dict[str, Any], user_message: str, rng: random.Random | None = None) -> str:
        if not self.enabled:
            return fallback_response(state, user_message, rng)

        messages = self.build_messages(state, user_message)
        try:
            answer = self.client.chat(messages, max_tokens=500, temperature=0.7)
        except (requests.RequestException, KeyError, IndexError, ValueError) as e:
            logger.error(f"Chat completion failed, using fallback reply: {e}")
            return fallback_response(state, user_message, rng)
        if not isinstance(answer, str) or not answer.strip():
            logger.error(f"Chat completion returned no text, using fallback reply: {answer!r}")
            return fallback_response(state, user_message, rng)

        history = state.setdefault("conversation_history", [])
        history.append({"role": "user", "content": user_message})
        history.append({"role": "assistant", "content": answer})
        del history[:-HISTORY_LIMIT]
        return answer


assistant_agent = AssistantAgent()
