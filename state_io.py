# state_io.py
"""
Default shape, loading and saving of the per-user assistant STATE JSON.

The state is one flat dict: profile, coin/streak counters, challenge progress,
simulated activity/meal/check-in history and the conversation cursor
(current_flow, flow_step, temp_data).
"""

import copy
import logging
import os
from datetime import date
from typing import Any, Dict

from storage import get_state_path, load_json, save_json, today_str

logger = logging.getLogger(__name__)


class Flow:
    INITIAL = "initial"
    ONBOARDING = "onboarding"
    MAIN_MENU = "mainMenu"
    CHECK_IN = "checkIn"
    HEALTH_SUMMARY = "healthSummary"
    CHALLENGES = "challenges"
    MY_SCORE = "myScore"
    LOG_ACTIVITY = "logActivity"
    CONNECT_APP = "connectApp"
    COINS = "coins"
    MEAL_SCAN = "mealScan"
    SETTINGS = "settings"
    HELP = "help"
    EXTENDED_PROFILE = "extendedProfile"
    FACE_SCAN = "faceScan"
    AI_CHAT = "aiChat"
    CONTENT_LIBRARY = "contentLibrary"


_DEFAULT_STATE: Dict[str, Any] = {
    "user": {
        "registered": False,
        "first_name": "",
        "surname": "",
        "email": "",
        "language": "English",
        "gender": None,
        "height": None,
        "weight": None,
        "pavs_days": None,
        "goals": [],
        "connected_apps": [],
        "profile_complete": False,
    },
    "coins": 0,
    "streak": 0,
    "last_check_in": None,
    "check_in_today": False,
    "challenge_joined": False,
    "challenge_progress": 0,
    "challenge_target": 150,
    # Simulated wearable data until a real app is connected
    "weekly_activity": {
        "active_minutes": 85,
        "steps": 32450,
        "distance": 24.5,
        "avg_sleep": "6h 45m",
        "sleep_quality": 72,
        "calories": 1850,
        "workouts": [
            {"day": "Mon", "type": "Walk", "duration": 25, "intensity": "Light"},
            {"day": "Wed", "type": "Run", "duration": 30, "intensity": "Moderate"},
            {"day": "Fri", "type": "Strength", "duration": 30, "intensity": "Hard"},
        ],
        "daily_steps": [4200, 6800, 5100, 8200, 4500, 2100, 1550],
        "heart_rate_avg": 68,
        "resting_hr": 62,
    },
    "meal_history": [
        {"date": "Today", "meal": "Breakfast", "score": 7, "notes": "Oatmeal with berries", "calories": 350},
        {"date": "Today", "meal": "Lunch", "score": 6, "notes": "Chicken salad", "calories": 520},
        {"date": "Yesterday", "meal": "Dinner", "score": 5, "notes": "Pizza", "calories": 850},
        {"date": "Yesterday", "meal": "Lunch", "score": 8, "notes": "Grilled fish with vegetables", "calories": 480},
    ],
    "check_in_history": [
        {"date": "Today", "sleep": 3, "stress": 2, "active": "yes", "mood": 3},
        {"date": "Yesterday", "sleep": 4, "stress": 3, "active": "yes", "mood": 4},
        {"date": "2 days ago", "sleep": 2, "stress": 4, "active": "no", "mood": 2},
    ],
    "current_flow": Flow.INITIAL,
    "flow_step": 0,
    "temp_data": {},
    "conversation_history": [],
    "reminder_frequency": "daily",
    "challenge_reminders": "weekly",
    "last_face_scan": None,
    "face_scan_results": None,
    "quick_replies": [],
}

# Nested dicts merged key by key so older files pick up new fields.
_NESTED_KEYS = ("user", "weekly_activity")


def default_state() -> Dict[str, Any]:
    return copy.deepcopy(_DEFAULT_STATE)


def merge_state(saved: Dict[str, Any]) -> Dict[str, Any]:
    state = default_state()
    for key, value in (saved or {}).items():
        if key in _NESTED_KEYS and isinstance(value, dict):
            state[key].update(value)
        else:
            state[key] = value
    return state


def refresh_daily_flags(state: Dict[str, Any], today: date | None = None) -> Dict[str, Any]:
    """check_in_today only holds on the day of the last check-in."""
    state["check_in_today"] = state.get("last_check_in") == today_str(today)
    return state


def load_state(user_id: str, base_dir: str | None = None, today: date | None = None) -> Dict[str, Any]:
    path = get_state_path(user_id, base_dir) if base_dir else get_state_path(user_id)
    saved = load_json(path, {})
    if not isinstance(saved, dict):
        logger.warning(f"State file {path} is not a JSON object, starting fresh")
        saved = {}
    return refresh_daily_flags(merge_state(saved), today)


def save_state(user_id: str, state: Dict[str, Any], base_dir: str | None = None) -> None:
    path = get_state_path(user_id, base_dir) if base_dir else get_state_path(user_id)
    save_json(path, state)


def reset_state(user_id: str, base_dir: str | None = None) -> Dict[str, Any]:
    path = get_state_path(user_id, base_dir) if base_dir else get_state_path(user_id)
    if os.path.exists(path):
        os.remove(path)
        logger.info(f"Removed persisted state for {user_id}")
    return default_state()
