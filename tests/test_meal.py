"""Tests for the simulated meal scan."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from conftest import actions, bot_texts
from flows import dispatch
from flows.flow_meal import IMPROVEMENTS, MEAL_HISTORY_LIMIT, MEAL_SCORES, POSITIVES, show_meal_scan
from state_io import Flow, default_state


class TestMealScan:
    def test_prompt(self, registered_state, make_session):
        session = make_session(registered_state)
        show_meal_scan(session)
        assert registered_state["current_flow"] == Flow.MEAL_SCAN
        assert registered_state["quick_replies"] == []

    def test_feedback_is_recorded(self, registered_state, make_session):
        before = len(registered_state["meal_history"])
        session = make_session(registered_state)
        show_meal_scan(session)
        session.drain()

        dispatch.handle_text_input(session, "Grilled chicken with rice")
        texts = bot_texts(session)
        assert texts[0] == "Analyzing your meal..."

        entry = registered_state["meal_history"][-1]
        assert len(registered_state["meal_history"]) == before + 1
        assert entry["date"] == "2026-03-10"
        assert entry["notes"] == "Grilled chicken with rice"
        assert entry["score"] in MEAL_SCORES
        assert f"Score: {entry['score']}/10" in texts[1]
        assert any(p in texts[1] for p in POSITIVES)
        assert any(i in texts[1] for i in IMPROVEMENTS)
        assert actions(session) == ["menu_meal", "goto_menu"]

    def test_same_seed_same_feedback(self, registered_state, make_session):
        first = make_session(registered_state, seed=3)
        show_meal_scan(first)
        dispatch.handle_text_input(first, "Salad")

        other = default_state()
        second = make_session(other, seed=3)
        show_meal_scan(second)
        dispatch.handle_text_input(second, "Salad")

        assert registered_state["meal_history"][-1]["score"] == other["meal_history"][-1]["score"]
        assert bot_texts(first)[-1] == bot_texts(second)[-1]

    def test_scan_another(self, registered_state, make_session):
        session = make_session(registered_state)
        show_meal_scan(session)
        dispatch.handle_text_input(session, "Pasta")
        dispatch.handle_button_click(session, "menu_meal")
        assert registered_state["current_flow"] == Flow.MEAL_SCAN

    def test_history_is_capped(self, registered_state, make_session):
        registered_state["meal_history"] = [
            {"date": "2026-03-01", "meal": "Meal", "score": 7, "notes": f"meal {i}", "calories": None}
            for i in range(MEAL_HISTORY_LIMIT)
        ]
        session = make_session(registered_state)
        show_meal_scan(session)
        dispatch.handle_text_input(session, "Soup")

        history = registered_state["meal_history"]
        assert len(history) == MEAL_HISTORY_LIMIT
        assert history[0]["notes"] == "meal 1"
        assert history[-1]["notes"] == "Soup"
