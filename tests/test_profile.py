"""Tests for the extended profile questions."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest

from conftest import actions, bot_texts
from flows import dispatch
from flows.flow_profile import start_extended_profile
from state_io import Flow


class TestExtendedProfile:
    def test_full_profile_returns_to_summary(self, registered_state, make_session):
        session = make_session(registered_state)
        start_extended_profile(session, Flow.HEALTH_SUMMARY)
        assert registered_state["current_flow"] == Flow.EXTENDED_PROFILE
        assert actions(session) == ["set_gender"] * 3

        dispatch.handle_button_click(session, "set_gender", "Female")
        dispatch.handle_text_input(session, "168")
        dispatch.handle_text_input(session, "SKIP")
        dispatch.handle_button_click(session, "set_pavs", "3")
        dispatch.handle_button_click(session, "add_goal", "Reduce stress")
        dispatch.handle_button_click(session, "add_second_goal")
        assert "Reduce stress" not in [b["value"] for b in registered_state["quick_replies"]]
        dispatch.handle_button_click(session, "add_goal", "Better sleep")

        user = registered_state["user"]
        assert user["gender"] == "Female"
        assert user["height"] == 168
        assert user["weight"] is None
        assert user["pavs_days"] == 3
        assert user["goals"] == ["Reduce stress", "Better sleep"]
        assert user["profile_complete"] is True
        assert registered_state["current_flow"] == Flow.HEALTH_SUMMARY

    def test_height_out_of_range(self, registered_state, make_session):
        registered_state["current_flow"] = Flow.EXTENDED_PROFILE
        registered_state["flow_step"] = 1
        session = make_session(registered_state)
        dispatch.handle_text_input(session, "20")
        assert registered_state["flow_step"] == 1
        assert registered_state["user"]["height"] is None
        assert "in cm" in bot_texts(session)[-1]

    def test_weight_not_a_number(self, registered_state, make_session):
        registered_state["current_flow"] = Flow.EXTENDED_PROFILE
        registered_state["flow_step"] = 2
        session = make_session(registered_state)
        dispatch.handle_text_input(session, "heavy")
        assert registered_state["flow_step"] == 2

    @pytest.mark.parametrize("typed", ["8", "-1", "lots"])
    def test_pavs_out_of_range_reprompts(self, registered_state, make_session, typed):
        registered_state["current_flow"] = Flow.EXTENDED_PROFILE
        registered_state["flow_step"] = 3
        session = make_session(registered_state)
        dispatch.handle_text_input(session, typed)
        assert registered_state["flow_step"] == 3
        assert registered_state["user"]["pavs_days"] is None
        assert "from 0 to 7" in bot_texts(session)[-1]

    def test_typed_pavs_in_range(self, registered_state, make_session):
        registered_state["current_flow"] = Flow.EXTENDED_PROFILE
        registered_state["flow_step"] = 3
        session = make_session(registered_state)
        dispatch.handle_text_input(session, "7")
        assert registered_state["user"]["pavs_days"] == 7
        assert registered_state["flow_step"] == 4

    def test_single_goal_returns_to_menu(self, registered_state, make_session):
        session = make_session(registered_state)
        start_extended_profile(session, Flow.MAIN_MENU)
        registered_state["flow_step"] = 4
        dispatch.handle_button_click(session, "add_goal", "Weight loss")
        dispatch.handle_button_click(session, "finish_goals")
        assert registered_state["user"]["goals"] == ["Weight loss"]
        assert registered_state["current_flow"] == Flow.MAIN_MENU
        assert any("tailor your experience around Weight loss" in text for text in bot_texts(session))

    def test_goals_only_from_settings(self, registered_state, make_session):
        registered_state["user"]["pavs_days"] = 5
        session = make_session(registered_state)
        start_extended_profile(session, Flow.SETTINGS, goals_only=True)
        assert registered_state["flow_step"] == 4
        dispatch.handle_text_input(session, "More energy")
        dispatch.handle_text_input(session, "no")
        assert registered_state["user"]["goals"] == ["More energy"]
        assert registered_state["user"]["pavs_days"] == 5
        assert registered_state["current_flow"] == Flow.SETTINGS
