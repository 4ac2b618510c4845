"""Tests for event routing: global commands, menu, step recovery, persistence."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest

from conftest import actions, bot_texts
from flows import dispatch
from flows.flow_menu import match_menu_text, show_main_menu
from state_io import Flow


class TestStartSession:
    def test_new_user_gets_onboarding(self, state, make_session, saved):
        session = make_session(state)
        dispatch.start_session(session)
        assert state["current_flow"] == Flow.ONBOARDING
        assert len(saved) == 1

    def test_registered_user_gets_menu(self, registered_state, make_session):
        session = make_session(registered_state)
        dispatch.start_session(session)
        texts = bot_texts(session)
        assert texts[0] == "Welcome back, Thandi! 👋\n\nWhat would you like to do today?"
        assert registered_state["current_flow"] == Flow.MAIN_MENU
        assert len(actions(session)) == 10


class TestMainMenu:
    def test_badges(self, registered_state, make_session):
        registered_state["streak"] = 5
        registered_state["coins"] = 40
        session = make_session(registered_state)
        show_main_menu(session)
        assert "Hey Thandi! What would you like to do?\n🔥 5 day streak • 🪙 40 coins" in bot_texts(session)[0]

    def test_no_streak_badge(self, registered_state, make_session):
        session = make_session(registered_state)
        show_main_menu(session)
        text = bot_texts(session)[0]
        assert "streak" not in text
        assert "🪙 0 coins" in text

    @pytest.mark.parametrize(
        "text, name",
        [
            ("1", "checkin"),
            ("7", "content"),
            ("0", "help"),
            ("my score please", "score"),
            ("coins", "coins"),
            ("face scan", "facescan"),
            ("scan my meal", "meal"),
            ("talk to the AI", "ai"),
            ("tell me a joke", None),
        ],
    )
    def test_match_menu_text(self, text, name):
        assert match_menu_text(text) == name

    def test_number_opens_feature(self, registered_state, make_session):
        session = make_session(registered_state)
        show_main_menu(session)
        dispatch.handle_text_input(session, "3")
        assert registered_state["current_flow"] == Flow.CHALLENGES

    def test_unmatched_text_goes_to_assistant(self, registered_state, make_session, assistant):
        session = make_session(registered_state)
        show_main_menu(session)
        dispatch.handle_text_input(session, "tell me a joke")
        assert registered_state["current_flow"] == Flow.AI_CHAT
        assert assistant.calls == ["tell me a joke"]
        assert bot_texts(session)[-1] == "assistant: tell me a joke"

    def test_unknown_menu_action_shows_menu(self, registered_state, make_session):
        registered_state["current_flow"] = Flow.COINS
        session = make_session(registered_state)
        dispatch.handle_button_click(session, "menu_nothing")
        assert registered_state["current_flow"] == Flow.MAIN_MENU


class TestGlobalCommands:
    def test_menu_clears_temp(self, registered_state, make_session):
        registered_state["current_flow"] = Flow.CHECK_IN
        registered_state["flow_step"] = 2
        registered_state["temp_data"] = {"sleep": 3}
        session = make_session(registered_state)
        dispatch.handle_text_input(session, "menu")
        assert registered_state["current_flow"] == Flow.MAIN_MENU
        assert registered_state["temp_data"] == {}

    def test_cancel(self, registered_state, make_session):
        registered_state["current_flow"] = Flow.LOG_ACTIVITY
        registered_state["flow_step"] = 2
        session = make_session(registered_state)
        dispatch.handle_text_input(session, "Cancel")
        assert registered_state["current_flow"] == Flow.MAIN_MENU

    def test_help(self, registered_state, make_session):
        session = make_session(registered_state)
        dispatch.handle_text_input(session, "HELP")
        assert registered_state["current_flow"] == Flow.HELP

    def test_stop(self, registered_state, make_session):
        session = make_session(registered_state)
        dispatch.handle_text_input(session, "stop")
        assert registered_state["current_flow"] == Flow.INITIAL
        assert bot_texts(session)[-1].startswith("You've been unsubscribed.")

    def test_start_registered(self, registered_state, make_session):
        registered_state["current_flow"] = Flow.INITIAL
        session = make_session(registered_state)
        dispatch.handle_text_input(session, "START")
        assert registered_state["current_flow"] == Flow.MAIN_MENU

    def test_start_unregistered(self, state, make_session):
        session = make_session(state)
        dispatch.handle_text_input(session, "start")
        assert state["current_flow"] == Flow.ONBOARDING

    def test_connect(self, registered_state, make_session):
        session = make_session(registered_state)
        dispatch.handle_text_input(session, "connect")
        assert registered_state["current_flow"] == Flow.CONNECT_APP

    def test_commands_win_inside_step_flows(self, state, make_session):
        state["current_flow"] = Flow.ONBOARDING
        state["flow_step"] = 4
        session = make_session(state)
        dispatch.handle_text_input(session, "Stop")
        assert state["current_flow"] == Flow.INITIAL
        assert state["user"]["first_name"] == ""


class TestInitialState:
    def test_greeting_starts_onboarding(self, state, make_session):
        session = make_session(state)
        dispatch.handle_text_input(session, "Hi")
        assert state["current_flow"] == Flow.ONBOARDING

    def test_greeting_registered_shows_menu(self, registered_state, make_session):
        registered_state["current_flow"] = Flow.INITIAL
        session = make_session(registered_state)
        dispatch.handle_text_input(session, "hello")
        assert registered_state["current_flow"] == Flow.MAIN_MENU

    def test_anything_else(self, state, make_session):
        session = make_session(state)
        dispatch.handle_text_input(session, "what is this")
        assert state["current_flow"] == Flow.INITIAL
        assert bot_texts(session)[-1].startswith("Sorry")
        assert actions(session) == ["goto_menu", "menu_help"]


class TestRouting:
    def test_empty_text_is_ignored(self, registered_state, make_session, saved):
        session = make_session(registered_state)
        dispatch.handle_text_input(session, "   ")
        assert session.drain() == []
        assert saved == []

    def test_text_is_echoed(self, registered_state, make_session):
        session = make_session(registered_state)
        dispatch.handle_text_input(session, "  2  ")
        first = session.drain()[0]
        assert first["role"] == "user"
        assert first["content"] == "2"

    def test_invalid_step_recovers_to_menu(self, registered_state, make_session):
        registered_state["current_flow"] = Flow.CHECK_IN
        registered_state["flow_step"] = 99
        registered_state["temp_data"] = {"sleep": 1}
        session = make_session(registered_state)
        dispatch.handle_text_input(session, "3")
        assert registered_state["current_flow"] == Flow.MAIN_MENU
        assert registered_state["temp_data"] == {}

    def test_non_integer_step_recovers_on_button(self, registered_state, make_session):
        registered_state["current_flow"] = Flow.LOG_ACTIVITY
        registered_state["flow_step"] = "two"
        session = make_session(registered_state)
        dispatch.handle_button_click(session, "activity_duration", 45)
        assert registered_state["current_flow"] == Flow.MAIN_MENU

    def test_face_scan_text_goes_to_assistant(self, registered_state, make_session, assistant):
        registered_state["current_flow"] = Flow.FACE_SCAN
        registered_state["flow_step"] = 1
        session = make_session(registered_state)
        dispatch.handle_text_input(session, "is my heart ok")
        assert registered_state["current_flow"] == Flow.AI_CHAT
        assert assistant.calls == ["is my heart ok"]

    def test_unhandled_button_is_ignored_but_saved(self, registered_state, make_session, saved):
        registered_state["current_flow"] = Flow.MEAL_SCAN
        session = make_session(registered_state)
        dispatch.handle_button_click(session, "something_else")
        assert registered_state["current_flow"] == Flow.MEAL_SCAN
        assert session.drain() == []
        assert len(saved) == 1

    def test_empty_action_does_nothing(self, registered_state, make_session, saved):
        session = make_session(registered_state)
        dispatch.handle_button_click(session, "")
        assert saved == []

    def test_goto_menu_clears_temp(self, registered_state, make_session):
        registered_state["current_flow"] = Flow.CONTENT_LIBRARY
        registered_state["temp_data"] = {"content_items": [{"documentId": "x"}]}
        session = make_session(registered_state)
        dispatch.handle_button_click(session, "goto_menu")
        assert registered_state["temp_data"] == {}
        assert registered_state["current_flow"] == Flow.MAIN_MENU

    def test_menu_action_clears_temp(self, registered_state, make_session):
        registered_state["temp_data"] = {"leftover": True}
        session = make_session(registered_state)
        dispatch.handle_button_click(session, "menu_coins")
        assert registered_state["temp_data"] == {}
        assert registered_state["current_flow"] == Flow.COINS

    def test_state_saved_after_each_event(self, registered_state, make_session, saved):
        session = make_session(registered_state)
        dispatch.handle_button_click(session, "menu_checkin")
        dispatch.handle_button_click(session, "sleep", 3)
        assert len(saved) == 2
        assert saved[-1]["flow_step"] == 2
