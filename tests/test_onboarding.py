"""Tests for the onboarding conversation."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from conftest import actions, bot_texts
from flows import dispatch
from flows.flow_onboarding import match_language, start_onboarding
from state_io import Flow


class TestLanguageMatching:
    def test_case_insensitive(self):
        assert match_language("afrikaans") == "Afrikaans"
        assert match_language(" ISIZULU ") == "isiZulu"

    def test_unknown(self):
        assert match_language("French") is None


class TestOnboardingFlow:
    def test_start(self, state, make_session):
        session = make_session(state)
        start_onboarding(session)
        assert state["current_flow"] == Flow.ONBOARDING
        assert state["flow_step"] == 0
        assert actions(session) == ["onboard_agree", "onboard_decline"]
        assert "Your health, all in one place" in bot_texts(session)[0]

    def test_decline_returns_to_initial(self, state, make_session):
        session = make_session(state)
        start_onboarding(session)
        dispatch.handle_button_click(session, "onboard_decline")
        assert state["current_flow"] == Flow.INITIAL
        assert state["quick_replies"] == []

    def test_full_registration(self, state, make_session, saved):
        session = make_session(state)
        start_onboarding(session)
        dispatch.handle_button_click(session, "onboard_agree")
        assert state["flow_step"] == 1
        assert actions(session) == ["set_language"] * 3

        dispatch.handle_button_click(session, "set_language", "Afrikaans")
        assert state["user"]["language"] == "Afrikaans"
        assert state["flow_step"] == 2

        dispatch.handle_text_input(session, "thandi@example.com")
        assert state["user"]["email"] == "thandi@example.com"
        assert state["flow_step"] == 3

        dispatch.handle_text_input(session, "12345")
        assert state["flow_step"] == 3
        dispatch.handle_text_input(session, "123456")
        assert state["flow_step"] == 4

        dispatch.handle_text_input(session, "Thandi")
        dispatch.handle_text_input(session, "Mokoena")
        assert state["user"]["registered"] is True
        assert state["user"]["surname"] == "Mokoena"
        assert state["flow_step"] == 6
        assert actions(session) == ["first_checkin", "first_connect", "skip_first"]
        assert len(saved) == 7

    def test_typed_language(self, state, make_session):
        state["current_flow"] = Flow.ONBOARDING
        state["flow_step"] = 1
        session = make_session(state)
        dispatch.handle_text_input(session, "english")
        assert state["user"]["language"] == "English"
        assert state["flow_step"] == 2

    def test_wrong_code_keeps_step(self, state, make_session):
        state["current_flow"] = Flow.ONBOARDING
        state["flow_step"] = 3
        session = make_session(state)
        dispatch.handle_text_input(session, "12ab56")
        assert state["flow_step"] == 3
        assert "didn't match" in bot_texts(session)[-1]
        assert state["user"]["registered"] is False

    def test_resend_keeps_step(self, state, make_session):
        state["current_flow"] = Flow.ONBOARDING
        state["flow_step"] = 3
        session = make_session(state)
        dispatch.handle_text_input(session, "resend")
        assert state["flow_step"] == 3
        assert "new code" in bot_texts(session)[-1]

    def test_skip_first_action_shows_menu(self, registered_state, make_session):
        registered_state["current_flow"] = Flow.ONBOARDING
        registered_state["flow_step"] = 6
        session = make_session(registered_state)
        dispatch.handle_button_click(session, "skip_first")
        assert registered_state["current_flow"] == Flow.MAIN_MENU

    def test_first_check_in(self, registered_state, make_session):
        registered_state["current_flow"] = Flow.ONBOARDING
        registered_state["flow_step"] = 6
        session = make_session(registered_state)
        dispatch.handle_button_click(session, "first_checkin")
        assert registered_state["current_flow"] == Flow.CHECK_IN
        assert registered_state["flow_step"] == 1
