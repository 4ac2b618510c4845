"""Tests for coins, rewards and app connection."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from conftest import actions, bot_texts
from flows import dispatch
from flows.flow_coins import check_coin_milestone, show_coins
from flows.flow_connect import start_connect_app
from flows.formatting import WEB_APP_URLS
from state_io import Flow


class TestMilestones:
    def test_crossing(self):
        assert check_coin_milestone(45, 55) == "You've hit 50 coins! 🪙"
        assert check_coin_milestone(90, 100).startswith("100 coins")

    def test_not_crossing(self):
        assert check_coin_milestone(50, 60) is None
        assert check_coin_milestone(10, 20) is None

    def test_first_crossed_wins(self):
        assert check_coin_milestone(40, 300) == "You've hit 50 coins! 🪙"


class TestCoins:
    def test_balance(self, registered_state, make_session):
        registered_state["coins"] = 75
        session = make_session(registered_state)
        show_coins(session)
        assert "Balance: *75* coins" in bot_texts(session)[0]
        assert registered_state["current_flow"] == Flow.COINS

    def test_redeem_below_minimum(self, registered_state, make_session):
        registered_state["coins"] = 60
        session = make_session(registered_state)
        show_coins(session)
        dispatch.handle_button_click(session, "redeem_rewards")
        assert "at least 100 coins" in bot_texts(session)[-1]
        assert actions(session)[0] == "menu_checkin"

    def test_redeem_opens_store(self, registered_state, make_session):
        registered_state["coins"] = 150
        session = make_session(registered_state)
        show_coins(session)
        dispatch.handle_button_click(session, "redeem_rewards")
        assert WEB_APP_URLS["REWARDS"] in bot_texts(session)[-1]
        dispatch.handle_button_click(session, "open_rewards_store")
        assert bot_texts(session)[-1].startswith("🎁 Rewards store:")

    def test_recent_earnings(self, registered_state, make_session):
        registered_state["streak"] = 9
        registered_state["challenge_joined"] = True
        session = make_session(registered_state)
        show_coins(session)
        dispatch.handle_button_click(session, "earn_more")
        dispatch.handle_button_click(session, "recent_earnings")
        text = bot_texts(session)[-1]
        assert "Check-ins: 70 coins" in text
        assert "Activity: 40 coins" in text
        assert "Challenges: 25 coins" in text


class TestConnect:
    def test_connect_flow(self, registered_state, make_session):
        session = make_session(registered_state)
        start_connect_app(session)
        assert WEB_APP_URLS["CONNECT_APP"] in bot_texts(session)[0]
        dispatch.handle_button_click(session, "open_connect_portal")
        assert actions(session)[0] == "confirm_connected"
        dispatch.handle_button_click(session, "confirm_connected")
        assert registered_state["user"]["connected_apps"] == ["Fitness App"]

    def test_connect_twice_keeps_one_entry(self, registered_state, make_session):
        session = make_session(registered_state)
        start_connect_app(session)
        dispatch.handle_button_click(session, "confirm_connected", "Garmin")
        dispatch.handle_button_click(session, "confirm_connected", "Garmin")
        assert registered_state["user"]["connected_apps"] == ["Garmin"]

    def test_connect_unlocks_summary(self, registered_state, make_session):
        registered_state["user"]["profile_complete"] = True
        session = make_session(registered_state)
        start_connect_app(session)
        dispatch.handle_button_click(session, "confirm_connected")
        dispatch.handle_button_click(session, "menu_summary")
        assert "Your Weekly Health Summary" in bot_texts(session)[-2]
