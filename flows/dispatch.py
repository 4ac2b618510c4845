"""
Entry points for one user event: a typed message or a tapped quick reply.

Routing order for text: global commands, then the current flow's text
handler, then the AI chat. For buttons: navigation (goto_*, menu_*,
content_*), then the current flow's step table or button handler.
The state is saved after every event.
"""

import logging
from typing import Any, Callable, Dict, Optional

from state_io import Flow

from . import (
    flow_activity,
    flow_ai_chat,
    flow_challenges,
    flow_checkin,
    flow_coins,
    flow_connect,
    flow_content,
    flow_facescan,
    flow_help,
    flow_meal,
    flow_menu,
    flow_onboarding,
    flow_profile,
    flow_score,
    flow_settings,
    flow_summary,
)
from .session import FlowSession, button, run_step
from .translations import t

logger = logging.getLogger(__name__)

GREETINGS = {"hi", "hello", "start"}

# Flows driven by a flow_step table; buttons and typed text both go through it.
STEP_TABLES = {
    Flow.ONBOARDING: flow_onboarding.STEPS,
    Flow.EXTENDED_PROFILE: flow_profile.STEPS,
    Flow.CHECK_IN: flow_checkin.STEPS,
    Flow.LOG_ACTIVITY: flow_activity.STEPS,
    Flow.FACE_SCAN: flow_facescan.STEPS,
}

# Step flows that only react to buttons; typed text goes to the AI chat.
BUTTON_ONLY_STEP_FLOWS = {Flow.FACE_SCAN}

BUTTON_HANDLERS: Dict[str, Callable[[FlowSession, Optional[str], Any], None]] = {
    Flow.HEALTH_SUMMARY: flow_summary.handle_button,
    Flow.CHALLENGES: flow_challenges.handle_button,
    Flow.MY_SCORE: flow_score.handle_button,
    Flow.CONNECT_APP: flow_connect.handle_button,
    Flow.COINS: flow_coins.handle_button,
    Flow.SETTINGS: flow_settings.handle_button,
    Flow.HELP: flow_help.handle_button,
    Flow.AI_CHAT: flow_ai_chat.handle_button,
}

# A handler returning False means "not understood here".
TEXT_HANDLERS: Dict[str, Callable[[FlowSession, str], Optional[bool]]] = {
    Flow.MAIN_MENU: flow_menu.handle_text,
    Flow.AI_CHAT: flow_ai_chat.handle_text,
    Flow.MEAL_SCAN: flow_meal.handle_text,
    Flow.CONTENT_LIBRARY: flow_content.handle_text,
    Flow.SETTINGS: flow_settings.handle_text,
    Flow.HELP: flow_help.handle_text,
}

MENU_ACTIONS: Dict[str, Callable[[FlowSession], None]] = {
    "checkin": flow_checkin.start_check_in,
    "ai": flow_ai_chat.start_ai_chat,
    "content": flow_content.show_content_library,
    "summary": flow_summary.show_health_summary,
    "facescan": flow_facescan.start_face_scan,
    "challenges": flow_challenges.show_challenges,
    "score": flow_score.show_my_score,
    "log": flow_activity.show_log_activity,
    "coins": flow_coins.show_coins,
    "meal": flow_meal.show_meal_scan,
    "settings": flow_settings.show_settings,
    "help": flow_help.start_help_flow,
}


def start_session(session: FlowSession) -> None:
    """First render for a (re)opened chat."""
    user = session.user
    if user.get("registered"):
        name = user.get("first_name") or ""
        session.say(f"{t(session.state, 'welcome_back', name=name)}\n\n{t(session.state, 'what_to_do')}")
        session.pause(100)
        flow_menu.show_main_menu(session)
    else:
        flow_onboarding.start_onboarding(session)
    session.save()


def handle_menu_action(session: FlowSession, name: str) -> None:
    handler = MENU_ACTIONS.get(name)
    if handler is None:
        logger.warning(f"Unknown menu action {name!r}; showing main menu")
        flow_menu.show_main_menu(session)
        return
    session.state["temp_data"] = {}
    handler(session)


def handle_global_commands(session: FlowSession, text: str) -> bool:
    command = text.strip().upper()
    if command in ("MENU", "CANCEL"):
        session.state["temp_data"] = {}
        flow_menu.show_main_menu(session)
    elif command == "HELP":
        flow_help.start_help_flow(session)
    elif command == "STOP":
        flow_settings.unsubscribe(session)
    elif command == "START":
        if session.user.get("registered"):
            flow_menu.show_main_menu(session)
        else:
            flow_onboarding.start_onboarding(session)
    elif command == "CONNECT":
        flow_connect.start_connect_app(session)
    else:
        return False
    return True


def handle_initial_text(session: FlowSession, text: str) -> None:
    if text.strip().lower() in GREETINGS:
        if session.user.get("registered"):
            flow_menu.show_main_menu(session)
        else:
            flow_onboarding.start_onboarding(session)
        return
    session.say(t(session.state, "not_understood"))
    session.set_buttons(
        [
            button(t(session.state, "menu_back"), "goto_menu"),
            button("HELP", "menu_help"),
        ]
    )


def route_to_ai_chat(session: FlowSession, text: str) -> None:
    session.goto(Flow.AI_CHAT, 0)
    flow_ai_chat.process_ai_chat(session, text)


def _route_text(session: FlowSession, text: str) -> None:
    if handle_global_commands(session, text):
        return

    flow = session.state.get("current_flow")
    if flow == Flow.INITIAL:
        handle_initial_text(session, text)
        return

    if flow in STEP_TABLES and flow not in BUTTON_ONLY_STEP_FLOWS:
        run_step(session, STEP_TABLES[flow], None, text)
        return

    handler = TEXT_HANDLERS.get(flow)
    if handler is not None and handler(session, text) is not False:
        return

    route_to_ai_chat(session, text)


def handle_text_input(session: FlowSession, text: str) -> None:
    trimmed = (text or "").strip()
    if not trimmed:
        return
    session.echo(trimmed)
    _route_text(session, trimmed)
    session.save()


def _route_button(session: FlowSession, action: str, value: Any) -> None:
    if action == "goto_menu":
        session.state["temp_data"] = {}
        flow_menu.show_main_menu(session)
        return
    if action == "goto_connect":
        flow_connect.start_connect_app(session)
        return
    if action.startswith("menu_"):
        handle_menu_action(session, action[len("menu_"):])
        return
    if action.startswith("content_"):
        flow_content.handle_action(session, action, value)
        return

    flow = session.state.get("current_flow")
    if flow in STEP_TABLES:
        run_step(session, STEP_TABLES[flow], action, value)
        return

    handler = BUTTON_HANDLERS.get(flow)
    if handler is None:
        logger.debug(f"Ignoring button {action!r} in flow {flow!r}")
        return
    handler(session, action, value)


def handle_button_click(session: FlowSession, action: str, value: Any = None) -> None:
    if not action:
        return
    _route_button(session, action, value)
    session.save()
