import logging
import re
import time
from typing import Any, Dict, Iterator, List

import gradio as gr

from chat_config import TYPING_DELAY_SCALE
from flows import dispatch
from flows.session import FlowSession
from state_io import load_state, reset_state, save_state

logger = logging.getLogger(__name__)

MAX_QUICK_REPLIES = 10

# WhatsApp *bold* -> markdown **bold**; _italic_ is the same in both.
WA_BOLD_RE = re.compile(r"(?<![\*\w])\*([^*\n]+)\*(?![\*\w])")


def to_markdown(text: str) -> str:
    return WA_BOLD_RE.sub(r"**\1**", text)


def new_session(user_id: str, state: Dict[str, Any]) -> FlowSession:
    return FlowSession(state, on_save=lambda s: save_state(user_id, s))


def quick_reply_updates(state: Dict[str, Any]) -> List[Any]:
    replies = state.get("quick_replies", [])[:MAX_QUICK_REPLIES]
    updates = []
    for i in range(MAX_QUICK_REPLIES):
        if i < len(replies):
            variant = "primary" if replies[i].get("type") == "primary" else "secondary"
            updates.append(gr.update(value=replies[i]["label"], visible=True, variant=variant))
        else:
            updates.append(gr.update(value="", visible=False))
    return updates


def hidden_quick_replies() -> List[Any]:
    return [gr.update(visible=False) for _ in range(MAX_QUICK_REPLIES)]


def debug_text(user_id: str, state: Dict[str, Any]) -> str:
    user = state["user"]
    name = " ".join(p for p in (user.get("first_name"), user.get("surname")) if p) or "(not registered)"
    return (
        f"**Flow:** `{state.get('current_flow')}` · **Step:** `{state.get('flow_step')}`  \n"
        f"**User:** {name} (`{user_id}`)  \n"
        f"**Coins:** {state.get('coins', 0)} · **Streak:** {state.get('streak', 0)}"
    )


def _replay(history: List[Dict[str, Any]], session: FlowSession, user_id: str) -> Iterator[tuple]:
    """Yield the chat once per new bubble (after its typing pause), then show the quick replies."""
    history = list(history or [])
    for bubble in session.drain():
        pause = bubble.get("delay_ms", 0) * TYPING_DELAY_SCALE / 1000
        if pause > 0:
            time.sleep(pause)
        history.append({"role": bubble["role"], "content": to_markdown(bubble["content"])})
        yield (history, gr.update(), debug_text(user_id, session.state), *hidden_quick_replies())
    yield (history, gr.update(value=""), debug_text(user_id, session.state), *quick_reply_updates(session.state))


def open_chat_action(user_id: str):
    state = load_state(user_id)
    session = new_session(user_id, state)
    dispatch.start_session(session)
    yield from _replay([], session, user_id)


def send_text_action(text: str, history, user_id: str):
    state = load_state(user_id)
    session = new_session(user_id, state)
    dispatch.handle_text_input(session, text or "")
    yield from _replay(history, session, user_id)


def quick_reply_action(index: int, history, user_id: str):
    state = load_state(user_id)
    replies = state.get("quick_replies", [])
    if index >= len(replies):
        logger.warning(f"Quick reply #{index} is no longer offered; ignoring")
        yield (history, gr.update(), debug_text(user_id, state), *quick_reply_updates(state))
        return
    reply = replies[index]
    session = new_session(user_id, state)
    dispatch.handle_button_click(session, reply["action"], reply.get("value"))
    yield from _replay(history, session, user_id)


def make_quick_reply_handler(index: int):
    def handler(history, user_id):
        yield from quick_reply_action(index, history, user_id)

    return handler


def reset_chat_action(user_id: str):
    logger.info(f"Resetting state for {user_id}")
    state = reset_state(user_id)
    session = new_session(user_id, state)
    dispatch.start_session(session)
    yield from _replay([], session, user_id)
