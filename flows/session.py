import logging
import random
from datetime import date, datetime
from typing import Any, Callable, Dict, List, Optional

from .formatting import truncate_message
from .translations import t

logger = logging.getLogger(__name__)

DEFAULT_DELAY_MS = 800

StepHandler = Callable[["FlowSession", Optional[str], Any], None]


def button(label: str, action: str, value: Any = None, type: str | None = None) -> Dict[str, Any]:
    """A quick reply: tapping it sends (action, value) back to the dispatcher."""
    btn: Dict[str, Any] = {"label": label, "action": action, "value": value}
    if type:
        btn["type"] = type
    return btn


def menu_button(session: "FlowSession") -> Dict[str, Any]:
    return button(t(session.state, "menu_back"), "goto_menu", type="secondary")


def parse_int(text: Any) -> Optional[int]:
    if isinstance(text, bool):
        return None
    if isinstance(text, int):
        return text
    try:
        return int(str(text).strip())
    except (TypeError, ValueError):
        return None


class FlowSession:
    """
    Everything one handled event needs: the persisted state dict, the bubbles
    produced so far, the clock, the random source and the external clients.

    The state dict is mutated in place. Quick replies live in
    state["quick_replies"] so they survive a restart.
    """

    def __init__(
        self,
        state: Dict[str, Any],
        assistant=None,
        content=None,
        rng: random.Random | None = None,
        clock: Callable[[], datetime] | None = None,
        on_save: Callable[[Dict[str, Any]], None] | None = None,
    ):
        self.state = state
        self.state.setdefault("quick_replies", [])
        self._assistant = assistant
        self._content = content
        self.rng = rng or random.Random()
        self.clock = clock or datetime.now
        self.on_save = on_save
        self.outbox: List[Dict[str, Any]] = []
        self._pending_delay = 0

    # -------- external clients (module singletons unless injected) --------

    @property
    def assistant(self):
        if self._assistant is None:
            from bot_agents.assistant import assistant_agent

            self._assistant = assistant_agent
        return self._assistant

    @property
    def content(self):
        if self._content is None:
            from bot_agents.content_client import content_client

            self._content = content_client
        return self._content

    # -------- state shortcuts --------

    @property
    def user(self) -> Dict[str, Any]:
        return self.state["user"]

    @property
    def temp(self) -> Dict[str, Any]:
        return self.state.setdefault("temp_data", {})

    @property
    def buttons(self) -> List[Dict[str, Any]]:
        return self.state["quick_replies"]

    def today(self) -> date:
        return self.clock().date()

    def goto(self, flow: str, step: int = 0) -> None:
        logger.debug(f"flow {self.state.get('current_flow')} -> {flow} (step {step})")
        self.state["current_flow"] = flow
        self.state["flow_step"] = step

    def set_step(self, step: int) -> None:
        self.state["flow_step"] = step

    # -------- rendering --------

    def say(self, text: str, delay_ms: int = DEFAULT_DELAY_MS) -> None:
        self.outbox.append(
            {
                "role": "assistant",
                "content": truncate_message(text),
                "delay_ms": delay_ms + self._pending_delay,
            }
        )
        self._pending_delay = 0

    def echo(self, text: str) -> None:
        """Show the user's choice as their own bubble."""
        self.outbox.append({"role": "user", "content": str(text), "delay_ms": 0})

    def pause(self, ms: int) -> None:
        self._pending_delay += ms

    def set_buttons(self, buttons: List[Dict[str, Any]]) -> None:
        self.state["quick_replies"] = list(buttons)

    def clear_buttons(self) -> None:
        self.state["quick_replies"] = []

    def drain(self) -> List[Dict[str, Any]]:
        out, self.outbox = self.outbox, []
        return out

    def save(self) -> None:
        if self.on_save is not None:
            self.on_save(self.state)


def run_step(session: FlowSession, steps: Dict[int, StepHandler], action: Optional[str], value: Any) -> None:
    """Run the handler registered for the current flow_step."""
    step = session.state.get("flow_step")
    handler = steps.get(step) if isinstance(step, int) else None
    if handler is None:
        from . import flow_menu

        logger.warning(
            f"flow_step {step!r} is not valid for flow {session.state.get('current_flow')!r}; "
            "returning to main menu"
        )
        session.state["temp_data"] = {}
        flow_menu.show_main_menu(session)
        return
    handler(session, action, value)
