import re
from typing import Any, Optional

from state_io import Flow

from . import flow_checkin, flow_connect, flow_menu
from .formatting import bold, link
from .session import FlowSession, button
from .translations import SUPPORTED_LANGUAGES, t

CODE_RE = re.compile(r"^\d{6}$")

WELCOME_TEXT = (
    f"{bold('Your health, all in one place')} 👋\n\n"
    "✅ Track health & activity in one view\n"
    "✅ Join challenges that build healthy habits\n"
    "✅ Earn rewards for positive choices\n"
    "✅ Get AI-powered insights & guidance\n\n"
    f"{link('Learn more', 'https://www.strove.ai/')}\n\n"
    "We only message you if you opt in. Type STOP anytime to unsubscribe."
)


def language_buttons():
    return [
        button("English", "set_language", "English", type="primary"),
        button("IsiZulu", "set_language", "isiZulu"),
        button("Afrikaans", "set_language", "Afrikaans"),
    ]


def match_language(text: str) -> Optional[str]:
    lower = (text or "").strip().lower()
    for lang in SUPPORTED_LANGUAGES:
        if lower == lang.lower():
            return lang
    return None


def start_onboarding(session: FlowSession) -> None:
    session.goto(Flow.ONBOARDING, 0)
    session.say(WELCOME_TEXT)
    session.set_buttons(
        [
            button("✅ I agree – continue", "onboard_agree", type="primary"),
            button("❌ Not now", "onboard_decline", type="secondary"),
        ]
    )


def _step_agreement(session: FlowSession, action: Optional[str], value: Any) -> None:
    if action is None:
        lower = str(value).strip().lower()
        if lower in {"yes", "y", "agree", "i agree", "ok"}:
            action = "onboard_agree"
        elif lower in {"no", "n", "not now"}:
            action = "onboard_decline"
        else:
            session.say("Please tap “I agree” to continue, or “Not now”.")
            return

    if action == "onboard_agree":
        session.set_step(1)
        session.say(t(session.state, "language_prompt"))
        session.set_buttons(language_buttons())
    else:
        session.say("No problem. If you change your mind, just message Hi again.")
        session.clear_buttons()
        session.goto(Flow.INITIAL)


def _step_language(session: FlowSession, action: Optional[str], value: Any) -> None:
    if action == "set_language":
        session.echo(value)
        language = value
    else:
        language = match_language(value)
        if language is None:
            session.say(t(session.state, "language_prompt"))
            return
    session.user["language"] = language
    session.set_step(2)
    session.say(t(session.state, "onboard_link_account"))
    session.clear_buttons()


def _step_email(session: FlowSession, action: Optional[str], value: Any) -> None:
    if action is not None:
        return
    session.user["email"] = str(value).strip()
    session.set_step(3)
    session.say(t(session.state, "onboard_code_sent"))
    session.clear_buttons()


def _step_code(session: FlowSession, action: Optional[str], value: Any) -> None:
    if action is not None:
        return
    code = str(value).strip()
    if CODE_RE.match(code):
        session.set_step(4)
        session.say(t(session.state, "onboard_verified"))
    elif code.upper() == "RESEND":
        session.say(t(session.state, "onboard_code_resent"))
    else:
        session.say(t(session.state, "onboard_code_error"))


def _step_first_name(session: FlowSession, action: Optional[str], value: Any) -> None:
    if action is not None:
        return
    name = str(value).strip()
    session.user["first_name"] = name
    session.set_step(5)
    session.say(t(session.state, "onboard_surname", name=name))


def _step_surname(session: FlowSession, action: Optional[str], value: Any) -> None:
    if action is not None:
        return
    session.user["surname"] = str(value).strip()
    session.user["registered"] = True
    session.set_step(6)

    session.say(t(session.state, "onboard_account_created", name=session.user["first_name"]))
    session.pause(500)
    session.say(t(session.state, "onboard_first_action"))
    session.set_buttons(
        [
            button(t(session.state, "onboard_first_checkin"), "first_checkin", type="primary"),
            button(t(session.state, "onboard_connect_app"), "first_connect"),
            button(t(session.state, "onboard_skip"), "skip_first", type="secondary"),
        ]
    )


def _step_first_value(session: FlowSession, action: Optional[str], value: Any) -> None:
    if action == "first_checkin":
        flow_checkin.start_check_in(session)
    elif action == "first_connect":
        flow_connect.start_connect_app(session)
    else:
        flow_menu.show_main_menu(session)


STEPS = {
    0: _step_agreement,
    1: _step_language,
    2: _step_email,
    3: _step_code,
    4: _step_first_name,
    5: _step_surname,
    6: _step_first_value,
}
