import logging
from typing import Any, Optional

from state_io import Flow

from .formatting import bold
from .session import FlowSession, button, menu_button

logger = logging.getLogger(__name__)

PRIVACY_FORM_URL = "https://www.strove.ai/privacy"


def start_help_flow(session: FlowSession) -> None:
    session.goto(Flow.HELP, 0)
    session.state["temp_data"] = {}
    session.say(f"❓ {bold('How can we help?')}\n\nChoose a topic below:")
    session.set_buttons(
        [
            button("📖 How to use", "help_usage", type="primary"),
            button("💬 Contact support", "help_support"),
            button("🔒 Privacy", "help_privacy"),
            menu_button(session),
        ]
    )


def show_usage(session: FlowSession) -> None:
    session.say(
        "Here are the main commands:\n\n"
        "• Check-in (daily)\n"
        "• Health summary (weekly/monthly)\n"
        "• Log activity\n"
        "• Coins / Redeem\n"
        "• Challenges\n\n"
        "Type MENU any time to see options.\n"
        "Type HELP for assistance.\n"
        "Type STOP to unsubscribe."
    )
    session.set_buttons(
        [
            button("🔒 Privacy", "help_privacy"),
            menu_button(session),
        ]
    )


def show_support(session: FlowSession) -> None:
    session.say(
        f"💬 {bold('Contact Support')}\n\n"
        "If something isn't working, we can help.\n\n"
        "Choose the type of issue:"
    )
    session.set_buttons(
        [
            button("🔧 Technical", "support_type", "Technical"),
            button("🎁 Rewards/Account", "support_type", "Rewards/Account"),
            button("← Back", "menu_help", type="secondary"),
        ]
    )


def choose_support_type(session: FlowSession, value: Any) -> None:
    support_type = str(value or "General")
    session.echo(support_type)
    session.temp["support_type"] = support_type
    session.set_step(1)
    session.say(
        f"Thanks, we've logged this as a {support_type} issue.\n\n"
        "Please describe the issue in one sentence."
    )
    session.clear_buttons()


def show_privacy(session: FlowSession) -> None:
    session.say(
        "We only use your data to provide Strove services in line with our privacy policy.\n\n"
        "You can:\n"
        "• opt out any time (type STOP)\n"
        "• request data access or deletion via a secure form\n\n"
        f"Request data access/deletion: {PRIVACY_FORM_URL}"
    )
    session.set_buttons([menu_button(session)])


def handle_button(session: FlowSession, action: Optional[str], value: Any) -> None:
    if action == "help_usage":
        show_usage(session)
    elif action == "help_support":
        show_support(session)
    elif action == "support_type":
        choose_support_type(session, value)
    elif action == "help_privacy":
        show_privacy(session)


def handle_text(session: FlowSession, text: str) -> bool:
    """The issue description after a support type was chosen. Returns False otherwise."""
    if session.state.get("flow_step") != 1:
        return False
    support_type = session.temp.get("support_type", "General")
    logger.info(f"Support request ({support_type}): {text.strip()}")
    session.state["temp_data"] = {}
    session.set_step(0)
    session.say(
        "✅ Got it. Our team will get back to you as soon as possible.\n\n"
        "Is there anything else we can help with?"
    )
    session.set_buttons(
        [
            button("Help menu", "menu_help"),
            menu_button(session),
        ]
    )
    return True
