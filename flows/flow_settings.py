from typing import Any, Optional

from state_io import Flow

from . import flow_profile
from .flow_onboarding import language_buttons, match_language
from .formatting import bold, italic
from .session import FlowSession, button, menu_button
from .translations import t

SETTINGS_OPTIONS = [
    ("1", "🔔 Reminder preferences", "settings_reminders"),
    ("2", "🎯 Goals", "settings_goals"),
    ("3", "👤 Profile", "settings_profile"),
    ("4", "🔗 Connected apps", "settings_apps"),
    ("5", "🌐 Language", "settings_language"),
    ("6", "🛑 Stop messages", "settings_stop"),
]

REMINDER_LABELS = {"daily": "Daily", "few": "Few times a week", "never": "Never"}


def show_settings(session: FlowSession) -> None:
    session.goto(Flow.SETTINGS, 0)
    options = "\n".join(f"{key}. {label}" for key, label, _ in SETTINGS_OPTIONS)
    session.say(
        f"⚙️ {bold('Settings')}\n\n"
        "What would you like to change?\n\n"
        f"{options}\n\n"
        f"{italic('Reply with a number or choose below:')}"
    )
    session.set_buttons(
        [
            button("🌐 Language", "settings_language", type="primary"),
            button("🔔 Reminders", "settings_reminders"),
            menu_button(session),
        ]
    )


def unsubscribe(session: FlowSession) -> None:
    session.goto(Flow.INITIAL, 0)
    session.state["temp_data"] = {}
    session.say(t(session.state, "unsubscribed"))
    session.clear_buttons()


def _back_buttons(session: FlowSession):
    return [
        button(t(session.state, "menu_settings"), "menu_settings"),
        menu_button(session),
    ]


def show_reminder_options(session: FlowSession) -> None:
    session.say("How often would you like a check-in reminder?")
    session.set_buttons(
        [
            button("Daily", "set_reminder", "daily", type="primary"),
            button("Few times a week", "set_reminder", "few"),
            button("Never", "set_reminder", "never", type="secondary"),
        ]
    )


def set_reminder(session: FlowSession, value: Any) -> None:
    if value not in REMINDER_LABELS:
        return
    session.echo(REMINDER_LABELS[value])
    session.state["reminder_frequency"] = value
    session.say("✅ Done. Reminder preferences updated.")
    session.set_buttons(_back_buttons(session))


def show_connected_apps(session: FlowSession) -> None:
    apps = session.user.get("connected_apps") or []
    if not apps:
        session.say("You don't have any connected apps yet.")
        session.set_buttons(
            [
                button("🔗 Connect", "goto_connect", type="primary"),
                button("Back", "menu_settings", type="secondary"),
            ]
        )
        return
    session.say(f"✅ Connected: {', '.join(apps)}\n\nWhat would you like to do?")
    session.set_buttons(
        [
            button("Reconnect", "goto_connect"),
            button("Disconnect", "disconnect_confirm"),
            button("Back", "menu_settings", type="secondary"),
        ]
    )


def confirm_disconnect(session: FlowSession) -> None:
    apps = session.user.get("connected_apps") or []
    if not apps:
        show_connected_apps(session)
        return
    session.say(
        f"Are you sure you want to disconnect {apps[-1]}?\n\n"
        "We won't pull activity data from it anymore."
    )
    session.set_buttons(
        [
            button("Yes, disconnect", "disconnect_app", type="secondary"),
            button("Cancel", "menu_settings"),
        ]
    )


def disconnect_app(session: FlowSession) -> None:
    apps = session.user.get("connected_apps") or []
    if not apps:
        show_connected_apps(session)
        return
    name = apps.pop()
    session.say(f"✅ {name} disconnected.")
    session.set_buttons(_back_buttons(session))


def show_language_options(session: FlowSession) -> None:
    session.say(t(session.state, "language_prompt"))
    session.set_buttons(language_buttons())


def set_language(session: FlowSession, value: Any, echo: bool = True) -> None:
    language = match_language(str(value or ""))
    if language is None:
        return
    if echo:
        session.echo(language)
    session.user["language"] = language
    session.say(t(session.state, "language_updated"))
    session.set_buttons(_back_buttons(session))


def confirm_stop(session: FlowSession) -> None:
    session.say("If you stop messages, we won't contact you again unless you restart.")
    session.set_buttons(
        [
            button("Stop messages", "confirm_stop", type="secondary"),
            button("Cancel", "menu_settings"),
        ]
    )


def handle_button(session: FlowSession, action: Optional[str], value: Any) -> None:
    if action == "settings_reminders":
        show_reminder_options(session)
    elif action == "set_reminder":
        set_reminder(session, value)
    elif action == "settings_goals":
        flow_profile.start_extended_profile(session, Flow.SETTINGS, goals_only=True)
    elif action == "settings_profile":
        flow_profile.start_extended_profile(session, Flow.SETTINGS)
    elif action == "settings_apps":
        show_connected_apps(session)
    elif action == "disconnect_confirm":
        confirm_disconnect(session)
    elif action == "disconnect_app":
        disconnect_app(session)
    elif action == "settings_language":
        show_language_options(session)
    elif action == "set_language":
        set_language(session, value)
    elif action == "settings_stop":
        confirm_stop(session)
    elif action == "confirm_stop":
        unsubscribe(session)


def handle_text(session: FlowSession, text: str) -> bool:
    """Handle a typed option number or language name. Returns False if not understood."""
    choice = (text or "").strip()
    for key, _label, action in SETTINGS_OPTIONS:
        if choice == key:
            handle_button(session, action, None)
            return True
    if match_language(choice) is not None:
        set_language(session, choice, echo=False)
        return True
    return False
