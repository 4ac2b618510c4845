from typing import Any, Optional

from state_io import Flow

from .formatting import WEB_APP_URLS, bold, italic, link
from .session import FlowSession, button, menu_button

DEFAULT_APP_NAME = "Fitness App"
SUPPORTED_APPS = ["Garmin", "Fitbit", "Strava", "Polar"]


def start_connect_app(session: FlowSession) -> None:
    session.goto(Flow.CONNECT_APP, 0)
    apps = "\n".join(f"• {name}" for name in SUPPORTED_APPS)
    session.say(
        f"🔗 {bold('Connect Fitness App')}\n\n"
        "Connect your favorite fitness tracker to sync your activity automatically.\n\n"
        f"{bold('Supported apps:')}\n{apps}\n\n"
        "Tap below to securely connect in your browser:\n\n"
        f"{link('🔗 Open Connection Portal', WEB_APP_URLS['CONNECT_APP'])}\n\n"
        f"{italic('You will return here once connected.')}"
    )
    session.set_buttons(
        [
            button("🔗 Open portal", "open_connect_portal", type="primary"),
            button("📝 Log manually", "menu_log"),
            menu_button(session),
        ]
    )


def connect_app(session: FlowSession, name: str = DEFAULT_APP_NAME) -> None:
    apps = session.user.setdefault("connected_apps", [])
    if name not in apps:
        apps.append(name)


def handle_button(session: FlowSession, action: Optional[str], value: Any) -> None:
    if action == "open_connect_portal":
        session.say(
            f"🔗 Connection portal: {WEB_APP_URLS['CONNECT_APP']}\n\n"
            "Complete the connection in your browser, then return here.\n\n"
            f"{italic('Once connected, your activity will sync automatically.')}"
        )
        session.set_buttons(
            [
                button("✅ I'm connected", "confirm_connected", type="primary"),
                button("📝 Log manually", "menu_log"),
                menu_button(session),
            ]
        )
    elif action == "confirm_connected":
        connect_app(session, value or DEFAULT_APP_NAME)
        session.say(
            f"✅ {bold('Connected!')}\n\n"
            "We'll start syncing your activity data automatically.\n\n"
            "What would you like to do next?"
        )
        session.set_buttons(
            [
                button("✅ Do check-in", "menu_checkin", type="primary"),
                button("📊 Health summary", "menu_summary"),
                menu_button(session),
            ]
        )
