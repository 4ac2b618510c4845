from typing import Any, Optional

from state_io import Flow

from .formatting import WEB_APP_URLS, bold, italic, link
from .session import FlowSession, button, menu_button

COIN_MILESTONES = [
    (50, "You've hit 50 coins! 🪙"),
    (100, "100 coins — you can redeem your first reward! 🎁"),
    (250, "250 coins! You're on fire! 🔥"),
    (500, "500 coins — halfway to the big rewards! 💪"),
    (1000, "1,000 coins! You're a Strove legend! 🏆"),
]

REDEEM_MINIMUM = 100


def check_coin_milestone(old_coins: int, new_coins: int) -> Optional[str]:
    """Return the message of the first milestone crossed by this change, if any."""
    for threshold, message in COIN_MILESTONES:
        if old_coins < threshold <= new_coins:
            return message
    return None


def award_coins(session: FlowSession, amount: int) -> Optional[str]:
    old_coins = session.state.get("coins", 0)
    session.state["coins"] = old_coins + amount
    return check_coin_milestone(old_coins, session.state["coins"])


def show_coins(session: FlowSession) -> None:
    session.goto(Flow.COINS)
    session.say(
        f"🪙 {bold('Your Strove Coins')}\n\n"
        f"Balance: {bold(str(session.state['coins']))} coins\n\n"
        "What would you like to do?"
    )
    session.set_buttons(
        [
            button("🎁 Redeem rewards", "redeem_rewards", type="primary"),
            button("📈 Earn more", "earn_more"),
            menu_button(session),
        ]
    )


def show_recent_earnings(session: FlowSession) -> None:
    state = session.state
    check_ins = min(state["streak"], 7) * 10
    activity = state["weekly_activity"]["active_minutes"] // 10 * 5
    challenges = 25 if state["challenge_joined"] else 0
    session.say(
        "🧾 Recent earnings\n\n"
        f"• Check-ins: {check_ins} coins\n"
        f"• Activity: {activity} coins\n"
        f"• Challenges: {challenges} coins"
    )
    session.set_buttons(
        [
            button("Redeem rewards", "redeem_rewards", type="primary"),
            menu_button(session),
        ]
    )


def show_earn_more(session: FlowSession) -> None:
    session.say(
        f"📈 {bold('How to Earn Coins')}\n\n"
        "• ✅ Daily check-ins: 10-15 coins\n"
        "• 🏃 Log activity: up to 30 coins\n"
        "• 🏆 Challenges: bonus coins\n"
        "• 🫀 Face scan: 50 coins\n\n"
        "Want to earn some now?"
    )
    session.set_buttons(
        [
            button("✅ Check-in", "menu_checkin", type="primary"),
            button("🫀 Face scan", "menu_facescan"),
            button("🧾 Recent earnings", "recent_earnings"),
            menu_button(session),
        ]
    )


def show_redeem_rewards(session: FlowSession) -> None:
    balance = bold(str(session.state["coins"]))
    if session.state["coins"] < REDEEM_MINIMUM:
        session.say(
            f"🎁 {bold('Redeem Rewards')}\n\n"
            f"Your balance: {balance} coins\n\n"
            f"You need at least {REDEEM_MINIMUM} coins to redeem.\n\n"
            "Want a quick way to earn more?"
        )
        session.set_buttons(
            [
                button("✅ Check-in", "menu_checkin", type="primary"),
                button("🏃 Log activity", "menu_log"),
                menu_button(session),
            ]
        )
        return

    session.say(
        f"🎁 {bold('Redeem Rewards')}\n\n"
        f"Your balance: {balance} coins\n\n"
        f"{bold('Popular rewards:')}\n"
        "• ☕ Coffee voucher (100 coins)\n"
        "• 💆 Wellness item (200 coins)\n"
        "• 🏋️ Fitness gear (500 coins)\n\n"
        "Tap below to browse and redeem:\n\n"
        f"{link('🎁 Open Rewards Store', WEB_APP_URLS['REWARDS'])}"
    )
    session.set_buttons(
        [
            button("🎁 Open store", "open_rewards_store", type="primary"),
            button("📈 Earn more", "earn_more"),
            menu_button(session),
        ]
    )


def open_rewards_store(session: FlowSession) -> None:
    session.say(
        f"🎁 Rewards store: {WEB_APP_URLS['REWARDS']}\n\n"
        f"{italic('Browse and redeem in your browser.')}"
    )


ACTIONS = {
    "redeem_rewards": show_redeem_rewards,
    "earn_more": show_earn_more,
    "recent_earnings": show_recent_earnings,
    "open_rewards_store": open_rewards_store,
}


def handle_button(session: FlowSession, action: Optional[str], value: Any) -> None:
    handler = ACTIONS.get(action)
    if handler is not None:
        handler(session)
