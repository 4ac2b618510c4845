from typing import Any, Optional

from state_io import Flow

from .formatting import bold, italic
from .session import FlowSession, button, menu_button

AI_PROMPTS = {
    "ai_analyze_week": (
        "Please analyze my week's health data. What patterns do you see? What am I doing "
        "well and what could I improve? Be specific about the data."
    ),
    "ai_nutrition": (
        "Based on my recent meals and health goals, give me some personalized nutrition "
        "tips. What should I focus on?"
    ),
    "ai_sleep": (
        "Look at my sleep data and check-ins. How is my sleep quality? What can I do to improve it?"
    ),
    "ai_motivation": (
        "I need some motivation! Look at my progress and give me an encouraging message. "
        "Remind me of my wins this week."
    ),
}


def personalized_greeting(session: FlowSession) -> str:
    hour = session.clock().hour
    name = session.user.get("first_name") or "there"
    if hour < 12:
        return f"Good morning, {name}! ☀️"
    if hour < 17:
        return f"Good afternoon, {name}! 👋"
    return f"Good evening, {name}! 🌙"


def start_ai_chat(session: FlowSession) -> None:
    session.goto(Flow.AI_CHAT, 0)
    session.state["conversation_history"] = []
    session.say(
        f"🤖 {bold('Strove AI Assistant')}\n\n"
        f"{personalized_greeting(session)}\n\n"
        "I can help you with:\n"
        "• Understanding your health data\n"
        "• Personalized wellness tips\n"
        "• Answering questions about your progress\n"
        "• Motivation and goal setting\n\n"
        f"{italic('Just type your question or pick a topic below.')}"
    )
    session.set_buttons(
        [
            button("📊 Analyze my week", "ai_analyze_week", type="primary"),
            button("💪 Tips & motivation", "ai_motivation"),
            button("🥗 Nutrition", "ai_nutrition"),
            button("😴 Sleep", "ai_sleep"),
            menu_button(session),
        ]
    )


def process_ai_chat(session: FlowSession, text: str) -> None:
    reply = session.assistant.reply(session.state, text, rng=session.rng)
    session.say(reply, delay_ms=300)
    session.set_buttons(
        [
            button("💬 Ask more", "ai_continue", type="primary"),
            button("📊 Analyze my week", "ai_analyze_week"),
            button("💪 Motivation", "ai_motivation"),
            menu_button(session),
        ]
    )


def handle_button(session: FlowSession, action: Optional[str], value: Any) -> None:
    if action == "ai_continue":
        session.say("Sure, what would you like to know? Type your question below.")
        session.clear_buttons()
        return
    prompt = AI_PROMPTS.get(action)
    if prompt is not None:
        process_ai_chat(session, prompt)


def handle_text(session: FlowSession, text: str) -> None:
    process_ai_chat(session, text)
