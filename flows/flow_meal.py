from state_io import Flow
from storage import today_str

from .formatting import bold
from .session import FlowSession, button, menu_button

MEAL_SCORES = [6, 7, 8, 9]
MEAL_HISTORY_LIMIT = 30

POSITIVES = [
    "Good protein content",
    "Nice variety of vegetables",
    "Good portion size",
    "Balanced macros",
]

IMPROVEMENTS = [
    "Add more leafy greens",
    "Consider a smaller portion of carbs",
    "Add a source of healthy fats",
    "Include more fiber",
]


def show_meal_scan(session: FlowSession) -> None:
    session.goto(Flow.MEAL_SCAN, 0)
    session.say(
        "🍽 Send a photo of your meal and we'll give you simple feedback.\n\n"
        "Just upload or describe your meal to get started."
    )
    session.clear_buttons()


def handle_text(session: FlowSession, text: str) -> None:
    description = (text or "").strip()
    if not description:
        return

    session.say("Analyzing your meal...")
    session.pause(1500)

    rng = session.rng
    score = rng.choice(MEAL_SCORES)
    positive = rng.choice(POSITIVES)
    improvement = rng.choice(IMPROVEMENTS)

    history = session.state.setdefault("meal_history", [])
    history.append(
        {
            "date": today_str(session.today()),
            "meal": "Meal",
            "score": score,
            "notes": description,
            "calories": None,
        }
    )
    del history[:-MEAL_HISTORY_LIMIT]

    session.say(
        f"🍽 {bold('Meal feedback')}\n\n"
        f"Score: {score}/10\n\n"
        f"👍 {positive}\n"
        f"➕ {improvement}\n\n"
        "Want to scan another?"
    )
    session.set_buttons(
        [
            button("Scan another", "menu_meal", type="primary"),
            menu_button(session),
        ]
    )
