"""
Canned replies used when the chat-completion API is not configured or fails.
They still read the user's data so the answer stays personal.
"""

import random
from typing import Any, Dict

HEALTH_TIPS = [
    "Small consistent actions beat big sporadic efforts. Try adding just 5 more minutes of movement today!",
    "Hydration is key, try drinking a glass of water right now! 💧",
    "Take a 2-minute stretch break. Your body will thank you!",
    "Deep breathing for 60 seconds can reduce stress significantly.",
    "A 10-minute walk after meals can help with digestion and blood sugar.",
    "Try to get some natural light within 30 minutes of waking up.",
    "Eating slowly and mindfully can help you feel more satisfied with less food.",
]


def random_health_tip(rng: random.Random | None = None) -> str:
    return (rng or random).choice(HEALTH_TIPS)


def _average_meal_score(state: Dict[str, Any]) -> str:
    scores = [m["score"] for m in state.get("meal_history", []) if m.get("score") is not None]
    if not scores:
        return "N/A"
    return f"{sum(scores) / len(scores):.1f}"


def fallback_response(state: Dict[str, Any], message: str, rng: random.Random | None = None) -> str:
    lower = (message or "").lower()
    data = state["weekly_activity"]
    name = state["user"].get("first_name") or "there"

    if any(k in lower for k in ("analyze", "week", "summary")):
        activity_note = (
            "🎉 Great job staying active!"
            if data["active_minutes"] >= 100
            else "💪 Try to add a bit more movement this week."
        )
        sleep_note = (
            "Your sleep quality is good!"
            if data["sleep_quality"] >= 70
            else "Consider improving your sleep routine."
        )
        return (
            f"Hey {name}! 📊 Looking at your week:\n\n"
            f"You've logged {data['active_minutes']} active minutes and {data['steps']:,} steps. "
            f"Your sleep has been averaging {data['avg_sleep']} with a quality score of "
            f"{data['sleep_quality']}/100.\n\n"
            f"{activity_note} {sleep_note}\n\n"
            "Keep going, consistency is key! 🔥"
        )

    if any(k in lower for k in ("nutrition", "meal", "food", "eat")):
        return (
            f"🥗 Based on your recent meals (avg score: {_average_meal_score(state)}/10):\n\n"
            "• Try to include more vegetables with each meal\n"
            "• Stay hydrated: aim for 8 glasses of water daily\n"
            "• Balance your plate: 1/2 veggies, 1/4 protein, 1/4 carbs\n\n"
            "Small changes add up! Keep logging your meals to track progress. 🍎"
        )

    if any(k in lower for k in ("sleep", "tired", "rest")):
        return (
            "😴 Your sleep insights:\n\n"
            f"You're averaging {data['avg_sleep']} with a quality score of {data['sleep_quality']}/100.\n\n"
            "Tips for better sleep:\n"
            "• Aim for 7-9 hours each night\n"
            "• Keep a consistent sleep schedule\n"
            "• Avoid screens 1 hour before bed\n"
            "• Keep your room cool and dark\n\n"
            "Good sleep is the foundation of good health! 🌙"
        )

    if any(k in lower for k in ("motivat", "encourage", "help")):
        return (
            f"💪 Hey {name}, you've got this!\n\n"
            "Look at what you've already achieved:\n"
            f"• {state.get('streak', 0)} day check-in streak 🔥\n"
            f"• {data['steps']:,} steps this week\n"
            f"• {state.get('coins', 0)} coins earned 🪙\n\n"
            "Every small step counts. Focus on being better than yesterday!\n\n"
            "Keep showing up. 🌟"
        )

    return (
        f"Thanks for your question, {name}! 💬\n\n"
        f"Here's a quick health tip: {random_health_tip(rng)}\n\n"
        "Try the quick action buttons below or type MENU for more options!"
    )
