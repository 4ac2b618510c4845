"""
Face scan health check. The scan itself runs in the web app; when the user
says it is done we generate simulated vitals from the profile and report them.
"""

import logging
import random
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from chat_config import FACE_SCAN_TIMEZONE
from state_io import Flow

from . import flow_coins
from .formatting import WEB_APP_URLS, bold, italic, link, text_progress_bar
from .session import FlowSession, button, menu_button

logger = logging.getLogger(__name__)

FACE_SCAN_COINS = 50
DEFAULT_HEIGHT_CM = 170
DEFAULT_WEIGHT_KG = 75


def activity_level_from_pavs(pavs_days: Optional[int]) -> Optional[str]:
    if pavs_days is None:
        return None
    if pavs_days == 0:
        return "sedentary"
    if pavs_days <= 2:
        return "light"
    if pavs_days <= 4:
        return "moderate"
    return "active"


def lifestyle_factors(user: Dict[str, Any]) -> Dict[str, Any]:
    # Only activity level is known; smoking, alcohol and conditions are not collected.
    return {
        "smoker": None,
        "activity_level": activity_level_from_pavs(user.get("pavs_days")),
        "alcohol": None,
        "conditions": None,
    }


def bp_status(systolic: int, diastolic: int):
    """Return (label, warning) for a blood pressure reading."""
    if systolic >= 140 or diastolic >= 90:
        return "Stage 2 hypertension", True
    if systolic >= 130 or diastolic >= 80:
        return "Stage 1 hypertension", True
    if systolic >= 120:
        return "Elevated", False
    return "Normal", False


def bmi_status(bmi: float):
    if bmi >= 30:
        return "Obese", True
    if bmi >= 25:
        return "Overweight", True
    if bmi < 18.5:
        return "Underweight", True
    return "Normal weight", False


def overall_status(heart_score: int) -> str:
    if heart_score >= 80:
        return "Excellent"
    if heart_score >= 70:
        return "Good"
    if heart_score >= 50:
        return "Fair"
    return "Needs Attention"


def _scan_timezone():
    try:
        return ZoneInfo(FACE_SCAN_TIMEZONE)
    except ZoneInfoNotFoundError:
        logger.warning(f"Unknown time zone {FACE_SCAN_TIMEZONE!r}; using UTC")
        return timezone.utc


def generate_face_scan_results(
    user: Dict[str, Any],
    factors: Dict[str, Any],
    rng: random.Random,
    now: datetime,
) -> Dict[str, Any]:
    height_m = (user.get("height") or DEFAULT_HEIGHT_CM) / 100
    weight = user.get("weight") or DEFAULT_WEIGHT_KG
    bmi = weight / (height_m * height_m)

    heart_rate = 72 + rng.randint(-10, 9)
    systolic = 118 + rng.randint(-5, 9)
    diastolic = 78 + rng.randint(-3, 6)
    spo2 = 97 + rng.randint(0, 2)
    resp_rate = 14 + rng.randint(-2, 1)

    smoker = factors.get("smoker")
    activity = factors.get("activity_level")

    if smoker == "daily":
        heart_rate += 8
        systolic += 10
    elif smoker == "occasional":
        heart_rate += 4
        systolic += 5

    if activity == "sedentary":
        heart_rate += 10
        systolic += 8
    elif activity == "active":
        heart_rate -= 8
        systolic -= 5

    if factors.get("alcohol") == "heavy":
        systolic += 8
        diastolic += 5

    if factors.get("conditions") == "hypertension":
        systolic += 15
        diastolic += 10

    heart_score = 85
    if bmi > 25:
        heart_score -= 10
    if bmi > 30:
        heart_score -= 10
    if smoker == "daily":
        heart_score -= 15
    if activity == "sedentary":
        heart_score -= 10
    if activity == "active":
        heart_score += 5
    if systolic > 130:
        heart_score -= 10
    heart_score = max(40, min(95, heart_score))

    cvd_risk = 1.0
    if smoker == "daily":
        cvd_risk += 2.5
    if bmi > 30:
        cvd_risk += 1.5
    if systolic > 140:
        cvd_risk += 2.0
    if factors.get("conditions") == "hypertension":
        cvd_risk += 1.5
    cvd_risk = max(0.5, min(15.0, cvd_risk))

    bp_label, bp_warning = bp_status(systolic, diastolic)
    bmi_label, bmi_warning = bmi_status(bmi)

    local_now = now.astimezone(_scan_timezone())

    return {
        "heart_rate": heart_rate,
        "systolic": systolic,
        "diastolic": diastolic,
        "spo2": spo2,
        "resp_rate": resp_rate,
        "bmi": round(bmi, 1),
        "bmi_status": bmi_label,
        "bmi_warning": bmi_warning,
        "bp_status": bp_label,
        "bp_warning": bp_warning,
        "heart_score": heart_score,
        "cvd_risk": round(cvd_risk, 1),
        "overall_status": overall_status(heart_score),
        "activity_level": activity,
        "timestamp": local_now.strftime("%Y/%m/%d, %H:%M:%S"),
    }


def start_face_scan(session: FlowSession) -> None:
    session.goto(Flow.FACE_SCAN, 0)
    session.say(
        f"🫀 {bold('Health Check - Face Scan')}\n\n"
        "Get a personalized health report with estimated vitals using your camera.\n\n"
        f"This takes about 2 minutes and earns you {bold(f'{FACE_SCAN_COINS} coins')}.\n\n"
        f"⚠️ {bold('Disclaimer')}\n"
        "Face scan outputs are non-diagnostic estimates. Do not use for medical decisions. "
        "Seek professional advice for health concerns."
    )
    session.pause(500)
    session.say(
        f"📱 {bold('How it works:')}\n\n"
        "1. Tap the link below to open the scan\n"
        "2. Allow camera access when prompted\n"
        "3. Follow the on-screen instructions\n"
        "4. Results will appear here when complete\n\n"
        f"{link('🫀 Start Face Scan', WEB_APP_URLS['FACE_SCAN'])}"
    )
    session.set_buttons(
        [
            button("🫀 Open scan", "open_facescan", type="primary"),
            button("❓ How it works", "facescan_info"),
            menu_button(session),
        ]
    )


def _step_start(session: FlowSession, action: Optional[str], value: Any) -> None:
    if action == "open_facescan":
        session.set_step(1)
        tip = italic("Tip: keep this chat open, your results will appear here.")
        session.say(
            f"🫀 Open the face scan: {WEB_APP_URLS['FACE_SCAN']}\n\n"
            f"Complete the scan there, then return here.\n\n{tip}"
        )
        session.set_buttons(
            [
                button("✅ Scan complete", "facescan_complete", type="primary"),
                button("🔄 Try again", "open_facescan"),
                menu_button(session),
            ]
        )
    elif action == "facescan_info":
        session.say(
            f"📱 {bold('About Face Scan')}\n\n"
            "Using photoplethysmography (PPG), we analyze subtle color changes "
            "in your face to estimate:\n\n"
            "• ❤️ Heart rate\n"
            "• 🩺 Blood pressure\n"
            "• 🫁 Blood oxygen (SpO2)\n"
            "• 💨 Breathing rate\n\n"
            f"{italic('The scan takes about 30 seconds and requires good lighting.')}"
        )
        session.set_buttons(
            [
                button("🫀 Start scan", "open_facescan", type="primary"),
                menu_button(session),
            ]
        )


def _step_waiting(session: FlowSession, action: Optional[str], value: Any) -> None:
    if action == "facescan_complete":
        complete_face_scan(session)
    elif action == "open_facescan":
        session.say(f"🔄 Reopened face scan: {WEB_APP_URLS['FACE_SCAN']}")


def complete_face_scan(session: FlowSession) -> None:
    state = session.state
    session.say("📊 Processing your scan results...")
    session.pause(1500)

    now = session.clock()
    results = generate_face_scan_results(
        session.user, lifestyle_factors(session.user), session.rng, now
    )
    state["face_scan_results"] = results
    state["last_face_scan"] = now.isoformat()
    milestone = flow_coins.award_coins(session, FACE_SCAN_COINS)
    # A second "Scan complete" tap must not pay out again.
    session.set_step(0)

    show_face_scan_results(session, results, FACE_SCAN_COINS, milestone)


def show_face_scan_results(
    session: FlowSession,
    results: Dict[str, Any],
    coins_earned: int,
    milestone: Optional[str] = None,
) -> None:
    status_emoji = {"Excellent": "🌟", "Good": "✅", "Fair": "⚠️"}.get(results["overall_status"], "❗")
    any_warning = results["bp_warning"] or results["bmi_warning"]
    verdict = (
        "Good overall heart health with a couple of areas to monitor."
        if any_warning
        else "Great heart health! Keep up the healthy habits!"
    )

    session.say(
        f"🫀 {bold('Personalised Health Report')}\n\n"
        f"{bold('Health Snapshot')}\n"
        f"Overall: {status_emoji} {results['overall_status']}\n\n"
        f"{bold('Heart Health Score')}\n"
        f"{text_progress_bar(results['heart_score'], 100)}\n"
        f"{results['heart_score']} / 100\n\n"
        f"{verdict}\n\n"
        f"📅 {results['timestamp']}"
    )

    hr_label = "✅ Normal" if results["heart_rate"] <= 100 else "⚠️ Elevated"
    bp_label = ("⚠️ " if results["bp_warning"] else "✅ ") + results["bp_status"]
    bmi_label = ("⚠️ " if results["bmi_warning"] else "✅ ") + results["bmi_status"]
    score_label = "✅ Good" if results["heart_score"] >= 70 else "⚠️ Room to improve"
    risk_label = "✅ Low" if results["cvd_risk"] < 5 else "⚠️ Moderate"

    session.pause(800)
    session.say(
        f"📊 {bold('Your Results')}\n\n"
        f"❤️ {bold('Heart Health Score')}\n   {results['heart_score']} — {score_label}\n\n"
        f"📈 {bold('10-Year Heart Risk')}\n   {results['cvd_risk']}% — {risk_label}\n\n"
        f"💓 {bold('Resting Heart Rate')}\n   {results['heart_rate']} bpm — {hr_label}\n\n"
        f"🩺 {bold('Blood Pressure')}\n   {results['systolic']}/{results['diastolic']} mmHg — {bp_label}\n\n"
        f"⚖️ {bold('BMI')}\n   {results['bmi']} kg/m² — {bmi_label}\n\n"
        f"💨 {bold('Breathing Rate')}\n   {results['resp_rate']} breaths/min — ✅ Normal\n\n"
        f"🫁 {bold('Blood Oxygen')}\n   {results['spo2']}% — ✅ Normal"
    )

    meaning = [
        f"Your heart health score is {'good' if results['heart_score'] >= 70 else 'fair'}"
        f"{', but some areas need attention' if any_warning else ''}."
    ]
    if results["bp_warning"]:
        meaning.append(
            f"{results['bp_status']} detected. Confirm with a validated arm cuff "
            "and discuss with your clinician if elevated."
        )
    if results["bmi_warning"]:
        meaning.append(
            f"BMI is in the {results['bmi_status'].lower()} range. Modest lifestyle changes can help."
        )
    meaning.append("Heart rate and oxygen levels are within normal ranges.")

    session.pause(800)
    session.say(f"💡 {bold('What This Means')}\n\n" + "\n".join(f"• {p}" for p in meaning))

    actions = []
    if results["bp_warning"]:
        actions.append(
            "🩺 Repeat blood pressure with a validated arm cuff and see your GP "
            "if elevated readings persist."
        )
    if results["bmi_warning"] and results["bmi"] >= 25:
        actions.append(
            "🥗 Use the meal scanner to track meals and choose lower-salt, higher-fibre options."
        )
    if results.get("activity_level") in ("sedentary", "light"):
        actions.append("🏃 Aim for 150 active minutes this week to meet the WHO guideline.")
    actions.append("😴 Track sleep and aim for at least 7 hours per night.")

    session.pause(800)
    session.say(
        f"✅ {bold('Recommendations')}\n\n"
        f"{bold('Lifestyle Actions:')}\n"
        + "\n".join(f"• {a}" for a in actions)
        + f"\n\n{bold('Next Steps:')}\n• 🔄 Repeat the face scan in 2 weeks to track trends."
    )

    coins_message = (
        f"🎉 {bold('Health check complete!')}\n\n"
        f"You earned 🪙 {bold(str(coins_earned))} coins.\n\n"
        "Track your progress by doing another scan in 2 weeks."
    )
    if milestone:
        coins_message += f"\n\n🎉 {bold('Milestone:')} {milestone}"
    session.pause(500)
    session.say(coins_message)

    session.state["temp_data"] = {}
    session.set_buttons(
        [
            button("📊 Health Summary", "menu_summary", type="primary"),
            button("🏃 Log Activity", "menu_log"),
            menu_button(session),
        ]
    )


STEPS = {
    0: _step_start,
    1: _step_waiting,
}
