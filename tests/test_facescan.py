"""Tests for the face scan results."""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest

from conftest import FIXED_NOW, actions, bot_texts
from flows import dispatch, flow_facescan
from flows.flow_facescan import (
    activity_level_from_pavs,
    bmi_status,
    bp_status,
    generate_face_scan_results,
    lifestyle_factors,
    overall_status,
    start_face_scan,
)
from state_io import Flow

SAST = timezone(timedelta(hours=2))


class ZeroRng:
    """randint always returns 0, so vitals sit at their baselines."""

    def randint(self, a, b):
        return 0


@pytest.fixture
def fixed_zone(monkeypatch):
    monkeypatch.setattr(flow_facescan, "_scan_timezone", lambda: SAST)


class TestClassification:
    @pytest.mark.parametrize(
        "days, level",
        [(None, None), (0, "sedentary"), (1, "light"), (2, "light"), (4, "moderate"), (7, "active")],
    )
    def test_activity_level(self, days, level):
        assert activity_level_from_pavs(days) == level

    def test_bp_status(self):
        assert bp_status(118, 78) == ("Normal", False)
        assert bp_status(125, 78) == ("Elevated", False)
        assert bp_status(132, 78) == ("Stage 1 hypertension", True)
        assert bp_status(120, 92) == ("Stage 2 hypertension", True)

    def test_bmi_status(self):
        assert bmi_status(17.0) == ("Underweight", True)
        assert bmi_status(22.0) == ("Normal weight", False)
        assert bmi_status(27.0) == ("Overweight", True)
        assert bmi_status(31.0) == ("Obese", True)

    def test_overall_status(self):
        assert overall_status(90) == "Excellent"
        assert overall_status(75) == "Good"
        assert overall_status(55) == "Fair"
        assert overall_status(45) == "Needs Attention"


class TestGenerateResults:
    def test_defaults_without_profile(self, fixed_zone):
        user = {"height": None, "weight": None, "pavs_days": None}
        results = generate_face_scan_results(user, lifestyle_factors(user), ZeroRng(), FIXED_NOW)
        assert results["heart_rate"] == 72
        assert (results["systolic"], results["diastolic"]) == (118, 78)
        assert results["spo2"] == 97
        assert results["resp_rate"] == 14
        # 75 kg at 170 cm
        assert results["bmi"] == 26.0
        assert results["bmi_status"] == "Overweight"
        assert results["heart_score"] == 75
        assert results["overall_status"] == "Good"
        assert results["cvd_risk"] == 1.0
        assert results["timestamp"] == "2026/03/10, 11:30:00"

    def test_active_user(self, fixed_zone):
        user = {"height": 180, "weight": 70, "pavs_days": 6}
        results = generate_face_scan_results(user, lifestyle_factors(user), ZeroRng(), FIXED_NOW)
        assert results["heart_rate"] == 64
        assert results["systolic"] == 113
        assert results["heart_score"] == 90
        assert results["overall_status"] == "Excellent"
        assert results["activity_level"] == "active"

    def test_risk_factors(self, fixed_zone):
        user = {"height": 170, "weight": 95, "pavs_days": 0}
        factors = {"smoker": "daily", "activity_level": "sedentary", "alcohol": "heavy", "conditions": "hypertension"}
        results = generate_face_scan_results(user, factors, ZeroRng(), FIXED_NOW)
        assert results["systolic"] == 118 + 10 + 8 + 8 + 15
        assert results["bp_status"] == "Stage 2 hypertension"
        assert results["heart_score"] == 40
        assert results["cvd_risk"] == 8.5

    def test_unknown_zone_falls_back_to_utc(self, monkeypatch):
        monkeypatch.setattr(flow_facescan, "FACE_SCAN_TIMEZONE", "Nowhere/Invalid")
        user = {}
        results = generate_face_scan_results(user, lifestyle_factors(user), ZeroRng(), FIXED_NOW)
        assert results["timestamp"] == "2026/03/10, 09:30:00"


class TestFaceScanFlow:
    def test_scan_awards_coins_once(self, registered_state, make_session, fixed_zone):
        session = make_session(registered_state)
        start_face_scan(session)
        assert registered_state["current_flow"] == Flow.FACE_SCAN
        assert len(bot_texts(session)) == 2

        dispatch.handle_button_click(session, "open_facescan")
        assert registered_state["flow_step"] == 1
        assert actions(session)[0] == "facescan_complete"

        dispatch.handle_button_click(session, "facescan_complete")
        texts = bot_texts(session)
        assert texts[0] == "📊 Processing your scan results..."
        assert "Personalised Health Report" in texts[1]
        assert "You earned 🪙 *50* coins." in texts[-1]
        assert "Milestone" in texts[-1]
        assert registered_state["coins"] == 50
        assert registered_state["face_scan_results"]["heart_score"] >= 40
        assert registered_state["last_face_scan"] == FIXED_NOW.isoformat()
        assert registered_state["flow_step"] == 0

        dispatch.handle_button_click(session, "facescan_complete")
        assert registered_state["coins"] == 50

    def test_info_keeps_step(self, registered_state, make_session):
        session = make_session(registered_state)
        start_face_scan(session)
        dispatch.handle_button_click(session, "facescan_info")
        assert registered_state["flow_step"] == 0
        assert "PPG" in bot_texts(session)[-1]

    def test_sedentary_recommendation(self, registered_state, make_session, fixed_zone):
        registered_state["user"]["pavs_days"] = 0
        registered_state["current_flow"] = Flow.FACE_SCAN
        registered_state["flow_step"] = 1
        session = make_session(registered_state)
        dispatch.handle_button_click(session, "facescan_complete")
        recommendations = [t for t in bot_texts(session) if "Recommendations" in t][0]
        assert "150 active minutes" in recommendations
