"""Tests for state persistence."""

import json
import sys
from datetime import date
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest

from state_io import Flow, default_state, load_state, merge_state, reset_state, save_state
from storage import load_json, today_str, yesterday_str


class TestDefaults:
    def test_fresh_state(self):
        state = default_state()
        assert state["current_flow"] == Flow.INITIAL
        assert state["flow_step"] == 0
        assert state["user"]["registered"] is False
        assert state["challenge_target"] == 150
        assert state["quick_replies"] == []

    def test_default_is_a_copy(self):
        a = default_state()
        a["user"]["goals"].append("x")
        assert default_state()["user"]["goals"] == []

    def test_merge_keeps_new_nested_fields(self):
        merged = merge_state({"user": {"first_name": "Sam"}, "coins": 40})
        assert merged["user"]["first_name"] == "Sam"
        assert merged["user"]["connected_apps"] == []
        assert merged["coins"] == 40
        assert merged["weekly_activity"]["steps"] == 32450


class TestLoadSave:
    @pytest.fixture
    def base_dir(self, tmp_path):
        return str(tmp_path)

    def test_missing_file_gives_defaults(self, base_dir):
        state = load_state("nobody", base_dir)
        assert state["user"]["registered"] is False

    def test_round_trip(self, base_dir):
        state = default_state()
        state["coins"] = 120
        state["user"]["first_name"] = "Lerato"
        save_state("lerato", state, base_dir)

        loaded = load_state("lerato", base_dir)
        assert loaded["coins"] == 120
        assert loaded["user"]["first_name"] == "Lerato"

    def test_corrupt_file_gives_defaults(self, base_dir, tmp_path):
        path = tmp_path / "broken" / "state.json"
        path.parent.mkdir()
        path.write_text("{not json", encoding="utf-8")
        state = load_state("broken", base_dir)
        assert state == load_state("someone_else", base_dir)

    def test_non_object_file_gives_defaults(self, base_dir, tmp_path):
        path = tmp_path / "listy" / "state.json"
        path.parent.mkdir()
        path.write_text(json.dumps([1, 2, 3]), encoding="utf-8")
        assert load_state("listy", base_dir)["coins"] == 0

    def test_check_in_today_recomputed(self, base_dir):
        day = date(2026, 3, 10)
        state = default_state()
        state["last_check_in"] = today_str(day)
        state["check_in_today"] = True
        save_state("u", state, base_dir)

        assert load_state("u", base_dir, today=day)["check_in_today"] is True
        assert load_state("u", base_dir, today=date(2026, 3, 11))["check_in_today"] is False

    def test_reset_removes_file(self, base_dir, tmp_path):
        state = default_state()
        state["coins"] = 10
        save_state("gone", state, base_dir)
        fresh = reset_state("gone", base_dir)
        assert fresh["coins"] == 0
        assert not (tmp_path / "gone" / "state.json").exists()


class TestStorageHelpers:
    def test_dates(self):
        day = date(2026, 3, 1)
        assert today_str(day) == "2026-03-01"
        assert yesterday_str(day) == "2026-02-28"

    def test_load_json_default(self, tmp_path):
        assert load_json(str(tmp_path / "missing.json"), {"a": 1}) == {"a": 1}
