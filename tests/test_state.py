"""Tests for trendideas/state.py: RunState."""

import json

from trendideas.state import STAGES, RunState


class TestRunState:
    def test_init_creates_state(self):
        state = RunState("123")
        assert state.run_id == "123"
        assert state.state == {}

    def test_init_preserves_existing_state(self):
        record = {"run_id": "1", "stages": {"collect": {"status": "done"}}}
        state = RunState("ignored", record)
        assert state.run_id == "1"
        assert state.is_done("collect")

    def test_complete_stage(self):
        state = RunState("1")
        state.complete_stage("collect")
        assert state.is_done("collect")
        assert "timestamp" in state.state["collect"]

    def test_complete_stage_with_artifacts(self):
        state = RunState("1")
        state.complete_stage("collect", {"signals": {"community": 12, "search": 4}})
        assert state.get_artifact("collect", "signals") == {"community": 12, "search": 4}

    def test_fail_stage(self):
        state = RunState("1")
        state.fail_stage("aggregate", "No strength scorer")
        assert state.is_failed("aggregate")
        assert not state.is_done("aggregate")
        assert state.state["aggregate"]["error"] == "No strength scorer"

    def test_skip_stage(self):
        state = RunState("1")
        state.skip_stage("generate", "no trends")
        assert not state.is_done("generate")
        assert state.state["generate"]["reason"] == "no trends"

    def test_get_artifact_default(self):
        assert RunState("1").get_artifact("store", "ids", []) == []

    def test_summary(self):
        state = RunState("1")
        state.complete_stage("collect")
        state.fail_stage("aggregate", "error")
        state.skip_stage("generate")
        summary = state.summary()
        assert "[+] collect" in summary
        assert "[!] aggregate" in summary
        assert "[-] generate" in summary
        assert "[ ] select" in summary

    def test_save_and_reload(self, tmp_path):
        path = tmp_path / "runs" / "1.json"
        state = RunState("1")
        state.complete_stage("collect")
        state.complete_stage("store", {"ids": ["a", "b"]})
        state.save(path)

        state2 = RunState("x", json.loads(path.read_text()))
        assert state2.run_id == "1"
        assert state2.is_done("collect")
        assert state2.get_artifact("store", "ids") == ["a", "b"]
        assert not state2.is_done("select")

    def test_stages_list(self):
        assert STAGES[0] == "collect"
        assert STAGES[-1] == "select"
        assert len(STAGES) == 5
