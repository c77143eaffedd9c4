"""Per-run stage tracking, saved as JSON for inspection after a run."""

import json
from datetime import datetime, timezone
from pathlib import Path

# Ordered pipeline stages
STAGES = ["collect", "aggregate", "generate", "store", "select"]


class RunState:
    """Tracks completion per stage of one pipeline run.

    Each stage records: status (done/failed/skipped), timestamp, artifacts.
    A stage is only marked done once its whole output has been handed off.
    """

    def __init__(self, run_id: str, record: dict = None):
        self.record = record if record is not None else {}
        self.record.setdefault("run_id", run_id)
        self.record.setdefault("stages", {})

    @property
    def run_id(self) -> str:
        return self.record["run_id"]

    @property
    def state(self) -> dict:
        return self.record["stages"]

    def is_done(self, stage: str) -> bool:
        return self.state.get(stage, {}).get("status") == "done"

    def is_failed(self, stage: str) -> bool:
        return self.state.get(stage, {}).get("status") == "failed"

    def complete_stage(self, stage: str, artifacts: dict | None = None):
        """Mark a stage as completed with optional artifact metadata."""
        self.state[stage] = {
            "status": "done",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        if artifacts:
            self.state[stage]["artifacts"] = artifacts

    def fail_stage(self, stage: str, error: str = ""):
        self.state[stage] = {
            "status": "failed",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "error": error,
        }

    def skip_stage(self, stage: str, reason: str = ""):
        self.state[stage] = {
            "status": "skipped",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "reason": reason,
        }

    def get_artifact(self, stage: str, key: str, default=None):
        entry = self.state.get(stage, {})
        return entry.get("artifacts", {}).get(key, default)

    def summary(self) -> str:
        """Human-readable status of all stages."""
        lines = []
        for stage in STAGES:
            status = self.state.get(stage, {}).get("status", "pending")
            marker = {"done": "+", "failed": "!", "skipped": "-", "pending": " "}.get(status, "?")
            lines.append(f"  [{marker}] {stage}")
        return "\n".join(lines)

    def save(self, path: Path):
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(self.record, indent=2, ensure_ascii=False))
