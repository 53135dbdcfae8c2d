import json
from pathlib import Path
from typing import Optional

from collision_guard.utils.types import RiskLevel, Verdict


class SafetyLogger:
    """Append-only JSONL log of risk-level transitions."""

    def __init__(self, run_dir: Path):
        self.log_path = Path(run_dir) / "safety_events.jsonl"
        self.last_level: Optional[RiskLevel] = None
        self.log_path.parent.mkdir(parents=True, exist_ok=True)
        self.log_path.touch(exist_ok=True)

    def log(self, tick: int, timestamp_s: float, verdict: Verdict) -> bool:
        """Append an event only when the risk level changes."""
        if verdict.level == self.last_level:
            return False
        event = {
            "tick": tick,
            "time_s": round(timestamp_s, 3),
            "state": verdict.level.name,
            "previous": self.last_level.name if self.last_level is not None else None,
            "details": verdict.to_dict(),
        }
        with open(self.log_path, "a", encoding="utf-8") as f:
            f.write(json.dumps(event) + "\n")
        self.last_level = verdict.level
        return True
