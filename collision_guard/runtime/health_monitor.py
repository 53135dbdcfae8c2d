from typing import Any, Dict

from collision_guard.utils.logger import get_logger


class HealthMonitor:
    def __init__(self, config: Dict[str, Any]):
        self.config = config
        self.logger = get_logger(__name__)
        self.misses = 0

    def check_latency(self, latency_ms: float) -> bool:
        budget = self.config.get("watchdog_ms", 0)
        if budget and latency_ms > budget:
            self.misses += 1
            self.logger.warning("Evaluation latency budget exceeded: %.2f ms > %.2f ms", latency_ms, budget)
            return False
        return True
