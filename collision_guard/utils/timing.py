from __future__ import annotations

import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator, Optional


@dataclass
class StageTimer:
    """Per-stage wall time for a single tick, in milliseconds."""

    clock: Callable[[], float] = time.perf_counter
    stages_ms: Dict[str, float] = field(default_factory=dict)

    @contextmanager
    def stage(self, name: str) -> Iterator[None]:
        start = self.clock()
        try:
            yield
        finally:
            self.stages_ms[name] = (self.clock() - start) * 1000.0


@dataclass
class TickRateMeter:
    """Exponential moving average of the achieved tick rate (Hz)."""

    smoothing: float = 0.9
    clock: Callable[[], float] = time.perf_counter
    rate_hz: float = 0.0
    _last_ts: Optional[float] = None

    def tick(self) -> float:
        now = self.clock()
        if self._last_ts is not None:
            inst = 1.0 / max(now - self._last_ts, 1e-9)
            self.rate_hz = inst if self.rate_hz <= 0 else self.smoothing * self.rate_hz + (1 - self.smoothing) * inst
        self._last_ts = now
        return self.rate_hz
