from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional

from collision_guard.utils.logger import get_logger

DEFAULT_INTERVAL_S = 0.2


@dataclass
class SchedulerStats:
    ticks: int = 0
    skipped: int = 0


class TickScheduler:
    """
    Fixed-interval driver for a tick callable.

    Deadlines are laid out on a fixed grid from the first tick. When a tick
    overruns, the deadlines it missed are dropped rather than replayed, so
    a slow caller simply sees fewer ticks.
    """

    def __init__(
        self,
        interval_s: float = DEFAULT_INTERVAL_S,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if interval_s <= 0:
            raise ValueError(f"interval_s must be > 0, got {interval_s}")
        self.interval_s = interval_s
        self.clock = clock
        self.sleep = sleep
        self.stats = SchedulerStats()
        self.logger = get_logger(__name__)
        self._stop = threading.Event()

    def stop(self) -> None:
        self._stop.set()

    @property
    def stopped(self) -> bool:
        return self._stop.is_set()

    def run(self, tick: Callable[[int], object], max_ticks: Optional[int] = None) -> SchedulerStats:
        self._stop.clear()
        next_deadline = self.clock()
        while not self._stop.is_set():
            if max_ticks is not None and self.stats.ticks >= max_ticks:
                break
            now = self.clock()
            if now < next_deadline:
                self.sleep(next_deadline - now)

            tick(self.stats.ticks)
            self.stats.ticks += 1

            next_deadline += self.interval_s
            now = self.clock()
            if now > next_deadline:
                missed = int((now - next_deadline) // self.interval_s) + 1
                self.stats.skipped += missed
                next_deadline += missed * self.interval_s
                self.logger.debug("Tick overran; skipping %d deadline(s)", missed)
        return self.stats
