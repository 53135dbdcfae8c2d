from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Deque, List, Optional, Tuple

from collision_guard.utils.logger import get_logger
from collision_guard.utils.types import RiskLevel, ThreatType, Verdict

MESSAGES = {
    RiskLevel.DANGER: "COLLISION RISK DETECTED - Immediate action required",
    RiskLevel.WARNING: "Potential collision risk - Maintain safe distance",
    RiskLevel.SAFE: "All clear - Safe to proceed",
}

# vibration patterns in ms, on/off alternating
HAPTIC_PATTERNS = {
    RiskLevel.DANGER: (200, 100, 200, 100, 200),
    RiskLevel.WARNING: (100, 50, 100),
}

HISTORY_LEN = 5


@dataclass(frozen=True)
class AlertSettings:
    visual_alerts: bool = True
    audio_alerts: bool = True
    vibration_alerts: bool = True


@dataclass
class AlertEvent:
    time: str
    level: RiskLevel
    message: str
    threat_type: Optional[ThreatType] = None
    distance_m: Optional[float] = None
    haptic: Tuple[int, ...] = ()
    sound: Optional[str] = None


@dataclass
class AlertTracker:
    """
    Verdict sink that reacts to level transitions only: repeated verdicts
    at the same level do not re-fire cues or grow the history.
    """

    settings: AlertSettings = field(default_factory=AlertSettings)
    clock: Callable[[], datetime] = datetime.now
    level: RiskLevel = RiskLevel.SAFE
    fullscreen: bool = False
    history: Deque[AlertEvent] = field(default_factory=lambda: deque(maxlen=HISTORY_LEN))
    _started: bool = field(default=False, init=False, repr=False)

    def __post_init__(self):
        self.logger = get_logger(__name__)

    def __call__(self, verdict: Verdict) -> Optional[AlertEvent]:
        return self.update(verdict)

    def update(self, verdict: Verdict) -> Optional[AlertEvent]:
        if self._started and verdict.level == self.level:
            return None
        self._started = True
        self.level = verdict.level

        haptic: Tuple[int, ...] = ()
        sound = None
        if verdict.level != RiskLevel.SAFE:
            if self.settings.vibration_alerts:
                haptic = HAPTIC_PATTERNS[verdict.level]
            if self.settings.audio_alerts:
                sound = verdict.level.name.lower()
        if verdict.level == RiskLevel.DANGER and self.settings.visual_alerts:
            self.fullscreen = True

        event = AlertEvent(
            time=self.clock().strftime("%H:%M:%S"),
            level=verdict.level,
            message=MESSAGES[verdict.level],
            threat_type=verdict.threat_type,
            distance_m=verdict.distance_m,
            haptic=haptic,
            sound=sound,
        )
        self.history.appendleft(event)
        log = self.logger.warning if verdict.level == RiskLevel.DANGER else self.logger.info
        log("Alert %s: %s", verdict.level.name, event.message)
        return event

    def dismiss(self) -> None:
        self.fullscreen = False

    def recent(self) -> List[AlertEvent]:
        return list(self.history)
