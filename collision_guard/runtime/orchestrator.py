from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from collision_guard.runtime.health_monitor import HealthMonitor
from collision_guard.safety.engine import RiskStrategy, select_strategy
from collision_guard.utils.logger import get_logger
from collision_guard.utils.timing import StageTimer, TickRateMeter
from collision_guard.utils.types import (
    CoordinateSystem,
    HazardZone,
    Obstacle,
    Scene,
    ThreatAssessment,
    Tunables,
    Verdict,
)

VerdictSink = Callable[[Verdict], None]


@dataclass
class TickResult:
    tick: int
    verdict: Verdict
    assessments: List[ThreatAssessment] = field(default_factory=list)
    stages_ms: Dict[str, float] = field(default_factory=dict)
    rate_hz: float = 0.0
    within_budget: bool = True


class RiskMonitor:
    """
    Per-tick glue around the engine: pull snapshots from the collaborators,
    build an immutable Scene, evaluate it and hand the verdict to the sinks.

    `self_source` returns the current self vehicle (or None), `peer_source`
    the current peers and `tunables_source` the settings in force for this
    tick. None of them is called more than once per tick.
    """

    def __init__(
        self,
        self_source: Callable[[], Optional[object]],
        peer_source: Callable[[], Sequence[object]],
        hazards: Sequence[HazardZone] = (),
        tunables_source: Callable[[], Tunables] = Tunables,
        sinks: Sequence[VerdictSink] = (),
        coordinate_system: CoordinateSystem = CoordinateSystem.GEO,
        obstacles: Sequence[Obstacle] = (),
        strategy: Optional[RiskStrategy] = None,
        health: Optional[HealthMonitor] = None,
        keep_assessments: bool = False,
    ):
        self.logger = get_logger(__name__)
        self.self_source = self_source
        self.peer_source = peer_source
        self.hazards: Tuple[HazardZone, ...] = tuple(hazards)
        self.obstacles: Tuple[Obstacle, ...] = tuple(obstacles)
        self.tunables_source = tunables_source
        self.sinks: List[VerdictSink] = list(sinks)
        self.coordinate_system = CoordinateSystem(coordinate_system)
        self.strategy = strategy or select_strategy(self.coordinate_system)
        self.health = health or HealthMonitor({})
        self.keep_assessments = keep_assessments
        self.rate_meter = TickRateMeter()
        self._tick = 0

    def add_sink(self, sink: VerdictSink) -> None:
        self.sinks.append(sink)

    def snapshot(self) -> Scene:
        me = self.self_source()
        peers = tuple(self.peer_source())
        vehicles = ((me,) if me is not None else ()) + peers
        return Scene(
            vehicles=vehicles,
            hazards=self.hazards,
            obstacles=self.obstacles,
            coordinate_system=self.coordinate_system,
        )

    def tick(self, tick_id: Optional[int] = None) -> TickResult:
        tick_id = self._tick if tick_id is None else tick_id
        self._tick = tick_id + 1
        timer = StageTimer()

        with timer.stage("snapshot"):
            scene = self.snapshot()
            tunables = self.tunables_source()
        with timer.stage("evaluate"):
            if self.keep_assessments:
                verdict, assessments = self.strategy.evaluate_detailed(scene, tunables)
            else:
                verdict, assessments = self.strategy.evaluate(scene, tunables), []

        ok = self.health.check_latency(timer.stages_ms["evaluate"])
        for sink in self.sinks:
            sink(verdict)

        if verdict.is_threat:
            self.logger.debug(
                "tick=%d %s %s=%s at %.1f m", tick_id, verdict.level.name, verdict.threat_type.value,
                verdict.threat_id, verdict.distance_m,
            )
        return TickResult(
            tick=tick_id,
            verdict=verdict,
            assessments=assessments,
            stages_ms=dict(timer.stages_ms),
            rate_hz=self.rate_meter.tick(),
            within_budget=ok,
        )
