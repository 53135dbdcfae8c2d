from __future__ import annotations

import abc
from typing import Dict, List, Optional, Tuple

from collision_guard.safety.arbitration import arbitrate
from collision_guard.safety.hazard import assess_zone
from collision_guard.safety.planar import assess_all_planar, detect_planar
from collision_guard.safety.vehicle_threat import assess_vehicle
from collision_guard.utils.logger import get_logger
from collision_guard.utils.types import (
    CoordinateSystem,
    Scene,
    ThreatAssessment,
    Tunables,
    Verdict,
)

logger = get_logger(__name__)


def _self_of(scene: Scene):
    selves = scene.self_vehicles()
    if not selves:
        logger.debug("No self vehicle in scene; reporting SAFE")
        return None
    if len(selves) > 1:
        logger.warning("Scene has %d self vehicles; using %s", len(selves), selves[0])
    return selves[0]


class RiskStrategy(abc.ABC):
    """Pure mapping from a scene snapshot and tunables to a verdict."""

    coordinate_system: CoordinateSystem

    @abc.abstractmethod
    def assess(self, scene: Scene, tunables: Tunables) -> List[ThreatAssessment]:
        ...

    @abc.abstractmethod
    def evaluate(self, scene: Scene, tunables: Tunables) -> Verdict:
        ...

    def evaluate_detailed(self, scene: Scene, tunables: Tunables) -> Tuple[Verdict, List[ThreatAssessment]]:
        """Verdict plus the per-threat breakdown behind it. Two passes by default."""
        return self.evaluate(scene, tunables), self.assess(scene, tunables)


class GeoRiskStrategy(RiskStrategy):
    """Lat/lng scenes: peers then hazard zones, worst-wins with first-found ties."""

    coordinate_system = CoordinateSystem.GEO

    def assess(self, scene: Scene, tunables: Tunables) -> List[ThreatAssessment]:
        me = _self_of(scene)
        if me is None:
            return []
        out = [assess_vehicle(me, peer, tunables) for peer in scene.peers()]
        out.extend(assess_zone(me, zone) for zone in scene.hazards)
        return out

    def evaluate(self, scene: Scene, tunables: Tunables) -> Verdict:
        return arbitrate(self.assess(scene, tunables))

    def evaluate_detailed(self, scene: Scene, tunables: Tunables) -> Tuple[Verdict, List[ThreatAssessment]]:
        assessments = self.assess(scene, tunables)
        return arbitrate(assessments), assessments


class PlanarRiskStrategy(RiskStrategy):
    """Flat x/y scenes with the planar thresholds and predictive path check."""

    coordinate_system = CoordinateSystem.PLANAR

    def assess(self, scene: Scene, tunables: Tunables) -> List[ThreatAssessment]:
        me = _self_of(scene)
        if me is None:
            return []
        return assess_all_planar(me, scene.peers(), scene.obstacles, tunables.sensitivity)

    def evaluate(self, scene: Scene, tunables: Tunables) -> Verdict:
        me = _self_of(scene)
        if me is None:
            return Verdict.safe()
        return detect_planar(me, scene.peers(), scene.obstacles, tunables.sensitivity)


_STRATEGIES: Dict[CoordinateSystem, RiskStrategy] = {
    CoordinateSystem.GEO: GeoRiskStrategy(),
    CoordinateSystem.PLANAR: PlanarRiskStrategy(),
}


def select_strategy(coordinate_system: CoordinateSystem | str) -> RiskStrategy:
    return _STRATEGIES[CoordinateSystem(coordinate_system)]


def evaluate(scene: Scene, tunables: Optional[Tunables] = None, strategy: Optional[RiskStrategy] = None) -> Verdict:
    """Evaluate one tick. The strategy defaults to the one matching the scene's coordinates."""
    tunables = tunables or Tunables()
    strategy = strategy or select_strategy(scene.coordinate_system)
    return strategy.evaluate(scene, tunables)
