from __future__ import annotations

from collision_guard.geo.geodesy import (
    distance_m,
    is_approaching,
    time_to_collision,
    vector_time_to_collision,
)
from collision_guard.utils.types import (
    ClosingModel,
    RiskLevel,
    ThreatAssessment,
    ThreatType,
    Tunables,
    VehicleState,
)

SPEED_NORMALIZER_KMH = 50.0
TTC_DANGER_S = 3.0
TTC_WARNING_S = 6.0


def dynamic_safe_distance(safe_distance_m: float, self_speed_kmh: float, peer_speed_kmh: float) -> float:
    """Baseline inflated linearly by the faster vehicle: +100% per 50 km/h, uncapped."""
    return safe_distance_m * (1.0 + max(self_speed_kmh, peer_speed_kmh) / SPEED_NORMALIZER_KMH)


def classify_vehicle(distance: float, ttc: float, approaching: bool, safe_m: float, proximity_m: float) -> RiskLevel:
    if distance <= safe_m or (approaching and ttc <= TTC_DANGER_S):
        return RiskLevel.DANGER
    if distance <= proximity_m or (approaching and ttc <= TTC_WARNING_S):
        return RiskLevel.WARNING
    return RiskLevel.SAFE


def assess_vehicle(self_vehicle: VehicleState, peer: VehicleState, tunables: Tunables) -> ThreatAssessment:
    distance = distance_m(self_vehicle, peer)
    if tunables.closing_model == ClosingModel.VECTOR:
        ttc = vector_time_to_collision(self_vehicle, peer, distance)
    else:
        ttc = time_to_collision(self_vehicle, peer, distance)
    approaching = is_approaching(self_vehicle, peer)

    safe_m = dynamic_safe_distance(tunables.safe_distance_m, self_vehicle.speed_kmh, peer.speed_kmh)
    proximity_m = safe_m * tunables.proximity_multiplier
    level = classify_vehicle(distance, ttc, approaching, safe_m, proximity_m)

    return ThreatAssessment(
        level=level,
        distance_m=distance,
        threat_type=ThreatType.VEHICLE,
        threat_id=peer.vehicle_id,
        details={
            "ttc_s": ttc,
            "approaching": approaching,
            "dynamic_safe_distance_m": safe_m,
            "proximity_distance_m": proximity_m,
        },
    )
