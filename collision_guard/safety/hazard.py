from __future__ import annotations

from typing import Dict, Tuple

from collision_guard.geo.geodesy import distance_m
from collision_guard.utils.types import (
    HazardCategory,
    HazardZone,
    RiskLevel,
    ThreatAssessment,
    ThreatType,
)

# category -> (warning, danger) multipliers on the zone radius
ZONE_MULTIPLIERS: Dict[HazardCategory, Tuple[float, float]] = {
    HazardCategory.INTERSECTION: (3.0, 1.5),
    HazardCategory.SCHOOL: (2.5, 1.2),
    HazardCategory.HOSPITAL: (2.0, 1.0),
}
DEFAULT_MULTIPLIERS = ZONE_MULTIPLIERS[HazardCategory.HOSPITAL]


def zone_thresholds(zone: HazardZone) -> Tuple[float, float]:
    """Return (warning_m, danger_m) for a zone."""
    warn_k, danger_k = ZONE_MULTIPLIERS.get(zone.category, DEFAULT_MULTIPLIERS)
    return zone.radius_m * warn_k, zone.radius_m * danger_k


def threat_type_for(zone: HazardZone) -> ThreatType:
    if zone.category == HazardCategory.INTERSECTION:
        return ThreatType.INTERSECTION
    return ThreatType.HAZARD


def assess_zone(self_vehicle, zone: HazardZone) -> ThreatAssessment:
    distance = distance_m(self_vehicle, zone)
    warning_m, danger_m = zone_thresholds(zone)
    if distance <= danger_m:
        level = RiskLevel.DANGER
    elif distance <= warning_m:
        level = RiskLevel.WARNING
    else:
        level = RiskLevel.SAFE
    return ThreatAssessment(
        level=level,
        distance_m=distance,
        threat_type=threat_type_for(zone),
        threat_id=zone.zone_id,
        details={"warning_distance_m": warning_m, "danger_distance_m": danger_m, "category": zone.category.value},
    )
