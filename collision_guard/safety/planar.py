"""
Flat-plane collision detector for local or simulated x/y coordinates.

Positions are meters on a Euclidean plane, speeds are meters per second
and headings are measured counter-clockwise from the +x axis.
"""
from __future__ import annotations

import math
from typing import List, Optional, Sequence

import numpy as np

from collision_guard.utils.types import (
    Obstacle,
    PlanarVehicle,
    RiskLevel,
    Sensitivity,
    ThreatAssessment,
    ThreatType,
    Verdict,
)

BASE_SAFETY_DISTANCE = 50.0
SPEED_DISTANCE_GAIN = 10.0
DANGER_FRACTION = 0.5
TTC_DANGER_S = 2.0
TTC_WARNING_S = 4.0
OBSTACLE_DANGER = 30.0
OBSTACLE_WARNING = 60.0
PREDICTION_HORIZON_S = 3.0
PREDICTED_SEPARATION = 40.0


def velocity(vehicle: PlanarVehicle) -> np.ndarray:
    h = math.radians(vehicle.heading_deg)
    return np.array([math.cos(h), math.sin(h)]) * vehicle.speed


def position(obj) -> np.ndarray:
    return np.array([obj.x, obj.y], dtype=float)


def planar_distance(a, b) -> float:
    return float(np.linalg.norm(position(a) - position(b)))


def relative_speed(a: PlanarVehicle, b: PlanarVehicle) -> float:
    return float(np.linalg.norm(velocity(a) - velocity(b)))


def planar_ttc(distance: float, speed: float) -> float:
    return distance / speed if speed > 0 else math.inf


def adjusted_safety_distance(a: PlanarVehicle, b: PlanarVehicle, sensitivity: Sensitivity) -> float:
    return (BASE_SAFETY_DISTANCE + SPEED_DISTANCE_GAIN * max(a.speed, b.speed)) * sensitivity.multiplier


def project(vehicle: PlanarVehicle, horizon_s: float = PREDICTION_HORIZON_S) -> np.ndarray:
    return position(vehicle) + velocity(vehicle) * horizon_s


def assess_planar_vehicle(user: PlanarVehicle, other: PlanarVehicle, sensitivity: Sensitivity) -> ThreatAssessment:
    distance = planar_distance(user, other)
    ttc = planar_ttc(distance, relative_speed(user, other))
    adjusted = adjusted_safety_distance(user, other, sensitivity)
    if distance < adjusted * DANGER_FRACTION or ttc < TTC_DANGER_S:
        level = RiskLevel.DANGER
    elif distance < adjusted or ttc < TTC_WARNING_S:
        level = RiskLevel.WARNING
    else:
        level = RiskLevel.SAFE
    return ThreatAssessment(
        level=level,
        distance_m=distance,
        threat_type=ThreatType.VEHICLE,
        threat_id=other.vehicle_id,
        details={"ttc_s": ttc, "adjusted_safety_distance": adjusted},
    )


def assess_obstacle(user: PlanarVehicle, obstacle: Obstacle, sensitivity: Sensitivity) -> ThreatAssessment:
    distance = planar_distance(user, obstacle)
    k = sensitivity.multiplier
    if distance < OBSTACLE_DANGER * k:
        level = RiskLevel.DANGER
    elif distance < OBSTACLE_WARNING * k:
        level = RiskLevel.WARNING
    else:
        level = RiskLevel.SAFE
    return ThreatAssessment(
        level=level,
        distance_m=distance,
        threat_type=ThreatType.HAZARD,
        threat_id=obstacle.obstacle_id,
        details={"kind": obstacle.kind},
    )


def predict_conflict(user: PlanarVehicle, other: PlanarVehicle, sensitivity: Sensitivity) -> Optional[ThreatAssessment]:
    """WARNING when both moving vehicles end up closer than 40 m (scaled) in 3 s."""
    if user.speed <= 0 or other.speed <= 0:
        return None
    future = float(np.linalg.norm(project(user) - project(other)))
    if future >= PREDICTED_SEPARATION * sensitivity.multiplier:
        return None
    return ThreatAssessment(
        level=RiskLevel.WARNING,
        distance_m=planar_distance(user, other),
        threat_type=ThreatType.VEHICLE,
        threat_id=other.vehicle_id,
        details={"predicted_separation": future, "horizon_s": PREDICTION_HORIZON_S},
    )


def detect_planar(
    user: PlanarVehicle,
    others: Sequence[PlanarVehicle],
    obstacles: Sequence[Obstacle],
    sensitivity: Sensitivity,
) -> Verdict:
    """
    Scan vehicles, then obstacles, then (only while still SAFE) the
    predicted paths.

    The first DANGER vehicle ends the vehicle scan and an obstacle is
    only looked at while nothing has reached DANGER. A WARNING is held by
    whichever threat raised it first.
    """
    current: Optional[ThreatAssessment] = None

    for other in others:
        a = assess_planar_vehicle(user, other, sensitivity)
        if a.level == RiskLevel.DANGER:
            current = a
            break
        if a.level == RiskLevel.WARNING and current is None:
            current = a

    if current is None or current.level != RiskLevel.DANGER:
        for obstacle in obstacles:
            a = assess_obstacle(user, obstacle, sensitivity)
            if a.level == RiskLevel.DANGER:
                current = a
                break
            if a.level == RiskLevel.WARNING and current is None:
                current = a

    if current is None and user.speed > 0:
        for other in others:
            predicted = predict_conflict(user, other, sensitivity)
            if predicted is not None:
                current = predicted
                break

    if current is None:
        return Verdict.safe()
    return Verdict.from_assessment(current)


def assess_all_planar(
    user: PlanarVehicle,
    others: Sequence[PlanarVehicle],
    obstacles: Sequence[Obstacle],
    sensitivity: Sensitivity,
) -> List[ThreatAssessment]:
    """Per-threat breakdown for map rendering; does not apply the planar tie-break."""
    out = [assess_planar_vehicle(user, o, sensitivity) for o in others]
    out.extend(assess_obstacle(user, ob, sensitivity) for ob in obstacles)
    return out
