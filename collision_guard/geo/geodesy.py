from __future__ import annotations

import math

import numpy as np

EARTH_RADIUS_M = 6_371_000.0
KMH_TO_MPS = 1.0 / 3.6
APPROACH_CONE_DEG = 45.0


def distance_m(a, b) -> float:
    """
    Great-circle (haversine) distance in meters between two objects
    carrying `lat` / `lng` in degrees.
    """
    lat1, lat2 = math.radians(a.lat), math.radians(b.lat)
    d_lat = math.radians(b.lat - a.lat)
    d_lng = math.radians(b.lng - a.lng)
    h = math.sin(d_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(d_lng / 2) ** 2
    # rounding can push h just past 1 for near-antipodal points
    h = min(1.0, max(0.0, h))
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_M * c


def bearing_deg(a, b) -> float:
    """Initial compass bearing from a to b, in [0, 360)."""
    lat1, lat2 = math.radians(a.lat), math.radians(b.lat)
    d_lng = math.radians(b.lng - a.lng)
    y = math.sin(d_lng) * math.cos(lat2)
    x = math.cos(lat1) * math.sin(lat2) - math.sin(lat1) * math.cos(lat2) * math.cos(d_lng)
    raw = math.degrees(math.atan2(y, x))
    if raw < 0:
        raw += 360.0
    # -0.0 and float rounding can land exactly on 360
    return raw % 360.0


def is_approaching(self_vehicle, other) -> bool:
    """
    Heading-alignment heuristic: the other vehicle points back at self
    within a 45 degree cone either side.
    """
    to_self = bearing_deg(other, self_vehicle)
    diff = abs(other.heading_deg - to_self)
    return diff < APPROACH_CONE_DEG or diff > 360.0 - APPROACH_CONE_DEG


def time_to_collision(self_vehicle, other, distance: float) -> float:
    """
    TTC = distance / (v_self + v_other), speeds in km/h converted to m/s.
    Treats the pair as driving head-on. Returns inf when nobody moves.
    """
    closing = (self_vehicle.speed_kmh + other.speed_kmh) * KMH_TO_MPS
    if closing <= 0:
        return math.inf
    return distance / closing


def velocity_enu(vehicle) -> np.ndarray:
    """(east, north) velocity in m/s from compass heading and km/h speed."""
    h = math.radians(vehicle.heading_deg)
    v = vehicle.speed_kmh * KMH_TO_MPS
    return np.array([v * math.sin(h), v * math.cos(h)])


def offset_enu(origin, target) -> np.ndarray:
    """Local (east, north) offset in meters of target relative to origin."""
    d = distance_m(origin, target)
    b = math.radians(bearing_deg(origin, target))
    return np.array([d * math.sin(b), d * math.cos(b)])


def closing_speed_mps(self_vehicle, other) -> float:
    """
    Rate at which separation shrinks, from the relative velocity vector
    projected on the line of sight. Negative means the pair is separating.
    """
    rel_pos = offset_enu(self_vehicle, other)
    rel_vel = velocity_enu(other) - velocity_enu(self_vehicle)
    rng = float(np.linalg.norm(rel_pos))
    if rng <= 1e-9:
        return float(np.linalg.norm(rel_vel))
    return float(-np.dot(rel_pos, rel_vel) / rng)


def vector_time_to_collision(self_vehicle, other, distance: float) -> float:
    closing = closing_speed_mps(self_vehicle, other)
    if closing <= 1e-9:
        return math.inf
    return distance / closing
