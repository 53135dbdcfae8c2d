import math

import pytest

from collision_guard.geo.geodesy import EARTH_RADIUS_M
from collision_guard.safety.hazard import assess_zone, threat_type_for, zone_thresholds
from collision_guard.utils.types import HazardCategory, HazardZone, RiskLevel, Role, ThreatType, VehicleState

M_PER_DEG_LAT = EARTH_RADIUS_M * math.pi / 180.0


def me_at(distance_north):
    return VehicleState("user", distance_north / M_PER_DEG_LAT, 0.0, 0.0, 0.0, Role.SELF)


def zone(category, radius):
    return HazardZone(zone_id=f"{category.value}-1", lat=0.0, lng=0.0, radius_m=radius, category=category)


def test_thresholds_per_category():
    assert zone_thresholds(zone(HazardCategory.INTERSECTION, 50)) == pytest.approx((150.0, 75.0))
    assert zone_thresholds(zone(HazardCategory.SCHOOL, 30)) == pytest.approx((75.0, 36.0))
    assert zone_thresholds(zone(HazardCategory.HOSPITAL, 40)) == pytest.approx((80.0, 40.0))


@pytest.mark.parametrize(
    "distance, expected",
    [(0.0, RiskLevel.DANGER), (74.9, RiskLevel.DANGER), (75.1, RiskLevel.WARNING), (149.9, RiskLevel.WARNING), (150.1, RiskLevel.SAFE)],
)
def test_intersection_radius_fifty(distance, expected):
    a = assess_zone(me_at(distance), zone(HazardCategory.INTERSECTION, 50))
    assert a.level == expected
    assert a.threat_type == ThreatType.INTERSECTION


@pytest.mark.parametrize(
    "distance, expected",
    [(35.0, RiskLevel.DANGER), (70.0, RiskLevel.WARNING), (80.0, RiskLevel.SAFE)],
)
def test_school_zone(distance, expected):
    a = assess_zone(me_at(distance), zone(HazardCategory.SCHOOL, 30))
    assert a.level == expected
    assert a.threat_type == ThreatType.HAZARD


@pytest.mark.parametrize(
    "distance, expected",
    [(39.0, RiskLevel.DANGER), (79.0, RiskLevel.WARNING), (81.0, RiskLevel.SAFE)],
)
def test_hospital_zone(distance, expected):
    a = assess_zone(me_at(distance), zone(HazardCategory.HOSPITAL, 40))
    assert a.level == expected
    assert a.threat_id == "hospital-1"


def test_only_intersections_report_intersection_type():
    assert threat_type_for(zone(HazardCategory.INTERSECTION, 10)) == ThreatType.INTERSECTION
    assert threat_type_for(zone(HazardCategory.SCHOOL, 10)) == ThreatType.HAZARD
    assert threat_type_for(zone(HazardCategory.HOSPITAL, 10)) == ThreatType.HAZARD
