from collision_guard.safety.arbitration import arbitrate
from collision_guard.utils.types import RiskLevel, ThreatAssessment, ThreatType, Verdict


def threat(level, tid, distance=10.0, kind=ThreatType.VEHICLE):
    return ThreatAssessment(level=level, distance_m=distance, threat_type=kind, threat_id=tid)


def test_empty_is_safe_without_fields():
    v = arbitrate([])
    assert v == Verdict.safe()
    assert v.distance_m is None and v.threat_type is None and v.threat_id is None


def test_all_safe_carries_no_fields():
    v = arbitrate([threat(RiskLevel.SAFE, "a"), threat(RiskLevel.SAFE, "b")])
    assert v.level == RiskLevel.SAFE
    assert v.threat_id is None


def test_first_found_wins_among_equals():
    v = arbitrate([threat(RiskLevel.DANGER, "a", 5.0), threat(RiskLevel.DANGER, "b", 1.0)])
    assert v.threat_id == "a"
    assert v.distance_m == 5.0


def test_strictly_worse_replaces():
    v = arbitrate([threat(RiskLevel.WARNING, "a"), threat(RiskLevel.DANGER, "zone", kind=ThreatType.INTERSECTION)])
    assert v.level == RiskLevel.DANGER
    assert v.threat_type == ThreatType.INTERSECTION


def test_never_downgrades():
    items = [threat(RiskLevel.SAFE, f"s{i}") for i in range(10)]
    items.insert(3, threat(RiskLevel.DANGER, "d"))
    items.append(threat(RiskLevel.WARNING, "w"))
    v = arbitrate(items)
    assert v.level == RiskLevel.DANGER
    assert v.threat_id == "d"


def test_level_order():
    assert RiskLevel.SAFE < RiskLevel.WARNING < RiskLevel.DANGER
    assert max([RiskLevel.WARNING, RiskLevel.DANGER, RiskLevel.SAFE]) == RiskLevel.DANGER
