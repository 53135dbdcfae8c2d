import pytest

from collision_guard.inputs.roster import PeerRoster
from collision_guard.inputs.simulator import (
    DEFAULT_ORIGIN,
    Bounds,
    PeerSimulator,
    RouteLeg,
    ScriptedRouteSource,
)
from collision_guard.utils.types import Role, VehicleState


def peer(vid, lat=28.6139, lng=77.2090, speed=36.0, heading=0.0):
    return VehicleState(vid, lat, lng, speed, heading, Role.PEER)


def test_roster_keeps_insertion_order():
    roster = PeerRoster([peer("c"), peer("a")])
    roster.add(peer("b"))
    assert [p.vehicle_id for p in roster.snapshot()] == ["c", "a", "b"]
    roster.update(peer("c", speed=10.0))
    assert [p.vehicle_id for p in roster.snapshot()] == ["c", "a", "b"]
    assert roster.snapshot()[0].speed_kmh == 10.0


def test_roster_remove_and_reset():
    roster = PeerRoster([peer("a"), peer("b")])
    assert roster.remove("a").vehicle_id == "a"
    assert roster.remove("missing") is None
    assert "a" not in roster and "b" in roster
    roster.reset()
    assert len(roster) == 0


def test_roster_update_ignores_removed_peer():
    roster = PeerRoster([peer("a")])
    assert roster.update(peer("a", speed=5.0))
    roster.remove("a")
    assert not roster.update(peer("a", speed=7.0))
    assert "a" not in roster
    assert len(roster) == 0


def test_step_does_not_revive_peer_removed_mid_step():
    roster = PeerRoster([peer("a"), peer("b")])
    sim = PeerSimulator(roster, seed=0)
    move = sim.move

    def move_while_synced_away(p):
        roster.remove(p.vehicle_id)
        return move(p)

    sim.move = move_while_synced_away
    sim.step()
    assert "a" not in roster
    assert "b" not in roster
    assert roster.snapshot() == ()


def test_roster_rejects_self():
    with pytest.raises(ValueError):
        PeerRoster().add(VehicleState("user", 0.0, 0.0, role=Role.SELF))


def test_snapshot_is_detached_from_roster():
    roster = PeerRoster([peer("a")])
    snap = roster.snapshot()
    roster.add(peer("b"))
    assert len(snap) == 1


def test_route_source_walks_first_leg_north():
    src = ScriptedRouteSource(seed=1)
    first = src.advance()
    assert first.role == Role.SELF
    assert first.lat == pytest.approx(DEFAULT_ORIGIN[0] + 0.0001 / 20)
    assert first.lng == pytest.approx(DEFAULT_ORIGIN[1])
    assert first.heading_deg == 0.0
    assert 20.0 <= first.speed_kmh <= 30.0


def test_route_source_moves_to_next_leg():
    src = ScriptedRouteSource(seed=1)
    for _ in range(20):
        src.advance()
    assert src.advance().heading_deg == 90.0


def test_route_leg_headings():
    assert RouteLeg(0.0001, 0.0001, 1).heading_deg == 45.0
    assert RouteLeg(-0.0001, 0.0, 1).heading_deg == 180.0
    assert RouteLeg(0.0, -0.0001, 1).heading_deg == 270.0
    assert RouteLeg(0.0, 0.0, 1).heading_deg is None


def test_route_source_is_reproducible_with_seed():
    a = ScriptedRouteSource(seed=42)
    b = ScriptedRouteSource(seed=42)
    assert [a.advance().speed_kmh for _ in range(10)] == [b.advance().speed_kmh for _ in range(10)]


def test_positions_generator_stops_with_source():
    src = ScriptedRouteSource(seed=1)
    gen = src.positions()
    next(gen)
    src.stop()
    assert list(gen) == []


def test_route_source_rejects_empty_route():
    with pytest.raises(ValueError):
        ScriptedRouteSource(route=[])


def test_peer_moves_along_heading():
    sim = PeerSimulator(PeerRoster(), seed=0)
    moved = sim.move(peer("a", speed=36.0, heading=0.0))
    assert moved.lat == pytest.approx(28.6139 + 36.0 / 3600.0 * 0.001)
    assert moved.lng == pytest.approx(77.2090)
    assert 33.5 <= moved.speed_kmh <= 38.5


def test_peer_bounces_at_boundary():
    sim = PeerSimulator(PeerRoster(), bounds=Bounds(), seed=0)
    edge = peer("a", lat=28.620, heading=0.0)
    moved = sim.move(edge)
    assert moved.heading_deg == 180.0
    assert (moved.lat, moved.lng) == (edge.lat, edge.lng)


def test_peer_speed_floor():
    sim = PeerSimulator(PeerRoster(), seed=0)
    assert sim.move(peer("a", speed=0.0)).speed_kmh >= 10.0


def test_step_updates_every_roster_peer():
    roster = PeerRoster([peer("a", heading=0.0), peer("b", heading=90.0)])
    PeerSimulator(roster, seed=0).step()
    a, b = roster.snapshot()
    assert a.lat > 28.6139
    assert b.lng > 77.2090


def test_spawn_peer_near_self():
    roster = PeerRoster()
    sim = PeerSimulator(roster, seed=5)
    me = VehicleState("user", 28.6139, 77.2090, role=Role.SELF)
    p = sim.spawn_peer(me)
    assert p.vehicle_id in roster
    assert abs(p.lat - me.lat) <= 0.001 and abs(p.lng - me.lng) <= 0.001
    assert 20.0 <= p.speed_kmh <= 60.0
    assert 0.0 <= p.heading_deg < 360.0
    assert sim.spawn_peer(me).vehicle_id != p.vehicle_id
