from __future__ import annotations

import itertools
import math
from dataclasses import dataclass, replace
from typing import Iterator, List, Optional, Sequence

import numpy as np

from collision_guard.inputs.base_input import BaseInput
from collision_guard.inputs.roster import PeerRoster
from collision_guard.utils.logger import get_logger
from collision_guard.utils.types import Role, VehicleState

# Connaught Place, New Delhi
DEFAULT_ORIGIN = (28.6139, 77.2090)


@dataclass(frozen=True)
class RouteLeg:
    lat_delta: float
    lng_delta: float
    steps: int

    @property
    def heading_deg(self) -> Optional[float]:
        if self.lat_delta > 0 and self.lng_delta > 0:
            return 45.0
        if self.lng_delta > 0:
            return 90.0
        if self.lng_delta < 0:
            return 270.0
        if self.lat_delta > 0:
            return 0.0
        if self.lat_delta < 0:
            return 180.0
        return None


DEFAULT_ROUTE: List[RouteLeg] = [
    RouteLeg(0.0001, 0.0, 20),  # north
    RouteLeg(0.0, 0.0001, 15),  # east
    RouteLeg(0.0001, 0.0001, 25),  # north-east
    RouteLeg(-0.0001, 0.0, 10),  # south
]


@dataclass(frozen=True)
class Bounds:
    min_lat: float = 28.610
    max_lat: float = 28.620
    min_lng: float = 77.205
    max_lng: float = 77.215

    def contains(self, lat: float, lng: float) -> bool:
        return self.min_lat <= lat <= self.max_lat and self.min_lng <= lng <= self.max_lng


class ScriptedRouteSource(BaseInput):
    """
    Stand-in for device GPS: walks a looped list of route legs, one step
    per call, with a speed that oscillates between roughly 5 and 45 km/h.
    """

    def __init__(
        self,
        route: Sequence[RouteLeg] = DEFAULT_ROUTE,
        origin: tuple = DEFAULT_ORIGIN,
        vehicle_id: str = "user",
        seed: Optional[int] = None,
    ):
        if not route:
            raise ValueError("route needs at least one leg")
        self.logger = get_logger(__name__)
        self.route = list(route)
        self.vehicle_id = vehicle_id
        self.rng = np.random.default_rng(seed)
        self.lat, self.lng = origin
        self.heading = 0.0
        self.speed = 0.0
        self._leg_idx = 0
        self._step = 0
        self._running = False

    def start(self) -> None:
        self._running = True
        self.logger.info("Scripted route started at (%.5f, %.5f) with %d legs", self.lat, self.lng, len(self.route))

    def stop(self) -> None:
        self._running = False

    def current(self) -> VehicleState:
        return VehicleState(
            vehicle_id=self.vehicle_id,
            lat=self.lat,
            lng=self.lng,
            speed_kmh=self.speed,
            heading_deg=self.heading,
            role=Role.SELF,
        )

    def advance(self) -> VehicleState:
        leg = self.route[self._leg_idx]
        self.lat += leg.lat_delta / leg.steps
        self.lng += leg.lng_delta / leg.steps
        if leg.heading_deg is not None:
            self.heading = leg.heading_deg
        self.speed = max(0.0, 20.0 + math.sin(self._step * 0.1) * 15.0 + float(self.rng.random()) * 10.0)

        self._step += 1
        if self._step >= leg.steps:
            self._leg_idx = (self._leg_idx + 1) % len(self.route)
            self._step = 0
        return self.current()

    def positions(self) -> Iterator[VehicleState]:
        if not self._running:
            self.start()
        while self._running:
            yield self.advance()


class PeerSimulator:
    """Offline replacement for network peer sync; moves every peer in a roster once per step."""

    def __init__(
        self,
        roster: PeerRoster,
        bounds: Bounds = Bounds(),
        seed: Optional[int] = None,
        min_speed_kmh: float = 10.0,
    ):
        self.logger = get_logger(__name__)
        self.roster = roster
        self.bounds = bounds
        self.rng = np.random.default_rng(seed)
        self.min_speed_kmh = min_speed_kmh
        self._ids = itertools.count(1)

    def move(self, peer: VehicleState) -> VehicleState:
        # rough km/h -> degrees-per-step scaling
        step = peer.speed_kmh / 3600.0 * 0.001
        h = math.radians(peer.heading_deg)
        lat = peer.lat + math.cos(h) * step
        lng = peer.lng + math.sin(h) * step
        heading = peer.heading_deg
        if not self.bounds.contains(lat, lng):
            heading = (peer.heading_deg + 180.0) % 360.0
            lat, lng = peer.lat, peer.lng
        speed = max(self.min_speed_kmh, peer.speed_kmh + (float(self.rng.random()) - 0.5) * 5.0)
        return replace(peer, lat=lat, lng=lng, heading_deg=heading, speed_kmh=speed)

    def step(self) -> None:
        for peer in self.roster.snapshot():
            self.roster.update(self.move(peer))

    def spawn_peer(self, near: VehicleState) -> VehicleState:
        """Add a random test vehicle within about 100 m of `near`."""
        peer = VehicleState(
            vehicle_id=f"peer-{next(self._ids)}",
            lat=near.lat + (float(self.rng.random()) - 0.5) * 0.002,
            lng=near.lng + (float(self.rng.random()) - 0.5) * 0.002,
            speed_kmh=float(self.rng.random()) * 40.0 + 20.0,
            heading_deg=float(self.rng.random()) * 360.0,
            role=Role.PEER,
        )
        self.roster.add(peer)
        self.logger.info("Spawned %s at (%.5f, %.5f) %.1f km/h", peer.vehicle_id, peer.lat, peer.lng, peer.speed_kmh)
        return peer
