from __future__ import annotations

import threading
from typing import Dict, Iterable, Optional, Tuple

from collision_guard.utils.logger import get_logger
from collision_guard.utils.types import Role, VehicleState


class PeerRoster:
    """
    Insertion-ordered set of peer vehicles owned outside the engine.

    Network sync or a simulator mutates it between ticks; the engine only
    ever sees the tuple returned by `snapshot()`.
    """

    def __init__(self, peers: Iterable[VehicleState] = ()):
        self.logger = get_logger(__name__)
        self._lock = threading.Lock()
        self._peers: Dict[str, VehicleState] = {}
        for p in peers:
            self.add(p)

    def add(self, peer: VehicleState) -> None:
        if peer.role != Role.PEER:
            raise ValueError(f"Roster only holds peers, got role={peer.role.value} for {peer.vehicle_id}")
        with self._lock:
            self._peers[peer.vehicle_id] = peer
        self.logger.debug("Peer added: %s", peer.vehicle_id)

    def remove(self, vehicle_id: str) -> Optional[VehicleState]:
        with self._lock:
            return self._peers.pop(vehicle_id, None)

    def replace_all(self, peers: Iterable[VehicleState]) -> None:
        with self._lock:
            self._peers = {p.vehicle_id: p for p in peers}

    def update(self, peer: VehicleState) -> bool:
        """
        Replace a known peer's state in place, keeping its position in the
        order. Ids that are no longer in the roster are left out.
        """
        with self._lock:
            if peer.vehicle_id not in self._peers:
                return False
            self._peers[peer.vehicle_id] = peer
            return True

    def reset(self) -> None:
        with self._lock:
            self._peers.clear()
        self.logger.info("Peer roster reset")

    def snapshot(self) -> Tuple[VehicleState, ...]:
        with self._lock:
            return tuple(self._peers.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._peers)

    def __contains__(self, vehicle_id: object) -> bool:
        with self._lock:
            return vehicle_id in self._peers
