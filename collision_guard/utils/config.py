from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Tuple

import yaml

from collision_guard.utils.types import (
    ClosingModel,
    HazardCategory,
    HazardZone,
    Role,
    Sensitivity,
    Tunables,
    VehicleState,
)


class ConfigError(ValueError):
    """Raised when a config value is out of range or unknown."""


DEFAULT_HAZARDS: List[Dict[str, Any]] = [
    {"id": "intersection-1", "lat": 28.6150, "lng": 77.2095, "type": "intersection", "radius": 50},
    {"id": "school-1", "lat": 28.6130, "lng": 77.2085, "type": "school", "radius": 30},
    {"id": "hospital-1", "lat": 28.6160, "lng": 77.2100, "type": "hospital", "radius": 40},
]


def load_yaml(path: str | Path) -> Dict[str, Any]:
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config not found: {config_path.resolve()}")
    with config_path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def get(cfg: Dict[str, Any], key: str, default: Any = None) -> Any:
    """
    Dot-access helper:
      get(cfg, "runtime.output_dir", "results")
    """
    cur: Any = cfg
    for part in key.split("."):
        if not isinstance(cur, dict) or part not in cur:
            return default
        cur = cur[part]
    return cur


def _enum(enum_cls, value: Any, what: str):
    try:
        return enum_cls(str(value).lower())
    except ValueError:
        allowed = ", ".join(e.value for e in enum_cls)
        raise ConfigError(f"Unknown {what} {value!r} (expected one of: {allowed})") from None


def _check_coords(lat: float, lng: float, what: str) -> None:
    if not -90.0 <= lat <= 90.0:
        raise ConfigError(f"{what}: latitude {lat} out of range")
    if not -180.0 <= lng <= 180.0:
        raise ConfigError(f"{what}: longitude {lng} out of range")


def tunables_from_config(cfg: Dict[str, Any]) -> Tunables:
    t = cfg.get("tunables", {}) or {}
    safe = float(t.get("safe_distance_m", 50.0))
    mult = float(t.get("proximity_multiplier", 2.0))
    if safe <= 0:
        raise ConfigError(f"safe_distance_m must be > 0, got {safe}")
    if mult < 1.0:
        raise ConfigError(f"proximity_multiplier must be >= 1, got {mult}")
    return Tunables(
        safe_distance_m=safe,
        proximity_multiplier=mult,
        sensitivity=_enum(Sensitivity, t.get("sensitivity", "medium"), "sensitivity"),
        closing_model=_enum(ClosingModel, t.get("closing_model", "scalar"), "closing_model"),
    )


def hazards_from_config(cfg: Dict[str, Any]) -> Tuple[HazardZone, ...]:
    raw = cfg.get("hazards")
    if raw is None:
        raw = DEFAULT_HAZARDS
    zones = []
    for item in raw:
        zone_id = str(item["id"])
        lat, lng = float(item["lat"]), float(item["lng"])
        radius = float(item["radius"])
        _check_coords(lat, lng, zone_id)
        if radius <= 0:
            raise ConfigError(f"{zone_id}: radius must be > 0, got {radius}")
        zones.append(
            HazardZone(
                zone_id=zone_id,
                lat=lat,
                lng=lng,
                radius_m=radius,
                category=_enum(HazardCategory, item.get("type", "hospital"), "hazard type"),
            )
        )
    return tuple(zones)


def peers_from_config(cfg: Dict[str, Any]) -> List[VehicleState]:
    peers = []
    for item in get(cfg, "simulation.peers", []) or []:
        vid = str(item["id"])
        lat, lng = float(item["lat"]), float(item["lng"])
        speed = float(item.get("speed", 0.0))
        _check_coords(lat, lng, vid)
        if speed < 0:
            raise ConfigError(f"{vid}: speed must be >= 0, got {speed}")
        peers.append(
            VehicleState(
                vehicle_id=vid,
                lat=lat,
                lng=lng,
                speed_kmh=speed,
                heading_deg=float(item.get("heading", 0.0)) % 360.0,
                role=Role.PEER,
            )
        )
    return peers

