from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Dict, Optional, Tuple


class RiskLevel(IntEnum):
    """Totally ordered risk levels: SAFE < WARNING < DANGER."""

    SAFE = 0
    WARNING = 1
    DANGER = 2

    def __str__(self) -> str:
        return self.name


class Role(str, Enum):
    SELF = "self"
    PEER = "peer"


class ThreatType(str, Enum):
    VEHICLE = "vehicle"
    HAZARD = "hazard"
    INTERSECTION = "intersection"


class HazardCategory(str, Enum):
    INTERSECTION = "intersection"
    SCHOOL = "school"
    HOSPITAL = "hospital"


class Sensitivity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def multiplier(self) -> float:
        return _SENSITIVITY_MULTIPLIERS[self]


_SENSITIVITY_MULTIPLIERS = {
    Sensitivity.LOW: 0.7,
    Sensitivity.MEDIUM: 1.0,
    Sensitivity.HIGH: 1.3,
}


class CoordinateSystem(str, Enum):
    GEO = "geo"  # lat/lng degrees
    PLANAR = "planar"  # local x/y meters


class ClosingModel(str, Enum):
    SCALAR = "scalar"
    VECTOR = "vector"


@dataclass(frozen=True)
class VehicleState:
    vehicle_id: str
    lat: float
    lng: float
    speed_kmh: float = 0.0
    heading_deg: float = 0.0
    role: Role = Role.PEER


@dataclass(frozen=True)
class PlanarVehicle:
    """Vehicle on a flat plane. Heading is measured from the +x axis."""

    vehicle_id: str
    x: float
    y: float
    speed: float = 0.0
    heading_deg: float = 0.0
    role: Role = Role.PEER


@dataclass(frozen=True)
class Obstacle:
    obstacle_id: str
    x: float
    y: float
    kind: str = "static"


@dataclass(frozen=True)
class HazardZone:
    zone_id: str
    lat: float
    lng: float
    radius_m: float
    category: HazardCategory = HazardCategory.HOSPITAL


@dataclass(frozen=True)
class Tunables:
    safe_distance_m: float = 50.0
    proximity_multiplier: float = 2.0
    sensitivity: Sensitivity = Sensitivity.MEDIUM
    closing_model: ClosingModel = ClosingModel.SCALAR


@dataclass(frozen=True)
class ThreatAssessment:
    """Classification of a single peer, zone or obstacle against self."""

    level: RiskLevel
    distance_m: float
    threat_type: ThreatType
    threat_id: str
    details: Dict[str, Any] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class Verdict:
    level: RiskLevel = RiskLevel.SAFE
    distance_m: Optional[float] = None
    threat_type: Optional[ThreatType] = None
    threat_id: Optional[str] = None

    @classmethod
    def safe(cls) -> "Verdict":
        return cls()

    @classmethod
    def from_assessment(cls, assessment: ThreatAssessment) -> "Verdict":
        if assessment.level == RiskLevel.SAFE:
            return cls.safe()
        return cls(
            level=assessment.level,
            distance_m=assessment.distance_m,
            threat_type=assessment.threat_type,
            threat_id=assessment.threat_id,
        )

    @property
    def is_threat(self) -> bool:
        return self.level != RiskLevel.SAFE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "level": self.level.name,
            "distance_m": round(self.distance_m, 2) if self.distance_m is not None else None,
            "threat_type": self.threat_type.value if self.threat_type else None,
            "threat_id": self.threat_id,
        }


@dataclass(frozen=True)
class Scene:
    """Immutable per-tick snapshot handed to a risk strategy."""

    vehicles: Tuple[Any, ...] = ()
    hazards: Tuple[HazardZone, ...] = ()
    obstacles: Tuple[Obstacle, ...] = ()
    coordinate_system: CoordinateSystem = CoordinateSystem.GEO

    def self_vehicles(self) -> Tuple[Any, ...]:
        return tuple(v for v in self.vehicles if v.role == Role.SELF)

    def peers(self) -> Tuple[Any, ...]:
        return tuple(v for v in self.vehicles if v.role == Role.PEER)
