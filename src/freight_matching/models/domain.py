"""Domain models for coverage areas, match candidates and match records."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal, Optional

AreaKind = Literal["ORIGIN", "DESTINATION"]
CandidateKind = Literal["FREIGHT", "SERVICE_REQUEST"]
MatchType = Literal["SPATIAL_RADIUS", "CITY_MATCH"]

FREIGHT: CandidateKind = "FREIGHT"
SERVICE_REQUEST: CandidateKind = "SERVICE_REQUEST"
SPATIAL_RADIUS: MatchType = "SPATIAL_RADIUS"
CITY_MATCH: MatchType = "CITY_MATCH"
STATUS_OPEN = "OPEN"


@dataclass(slots=True)
class CityRef:
    """Canonical city with an optional centroid."""

    city_id: Optional[str]
    name: Optional[str]
    state: Optional[str]
    lat: Optional[float] = None
    lng: Optional[float] = None


@dataclass(slots=True)
class CoverageArea:
    """A driver-declared operating area: a city plus a search radius."""

    area_id: str
    driver_id: str
    city_ref: Optional[CityRef]
    radius_km: float
    kind: AreaKind
    is_active: bool = True
    created_at: Optional[datetime] = None

    @property
    def centroid(self) -> Optional[tuple[float, float]]:
        if self.city_ref is None or self.city_ref.lat is None or self.city_ref.lng is None:
            return None
        return (self.city_ref.lat, self.city_ref.lng)

    @property
    def city_id(self) -> Optional[str]:
        return self.city_ref.city_id if self.city_ref else None

    @property
    def city_name(self) -> Optional[str]:
        return self.city_ref.name if self.city_ref else None

    @property
    def state(self) -> Optional[str]:
        return self.city_ref.state if self.city_ref else None


@dataclass(slots=True)
class Candidate:
    """An open freight posting or service request eligible for matching."""

    candidate_id: str
    kind: CandidateKind
    status: str
    assigned_driver_id: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    city_label: Optional[str] = None
    state_label: Optional[str] = None
    city_ref_id: Optional[str] = None
    service_type: Optional[str] = None
    created_at: Optional[datetime] = None
    raw: dict = field(default_factory=dict)


@dataclass(slots=True)
class MatchRecord:
    """Best match between one candidate and one driver."""

    candidate_id: str
    driver_id: str
    kind: CandidateKind
    match_type: MatchType
    distance_meters: int
    match_score: float
    area_id: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(slots=True)
class DriverIdentity:
    """Authenticated caller resolved to a driver-like profile."""

    profile_id: str
    user_id: str
    role: str
