"""Driver/candidate matching by radius distance with a city-identity fallback."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from ...config import Settings, settings
from ...models.domain import CITY_MATCH, SPATIAL_RADIUS, Candidate, CoverageArea, MatchRecord
from ..geospatial import haversine_meters
from .policy import area_applies_to, order_areas

logger = logging.getLogger(__name__)

DEFAULT_URBAN_SERVICE_TYPES = (
    "FRETE_MOTO",
    "GUINCHO",
    "MUDANCA",
    "PICAPE",
    "FRETE_URBANO",
    "MOTO",
    "GUINCHO_URBANO",
)


@dataclass(frozen=True, slots=True)
class MatchingConfig:
    """Constants the engine works with.

    ``score_normalization_m`` is fixed and independent of each area's radius,
    so matches beyond it (on areas wider than 50 km) all score the floor.
    """

    default_radius_km: float = 50.0
    score_normalization_m: float = 50_000.0
    min_match_score: float = 0.1
    candidate_page_size: int = 200
    urban_service_types: tuple[str, ...] = DEFAULT_URBAN_SERVICE_TYPES

    @classmethod
    def from_settings(cls, source: Settings | None = None) -> "MatchingConfig":
        source = source or settings
        return cls(
            default_radius_km=source.default_radius_km,
            score_normalization_m=source.score_normalization_m,
            min_match_score=source.min_match_score,
            candidate_page_size=source.candidate_page_size,
            urban_service_types=tuple(source.urban_service_types),
        )


def normalize_city_name(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    normalized = value.strip().lower()
    return normalized or None


def normalize_state(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    normalized = value.strip().upper()
    return normalized or None


@dataclass(slots=True)
class LocationSignal:
    """Everything a candidate tells us about where it is."""

    coordinates: Optional[tuple[float, float]]
    city_id: Optional[str]
    city_name: Optional[str]
    state: Optional[str]

    @property
    def is_empty(self) -> bool:
        return self.coordinates is None and self.city_id is None and self.city_name is None


def extract_signal(candidate: Candidate) -> LocationSignal:
    coordinates = None
    if candidate.lat is not None and candidate.lng is not None:
        coordinates = (candidate.lat, candidate.lng)
    return LocationSignal(
        coordinates=coordinates,
        city_id=candidate.city_ref_id or None,
        city_name=normalize_city_name(candidate.city_label),
        state=normalize_state(candidate.state_label),
    )


def _same_city(signal: LocationSignal, area: CoverageArea) -> bool:
    if signal.city_id and area.city_id and signal.city_id == area.city_id:
        return True

    area_name = normalize_city_name(area.city_name)
    if not signal.city_name or not area_name or signal.city_name != area_name:
        return False
    area_state = normalize_state(area.state)
    # A blank state on either side matches any state.
    return not signal.state or not area_state or signal.state == area_state


def spatial_score(distance_meters: float, config: MatchingConfig) -> float:
    return max(config.min_match_score, 1.0 - distance_meters / config.score_normalization_m)


def _round_meters(distance: float) -> int:
    return int(math.floor(distance + 0.5))


def find_best_match(
    candidate: Candidate,
    areas: Sequence[CoverageArea],
    driver_id: str,
    config: MatchingConfig,
) -> MatchRecord | None:
    """Return the best match of ``candidate`` across ``areas`` or None.

    ``areas`` are evaluated in the order given (see ``order_areas``). When the
    candidate and an area both have coordinates only the radius check runs for
    that pair; the closest area within radius wins. Otherwise the first area
    sharing the candidate's city (by id, or by name and state) wins outright
    and stops the search.
    """
    signal = extract_signal(candidate)
    if signal.is_empty:
        return None

    best_area: CoverageArea | None = None
    best_distance: float | None = None
    city_area: CoverageArea | None = None

    for area in areas:
        if not area_applies_to(area, candidate):
            continue

        centroid = area.centroid
        if signal.coordinates is not None and centroid is not None:
            distance = haversine_meters(signal.coordinates[0], signal.coordinates[1], centroid[0], centroid[1])
            if distance <= area.radius_km * 1000 and (best_distance is None or distance < best_distance):
                best_area = area
                best_distance = distance
            continue

        if _same_city(signal, area):
            city_area = area
            break

    if city_area is not None:
        return MatchRecord(
            candidate_id=candidate.candidate_id,
            driver_id=driver_id,
            kind=candidate.kind,
            match_type=CITY_MATCH,
            distance_meters=0,
            match_score=1.0,
            area_id=city_area.area_id,
        )

    if best_area is None or best_distance is None:
        return None

    distance_meters = _round_meters(best_distance)
    logger.debug(
        f"Spatial match {candidate.kind} {candidate.candidate_id} -> area {best_area.area_id} "
        f"({best_distance / 1000:.2f} km, "
        f"radius {best_area.radius_km} km)"
    )
    return MatchRecord(
        candidate_id=candidate.candidate_id,
        driver_id=driver_id,
        kind=candidate.kind,
        match_type=SPATIAL_RADIUS,
        distance_meters=distance_meters,
        match_score=spatial_score(distance_meters, config),
        area_id=best_area.area_id,
    )


def match_candidates(
    candidates: Iterable[Candidate],
    areas: Iterable[CoverageArea],
    driver_id: str,
    config: MatchingConfig,
) -> list[MatchRecord]:
    """Best match per candidate for one driver; unmatched candidates are dropped."""
    ordered = order_areas(areas)
    if not ordered:
        return []
    records: list[MatchRecord] = []
    for candidate in candidates:
        record = find_best_match(candidate, ordered, driver_id, config)
        if record is not None:
            records.append(record)
    return records
