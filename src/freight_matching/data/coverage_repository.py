"""Read access to drivers' declared coverage areas (``user_cities``)."""

from __future__ import annotations

import logging
import math
from datetime import datetime
from typing import Any, Optional

from ..models.domain import AreaKind, CityRef, CoverageArea

AREAS_TABLE = "user_cities"
AREA_COLUMNS = "id, user_id, city_id, radius_km, type, is_active, created_at, cities(id, name, state, lat, lng)"

_KIND_BY_TYPE: dict[str, AreaKind] = {
    "MOTORISTA_ORIGEM": "ORIGIN",
    "MOTORISTA_DESTINO": "DESTINATION",
    "ORIGIN": "ORIGIN",
    "DESTINATION": "DESTINATION",
}
DRIVER_AREA_TYPES = ("MOTORISTA_ORIGEM", "MOTORISTA_DESTINO")


def coerce_coordinate(value: Any) -> Optional[float]:
    """Return a finite float or None; blank strings and NaN count as missing."""
    if value is None or value == "":
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def parse_timestamp(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if not value:
        return None
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None


def _parse_city(row: dict) -> Optional[CityRef]:
    city = row.get("cities")
    if isinstance(city, list):
        city = city[0] if city else None
    city_id = row.get("city_id")
    if not city and not city_id:
        return None
    city = city or {}
    return CityRef(
        city_id=str(city.get("id") or city_id) if (city.get("id") or city_id) else None,
        name=city.get("name"),
        state=city.get("state"),
        lat=coerce_coordinate(city.get("lat")),
        lng=coerce_coordinate(city.get("lng")),
    )


def parse_area_row(row: dict, default_radius_km: float) -> CoverageArea:
    radius = coerce_coordinate(row.get("radius_km"))
    if radius is None or radius <= 0:
        radius = default_radius_km
    return CoverageArea(
        area_id=str(row["id"]),
        driver_id=str(row.get("user_id") or ""),
        city_ref=_parse_city(row),
        radius_km=radius,
        kind=_KIND_BY_TYPE.get(str(row.get("type") or "").upper(), "ORIGIN"),
        is_active=bool(row.get("is_active", True)),
        created_at=parse_timestamp(row.get("created_at")),
    )


def load_active_areas(client, user_id: str, *, default_radius_km: float) -> tuple[CoverageArea, ...]:
    """Load a driver's active coverage areas of both origin and destination kinds.

    Rows come back in creation order. Client errors propagate to the caller.
    """
    response = (
        client.table(AREAS_TABLE)
        .select(AREA_COLUMNS)
        .eq("user_id", user_id)
        .eq("is_active", True)
        .in_("type", list(DRIVER_AREA_TYPES))
        .order("created_at")
        .execute()
    )

    areas: list[CoverageArea] = []
    for row in response.data or []:
        try:
            area = parse_area_row(row, default_radius_km)
        except (KeyError, TypeError) as e:
            logging.warning(f"Skipping invalid coverage area row: {e}")
            continue
        if area.is_active:
            areas.append(area)
    return tuple(areas)
