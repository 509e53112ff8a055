"""Coverage policy decisions kept apart from the matching loop."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, Sequence

from ...models.domain import Candidate, CoverageArea

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _creation_key(area: CoverageArea) -> tuple[datetime, str]:
    created = area.created_at or _EPOCH
    if created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)
    return (created, area.area_id)


def order_areas(areas: Iterable[CoverageArea]) -> list[CoverageArea]:
    """Evaluation order for a driver's areas: oldest first, then by area id.

    A city match ends the search, so this order decides which area wins when
    more than one could match the same candidate.
    """
    return sorted(areas, key=_creation_key)


def area_applies_to(area: CoverageArea, candidate: Candidate) -> bool:
    """Whether ``area`` may be used to match ``candidate``.

    Origin and destination areas are pooled: either kind matches the
    candidate's pickup location.
    """
    return area.is_active


def is_driver_role(role: str | None, allowed: Sequence[str]) -> bool:
    return bool(role) and role.upper() in {r.upper() for r in allowed}
