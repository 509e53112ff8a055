"""Read access to open freights and service requests."""

from __future__ import annotations

import logging
from typing import Iterable, Sequence

from .coverage_repository import coerce_coordinate, parse_timestamp
from ..models.domain import FREIGHT, SERVICE_REQUEST, STATUS_OPEN, Candidate, CandidateKind

FREIGHTS_TABLE = "freights"
SERVICE_REQUESTS_TABLE = "service_requests"

CANDIDATE_TABLES: dict[CandidateKind, str] = {
    FREIGHT: FREIGHTS_TABLE,
    SERVICE_REQUEST: SERVICE_REQUESTS_TABLE,
}


def _text(value) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_freight_row(row: dict) -> Candidate:
    return Candidate(
        candidate_id=str(row["id"]),
        kind=FREIGHT,
        status=str(row.get("status") or ""),
        assigned_driver_id=_text(row.get("driver_id")),
        lat=coerce_coordinate(row.get("origin_lat")),
        lng=coerce_coordinate(row.get("origin_lng")),
        city_label=_text(row.get("origin_city")),
        state_label=_text(row.get("origin_state")),
        city_ref_id=_text(row.get("origin_city_id")),
        service_type=_text(row.get("service_type")),
        created_at=parse_timestamp(row.get("created_at")),
        raw=row,
    )


def parse_service_request_row(row: dict) -> Candidate:
    return Candidate(
        candidate_id=str(row["id"]),
        kind=SERVICE_REQUEST,
        status=str(row.get("status") or ""),
        assigned_driver_id=_text(row.get("provider_id")),
        lat=coerce_coordinate(row.get("location_lat")),
        lng=coerce_coordinate(row.get("location_lng")),
        city_label=_text(row.get("city_name")),
        state_label=_text(row.get("state")),
        city_ref_id=_text(row.get("city_id")),
        service_type=_text(row.get("service_type")),
        created_at=parse_timestamp(row.get("created_at")),
        raw=row,
    )


_PARSERS = {
    FREIGHT: parse_freight_row,
    SERVICE_REQUEST: parse_service_request_row,
}


def _parse_rows(kind: CandidateKind, rows: Iterable[dict]) -> list[Candidate]:
    parser = _PARSERS[kind]
    candidates: list[Candidate] = []
    for row in rows:
        try:
            candidates.append(parser(row))
        except (KeyError, TypeError) as e:
            logging.warning(f"Skipping invalid {kind.lower()} row: {e}")
    return candidates


def load_open_freights(client, *, limit: int) -> list[Candidate]:
    """Newest open freights that no driver has taken yet."""
    response = (
        client.table(FREIGHTS_TABLE)
        .select("*")
        .eq("status", STATUS_OPEN)
        .is_("driver_id", "null")
        .order("created_at", desc=True)
        .limit(limit)
        .execute()
    )
    return _parse_rows(FREIGHT, response.data or [])


def load_open_service_requests(client, *, service_types: Sequence[str], limit: int) -> list[Candidate]:
    """Newest open, unassigned service requests restricted to ``service_types``."""
    if not service_types:
        return []
    response = (
        client.table(SERVICE_REQUESTS_TABLE)
        .select("*")
        .eq("status", STATUS_OPEN)
        .is_("provider_id", "null")
        .in_("service_type", list(service_types))
        .order("created_at", desc=True)
        .limit(limit)
        .execute()
    )
    return _parse_rows(SERVICE_REQUEST, response.data or [])


def load_candidates_by_ids(client, kind: CandidateKind, ids: Sequence[str]) -> list[Candidate]:
    """Candidates with the given ids that are still open."""
    if not ids:
        return []
    response = (
        client.table(CANDIDATE_TABLES[kind])
        .select("*")
        .in_("id", list(ids))
        .eq("status", STATUS_OPEN)
        .execute()
    )
    return _parse_rows(kind, response.data or [])
