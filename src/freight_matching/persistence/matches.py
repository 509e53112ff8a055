"""Database persistence for driver match records."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Sequence

from ..models.domain import FREIGHT, SERVICE_REQUEST, CandidateKind, MatchRecord

logger = logging.getLogger(__name__)

MATCH_TABLES: dict[CandidateKind, str] = {
    FREIGHT: "freight_matches",
    SERVICE_REQUEST: "service_request_matches",
}
CANDIDATE_COLUMNS: dict[CandidateKind, str] = {
    FREIGHT: "freight_id",
    SERVICE_REQUEST: "service_request_id",
}


@dataclass(slots=True)
class UpsertResult:
    succeeded: int = 0
    failed: int = 0


def match_to_row(record: MatchRecord, created_at: datetime | None = None) -> dict[str, Any]:
    timestamp = record.created_at or created_at or datetime.now(timezone.utc)
    return {
        CANDIDATE_COLUMNS[record.kind]: record.candidate_id,
        "driver_id": record.driver_id,
        "driver_area_id": record.area_id,
        "match_type": record.match_type,
        "distance_m": record.distance_meters,
        "match_score": record.match_score,
        "created_at": timestamp.isoformat(),
    }


def clear_driver_matches(client, driver_id: str) -> None:
    """Delete every match row of ``driver_id`` in both match tables."""
    for kind, table in MATCH_TABLES.items():
        client.table(table).delete().eq("driver_id", driver_id).execute()
        logger.debug(f"Cleared {kind.lower()} matches for driver {driver_id}")


def upsert_matches(client, kind: CandidateKind, records: Sequence[MatchRecord]) -> UpsertResult:
    """Upsert ``records`` keyed by (candidate, driver).

    Tries one bulk request first. If it fails, every row is sent on its own so
    that one bad row does not take the rest of the batch down with it.
    """
    if not records:
        return UpsertResult()

    table = MATCH_TABLES[kind]
    conflict = f"{CANDIDATE_COLUMNS[kind]},driver_id"
    now = datetime.now(timezone.utc)
    rows = [match_to_row(record, now) for record in records]

    try:
        client.table(table).upsert(rows, on_conflict=conflict).execute()
        return UpsertResult(succeeded=len(rows))
    except Exception as exc:
        logger.warning(f"Bulk upsert of {len(rows)} rows into {table} failed, retrying row by row: {exc}")

    result = UpsertResult()
    for row in rows:
        try:
            client.table(table).upsert(row, on_conflict=conflict).execute()
            result.succeeded += 1
        except Exception as exc:
            result.failed += 1
            logger.warning(
                f"Failed to upsert match {row[CANDIDATE_COLUMNS[kind]]} for driver {row['driver_id']} into {table}: {exc}"
            )
    return result


def fetch_match_rows(client, kind: CandidateKind, driver_id: str) -> list[dict[str, Any]]:
    """Persisted match rows for ``driver_id``, best score first."""
    response = (
        client.table(MATCH_TABLES[kind])
        .select("*")
        .eq("driver_id", driver_id)
        .order("match_score", desc=True)
        .execute()
    )
    return list(response.data or [])
