"""Join persisted matches back to their candidates for presentation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ...data.candidates_repository import load_candidates_by_ids
from ...models.domain import FREIGHT, SERVICE_REQUEST, CandidateKind
from ...persistence.matches import CANDIDATE_COLUMNS, fetch_match_rows


@dataclass(slots=True)
class CurrentMatches:
    freight_matches: list[dict[str, Any]] = field(default_factory=list)
    service_request_matches: list[dict[str, Any]] = field(default_factory=list)
    freights: list[dict[str, Any]] = field(default_factory=list)
    service_requests: list[dict[str, Any]] = field(default_factory=list)


def _open_matches(client, kind: CandidateKind, driver_id: str) -> tuple[list[dict], list[dict]]:
    rows = fetch_match_rows(client, kind, driver_id)
    column = CANDIDATE_COLUMNS[kind]
    ids = list(dict.fromkeys(str(row[column]) for row in rows if row.get(column) is not None))
    open_candidates = {c.candidate_id: c for c in load_candidates_by_ids(client, kind, ids)}

    # Candidates that left OPEN since the last run drop out here.
    matches = [row for row in rows if str(row.get(column)) in open_candidates]
    candidates = [open_candidates[str(row[column])].raw for row in matches]
    return matches, candidates


def fetch_current_matches(client, driver_id: str) -> CurrentMatches:
    freight_matches, freights = _open_matches(client, FREIGHT, driver_id)
    service_matches, service_requests = _open_matches(client, SERVICE_REQUEST, driver_id)
    return CurrentMatches(
        freight_matches=freight_matches,
        service_request_matches=service_matches,
        freights=freights,
        service_requests=service_requests,
    )
