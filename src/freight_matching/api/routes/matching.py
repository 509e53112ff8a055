"""Driver matching endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from ...models.domain import DriverIdentity
from ...schemas.matching import CreatedCounts, FailedCounts, MatchingResponse, MatchSets, ProcessedCounts
from ...services.matching.assembler import CurrentMatches
from ...services.matching.service import MatchingError, get_current_matches, run_matching_for_driver
from ..deps import get_current_driver, get_db

router = APIRouter(prefix="/matching", tags=["matching"])

UNAVAILABLE_DETAIL = "Matching temporarily unavailable, please retry"


def _envelope(current: CurrentMatches, **extra) -> MatchingResponse:
    return MatchingResponse(
        matches=MatchSets(
            freight_matches=current.freight_matches,
            service_request_matches=current.service_request_matches,
        ),
        freights=current.freights,
        service_requests=current.service_requests,
        **extra,
    )


@router.post("/driver", response_model=MatchingResponse, status_code=status.HTTP_200_OK)
def run_driver_matching(
    driver: DriverIdentity = Depends(get_current_driver),
    client=Depends(get_db),
) -> MatchingResponse:
    """Recompute the caller's matches and return the open ones."""
    try:
        run = run_matching_for_driver(client, driver)
    except MatchingError as exc:
        logging.error(f"Matching run aborted at {exc.operation} for driver {exc.driver_id}")
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=UNAVAILABLE_DETAIL) from exc

    return _envelope(
        run.current,
        created=CreatedCounts(
            freight_matches=run.freight_result.succeeded,
            service_request_matches=run.service_request_result.succeeded,
        ),
        failed=FailedCounts(
            freight_matches=run.freight_result.failed,
            service_request_matches=run.service_request_result.failed,
        ),
        processed=ProcessedCounts(
            freights_checked=run.freights_checked,
            service_requests_checked=run.service_requests_checked,
        ),
        no_coverage=run.no_coverage,
        message=run.message,
    )


@router.get("/driver", response_model=MatchingResponse, status_code=status.HTTP_200_OK)
def read_driver_matches(
    driver: DriverIdentity = Depends(get_current_driver),
    client=Depends(get_db),
) -> MatchingResponse:
    try:
        current = get_current_matches(client, driver)
    except MatchingError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=UNAVAILABLE_DETAIL) from exc
    return _envelope(current)
