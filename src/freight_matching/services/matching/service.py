"""High-level orchestration for a driver's matching run."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, TypeVar

from ...data.candidates_repository import load_open_freights, load_open_service_requests
from ...data.coverage_repository import load_active_areas
from ...models.domain import FREIGHT, SERVICE_REQUEST, DriverIdentity
from ...persistence.matches import UpsertResult, clear_driver_matches, upsert_matches
from .assembler import CurrentMatches, fetch_current_matches
from .engine import MatchingConfig, match_candidates

logger = logging.getLogger(__name__)

NO_COVERAGE_MESSAGE = "No active coverage areas configured"

T = TypeVar("T")


class MatchingError(Exception):
    """Raised when a matching run cannot read or write the backing store."""

    def __init__(self, operation: str, driver_id: str, cause: Exception | None = None):
        self.operation = operation
        self.driver_id = driver_id
        self.cause = cause
        super().__init__(f"Matching failed during {operation} for driver {driver_id}: {cause}")


@dataclass(slots=True)
class MatchingRun:
    """Outcome of one run: the current matches plus what the run did."""

    current: CurrentMatches
    freights_checked: int = 0
    service_requests_checked: int = 0
    freight_result: UpsertResult = field(default_factory=UpsertResult)
    service_request_result: UpsertResult = field(default_factory=UpsertResult)
    no_coverage: bool = False
    message: str | None = None


def _step(operation: str, driver_id: str, func: Callable[[], T]) -> T:
    try:
        return func()
    except Exception as exc:
        logger.exception(f"Matching step '{operation}' failed for driver {driver_id}")
        raise MatchingError(operation, driver_id, exc) from exc


def run_matching_for_driver(
    client,
    driver: DriverIdentity,
    config: MatchingConfig | None = None,
) -> MatchingRun:
    """Recompute and replace all of ``driver``'s matches.

    All reads happen before the driver's old matches are deleted, so a read
    failure leaves them untouched. A failure between the delete and the
    inserts leaves the driver with no matches until the next run. The store
    offers no transaction here, so callers must not run this concurrently for
    the same driver.
    """
    config = config or MatchingConfig.from_settings()
    driver_id = driver.profile_id
    started = time.perf_counter()
    logger.info(f"Starting matching run for driver {driver_id}")

    areas = _step(
        "load_coverage_areas",
        driver_id,
        lambda: load_active_areas(client, driver.user_id, default_radius_km=config.default_radius_km),
    )

    if not areas:
        _step("clear_matches", driver_id, lambda: clear_driver_matches(client, driver_id))
        logger.info(f"Driver {driver_id} has no active coverage areas; matches cleared")
        current = _step("fetch_current_matches", driver_id, lambda: fetch_current_matches(client, driver_id))
        return MatchingRun(current=current, no_coverage=True, message=NO_COVERAGE_MESSAGE)

    freights = _step(
        "load_freights",
        driver_id,
        lambda: load_open_freights(client, limit=config.candidate_page_size),
    )
    service_requests = _step(
        "load_service_requests",
        driver_id,
        lambda: load_open_service_requests(
            client,
            service_types=config.urban_service_types,
            limit=config.candidate_page_size,
        ),
    )

    _step("clear_matches", driver_id, lambda: clear_driver_matches(client, driver_id))

    freight_matches = match_candidates(freights, areas, driver_id, config)
    service_matches = match_candidates(service_requests, areas, driver_id, config)

    freight_result = _step(
        "upsert_freight_matches",
        driver_id,
        lambda: upsert_matches(client, FREIGHT, freight_matches),
    )
    service_result = _step(
        "upsert_service_request_matches",
        driver_id,
        lambda: upsert_matches(client, SERVICE_REQUEST, service_matches),
    )

    if freight_result.failed or service_result.failed:
        logger.warning(
            f"Driver {driver_id}: {freight_result.failed} freight and "
            f"{service_result.failed} service request matches could not be saved"
        )

    current = _step("fetch_current_matches", driver_id, lambda: fetch_current_matches(client, driver_id))

    elapsed = time.perf_counter() - started
    logger.info(
        f"Matching run for driver {driver_id} finished in {elapsed:.2f}s: "
        f"{len(areas)} areas, {len(freights)} freights checked ({freight_result.succeeded} matched), "
        f"{len(service_requests)} service requests checked ({service_result.succeeded} matched)"
    )
    return MatchingRun(
        current=current,
        freights_checked=len(freights),
        service_requests_checked=len(service_requests),
        freight_result=freight_result,
        service_request_result=service_result,
    )


def get_current_matches(client, driver: DriverIdentity) -> CurrentMatches:
    return _step(
        "fetch_current_matches",
        driver.profile_id,
        lambda: fetch_current_matches(client, driver.profile_id),
    )
