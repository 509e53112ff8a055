#!/usr/bin/env python3
"""Run matching for one driver profile; meant to be called by a scheduler per driver.

Usage: python run_matching.py <profile_id>

Do not start two runs for the same driver at once: each run deletes and
rewrites that driver's matches.
"""

import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent / "src"))

from freight_matching.config import settings  # noqa: E402
from freight_matching.db.supabase import get_supabase_client  # noqa: E402
from freight_matching.models.domain import DriverIdentity  # noqa: E402
from freight_matching.services.matching import MatchingError, run_matching_for_driver  # noqa: E402
from freight_matching.services.matching.policy import is_driver_role  # noqa: E402


def main(argv: list[str]) -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    if len(argv) != 2:
        print(__doc__, file=sys.stderr)
        return 2

    client = get_supabase_client()
    if client is None:
        print("Supabase is not configured (FM_SUPABASE_URL / FM_SUPABASE_KEY)", file=sys.stderr)
        return 1

    profile_id = argv[1]
    rows = client.table("profiles").select("id, user_id, role, active_mode").eq("id", profile_id).execute().data or []
    if not rows:
        print(f"Profile {profile_id} not found", file=sys.stderr)
        return 1

    profile = rows[0]
    role = profile.get("active_mode") or profile.get("role")
    if not is_driver_role(role, settings.driver_roles):
        print(f"Profile {profile_id} has role {role}, which cannot run matching", file=sys.stderr)
        return 1

    driver = DriverIdentity(profile_id=str(profile["id"]), user_id=str(profile["user_id"]), role=str(role))
    try:
        run = run_matching_for_driver(client, driver)
    except MatchingError as exc:
        print(f"Matching failed during {exc.operation}: {exc.cause}", file=sys.stderr)
        return 1

    if run.no_coverage:
        print(run.message)
    print(
        f"freights checked={run.freights_checked} matched={run.freight_result.succeeded} "
        f"failed={run.freight_result.failed}; "
        f"service requests checked={run.service_requests_checked} "
        f"matched={run.service_request_result.succeeded} failed={run.service_request_result.failed}"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
