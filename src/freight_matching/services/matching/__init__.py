"""Driver matching services."""

from .engine import MatchingConfig, find_best_match, match_candidates
from .service import MatchingError, MatchingRun, get_current_matches, run_matching_for_driver

__all__ = [
    "MatchingConfig",
    "MatchingError",
    "MatchingRun",
    "find_best_match",
    "match_candidates",
    "run_matching_for_driver",
    "get_current_matches",
]
