from typing import Sequence

from skyscout.errors import UnknownSetupError

from .catalog import TargetCatalog
from .types import OpticalSetup, RecommendationFilters, Target, VisibilityResult


NEVER_RISES = "never_rises"
BELOW_MIN_SCORE = "below_min_score"
BELOW_MIN_ALT = "below_min_alt"
GEAR_MISMATCH = "gear_mismatch"


def select_targets(catalog: TargetCatalog, filters: RecommendationFilters) -> list[Target]:
    return catalog.filter(types=filters.types, focal_length=filters.focal_length)


def select_setups(
    setups: Sequence[OpticalSetup],
    filters: RecommendationFilters,
) -> list[OpticalSetup]:
    """Setups considered for the best-setup annotation."""
    known = {s.id for s in setups}
    wanted = set(filters.setup_ids or ())
    if filters.gear_setup_id is not None:
        wanted.add(filters.gear_setup_id)
    unknown = sorted(wanted - known)
    if unknown:
        raise UnknownSetupError(f"Unknown setup(s): {', '.join(unknown)}")
    if not filters.setup_ids:
        return list(setups)
    pool = set(filters.setup_ids)
    if filters.gear_setup_id is not None:
        pool.add(filters.gear_setup_id)
    return [s for s in setups if s.id in pool]


def rejection_reason(result: VisibilityResult, filters: RecommendationFilters) -> str | None:
    if result.never_rises:
        return NEVER_RISES
    if result.score < filters.min_score:
        return BELOW_MIN_SCORE
    if result.altitude_deg < filters.min_altitude_deg:
        return BELOW_MIN_ALT
    return None
