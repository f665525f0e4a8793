import datetime
import logging
from typing import Sequence

from .catalog import TargetCatalog
from .filters import (
    BELOW_MIN_ALT,
    BELOW_MIN_SCORE,
    GEAR_MISMATCH,
    NEVER_RISES,
    rejection_reason,
    select_setups,
    select_targets,
)
from .gear import gear_compatibility
from .moon import moon_state
from .scoring import score_target
from .types import (
    FocalLengthBand,
    GearFitResult,
    MoonState,
    ObserverContext,
    OpticalSetup,
    Recommendation,
    RecommendationFilters,
    RecommendationResult,
    TargetType,
)


GEAR_MATCH_THRESHOLD = 60


class Planner:
    """Ranks catalog targets for an observer and annotates them with gear fit.

    The target catalog and setups are fixed at construction and never
    modified, so one planner can serve any number of requests.
    """

    def __init__(
        self,
        catalog: TargetCatalog,
        setups: Sequence[OpticalSetup] = (),
        config=None,
    ):
        self._catalog = catalog
        self._setups = tuple(setups)
        self._config = config

    @property
    def catalog(self) -> TargetCatalog:
        return self._catalog

    @property
    def setups(self) -> tuple[OpticalSetup, ...]:
        return self._setups

    def recommend(
        self,
        observer: ObserverContext,
        moon: MoonState | None = None,
        filters: RecommendationFilters | None = None,
    ) -> RecommendationResult:
        filters = filters or self.default_filters(self._config)
        if filters.limit is not None and filters.limit <= 0:
            raise ValueError("Limit must be positive")
        moon = moon or moon_state(observer.instant)

        targets = select_targets(self._catalog, filters)
        setups = select_setups(self._setups, filters)
        rejection = _RejectionStats()
        entries: list[Recommendation] = []

        for target in targets:
            visibility = score_target(
                target,
                observer.latitude_deg,
                observer.longitude_deg,
                observer.instant,
                moon,
            )
            reason = rejection_reason(visibility, filters)
            if reason is not None:
                rejection.add(reason)
                continue

            gear = gear_compatibility(target, setups)
            gear_score = gear.overall_score
            best_setup = gear.best
            if filters.gear_setup_id is not None:
                match = _find_setup(gear.all_scores, filters.gear_setup_id)
                if match is None or match.combined_score < GEAR_MATCH_THRESHOLD:
                    rejection.add(GEAR_MISMATCH)
                    continue
                gear_score = match.combined_score
                best_setup = match

            entries.append(
                Recommendation(
                    visibility=visibility,
                    gear=gear,
                    gear_score=gear_score,
                    best_setup=best_setup,
                )
            )

        # list.sort is stable: equal scores keep catalog order.
        entries.sort(key=lambda e: e.visibility.score, reverse=True)
        if filters.limit is not None:
            entries = entries[: filters.limit]

        logging.debug(
            "Recommend at %s: %d candidates, %d kept, rejected %s",
            observer.instant.isoformat(),
            len(targets),
            len(entries),
            rejection.counts,
        )

        message = None
        if not entries:
            message = _build_no_target_message(rejection, filters, len(targets))
        return RecommendationResult(
            observer=observer,
            moon=moon,
            filters=filters,
            entries=tuple(entries),
            message=message,
        )

    @staticmethod
    def default_filters(config) -> RecommendationFilters:
        if config is None:
            return RecommendationFilters()
        return RecommendationFilters(
            min_score=config.planner_min_score,
            min_altitude_deg=config.planner_min_altitude_deg,
            gear_setup_id=config.planner_gear_setup,
            setup_ids=config.planner_setup_ids,
            limit=config.planner_limit,
        )


def recommend(
    lat_deg: float,
    lon_deg: float,
    instant: datetime.datetime,
    moon: MoonState | None,
    catalog: TargetCatalog,
    setups: Sequence[OpticalSetup] = (),
    filters: RecommendationFilters | None = None,
) -> RecommendationResult:
    observer = ObserverContext(latitude_deg=lat_deg, longitude_deg=lon_deg, instant=instant)
    return Planner(catalog, setups).recommend(observer, moon=moon, filters=filters)


def build_filters(
    types: Sequence[str] | None = None,
    focal_length: str | None = None,
    min_score: int = 0,
    min_altitude_deg: float = -90.0,
    gear_setup_id: str | None = None,
    setup_ids: Sequence[str] | None = None,
    limit: int | None = None,
) -> RecommendationFilters:
    """Build filters from plain strings, e.g. command line or config values."""
    try:
        type_set = frozenset(TargetType(t) for t in types) if types else None
        band = FocalLengthBand(focal_length) if focal_length else None
    except ValueError as e:
        raise ValueError(f"Invalid filter value: {e}") from e
    return RecommendationFilters(
        types=type_set,
        focal_length=band,
        min_score=min_score,
        min_altitude_deg=min_altitude_deg,
        gear_setup_id=gear_setup_id,
        setup_ids=frozenset(setup_ids) if setup_ids else None,
        limit=limit,
    )


def _find_setup(scores: Sequence[GearFitResult], setup_id: str) -> GearFitResult | None:
    for result in scores:
        if result.setup.id == setup_id:
            return result
    return None


class _RejectionStats:
    def __init__(self) -> None:
        self.counts: dict[str, int] = {}

    def add(self, reason: str) -> None:
        self.counts[reason] = self.counts.get(reason, 0) + 1

    def get(self, reason: str) -> int:
        return self.counts.get(reason, 0)


def _build_no_target_message(
    rejection: _RejectionStats,
    filters: RecommendationFilters,
    candidates: int,
) -> str:
    parts = ["No recommended targets."]
    if candidates == 0:
        parts.append("No catalog targets match the type/focal length filters.")
        return " ".join(parts)
    if rejection.get(NEVER_RISES):
        parts.append(f"{rejection.get(NEVER_RISES)} targets never rise at this site.")
    if rejection.get(BELOW_MIN_SCORE):
        parts.append(f"{rejection.get(BELOW_MIN_SCORE)} targets scored below {filters.min_score}.")
    if rejection.get(BELOW_MIN_ALT):
        parts.append(
            f"{rejection.get(BELOW_MIN_ALT)} targets are below {filters.min_altitude_deg:.0f}° right now."
        )
    if rejection.get(GEAR_MISMATCH):
        parts.append(
            f"{rejection.get(GEAR_MISMATCH)} targets are a poor match for {filters.gear_setup_id}."
        )
    return " ".join(parts)
