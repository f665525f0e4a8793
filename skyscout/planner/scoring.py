import datetime
from dataclasses import dataclass
from types import MappingProxyType

from skyscout.util.format import round_half_up

from .astro import angular_separation, equatorial_to_horizontal
from .riseset import hours_above_altitude, rise_transit_set
from .types import MoonState, Target, VisibilityResult


RISE_SET_ALTITUDE_DEG = 15.0
IMAGING_ALTITUDE_DEG = 30.0


@dataclass
class ScoreComponents:
    alt: float
    hours: float
    moon_separation: float
    season: float
    moon_illumination: float

    def total(self) -> float:
        return (
            self.alt
            + self.hours
            + self.moon_separation
            + self.season
            - self.moon_illumination
        )

    def as_dict(self) -> dict[str, float]:
        return {
            "alt": self.alt,
            "hours": self.hours,
            "moon_separation": self.moon_separation,
            "season": self.season,
            "moon_illumination": -self.moon_illumination,
        }


def score_target(
    target: Target,
    lat_deg: float,
    lon_deg: float,
    dt: datetime.datetime,
    moon: MoonState,
) -> VisibilityResult:
    """Score how well ``target`` can be imaged from the site at ``dt`` (0-100).

    Out-of-range inputs are not validated; they give meaningless but finite
    scores.
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=datetime.timezone.utc)
    rts = rise_transit_set(
        target.ra_hours, target.dec_deg, lat_deg, lon_deg, dt, RISE_SET_ALTITUDE_DEG
    )
    current = equatorial_to_horizontal(target.ra_hours, target.dec_deg, lat_deg, lon_deg, dt)
    moon_sep = angular_separation(target.ra_hours, target.dec_deg, moon.ra_hours, moon.dec_deg)
    hours_above = hours_above_altitude(target, lat_deg, lon_deg, dt, IMAGING_ALTITUDE_DEG)
    month = dt.astimezone(datetime.timezone.utc).month
    is_good_month = month in target.best_months

    components = ScoreComponents(
        alt=_score_alt(current.altitude_deg),
        hours=_score_hours(hours_above),
        moon_separation=_score_moon_separation(moon_sep),
        season=_score_season(is_good_month),
        moon_illumination=_moon_illumination_penalty(moon.illumination_percent),
    )
    score = max(0.0, min(100.0, components.total()))

    return VisibilityResult(
        target=target,
        altitude_deg=current.altitude_deg,
        azimuth_deg=current.azimuth_deg,
        rise=rts.rise,
        transit=rts.transit,
        set=rts.set,
        max_altitude_deg=rts.max_altitude_deg,
        never_rises=rts.never_rises,
        never_sets=rts.never_sets,
        moon_separation_deg=moon_sep,
        hours_above_30=hours_above,
        is_good_month=is_good_month,
        score=round_half_up(score),
        score_components=MappingProxyType(components.as_dict()),
    )


def _score_alt(altitude_deg: float) -> float:
    if altitude_deg <= IMAGING_ALTITUDE_DEG:
        return 0.0
    return min(30.0, (altitude_deg - IMAGING_ALTITUDE_DEG) * 0.75)


def _score_hours(hours_above: float) -> float:
    return min(25.0, hours_above * 3.0)


def _score_moon_separation(separation_deg: float) -> float:
    if separation_deg > 90.0:
        return 25.0
    if separation_deg > 45.0:
        return 15.0
    if separation_deg > 20.0:
        return 5.0
    return 0.0


def _score_season(is_good_month: bool) -> float:
    return 20.0 if is_good_month else 0.0


def _moon_illumination_penalty(illumination_percent: float) -> float:
    if illumination_percent <= 50.0:
        return 0.0
    return (illumination_percent - 50.0) * 0.3
