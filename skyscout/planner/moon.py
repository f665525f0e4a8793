"""Low-order lunar ephemeris.

Accuracy is around a degree in position, which is enough for scoring target
separation from the Moon but not for predicting moonrise or moonset.
"""

import datetime
import math

from skyscout.util.format import normalize

from .astro import centuries_since_j2000, to_julian_date
from .types import MoonPhase, MoonPhaseName, MoonState


MEAN_OBLIQUITY_DEG = 23.439
SYNODIC_MONTH_DAYS = 29.530588853
REFERENCE_NEW_MOON = datetime.datetime(2000, 1, 6, 18, 14, tzinfo=datetime.timezone.utc)

# Upper bound of each waxing bin; waning bins mirror these around 0.5.
_PHASE_BINS = (
    (0.216, MoonPhaseName.WAXING_CRESCENT),
    (0.284, MoonPhaseName.FIRST_QUARTER),
    (0.466, MoonPhaseName.WAXING_GIBBOUS),
    (0.534, MoonPhaseName.FULL_MOON),
    (0.716, MoonPhaseName.WANING_GIBBOUS),
    (0.784, MoonPhaseName.LAST_QUARTER),
)
_NEW_MOON_LOW = 0.033
_NEW_MOON_HIGH = 0.967


def moon_position(dt: datetime.datetime) -> tuple[float, float]:
    """Return (ra_hours, dec_deg) of the Moon."""
    t = centuries_since_j2000(to_julian_date(dt))
    mean_lon = normalize(218.3164477 + 481267.88123421 * t, 360.0)
    mean_anomaly = math.radians(normalize(134.9633964 + 477198.8675055 * t, 360.0))

    lam = math.radians(mean_lon + 6.289 * math.sin(mean_anomaly))
    beta = math.radians(5.128 * math.sin(mean_anomaly))
    eps = math.radians(MEAN_OBLIQUITY_DEG)

    ra = math.atan2(
        math.sin(lam) * math.cos(eps) - math.tan(beta) * math.sin(eps),
        math.cos(lam),
    )
    sin_dec = math.sin(beta) * math.cos(eps) + math.cos(beta) * math.sin(eps) * math.sin(lam)
    dec = math.asin(max(-1.0, min(1.0, sin_dec)))
    return normalize(math.degrees(ra) / 15.0, 24.0), math.degrees(dec)


def phase_fraction(dt: datetime.datetime) -> float:
    """Fraction of the synodic month elapsed: 0 new, 0.5 full, always in [0, 1)."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=datetime.timezone.utc)
    days = (dt - REFERENCE_NEW_MOON).total_seconds() / 86400.0
    fraction = normalize(days, SYNODIC_MONTH_DAYS) / SYNODIC_MONTH_DAYS
    if fraction >= 1.0:
        # Division can round a value just under one month up to exactly 1.0.
        return 0.0
    return fraction


def illumination_from_phase(fraction: float) -> float:
    if fraction < 0.5:
        return fraction * 2.0 * 100.0
    return (2.0 - fraction * 2.0) * 100.0


def phase_name(fraction: float) -> MoonPhaseName:
    if fraction < _NEW_MOON_LOW or fraction > _NEW_MOON_HIGH:
        return MoonPhaseName.NEW_MOON
    for upper, name in _PHASE_BINS:
        if fraction < upper:
            return name
    return MoonPhaseName.WANING_CRESCENT


def moon_phase(dt: datetime.datetime) -> MoonPhase:
    fraction = phase_fraction(dt)
    return MoonPhase(
        phase_fraction=fraction,
        illumination_percent=illumination_from_phase(fraction),
        phase_name=phase_name(fraction),
    )


def moon_state(dt: datetime.datetime) -> MoonState:
    phase = moon_phase(dt)
    ra_hours, dec_deg = moon_position(dt)
    return MoonState(
        phase_fraction=phase.phase_fraction,
        illumination_percent=phase.illumination_percent,
        phase_name=phase.phase_name,
        ra_hours=ra_hours,
        dec_deg=dec_deg,
    )
