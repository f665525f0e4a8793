import datetime
import math

from skyscout.util.format import normalize

from .astro import gmst_hours, to_julian_date
from .types import RiseTransitSet, Target


# Observing night assumed for targets that never drop below the threshold.
FULL_NIGHT_HOURS = 12.0


def _utc_midnight(dt: datetime.datetime) -> datetime.datetime:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=datetime.timezone.utc)
    dt = dt.astimezone(datetime.timezone.utc)
    return dt.replace(hour=0, minute=0, second=0, microsecond=0)


def transit_time(ra_hours: float, lon_deg: float, dt: datetime.datetime) -> datetime.datetime:
    """Meridian crossing nearest to UTC midnight of ``dt``'s date."""
    midnight = _utc_midnight(dt)
    lst = normalize(gmst_hours(to_julian_date(midnight)) + lon_deg / 15.0, 24.0)
    # Sidereal hours are used as solar hours here; the ~10 s/h drift is accepted.
    offset_hours = normalize(ra_hours - lst, 24.0)
    if offset_hours > 12.0:
        offset_hours -= 24.0
    return midnight + datetime.timedelta(hours=offset_hours)


def rise_transit_set(
    ra_hours: float,
    dec_deg: float,
    lat_deg: float,
    lon_deg: float,
    dt: datetime.datetime,
    min_altitude_deg: float = 0.0,
) -> RiseTransitSet:
    """Rise, transit and set of a fixed target relative to ``min_altitude_deg``.

    ``rise`` and ``set`` are ``None`` when the target is circumpolar
    (``never_sets``) or never climbs above the threshold (``never_rises``);
    in the latter case ``transit`` is ``None`` as well. Callers must check
    the flags before using the times.
    """
    transit = transit_time(ra_hours, lon_deg, dt)
    max_alt = 90.0 - abs(lat_deg - dec_deg)

    lat_rad = math.radians(lat_deg)
    dec_rad = math.radians(dec_deg)
    numerator = math.sin(math.radians(min_altitude_deg)) - math.sin(lat_rad) * math.sin(dec_rad)
    denom = math.cos(lat_rad) * math.cos(dec_rad)
    if denom == 0.0:
        cos_h = math.copysign(math.inf, numerator)
    else:
        cos_h = numerator / denom

    if cos_h < -1.0:
        return RiseTransitSet(
            rise=None,
            transit=transit,
            set=None,
            max_altitude_deg=max_alt,
            never_sets=True,
            never_rises=False,
        )
    if cos_h > 1.0:
        return RiseTransitSet(
            rise=None,
            transit=None,
            set=None,
            max_altitude_deg=max_alt,
            never_sets=False,
            never_rises=True,
        )

    half_arc = datetime.timedelta(hours=math.degrees(math.acos(cos_h)) / 15.0)
    return RiseTransitSet(
        rise=transit - half_arc,
        transit=transit,
        set=transit + half_arc,
        max_altitude_deg=max_alt,
    )


def hours_above_altitude(
    target: Target,
    lat_deg: float,
    lon_deg: float,
    dt: datetime.datetime,
    min_altitude_deg: float = 30.0,
) -> float:
    rts = rise_transit_set(target.ra_hours, target.dec_deg, lat_deg, lon_deg, dt, min_altitude_deg)
    if rts.never_rises:
        return 0.0
    if rts.never_sets:
        # Not derived from sunset/sunrise; a fixed full night is assumed.
        return FULL_NIGHT_HOURS
    if rts.rise is None or rts.set is None:
        return 0.0
    hours = (rts.set - rts.rise).total_seconds() / 3600.0
    return min(hours, FULL_NIGHT_HOURS)
