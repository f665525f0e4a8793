import datetime
import math

from skyscout.util.format import normalize

from .types import HorizontalPosition


J2000_JD = 2451545.0
DAYS_PER_CENTURY = 36525.0


def _as_utc(dt: datetime.datetime) -> datetime.datetime:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=datetime.timezone.utc)
    return dt.astimezone(datetime.timezone.utc)


def to_julian_date(dt: datetime.datetime) -> float:
    dt = _as_utc(dt)
    year = dt.year
    month = dt.month
    day = (
        dt.day
        + dt.hour / 24.0
        + dt.minute / 1440.0
        + (dt.second + dt.microsecond / 1e6) / 86400.0
    )
    if month <= 2:
        year -= 1
        month += 12
    a = math.floor(year / 100)
    b = 2 - a + math.floor(a / 4)
    return math.floor(365.25 * (year + 4716)) + math.floor(30.6001 * (month + 1)) + day + b - 1524.5


def centuries_since_j2000(jd: float) -> float:
    return (jd - J2000_JD) / DAYS_PER_CENTURY


def gmst_hours(jd: float) -> float:
    """Greenwich mean sidereal time in hours, [0, 24)."""
    t = centuries_since_j2000(jd)
    gmst_deg = (
        280.46061837
        + 360.98564736629 * (jd - J2000_JD)
        + 0.000387933 * t * t
        - t * t * t / 38710000.0
    )
    return normalize(gmst_deg, 360.0) / 15.0


def local_sidereal_time_hours(dt: datetime.datetime, longitude_deg: float) -> float:
    return normalize(gmst_hours(to_julian_date(dt)) + longitude_deg / 15.0, 24.0)


def hour_angle_hours(lst_hours: float, ra_hours: float) -> float:
    """LST - RA folded into (-12, 12]."""
    ha = normalize(lst_hours - ra_hours, 24.0)
    if ha > 12.0:
        ha -= 24.0
    return ha


def equatorial_to_horizontal(
    ra_hours: float,
    dec_deg: float,
    lat_deg: float,
    lon_deg: float,
    dt: datetime.datetime,
) -> HorizontalPosition:
    """Altitude and azimuth (degrees, azimuth from north through east).

    The azimuth comes from an acos formula that divides by cos(alt)cos(lat),
    so it is numerically unstable when the observer or the target sits at a
    pole. The result is still returned; nothing is rejected.
    """
    lst = local_sidereal_time_hours(dt, lon_deg)
    ha_rad = math.radians(hour_angle_hours(lst, ra_hours) * 15.0)
    lat_rad = math.radians(lat_deg)
    dec_rad = math.radians(dec_deg)

    sin_alt = math.sin(dec_rad) * math.sin(lat_rad) + math.cos(dec_rad) * math.cos(lat_rad) * math.cos(ha_rad)
    alt_rad = math.asin(_clamp_unit(sin_alt))

    denom = math.cos(alt_rad) * math.cos(lat_rad)
    if denom == 0.0:
        az_deg = 0.0
    else:
        cos_az = (math.sin(dec_rad) - math.sin(alt_rad) * math.sin(lat_rad)) / denom
        az_deg = math.degrees(math.acos(_clamp_unit(cos_az)))
    if math.sin(ha_rad) > 0:
        # West of the meridian.
        az_deg = 360.0 - az_deg
    return HorizontalPosition(altitude_deg=math.degrees(alt_rad), azimuth_deg=normalize(az_deg, 360.0))


def angular_separation(
    ra1_hours: float,
    dec1_deg: float,
    ra2_hours: float,
    dec2_deg: float,
) -> float:
    ra1 = math.radians(ra1_hours * 15.0)
    ra2 = math.radians(ra2_hours * 15.0)
    dec1 = math.radians(dec1_deg)
    dec2 = math.radians(dec2_deg)
    cos_sep = math.sin(dec1) * math.sin(dec2) + math.cos(dec1) * math.cos(dec2) * math.cos(ra1 - ra2)
    return math.degrees(math.acos(_clamp_unit(cos_sep)))


def _clamp_unit(value: float) -> float:
    return max(-1.0, min(1.0, value))
