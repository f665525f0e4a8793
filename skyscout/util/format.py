import math
from typing import Tuple


_COMPASS_POINTS = (
    "N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE",
    "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW",
)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up.

    Builtin ``round`` rounds halves to even (``round(94.5) == 94``).
    """
    return int(math.floor(value + 0.5))


def normalize(value: float, modulus: float) -> float:
    """Reduce ``value`` into [0, modulus) for either sign of ``value``."""
    return ((value % modulus) + modulus) % modulus


def _split_dms(angle_deg: float, precision: int) -> Tuple[int, int, int, float]:
    sign = -1 if angle_deg < 0 else 1
    a = abs(angle_deg)
    total_seconds = round(a * 3600.0, precision)
    deg = int(total_seconds // 3600)
    rem = total_seconds - deg * 3600
    minutes = int(rem // 60)
    seconds = rem - minutes * 60
    return sign, deg, minutes, seconds


def _split_hms(hours: float, precision: int) -> Tuple[int, int, float]:
    h = normalize(hours, 24.0)
    total_seconds = normalize(round(h * 3600.0, precision), 24.0 * 3600.0)
    hours_int = int(total_seconds // 3600)
    rem = total_seconds - hours_int * 3600
    minutes = int(rem // 60)
    seconds = rem - minutes * 60
    return hours_int, minutes, seconds


def format_ra(ra_hours: float) -> str:
    h, m, s = _split_hms(ra_hours, 0)
    return f"{h}h {m}m {int(s)}s"


def format_dec(dec_deg: float) -> str:
    sign_val, d, m, s = _split_dms(dec_deg, 0)
    sign = "-" if sign_val < 0 else "+"
    return f"{sign}{d}° {m}' {int(s)}\""


def hours_to_hms(hours: float, precision: int = 2) -> str:
    h, m, s = _split_hms(hours, precision)
    s_fmt = f"{s:0{3 + precision}.{precision}f}"
    return f"{h:02d}:{m:02d}:{s_fmt}"


def deg_to_dms(angle_deg: float, precision: int = 2) -> str:
    sign_val, d, m, s = _split_dms(angle_deg, precision)
    sign = "-" if sign_val < 0 else "+"
    s_fmt = f"{s:0{3 + precision}.{precision}f}"
    return f"{sign}{d:02d}:{m:02d}:{s_fmt}"


def cardinal_direction(azimuth_deg: float) -> str:
    index = round_half_up(normalize(azimuth_deg, 360.0) / 22.5) % 16
    return _COMPASS_POINTS[index]


def format_coordinates(ra_hours: float, dec_deg: float, style: str = "short") -> str:
    if style == "short":
        return f"{format_ra(ra_hours)}, {format_dec(dec_deg)}"
    if style == "sexagesimal":
        return f"{hours_to_hms(ra_hours)} {deg_to_dms(dec_deg)}"
    raise ValueError(f"Unknown coordinate style: {style}")
