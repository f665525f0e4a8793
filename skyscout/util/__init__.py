from .format import (
    cardinal_direction,
    deg_to_dms,
    format_coordinates,
    format_dec,
    format_ra,
    hours_to_hms,
    normalize,
    round_half_up,
)

__all__ = [
    "cardinal_direction",
    "deg_to_dms",
    "format_coordinates",
    "format_dec",
    "format_ra",
    "hours_to_hms",
    "normalize",
    "round_half_up",
]
