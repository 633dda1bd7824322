"""Unit parsing and scale constants."""

from econorm.units.parser import parse_unit
from econorm.units.scale import (
    PER_YEAR,
    SCALE_MAP,
    magnitude_factor,
    parse_magnitude,
    parse_time_scale,
    time_factor,
)

__all__ = [
    "PER_YEAR",
    "SCALE_MAP",
    "magnitude_factor",
    "parse_magnitude",
    "parse_time_scale",
    "parse_unit",
    "time_factor",
]
