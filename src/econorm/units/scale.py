"""Scale constants and factor helpers for magnitude and time conversion."""

from econorm.models import Magnitude, TimeScale
from econorm.units.patterns import MAGNITUDE_PATTERNS, PERIODICITY_MAP, TIME_PATTERNS

#: Multiplier of one unit of each magnitude.
SCALE_MAP: dict[Magnitude, float] = {
    Magnitude.ONES: 1.0,
    Magnitude.HUNDREDS: 1e2,
    Magnitude.THOUSANDS: 1e3,
    Magnitude.LAKHS: 1e5,
    Magnitude.MILLIONS: 1e6,
    Magnitude.CRORES: 1e7,
    Magnitude.HUNDRED_MILLIONS: 1e8,
    Magnitude.BILLIONS: 1e9,
    Magnitude.TRILLIONS: 1e12,
}

#: Number of periods of each time scale in one year.
PER_YEAR: dict[TimeScale, float] = {
    TimeScale.YEAR: 1.0,
    TimeScale.QUARTER: 4.0,
    TimeScale.MONTH: 12.0,
    TimeScale.WEEK: 52.0,
    TimeScale.DAY: 365.0,
    TimeScale.HOUR: 8760.0,
}


def magnitude_factor(source: Magnitude, target: Magnitude) -> float:
    """Factor converting a value expressed in *source* units to *target* units.

    >>> magnitude_factor(Magnitude.BILLIONS, Magnitude.MILLIONS)
    1000.0
    """
    return SCALE_MAP[source] / SCALE_MAP[target]


def time_factor(source: TimeScale, target: TimeScale) -> float:
    """Factor converting a per-*source* flow to a per-*target* flow.

    Quarterly to monthly divides by 3; monthly to annual multiplies by 12.
    """
    return PER_YEAR[source] / PER_YEAR[target]


def parse_magnitude(text: str | Magnitude | None) -> Magnitude | None:
    """Read a magnitude from an enum value or free text ("bn", "millions")."""
    if text is None or isinstance(text, Magnitude):
        return text
    lowered = str(text).strip().lower()
    if not lowered:
        return None
    try:
        return Magnitude(lowered)
    except ValueError:
        pass
    if lowered in ("one", "unit", "units"):
        return Magnitude.ONES
    for magnitude, pattern in MAGNITUDE_PATTERNS:
        if pattern.search(lowered):
            return magnitude
    return None


def parse_time_scale(text: str | TimeScale | None) -> TimeScale | None:
    """Read a time scale from periodicity metadata or unit text.

    Accepts enum values, periodicity labels ("Quarterly", "Annual") and unit
    phrases ("per month", "/yr").
    """
    if text is None or isinstance(text, TimeScale):
        return text
    lowered = str(text).strip().lower()
    if not lowered:
        return None
    if lowered in PERIODICITY_MAP:
        return PERIODICITY_MAP[lowered]
    for scale, pattern in TIME_PATTERNS:
        if pattern.search(lowered):
            return scale
    return None
