"""Non-monetary buckets.

Values pass through unchanged (factor 1). Only the unit is tidied into a
canonical label such as ``"%"``, ``"% of GDP"`` or ``"points"``.
"""

from econorm.domains.base import BaseDomain, ClassifiedItem
from econorm.models import DomainBucket, ItemResolution, Magnitude


def _with_magnitude(label: str, magnitude: Magnitude | None) -> str:
    if magnitude is None or magnitude is Magnitude.ONES:
        return label
    return f"{label} ({magnitude.value})"


class PercentagesDomain(BaseDomain):
    BUCKETS = (DomainBucket.PERCENTAGES,)

    def build_unit(self, item: ClassifiedItem, resolution: ItemResolution) -> str:
        return item.parsed.label or "%"


class IndicesDomain(BaseDomain):
    BUCKETS = (DomainBucket.INDICES,)

    def build_unit(self, item: ClassifiedItem, resolution: ItemResolution) -> str:
        return item.parsed.label or "index"


class RatiosDomain(BaseDomain):
    BUCKETS = (DomainBucket.RATIOS,)

    def build_unit(self, item: ClassifiedItem, resolution: ItemResolution) -> str:
        return item.parsed.label or "ratio"


class CountsDomain(BaseDomain):
    """Counts keep their stated magnitude; nothing is rescaled."""

    BUCKETS = (DomainBucket.COUNTS,)

    def build_unit(self, item: ClassifiedItem, resolution: ItemResolution) -> str:
        parsed = item.parsed
        if parsed.label:
            return _with_magnitude(parsed.label, parsed.magnitude)
        if parsed.magnitude is not None:
            return parsed.magnitude.value
        return item.point.unit or "count"


class CommoditiesDomain(BaseDomain):
    """Energy, metals, agriculture and other physical quantities.

    Prices read "<currency> per <unit>"; volumes keep their magnitude and
    period, e.g. "barrels (thousands) per day".
    """

    BUCKETS = (
        DomainBucket.ENERGY,
        DomainBucket.METALS,
        DomainBucket.AGRICULTURE,
        DomainBucket.COMMODITIES,
    )

    def build_unit(self, item: ClassifiedItem, resolution: ItemResolution) -> str:
        parsed = item.parsed
        physical = parsed.physical_unit
        if physical is None:
            return item.point.unit
        if parsed.currency:
            return f"{parsed.currency} per {physical.removesuffix('s')}"
        text = _with_magnitude(physical, parsed.magnitude)
        if parsed.time_scale is not None:
            text = f"{text} per {parsed.time_scale.value}"
        return text
