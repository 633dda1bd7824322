"""Exemptions: points passed through without normalization."""

from econorm.models import RawPoint
from econorm.shared.config import Exemptions


def exemption_reason(point: RawPoint, exemptions: Exemptions) -> str | None:
    """Return why *point* is exempt, or None.

    Ids and category groups match exactly; names match as case-insensitive
    substrings.
    """
    if not exemptions:
        return None

    if point.id in exemptions.indicator_ids:
        return f"indicatorId:{point.id}"

    if point.category_group and point.category_group in exemptions.category_groups:
        return f"categoryGroup:{point.category_group}"

    name = (point.name or "").lower()
    for fragment in exemptions.indicator_names:
        if fragment and fragment.lower() in name:
            return f"indicatorName:{fragment}"

    return None

