"""Monetary stocks and flows: currency, magnitude and (flows only) time."""

from econorm.conversion.engine import convert
from econorm.domains.base import BaseDomain, ClassifiedItem, DomainContext
from econorm.models import ConversionFactors, DomainBucket, ItemResolution, Magnitude
from econorm.targets.resolver import resolve_item


def monetary_unit(
    currency: str | None,
    magnitude: str | None,
    time: str | None,
    per_capita: bool = False,
) -> str:
    """Build e.g. ``"USD millions per month"``; ones and unknown parts are omitted."""
    parts = [currency or ""]
    if magnitude and magnitude != Magnitude.ONES.value:
        parts.append(magnitude)
    if per_capita:
        parts.append("per capita")
    text = " ".join(p for p in parts if p)
    if time:
        text = f"{text} per {time}" if text else f"per {time}"
    return text


class MonetaryDomain(BaseDomain):
    """Normalizes ``monetaryStock`` and ``monetaryFlow`` items."""

    BUCKETS = (DomainBucket.MONETARY_STOCK, DomainBucket.MONETARY_FLOW)

    def resolve(self, item: ClassifiedItem, context: DomainContext) -> ItemResolution:
        return resolve_item(
            item.point, item.parsed, item.bucket, context.targets.get(item.key)
        )

    def convert(
        self, item: ClassifiedItem, resolution: ItemResolution, context: DomainContext
    ) -> tuple[float, ConversionFactors]:
        return convert(item.point.value, resolution, context.fx_table, item.point.id)

    def build_unit(self, item: ClassifiedItem, resolution: ItemResolution) -> str:
        currency = resolution.currency.target if resolution.currency else None
        magnitude = resolution.magnitude.target if resolution.magnitude else None
        # Stocks are point-in-time levels and never carry a period.
        time = None
        if item.bucket is DomainBucket.MONETARY_FLOW and resolution.time is not None:
            time = resolution.time.target
        return monetary_unit(currency, magnitude, time, item.parsed.per_capita)
