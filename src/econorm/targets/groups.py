"""Indicator groups: per-key frequency tables of stated units.

Groups are built in one fold over the batch before any item converts. Each
group is immutable once built; partial groups from separate chunks combine
with :meth:`IndicatorGroup.merge`.
"""

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field

from econorm.classification.taxonomy import resolved_currency, usable_currency
from econorm.models import Dimension, DomainBucket, ParsedUnit, RawPoint
from econorm.units.scale import parse_time_scale


@dataclass(frozen=True)
class Observation:
    """Explicitly stated unit values of one monetary item."""

    key: str
    bucket: DomainBucket
    currency: str | None = None
    magnitude: str | None = None
    time: str | None = None


def observe(key: str, point: RawPoint, parsed: ParsedUnit, bucket: DomainBucket) -> Observation:
    """Collect the values an item states itself (unit text or metadata).

    Placeholder metadata currencies are not counted.
    """
    time = None
    if bucket is DomainBucket.MONETARY_FLOW:
        scale = parsed.time_scale or parse_time_scale(point.periodicity)
        time = scale.value if scale else None
    currency = usable_currency(resolved_currency(point, parsed))
    return Observation(
        key=key,
        bucket=bucket,
        currency=currency,
        magnitude=parsed.magnitude.value if parsed.magnitude else None,
        time=time,
    )


@dataclass(frozen=True)
class IndicatorGroup:
    """Frequency distribution per dimension over one indicator key.

    ``size`` counts monetary members and ``flow_size`` counts flows; they are
    the denominators of the currency/magnitude and time dominance shares.
    Ties between equally frequent values go to the one seen first.
    """

    key: str
    size: int = 0
    flow_size: int = 0
    currency: Counter = field(default_factory=Counter)
    magnitude: Counter = field(default_factory=Counter)
    time: Counter = field(default_factory=Counter)

    @classmethod
    def from_observation(cls, obs: Observation) -> "IndicatorGroup":
        is_flow = obs.bucket is DomainBucket.MONETARY_FLOW
        return cls(
            key=obs.key,
            size=1,
            flow_size=1 if is_flow else 0,
            currency=Counter([obs.currency] if obs.currency else []),
            magnitude=Counter([obs.magnitude] if obs.magnitude else []),
            time=Counter([obs.time] if obs.time and is_flow else []),
        )

    def merge(self, other: "IndicatorGroup") -> "IndicatorGroup":
        """Combine two partial groups for the same key."""
        if other.key != self.key:
            raise ValueError(f"Cannot merge group '{other.key}' into '{self.key}'")
        return IndicatorGroup(
            key=self.key,
            size=self.size + other.size,
            flow_size=self.flow_size + other.flow_size,
            currency=self.currency + other.currency,
            magnitude=self.magnitude + other.magnitude,
            time=self.time + other.time,
        )

    def counts(self, dimension: Dimension) -> Counter:
        if dimension is Dimension.CURRENCY:
            return self.currency
        if dimension is Dimension.MAGNITUDE:
            return self.magnitude
        return self.time

    def members(self, dimension: Dimension) -> int:
        return self.flow_size if dimension is Dimension.TIME else self.size

    def ranked(self, dimension: Dimension) -> list[tuple[str, int]]:
        """Values by descending frequency; equal counts keep first-seen order."""
        return self.counts(dimension).most_common()

    def majority(self, dimension: Dimension) -> tuple[str | None, int]:
        ranked = self.ranked(dimension)
        return ranked[0] if ranked else (None, 0)

    def dominance(self, dimension: Dimension) -> float | None:
        """Majority count divided by group size, or None for an empty table."""
        value, count = self.majority(dimension)
        members = self.members(dimension)
        if value is None or members == 0:
            return None
        return count / members

    def shares(self, dimension: Dimension) -> dict[str, float]:
        members = self.members(dimension)
        if members == 0:
            return {}
        return {value: count / members for value, count in self.ranked(dimension)}


def build_groups(observations: Iterable[Observation]) -> dict[str, IndicatorGroup]:
    """Fold observations into one group per indicator key.

    Only monetary observations contribute.
    """
    groups: dict[str, IndicatorGroup] = {}
    for obs in observations:
        if not obs.bucket.is_monetary:
            continue
        partial = IndicatorGroup.from_observation(obs)
        groups[obs.key] = groups[obs.key].merge(partial) if obs.key in groups else partial
    return groups
