"""Auto-targeting: group-level targets and per-item dimension resolution.

Per item and dimension two values are resolved independently:

* the *original* value the item is expressed in, taken from its own unit
  text, then metadata, then a dominant group majority, then the pipeline
  default;
* the *target* value it is converted to, taken from a dominant group
  majority, then the tie-break policy, then the configured target, and
  finally the item's own value (no conversion).

An item's own stated unit therefore always wins over consensus as the
description of what the item *is*.
"""

from dataclasses import dataclass, field

from econorm.classification.taxonomy import resolved_currency, usable_currency
from econorm.models import (
    Dimension,
    DomainBucket,
    ItemResolution,
    Magnitude,
    ParsedUnit,
    RawPoint,
    ResolutionSource,
    TargetResolution,
)
from econorm.shared.config import NormalizeConfig
from econorm.shared.exceptions import UnresolvedDimensionError
from econorm.targets.groups import IndicatorGroup
from econorm.units.scale import parse_time_scale


@dataclass(frozen=True)
class GroupTarget:
    """Target chosen for one dimension of one indicator group."""

    dimension: Dimension
    value: str | None
    source: ResolutionSource | None
    dominance: float | None = None
    consensus: bool = False
    shares: dict[str, float] = field(default_factory=dict)


def _fallback_target(config: NormalizeConfig, dimension: Dimension) -> GroupTarget:
    value = config.target_for(dimension)
    return GroupTarget(
        dimension=dimension,
        value=value,
        source=ResolutionSource.PIPELINE_FALLBACK if value else None,
    )


def resolve_targets(
    group: IndicatorGroup | None, config: NormalizeConfig
) -> dict[Dimension, GroupTarget]:
    """Choose the target of every dimension for one indicator group.

    A majority whose dominance is at least ``min_majority_share`` (the
    boundary counts as a majority) becomes the target with source
    ``group-majority``. Below the threshold the dimension's tie-break policy
    decides:

    * ``prefer-target``: the configured target (``pipeline-fallback``);
    * ``prefer-majority``: the plurality value if it strictly beats the
      runner-up, else the configured target;
    * ``prefer-specific-value``: the policy's own value.
    """
    targets: dict[Dimension, GroupTarget] = {}
    for dimension in Dimension:
        if group is None or not config.consensus_enabled(group.key, dimension):
            targets[dimension] = _fallback_target(config, dimension)
            continue

        ranked = group.ranked(dimension)
        dominance = group.dominance(dimension)
        shares = group.shares(dimension)
        if not ranked or dominance is None:
            targets[dimension] = _fallback_target(config, dimension)
            continue

        top, top_count = ranked[0]
        if dominance >= config.min_majority_share:
            targets[dimension] = GroupTarget(
                dimension, top, ResolutionSource.GROUP_MAJORITY, dominance, True, shares
            )
            continue

        tie = config.tie_breaker(dimension)
        runner_up = ranked[1][1] if len(ranked) > 1 else 0
        if tie.policy == "prefer-majority" and top_count > runner_up:
            targets[dimension] = GroupTarget(
                dimension, top, ResolutionSource.GROUP_MAJORITY, dominance, False, shares
            )
        elif tie.policy == "prefer-specific-value" and tie.value:
            value = tie.value.upper() if dimension is Dimension.CURRENCY else tie.value.lower()
            targets[dimension] = GroupTarget(
                dimension, value, ResolutionSource.PIPELINE_FALLBACK, dominance, False, shares
            )
        else:
            fallback = _fallback_target(config, dimension)
            targets[dimension] = GroupTarget(
                dimension, fallback.value, fallback.source, dominance, False, shares
            )
    return targets


# ---------------------------------------------------------------------------
# Per-item resolution
# ---------------------------------------------------------------------------


def _resolve(
    dimension: Dimension,
    original: str | None,
    original_source: ResolutionSource | None,
    target: GroupTarget | None,
    item_id: str,
    note: str | None = None,
) -> TargetResolution:
    if target is not None and target.value:
        return TargetResolution(
            dimension=dimension,
            original=original,
            original_source=original_source,
            target=target.value,
            source=target.source,
            dominance=target.dominance,
            note=note,
            shares=target.shares or None,
        )
    if original is None:
        raise UnresolvedDimensionError(dimension.value, item_id)
    return TargetResolution(
        dimension=dimension,
        original=original,
        original_source=original_source,
        target=original,
        source=original_source,
        dominance=target.dominance if target else None,
        note=note or "no target; kept as stated",
        shares=(target.shares or None) if target else None,
    )


def _consensus_value(target: GroupTarget | None) -> str | None:
    return target.value if target is not None and target.consensus else None


def resolve_item(
    point: RawPoint,
    parsed: ParsedUnit,
    bucket: DomainBucket,
    targets: dict[Dimension, GroupTarget] | None,
) -> ItemResolution:
    """Resolve the original and target value of each applicable dimension.

    Currency and magnitude apply to monetary buckets only; time applies to
    flows only. Other buckets get an empty resolution.

    Raises:
        UnresolvedDimensionError: If the currency has neither an item value
            nor a target.
    """
    if not bucket.is_monetary:
        return ItemResolution()
    targets = targets or {}

    # Currency
    currency_target = targets.get(Dimension.CURRENCY)
    meta_currency = usable_currency(resolved_currency(point, parsed))
    if parsed.currency:
        cur, cur_src = parsed.currency, ResolutionSource.UNIT_TEXT
    elif meta_currency:
        cur, cur_src = meta_currency, ResolutionSource.METADATA
    elif _consensus_value(currency_target):
        cur, cur_src = currency_target.value, ResolutionSource.GROUP_MAJORITY
    else:
        cur, cur_src = None, None
    if cur is None:
        raise UnresolvedDimensionError(Dimension.CURRENCY.value, point.id)
    currency = _resolve(Dimension.CURRENCY, cur, cur_src, currency_target, point.id)

    # Magnitude
    magnitude_target = targets.get(Dimension.MAGNITUDE)
    if parsed.magnitude:
        mag, mag_src = parsed.magnitude.value, ResolutionSource.UNIT_TEXT
    elif _consensus_value(magnitude_target):
        mag, mag_src = magnitude_target.value, ResolutionSource.GROUP_MAJORITY
    else:
        mag, mag_src = Magnitude.ONES.value, ResolutionSource.PIPELINE_FALLBACK
    mag_note = "unstated; assumed ones" if mag_src is ResolutionSource.PIPELINE_FALLBACK else None
    magnitude = _resolve(Dimension.MAGNITUDE, mag, mag_src, magnitude_target, point.id, mag_note)

    if bucket is not DomainBucket.MONETARY_FLOW:
        return ItemResolution(currency=currency, magnitude=magnitude)

    # Time (flows only)
    time_target = targets.get(Dimension.TIME)
    meta_scale = parse_time_scale(point.periodicity)
    if parsed.time_scale:
        per, per_src = parsed.time_scale.value, ResolutionSource.UNIT_TEXT
    elif meta_scale:
        per, per_src = meta_scale.value, ResolutionSource.METADATA
    elif _consensus_value(time_target):
        per, per_src = time_target.value, ResolutionSource.GROUP_MAJORITY
    elif time_target is not None and time_target.value:
        per, per_src = time_target.value, ResolutionSource.PIPELINE_FALLBACK
    else:
        per, per_src = None, None

    if point.is_cumulative:
        time = TargetResolution(
            dimension=Dimension.TIME,
            original=per,
            original_source=per_src,
            target=per,
            source=per_src,
            note="cumulative series; period kept",
        )
    elif per is None:
        time = TargetResolution(
            dimension=Dimension.TIME,
            original=None,
            original_source=None,
            target=None,
            source=None,
            note="period unknown; not converted",
        )
    else:
        time = _resolve(Dimension.TIME, per, per_src, time_target, point.id)

    return ItemResolution(currency=currency, magnitude=magnitude, time=time)
