"""Currency, magnitude and time-scale conversion.

Each factor is derived from the item's resolved original and target values,
never from the running value, and the three are applied in a fixed order:
currency, then magnitude, then time.
"""

from econorm.models import (
    ConversionFactors,
    FxRateTable,
    ItemResolution,
    Magnitude,
    TargetResolution,
    TimeScale,
)
from econorm.shared.exceptions import FxRateUnavailableError
from econorm.units.scale import magnitude_factor, time_factor


def currency_factor(
    source: str, target: str, fx_table: FxRateTable | None, item_id: str | None = None
) -> tuple[float, float | None, float | None]:
    """FX factor from *source* to *target* currency.

    Rates are quoted as units of currency per one unit of the table's base,
    so the factor is ``rate(target) / rate(source)``.

    Returns:
        (factor, source_rate, target_rate)

    Raises:
        FxRateUnavailableError: If either rate is missing or not positive.
    """
    if fx_table is None:
        raise FxRateUnavailableError(source, item_id)
    source_rate = fx_table.rate(source)
    if source_rate is None:
        raise FxRateUnavailableError(source, item_id)
    target_rate = fx_table.rate(target)
    if target_rate is None:
        raise FxRateUnavailableError(target, item_id)
    return target_rate / source_rate, source_rate, target_rate


def _applies(resolution: TargetResolution | None) -> bool:
    return (
        resolution is not None
        and resolution.original is not None
        and resolution.target is not None
        and resolution.original != resolution.target
    )


def convert(
    value: float,
    resolution: ItemResolution,
    fx_table: FxRateTable | None,
    item_id: str | None = None,
) -> tuple[float, ConversionFactors]:
    """Convert *value* according to its resolved dimensions.

    A currency whose original equals its target yields an explicit factor of
    1 with ``fx_skipped`` set, and no rate lookup happens.

    Args:
        value: Raw numeric value.
        resolution: Per-dimension original/target values for the item.
        fx_table: Rates used for currency conversion.
        item_id: Used in error messages only.

    Returns:
        (normalized value, factors applied)

    Raises:
        FxRateUnavailableError: If a required FX rate is missing.
    """
    fx, fx_skipped, source_rate, target_rate = 1.0, True, None, None
    if _applies(resolution.currency):
        fx, source_rate, target_rate = currency_factor(
            resolution.currency.original, resolution.currency.target, fx_table, item_id
        )
        fx_skipped = False

    mag = 1.0
    if _applies(resolution.magnitude):
        mag = magnitude_factor(
            Magnitude(resolution.magnitude.original), Magnitude(resolution.magnitude.target)
        )

    per = 1.0
    if _applies(resolution.time):
        per = time_factor(TimeScale(resolution.time.original), TimeScale(resolution.time.target))

    factors = ConversionFactors(
        fx=fx,
        magnitude=mag,
        time=per,
        fx_skipped=fx_skipped,
        fx_source_rate=source_rate,
        fx_target_rate=target_rate,
    )
    return value * fx * mag * per, factors
