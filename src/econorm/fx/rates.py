"""FX table selection and sanity checks."""

from dataclasses import dataclass, field

from econorm.models import FxRateTable
from econorm.shared.config import NormalizeConfig
from econorm.shared.exceptions import ConfigError

#: Plausible rates per USD for major currencies. Wider than real-world
#: volatility; only meant to catch inverted or mis-scaled quotes.
REASONABLE_FX_RANGES: dict[str, tuple[float, float]] = {
    "EUR": (0.7, 1.3),
    "GBP": (0.6, 1.0),
    "CHF": (0.7, 1.2),
    "CAD": (1.0, 1.6),
    "AUD": (1.0, 1.8),
    "NZD": (1.2, 2.0),
    "JPY": (80, 200),
    "CNY": (6, 8),
    "KRW": (1000, 1500),
    "INR": (70, 100),
    "XOF": (400, 700),
    "XAF": (400, 700),
    "NGN": (400, 2000),
    "ZAR": (10, 25),
    "BRL": (3, 8),
    "MXN": (15, 25),
    "ARS": (100, 2000),
    "AED": (3.5, 4.0),
    "SAR": (3.5, 4.0),
}

#: Bounds applied to currencies without a known range.
MIN_PLAUSIBLE_RATE = 0.001
MAX_PLAUSIBLE_RATE = 100_000


@dataclass
class FxValidation:
    """Outcome of :func:`validate_fx_rates`."""

    warnings: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def validate_fx_rates(table: FxRateTable) -> FxValidation:
    """Flag rates that are non-positive or far outside plausible ranges.

    Range checks only apply to USD-based tables. A rate off by more than a
    factor of 10 is an error; anything closer is a warning.
    """
    result = FxValidation()
    for currency, rate in table.rates.items():
        if rate is None or rate <= 0:
            result.errors.append(f"{currency}: Rate {rate} is zero or negative")
            continue

        bounds = REASONABLE_FX_RANGES.get(currency) if table.base == "USD" else None
        if bounds is None:
            if rate < MIN_PLAUSIBLE_RATE:
                result.warnings.append(f"{currency}: Rate {rate} seems very low (< 0.001)")
            elif rate > MAX_PLAUSIBLE_RATE:
                result.warnings.append(f"{currency}: Rate {rate} seems very high (> 100,000)")
            continue

        low, high = bounds
        if rate < low:
            factor = low / rate
            target = result.errors if factor > 10 else result.warnings
            target.append(
                f"{currency}: Rate {rate} is below expected range {low}-{high}"
                + (f" ({factor:.1f}x too low)" if factor > 10 else "")
            )
        elif rate > high:
            factor = rate / high
            target = result.errors if factor > 10 else result.warnings
            target.append(
                f"{currency}: Rate {rate} is above expected range {low}-{high}"
                + (f" ({factor:.1f}x too high)" if factor > 10 else "")
            )
    return result


def select_fx_table(config: NormalizeConfig) -> FxRateTable | None:
    """Pick the FX table for a run: the pre-fetched live table or the fallback.

    Raises:
        ConfigError: If ``use_live_fx`` is set without a live table.
    """
    if config.use_live_fx:
        if config.fx_live is None:
            raise ConfigError("useLiveFX requires a pre-fetched live FX table (fxLive)")
        return config.fx_live
    return config.fx_fallback
