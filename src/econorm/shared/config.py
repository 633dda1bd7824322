"""Configuration management for econorm.

``Config`` carries environment-driven defaults (loaded from ``.env``);
``NormalizeConfig`` is the per-run option set passed to ``normalize()``.
"""

import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from econorm.models import Dimension, FxRateTable, Magnitude, RawPoint, TimeScale
from econorm.shared.exceptions import ConfigError

# Load environment variables
load_dotenv()


class Config:
    """Application configuration."""

    # Project paths
    ROOT_DIR = Path(__file__).resolve().parents[3]
    DATA_DIR = ROOT_DIR / "data"
    LOGS_DIR = ROOT_DIR / "logs"

    # Logging
    LOG_LEVEL: str = os.getenv("ECONORM_LOG_LEVEL", "WARNING")

    # Normalization defaults
    TARGET_CURRENCY: str | None = os.getenv("ECONORM_TARGET_CURRENCY") or None
    MIN_MAJORITY_SHARE: float = float(os.getenv("ECONORM_MIN_MAJORITY_SHARE", "0.75"))
    MIN_QUALITY_SCORE: float = float(os.getenv("ECONORM_MIN_QUALITY_SCORE", "70"))
    MAX_WORKERS: int = int(os.getenv("ECONORM_MAX_WORKERS", "1"))

    # Live FX
    FX_REQUEST_TIMEOUT: int = int(os.getenv("FX_REQUEST_TIMEOUT", "5"))
    FX_CACHE_TTL: int = int(os.getenv("FX_CACHE_TTL", "3600"))

    @classmethod
    def validate(cls) -> None:
        """Validate environment configuration."""
        if not 0 < cls.MIN_MAJORITY_SHARE <= 1:
            raise ValueError("ECONORM_MIN_MAJORITY_SHARE must be in (0, 1]")
        if cls.MAX_WORKERS < 1:
            raise ValueError("ECONORM_MAX_WORKERS must be >= 1")


config = Config()


# ---------------------------------------------------------------------------
# Per-run options
# ---------------------------------------------------------------------------

TIE_BREAKER_POLICIES = ("prefer-target", "prefer-majority", "prefer-specific-value")


@dataclass(frozen=True)
class TieBreaker:
    """Policy deciding the target when no value reaches the majority share."""

    policy: str = "prefer-target"
    value: str | None = None

    @classmethod
    def parse(cls, raw: Any) -> "TieBreaker":
        if isinstance(raw, TieBreaker):
            return raw
        if isinstance(raw, str):
            return cls(policy=raw)
        if isinstance(raw, Mapping):
            return cls(policy=raw.get("policy", "prefer-target"), value=raw.get("value"))
        raise ConfigError(f"Invalid tie-breaker: {raw!r}")


@dataclass(frozen=True)
class Exemptions:
    """Points that bypass normalization entirely.

    ``indicator_ids`` and ``category_groups`` match exactly;
    ``indicator_names`` match as case-insensitive substrings of the name.
    """

    indicator_ids: tuple[str, ...] = ()
    category_groups: tuple[str, ...] = ()
    indicator_names: tuple[str, ...] = ()

    @classmethod
    def parse(cls, raw: Any) -> "Exemptions":
        if raw is None:
            return cls()
        if isinstance(raw, Exemptions):
            return raw
        return cls(
            indicator_ids=tuple(raw.get("indicatorIds") or raw.get("indicator_ids") or ()),
            category_groups=tuple(
                raw.get("categoryGroups") or raw.get("category_groups") or ()
            ),
            indicator_names=tuple(
                raw.get("indicatorNames") or raw.get("indicator_names") or ()
            ),
        )

    def __bool__(self) -> bool:
        return bool(self.indicator_ids or self.category_groups or self.indicator_names)


def _coerce_enum(enum_cls, value, option: str):
    if value is None or isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).lower())
    except ValueError as e:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ConfigError(f"Invalid {option} '{value}'. Must be one of: {allowed}") from e


def _coerce_fx(value, source: str) -> FxRateTable | None:
    if value is None or isinstance(value, FxRateTable):
        return value
    try:
        return FxRateTable.from_dict(value, source=source)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid FX table: {e}") from e


@dataclass(frozen=True)
class NormalizeConfig:
    """Options for one ``normalize()`` run."""

    target_currency: str | None = field(default_factory=lambda: Config.TARGET_CURRENCY)
    target_magnitude: Magnitude | None = None
    target_time_scale: TimeScale | None = None
    auto_target_by_indicator: bool = False
    indicator_key: str | Callable[[RawPoint], str] = "name"
    min_majority_share: float = field(default_factory=lambda: Config.MIN_MAJORITY_SHARE)
    tie_breakers: Mapping[Dimension, TieBreaker] = field(default_factory=dict)
    auto_target_dimensions: tuple[Dimension, ...] = (
        Dimension.CURRENCY,
        Dimension.MAGNITUDE,
        Dimension.TIME,
    )
    allow_list: tuple[str, ...] = ()
    deny_list: tuple[str, ...] = ()
    fx_fallback: FxRateTable | None = None
    use_live_fx: bool = False
    fx_live: FxRateTable | None = None
    explain: bool = True
    exemptions: Exemptions = field(default_factory=Exemptions)
    min_quality_score: float = field(default_factory=lambda: Config.MIN_QUALITY_SCORE)
    max_workers: int = field(default_factory=lambda: Config.MAX_WORKERS)

    #: camelCase option names accepted by :meth:`from_dict`.
    OPTION_ALIASES = {
        "targetCurrency": "target_currency",
        "targetMagnitude": "target_magnitude",
        "targetTimeScale": "target_time_scale",
        "autoTargetByIndicator": "auto_target_by_indicator",
        "indicatorKey": "indicator_key",
        "minMajorityShare": "min_majority_share",
        "tieBreakers": "tie_breakers",
        "autoTargetDimensions": "auto_target_dimensions",
        "allowList": "allow_list",
        "denyList": "deny_list",
        "fxFallback": "fx_fallback",
        "useLiveFX": "use_live_fx",
        "fxLive": "fx_live",
        "exemptions": "exemptions",
        "minQualityScore": "min_quality_score",
        "maxWorkers": "max_workers",
    }

    def __post_init__(self) -> None:
        set_ = object.__setattr__
        if self.target_currency is not None:
            set_(self, "target_currency", str(self.target_currency).upper())
        set_(self, "target_magnitude",
             _coerce_enum(Magnitude, self.target_magnitude, "targetMagnitude"))
        set_(self, "target_time_scale",
             _coerce_enum(TimeScale, self.target_time_scale, "targetTimeScale"))
        set_(self, "tie_breakers", {
            _coerce_enum(Dimension, dim, "tieBreakers dimension"): TieBreaker.parse(tb)
            for dim, tb in dict(self.tie_breakers).items()
        })
        set_(self, "auto_target_dimensions", tuple(
            _coerce_enum(Dimension, d, "autoTargetDimensions") for d in self.auto_target_dimensions
        ))
        set_(self, "allow_list", tuple(self.allow_list))
        set_(self, "deny_list", tuple(self.deny_list))
        set_(self, "fx_fallback", _coerce_fx(self.fx_fallback, "fallback"))
        set_(self, "fx_live", _coerce_fx(self.fx_live, "live"))
        set_(self, "exemptions", Exemptions.parse(self.exemptions))

    @classmethod
    def from_dict(cls, options: Mapping[str, Any] | None) -> "NormalizeConfig":
        """Build a config from camelCase or snake_case options.

        Raises:
            ConfigError: If an option is unknown or has an invalid value.
        """
        if options is None:
            return cls()
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in options.items():
            name = cls.OPTION_ALIASES.get(key, key)
            if name not in known:
                raise ConfigError(f"Unknown option '{key}'")
            kwargs[name] = value
        return cls(**kwargs)

    def tie_breaker(self, dimension: Dimension) -> TieBreaker:
        return self.tie_breakers.get(dimension, TieBreaker())

    def target_for(self, dimension: Dimension) -> str | None:
        """Caller-supplied target for *dimension* as a plain string."""
        if dimension is Dimension.CURRENCY:
            return self.target_currency
        if dimension is Dimension.MAGNITUDE:
            return self.target_magnitude.value if self.target_magnitude else None
        return self.target_time_scale.value if self.target_time_scale else None

    def key_for(self, point: RawPoint) -> str:
        """Indicator grouping key for *point*."""
        if callable(self.indicator_key):
            return str(self.indicator_key(point))
        value = getattr(point, self.indicator_key, None)
        return "" if value is None else str(value)

    def consensus_enabled(self, key: str, dimension: Dimension) -> bool:
        """Whether group consensus may be used for *key* on *dimension*."""
        if key in self.deny_list:
            return False
        if key in self.allow_list:
            return True
        if self.allow_list:
            return False
        return self.auto_target_by_indicator and dimension in self.auto_target_dimensions

    def validate(self) -> None:
        """Validate option values.

        Raises:
            ConfigError: On the first invalid option found.
        """
        if self.target_currency is not None and (
            len(self.target_currency) != 3 or not self.target_currency.isalpha()
        ):
            raise ConfigError(f"Invalid targetCurrency '{self.target_currency}'")

        if not 0 < self.min_majority_share <= 1:
            raise ConfigError(
                f"minMajorityShare must be in (0, 1], got {self.min_majority_share}"
            )

        for dimension, tb in self.tie_breakers.items():
            if tb.policy not in TIE_BREAKER_POLICIES:
                raise ConfigError(
                    f"Invalid tie-break policy '{tb.policy}' for {dimension.value}. "
                    f"Must be one of: {', '.join(TIE_BREAKER_POLICIES)}"
                )
            if tb.policy == "prefer-specific-value" and not tb.value:
                raise ConfigError(
                    f"prefer-specific-value for {dimension.value} requires a value"
                )
            if tb.value and dimension is Dimension.MAGNITUDE:
                _coerce_enum(Magnitude, tb.value, "tie-break value")
            if tb.value and dimension is Dimension.TIME:
                _coerce_enum(TimeScale, tb.value, "tie-break value")

        if not isinstance(self.indicator_key, str) and not callable(self.indicator_key):
            raise ConfigError("indicatorKey must be a field name or a callable")
        if isinstance(self.indicator_key, str) and self.indicator_key not in {
            f.name for f in fields(RawPoint)
        }:
            raise ConfigError(f"Unknown indicatorKey field '{self.indicator_key}'")

        if self.use_live_fx and self.fx_live is None:
            raise ConfigError("useLiveFX requires a pre-fetched live FX table (fxLive)")

        if self.max_workers < 1:
            raise ConfigError("maxWorkers must be >= 1")

        if not 0 <= self.min_quality_score <= 100:
            raise ConfigError("minQualityScore must be between 0 and 100")
