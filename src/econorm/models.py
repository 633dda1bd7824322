"""Core data model for the normalization engine.

Input and output records are frozen dataclasses; the enums are ``str``
subclasses so they serialize directly into the explain JSON and DataFrames.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, ClassVar

if TYPE_CHECKING:
    import pandas as pd

    from econorm.explain.recorder import ExplainTrail
    from econorm.pipelines.quality import QualityReport


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class Magnitude(str, Enum):
    """Decimal scale of a value."""

    ONES = "ones"
    HUNDREDS = "hundreds"
    THOUSANDS = "thousands"
    LAKHS = "lakhs"
    MILLIONS = "millions"
    CRORES = "crores"
    HUNDRED_MILLIONS = "hundred-millions"
    BILLIONS = "billions"
    TRILLIONS = "trillions"


class TimeScale(str, Enum):
    """Reporting period of a flow."""

    YEAR = "year"
    QUARTER = "quarter"
    MONTH = "month"
    WEEK = "week"
    DAY = "day"
    HOUR = "hour"


class QuantityHint(str, Enum):
    """Non-monetary quantity detected in a unit string."""

    PERCENT = "percent"
    INDEX = "index"
    COUNT = "count"
    RATIO = "ratio"


class DomainBucket(str, Enum):
    """Category deciding which normalization rules apply to a point."""

    MONETARY_STOCK = "monetaryStock"
    MONETARY_FLOW = "monetaryFlow"
    COUNTS = "counts"
    PERCENTAGES = "percentages"
    RATIOS = "ratios"
    INDICES = "indices"
    ENERGY = "energy"
    METALS = "metals"
    AGRICULTURE = "agriculture"
    COMMODITIES = "commodities"

    @property
    def is_monetary(self) -> bool:
        return self in (DomainBucket.MONETARY_STOCK, DomainBucket.MONETARY_FLOW)


class Dimension(str, Enum):
    """Normalizable dimension of a monetary value."""

    CURRENCY = "currency"
    MAGNITUDE = "magnitude"
    TIME = "time"


class ResolutionSource(str, Enum):
    """Where a resolved dimension value came from."""

    UNIT_TEXT = "unit-text"
    METADATA = "metadata"
    GROUP_MAJORITY = "group-majority"
    PIPELINE_FALLBACK = "pipeline-fallback"


class FailureReason(str, Enum):
    """Why a point was excluded from the normalized output."""

    SCHEMA_VIOLATION = "schema-violation"
    DUPLICATE_ID = "duplicate-id"
    FX_RATE_UNAVAILABLE = "fx-rate-unavailable"
    UNRESOLVED_DIMENSION = "unresolved-dimension"
    PROCESSING_ERROR = "processing-error"


# ---------------------------------------------------------------------------
# Input
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RawPoint:
    """A single observation as supplied by the caller."""

    id: str
    value: float
    unit: str = ""
    name: str = ""
    description: str | None = None
    currency_code: str | None = None
    periodicity: str | None = None
    category_group: str | None = None
    country_code: str | None = None
    date: str | None = None
    domain_hint: str | None = None
    is_cumulative: bool = False

    #: Maps accepted mapping keys (camelCase and snake_case) to field names.
    FIELD_ALIASES: ClassVar[dict[str, str]] = {
        "id": "id",
        "value": "value",
        "unit": "unit",
        "units": "unit",
        "name": "name",
        "description": "description",
        "currencyCode": "currency_code",
        "currency_code": "currency_code",
        "periodicity": "periodicity",
        "categoryGroup": "category_group",
        "category_group": "category_group",
        "countryCode": "country_code",
        "country_code": "country_code",
        "country_iso": "country_code",
        "date": "date",
        "domainHint": "domain_hint",
        "domain_hint": "domain_hint",
        "isCumulative": "is_cumulative",
        "is_cumulative": "is_cumulative",
    }

    @classmethod
    def field_values(cls, data: Mapping[str, Any]) -> dict[str, Any]:
        """Project a mapping onto RawPoint field names, dropping unknown keys."""
        values: dict[str, Any] = {}
        for key, raw in data.items():
            target = cls.FIELD_ALIASES.get(key)
            if target is not None and target not in values:
                values[target] = raw
        return values

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> RawPoint:
        """Build a point from a dict with camelCase or snake_case keys.

        Assumes the mapping already passed schema validation.
        """
        values = cls.field_values(data)
        values["id"] = str(values["id"])
        values["value"] = float(values["value"])
        values["unit"] = "" if values.get("unit") is None else str(values["unit"])
        values["name"] = "" if values.get("name") is None else str(values["name"])
        values["is_cumulative"] = bool(values.get("is_cumulative") or False)
        return cls(**values)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "value": self.value,
            "unit": self.unit,
            "name": self.name,
            "description": self.description,
            "currencyCode": self.currency_code,
            "periodicity": self.periodicity,
            "categoryGroup": self.category_group,
            "countryCode": self.country_code,
            "date": self.date,
            "domainHint": self.domain_hint,
            "isCumulative": self.is_cumulative,
        }


# ---------------------------------------------------------------------------
# Parsing / classification
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ParsedUnit:
    """Structured reading of a free-text unit string.

    Fields that could not be extracted are ``None``; fragments no pattern
    recognized are kept in ``unparsed``.
    """

    original: str
    currency: str | None = None
    magnitude: Magnitude | None = None
    time_scale: TimeScale | None = None
    quantity_hint: QuantityHint | None = None
    physical_unit: str | None = None
    per_physical_unit: bool = False
    per_capita: bool = False
    label: str | None = None
    unparsed: tuple[str, ...] = ()
    confident: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "original": self.original,
            "currency": self.currency,
            "magnitude": self.magnitude.value if self.magnitude else None,
            "timeScale": self.time_scale.value if self.time_scale else None,
            "quantityHint": self.quantity_hint.value if self.quantity_hint else None,
            "physicalUnit": self.physical_unit,
            "perPhysicalUnit": self.per_physical_unit,
            "perCapita": self.per_capita,
            "label": self.label,
            "unparsed": list(self.unparsed),
            "confident": self.confident,
        }


@dataclass(frozen=True)
class Classification:
    """Bucket assignment plus the rule that produced it."""

    bucket: DomainBucket
    matched_rule: str
    low_confidence: bool = False


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TargetResolution:
    """Resolved source value and target value for one dimension of one item."""

    dimension: Dimension
    original: str | None
    original_source: ResolutionSource | None
    target: str | None
    source: ResolutionSource | None
    dominance: float | None = None
    note: str | None = None
    shares: dict[str, float] | None = None

    @property
    def is_identity(self) -> bool:
        return self.original == self.target

    def to_dict(self) -> dict[str, Any]:
        return {
            "dimension": self.dimension.value,
            "original": self.original,
            "originalSource": self.original_source.value if self.original_source else None,
            "target": self.target,
            "source": self.source.value if self.source else None,
            "dominance": self.dominance,
            "note": self.note,
            "shares": self.shares,
        }


@dataclass(frozen=True)
class ItemResolution:
    """Per-dimension resolutions of one item; ``None`` when not applicable."""

    currency: TargetResolution | None = None
    magnitude: TargetResolution | None = None
    time: TargetResolution | None = None

    def resolutions(self) -> list[TargetResolution]:
        return [r for r in (self.currency, self.magnitude, self.time) if r is not None]


@dataclass(frozen=True)
class ConversionFactors:
    """Multiplicative factors applied in order: currency, magnitude, time."""

    fx: float = 1.0
    magnitude: float = 1.0
    time: float = 1.0
    fx_skipped: bool = True
    fx_source_rate: float | None = None
    fx_target_rate: float | None = None

    @property
    def total(self) -> float:
        return self.fx * self.magnitude * self.time

    def to_dict(self) -> dict[str, Any]:
        return {
            "fx": self.fx,
            "magnitude": self.magnitude,
            "time": self.time,
            "fxSkipped": self.fx_skipped,
            "total": self.total,
        }


# ---------------------------------------------------------------------------
# FX
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FxRateTable:
    """Read-only table of rates quoted as units of currency per one ``base``."""

    base: str
    rates: Mapping[str, float]
    as_of: str | None = None
    source: str = "fallback"
    source_id: str | None = None
    dates: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "base", self.base.upper())
        object.__setattr__(
            self, "rates", MappingProxyType({k.upper(): v for k, v in self.rates.items()})
        )
        object.__setattr__(
            self, "dates", MappingProxyType({k.upper(): v for k, v in self.dates.items()})
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], source: str = "fallback") -> FxRateTable:
        """Build a table from ``{"base": ..., "rates": {...}, "asOf": ...}``."""
        if "rates" not in data or "base" not in data:
            raise ValueError("FX table requires 'base' and 'rates'")
        return cls(
            base=str(data["base"]),
            rates={str(k): float(v) for k, v in dict(data["rates"]).items()},
            as_of=data.get("asOf") or data.get("as_of"),
            source=data.get("source", source),
            source_id=data.get("sourceId") or data.get("source_id"),
            dates=dict(data.get("dates") or {}),
        )

    def rate(self, currency: str) -> float | None:
        """Return the rate for *currency*, or ``None`` when missing or unusable."""
        code = currency.upper()
        if code == self.base:
            return 1.0
        value = self.rates.get(code)
        if value is None or not math.isfinite(value) or value <= 0:
            return None
        return float(value)

    def as_of_for(self, currency: str) -> str | None:
        return self.dates.get(currency.upper(), self.as_of)


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class NormalizedPoint:
    """A successfully normalized point; ``id`` always equals the input id."""

    point: RawPoint
    normalized_value: float
    normalized_unit: str
    bucket: DomainBucket
    explain: ExplainTrail | None = None
    factors: ConversionFactors | None = None

    @property
    def id(self) -> str:
        return self.point.id

    def to_dict(self) -> dict[str, Any]:
        data = self.point.to_dict()
        data.update(
            {
                "normalized": self.normalized_value,
                "normalizedUnit": self.normalized_unit,
                "bucket": self.bucket.value,
                "explain": self.explain.to_dict() if self.explain else None,
            }
        )
        return data


@dataclass(frozen=True)
class FailedPoint:
    """A point excluded from the output, with the stage and reason."""

    id: str | None
    reason: FailureReason
    stage: str
    detail: str
    raw: Any = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "reason": self.reason.value,
            "stage": self.stage,
            "detail": self.detail,
        }


@dataclass(frozen=True)
class NormalizeResult:
    """Outcome of a normalization run."""

    normalized: tuple[NormalizedPoint, ...] = ()
    failed: tuple[FailedPoint, ...] = ()
    warnings: tuple[str, ...] = ()
    quality: QualityReport | None = None
    state: str = "done"

    def to_dict(self) -> dict[str, Any]:
        return {
            "normalized": [p.to_dict() for p in self.normalized],
            "failed": [f.to_dict() for f in self.failed],
            "warnings": list(self.warnings),
        }

    def to_frame(self) -> pd.DataFrame:
        """Flatten normalized points into a DataFrame (one row per point)."""
        from econorm.pipelines.io import result_to_frame

        return result_to_frame(self)
