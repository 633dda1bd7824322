"""econorm: normalization of economic time-series values to comparable units."""

from econorm.fx.live_fx import LiveFXFetcher
from econorm.models import (
    DomainBucket,
    FailedPoint,
    FailureReason,
    FxRateTable,
    Magnitude,
    NormalizedPoint,
    NormalizeResult,
    RawPoint,
    TimeScale,
)
from econorm.pipelines.orchestrator import normalize
from econorm.shared.config import NormalizeConfig
from econorm.shared.exceptions import ConfigError, EconormError, PipelineError
from econorm.units.parser import parse_unit

__version__ = "0.1.0"

__all__ = [
    "ConfigError",
    "DomainBucket",
    "EconormError",
    "FailedPoint",
    "FailureReason",
    "FxRateTable",
    "LiveFXFetcher",
    "Magnitude",
    "NormalizeConfig",
    "NormalizeResult",
    "NormalizedPoint",
    "PipelineError",
    "RawPoint",
    "TimeScale",
    "normalize",
    "parse_unit",
]
