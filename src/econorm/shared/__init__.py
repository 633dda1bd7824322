"""Shared utilities, configuration, and exceptions."""

from econorm.shared.config import Config, Exemptions, NormalizeConfig, TieBreaker
from econorm.shared.exceptions import (
    ConfigError,
    EconormError,
    FxRateUnavailableError,
    ItemError,
    PipelineError,
    UnresolvedDimensionError,
)
from econorm.shared.utils import setup_logger, to_utc, utc_now_iso

__all__ = [
    "Config",
    "ConfigError",
    "EconormError",
    "Exemptions",
    "FxRateUnavailableError",
    "ItemError",
    "NormalizeConfig",
    "PipelineError",
    "TieBreaker",
    "UnresolvedDimensionError",
    "setup_logger",
    "to_utc",
    "utc_now_iso",
]
