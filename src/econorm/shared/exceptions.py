"""Exception hierarchy for econorm.

Item-level errors carry a :class:`~econorm.models.FailureReason` and are turned
into ``FailedPoint`` records by the pipeline; everything else aborts the run.
"""

from econorm.models import FailureReason


class EconormError(Exception):
    """Base class for all econorm errors."""


class ConfigError(EconormError, ValueError):
    """Invalid normalization configuration."""


class PipelineError(EconormError):
    """Structural failure that moves the pipeline into its error state."""

    def __init__(self, message: str, stage: str | None = None) -> None:
        super().__init__(message)
        self.stage = stage


class ItemError(EconormError):
    """Failure confined to a single input point."""

    reason: FailureReason = FailureReason.PROCESSING_ERROR

    def __init__(self, message: str, item_id: str | None = None) -> None:
        super().__init__(message)
        self.item_id = item_id


class FxRateUnavailableError(ItemError):
    """No usable FX rate for a required currency."""

    reason = FailureReason.FX_RATE_UNAVAILABLE

    def __init__(self, currency: str, item_id: str | None = None) -> None:
        super().__init__(f"No FX rate available for '{currency}'", item_id)
        self.currency = currency


class UnresolvedDimensionError(ItemError):
    """A required dimension has neither an item value nor a target."""

    reason = FailureReason.UNRESOLVED_DIMENSION

    def __init__(self, dimension: str, item_id: str | None = None) -> None:
        super().__init__(f"Could not resolve {dimension} for item", item_id)
        self.dimension = dimension
