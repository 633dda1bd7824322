"""Abstract base class for per-bucket normalization handlers.

A handler turns one classified item into a ``NormalizedPoint``:

1. resolve the item's dimensions against its group targets,
2. convert the value,
3. reconstruct a human-readable unit,
4. record the explain trail (when enabled).

Subclasses declare which buckets they own in ``BUCKETS``.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from econorm.explain.recorder import record
from econorm.models import (
    Classification,
    ConversionFactors,
    Dimension,
    DomainBucket,
    FxRateTable,
    ItemResolution,
    NormalizedPoint,
    ParsedUnit,
    RawPoint,
)
from econorm.shared.config import NormalizeConfig
from econorm.shared.utils import setup_logger
from econorm.targets.resolver import GroupTarget


@dataclass(frozen=True)
class ClassifiedItem:
    """An input point with its parse, classification and indicator key."""

    point: RawPoint
    parsed: ParsedUnit
    classification: Classification
    key: str

    @property
    def bucket(self) -> DomainBucket:
        return self.classification.bucket


@dataclass(frozen=True)
class DomainContext:
    """Batch-level inputs shared by every handler call; read-only."""

    config: NormalizeConfig
    fx_table: FxRateTable | None
    targets: Mapping[str, dict[Dimension, GroupTarget]]
    processed_buckets: tuple[DomainBucket, ...] = ()


class BaseDomain(ABC):
    """Base class for domain handlers.

    Subclasses must define:
        BUCKETS (tuple[DomainBucket, ...]): buckets routed to this handler.

    Subclasses must implement:
        build_unit(): reconstruct the normalized unit string.

    Non-monetary handlers keep the default identity ``resolve``/``convert``.
    """

    BUCKETS: tuple[DomainBucket, ...]

    def __init__(self, log_file: Path | None = None) -> None:
        self.logger = setup_logger(self.__class__.__name__, log_file)

    def resolve(self, item: ClassifiedItem, context: DomainContext) -> ItemResolution:
        return ItemResolution()

    def convert(
        self, item: ClassifiedItem, resolution: ItemResolution, context: DomainContext
    ) -> tuple[float, ConversionFactors]:
        return item.point.value, ConversionFactors()

    @abstractmethod
    def build_unit(self, item: ClassifiedItem, resolution: ItemResolution) -> str:
        """Return the human-readable normalized unit."""
        ...

    def normalize(self, item: ClassifiedItem, context: DomainContext) -> NormalizedPoint:
        """Resolve, convert and describe one item.

        Raises:
            ItemError: On per-item failures (missing FX rate, unresolved
                dimension); the pipeline records these as failed points.
        """
        resolution = self.resolve(item, context)
        value, factors = self.convert(item, resolution, context)
        unit = self.build_unit(item, resolution)

        explain = None
        if context.config.explain:
            explain = record(
                item.point,
                item.parsed,
                item.classification,
                resolution,
                factors,
                fx_table=context.fx_table,
                processed_buckets=context.processed_buckets,
                normalized_unit=unit,
            )

        self.logger.debug("%s: %s -> %s %s", item.point.id, item.point.value, value, unit)
        return NormalizedPoint(
            point=item.point,
            normalized_value=value,
            normalized_unit=unit,
            bucket=item.bucket,
            explain=explain,
            factors=factors,
        )
