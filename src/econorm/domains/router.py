"""Routes each classified item to the handler that owns its bucket."""

from collections.abc import Iterable
from pathlib import Path

from econorm.domains.base import BaseDomain, ClassifiedItem, DomainContext
from econorm.domains.monetary import MonetaryDomain
from econorm.domains.passthrough import (
    CommoditiesDomain,
    CountsDomain,
    IndicesDomain,
    PercentagesDomain,
    RatiosDomain,
)
from econorm.models import DomainBucket, NormalizedPoint

HANDLER_CLASSES: tuple[type[BaseDomain], ...] = (
    MonetaryDomain,
    PercentagesDomain,
    IndicesDomain,
    RatiosDomain,
    CountsDomain,
    CommoditiesDomain,
)


class DomainRouter:
    """Maps every ``DomainBucket`` to exactly one handler.

    Construction fails if a bucket is unhandled or handled twice, so adding a
    bucket without a handler is caught before any data flows.
    """

    def __init__(
        self, handlers: Iterable[BaseDomain] | None = None, log_file: Path | None = None
    ) -> None:
        if handlers is None:
            handlers = [cls(log_file) for cls in HANDLER_CLASSES]
        self._handlers: dict[DomainBucket, BaseDomain] = {}
        for handler in handlers:
            for bucket in handler.BUCKETS:
                if bucket in self._handlers:
                    raise ValueError(f"Bucket '{bucket.value}' has more than one handler")
                self._handlers[bucket] = handler

        missing = [b.value for b in DomainBucket if b not in self._handlers]
        if missing:
            raise ValueError(f"No handler for buckets: {missing}")

    def handler_for(self, bucket: DomainBucket) -> BaseDomain:
        return self._handlers[bucket]

    def route(self, item: ClassifiedItem, context: DomainContext) -> NormalizedPoint:
        return self.handler_for(item.bucket).normalize(item, context)

    @staticmethod
    def processed_buckets(items: Iterable[ClassifiedItem]) -> tuple[DomainBucket, ...]:
        """Distinct buckets present in a batch, in first-seen order."""
        return tuple(dict.fromkeys(item.bucket for item in items))
