"""Per-bucket normalization handlers and the router."""

from econorm.domains.base import BaseDomain, ClassifiedItem, DomainContext
from econorm.domains.monetary import MonetaryDomain, monetary_unit
from econorm.domains.passthrough import (
    CommoditiesDomain,
    CountsDomain,
    IndicesDomain,
    PercentagesDomain,
    RatiosDomain,
)
from econorm.domains.router import DomainRouter

__all__ = [
    "BaseDomain",
    "ClassifiedItem",
    "CommoditiesDomain",
    "CountsDomain",
    "DomainContext",
    "DomainRouter",
    "IndicesDomain",
    "MonetaryDomain",
    "PercentagesDomain",
    "RatiosDomain",
    "monetary_unit",
]
