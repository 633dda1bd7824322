"""Rule-ordered domain classification.

``CLASSIFICATION_RULES`` is evaluated top to bottom and the first matching
rule assigns the bucket. Later rules assume earlier ones already removed
their cases (the monetary rule would otherwise swallow "% of GDP" items), so
the order is part of the contract.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass

from econorm.classification.keywords import (
    COMMODITY_KEYWORDS,
    COUNT_NAME,
    FLOW_KEYWORDS,
    FLOW_MARKERS,
    INDEX_NAME,
    PERCENT_NAME,
    RATIO_NAME,
    STOCK_KEYWORDS,
    STOCK_MARKERS,
)
from econorm.models import Classification, DomainBucket, ParsedUnit, QuantityHint, RawPoint
from econorm.units.patterns import CURRENCY_CODES, PHYSICAL_FAMILIES

#: Quantity hints that route straight to a non-monetary bucket.
HINT_BUCKETS: dict[QuantityHint, DomainBucket] = {
    QuantityHint.PERCENT: DomainBucket.PERCENTAGES,
    QuantityHint.INDEX: DomainBucket.INDICES,
    QuantityHint.RATIO: DomainBucket.RATIOS,
}

#: Name keywords for the same buckets, checked when the unit carries no hint.
NAME_BUCKETS: list[tuple[re.Pattern, DomainBucket]] = [
    (PERCENT_NAME, DomainBucket.PERCENTAGES),
    (INDEX_NAME, DomainBucket.INDICES),
    (RATIO_NAME, DomainBucket.RATIOS),
]

COMMODITY_BUCKETS: dict[str, DomainBucket] = {
    "energy": DomainBucket.ENERGY,
    "metals": DomainBucket.METALS,
    "agriculture": DomainBucket.AGRICULTURE,
}


@dataclass(frozen=True)
class Rule:
    """One classification rule: a predicate and a bucket function.

    ``assign`` returns the bucket and a detail string appended to the rule
    name in ``Classification.matched_rule``.
    """

    name: str
    predicate: Callable[[RawPoint, ParsedUnit], bool]
    assign: Callable[[RawPoint, ParsedUnit], tuple[DomainBucket, str]]
    low_confidence: bool = False


# ---------------------------------------------------------------------------
# Signals
# ---------------------------------------------------------------------------


def _name(point: RawPoint) -> str:
    return (point.name or "").lower()


def _description(point: RawPoint) -> str:
    return (point.description or "").lower()


def _name_quantity(point: RawPoint) -> DomainBucket | None:
    text = _name(point)
    for pattern, bucket in NAME_BUCKETS:
        if pattern.search(text):
            return bucket
    return None


def has_count_signal(point: RawPoint, parsed: ParsedUnit) -> bool:
    """True when the unit or name describes a number of things."""
    return parsed.quantity_hint is QuantityHint.COUNT or bool(COUNT_NAME.search(_name(point)))


def resolved_currency(point: RawPoint, parsed: ParsedUnit) -> str | None:
    """Currency from the unit, else from metadata when the unit allows one.

    Metadata ``currency_code`` is ignored for units that name a physical
    quantity or a count, where it describes the reporting country instead.
    """
    if parsed.currency:
        return parsed.currency
    if not point.currency_code:
        return None
    if parsed.physical_unit or has_count_signal(point, parsed):
        return None
    return point.currency_code.strip().upper() or None


def usable_currency(code: str | None) -> str | None:
    """ISO 4217 code, or None for placeholders such as "XXX" or "N/A"."""
    if not code:
        return None
    code = code.strip().upper()
    return code if code in CURRENCY_CODES else None


def commodity_family(point: RawPoint, parsed: ParsedUnit) -> DomainBucket | None:
    """Commodity bucket from name keywords or the physical unit family."""
    text = _name(point)
    unit_family = PHYSICAL_FAMILIES.get(parsed.physical_unit) if parsed.physical_unit else None
    for family, pattern in COMMODITY_KEYWORDS:
        if pattern.search(text) or unit_family == family:
            return COMMODITY_BUCKETS[family]
    if parsed.physical_unit:
        return DomainBucket.COMMODITIES
    return None


def stock_or_flow(point: RawPoint, parsed: ParsedUnit) -> tuple[DomainBucket, str]:
    """Split a monetary item into stock or flow.

    Order: semantic hint, time scale in the unit, then per text (name first,
    then description): explicit flow markers, explicit stock markers, flow
    keywords, stock keywords. Default stock.
    """
    hint = (point.domain_hint or "").strip().lower()
    if hint == "flow":
        return DomainBucket.MONETARY_FLOW, "hint"
    if hint == "stock":
        return DomainBucket.MONETARY_STOCK, "hint"

    if parsed.time_scale is not None:
        return DomainBucket.MONETARY_FLOW, "unit-time"

    for text, detail in ((_name(point), "name"), (_description(point), "description")):
        if not text:
            continue
        for pattern, bucket in (
            (FLOW_MARKERS, DomainBucket.MONETARY_FLOW),
            (STOCK_MARKERS, DomainBucket.MONETARY_STOCK),
            (FLOW_KEYWORDS, DomainBucket.MONETARY_FLOW),
            (STOCK_KEYWORDS, DomainBucket.MONETARY_STOCK),
        ):
            if pattern.search(text):
                return bucket, detail

    return DomainBucket.MONETARY_STOCK, "default"


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------


def _is_monetary(point: RawPoint, parsed: ParsedUnit) -> bool:
    return resolved_currency(point, parsed) is not None and not parsed.per_physical_unit


def _is_commodity(point: RawPoint, parsed: ParsedUnit) -> bool:
    if parsed.physical_unit:
        return True
    return parsed.quantity_hint is None and commodity_family(point, parsed) is not None


def _commodity(point: RawPoint, parsed: ParsedUnit) -> tuple[DomainBucket, str]:
    bucket = commodity_family(point, parsed) or DomainBucket.COMMODITIES
    return bucket, "price" if parsed.currency else "volume"


def _counts(point: RawPoint, parsed: ParsedUnit) -> tuple[DomainBucket, str]:
    detail = "unit" if parsed.quantity_hint is QuantityHint.COUNT else "name"
    return DomainBucket.COUNTS, detail


CLASSIFICATION_RULES: tuple[Rule, ...] = (
    Rule(
        "quantity",
        lambda p, u: u.quantity_hint in HINT_BUCKETS,
        lambda p, u: (HINT_BUCKETS[u.quantity_hint], "unit"),
    ),
    Rule(
        "quantity",
        lambda p, u: u.quantity_hint is None and _name_quantity(p) is not None,
        lambda p, u: (_name_quantity(p), "name"),
    ),
    Rule("monetary", _is_monetary, stock_or_flow),
    Rule("commodity", _is_commodity, _commodity),
    Rule(
        "counts",
        lambda p, u: has_count_signal(p, u) or (u.magnitude is not None and u.currency is None),
        _counts,
    ),
    Rule("counts", lambda p, u: True, lambda p, u: (DomainBucket.COUNTS, "fallback"), True),
)


def classify(point: RawPoint, parsed: ParsedUnit) -> Classification:
    """Assign exactly one domain bucket to a point.

    Pure and deterministic for a given (point, parsed unit) pair.

    Args:
        point: Input point (name, description, metadata and hints are read).
        parsed: Result of ``parse_unit(point.unit)``.

    Returns:
        Classification with the bucket, the matched rule (``"rule:detail"``)
        and a low-confidence flag for fallbacks and partially parsed units.
    """
    for rule in CLASSIFICATION_RULES:
        if rule.predicate(point, parsed):
            bucket, detail = rule.assign(point, parsed)
            return Classification(
                bucket=bucket,
                matched_rule=f"{rule.name}:{detail}",
                low_confidence=rule.low_confidence or not parsed.confident,
            )
    raise AssertionError("classification rules must end with a catch-all")
