"""Explain trail: an append-only audit record of every normalization decision.

Entries are keyed by dotted field names (``currency.original``,
``fx.rate``). A later revision of a field appends a new entry; earlier
entries are never modified, and the nested JSON view reports the latest
value per field.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from econorm.models import (
    Classification,
    ConversionFactors,
    DomainBucket,
    FxRateTable,
    ItemResolution,
    ParsedUnit,
    RawPoint,
    TargetResolution,
)

#: Dotted prefix under which each dimension's resolution is recorded.
DIMENSION_KEYS: dict[str, tuple[str, str, str]] = {
    # dimension: (prefix, original field, target field)
    "currency": ("currency", "original", "normalized"),
    "magnitude": ("scale", "original", "normalized"),
    "time": ("periodicity", "original", "target"),
}


@dataclass(frozen=True)
class ExplainEntry:
    stage: str
    field: str
    value: Any


@dataclass(frozen=True)
class ExplainTrail:
    """Immutable trail attached to a normalized point."""

    entries: tuple[ExplainEntry, ...] = ()

    def latest(self) -> dict[str, Any]:
        """Latest value of each field, in first-recorded order."""
        values: dict[str, Any] = {}
        for entry in self.entries:
            values[entry.field] = entry.value
        return values

    def history(self, field: str) -> list[Any]:
        """Every value recorded for *field*, oldest first."""
        return [e.value for e in self.entries if e.field == field]

    def to_dict(self) -> dict[str, Any]:
        """Nested JSON view keyed by the dotted field names."""
        tree: dict[str, Any] = {}
        for field, value in self.latest().items():
            node = tree
            *parents, leaf = field.split(".")
            for part in parents:
                node = node.setdefault(part, {})
            node[leaf] = value
        tree["entries"] = [
            {"stage": e.stage, "field": e.field, "value": e.value} for e in self.entries
        ]
        return tree

    def get(self, path: str, default: Any = None) -> Any:
        """Read a dotted path such as ``"fx.currency"``."""
        return self.latest().get(path, default)


class ExplainRecorder:
    """Collects entries for one item; :meth:`build` freezes them into a trail."""

    def __init__(self) -> None:
        self._entries: list[ExplainEntry] = []

    def add(self, stage: str, field: str, value: Any) -> "ExplainRecorder":
        self._entries.append(ExplainEntry(stage, field, value))
        return self

    def build(self) -> ExplainTrail:
        return ExplainTrail(tuple(self._entries))


def _record_resolution(recorder: ExplainRecorder, res: TargetResolution) -> None:
    prefix, original_key, target_key = DIMENSION_KEYS[res.dimension.value]
    recorder.add("resolve", f"{prefix}.{original_key}", res.original)
    recorder.add(
        "resolve",
        f"{prefix}.originalSource",
        res.original_source.value if res.original_source else None,
    )
    recorder.add("resolve", f"{prefix}.{target_key}", res.target)
    auto = f"autoTarget.{res.dimension.value}"
    recorder.add("autoTarget", f"{auto}.selected", res.target)
    recorder.add("autoTarget", f"{auto}.source", res.source.value if res.source else None)
    recorder.add("autoTarget", f"{auto}.dominance", res.dominance)
    if res.shares:
        recorder.add("autoTarget", f"{auto}.shares", dict(res.shares))
    if res.note:
        recorder.add("resolve", f"{prefix}.note", res.note)


def _steps(resolution: ItemResolution, factors: ConversionFactors) -> list[str]:
    steps = []
    if resolution.currency is not None:
        cur = resolution.currency
        if factors.fx_skipped:
            steps.append(f"fx: {cur.original} = {cur.target}, skipped (x1)")
        else:
            steps.append(
                f"fx: {cur.original} -> {cur.target} x{factors.fx:.10g} "
                f"({factors.fx_target_rate:.10g} / {factors.fx_source_rate:.10g})"
            )
    if resolution.magnitude is not None:
        mag = resolution.magnitude
        steps.append(f"scale: {mag.original} -> {mag.target} x{factors.magnitude:.10g}")
    if resolution.time is not None and resolution.time.original is not None:
        per = resolution.time
        steps.append(f"time: per {per.original} -> per {per.target} x{factors.time:.10g}")
    return steps


def record(
    point: RawPoint,
    parsed: ParsedUnit,
    classification: Classification,
    resolution: ItemResolution,
    factors: ConversionFactors,
    fx_table: FxRateTable | None = None,
    processed_buckets: Iterable[DomainBucket] = (),
    normalized_unit: str | None = None,
) -> ExplainTrail:
    """Assemble the explain trail of one normalized item.

    The trail holds enough to recompute the result by hand:
    ``value.normalized == value.original * fx.factor * scale factor * time factor``.
    """
    recorder = ExplainRecorder()
    recorder.add("parse", "unit.original", point.unit)
    recorder.add("parse", "unit.parsed", parsed.to_dict())

    recorder.add("classify", "domain.bucket", classification.bucket.value)
    recorder.add("classify", "domain.rule", classification.matched_rule)
    recorder.add("classify", "domain.lowConfidence", classification.low_confidence)
    recorder.add("classify", "router.processedBuckets", sorted(b.value for b in processed_buckets))

    for res in resolution.resolutions():
        _record_resolution(recorder, res)

    if resolution.currency is not None:
        cur = resolution.currency
        recorder.add("convert", "fx.currency", cur.original)
        recorder.add("convert", "fx.target", cur.target)
        recorder.add("convert", "fx.factor", factors.fx)
        recorder.add("convert", "fx.skipped", factors.fx_skipped)
        if not factors.fx_skipped and fx_table is not None:
            recorder.add("convert", "fx.rate", factors.fx_source_rate)
            recorder.add("convert", "fx.targetRate", factors.fx_target_rate)
            recorder.add("convert", "fx.base", fx_table.base)
            recorder.add("convert", "fx.source", fx_table.source)
            recorder.add("convert", "fx.sourceId", fx_table.source_id)
            recorder.add("convert", "fx.asOf", fx_table.as_of_for(cur.original))

    recorder.add("convert", "conversion.factors", factors.to_dict())
    recorder.add("convert", "conversion.steps", _steps(resolution, factors))
    recorder.add("convert", "conversion.totalFactor", factors.total)
    recorder.add("convert", "value.original", point.value)
    recorder.add("convert", "value.normalized", point.value * factors.total)
    if normalized_unit is not None:
        recorder.add("convert", "unit.normalized", normalized_unit)
    return recorder.build()


def record_exempt(point: RawPoint, reason: str) -> ExplainTrail:
    """Trail for an exempted point, which passes through unchanged."""
    return (
        ExplainRecorder()
        .add("classify", "exemption.reason", reason)
        .add("convert", "value.original", point.value)
        .add("convert", "value.normalized", point.value)
        .add("convert", "unit.normalized", point.unit)
        .build()
    )
