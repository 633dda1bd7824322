"""
Normalization Pipeline (VALIDATE → PARSE → QUALITY → CLASSIFY → AUTO_TARGET → CONVERT)

A sequential state machine. Each state has one transition function taking the
current ``PipelineContext`` and returning the next state with a new context;
contexts are frozen and only ever replaced.

Per-item failures are collected into ``failed`` and the run still ends in
``DONE``. Structural failures (bad config, input that is not a batch of
records) move the run to ``ERROR`` and ``normalize()`` raises.
"""

from collections.abc import Callable, Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, TypeVar

from econorm.classification.taxonomy import classify
from econorm.domains.base import ClassifiedItem, DomainContext
from econorm.domains.router import DomainRouter
from econorm.explain.recorder import record_exempt
from econorm.fx.rates import select_fx_table, validate_fx_rates
from econorm.models import (
    Dimension,
    FailedPoint,
    FailureReason,
    FxRateTable,
    NormalizedPoint,
    NormalizeResult,
    ParsedUnit,
    RawPoint,
)
from econorm.pipelines.exemptions import exemption_reason
from econorm.pipelines.quality import QualityReport, assess_quality
from econorm.pipelines.validate import validate_points
from econorm.shared.config import NormalizeConfig
from econorm.shared.exceptions import ConfigError, ItemError, PipelineError
from econorm.shared.utils import setup_logger
from econorm.targets.groups import build_groups, observe
from econorm.targets.resolver import GroupTarget, resolve_targets
from econorm.units.parser import parse_unit

logger = setup_logger(__name__)

T = TypeVar("T")
R = TypeVar("R")


class PipelineState(str, Enum):
    VALIDATE = "validate"
    PARSE = "parse"
    QUALITY = "quality"
    CLASSIFY = "classify"
    AUTO_TARGET = "autoTarget"
    CONVERT = "convert"
    DONE = "done"
    ERROR = "error"


@dataclass(frozen=True)
class PipelineContext:
    """Everything produced so far; each stage adds its own declared output."""

    config: NormalizeConfig
    raw: Any
    router: DomainRouter
    # validate
    points: tuple[RawPoint, ...] = ()
    fx_table: FxRateTable | None = None
    # parse
    parsed: tuple[ParsedUnit, ...] = ()
    # quality
    quality: QualityReport | None = None
    # classify
    items: tuple[ClassifiedItem, ...] = ()
    exempt: tuple[NormalizedPoint, ...] = ()
    # autoTarget
    targets: Mapping[str, dict[Dimension, GroupTarget]] = field(default_factory=dict)
    # convert
    normalized: tuple[NormalizedPoint, ...] = ()
    # accumulated across stages
    failed: tuple[FailedPoint, ...] = ()
    warnings: tuple[str, ...] = ()
    error: PipelineError | None = None


def _map(fn: Callable[[T], R], items: Sequence[T], max_workers: int) -> list[R]:
    """Apply *fn* to every item, in a thread pool when configured; keeps order."""
    if max_workers <= 1 or len(items) < 2:
        return [fn(item) for item in items]
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        return list(executor.map(fn, items))


def _item_failure(point: RawPoint, stage: str, exc: Exception) -> FailedPoint:
    if isinstance(exc, ItemError):
        return FailedPoint(point.id, exc.reason, stage, str(exc), point)
    logger.exception("Unexpected error processing %s at %s", point.id, stage)
    return FailedPoint(point.id, FailureReason.PROCESSING_ERROR, stage, str(exc), point)


# ---------------------------------------------------------------
# Stages
# ---------------------------------------------------------------


def _validate(ctx: PipelineContext) -> tuple[PipelineState, PipelineContext]:
    config = ctx.config
    config.validate()
    fx_table = select_fx_table(config)

    warnings: list[str] = []
    if fx_table is not None:
        check = validate_fx_rates(fx_table)
        warnings.extend(f"FX rate warning: {w}" for w in check.warnings)
        warnings.extend(f"FX rate error: {e}" for e in check.errors)

    points, failed, batch_warnings = validate_points(ctx.raw)
    warnings.extend(batch_warnings)
    logger.info("Validated %d point(s), rejected %d", len(points), len(failed))

    return PipelineState.PARSE, replace(
        ctx,
        points=tuple(points),
        fx_table=fx_table,
        failed=ctx.failed + tuple(failed),
        warnings=ctx.warnings + tuple(warnings),
    )


def _parse(ctx: PipelineContext) -> tuple[PipelineState, PipelineContext]:
    parsed = tuple(parse_unit(p.unit) for p in ctx.points)

    unparsed = sorted({u.original for u in parsed if u.unparsed})
    warnings = tuple(f"Unit partially unrecognized: '{text}'" for text in unparsed)
    return PipelineState.QUALITY, replace(ctx, parsed=parsed, warnings=ctx.warnings + warnings)


def _quality(ctx: PipelineContext) -> tuple[PipelineState, PipelineContext]:
    report = assess_quality(ctx.points, ctx.parsed, ctx.config.key_for)

    warnings: tuple[str, ...] = ()
    if report.overall < ctx.config.min_quality_score:
        warnings = (
            f"Data quality score {report.overall:.0f} is below minimum "
            f"{ctx.config.min_quality_score:.0f}",
        ) + tuple(i.message for i in report.issues if i.severity == "warning")
    logger.info("Quality score %.1f", report.overall)
    return PipelineState.CLASSIFY, replace(ctx, quality=report, warnings=ctx.warnings + warnings)


def _classify(ctx: PipelineContext) -> tuple[PipelineState, PipelineContext]:
    config = ctx.config

    def classify_one(pair: tuple[RawPoint, ParsedUnit]):
        point, parsed = pair
        try:
            reason = exemption_reason(point, config.exemptions)
            classification = classify(point, parsed)
            if reason:
                return NormalizedPoint(
                    point=point,
                    normalized_value=point.value,
                    normalized_unit=point.unit,
                    bucket=classification.bucket,
                    explain=record_exempt(point, reason) if config.explain else None,
                )
            return ClassifiedItem(point, parsed, classification, config.key_for(point))
        except Exception as e:
            return _item_failure(point, PipelineState.CLASSIFY.value, e)

    results = _map(classify_one, list(zip(ctx.points, ctx.parsed)), config.max_workers)

    items = tuple(r for r in results if isinstance(r, ClassifiedItem))
    exempt = tuple(r for r in results if isinstance(r, NormalizedPoint))
    failed = tuple(r for r in results if isinstance(r, FailedPoint))

    fallbacks = [i.point.id for i in items if i.classification.matched_rule == "counts:fallback"]
    warnings: tuple[str, ...] = ()
    if fallbacks:
        warnings = (f"No classification rule matched; defaulted to counts: {fallbacks}",)
    if exempt:
        logger.info("Exempted %d point(s) from normalization", len(exempt))

    return PipelineState.AUTO_TARGET, replace(
        ctx,
        items=items,
        exempt=exempt,
        failed=ctx.failed + failed,
        warnings=ctx.warnings + warnings,
    )


def _auto_target(ctx: PipelineContext) -> tuple[PipelineState, PipelineContext]:
    groups = build_groups(
        observe(item.key, item.point, item.parsed, item.bucket) for item in ctx.items
    )
    targets = {key: resolve_targets(group, ctx.config) for key, group in groups.items()}

    for key, dims in targets.items():
        for dim, target in dims.items():
            if target.dominance is not None:
                logger.debug(
                    "Group '%s' %s: %s (%s, dominance %.2f)",
                    key,
                    dim.value,
                    target.value,
                    target.source.value if target.source else None,
                    target.dominance,
                )
    return PipelineState.CONVERT, replace(ctx, targets=targets)


def _convert(ctx: PipelineContext) -> tuple[PipelineState, PipelineContext]:
    domain_ctx = DomainContext(
        config=ctx.config,
        fx_table=ctx.fx_table,
        targets=ctx.targets,
        processed_buckets=DomainRouter.processed_buckets(ctx.items),
    )

    def convert_one(item: ClassifiedItem):
        try:
            return ctx.router.route(item, domain_ctx)
        except Exception as e:
            return _item_failure(item.point, PipelineState.CONVERT.value, e)

    results = _map(convert_one, ctx.items, ctx.config.max_workers)
    converted = [r for r in results if isinstance(r, NormalizedPoint)]
    failed = tuple(r for r in results if isinstance(r, FailedPoint))

    # Restore input order across exempt and converted points.
    order = {p.id: i for i, p in enumerate(ctx.points)}
    normalized = tuple(sorted([*ctx.exempt, *converted], key=lambda p: order[p.id]))

    missing_fx = [f.id for f in failed if f.reason is FailureReason.FX_RATE_UNAVAILABLE]
    warnings: tuple[str, ...] = ()
    if missing_fx:
        warnings = (f"Missing FX rate; {len(missing_fx)} point(s) not converted: {missing_fx}",)
    logger.info("Normalized %d point(s), %d failed", len(normalized), len(failed))

    return PipelineState.DONE, replace(
        ctx,
        normalized=normalized,
        failed=ctx.failed + failed,
        warnings=ctx.warnings + warnings,
    )


TRANSITIONS: dict[PipelineState, Callable[[PipelineContext], tuple[PipelineState, PipelineContext]]] = {
    PipelineState.VALIDATE: _validate,
    PipelineState.PARSE: _parse,
    PipelineState.QUALITY: _quality,
    PipelineState.CLASSIFY: _classify,
    PipelineState.AUTO_TARGET: _auto_target,
    PipelineState.CONVERT: _convert,
}


# ---------------------------------------------------------------
# Runner
# ---------------------------------------------------------------


def run_pipeline(points: Any, config: NormalizeConfig) -> tuple[PipelineState, PipelineContext]:
    """Drive the state machine to ``DONE`` or ``ERROR``."""
    state = PipelineState.VALIDATE
    ctx = PipelineContext(config=config, raw=points, router=DomainRouter())

    while state not in (PipelineState.DONE, PipelineState.ERROR):
        try:
            state, ctx = TRANSITIONS[state](ctx)
        except PipelineError as e:
            logger.error("Pipeline failed at %s: %s", state.value, e)
            ctx = replace(ctx, error=e)
            state = PipelineState.ERROR
        except ConfigError as e:
            logger.error("Invalid configuration: %s", e)
            error = PipelineError(f"Invalid configuration: {e}", stage=state.value)
            error.__cause__ = e
            ctx = replace(ctx, error=error)
            state = PipelineState.ERROR
    return state, ctx


def normalize(
    points: Sequence[RawPoint | Mapping[str, Any]],
    config: NormalizeConfig | Mapping[str, Any] | None = None,
) -> NormalizeResult:
    """Normalize a batch of economic data points.

    Args:
        points: RawPoints or mappings (camelCase or snake_case keys).
        config: NormalizeConfig, an options mapping, or None for defaults.

    Returns:
        NormalizeResult with ``normalized`` (input order), ``failed`` and
        ``warnings``.

    Raises:
        PipelineError: On structural failure (invalid config, input that is
            not a sequence of records).

    Example:
        >>> result = normalize(
        ...     [{"id": "gdp", "value": 1, "unit": "USD billions", "name": "GDP"}],
        ...     {"targetCurrency": "USD", "targetMagnitude": "millions"},
        ... )
        >>> result.normalized[0].normalized_value
        1000.0
    """
    if not isinstance(config, NormalizeConfig):
        try:
            config = NormalizeConfig.from_dict(config)
        except ConfigError as e:
            raise PipelineError(f"Invalid configuration: {e}", stage="config") from e

    state, ctx = run_pipeline(points, config)
    if state is PipelineState.ERROR:
        raise ctx.error

    return NormalizeResult(
        normalized=ctx.normalized,
        failed=ctx.failed,
        warnings=ctx.warnings,
        quality=ctx.quality,
        state=state.value,
    )
