"""
Raw Point Validation

Rejects individual points that break ``RAW_POINT_SCHEMA``; the rest of the
batch continues. Only a batch that is not a sequence at all is structural.
"""

import math
import numbers
from collections.abc import Mapping, Sequence
from dataclasses import fields
from typing import Any

from econorm.models import FailedPoint, FailureReason, RawPoint
from econorm.pipelines.schema import DOMAIN_HINTS, RAW_POINT_SCHEMA, REQUIRED_FIELDS
from econorm.shared.exceptions import PipelineError

STAGE = "validate"


def _is_number(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def _check_fields(values: Mapping[str, Any]) -> str | None:
    """Return a violation message, or None when the fields are valid."""
    missing = [f for f in REQUIRED_FIELDS if values.get(f) is None or values.get(f) == ""]
    if missing:
        return f"Missing required fields: {missing}"

    value = values["value"]
    if not _is_number(value):
        return f"Field 'value' must be numeric, got {type(value).__name__}"
    if not math.isfinite(float(value)):
        return f"Field 'value' must be finite, got {value}"

    for name, expected in RAW_POINT_SCHEMA.items():
        if name in ("id", "value"):
            continue
        raw = values.get(name)
        if raw is None:
            continue
        if not isinstance(raw, expected):
            return f"Field '{name}' must be {expected.__name__}, got {type(raw).__name__}"

    hint = values.get("domain_hint")
    if hint is not None and hint.strip().lower() not in DOMAIN_HINTS:
        return f"Field 'domain_hint' must be one of {sorted(DOMAIN_HINTS)}, got '{hint}'"
    return None


def _raw_id(item: Any) -> str | None:
    if isinstance(item, RawPoint):
        return item.id
    if isinstance(item, Mapping) and item.get("id") is not None:
        return str(item["id"])
    return None


def validate_points(
    items: Sequence[Any],
) -> tuple[list[RawPoint], list[FailedPoint], list[str]]:
    """Validate a batch and coerce mappings into ``RawPoint``s.

    Args:
        items: RawPoints or mappings (camelCase or snake_case keys).

    Returns:
        (valid points in input order, failed points, batch warnings)

    Raises:
        PipelineError: If *items* is not a sequence of records.
    """
    if isinstance(items, (str, bytes, Mapping)) or not isinstance(items, Sequence):
        raise PipelineError(
            f"Expected a sequence of points, got {type(items).__name__}", stage=STAGE
        )

    points: list[RawPoint] = []
    failed: list[FailedPoint] = []
    seen: set[str] = set()
    point_fields = {f.name for f in fields(RawPoint)}

    for item in items:
        if isinstance(item, RawPoint):
            values = {name: getattr(item, name) for name in point_fields}
        elif isinstance(item, Mapping):
            values = RawPoint.field_values(item)
        else:
            failed.append(
                FailedPoint(
                    id=None,
                    reason=FailureReason.SCHEMA_VIOLATION,
                    stage=STAGE,
                    detail=f"Expected a mapping, got {type(item).__name__}",
                    raw=item,
                )
            )
            continue

        problem = _check_fields(values)
        if problem:
            failed.append(
                FailedPoint(_raw_id(item), FailureReason.SCHEMA_VIOLATION, STAGE, problem, item)
            )
            continue

        point = item if isinstance(item, RawPoint) else RawPoint.from_mapping(values)
        if point.id in seen:
            failed.append(
                FailedPoint(
                    point.id,
                    FailureReason.DUPLICATE_ID,
                    STAGE,
                    f"Duplicate id '{point.id}'",
                    item,
                )
            )
            continue

        seen.add(point.id)
        points.append(point)

    warnings = []
    no_unit = sum(1 for p in points if not p.unit.strip())
    if no_unit:
        warnings.append(f"{no_unit} point(s) have no unit; metadata and defaults were used")
    if failed:
        warnings.append(f"{len(failed)} point(s) rejected at validation")
    return points, failed, warnings
