"""
Batch Quality Assessment

Scores a validated batch on completeness, validity, consistency, accuracy,
timeliness and uniqueness (0-100 each) and combines them into a weighted
overall score. Quality never rejects points; low scores only produce warnings.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

import pandas as pd

from econorm.models import ParsedUnit, QuantityHint, RawPoint

#: Weight of each dimension in the overall score.
DIMENSION_WEIGHTS: dict[str, float] = {
    "completeness": 0.25,
    "validity": 0.25,
    "consistency": 0.15,
    "accuracy": 0.15,
    "timeliness": 0.10,
    "uniqueness": 0.10,
}

SUSPICIOUS_PERCENT = 1000
HIGH_VARIATION_CV = 2.0
IQR_MULTIPLIER = 1.5
MIN_OUTLIER_SAMPLE = 4
STALE_DAYS = 365
AGING_DAYS = 90


@dataclass(frozen=True)
class QualityIssue:
    severity: str
    type: str
    message: str
    ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class QualityReport:
    """Overall score, per-dimension scores and the issues behind them."""

    overall: float
    dimensions: dict[str, float] = field(default_factory=dict)
    issues: tuple[QualityIssue, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "overall": self.overall,
            "dimensions": dict(self.dimensions),
            "issues": [
                {"severity": i.severity, "type": i.type, "message": i.message, "ids": list(i.ids)}
                for i in self.issues
            ],
        }


def _frame(points: Sequence[RawPoint], parsed: Sequence[ParsedUnit], key_fn) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "id": [p.id for p in points],
            "key": [key_fn(p) for p in points],
            "value": [float(p.value) for p in points],
            "unit": [p.unit for p in points],
            "date": [p.date for p in points],
            "recognized": [u.confident for u in parsed],
            "is_percent": [u.quantity_hint is QuantityHint.PERCENT for u in parsed],
        }
    )


def check_completeness(df: pd.DataFrame) -> tuple[float, list[QualityIssue]]:
    missing = df[df["unit"].str.strip() == ""]
    issues = []
    if not missing.empty:
        issues.append(
            QualityIssue(
                "warning",
                "missing_unit",
                f"{len(missing)} point(s) have no unit",
                tuple(missing["id"]),
            )
        )
    return max(0.0, 100 - len(missing) / len(df) * 100), issues


def check_validity(df: pd.DataFrame) -> tuple[float, list[QualityIssue]]:
    issues = []
    unknown = df[~df["recognized"] & (df["unit"].str.strip() != "")]
    if not unknown.empty:
        issues.append(
            QualityIssue(
                "warning",
                "invalid_unit",
                f"Unrecognized unit(s): {sorted(set(unknown['unit']))}",
                tuple(unknown["id"]),
            )
        )
    suspicious = df[df["is_percent"] & (df["value"].abs() > SUSPICIOUS_PERCENT)]
    if not suspicious.empty:
        issues.append(
            QualityIssue(
                "warning",
                "suspicious_percentage",
                f"{len(suspicious)} percentage value(s) above {SUSPICIOUS_PERCENT}",
                tuple(suspicious["id"]),
            )
        )
    invalid = len(unknown) + len(suspicious)
    return max(0.0, 100 - invalid / len(df) * 50), issues


def check_consistency(df: pd.DataFrame) -> tuple[float, list[QualityIssue]]:
    """Mixed units, high variability and sign changes within each indicator."""
    issues = []
    for key, group in df.groupby("key", sort=False):
        ids = tuple(group["id"])
        units = group["unit"].unique()
        if len(units) > 1:
            issues.append(
                QualityIssue(
                    "warning",
                    "inconsistent_units",
                    f"{key}: multiple units found: {', '.join(map(str, units))}",
                    ids,
                )
            )
        values = group["value"]
        mean = values.mean()
        if len(values) > 1 and mean != 0:
            cv = values.std(ddof=0) / abs(mean)
            if cv > HIGH_VARIATION_CV:
                issues.append(
                    QualityIssue(
                        "info", "high_variability", f"{key}: coefficient of variation {cv:.2f}", ids
                    )
                )
        if (values > 0).any() and (values < 0).any() and not (values == 0).any():
            issues.append(
                QualityIssue("warning", "sign_changes", f"{key}: values change sign", ids)
            )
    return max(0.0, 100 - len(issues) * 20), issues


def check_accuracy(df: pd.DataFrame) -> tuple[float, list[QualityIssue]]:
    """IQR outliers per indicator (groups with at least four values)."""
    outlier_ids: list[str] = []
    for _, group in df.groupby("key", sort=False):
        if len(group) < MIN_OUTLIER_SAMPLE:
            continue
        q1 = group["value"].quantile(0.25)
        q3 = group["value"].quantile(0.75)
        iqr = q3 - q1
        lower, upper = q1 - IQR_MULTIPLIER * iqr, q3 + IQR_MULTIPLIER * iqr
        mask = (group["value"] < lower) | (group["value"] > upper)
        outlier_ids.extend(group.loc[mask, "id"])

    issues = []
    if outlier_ids:
        issues.append(
            QualityIssue(
                "info", "outliers", f"{len(outlier_ids)} outlier(s) detected (IQR)", tuple(outlier_ids)
            )
        )
    return max(0.0, 100 - len(outlier_ids) / len(df) * 100), issues


def check_timeliness(df: pd.DataFrame) -> tuple[float, list[QualityIssue]]:
    """Observation dates older than a year are stale; older than a quarter, aging."""
    dates = pd.to_datetime(df["date"], errors="coerce", utc=True, format="mixed")
    age_days = (pd.Timestamp.now(tz="UTC") - dates).dt.days
    stale = df[age_days > STALE_DAYS]
    aging = df[(age_days > AGING_DAYS) & (age_days <= STALE_DAYS)]

    issues = []
    if not stale.empty:
        issues.append(
            QualityIssue(
                "warning",
                "stale_data",
                f"{len(stale)} point(s) older than {STALE_DAYS} days",
                tuple(stale["id"]),
            )
        )
    if not aging.empty:
        issues.append(
            QualityIssue(
                "info",
                "aging_data",
                f"{len(aging)} point(s) older than {AGING_DAYS} days",
                tuple(aging["id"]),
            )
        )
    return max(0.0, 100 - len(stale) / len(df) * 50), issues


def check_uniqueness(df: pd.DataFrame) -> tuple[float, list[QualityIssue]]:
    dupes = df[df.duplicated(subset=["key", "value", "unit", "date"], keep="first")]
    issues = []
    if not dupes.empty:
        issues.append(
            QualityIssue(
                "warning",
                "duplicate",
                f"{len(dupes)} duplicate observation(s)",
                tuple(dupes["id"]),
            )
        )
    return max(0.0, 100 - len(dupes) / len(df) * 100), issues


CHECKS: dict[str, Callable[[pd.DataFrame], tuple[float, list[QualityIssue]]]] = {
    "completeness": check_completeness,
    "validity": check_validity,
    "consistency": check_consistency,
    "accuracy": check_accuracy,
    "timeliness": check_timeliness,
    "uniqueness": check_uniqueness,
}


def assess_quality(
    points: Sequence[RawPoint],
    parsed: Sequence[ParsedUnit],
    key_fn: Callable[[RawPoint], str],
) -> QualityReport:
    """Score a batch.

    Args:
        points: Validated points.
        parsed: ``parse_unit`` result for each point, same order.
        key_fn: Indicator key of a point (consistency and outliers are
            evaluated per indicator).

    Returns:
        QualityReport; an empty batch scores 100.
    """
    if not points:
        return QualityReport(overall=100.0, dimensions={name: 100.0 for name in CHECKS})

    df = _frame(points, parsed, key_fn)
    dimensions: dict[str, float] = {}
    issues: list[QualityIssue] = []
    for name, check in CHECKS.items():
        score, found = check(df)
        dimensions[name] = round(score, 2)
        issues.extend(found)

    total_weight = sum(DIMENSION_WEIGHTS.values())
    overall = sum(dimensions[d] * w for d, w in DIMENSION_WEIGHTS.items()) / total_weight
    return QualityReport(overall=round(overall, 2), dimensions=dimensions, issues=tuple(issues))
