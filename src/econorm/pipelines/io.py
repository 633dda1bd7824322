"""DataFrame input/output for normalization runs.

Exports follow the processed-data naming convention:
``{output_dir}/{category}_{identifier}_{YYYY-MM-DD}.{format}``.
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Any

import pandas as pd

from econorm.models import NormalizeResult
from econorm.shared.utils import setup_logger

logger = setup_logger(__name__)

#: Output columns of :func:`result_to_frame`, in order.
RESULT_COLUMNS = [
    "id",
    "name",
    "value",
    "unit",
    "normalized_value",
    "normalized_unit",
    "bucket",
    "currency_code",
    "country_code",
    "date",
    "explain",
]

FAILED_COLUMNS = ["id", "reason", "stage", "detail"]


def points_from_frame(df: pd.DataFrame) -> list[dict[str, Any]]:
    """Convert a DataFrame of raw points into records for ``normalize()``.

    Column names may be camelCase or snake_case. Missing cells become None.
    """
    records = df.astype(object).where(pd.notna(df), None).to_dict(orient="records")
    return [{str(k): v for k, v in rec.items()} for rec in records]


def result_to_frame(result: NormalizeResult) -> pd.DataFrame:
    """One row per normalized point; the explain trail is serialized as JSON."""
    rows = []
    for p in result.normalized:
        rows.append(
            {
                "id": p.id,
                "name": p.point.name,
                "value": p.point.value,
                "unit": p.point.unit,
                "normalized_value": p.normalized_value,
                "normalized_unit": p.normalized_unit,
                "bucket": p.bucket.value,
                "currency_code": p.point.currency_code,
                "country_code": p.point.country_code,
                "date": p.point.date,
                "explain": json.dumps(p.explain.to_dict(), default=str) if p.explain else None,
            }
        )
    return pd.DataFrame(rows, columns=RESULT_COLUMNS)


def failed_to_frame(result: NormalizeResult) -> pd.DataFrame:
    return pd.DataFrame([f.to_dict() for f in result.failed], columns=FAILED_COLUMNS)


def export_result(
    result: NormalizeResult,
    output_dir: Path,
    identifier: str,
    run_date: datetime | None = None,
    format: str = "csv",
    category: str = "normalized",
) -> Path:
    """Export normalized points to CSV or Parquet.

    Args:
        result: Outcome of ``normalize()``.
        output_dir: Directory for the export (created if missing).
        identifier: Dataset identifier (e.g. "gdp", "wages").
        run_date: Date used in the file name (default: today).
        format: "csv" or "parquet".
        category: File name prefix.

    Returns:
        Path to the written file.

    Raises:
        ValueError: If there is nothing to export or the format is invalid.
    """
    if format not in ("csv", "parquet"):
        raise ValueError(f"Invalid format '{format}'. Must be 'csv' or 'parquet'.")

    df = result_to_frame(result)
    if df.empty:
        raise ValueError(f"Cannot export empty result for '{identifier}'")

    output_dir.mkdir(parents=True, exist_ok=True)
    date_str = (run_date or datetime.now()).strftime("%Y-%m-%d")
    parts = [category] + ([identifier] if identifier else []) + [date_str]
    path = output_dir / f"{'_'.join(parts)}.{format}"

    if format == "csv":
        df.to_csv(path, index=False, encoding="utf-8")
    else:  # parquet
        df.to_parquet(path, index=False, engine="pyarrow")

    logger.info("Exported %d records to %s", len(df), path)
    return path
