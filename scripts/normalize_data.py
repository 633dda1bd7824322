"""Batch normalization script.

Reads raw indicator points from CSV or Parquet, normalizes them and writes the
result to data/processed/normalized/.

Usage:
    # Normalize to USD millions
    python scripts/normalize_data.py data/raw/gdp.csv --currency USD --magnitude millions

    # Let each indicator converge on its own majority units
    python scripts/normalize_data.py data/raw/wages.csv --auto-target

    # Use live FX rates, falling back to a local table
    python scripts/normalize_data.py data/raw/gdp.csv --currency USD --live-fx \
        --fx-table data/fx/usd_2024-01-31.json

Example:
    $ python scripts/normalize_data.py data/raw/gdp.csv --currency USD --fx-table fx.json
    [INFO] Loaded 212 points from data/raw/gdp.csv
    [INFO] Normalized 210 point(s), 2 failed
    [INFO] Exported 210 records to data/processed/normalized/normalized_gdp_2024-02-01.csv
"""

import argparse
import json
import sys
from pathlib import Path

import pandas as pd

from econorm import LiveFXFetcher, normalize
from econorm.models import FxRateTable
from econorm.pipelines.io import export_result, failed_to_frame, points_from_frame
from econorm.shared.config import Config
from econorm.shared.exceptions import EconormError
from econorm.shared.utils import setup_logger


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Normalize economic indicator points",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )

    parser.add_argument("input", type=Path, help="CSV or Parquet file of raw points")

    parser.add_argument("--currency", type=str, help="Target currency (ISO code)")
    parser.add_argument("--magnitude", type=str, help="Target magnitude (e.g. millions)")
    parser.add_argument("--time-scale", type=str, help="Target time scale for flows")

    parser.add_argument(
        "--auto-target",
        action="store_true",
        help="Resolve targets from each indicator's majority units",
    )

    parser.add_argument(
        "--min-share",
        type=float,
        default=None,
        help="Minimum majority share for auto-targeting (default: 0.75)",
    )

    parser.add_argument(
        "--fx-table",
        type=Path,
        help="JSON FX table: {\"base\": ..., \"rates\": {...}, \"asOf\": ...}",
        metavar="PATH",
    )

    parser.add_argument(
        "--live-fx",
        action="store_true",
        help="Fetch live FX rates (falls back to --fx-table)",
    )

    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Worker threads for classify/convert (default: 1)",
    )

    parser.add_argument(
        "--output-dir",
        type=Path,
        default=Config.DATA_DIR / "processed" / "normalized",
        help="Output directory",
    )

    parser.add_argument(
        "--format",
        choices=["csv", "parquet"],
        default="csv",
        help="Output format (default: csv)",
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    return parser.parse_args(argv)


def load_points(path: Path) -> pd.DataFrame:
    if path.suffix == ".parquet":
        return pd.read_parquet(path, engine="pyarrow")
    return pd.read_csv(path)


def build_options(args: argparse.Namespace, fallback: FxRateTable | None) -> dict:
    options: dict = {
        "targetCurrency": args.currency,
        "targetMagnitude": args.magnitude,
        "targetTimeScale": args.time_scale,
        "autoTargetByIndicator": args.auto_target,
        "fxFallback": fallback,
    }
    if args.min_share is not None:
        options["minMajorityShare"] = args.min_share
    if args.workers is not None:
        options["maxWorkers"] = args.workers
    if args.live_fx:
        base = fallback.base if fallback else (args.currency or "USD")
        options["useLiveFX"] = True
        options["fxLive"] = LiveFXFetcher(fallback=fallback).fetch(base)
    return options


def main(argv: list[str] | None = None) -> int:
    """Main normalization script."""
    args = parse_args(argv)

    logger = setup_logger(
        "normalize_data",
        level="DEBUG" if args.verbose else "INFO",
    )

    if not args.input.exists():
        logger.error("Input file not found: %s", args.input)
        return 1

    try:
        fallback = None
        if args.fx_table:
            fallback = FxRateTable.from_dict(json.loads(args.fx_table.read_text()))

        df = load_points(args.input)
        logger.info("Loaded %d points from %s", len(df), args.input)

        result = normalize(points_from_frame(df), build_options(args, fallback))

        for warning in result.warnings:
            logger.warning(warning)

        if result.normalized:
            export_result(result, args.output_dir, args.input.stem, format=args.format)
        else:
            logger.warning("No points normalized")

        if result.failed:
            failed_path = args.output_dir / f"failed_{args.input.stem}.csv"
            args.output_dir.mkdir(parents=True, exist_ok=True)
            failed_to_frame(result).to_csv(failed_path, index=False)
            logger.warning("%d point(s) failed; see %s", len(result.failed), failed_path)

        return 0

    except (EconormError, RuntimeError, ValueError) as e:
        logger.error("Normalization failed: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
