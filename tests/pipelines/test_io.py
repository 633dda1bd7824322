"""Tests for DataFrame input/output."""

import json
from datetime import datetime

import numpy as np
import pandas as pd
import pytest

from econorm.pipelines.io import (
    FAILED_COLUMNS,
    RESULT_COLUMNS,
    export_result,
    failed_to_frame,
    points_from_frame,
    result_to_frame,
)
from econorm.pipelines.orchestrator import normalize


@pytest.fixture
def result(fx_table):
    return normalize(
        [
            {"id": "gdp", "value": 1, "unit": "USD billions", "name": "GDP"},
            {"id": "exp", "value": 900, "unit": "EUR Million", "name": "Exports"},
            {"id": "bad", "value": 1, "unit": "CHF Million", "name": "Imports"},
        ],
        {"targetCurrency": "USD", "targetMagnitude": "millions", "fxFallback": fx_table},
    )


class TestPointsFromFrame:
    def test_missing_cells_become_none(self):
        df = pd.DataFrame(
            {
                "id": ["a", "b"],
                "value": [1.5, 2.0],
                "unit": ["USD Million", None],
                "name": ["GDP", "GDP"],
                "currencyCode": [np.nan, "EUR"],
            }
        )
        records = points_from_frame(df)

        assert records[0]["currencyCode"] is None
        assert records[1]["unit"] is None
        assert records[1]["currencyCode"] == "EUR"

    def test_records_feed_normalize(self):
        df = pd.DataFrame({"id": ["a"], "value": [1.0], "unit": ["USD billions"], "name": ["GDP"]})
        out = normalize(points_from_frame(df), {"targetMagnitude": "millions"})
        assert out.normalized[0].normalized_value == pytest.approx(1000)


class TestResultFrames:
    def test_result_to_frame(self, result):
        df = result_to_frame(result)

        assert list(df.columns) == RESULT_COLUMNS
        assert list(df["id"]) == ["gdp", "exp"]
        assert json.loads(df.loc[0, "explain"])["scale"]["original"] == "billions"

    def test_to_frame_shortcut(self, result):
        assert result.to_frame().equals(result_to_frame(result))

    def test_failed_to_frame(self, result):
        df = failed_to_frame(result)

        assert list(df.columns) == FAILED_COLUMNS
        assert df.loc[0, "reason"] == "fx-rate-unavailable"


class TestExportResult:
    def test_export_csv(self, result, tmp_path):
        path = export_result(result, tmp_path, "gdp", run_date=datetime(2024, 1, 31))

        assert path.name == "normalized_gdp_2024-01-31.csv"
        assert len(pd.read_csv(path)) == 2

    def test_export_parquet(self, result, tmp_path):
        path = export_result(result, tmp_path / "out", "gdp", format="parquet")

        assert path.suffix == ".parquet"
        assert list(pd.read_parquet(path)["id"]) == ["gdp", "exp"]

    def test_invalid_format(self, result, tmp_path):
        with pytest.raises(ValueError, match="Invalid format"):
            export_result(result, tmp_path, "gdp", format="xlsx")

    def test_empty_result(self, tmp_path):
        with pytest.raises(ValueError, match="empty"):
            export_result(normalize([]), tmp_path, "gdp")
