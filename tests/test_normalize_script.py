"""Tests for the batch normalization script."""

import importlib.util
import json
from pathlib import Path

import pandas as pd
import pytest

SCRIPT = Path(__file__).resolve().parents[1] / "scripts" / "normalize_data.py"


@pytest.fixture(scope="module")
def script():
    loader_spec = importlib.util.spec_from_file_location("normalize_data", SCRIPT)
    module = importlib.util.module_from_spec(loader_spec)
    loader_spec.loader.exec_module(module)
    return module


@pytest.fixture
def raw_csv(tmp_path):
    path = tmp_path / "gdp.csv"
    pd.DataFrame(
        [
            {"id": "de", "value": 9.0, "unit": "EUR billions", "name": "GDP"},
            {"id": "us", "value": 2.0, "unit": "USD billions", "name": "GDP"},
            {"id": "bad", "value": None, "unit": "USD billions", "name": "GDP"},
        ]
    ).to_csv(path, index=False)
    return path


@pytest.fixture
def fx_json(tmp_path):
    path = tmp_path / "fx.json"
    path.write_text(json.dumps({"base": "USD", "rates": {"EUR": 0.9}, "asOf": "2024-01-31"}))
    return path


def test_normalizes_and_exports(script, raw_csv, fx_json, tmp_path):
    out = tmp_path / "out"
    code = script.main(
        [
            str(raw_csv),
            "--currency", "USD",
            "--magnitude", "millions",
            "--fx-table", str(fx_json),
            "--output-dir", str(out),
        ]
    )

    assert code == 0
    [exported] = list(out.glob("normalized_gdp_*.csv"))
    df = pd.read_csv(exported)
    assert list(df["id"]) == ["de", "us"]
    assert df["normalized_value"].tolist() == pytest.approx([10000.0, 2000.0])
    assert (df["normalized_unit"] == "USD millions").all()

    failed = pd.read_csv(out / "failed_gdp.csv")
    assert failed["reason"].tolist() == ["schema-violation"]


def test_missing_input(script, tmp_path):
    assert script.main([str(tmp_path / "nope.csv")]) == 1


def test_invalid_option_reports_failure(script, raw_csv, tmp_path):
    code = script.main([str(raw_csv), "--currency", "DOLLARS", "--output-dir", str(tmp_path)])
    assert code == 1
