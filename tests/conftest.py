"""
Root pytest configuration.

Shared fixtures: a USD-based fallback FX table and a factory for raw points.
"""

import pytest

from econorm.models import FxRateTable, RawPoint
from econorm.shared.config import NormalizeConfig


@pytest.fixture
def fx_table():
    """USD-based table with a handful of major and exotic currencies."""
    return FxRateTable(
        base="USD",
        rates={
            "EUR": 0.9,
            "GBP": 0.8,
            "JPY": 150.0,
            "INR": 83.0,
            "ZWL": 322.0,
            "XOF": 600.0,
        },
        as_of="2024-01-31",
        source="fallback",
        source_id="test-table",
    )


@pytest.fixture
def make_point():
    """Build a RawPoint with sensible defaults; override any field by keyword."""

    def _make(id="p1", value=1.0, unit="", name="GDP", **kwargs):
        return RawPoint(id=id, value=value, unit=unit, name=name, **kwargs)

    return _make


@pytest.fixture
def base_config(fx_table):
    return NormalizeConfig(
        target_currency="USD",
        target_magnitude="millions",
        fx_fallback=fx_table,
        min_quality_score=0,
    )
