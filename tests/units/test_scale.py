"""Tests for scale constants and factor helpers."""

import pytest

from econorm.models import Magnitude, TimeScale
from econorm.units.scale import (
    SCALE_MAP,
    magnitude_factor,
    parse_magnitude,
    parse_time_scale,
    time_factor,
)


class TestMagnitudeFactor:
    def test_billions_to_millions(self):
        assert magnitude_factor(Magnitude.BILLIONS, Magnitude.MILLIONS) == 1000

    def test_thousands_to_millions(self):
        assert magnitude_factor(Magnitude.THOUSANDS, Magnitude.MILLIONS) == pytest.approx(0.001)

    def test_crore_is_ten_million(self):
        assert SCALE_MAP[Magnitude.CRORES] == 10_000_000
        assert magnitude_factor(Magnitude.CRORES, Magnitude.MILLIONS) == pytest.approx(10)

    def test_lakh_is_hundred_thousand(self):
        assert magnitude_factor(Magnitude.LAKHS, Magnitude.ONES) == 100_000

    def test_identity(self):
        for magnitude in Magnitude:
            assert magnitude_factor(magnitude, magnitude) == 1


class TestTimeFactor:
    def test_quarter_to_month_divides_by_three(self):
        assert time_factor(TimeScale.QUARTER, TimeScale.MONTH) == pytest.approx(4 / 12)

    def test_year_to_month_divides_by_twelve(self):
        assert time_factor(TimeScale.YEAR, TimeScale.MONTH) == pytest.approx(1 / 12)

    def test_month_to_year_multiplies_by_twelve(self):
        assert time_factor(TimeScale.MONTH, TimeScale.YEAR) == 12


class TestParsers:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("millions", Magnitude.MILLIONS),
            ("bn", Magnitude.BILLIONS),
            ("Thousand", Magnitude.THOUSANDS),
            ("units", Magnitude.ONES),
            (Magnitude.CRORES, Magnitude.CRORES),
        ],
    )
    def test_parse_magnitude(self, text, expected):
        assert parse_magnitude(text) is expected

    def test_parse_magnitude_unknown(self):
        assert parse_magnitude("lots") is None
        assert parse_magnitude("") is None

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("Quarterly", TimeScale.QUARTER),
            ("Yearly", TimeScale.YEAR),
            ("Annual", TimeScale.YEAR),
            ("monthly", TimeScale.MONTH),
            ("per week", TimeScale.WEEK),
            ("/yr", TimeScale.YEAR),
        ],
    )
    def test_parse_time_scale(self, text, expected):
        assert parse_time_scale(text) is expected

    def test_parse_time_scale_none(self):
        assert parse_time_scale(None) is None
        assert parse_time_scale("irregular") is None
