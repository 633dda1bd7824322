"""Tests for batch quality scoring."""

from datetime import datetime, timedelta, timezone

import pytest

from econorm.pipelines.quality import DIMENSION_WEIGHTS, assess_quality
from econorm.units.parser import parse_unit


def _assess(points):
    return assess_quality(points, [parse_unit(p.unit) for p in points], lambda p: p.name)


class TestAssessQuality:
    def test_weights_sum_to_one(self):
        assert sum(DIMENSION_WEIGHTS.values()) == pytest.approx(1.0)

    def test_empty_batch(self):
        report = _assess([])
        assert report.overall == 100
        assert report.issues == ()

    def test_clean_batch(self, make_point):
        points = [
            make_point(id=f"g{i}", value=100 + i, unit="USD Million") for i in range(3)
        ]
        report = _assess(points)

        assert report.overall == 100
        assert set(report.dimensions) == set(DIMENSION_WEIGHTS)

    def test_missing_unit_lowers_completeness(self, make_point):
        report = _assess([make_point(id="a", unit=""), make_point(id="b", unit="USD", value=2)])

        assert report.dimensions["completeness"] == 50
        assert any(i.type == "missing_unit" and i.ids == ("a",) for i in report.issues)

    def test_unrecognized_unit(self, make_point):
        report = _assess([make_point(unit="widgets")])

        assert report.dimensions["validity"] < 100
        assert any(i.type == "invalid_unit" for i in report.issues)

    def test_mixed_units_in_group(self, make_point):
        report = _assess(
            [make_point(id="a", unit="USD Million"), make_point(id="b", unit="EUR Billion", value=2)]
        )
        issue = next(i for i in report.issues if i.type == "inconsistent_units")

        assert "GDP" in issue.message
        assert report.dimensions["consistency"] < 100

    def test_duplicates(self, make_point):
        report = _assess(
            [
                make_point(id="a", unit="USD", date="2024-01-01"),
                make_point(id="b", unit="USD", date="2024-01-01"),
            ]
        )

        assert report.dimensions["uniqueness"] == 50
        assert any(i.type == "duplicate" and i.ids == ("b",) for i in report.issues)

    def test_outliers(self, make_point):
        values = [10, 11, 12, 10, 11, 1000]
        points = [make_point(id=f"p{i}", value=v, unit="USD") for i, v in enumerate(values)]
        report = _assess(points)
        issue = next(i for i in report.issues if i.type == "outliers")

        assert issue.ids == ("p5",)
        assert report.dimensions["accuracy"] < 100

    def test_stale_dates(self, make_point):
        old = (datetime.now(timezone.utc) - timedelta(days=800)).date().isoformat()
        recent = (datetime.now(timezone.utc) - timedelta(days=120)).date().isoformat()
        report = _assess(
            [
                make_point(id="old", unit="USD", date=old),
                make_point(id="recent", unit="USD", date=recent, value=2),
                make_point(id="undated", unit="USD", value=3),
            ]
        )
        types = {i.type: i.ids for i in report.issues}

        assert types["stale_data"] == ("old",)
        assert types["aging_data"] == ("recent",)
        assert report.dimensions["timeliness"] == pytest.approx(100 - 50 / 3, abs=0.01)

    def test_to_dict(self, make_point):
        data = _assess([make_point(unit="")]).to_dict()
        assert set(data) == {"overall", "dimensions", "issues"}
        assert data["issues"][0]["type"] == "missing_unit"
