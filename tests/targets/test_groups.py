"""Tests for indicator group statistics."""

import pytest

from econorm.models import Dimension, DomainBucket
from econorm.targets.groups import IndicatorGroup, Observation, build_groups, observe
from econorm.units.parser import parse_unit


def _obs(key="GDP", currency="USD", magnitude="millions", time=None, bucket=None):
    bucket = bucket or (DomainBucket.MONETARY_FLOW if time else DomainBucket.MONETARY_STOCK)
    return Observation(key, bucket, currency, magnitude, time)


class TestObserve:
    def test_flow_records_time_from_periodicity(self, make_point):
        point = make_point(unit="USD Million", periodicity="Quarterly")
        obs = observe("GDP", point, parse_unit(point.unit), DomainBucket.MONETARY_FLOW)

        assert obs.currency == "USD"
        assert obs.magnitude == "millions"
        assert obs.time == "quarter"

    def test_stock_ignores_time(self, make_point):
        point = make_point(unit="USD Million", periodicity="Monthly")
        obs = observe("Debt", point, parse_unit(point.unit), DomainBucket.MONETARY_STOCK)
        assert obs.time is None

    def test_metadata_currency(self, make_point):
        point = make_point(unit="Million", currency_code="eur")
        obs = observe("Debt", point, parse_unit(point.unit), DomainBucket.MONETARY_STOCK)
        assert obs.currency == "EUR"

    @pytest.mark.parametrize("code", ["XXX", "N/A"])
    def test_placeholder_currency_not_counted(self, make_point, code):
        point = make_point(unit="Million", currency_code=code)
        obs = observe("Debt", point, parse_unit(point.unit), DomainBucket.MONETARY_STOCK)
        assert obs.currency is None

    def test_placeholders_cannot_outvote_real_currency(self, make_point):
        points = [make_point(id=f"x{i}", unit="Million", currency_code="XXX") for i in range(8)]
        points += [make_point(id=f"u{i}", unit="USD Million") for i in range(2)]

        group = build_groups(
            observe("GDP", p, parse_unit(p.unit), DomainBucket.MONETARY_FLOW) for p in points
        )["GDP"]

        assert group.size == 10
        assert group.ranked(Dimension.CURRENCY) == [("USD", 2)]
        assert group.dominance(Dimension.CURRENCY) == pytest.approx(0.2)


class TestIndicatorGroup:
    def test_dominance(self):
        groups = build_groups([_obs(currency="USD")] * 8 + [_obs(currency="EUR")] * 2)
        group = groups["GDP"]

        assert group.size == 10
        assert group.majority(Dimension.CURRENCY) == ("USD", 8)
        assert group.dominance(Dimension.CURRENCY) == pytest.approx(0.8)
        assert group.shares(Dimension.CURRENCY) == {"USD": 0.8, "EUR": 0.2}

    def test_missing_values_count_against_dominance(self):
        group = build_groups([_obs(magnitude="millions")] * 3 + [_obs(magnitude=None)])["GDP"]
        assert group.dominance(Dimension.MAGNITUDE) == pytest.approx(0.75)

    def test_ties_keep_first_seen_order(self):
        group = build_groups(
            [_obs(currency="EUR"), _obs(currency="USD"), _obs(currency="USD"), _obs(currency="EUR")]
        )["GDP"]
        assert group.majority(Dimension.CURRENCY) == ("EUR", 2)

    def test_time_uses_flow_members_only(self):
        group = build_groups(
            [_obs(time="month"), _obs(time="month"), _obs(time=None, bucket=DomainBucket.MONETARY_STOCK)]
        )["GDP"]

        assert group.flow_size == 2
        assert group.dominance(Dimension.TIME) == 1.0

    def test_empty_dimension(self):
        group = build_groups([_obs(currency=None)])["GDP"]
        assert group.dominance(Dimension.CURRENCY) is None
        assert group.shares(Dimension.CURRENCY) == {}

    def test_non_monetary_observations_are_ignored(self):
        groups = build_groups([_obs(bucket=DomainBucket.PERCENTAGES)])
        assert groups == {}

    def test_groups_are_separated_by_key(self):
        groups = build_groups([_obs(key="GDP"), _obs(key="Exports"), _obs(key="GDP")])
        assert groups["GDP"].size == 2
        assert groups["Exports"].size == 1


class TestMerge:
    def test_merge_matches_single_pass(self):
        observations = [_obs(currency="USD")] * 5 + [_obs(currency="EUR")] * 3
        whole = build_groups(observations)["GDP"]
        left = build_groups(observations[:4])["GDP"]
        right = build_groups(observations[4:])["GDP"]

        merged = left.merge(right)

        assert merged.size == whole.size
        assert merged.currency == whole.currency
        assert merged.dominance(Dimension.CURRENCY) == whole.dominance(Dimension.CURRENCY)

    def test_merge_rejects_other_key(self):
        a = IndicatorGroup.from_observation(_obs(key="GDP"))
        b = IndicatorGroup.from_observation(_obs(key="CPI"))
        with pytest.raises(ValueError, match="Cannot merge"):
            a.merge(b)
