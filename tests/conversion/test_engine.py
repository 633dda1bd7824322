"""Tests for currency, magnitude and time conversion."""

import pytest

from econorm.conversion.engine import convert, currency_factor
from econorm.models import Dimension, ItemResolution, ResolutionSource, TargetResolution
from econorm.shared.exceptions import FxRateUnavailableError


def _res(dimension, original, target):
    return TargetResolution(
        dimension=dimension,
        original=original,
        original_source=ResolutionSource.UNIT_TEXT,
        target=target,
        source=ResolutionSource.PIPELINE_FALLBACK,
    )


def _resolution(currency=("USD", "USD"), magnitude=("millions", "millions"), time=None):
    return ItemResolution(
        currency=_res(Dimension.CURRENCY, *currency) if currency else None,
        magnitude=_res(Dimension.MAGNITUDE, *magnitude) if magnitude else None,
        time=_res(Dimension.TIME, *time) if time else None,
    )


class TestCurrencyFactor:
    def test_exotic_to_base(self, fx_table):
        factor, source_rate, target_rate = currency_factor("ZWL", "USD", fx_table)

        assert factor == pytest.approx(1 / 322)
        assert source_rate == 322
        assert target_rate == 1.0

    def test_cross_rate(self, fx_table):
        factor, _, _ = currency_factor("EUR", "GBP", fx_table)
        assert factor == pytest.approx(0.8 / 0.9)

    def test_missing_source_rate(self, fx_table):
        with pytest.raises(FxRateUnavailableError) as exc:
            currency_factor("CHF", "USD", fx_table, item_id="x1")

        assert exc.value.currency == "CHF"
        assert exc.value.item_id == "x1"

    def test_missing_target_rate(self, fx_table):
        with pytest.raises(FxRateUnavailableError, match="CHF"):
            currency_factor("EUR", "CHF", fx_table)

    def test_no_table(self):
        with pytest.raises(FxRateUnavailableError):
            currency_factor("EUR", "USD", None)


class TestConvert:
    def test_identity_currency_skips_lookup(self):
        # No table at all: a lookup would raise.
        value, factors = convert(42.0, _resolution(), None)

        assert value == 42.0
        assert factors.fx == 1.0
        assert factors.fx_skipped is True
        assert factors.fx_source_rate is None

    def test_billions_to_millions(self, fx_table):
        value, factors = convert(1.0, _resolution(magnitude=("billions", "millions")), fx_table)

        assert value == pytest.approx(1000)
        assert factors.magnitude == pytest.approx(1000)

    def test_exotic_currency_in_millions(self, fx_table):
        value, factors = convert(1000.0, _resolution(currency=("ZWL", "USD")), fx_table)

        assert value == pytest.approx(1000 / 322)
        assert factors.fx_skipped is False
        assert factors.fx_source_rate == 322

    def test_quarterly_to_monthly(self, fx_table):
        value, factors = convert(
            300.0, _resolution(time=("quarter", "month")), fx_table
        )
        assert value == pytest.approx(100)
        assert factors.time == pytest.approx(1 / 3)

    def test_all_three_factors(self, fx_table):
        value, factors = convert(
            9.0,
            _resolution(
                currency=("EUR", "USD"), magnitude=("billions", "millions"), time=("year", "month")
            ),
            fx_table,
        )

        expected = 9.0 * (1 / 0.9) * 1000 / 12
        assert value == pytest.approx(expected)
        assert factors.total == pytest.approx(expected / 9.0)

    def test_time_without_period_is_untouched(self, fx_table):
        resolution = ItemResolution(
            currency=_res(Dimension.CURRENCY, "USD", "USD"),
            time=TargetResolution(Dimension.TIME, None, None, None, None),
        )
        value, factors = convert(5.0, resolution, fx_table)

        assert value == 5.0
        assert factors.time == 1.0

    def test_missing_rate_propagates(self, fx_table):
        with pytest.raises(FxRateUnavailableError):
            convert(1.0, _resolution(currency=("CHF", "USD")), fx_table, item_id="c1")
