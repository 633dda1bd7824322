"""Tests for FX table handling, sanity checks and table selection."""

import math

import pytest

from econorm.fx.rates import select_fx_table, validate_fx_rates
from econorm.models import FxRateTable
from econorm.shared.config import NormalizeConfig
from econorm.shared.exceptions import ConfigError


class TestFxRateTable:
    def test_base_rate_is_one(self, fx_table):
        assert fx_table.rate("USD") == 1.0

    def test_lookup_is_case_insensitive(self, fx_table):
        assert fx_table.rate("eur") == 0.9

    def test_missing_rate(self, fx_table):
        assert fx_table.rate("CHF") is None

    @pytest.mark.parametrize("bad", [0.0, -1.0, math.inf, math.nan])
    def test_unusable_rate_is_missing(self, bad):
        table = FxRateTable(base="USD", rates={"EUR": bad})
        assert table.rate("EUR") is None

    def test_rates_are_read_only(self, fx_table):
        with pytest.raises(TypeError):
            fx_table.rates["EUR"] = 2.0

    def test_from_dict(self):
        table = FxRateTable.from_dict(
            {"base": "usd", "rates": {"eur": "0.92"}, "asOf": "2024-02-01", "sourceId": "ecb"}
        )

        assert table.base == "USD"
        assert table.rate("EUR") == pytest.approx(0.92)
        assert table.as_of == "2024-02-01"
        assert table.source_id == "ecb"

    def test_from_dict_requires_rates(self):
        with pytest.raises(ValueError, match="requires"):
            FxRateTable.from_dict({"base": "USD"})

    def test_per_currency_dates(self):
        table = FxRateTable(
            base="USD", rates={"EUR": 0.9}, as_of="2024-01-31", dates={"eur": "2024-01-30"}
        )
        assert table.as_of_for("EUR") == "2024-01-30"
        assert table.as_of_for("GBP") == "2024-01-31"


class TestValidateFxRates:
    def test_reasonable_table_is_clean(self, fx_table):
        result = validate_fx_rates(fx_table)
        assert result.is_valid
        assert result.warnings == []

    def test_inverted_rate_is_error(self):
        result = validate_fx_rates(FxRateTable(base="USD", rates={"JPY": 0.0067}))

        assert not result.is_valid
        assert "JPY" in result.errors[0]

    def test_slightly_off_is_warning(self):
        result = validate_fx_rates(FxRateTable(base="USD", rates={"EUR": 1.5}))

        assert result.is_valid
        assert len(result.warnings) == 1

    def test_negative_rate_is_error(self):
        result = validate_fx_rates(FxRateTable(base="USD", rates={"EUR": -1}))
        assert "zero or negative" in result.errors[0]

    def test_ranges_only_for_usd_base(self):
        result = validate_fx_rates(FxRateTable(base="EUR", rates={"JPY": 160.0}))
        assert result.is_valid
        assert result.warnings == []


class TestSelectFxTable:
    def test_fallback_by_default(self, fx_table):
        assert select_fx_table(NormalizeConfig(fx_fallback=fx_table)) is fx_table

    def test_live_table_preferred(self, fx_table):
        live = FxRateTable(base="USD", rates={"EUR": 0.91}, source="live")
        config = NormalizeConfig(fx_fallback=fx_table, use_live_fx=True, fx_live=live)
        assert select_fx_table(config) is live

    def test_live_without_table_raises(self):
        with pytest.raises(ConfigError, match="fxLive"):
            select_fx_table(NormalizeConfig(use_live_fx=True))

    def test_no_table(self):
        assert select_fx_table(NormalizeConfig()) is None
