"""Tests for domain handlers and the router."""

import pytest

from econorm.classification.taxonomy import classify
from econorm.domains.base import BaseDomain, ClassifiedItem, DomainContext
from econorm.domains.monetary import MonetaryDomain, monetary_unit
from econorm.domains.passthrough import CommoditiesDomain, CountsDomain, PercentagesDomain
from econorm.domains.router import DomainRouter
from econorm.models import DomainBucket
from econorm.shared.config import NormalizeConfig
from econorm.shared.exceptions import FxRateUnavailableError
from econorm.targets.resolver import resolve_targets
from econorm.units.parser import parse_unit

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _item(point, key=None):
    parsed = parse_unit(point.unit)
    return ClassifiedItem(point, parsed, classify(point, parsed), key or point.name)


def _context(config, fx_table, items=()):
    targets = {item.key: resolve_targets(None, config) for item in items}
    return DomainContext(
        config=config,
        fx_table=fx_table,
        targets=targets,
        processed_buckets=DomainRouter.processed_buckets(items),
    )


# ---------------------------------------------------------------------------
# Router
# ---------------------------------------------------------------------------


class TestDomainRouter:
    def test_base_domain_is_abstract(self):
        with pytest.raises(TypeError):
            BaseDomain()  # type: ignore[abstract]

    def test_missing_handler_rejected(self):
        with pytest.raises(ValueError, match="No handler"):
            DomainRouter(handlers=[MonetaryDomain()])

    def test_duplicate_handler_rejected(self):
        handlers = [cls() for cls in (MonetaryDomain, MonetaryDomain)]
        with pytest.raises(ValueError, match="more than one handler"):
            DomainRouter(handlers=handlers)

    def test_routes_by_bucket(self):
        router = DomainRouter()
        assert isinstance(router.handler_for(DomainBucket.MONETARY_FLOW), MonetaryDomain)
        assert isinstance(router.handler_for(DomainBucket.PERCENTAGES), PercentagesDomain)
        assert isinstance(router.handler_for(DomainBucket.COUNTS), CountsDomain)
        assert isinstance(router.handler_for(DomainBucket.METALS), CommoditiesDomain)

    def test_processed_buckets_first_seen_order(self, make_point):
        items = [
            _item(make_point(id="a", unit="%", name="Inflation")),
            _item(make_point(id="b", unit="USD Million", name="GDP")),
            _item(make_point(id="c", unit="%", name="Unemployment Rate")),
        ]
        assert DomainRouter.processed_buckets(items) == (
            DomainBucket.PERCENTAGES,
            DomainBucket.MONETARY_FLOW,
        )


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


class TestMonetaryDomain:
    def test_monetary_unit(self):
        assert monetary_unit("USD", "millions", "month") == "USD millions per month"
        assert monetary_unit("USD", "ones", None) == "USD"
        assert monetary_unit("USD", "thousands", "year", per_capita=True) == (
            "USD thousands per capita per year"
        )

    def test_per_capita_kept_in_unit(self, make_point, fx_table):
        config = NormalizeConfig(target_currency="EUR")
        item = _item(make_point(value=50000.0, unit="USD per capita", name="GDP per Capita"))

        result = DomainRouter().route(item, _context(config, fx_table, [item]))

        assert result.normalized_unit == "EUR per capita"
        assert result.normalized_value == pytest.approx(45000)

    def test_flow_converted_to_monthly(self, make_point, fx_table):
        config = NormalizeConfig(
            target_currency="USD", target_magnitude="millions", target_time_scale="month"
        )
        item = _item(make_point(value=3.0, unit="USD billions per quarter", name="GDP"))

        result = DomainRouter().route(item, _context(config, fx_table, [item]))

        assert result.normalized_value == pytest.approx(1000)
        assert result.normalized_unit == "USD millions per month"
        assert result.bucket is DomainBucket.MONETARY_FLOW

    def test_stock_never_gets_a_period(self, make_point, fx_table):
        config = NormalizeConfig(
            target_currency="USD", target_magnitude="millions", target_time_scale="month"
        )
        item = _item(make_point(value=5.0, unit="EUR Million", name="Government Debt"))

        result = DomainRouter().route(item, _context(config, fx_table, [item]))

        assert result.bucket is DomainBucket.MONETARY_STOCK
        assert result.normalized_unit == "USD millions"
        assert "per" not in result.normalized_unit
        assert result.normalized_value == pytest.approx(5 / 0.9)

    def test_missing_rate_raises_item_error(self, make_point, fx_table):
        config = NormalizeConfig(target_currency="CHF")
        item = _item(make_point(unit="USD Million", name="GDP"))

        with pytest.raises(FxRateUnavailableError):
            DomainRouter().route(item, _context(config, fx_table, [item]))

    def test_explain_disabled(self, make_point, fx_table):
        config = NormalizeConfig(target_currency="USD", explain=False)
        item = _item(make_point(unit="EUR Million", name="GDP"))

        result = DomainRouter().route(item, _context(config, fx_table, [item]))

        assert result.explain is None
        assert result.normalized_value == pytest.approx(1 / 0.9)


class TestPassthroughDomains:
    @pytest.fixture
    def route(self, fx_table):
        config = NormalizeConfig(target_currency="USD", target_magnitude="millions")

        def _route(point):
            item = _item(point)
            return DomainRouter().route(item, _context(config, fx_table, [item]))

        return _route

    def test_percent_passes_through(self, make_point, route):
        result = route(make_point(value=60.5, unit="% of GDP", name="Government Debt"))

        assert result.normalized_value == 60.5
        assert result.normalized_unit == "% of GDP"
        assert result.factors.total == 1.0

    def test_index(self, make_point, route):
        result = route(make_point(value=101.3, unit="2015=100", name="CPI"))
        assert result.normalized_unit == "index"

    def test_counts_keep_magnitude(self, make_point, route):
        result = route(make_point(value=150, unit="Thousand persons", name="Employed Persons"))

        assert result.normalized_value == 150
        assert result.normalized_unit == "persons (thousands)"

    def test_commodity_price(self, make_point, route):
        result = route(make_point(value=80, unit="USD/Barrel", name="Brent"))

        assert result.bucket is DomainBucket.ENERGY
        assert result.normalized_unit == "USD per barrel"
        assert result.normalized_value == 80

    def test_commodity_volume(self, make_point, route):
        result = route(make_point(value=12, unit="Thousand barrels per day", name="Crude Oil Production"))
        assert result.normalized_unit == "barrels (thousands) per day"
