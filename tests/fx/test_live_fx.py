"""Unit tests for the live FX fetcher."""

from unittest.mock import Mock, patch

import pytest
import requests

from econorm.fx.live_fx import (
    EXCHANGERATE_API,
    FRANKFURTER,
    LiveFXFetcher,
    create_fx_session,
    parse_rates_payload,
)
from econorm.models import FxRateTable

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_response(payload, status: int = 200) -> Mock:
    """Build a mock requests.Response."""
    resp = Mock()
    resp.status_code = status
    resp.json.return_value = payload
    if status >= 400:
        resp.raise_for_status.side_effect = requests.exceptions.HTTPError(response=resp)
    else:
        resp.raise_for_status = Mock()
    return resp


SAMPLE_PAYLOAD = {"base": "USD", "date": "2024-01-31", "rates": {"EUR": 0.92, "GBP": 0.79}}


# ---------------------------------------------------------------------------
# Payload parsing
# ---------------------------------------------------------------------------


class TestParseRatesPayload:
    def test_valid_payload(self):
        table = parse_rates_payload(SAMPLE_PAYLOAD, FRANKFURTER)

        assert table.base == "USD"
        assert table.rate("EUR") == 0.92
        assert table.source == "live"
        assert table.source_id == "ECB"
        assert table.as_of == "2024-01-31"

    def test_missing_date_uses_now(self):
        table = parse_rates_payload({"base": "USD", "rates": {"EUR": 0.9}}, FRANKFURTER)
        assert table.as_of is not None

    @pytest.mark.parametrize(
        "payload",
        [[], {"rates": {"EUR": 0.9}}, {"base": "USD"}, {"base": "USD", "rates": {"EUR": "x"}}],
    )
    def test_invalid_payload(self, payload):
        with pytest.raises(ValueError):
            parse_rates_payload(payload, FRANKFURTER)


# ---------------------------------------------------------------------------
# Fetcher
# ---------------------------------------------------------------------------


class TestLiveFXFetcher:
    @pytest.fixture
    def session(self):
        return Mock(spec=requests.Session)

    def test_fetch_first_source(self, session):
        session.get.return_value = _make_response(SAMPLE_PAYLOAD)
        fetcher = LiveFXFetcher(session=session, cache_ttl=0)

        table = fetcher.fetch("usd")

        assert table.rate("GBP") == 0.79
        url = session.get.call_args[0][0]
        assert url == "https://api.frankfurter.app/latest?from=USD"

    def test_falls_through_to_next_source(self, session):
        session.get.side_effect = [
            requests.exceptions.ConnectionError("down"),
            _make_response(SAMPLE_PAYLOAD),
        ]
        fetcher = LiveFXFetcher(session=session, cache_ttl=0)

        table = fetcher.fetch()

        assert table.source_id == EXCHANGERATE_API.name
        assert session.get.call_count == 2

    def test_http_error_falls_through(self, session):
        session.get.side_effect = [_make_response({}, status=503), _make_response(SAMPLE_PAYLOAD)]
        fetcher = LiveFXFetcher(session=session, cache_ttl=0)

        assert fetcher.fetch().rate("EUR") == 0.92

    def test_returns_fallback_when_all_fail(self, session, fx_table):
        session.get.side_effect = requests.exceptions.Timeout("slow")
        fetcher = LiveFXFetcher(session=session, fallback=fx_table, cache_ttl=0)

        assert fetcher.fetch() is fx_table

    def test_raises_without_fallback(self, session):
        session.get.side_effect = requests.exceptions.Timeout("slow")
        fetcher = LiveFXFetcher(session=session, cache_ttl=0)

        with pytest.raises(RuntimeError, match="Unable to fetch"):
            fetcher.fetch()

    def test_cache_avoids_second_request(self, session):
        session.get.return_value = _make_response(SAMPLE_PAYLOAD)
        fetcher = LiveFXFetcher(session=session, cache_ttl=60)

        first = fetcher.fetch()
        second = fetcher.fetch()

        assert first is second
        assert session.get.call_count == 1

    def test_cache_expires(self, session):
        session.get.return_value = _make_response(SAMPLE_PAYLOAD)
        fetcher = LiveFXFetcher(session=session, cache_ttl=60)

        with patch("econorm.fx.live_fx.time") as mock_time:
            mock_time.monotonic.side_effect = [0.0, 100.0, 100.0]
            fetcher.fetch()
            fetcher.fetch()

        assert session.get.call_count == 2

    def test_clear_cache(self, session):
        session.get.return_value = _make_response(SAMPLE_PAYLOAD)
        fetcher = LiveFXFetcher(session=session, cache_ttl=60)

        fetcher.fetch()
        fetcher.clear_cache()
        fetcher.fetch()

        assert session.get.call_count == 2

    def test_health_check(self, session):
        session.get.return_value = _make_response(SAMPLE_PAYLOAD)
        assert LiveFXFetcher(session=session).health_check() is True

        session.get.side_effect = requests.exceptions.ConnectionError("down")
        assert LiveFXFetcher(session=session).health_check() is False

    def test_result_is_usable_as_live_table(self, session):
        session.get.return_value = _make_response(SAMPLE_PAYLOAD)
        table = LiveFXFetcher(session=session, cache_ttl=0).fetch()
        assert isinstance(table, FxRateTable)


class TestCreateFxSession:
    def test_mounts_retry_adapter(self):
        session = create_fx_session(max_retries=5)
        adapter = session.get_adapter("https://api.frankfurter.app")
        assert adapter.max_retries.total == 5
        assert 503 in adapter.max_retries.status_forcelist
