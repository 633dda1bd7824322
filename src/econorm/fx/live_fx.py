"""Live FX rate fetcher.

Runs *before* normalization: the caller fetches a table here and passes it
as ``NormalizeConfig.fx_live``. The engine itself performs no network I/O.

Sources are tried in priority order; results are cached in memory per base
currency for ``Config.FX_CACHE_TTL`` seconds.
"""

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from econorm.models import FxRateTable
from econorm.shared.config import Config
from econorm.shared.utils import parse_as_of, setup_logger, utc_now_iso


@dataclass(frozen=True)
class FXSource:
    """Immutable descriptor for a live FX endpoint."""

    name: str
    url_template: str
    priority: int

    def url(self, base: str) -> str:
        return self.url_template.format(base=base)


FRANKFURTER = FXSource(
    name="ECB",
    url_template="https://api.frankfurter.app/latest?from={base}",
    priority=1,
)

EXCHANGERATE_API = FXSource(
    name="ExchangeRate-API",
    url_template="https://api.exchangerate-api.com/v4/latest/{base}",
    priority=2,
)

DEFAULT_SOURCES: tuple[FXSource, ...] = (FRANKFURTER, EXCHANGERATE_API)


def create_fx_session(max_retries: int = 3, backoff_factor: float = 1.0) -> requests.Session:
    """Create a :class:`requests.Session` with exponential-backoff retry.

    Args:
        max_retries: Maximum retry attempts per request.
        backoff_factor: Multiplier for retry delay.

    Returns:
        Configured session.
    """
    session = requests.Session()
    retry = Retry(
        total=max_retries,
        backoff_factor=backoff_factor,
        status_forcelist=[429, 500, 502, 503, 504],
        allowed_methods=["GET"],
    )
    adapter = HTTPAdapter(max_retries=retry)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


def parse_rates_payload(payload: Any, source: FXSource) -> FxRateTable:
    """Turn a ``{"base", "rates", "date"?}`` JSON payload into a live table.

    Raises:
        ValueError: If the payload lacks a base or numeric rates.
    """
    if not isinstance(payload, dict):
        raise ValueError(f"{source.name}: expected a JSON object")
    base = payload.get("base")
    rates = payload.get("rates")
    if not isinstance(base, str) or not isinstance(rates, dict):
        raise ValueError(f"{source.name}: response missing 'base' or 'rates'")
    if not all(isinstance(v, (int, float)) for v in rates.values()):
        raise ValueError(f"{source.name}: non-numeric rate in response")

    as_of = parse_as_of(payload.get("date")) or utc_now_iso()
    return FxRateTable(
        base=base,
        rates={code: float(rate) for code, rate in rates.items()},
        as_of=as_of,
        source="live",
        source_id=source.name,
    )


class LiveFXFetcher:
    """Fetch FX tables from public endpoints with retry, cache and fallback."""

    def __init__(
        self,
        sources: tuple[FXSource, ...] = DEFAULT_SOURCES,
        fallback: FxRateTable | None = None,
        cache_ttl: int | None = None,
        timeout: int | None = None,
        session: requests.Session | None = None,
        log_file: Path | None = None,
    ) -> None:
        """Initialize the fetcher.

        Args:
            sources: Endpoints to try; lower ``priority`` first.
            fallback: Table returned when every source fails.
            cache_ttl: Seconds a fetched table stays cached (0 disables).
            timeout: HTTP request timeout in seconds.
            session: Optional pre-configured session (tests inject a mock).
            log_file: Optional path for file-based logging.
        """
        self.sources = tuple(sorted(sources, key=lambda s: s.priority))
        self.fallback = fallback
        self.cache_ttl = Config.FX_CACHE_TTL if cache_ttl is None else cache_ttl
        self.timeout = timeout or Config.FX_REQUEST_TIMEOUT
        self._session = session or create_fx_session()
        self._cache: dict[str, tuple[float, FxRateTable]] = {}
        self.logger = setup_logger(self.__class__.__name__, log_file)

    def fetch(self, base: str = "USD") -> FxRateTable:
        """Return a live FX table for *base*.

        Raises:
            RuntimeError: If every source fails and no fallback is configured.
        """
        base = base.upper()
        cached = self._cache.get(base)
        if cached and cached[0] > time.monotonic():
            self.logger.debug("Using cached FX rates for %s", base)
            return cached[1]

        for source in self.sources:
            try:
                table = self._fetch_from(source, base)
            except (requests.RequestException, ValueError) as e:
                self.logger.warning("Failed to fetch FX rates from %s: %s", source.name, e)
                continue
            if self.cache_ttl > 0:
                self._cache[base] = (time.monotonic() + self.cache_ttl, table)
            self.logger.info(
                "Fetched %d FX rates from %s (as of %s)", len(table.rates), source.name, table.as_of
            )
            return table

        if self.fallback is not None:
            self.logger.warning("All FX sources failed, using fallback rates")
            return self.fallback

        raise RuntimeError("Unable to fetch FX rates from any source")

    def health_check(self) -> bool:
        """Verify at least one source responds."""
        try:
            self._fetch_from(self.sources[0], "USD")
            return True
        except Exception as e:
            self.logger.error("FX health check failed: %s", e)
            return False

    def clear_cache(self) -> None:
        self._cache.clear()

    def _fetch_from(self, source: FXSource, base: str) -> FxRateTable:
        response = self._session.get(source.url(base), timeout=self.timeout)
        response.raise_for_status()
        return parse_rates_payload(response.json(), source)
