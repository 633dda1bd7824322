"""FX tables: selection, sanity checks, and the live fetcher."""

from econorm.fx.live_fx import LiveFXFetcher
from econorm.fx.rates import FxValidation, select_fx_table, validate_fx_rates

__all__ = ["FxValidation", "LiveFXFetcher", "select_fx_table", "validate_fx_rates"]
