"""Numeric conversion of resolved items."""

from econorm.conversion.engine import convert, currency_factor

__all__ = ["convert", "currency_factor"]
