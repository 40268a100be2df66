"""Quote schemas shared by instruments and curves."""

from .quotes import MarketQuote, Quote, SimpleQuote, as_quote

__all__ = ["Quote", "SimpleQuote", "MarketQuote", "as_quote"]
