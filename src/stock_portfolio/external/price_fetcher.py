"""Price fetching via yfinance."""

from decimal import Decimal
from typing import Optional

import yfinance as yf

from ..log import get_logger
from .base import QuoteProvider

logger = get_logger(__name__)


class YahooQuoteProvider(QuoteProvider):
    """Fetches prices via Yahoo Finance. No API key, no search."""

    SOURCE = "yahoo"

    def fetch_price(self, symbol: str) -> Optional[Decimal]:
        try:
            ticker = yf.Ticker(symbol)
        except Exception as e:
            logger.warning("yfinance rejected %s: %s", symbol, e)
            return None
        # Try fast_info first
        try:
            price = getattr(ticker.fast_info, "last_price", None)
            if price is not None and price > 0:
                return Decimal(str(price)).quantize(Decimal("0.0001"))
        except Exception as e:
            logger.debug("fast_info failed for %s: %s", symbol, e)
        # Fallback to history
        try:
            hist = ticker.history(period="5d")
            if not hist.empty:
                return Decimal(str(hist["Close"].iloc[-1])).quantize(Decimal("0.0001"))
        except Exception as e:
            logger.warning("No quote for %s: %s", symbol, e)
            return None
        logger.warning("No quote for %s: empty history", symbol)
        return None
