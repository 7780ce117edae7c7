"""Alpha Vantage client: GLOBAL_QUOTE for prices, SYMBOL_SEARCH for lookup.

The free tier allows 5 requests per minute and 500 per day; when the limit is
hit the API answers 200 with a "Note" or "Information" payload instead of
data. Only US symbols are covered.
"""

from decimal import Decimal, InvalidOperation
from typing import Optional

import requests

from ..core.exceptions import PriceFetchError
from ..core.models import SymbolMatch
from ..log import get_logger
from .base import QuoteProvider, SymbolSearchProvider

logger = get_logger(__name__)

ALPHA_VANTAGE_API = "https://www.alphavantage.co/query"
THROTTLE_KEYS = ("Note", "Information")


def _to_decimal(raw) -> Optional[Decimal]:
    if raw in (None, ""):
        return None
    try:
        value = Decimal(str(raw))
    except InvalidOperation:
        return None
    return value if value.is_finite() else None


class AlphaVantageClient(QuoteProvider, SymbolSearchProvider):
    """Thin wrapper over the Alpha Vantage query endpoint."""

    SOURCE = "alphavantage"

    def __init__(self, api_key: str, timeout: float = 10.0, session: Optional[requests.Session] = None):
        self.api_key = api_key
        self.timeout = timeout
        self.session = session or requests.Session()

    def _query(self, function: str, **params) -> dict:
        params = {"function": function, "apikey": self.api_key, **params}
        try:
            resp = self.session.get(ALPHA_VANTAGE_API, params=params, timeout=self.timeout)
            resp.raise_for_status()
            data = resp.json()
        except (requests.RequestException, ValueError) as e:
            raise PriceFetchError(f"Alpha Vantage {function} failed: {e}") from e
        if not isinstance(data, dict):
            raise PriceFetchError(f"Alpha Vantage {function} returned an unexpected payload")
        for key in THROTTLE_KEYS:
            if key in data:
                raise PriceFetchError(f"Alpha Vantage rate limit: {data[key]}")
        if "Error Message" in data:
            raise PriceFetchError(f"Alpha Vantage error: {data['Error Message']}")
        return data

    def fetch_price(self, symbol: str) -> Optional[Decimal]:
        try:
            data = self._query("GLOBAL_QUOTE", symbol=symbol)
        except PriceFetchError as e:
            logger.warning("No quote for %s: %s", symbol, e)
            return None
        quote = data.get("Global Quote")
        price = _to_decimal(quote.get("05. price")) if isinstance(quote, dict) else None
        if price is None or price < 0:
            logger.warning("No quote for %s: empty Global Quote", symbol)
            return None
        return price

    def search(self, keyword: str) -> list[SymbolMatch]:
        """Symbol search ordered by the API's match score.

        Raises PriceFetchError on transport failures or throttling.
        """
        keyword = keyword.strip()
        if not keyword:
            return []
        data = self._query("SYMBOL_SEARCH", keywords=keyword)
        matches = []
        for row in data.get("bestMatches") or []:
            if not isinstance(row, dict):
                continue
            symbol = row.get("1. symbol")
            if not symbol:
                continue
            matches.append(SymbolMatch(
                symbol=symbol,
                display_name=row.get("2. name", ""),
                region=row.get("4. region", ""),
                currency=row.get("8. currency", ""),
                match_score=_to_decimal(row.get("9. matchScore")),
            ))
        return matches
