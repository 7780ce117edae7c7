"""Concurrent quote fetching for a batch of holdings."""

from concurrent.futures import ThreadPoolExecutor, as_completed
from decimal import Decimal
from typing import Iterable

from ..log import get_logger

logger = get_logger(__name__)


def fetch_quotes(provider, symbols: Iterable[str], max_workers: int = 5) -> dict[str, Decimal]:
    """Fetch a price for each symbol, one request per symbol.

    Returns only the symbols that produced a usable price. A request that
    raises or returns None is logged and left out; it never fails the batch.
    The function returns after every request has settled.
    """
    unique = list(dict.fromkeys(symbols))
    if not unique:
        return {}

    out: dict[str, Decimal] = {}
    with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(unique)))) as ex:
        futs = {ex.submit(provider.fetch_price, s): s for s in unique}
        for f in as_completed(futs):
            symbol = futs[f]
            try:
                price = f.result()
            except Exception as e:
                logger.warning("Quote request for %s failed: %s", symbol, e)
                continue
            if price is None or price < 0:
                continue
            out[symbol] = price
    logger.info("Fetched %d of %d quotes", len(out), len(unique))
    return out
