"""In-memory holdings store.

The store is the single source of truth for a session. Holdings are kept in
insertion order and addressed by identity (ticker, else name) or by their
stable id. Every mutation is serialized by one lock and replaces the backing
tuple in a single assignment, so readers only ever see complete states.
"""

import dataclasses
import threading
from decimal import Decimal
from typing import Iterable, Iterator, Optional

from ..core.exceptions import DuplicateIdentityError, HoldingNotFoundError
from ..core.models import Holding
from ..log import get_logger

logger = get_logger(__name__)


class HoldingsStore:

    def __init__(self, holdings: Iterable[Holding] = ()):
        self._lock = threading.Lock()
        self._holdings: tuple[Holding, ...] = ()
        self.replace_all(holdings)

    def __len__(self) -> int:
        return len(self._holdings)

    def __iter__(self) -> Iterator[Holding]:
        return iter(self._holdings)

    def __contains__(self, key: str) -> bool:
        return self._index_of(self._holdings, key) is not None

    @staticmethod
    def _index_of(holdings: tuple[Holding, ...], key: str) -> Optional[int]:
        # Exact id or identity wins over a case-insensitive ticker hit.
        for i, h in enumerate(holdings):
            if h.matches(key):
                return i
        for i, h in enumerate(holdings):
            if h.matches_ticker(key):
                return i
        return None

    @staticmethod
    def _check_unique(holdings: Iterable[Holding], candidate: Holding) -> None:
        for h in holdings:
            if h.identity == candidate.identity:
                raise DuplicateIdentityError(candidate.identity)

    def list(self) -> tuple[Holding, ...]:
        return self._holdings

    def get(self, key: str) -> Optional[Holding]:
        holdings = self._holdings
        i = self._index_of(holdings, key)
        return holdings[i] if i is not None else None

    def add(self, holding: Holding) -> Holding:
        with self._lock:
            self._check_unique(self._holdings, holding)
            self._holdings = self._holdings + (holding,)
        logger.debug("Added %s", holding.identity)
        return holding

    def edit(self, key: str, updated: Holding) -> Holding:
        """Replace the holding addressed by ``key``, keeping its position and id."""
        with self._lock:
            holdings = self._holdings
            i = self._index_of(holdings, key)
            if i is None:
                raise HoldingNotFoundError(key)
            updated = dataclasses.replace(updated, id=holdings[i].id)
            others = holdings[:i] + holdings[i + 1:]
            self._check_unique(others, updated)
            self._holdings = holdings[:i] + (updated,) + holdings[i + 1:]
        logger.debug("Edited %s -> %s", key, updated.identity)
        return updated

    def remove(self, key: str) -> Holding:
        with self._lock:
            holdings = self._holdings
            i = self._index_of(holdings, key)
            if i is None:
                raise HoldingNotFoundError(key)
            removed = holdings[i]
            self._holdings = holdings[:i] + holdings[i + 1:]
        logger.debug("Removed %s", removed.identity)
        return removed

    def apply_prices(self, prices: dict[str, Decimal]) -> int:
        """Set current_price for every holding whose identity is in ``prices``.

        All updates land in one commit. Unknown identities are ignored.
        Returns the number of holdings updated.
        """
        with self._lock:
            updated = 0
            new = []
            for h in self._holdings:
                price = prices.get(h.identity)
                if price is None:
                    new.append(h)
                else:
                    new.append(dataclasses.replace(h, current_price=price))
                    updated += 1
            self._holdings = tuple(new)
        logger.debug("Applied %d of %d prices", updated, len(prices))
        return updated

    def replace_all(self, holdings: Iterable[Holding]) -> None:
        """Swap in a whole new collection; rejected if identities collide."""
        incoming: list[Holding] = []
        for h in holdings:
            self._check_unique(incoming, h)
            incoming.append(h)
        with self._lock:
            self._holdings = tuple(incoming)

    def clear(self) -> None:
        with self._lock:
            self._holdings = ()
