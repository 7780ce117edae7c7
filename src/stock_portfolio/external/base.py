"""Provider interfaces for quotes and symbol search."""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Optional

from ..core.models import SymbolMatch


class QuoteProvider(ABC):
    SOURCE: str  # "alphavantage", "yahoo", etc.

    @abstractmethod
    def fetch_price(self, symbol: str) -> Optional[Decimal]:
        """Latest price for ``symbol``, or None if unavailable. Never raises for a missing quote."""


class SymbolSearchProvider(ABC):

    @abstractmethod
    def search(self, keyword: str) -> list[SymbolMatch]: ...
