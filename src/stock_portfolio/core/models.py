"""Data models for the stock portfolio tracker."""

import uuid
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional, Union


def new_holding_id() -> str:
    return uuid.uuid4().hex


def normalize_ticker(ticker: Optional[str]) -> Optional[str]:
    """Strip and upper-case a ticker; blank tickers become None."""
    if ticker is None:
        return None
    ticker = ticker.strip().upper()
    return ticker or None


@dataclass(frozen=True)
class Holding:
    """One portfolio position.

    Holdings are immutable: an edit or a price refresh replaces the whole
    record in the store via ``dataclasses.replace``.
    """
    name: str
    buy_price: Decimal
    quantity: Decimal
    ticker: Optional[str] = None
    current_price: Decimal = Decimal("0")
    id: str = field(default_factory=new_holding_id)

    def __post_init__(self):
        object.__setattr__(self, "name", self.name.strip())
        object.__setattr__(self, "ticker", normalize_ticker(self.ticker))

    @property
    def identity(self) -> str:
        """Ticker if present, otherwise name. Unique within a store."""
        return self.ticker or self.name

    @property
    def market_value(self) -> Decimal:
        return self.current_price * self.quantity

    @property
    def cost_basis(self) -> Decimal:
        return self.buy_price * self.quantity

    @property
    def unrealized_pnl(self) -> Decimal:
        return self.market_value - self.cost_basis

    def matches(self, key: str) -> bool:
        """True if ``key`` is exactly this holding's stable id or its identity."""
        return key == self.id or key == self.identity

    def matches_ticker(self, key: str) -> bool:
        return self.ticker is not None and key.strip().upper() == self.ticker


@dataclass(frozen=True)
class SymbolMatch:
    """One row of a symbol search result."""
    symbol: str
    display_name: str
    region: str
    currency: str = ""
    match_score: Optional[Decimal] = None


# ---------------------------------------------------------------------------
# Form session states
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Adding:
    draft: dict = field(default_factory=dict)


@dataclass(frozen=True)
class Editing:
    identity: str
    draft: dict = field(default_factory=dict)


FormState = Union[Idle, Adding, Editing]


@dataclass
class Outcome:
    """Result of a session operation, reported instead of raising."""
    ok: bool
    value: object = None
    error: Optional[Exception] = None

    @classmethod
    def success(cls, value: object = None) -> "Outcome":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: Exception) -> "Outcome":
        return cls(ok=False, error=error)

    @property
    def message(self) -> str:
        return str(self.error) if self.error is not None else ""
