"""Shared pytest fixtures for stock portfolio tests."""

import threading
from decimal import Decimal

import pytest

from stock_portfolio.core.config import reset_config
from stock_portfolio.external.base import QuoteProvider


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Each test runs in a temp cwd with no config file and no env overrides."""
    monkeypatch.chdir(tmp_path)
    for var in ("ALPHA_VANTAGE_API_KEY", "STOCK_PORTFOLIO_PROVIDER", "STOCK_PORTFOLIO_CONFIG"):
        monkeypatch.delenv(var, raising=False)
    reset_config()
    yield
    reset_config()


class FakeQuoteProvider(QuoteProvider):
    """Canned prices; symbols listed in ``failing`` raise instead."""

    SOURCE = "fake"

    def __init__(self, prices=None, failing=()):
        self.prices = {k: Decimal(str(v)) for k, v in (prices or {}).items()}
        self.failing = set(failing)
        self.calls = []
        self._lock = threading.Lock()

    def fetch_price(self, symbol):
        with self._lock:
            self.calls.append(symbol)
        if symbol in self.failing:
            raise RuntimeError(f"boom: {symbol}")
        return self.prices.get(symbol)


@pytest.fixture
def fake_quotes():
    return FakeQuoteProvider

