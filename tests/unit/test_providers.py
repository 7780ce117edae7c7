"""Tests for quote providers and the concurrent batch fetch. No network."""

from decimal import Decimal

import pandas as pd
import pytest
import requests

from stock_portfolio.core.config import AppConfig
from stock_portfolio.core.exceptions import PriceFetchError
from stock_portfolio.core.pricing import fetch_quotes
from stock_portfolio.external import (
    AlphaVantageClient,
    YahooQuoteProvider,
    get_quote_provider,
    get_search_provider,
)
from stock_portfolio.external import price_fetcher


class _Response:
    def __init__(self, payload, status=200):
        self.payload = payload
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code}")

    def json(self):
        return self.payload


class _Session:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append(params)
        if self.error:
            raise self.error
        return self.response


def _client(payload=None, status=200, error=None):
    session = _Session(_Response(payload, status), error)
    return AlphaVantageClient("KEY", timeout=3, session=session), session


class TestAlphaVantageQuote:
    def test_price(self):
        client, session = _client({"Global Quote": {"01. symbol": "IBM", "05. price": "187.4200"}})
        assert client.fetch_price("IBM") == Decimal("187.4200")
        assert session.calls[0] == {"function": "GLOBAL_QUOTE", "apikey": "KEY", "symbol": "IBM"}

    def test_empty_quote_is_none(self):
        client, _ = _client({"Global Quote": {}})
        assert client.fetch_price("XXXX") is None

    def test_non_object_quote_is_none(self):
        client, _ = _client({"Global Quote": ["187.42"]})
        assert client.fetch_price("IBM") is None

    def test_rate_limit_note_is_none(self):
        client, _ = _client({"Note": "Thank you for using Alpha Vantage! Our standard API call frequency is 5 calls per minute"})
        assert client.fetch_price("IBM") is None

    def test_http_error_is_none(self):
        client, _ = _client({}, status=503)
        assert client.fetch_price("IBM") is None

    def test_connection_error_is_none(self):
        client, _ = _client(error=requests.ConnectionError("down"))
        assert client.fetch_price("IBM") is None


class TestAlphaVantageSearch:
    def test_matches(self):
        client, session = _client({"bestMatches": [
            {"1. symbol": "TSCO.LON", "2. name": "Tesco PLC", "4. region": "United Kingdom",
             "8. currency": "GBX", "9. matchScore": "0.7273"},
            {"2. name": "no symbol"},
            "TSCO.LON",
            None,
        ]})
        matches = client.search(" tesco ")
        assert len(matches) == 1
        assert matches[0].symbol == "TSCO.LON"
        assert matches[0].region == "United Kingdom"
        assert matches[0].match_score == Decimal("0.7273")
        assert session.calls[0]["keywords"] == "tesco"

    def test_blank_keyword(self):
        client, session = _client({})
        assert client.search("  ") == []
        assert session.calls == []

    def test_throttled_raises(self):
        client, _ = _client({"Information": "rate limit"})
        with pytest.raises(PriceFetchError):
            client.search("tesco")


class _FastInfo:
    def __init__(self, last_price):
        self.last_price = last_price


class _Ticker:
    def __init__(self, last_price=None, closes=()):
        self.fast_info = _FastInfo(last_price)
        self.closes = list(closes)

    def history(self, period=None):
        return pd.DataFrame({"Close": self.closes})


class TestYahooQuote:
    def test_fast_info(self, monkeypatch):
        monkeypatch.setattr(price_fetcher.yf, "Ticker", lambda s: _Ticker(last_price=101.5))
        assert YahooQuoteProvider().fetch_price("AAPL") == Decimal("101.5000")

    def test_history_fallback(self, monkeypatch):
        monkeypatch.setattr(price_fetcher.yf, "Ticker", lambda s: _Ticker(closes=[10.0, 11.25]))
        assert YahooQuoteProvider().fetch_price("AAPL") == Decimal("11.2500")

    def test_nothing(self, monkeypatch):
        monkeypatch.setattr(price_fetcher.yf, "Ticker", lambda s: _Ticker())
        assert YahooQuoteProvider().fetch_price("AAPL") is None


class TestFactory:
    def test_default_is_alpha_vantage(self):
        provider = get_quote_provider(cfg=AppConfig(alpha_vantage_api_key="K"))
        assert isinstance(provider, AlphaVantageClient)
        assert provider.api_key == "K"

    def test_yahoo(self):
        assert isinstance(get_quote_provider("yahoo", cfg=AppConfig()), YahooQuoteProvider)

    def test_unknown(self):
        with pytest.raises(ValueError):
            get_quote_provider("bloomberg", cfg=AppConfig())

    def test_search_provider(self):
        assert isinstance(get_search_provider(AppConfig()), AlphaVantageClient)


class TestFetchQuotes:
    def test_collects_successes_only(self, fake_quotes):
        provider = fake_quotes({"AAPL": "180", "MSFT": "400"}, failing={"TSLA"})
        prices = fetch_quotes(provider, ["AAPL", "MSFT", "TSLA", "NVDA"], max_workers=3)
        assert prices == {"AAPL": Decimal("180"), "MSFT": Decimal("400")}

    def test_deduplicates_symbols(self, fake_quotes):
        provider = fake_quotes({"AAPL": "180"})
        fetch_quotes(provider, ["AAPL", "AAPL"])
        assert provider.calls == ["AAPL"]

    def test_empty(self, fake_quotes):
        assert fetch_quotes(fake_quotes(), []) == {}
