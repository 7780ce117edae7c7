"""Market-data providers."""

from typing import Optional

from ..core.config import AppConfig, get_config
from .alpha_vantage import AlphaVantageClient
from .base import QuoteProvider, SymbolSearchProvider
from .price_fetcher import YahooQuoteProvider


def get_quote_provider(name: Optional[str] = None, cfg: Optional[AppConfig] = None) -> QuoteProvider:
    cfg = cfg or get_config()
    name = (name or cfg.quote_provider).lower()
    if name == "yahoo":
        return YahooQuoteProvider()
    if name == "alphavantage":
        return AlphaVantageClient(cfg.alpha_vantage_api_key, timeout=cfg.http_timeout_s)
    raise ValueError(f"Unknown quote provider: {name}")


def get_search_provider(cfg: Optional[AppConfig] = None) -> SymbolSearchProvider:
    cfg = cfg or get_config()
    return AlphaVantageClient(cfg.alpha_vantage_api_key, timeout=cfg.http_timeout_s)


__all__ = [
    "AlphaVantageClient",
    "QuoteProvider",
    "SymbolSearchProvider",
    "YahooQuoteProvider",
    "get_quote_provider",
    "get_search_provider",
]
