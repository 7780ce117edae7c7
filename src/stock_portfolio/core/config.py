"""Application configuration — loaded from config.json in the working directory.

Environment variables override the file:
  ALPHA_VANTAGE_API_KEY, STOCK_PORTFOLIO_PROVIDER, STOCK_PORTFOLIO_CONFIG.
"""

import json
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Optional

from ..log import get_logger
from .exceptions import ConfigError

logger = get_logger(__name__)

PROVIDERS = ("alphavantage", "yahoo")


@dataclass
class AppConfig:
    alpha_vantage_api_key: str = "demo"
    quote_provider: str = "alphavantage"
    currency: str = "USD"
    portfolio_file: str = "portfolio.json"
    max_workers: int = 5  # Alpha Vantage free tier: 5 requests/minute
    http_timeout_s: float = 10.0


_DEFAULTS = AppConfig()
_cached: Optional[AppConfig] = None


def _config_path() -> Path:
    return Path(os.getenv("STOCK_PORTFOLIO_CONFIG", "config.json"))


def _from_dict(data: dict) -> AppConfig:
    if not isinstance(data, dict):
        raise ConfigError("config root must be an object")
    try:
        cfg = AppConfig(
            alpha_vantage_api_key=str(data.get("alpha_vantage_api_key", _DEFAULTS.alpha_vantage_api_key)),
            quote_provider=str(data.get("quote_provider", _DEFAULTS.quote_provider)).lower(),
            currency=str(data.get("currency", _DEFAULTS.currency)),
            portfolio_file=str(data.get("portfolio_file", _DEFAULTS.portfolio_file)),
            max_workers=int(data.get("max_workers", _DEFAULTS.max_workers)),
            http_timeout_s=float(data.get("http_timeout_s", _DEFAULTS.http_timeout_s)),
        )
    except (TypeError, ValueError) as e:
        raise ConfigError(f"invalid config value: {e}") from e
    if cfg.quote_provider not in PROVIDERS:
        raise ConfigError(f"quote_provider must be one of {', '.join(PROVIDERS)}")
    if cfg.max_workers < 1:
        raise ConfigError("max_workers must be at least 1")
    return cfg


def _apply_env(cfg: AppConfig) -> AppConfig:
    api_key = os.getenv("ALPHA_VANTAGE_API_KEY")
    if api_key:
        cfg.alpha_vantage_api_key = api_key
    provider = os.getenv("STOCK_PORTFOLIO_PROVIDER")
    if provider and provider.lower() in PROVIDERS:
        cfg.quote_provider = provider.lower()
    elif provider:
        logger.warning("Ignoring unknown STOCK_PORTFOLIO_PROVIDER=%r", provider)
    return cfg


def get_config() -> AppConfig:
    global _cached
    if _cached is not None:
        return _cached
    path = _config_path()
    cfg = AppConfig()
    if path.exists():
        try:
            cfg = _from_dict(json.loads(path.read_text(encoding="utf-8")))
        except (OSError, json.JSONDecodeError, ConfigError) as e:
            logger.warning("Could not read %s (%s); using defaults", path, e)
            cfg = AppConfig()
    _cached = _apply_env(cfg)
    return _cached


def save_config(cfg: AppConfig) -> None:
    global _cached
    _cached = cfg
    _config_path().write_text(json.dumps(asdict(cfg), indent=2, ensure_ascii=False), encoding="utf-8")


def reset_config() -> None:
    global _cached
    _cached = None
