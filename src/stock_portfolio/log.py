"""Centralized logging helpers."""

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "stock_portfolio"


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    if not name.startswith(LOGGER_NAME):
        name = f"{LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def configure_logging(verbose: bool = False) -> None:
    """Attach a Rich handler on stderr. Called once by the CLI."""
    root = logging.getLogger(LOGGER_NAME)
    level = logging.DEBUG if verbose else logging.WARNING
    root.setLevel(level)
    if not any(isinstance(h, RichHandler) for h in root.handlers):
        handler = RichHandler(console=Console(stderr=True), show_path=False, rich_tracebacks=True)
        handler.setFormatter(logging.Formatter("%(message)s"))
        root.addHandler(handler)
    for h in root.handlers:
        h.setLevel(level)
