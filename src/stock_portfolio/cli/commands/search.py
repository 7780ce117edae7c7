"""Symbol search command."""

import typer

from ...core.session import PortfolioSession
from ...external import get_search_provider
from ..common import console, fail
from ..render import search_table


def search(keyword: str = typer.Argument(..., help="Company name or symbol fragment")):
    """Look up ticker symbols (Alpha Vantage SYMBOL_SEARCH)."""
    session = PortfolioSession(search_provider=get_search_provider())
    outcome = session.search(keyword)
    if not outcome.ok:
        fail(outcome)
    if not outcome.value:
        console.print(f"[yellow]No matches for '{keyword}'[/yellow]")
        return
    console.print(search_table(outcome.value))
