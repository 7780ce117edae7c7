"""Price fetching commands."""

from typing import Optional

import typer
from rich.table import Table

from ...core.config import PROVIDERS
from ...external import get_quote_provider
from ..common import console, fail, open_session, save_session

app = typer.Typer(help="Fetch live prices")


@app.command("fetch")
def fetch(
    ctx: typer.Context,
    provider: Optional[str] = typer.Option(
        None, "--provider", "-p", help=f"Quote source: {', '.join(PROVIDERS)} (default from config)",
    ),
):
    """Fetch latest prices for every holding that has a ticker.

    Holdings whose quote fails keep their previous price.
    """
    if provider is not None and provider.lower() not in PROVIDERS:
        console.print(f"[red]Invalid provider. Choose from: {', '.join(PROVIDERS)}[/red]")
        raise typer.Exit(1)

    session = open_session(ctx, quote_provider=get_quote_provider(provider))
    holdings = [h for h in session.holdings() if h.ticker]
    if not holdings:
        console.print("[yellow]No holdings with a ticker to fetch prices for[/yellow]")
        return

    console.print(f"Fetching prices for {len(holdings)} holdings...")
    outcome = session.refresh_prices()
    if not outcome.ok:
        fail(outcome)
    save_session(ctx, session)

    updated = outcome.value
    table = Table(title="Fetched Prices")
    table.add_column("Ticker", style="bold")
    table.add_column("Name")
    table.add_column("Price", justify="right")
    table.add_column("Status")
    for h in session.holdings():
        if not h.ticker:
            continue
        if h.ticker in updated:
            table.add_row(h.ticker, h.name, f"{h.current_price:,.4f}", "[green]OK[/green]")
        else:
            table.add_row(h.ticker, h.name, "—", "[red]FAILED[/red]")
    console.print(table)
    if session.last_error:
        console.print(f"[yellow]{session.last_error}[/yellow]")
