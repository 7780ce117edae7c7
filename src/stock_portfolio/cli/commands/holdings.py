"""Holdings management commands."""

from typing import Optional

import typer

from ...core.calculator import PortfolioCalculator
from ...core.config import get_config
from ...core.validation import holding_to_form
from ..common import console, fail, open_session, save_session
from ..render import holdings_table

app = typer.Typer(help="Manage holdings")


@app.command("add")
def add(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Display name (e.g. 'Apple')"),
    buy_price: str = typer.Option(..., "--buy-price", "-b", help="Purchase price per unit"),
    quantity: str = typer.Option(..., "--quantity", "-q", help="Units held"),
    ticker: str = typer.Option("", "--ticker", "-t", help="Market symbol for quotes (e.g. 'AAPL')"),
    current_price: str = typer.Option("", "--current-price", "-c", help="Latest price; 0 until fetched"),
):
    """Add a new holding."""
    session = open_session(ctx)
    outcome = session.add({
        "name": name, "ticker": ticker, "buy_price": buy_price,
        "current_price": current_price, "quantity": quantity,
    })
    if not outcome.ok:
        fail(outcome)
    save_session(ctx, session)
    h = outcome.value
    console.print(f"[green]Added {h.name}[/green] ({h.identity})")


@app.command("edit")
def edit(
    ctx: typer.Context,
    identity: str = typer.Argument(..., help="Ticker, name, or id of the holding"),
    name: Optional[str] = typer.Option(None, "--name", "-n"),
    ticker: Optional[str] = typer.Option(None, "--ticker", "-t", help="New ticker; pass '' to clear"),
    buy_price: Optional[str] = typer.Option(None, "--buy-price", "-b"),
    current_price: Optional[str] = typer.Option(None, "--current-price", "-c"),
    quantity: Optional[str] = typer.Option(None, "--quantity", "-q"),
):
    """Edit a holding. Fields not given keep their current value."""
    session = open_session(ctx)
    h = session.store.get(identity)
    if h is None:
        console.print(f"[red]Holding '{identity}' not found[/red]")
        raise typer.Exit(1)

    form = holding_to_form(h)
    changes = {
        "name": name, "ticker": ticker, "buy_price": buy_price,
        "current_price": current_price, "quantity": quantity,
    }
    form.update({k: v for k, v in changes.items() if v is not None})

    outcome = session.edit(identity, form)
    if not outcome.ok:
        fail(outcome)
    save_session(ctx, session)
    console.print(f"[green]Updated {outcome.value.name}[/green] ({outcome.value.identity})")


@app.command("remove")
def remove(
    ctx: typer.Context,
    identity: str = typer.Argument(..., help="Ticker, name, or id of the holding"),
    force: bool = typer.Option(False, "--force", "-f"),
):
    """Remove a holding."""
    session = open_session(ctx)
    h = session.store.get(identity)
    if h is None:
        console.print(f"[yellow]Holding '{identity}' not found — nothing removed[/yellow]")
        raise typer.Exit(1)

    if not force:
        confirm = typer.confirm(f"Remove {h.name} ({h.identity})?")
        if not confirm:
            console.print("Cancelled.")
            return

    outcome = session.remove(identity)
    if not outcome.ok:
        fail(outcome)
    save_session(ctx, session)
    console.print(f"[green]Removed {h.name}[/green]")


@app.command("list")
def list_holdings(ctx: typer.Context):
    """List all holdings with return rate, value and share of total."""
    session = open_session(ctx)
    holdings = session.holdings()
    if not holdings:
        console.print("[yellow]No holdings yet. Add one with: spt holdings add <NAME> -b <PRICE> -q <QTY>[/yellow]")
        return

    cfg = get_config()
    console.print(holdings_table(holdings, currency=cfg.currency))
    total = PortfolioCalculator.total_value(holdings)
    console.print(f"  Holdings: {len(holdings)}  |  Total: [bold]{total:,.2f} {cfg.currency}[/bold]\n")
