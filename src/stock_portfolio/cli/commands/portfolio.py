"""Portfolio-level commands: summary, composition chart, import and export."""

from pathlib import Path

import typer

from ...core.config import get_config
from ..common import console, fail, open_session, portfolio_path, save_session
from ..render import composition_chart, signed_pct

app = typer.Typer(help="Portfolio summary, chart, import/export")


@app.command("show")
def show(ctx: typer.Context):
    """Show portfolio totals."""
    session = open_session(ctx)
    s = session.summary()
    currency = get_config().currency
    color = "green" if s.unrealized_pnl >= 0 else "red"

    console.print(f"\n[bold]Portfolio[/bold]  ({portfolio_path(ctx)})")
    console.print(f"  Holdings: {s.count}")
    console.print(f"  Cost basis: {s.total_cost:,.2f} {currency}")
    console.print(f"  [bold]Market value: {s.total_value:,.2f} {currency}[/bold]")
    console.print(f"  Unrealized P&L: [{color}]{s.unrealized_pnl:,.2f} {currency}[/{color}]  ({signed_pct(s.return_rate)})")
    console.print()


@app.command("chart")
def chart(ctx: typer.Context):
    """Show portfolio composition by market value."""
    session = open_session(ctx)
    if session.summary().total_value == 0:
        console.print("[yellow]No data to chart — fetch or enter current prices first[/yellow]")
        return
    console.print(composition_chart(session.allocation()))


@app.command("import")
def import_portfolio(
    ctx: typer.Context,
    src: Path = typer.Argument(..., help="JSON file with an array of holdings"),
):
    """Replace the portfolio with holdings from a JSON file.

    The file is rejected as a whole if any record is malformed.
    """
    session = open_session(ctx)
    outcome = session.import_file(src)
    if not outcome.ok:
        fail(outcome)
    save_session(ctx, session)
    console.print(f"[green]Imported {outcome.value} holdings from {src}[/green]")


@app.command("export")
def export_portfolio(
    ctx: typer.Context,
    dest: Path = typer.Argument(..., help="Destination JSON file"),
):
    """Write the portfolio to a JSON file."""
    session = open_session(ctx)
    outcome = session.export_file(dest)
    if not outcome.ok:
        fail(outcome)
    console.print(f"[green]Exported {outcome.value} holdings to {dest}[/green]")
