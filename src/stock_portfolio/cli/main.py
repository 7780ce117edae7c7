"""Stock Portfolio CLI — main entry point."""

from pathlib import Path
from typing import Optional

import typer

from ..log import configure_logging
from .commands import holdings, portfolio, prices
from .commands.search import search
from .commands.shell import shell

app = typer.Typer(
    name="spt",
    help="Personal stock portfolio tracker with live quotes",
    rich_markup_mode="rich",
    no_args_is_help=True,
)

app.add_typer(holdings.app, name="holdings", help="Manage holdings")
app.add_typer(prices.app, name="prices", help="Fetch live prices")
app.add_typer(portfolio.app, name="portfolio", help="Portfolio summary, chart, import/export")
app.command("search")(search)
app.command("shell")(shell)


@app.callback()
def startup(
    ctx: typer.Context,
    file: Optional[Path] = typer.Option(None, "--file", "-f", help="Portfolio JSON file (default from config)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    """Configure logging and remember which portfolio file to use."""
    configure_logging(verbose)
    ctx.obj = {"file": file}


if __name__ == "__main__":
    app()
