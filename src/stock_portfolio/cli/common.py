"""Helpers shared by the one-shot commands: load, report, save."""

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from ..core.config import get_config
from ..core.exceptions import ValidationError
from ..core.models import Outcome
from ..core.session import PortfolioSession

console = Console()


def portfolio_path(ctx: typer.Context) -> Path:
    obj = ctx.obj or {}
    return Path(obj.get("file") or get_config().portfolio_file)


def fail(outcome: Outcome) -> None:
    """Print a failed outcome and exit 1."""
    error = outcome.error
    if isinstance(error, ValidationError):
        console.print("[red]Invalid input:[/red]")
        for field, message in error.errors.items():
            console.print(f"  [red]{field}[/red] {message}")
    else:
        console.print(f"[red]Error:[/red] {escape(outcome.message)}")
    raise typer.Exit(1)


def open_session(ctx: typer.Context, **kwargs) -> PortfolioSession:
    """Session loaded from the portfolio file; empty if the file does not exist yet."""
    session = PortfolioSession(**kwargs)
    path = portfolio_path(ctx)
    if path.exists():
        outcome = session.import_file(path)
        if not outcome.ok:
            fail(outcome)
    return session


def save_session(ctx: typer.Context, session: PortfolioSession) -> None:
    outcome = session.export_file(portfolio_path(ctx))
    if not outcome.ok:
        fail(outcome)
