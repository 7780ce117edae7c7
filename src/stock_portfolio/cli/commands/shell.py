"""Interactive session over an in-memory portfolio.

Nothing is written to disk unless the user runs ``export``.
"""

import shlex
from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape
from rich.table import Table

from ...core.config import get_config
from ...core.models import Adding, Editing, Idle
from ...core.session import PortfolioSession
from ...core.validation import FORM_FIELDS
from ..common import console
from ..render import composition_chart, holdings_table, search_table

HELP = [
    ("list", "Show holdings"),
    ("chart", "Show composition"),
    ("add [N]", "Open an add form, optionally pre-filled from search result N"),
    ("edit KEY", "Open an edit form for a ticker, name or id"),
    ("set FIELD VALUE", f"Set a form field ({', '.join(FORM_FIELDS)})"),
    ("form", "Show the open form"),
    ("save", "Submit the open form"),
    ("cancel", "Discard the open form"),
    ("delete KEY", "Remove a holding"),
    ("refresh", "Fetch live prices"),
    ("search KEYWORD", "Look up ticker symbols"),
    ("import PATH", "Replace holdings from a JSON file"),
    ("export PATH", "Write holdings to a JSON file"),
    ("quit", "Leave the shell"),
]


class Shell:

    def __init__(self, session: PortfolioSession):
        self.session = session
        self.matches = []
        self.currency = get_config().currency

    def prompt(self) -> str:
        form = self.session.form
        if isinstance(form, Adding):
            return "add>"
        if isinstance(form, Editing):
            h = self.session.store.get(form.identity)
            return f"edit {h.identity if h else form.identity}>"
        return "portfolio>"

    def report(self, outcome, success: Optional[str] = None) -> None:
        if outcome.ok:
            if success:
                console.print(f"[green]{success}[/green]")
            return
        errors = getattr(outcome.error, "errors", None)
        if errors:
            for field, message in errors.items():
                console.print(f"  [red]{field}[/red] {message}")
        else:
            console.print(f"[red]{escape(outcome.message)}[/red]")

    def show_form(self) -> None:
        form = self.session.form
        if isinstance(form, Idle):
            console.print("[yellow]No form is open[/yellow]")
            return
        table = Table(title="Add holding" if isinstance(form, Adding) else "Edit holding", show_header=False)
        table.add_column("Field", style="cyan")
        table.add_column("Value")
        for field in FORM_FIELDS:
            value = form.draft.get(field)
            table.add_row(field, "" if value is None else str(value))
        console.print(table)

    # Returns False when the shell should exit.
    def handle(self, line: str) -> bool:
        try:
            words = shlex.split(line)
        except ValueError as e:
            console.print(f"[red]{e}[/red]")
            return True
        if not words:
            return True
        cmd, args = words[0].lower(), words[1:]
        s = self.session

        if cmd in ("quit", "exit"):
            return False
        if cmd == "help":
            for usage, text in HELP:
                console.print(f"  [bold]{escape(usage):<18}[/bold] {text}")
        elif cmd == "list":
            if not s.holdings():
                console.print("[yellow]No holdings yet[/yellow]")
            else:
                console.print(holdings_table(s.holdings(), currency=self.currency))
        elif cmd == "chart":
            if s.summary().total_value == 0:
                console.print("[yellow]No data to chart[/yellow]")
            else:
                console.print(composition_chart(s.allocation()))
        elif cmd == "add":
            prefill = None
            if args:
                try:
                    prefill = self.matches[int(args[0]) - 1]
                except (ValueError, IndexError):
                    console.print(f"[red]No search result {args[0]}[/red]")
                    return True
            s.start_add(prefill)
            self.show_form()
        elif cmd == "edit" and args:
            outcome = s.start_edit(" ".join(args))
            self.report(outcome)
            if outcome.ok:
                self.show_form()
        elif cmd == "set" and len(args) >= 2:
            field = args[0].lower()
            if field not in FORM_FIELDS:
                console.print(f"[red]Unknown field '{field}'. Fields: {', '.join(FORM_FIELDS)}[/red]")
                return True
            self.report(s.update_draft(**{field: " ".join(args[1:])}))
        elif cmd == "form":
            self.show_form()
        elif cmd == "save":
            outcome = s.save()
            self.report(outcome, success=f"Saved {outcome.value.name}" if outcome.ok else None)
        elif cmd == "cancel":
            self.report(s.cancel(), success="Form discarded")
        elif cmd == "delete" and args:
            outcome = s.remove(" ".join(args))
            self.report(outcome, success=f"Removed {outcome.value.name}" if outcome.ok else None)
        elif cmd == "refresh":
            console.print("Fetching prices...")
            outcome = s.refresh_prices()
            self.report(outcome, success=f"Updated {len(outcome.value)} prices" if outcome.ok else None)
            if s.last_error:
                console.print(f"[yellow]{s.last_error}[/yellow]")
        elif cmd == "search" and args:
            outcome = s.search(" ".join(args))
            self.report(outcome)
            if outcome.ok:
                self.matches = outcome.value
                if self.matches:
                    console.print(search_table(self.matches))
                else:
                    console.print("[yellow]No matches[/yellow]")
        elif cmd == "import" and args:
            outcome = s.import_file(Path(args[0]))
            self.report(outcome, success=f"Imported {outcome.value} holdings" if outcome.ok else None)
        elif cmd == "export" and args:
            outcome = s.export_file(Path(args[0]))
            self.report(outcome, success=f"Exported {outcome.value} holdings" if outcome.ok else None)
        else:
            console.print(f"[red]Unknown command: {escape(line.strip())}[/red]  (type 'help')")
        return True

    def run(self) -> None:
        console.print("[bold]Stock portfolio shell[/bold] — type 'help' for commands")
        while True:
            try:
                line = typer.prompt(self.prompt(), default="", show_default=False, prompt_suffix=" ")
            except typer.Abort:
                console.print()
                break
            if not self.handle(line):
                break


def shell(
    load: Optional[Path] = typer.Option(None, "--load", "-l", help="Start from a JSON portfolio file"),
):
    """Interactive in-memory session (add/edit forms, refresh, search, chart)."""
    session = PortfolioSession()
    if load is not None:
        outcome = session.import_file(load)
        if not outcome.ok:
            console.print(f"[red]Error:[/red] {escape(outcome.message)}")
            raise typer.Exit(1)
    Shell(session).run()
