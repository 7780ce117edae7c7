"""Rich renderables for holdings, totals and composition."""

from decimal import Decimal
from typing import Iterable

from rich.table import Table
from rich.text import Text

from ..core.calculator import PortfolioCalculator
from ..core.models import Holding, SymbolMatch

BAR_WIDTH = 40
COLORS = ["blue", "green", "yellow", "red", "magenta", "cyan"]


def signed_pct(rate: Decimal) -> str:
    color = "green" if rate >= 0 else "red"
    sign = "+" if rate > 0 else ""
    return f"[{color}]{sign}{rate}%[/{color}]"


def holdings_table(holdings: Iterable[Holding], currency: str = "USD", title: str = "Holdings") -> Table:
    holdings = list(holdings)
    calc = PortfolioCalculator
    total = calc.total_value(holdings)

    table = Table(title=title)
    table.add_column("Name", style="bold")
    table.add_column("Ticker")
    table.add_column(f"Buy ({currency})", justify="right")
    table.add_column(f"Price ({currency})", justify="right")
    table.add_column("Return", justify="right")
    table.add_column("Qty", justify="right")
    table.add_column(f"Value ({currency})", justify="right")
    table.add_column("Share", justify="right")

    for h in holdings:
        table.add_row(
            h.name,
            h.ticker or "—",
            f"{h.buy_price:,.2f}",
            f"{h.current_price:,.2f}" if h.current_price else "—",
            signed_pct(calc.return_rate(h.buy_price, h.current_price)),
            f"{h.quantity:,}",
            f"{calc.market_value(h):,.2f}",
            f"{calc.share_of_total(h, total)}%",
        )

    if holdings:
        pnl = calc.total_unrealized_pnl(holdings)
        color = "green" if pnl >= 0 else "red"
        table.add_row(
            "[bold]Total[/bold]", "", f"{calc.total_cost_basis(holdings):,.2f}", "",
            signed_pct(calc.portfolio_return_rate(holdings)), "",
            f"[bold]{total:,.2f}[/bold]", f"[{color}]{pnl:+,.2f}[/{color}]",
        )
    return table


def composition_chart(allocation: list[tuple[Holding, Decimal]]) -> Table:
    """Horizontal bar per holding with a non-zero value."""
    table = Table(title="Composition", show_header=False, box=None, padding=(0, 1))
    table.add_column("Holding", style="bold")
    table.add_column("Bar")
    table.add_column("Share", justify="right")
    rows = [(h, pct) for h, pct in allocation if pct > 0]
    for i, (h, pct) in enumerate(rows):
        width = int(pct / 100 * BAR_WIDTH) or 1
        bar = Text("█" * width, style=COLORS[i % len(COLORS)])
        table.add_row(h.ticker or h.name, bar, f"{pct}%")
    return table


def search_table(matches: list[SymbolMatch]) -> Table:
    table = Table(title="Symbol search")
    table.add_column("#", style="cyan", justify="right")
    table.add_column("Symbol", style="bold")
    table.add_column("Name")
    table.add_column("Region")
    table.add_column("Currency")
    for i, m in enumerate(matches, 1):
        table.add_row(str(i), m.symbol, m.display_name, m.region, m.currency or "—")
    return table
