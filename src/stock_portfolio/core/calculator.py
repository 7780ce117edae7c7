"""Portfolio valuation calculator.

Pure functions over Holding objects. Nothing here touches the store or does
I/O; rendering code calls these whenever the holdings change.
"""

from decimal import ROUND_HALF_UP, Decimal

from .models import Holding

ZERO = Decimal("0")
HUNDRED = Decimal("100")
CENT = Decimal("0.01")


def round2(value: Decimal) -> Decimal:
    """Round half-up to two decimal places."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


class PortfolioCalculator:

    @staticmethod
    def return_rate(buy_price: Decimal, current_price: Decimal) -> Decimal:
        """Percentage gain of ``current_price`` over ``buy_price``.

        A zero buy price yields 0 rather than a division error. Rounding is
        applied once, to the final percentage.
        """
        if buy_price == 0:
            return ZERO
        return round2((current_price - buy_price) / buy_price * HUNDRED)

    @staticmethod
    def market_value(holding: Holding) -> Decimal:
        return holding.current_price * holding.quantity

    @staticmethod
    def total_value(holdings) -> Decimal:
        return sum((PortfolioCalculator.market_value(h) for h in holdings), ZERO)

    @staticmethod
    def share_of_total(holding: Holding, total: Decimal) -> Decimal:
        """Percentage of ``total`` contributed by ``holding``; 0 if total is 0."""
        if total == 0:
            return ZERO
        return round2(PortfolioCalculator.market_value(holding) / total * HUNDRED)

    @staticmethod
    def total_cost_basis(holdings) -> Decimal:
        return sum((h.cost_basis for h in holdings), ZERO)

    @staticmethod
    def total_unrealized_pnl(holdings) -> Decimal:
        holdings = list(holdings)
        value = PortfolioCalculator.total_value(holdings)
        cost = PortfolioCalculator.total_cost_basis(holdings)
        return value - cost

    @staticmethod
    def portfolio_return_rate(holdings) -> Decimal:
        """Return rate of the whole portfolio, cost basis against market value."""
        holdings = list(holdings)
        return PortfolioCalculator.return_rate(
            PortfolioCalculator.total_cost_basis(holdings),
            PortfolioCalculator.total_value(holdings),
        )

    @staticmethod
    def allocation(holdings) -> list[tuple[Holding, Decimal]]:
        """Share of total for each holding, in the order given."""
        holdings = list(holdings)
        total = PortfolioCalculator.total_value(holdings)
        return [(h, PortfolioCalculator.share_of_total(h, total)) for h in holdings]


return_rate = PortfolioCalculator.return_rate
market_value = PortfolioCalculator.market_value
total_value = PortfolioCalculator.total_value
share_of_total = PortfolioCalculator.share_of_total
