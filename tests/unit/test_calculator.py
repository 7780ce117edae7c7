"""Tests for PortfolioCalculator."""

from decimal import Decimal

import pytest

from stock_portfolio.core.calculator import PortfolioCalculator, round2
from stock_portfolio.core.models import Holding


def _holding(name, current, qty, buy=0, ticker=None):
    return Holding(
        name=name,
        ticker=ticker,
        buy_price=Decimal(str(buy)),
        current_price=Decimal(str(current)),
        quantity=Decimal(str(qty)),
    )


class TestRound2:
    def test_half_up(self):
        assert round2(Decimal("1.005")) == Decimal("1.01")
        assert round2(Decimal("1.004")) == Decimal("1.00")

    def test_negative_half_rounds_away_from_zero(self):
        assert round2(Decimal("-1.005")) == Decimal("-1.01")


class TestReturnRate:
    def test_gain(self):
        assert PortfolioCalculator.return_rate(Decimal("100"), Decimal("150")) == Decimal("50.00")

    def test_loss_rounded(self):
        assert PortfolioCalculator.return_rate(Decimal("150"), Decimal("100")) == Decimal("-33.33")

    @pytest.mark.parametrize("price", ["0.01", "1", "170", "99999.99"])
    def test_unchanged_price_is_zero(self, price):
        p = Decimal(price)
        assert PortfolioCalculator.return_rate(p, p) == 0

    @pytest.mark.parametrize("current", ["0", "1", "500"])
    def test_zero_buy_price_is_zero(self, current):
        assert PortfolioCalculator.return_rate(Decimal("0"), Decimal(current)) == 0

    def test_current_price_zero_is_minus_100(self):
        assert PortfolioCalculator.return_rate(Decimal("80"), Decimal("0")) == Decimal("-100.00")

    def test_rounding_applied_once(self):
        # (180 - 170) / 170 * 100 = 5.88235...
        assert PortfolioCalculator.return_rate(Decimal("170"), Decimal("180")) == Decimal("5.88")


class TestTotalValue:
    def test_basic(self):
        holdings = [_holding("A", 10, 3), _holding("B", 5, 2)]
        assert PortfolioCalculator.total_value(holdings) == Decimal("40")

    def test_empty(self):
        assert PortfolioCalculator.total_value([]) == Decimal("0")

    def test_unpriced_contributes_zero(self):
        holdings = [_holding("A", 0, 10), _holding("B", 5, 2)]
        assert PortfolioCalculator.total_value(holdings) == Decimal("10")

    def test_accepts_tuple(self):
        assert PortfolioCalculator.total_value((_holding("A", 2, 2),)) == Decimal("4")


class TestShareOfTotal:
    def test_zero_total(self):
        h = _holding("A", 0, 10)
        assert PortfolioCalculator.share_of_total(h, Decimal("0")) == 0

    def test_half(self):
        h = _holding("A", 10, 2)
        assert PortfolioCalculator.share_of_total(h, Decimal("40")) == Decimal("50.00")

    def test_shares_sum_to_100(self):
        holdings = [_holding("A", 10, 1), _holding("B", 10, 1), _holding("C", 10, 1)]
        total = PortfolioCalculator.total_value(holdings)
        shares = [PortfolioCalculator.share_of_total(h, total) for h in holdings]
        assert shares == [Decimal("33.33")] * 3
        assert abs(sum(shares) - 100) <= Decimal("0.01") * len(holdings)


class TestAllocation:
    def test_preserves_order(self):
        holdings = [_holding("A", 30, 1), _holding("B", 10, 1)]
        alloc = PortfolioCalculator.allocation(holdings)
        assert [h.name for h, _ in alloc] == ["A", "B"]
        assert [pct for _, pct in alloc] == [Decimal("75.00"), Decimal("25.00")]

    def test_all_unpriced(self):
        alloc = PortfolioCalculator.allocation([_holding("A", 0, 5)])
        assert alloc[0][1] == 0


class TestPnL:
    def test_profit(self):
        holdings = [_holding("Apple", 180, 10, buy=170)]
        assert PortfolioCalculator.total_cost_basis(holdings) == Decimal("1700")
        assert PortfolioCalculator.total_unrealized_pnl(holdings) == Decimal("100")
        assert PortfolioCalculator.portfolio_return_rate(holdings) == Decimal("5.88")

    def test_loss(self):
        holdings = [_holding("A", 50, 2, buy=100)]
        assert PortfolioCalculator.total_unrealized_pnl(holdings) == Decimal("-100")

    def test_empty_portfolio_return(self):
        assert PortfolioCalculator.portfolio_return_rate([]) == 0
