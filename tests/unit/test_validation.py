"""Tests for form validation."""

from decimal import Decimal

import pytest

from stock_portfolio.core.exceptions import ValidationError
from stock_portfolio.core.validation import holding_to_form, parse_amount, parse_holding_form


class TestParseAmount:
    @pytest.mark.parametrize("raw,expected", [
        ("170", Decimal("170")),
        (" 1,234.50 ", Decimal("1234.50")),
        ("1,234,567", Decimal("1234567")),
        (12, Decimal("12")),
        (0.5, Decimal("0.5")),
        (Decimal("3"), Decimal("3")),
    ])
    def test_valid(self, raw, expected):
        assert parse_amount(raw) == expected

    @pytest.mark.parametrize("raw", ["abc", "", "-1", "NaN", "Infinity", True, None])
    def test_invalid(self, raw):
        with pytest.raises(ValueError):
            parse_amount(raw)

    @pytest.mark.parametrize("raw", ["1,5", "12,34", "1,2345", ",100"])
    def test_comma_outside_thousands_grouping(self, raw):
        with pytest.raises(ValueError, match="must be a number"):
            parse_amount(raw)


class TestParseHoldingForm:
    def test_minimal(self):
        h = parse_holding_form({"name": "Apple", "buy_price": "170", "quantity": "10"})
        assert h.name == "Apple"
        assert h.ticker is None
        assert h.current_price == Decimal("0")
        assert h.quantity == Decimal("10")

    def test_full(self):
        h = parse_holding_form({
            "name": " Apple ", "ticker": "aapl", "buy_price": "170",
            "current_price": "180", "quantity": "10",
        })
        assert h.name == "Apple"
        assert h.ticker == "AAPL"
        assert h.current_price == Decimal("180")

    def test_collects_all_errors(self):
        with pytest.raises(ValidationError) as exc:
            parse_holding_form({"name": "", "buy_price": "x", "quantity": "-2"})
        assert set(exc.value.errors) == {"name", "buy_price", "quantity"}
        assert exc.value.errors["name"] == "is required"
        assert exc.value.errors["quantity"] == "must not be negative"

    def test_missing_fields(self):
        with pytest.raises(ValidationError) as exc:
            parse_holding_form({})
        assert set(exc.value.errors) == {"name", "buy_price", "quantity"}

    def test_keeps_given_id(self):
        h = parse_holding_form({"name": "A", "buy_price": 1, "quantity": 1}, holding_id="abc")
        assert h.id == "abc"

    def test_form_round_trip(self):
        h = parse_holding_form({"name": "A", "ticker": "X", "buy_price": 1, "quantity": 2})
        again = parse_holding_form(holding_to_form(h), holding_id=h.id)
        assert again == h
