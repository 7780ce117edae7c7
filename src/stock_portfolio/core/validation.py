"""Form input validation: raw field values in, Holding out."""

import re
from decimal import Decimal, InvalidOperation
from typing import Optional

from .exceptions import ValidationError
from .models import Holding, new_holding_id

REQUIRED_FIELDS = ("name", "buy_price", "quantity")
NUMERIC_FIELDS = ("buy_price", "current_price", "quantity")
FORM_FIELDS = ("name", "ticker") + NUMERIC_FIELDS

_THOUSANDS = re.compile(r"^\d{1,3}(,\d{3})+(\.\d+)?$")


def parse_amount(value) -> Decimal:
    """Parse a non-negative finite number from a form value.

    Raises ValueError with a user-facing message on failure.
    """
    if isinstance(value, bool):
        raise ValueError("must be a number")
    if isinstance(value, str):
        value = value.strip()
        if _THOUSANDS.match(value):
            value = value.replace(",", "")
        if not value:
            raise ValueError("is required")
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValueError("must be a number") from None
    if not amount.is_finite():
        raise ValueError("must be a finite number")
    if amount < 0:
        raise ValueError("must not be negative")
    return amount


def _is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def parse_holding_form(data: dict, holding_id: Optional[str] = None) -> Holding:
    """Validate a submitted form and build a Holding.

    ``data`` maps field names to raw values (strings from a prompt, or
    numbers). All problems are collected and raised together as one
    ValidationError.
    """
    errors: dict[str, str] = {}
    for name in REQUIRED_FIELDS:
        if _is_blank(data.get(name)):
            errors[name] = "is required"

    amounts: dict[str, Decimal] = {}
    for name in NUMERIC_FIELDS:
        if name in errors:
            continue
        raw = data.get(name)
        if name == "current_price" and _is_blank(raw):
            amounts[name] = Decimal("0")
            continue
        try:
            amounts[name] = parse_amount(raw)
        except ValueError as e:
            errors[name] = str(e)

    ticker = data.get("ticker")
    if ticker is not None and not isinstance(ticker, str):
        errors["ticker"] = "must be text"

    if errors:
        raise ValidationError(errors)

    return Holding(
        name=str(data["name"]),
        ticker=ticker,
        buy_price=amounts["buy_price"],
        current_price=amounts["current_price"],
        quantity=amounts["quantity"],
        id=holding_id or new_holding_id(),
    )


def holding_to_form(holding: Holding) -> dict:
    """Form field values for pre-filling an edit form."""
    return {
        "name": holding.name,
        "ticker": holding.ticker or "",
        "buy_price": holding.buy_price,
        "current_price": holding.current_price,
        "quantity": holding.quantity,
    }
