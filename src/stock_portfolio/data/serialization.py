"""JSON import/export of holdings.

On disk a portfolio is a plain array of records:

    [{"id": "...", "name": "Apple", "ticker": "AAPL",
      "buyPrice": 170, "currentPrice": 180, "quantity": 10}, ...]

Import is all-or-nothing: any malformed element rejects the whole payload.
"""

import errno
import json
import os
from decimal import Decimal
from pathlib import Path
from typing import Iterable, Union

from ..core.exceptions import ImportShapeError
from ..core.models import Holding, new_holding_id
from ..core.validation import parse_amount
from ..log import get_logger

logger = get_logger(__name__)

# record key -> accepted aliases
FIELD_ALIASES = {
    "buyPrice": ("buyPrice", "buy_price"),
    "currentPrice": ("currentPrice", "current_price"),
    "quantity": ("quantity",),
}


def _number_out(value: Decimal) -> Union[int, float]:
    if value == value.to_integral_value():
        return int(value)
    return float(value)


def holding_to_record(holding: Holding) -> dict:
    return {
        "id": holding.id,
        "name": holding.name,
        "ticker": holding.ticker,
        "buyPrice": _number_out(holding.buy_price),
        "currentPrice": _number_out(holding.current_price),
        "quantity": _number_out(holding.quantity),
    }


def export_holdings(holdings: Iterable[Holding]) -> list[dict]:
    return [holding_to_record(h) for h in holdings]


def _lookup(record: dict, key: str):
    for alias in FIELD_ALIASES[key]:
        if alias in record:
            return True, record[alias]
    return False, None


def holding_from_record(record, index: int) -> Holding:
    if not isinstance(record, dict):
        raise ImportShapeError("expected an object", index)

    name = record.get("name")
    if not isinstance(name, str) or not name.strip():
        raise ImportShapeError("'name' must be a non-empty string", index)

    ticker = record.get("ticker")
    if ticker is not None and not isinstance(ticker, str):
        raise ImportShapeError("'ticker' must be a string", index)

    holding_id = record.get("id")
    if holding_id is not None and (not isinstance(holding_id, str) or not holding_id):
        raise ImportShapeError("'id' must be a non-empty string", index)

    amounts: dict[str, Decimal] = {}
    for key in FIELD_ALIASES:
        present, raw = _lookup(record, key)
        if not present or raw is None:
            if key == "currentPrice":
                amounts[key] = Decimal("0")
                continue
            raise ImportShapeError(f"missing '{key}'", index)
        if isinstance(raw, str):
            raise ImportShapeError(f"'{key}' must be a number", index)
        try:
            amounts[key] = parse_amount(raw)
        except ValueError as e:
            raise ImportShapeError(f"'{key}' {e}", index) from None

    return Holding(
        name=name,
        ticker=ticker,
        buy_price=amounts["buyPrice"],
        current_price=amounts["currentPrice"],
        quantity=amounts["quantity"],
        id=holding_id or new_holding_id(),
    )


def import_holdings(data) -> list[Holding]:
    """Validate a decoded JSON payload and build holdings from it.

    Raises ImportShapeError if the payload is not an array, if any element
    is malformed, or if two elements share an identity or an id.
    """
    if not isinstance(data, list):
        raise ImportShapeError("expected an array of holdings")
    holdings = [holding_from_record(record, i) for i, record in enumerate(data)]

    seen_identity: set[str] = set()
    seen_id: set[str] = set()
    for i, h in enumerate(holdings):
        if h.identity in seen_identity:
            raise ImportShapeError(f"duplicate holding '{h.identity}'", i)
        if h.id in seen_id:
            raise ImportShapeError(f"duplicate id '{h.id}'", i)
        seen_identity.add(h.identity)
        seen_id.add(h.id)
    return holdings


def loads_portfolio(text: str) -> list[Holding]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ImportShapeError(f"not valid JSON: {e}") from e
    return import_holdings(data)


def dumps_portfolio(holdings: Iterable[Holding]) -> str:
    return json.dumps(export_holdings(holdings), ensure_ascii=False, indent=2) + "\n"


def load_portfolio_file(path: Union[str, Path]) -> list[Holding]:
    path_obj = Path(path)
    try:
        text = path_obj.read_text(encoding="utf-8")
    except OSError as e:
        raise ImportShapeError(f"cannot read {path_obj}: {e.strerror or e}") from e
    except UnicodeDecodeError as e:
        raise ImportShapeError(f"{path_obj} is not valid UTF-8: {e.reason} at byte {e.start}") from e
    holdings = loads_portfolio(text)
    logger.info("Loaded %d holdings from %s", len(holdings), path_obj)
    return holdings


def save_portfolio_file(path: Union[str, Path], holdings: Iterable[Holding]) -> None:
    """Write holdings atomically: temp file then os.replace."""
    path_obj = Path(path)
    path_obj.parent.mkdir(parents=True, exist_ok=True)
    payload = dumps_portfolio(holdings)

    tmp_path = path_obj.with_suffix(path_obj.suffix + ".tmp")
    tmp_path.write_text(payload, encoding="utf-8")
    try:
        os.replace(tmp_path, path_obj)
    except OSError as exc:
        try:
            # Bind-mounted targets cannot always be replaced atomically.
            if exc.errno not in {errno.EBUSY, errno.EXDEV, errno.EPERM}:
                raise
            path_obj.write_text(payload, encoding="utf-8")
        finally:
            tmp_path.unlink(missing_ok=True)
    logger.info("Saved portfolio to %s", path_obj)
