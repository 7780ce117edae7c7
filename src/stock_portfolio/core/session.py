"""Portfolio session: the seam between the holdings store and a front end.

A session owns one HoldingsStore, the form state (Idle / Adding / Editing),
and the advisory loading/error flags shown while prices are refreshed. Every
public operation returns an Outcome; errors from the store never escape.
"""

import dataclasses
import threading
from decimal import Decimal
from pathlib import Path
from typing import Optional, Union

from ..data.serialization import export_holdings, import_holdings, load_portfolio_file, save_portfolio_file
from ..data.store import HoldingsStore
from ..log import get_logger
from .calculator import PortfolioCalculator
from .config import get_config
from .exceptions import FormStateError, HoldingNotFoundError, PortfolioTrackerError, RefreshInProgressError
from .models import Adding, Editing, FormState, Holding, Idle, Outcome, SymbolMatch
from .pricing import fetch_quotes
from .validation import FORM_FIELDS, holding_to_form, parse_holding_form

logger = get_logger(__name__)


@dataclasses.dataclass
class PortfolioSummary:
    count: int
    total_value: Decimal
    total_cost: Decimal
    unrealized_pnl: Decimal
    return_rate: Decimal


class PortfolioSession:

    def __init__(self, store: Optional[HoldingsStore] = None, quote_provider=None,
                 search_provider=None, max_workers: Optional[int] = None):
        self.store = store if store is not None else HoldingsStore()
        self._quote_provider = quote_provider
        self._search_provider = search_provider
        self._max_workers = max_workers
        self.form: FormState = Idle()
        self.loading = False
        self.last_error: Optional[str] = None
        self._refresh_guard = threading.Lock()

    # -- providers ---------------------------------------------------------

    @property
    def quote_provider(self):
        if self._quote_provider is None:
            from ..external import get_quote_provider
            self._quote_provider = get_quote_provider()
        return self._quote_provider

    @property
    def search_provider(self):
        if self._search_provider is None:
            from ..external import get_search_provider
            self._search_provider = get_search_provider()
        return self._search_provider

    # -- reads -------------------------------------------------------------

    def holdings(self) -> tuple[Holding, ...]:
        return self.store.list()

    def summary(self) -> PortfolioSummary:
        holdings = self.store.list()
        calc = PortfolioCalculator
        return PortfolioSummary(
            count=len(holdings),
            total_value=calc.total_value(holdings),
            total_cost=calc.total_cost_basis(holdings),
            unrealized_pnl=calc.total_unrealized_pnl(holdings),
            return_rate=calc.portfolio_return_rate(holdings),
        )

    def allocation(self) -> list[tuple[Holding, Decimal]]:
        return PortfolioCalculator.allocation(self.store.list())

    # -- direct intents ----------------------------------------------------

    def _run(self, fn, *args) -> Outcome:
        try:
            return Outcome.success(fn(*args))
        except PortfolioTrackerError as e:
            logger.debug("Rejected: %s", e)
            return Outcome.failure(e)

    def add(self, data: dict) -> Outcome:
        """Validate raw form values and append a new holding."""
        return self._run(lambda: self.store.add(parse_holding_form(data)))

    def edit(self, key: str, data: dict) -> Outcome:
        """Validate raw form values and replace the holding addressed by ``key``."""
        return self._run(lambda: self.store.edit(key, parse_holding_form(data)))

    def remove(self, key: str) -> Outcome:
        return self._run(self.store.remove, key)

    # -- form session ------------------------------------------------------

    def start_add(self, prefill: Optional[Union[SymbolMatch, dict]] = None) -> Outcome:
        """Open an empty add form, discarding any open draft."""
        draft: dict = {}
        if isinstance(prefill, SymbolMatch):
            draft = {"name": prefill.display_name, "ticker": prefill.symbol}
        elif prefill:
            draft = {k: v for k, v in prefill.items() if k in FORM_FIELDS}
        self.form = Adding(draft=draft)
        return Outcome.success(self.form)

    def start_edit(self, key: str) -> Outcome:
        """Open an edit form pre-filled from the holding addressed by ``key``."""
        holding = self.store.get(key)
        if holding is None:
            return Outcome.failure(HoldingNotFoundError(key))
        self.form = Editing(identity=holding.id, draft=holding_to_form(holding))
        return Outcome.success(self.form)

    def update_draft(self, **fields) -> Outcome:
        form = self.form
        if isinstance(form, Idle):
            return Outcome.failure(FormStateError("No form is open"))
        draft = {**form.draft, **{k: v for k, v in fields.items() if k in FORM_FIELDS}}
        self.form = dataclasses.replace(form, draft=draft)
        return Outcome.success(self.form)

    def cancel(self) -> Outcome:
        if isinstance(self.form, Idle):
            return Outcome.failure(FormStateError("No form is open"))
        self.form = Idle()
        return Outcome.success()

    def save(self) -> Outcome:
        """Submit the open form. On failure the form stays open with its draft."""
        form = self.form
        if isinstance(form, Adding):
            outcome = self.add(form.draft)
        elif isinstance(form, Editing):
            outcome = self.edit(form.identity, form.draft)
        else:
            return Outcome.failure(FormStateError("No form is open"))
        if outcome.ok:
            self.form = Idle()
        return outcome

    # -- market data -------------------------------------------------------

    def search(self, keyword: str) -> Outcome:
        return self._run(self.search_provider.search, keyword)

    def refresh_prices(self) -> Outcome:
        """Fetch quotes for every holding with a ticker, then apply them in one commit.

        The outcome value is the set of identities that received a new price.
        """
        if not self._refresh_guard.acquire(blocking=False):
            return Outcome.failure(RefreshInProgressError("A price refresh is already running"))
        self.loading = True
        self.last_error = None
        try:
            tickers = [h.ticker for h in self.store.list() if h.ticker]
            workers = self._max_workers or get_config().max_workers
            prices = fetch_quotes(self.quote_provider, tickers, max_workers=workers)
            self.store.apply_prices(prices)
            missing = [t for t in tickers if t not in prices]
            if missing:
                self.last_error = f"No quote for {', '.join(missing)}"
            return Outcome.success(set(prices))
        finally:
            self.loading = False
            self._refresh_guard.release()

    # -- import / export ---------------------------------------------------

    def import_data(self, data) -> Outcome:
        """Replace all holdings with a decoded JSON payload, or change nothing."""
        def _import():
            holdings = import_holdings(data)
            self.store.replace_all(holdings)
            return len(holdings)
        return self._run(_import)

    def import_file(self, path: Union[str, Path]) -> Outcome:
        def _import():
            holdings = load_portfolio_file(path)
            self.store.replace_all(holdings)
            return len(holdings)
        return self._run(_import)

    def export_data(self) -> list[dict]:
        return export_holdings(self.store.list())

    def export_file(self, path: Union[str, Path]) -> Outcome:
        try:
            save_portfolio_file(path, self.store.list())
        except OSError as e:
            return Outcome.failure(e)
        return Outcome.success(len(self.store))
