"""Per-user paper wallet.

Wallet is the explicit context object callers construct and pass around: one
instance per user or session, never a module-level singleton. It composes
the Ledger, OrderBook and Journal over a single WalletState and serializes
every call through one re-entrant lock, so a trigger pass over all pending
orders is a single transaction boundary that no buy/sell/place/cancel can
interleave with.

Usage:
    wallet = Wallet.from_config(get_config(), seed=7)
    wallet.buy("BTCUSDT", 100, 50_000)
    wallet.place_take_profit("BTCUSDT", wallet.get_holding("BTCUSDT").quantity, 55_000)
    wallet.check_and_execute_orders({"BTCUSDT": 56_000})
"""
from __future__ import annotations
import functools
import threading
from datetime import date, datetime
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

import numpy as np

from .io import from_record, load_state, save_state, to_record
from .journal import Journal
from .ledger import Ledger
from .orders import OrderBook
from .results import TradeResult
from .slippage import SlippageModel
from .state import (
    Holding,
    JournalEntry,
    OrderSide,
    PendingOrder,
    UserTier,
    WalletState,
    local_now,
    seed_state,
)
from .valuation import (
    HoldingValuation,
    PortfolioMetrics,
    get_holdings_with_value,
    get_portfolio_metrics,
    get_portfolio_value,
)
from ..config.manager import ConfigManager
from ..config.schemas import PaperTradingConfig


def _locked(method):
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            return method(self, *args, **kwargs)
    return wrapper


class Wallet:
    """Paper trading wallet for one user."""

    def __init__(
        self,
        state: Optional[WalletState] = None,
        settings: Optional[PaperTradingConfig] = None,
        *,
        slippage: Optional[SlippageModel] = None,
        clock: Callable[[], datetime] = local_now,
    ):
        """
        Args:
            state: Existing state to operate on; a fresh funded wallet when None.
            settings: Fees, limits and defaults (schema defaults when None).
            slippage: Slippage model; inject a seeded or fixed one for reproducibility.
            clock: Wall clock returning timezone-aware datetimes.
        """
        self.settings = settings or PaperTradingConfig()
        self._clock = clock
        if state is None:
            state = seed_state(
                self.settings.initial_balance,
                clock(),
                slippage_enabled=self.settings.slippage_enabled,
                slippage_percent=self.settings.slippage_percent,
            )
        self.state = state
        self.ledger = Ledger(state, self.settings, slippage, clock)
        self.order_book = OrderBook(self.ledger, clock)
        self.journal = Journal(state, clock)
        self._lock = threading.RLock()

    @classmethod
    def from_config(
        cls,
        config: Optional[ConfigManager] = None,
        *,
        state: Optional[WalletState] = None,
        resume: bool = False,
        seed: Optional[int] = None,
        rng: Optional[np.random.Generator] = None,
        clock: Callable[[], datetime] = local_now,
    ) -> Wallet:
        """Build a wallet from the paper_trading section of a ConfigManager.

        With resume=True and no explicit state, the record at
        storage.state_path is loaded if it exists.
        """
        config = config or ConfigManager()
        if state is None and resume:
            path = Path(config.get("storage.state_path"))
            if path.exists():
                state = load_state(path)
        return cls(
            state,
            config.get_section("paper_trading"),
            slippage=SlippageModel(rng=rng, seed=seed),
            clock=clock,
        )

    @classmethod
    def from_record(cls, record: Dict[str, Any], settings: Optional[PaperTradingConfig] = None, **kwargs) -> Wallet:
        return cls(from_record(record), settings, **kwargs)

    @classmethod
    def load(cls, path: str | Path, settings: Optional[PaperTradingConfig] = None, **kwargs) -> Wallet:
        return cls(load_state(path), settings, **kwargs)

    @_locked
    def to_record(self) -> Dict[str, Any]:
        return to_record(
            self.state,
            max_transactions=self.settings.max_transactions,
            max_journal_entries=self.settings.max_journal_entries,
        )

    @_locked
    def save(self, path: str | Path) -> None:
        """Write the capped record as JSON."""
        save_state(
            self.state,
            path,
            max_transactions=self.settings.max_transactions,
            max_journal_entries=self.settings.max_journal_entries,
        )

    # Mutators

    @_locked
    def deposit(self, amount: float) -> TradeResult:
        return self.ledger.deposit(amount)

    @_locked
    def buy(self, symbol: str, notional: float, price: float, *, name: Optional[str] = None) -> TradeResult:
        return self.ledger.buy(symbol, notional, price, name=name)

    @_locked
    def sell(self, symbol: str, quantity: float, price: float) -> TradeResult:
        return self.ledger.sell(symbol, quantity, price)

    @_locked
    def claim_daily_bonus(self, today: Optional[date] = None) -> TradeResult:
        return self.ledger.claim_daily_bonus(today)

    @_locked
    def place_limit_order(
        self, side: OrderSide | str, symbol: str, amount: float, target_price: float, *, name: Optional[str] = None
    ) -> TradeResult:
        return self.order_book.place_limit_order(side, symbol, amount, target_price, name=name)

    @_locked
    def place_stop_loss(self, symbol: str, quantity: float, stop_price: float) -> TradeResult:
        return self.order_book.place_stop_loss(symbol, quantity, stop_price)

    @_locked
    def place_take_profit(self, symbol: str, quantity: float, target_price: float) -> TradeResult:
        return self.order_book.place_take_profit(symbol, quantity, target_price)

    @_locked
    def cancel_order(self, order_id: str) -> TradeResult:
        return self.order_book.cancel_order(order_id)

    @_locked
    def add_journal_note(self, transaction_id: str, note: str, tags: Iterable[str] = ()) -> JournalEntry:
        return self.journal.add_note(transaction_id, note, tags)

    @_locked
    def update_journal_note(
        self, entry_id: str, note: str, tags: Optional[Iterable[str]] = None
    ) -> Optional[JournalEntry]:
        return self.journal.update_note(entry_id, note, tags)

    @_locked
    def reset_wallet(self) -> None:
        self.ledger.reset()

    @_locked
    def set_slippage(self, enabled: bool, percent: Optional[float] = None) -> TradeResult:
        return self.ledger.set_slippage(enabled, percent)

    @_locked
    def set_tier(self, tier: UserTier | str) -> None:
        self.ledger.set_tier(tier)

    # Tick entry point

    @_locked
    def check_and_execute_orders(
        self, prices: Mapping[str, float], now: Optional[datetime] = None
    ) -> List[PendingOrder]:
        """Run one trigger pass over all pending orders with one price snapshot."""
        return self.order_book.check_and_execute_orders(dict(prices or {}), now)

    # Queries

    @property
    def cash_balance(self) -> float:
        return self.state.cash_balance

    @_locked
    def get_holding(self, symbol: str) -> Optional[Holding]:
        return self.ledger.get_holding(symbol)

    @_locked
    def get_portfolio_value(self, prices: Mapping[str, float]) -> float:
        return get_portfolio_value(self.state, prices)

    @_locked
    def get_portfolio_metrics(self, prices: Mapping[str, float]) -> PortfolioMetrics:
        return get_portfolio_metrics(self.state, prices)

    @_locked
    def get_holdings_with_value(self, prices: Mapping[str, float]) -> List[HoldingValuation]:
        return get_holdings_with_value(self.state, prices)

    @_locked
    def get_pending_orders_for_symbol(self, symbol: str) -> List[PendingOrder]:
        return self.order_book.get_pending_orders_for_symbol(symbol)

    @_locked
    def get_order(self, order_id: str) -> Optional[PendingOrder]:
        return self.order_book.get_order(order_id)

    @_locked
    def get_journal_for_transaction(self, transaction_id: str) -> Optional[JournalEntry]:
        return self.journal.get_for_transaction(transaction_id)
