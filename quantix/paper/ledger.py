"""Paper ledger: cash balance, holdings and immediate execution.

Every mutator validates completely before touching state and returns a
TradeResult; a rejected call leaves balance, holdings and the transaction log
unchanged.

Execution math (fee_rate f, executed price e):
- BUY notional N:   cash -= N × (1 + f); units += N / e
                    avg = (q × avg + N) / (q + N / e)
- SELL quantity q:  cash += q × e × (1 - f); units -= q
"""
from __future__ import annotations
from datetime import date, datetime
from typing import Callable, Optional

from .bonus import DailyBonus
from .results import TradeError, TradeResult
from .slippage import SlippageModel
from .state import (
    Holding,
    OrderKind,
    OrderSide,
    Transaction,
    TransactionKind,
    UserTier,
    WalletState,
    cash_transaction,
    local_now,
    new_id,
)
from ..config.schemas import PaperTradingConfig
from ..utils.logging import get_logger
from ..utils.validation import ValidationError, validate_positive, validate_range

LOGGER = get_logger(__name__)


class Ledger:
    """Owns cash, holdings and the transaction log of one wallet."""

    def __init__(
        self,
        state: WalletState,
        settings: Optional[PaperTradingConfig] = None,
        slippage: Optional[SlippageModel] = None,
        clock: Callable[[], datetime] = local_now,
    ):
        self.state = state
        self.settings = settings or PaperTradingConfig()
        self.slippage = slippage or SlippageModel()
        self.bonus = DailyBonus(self.settings.daily_bonus)
        self._clock = clock

    def fee_for(self, notional: float) -> float:
        return notional * self.settings.fee_rate

    def can_afford(self, notional: float) -> bool:
        """True if cash covers notional plus fee right now (nothing is reserved)."""
        return notional + self.fee_for(notional) <= self.state.cash_balance

    def get_holding(self, symbol: str) -> Optional[Holding]:
        return self.state.holding(symbol)

    def _executed_price(self, price: float, side: OrderSide) -> float:
        if not self.state.slippage_enabled:
            return price
        return self.slippage.execution_price(price, self.state.slippage_percent, side)

    def deposit(self, amount: float, *, name: str = "Deposit") -> TradeResult:
        """Add cash and raise the P&L baseline by the same amount."""
        try:
            amount = validate_positive(amount, "amount")
        except ValidationError as e:
            return TradeResult.fail(TradeError.INVALID_AMOUNT, str(e))

        tx = cash_transaction(TransactionKind.DEPOSIT, amount, self._clock(), name)
        self.state.cash_balance += amount
        self.state.initial_deposit += amount
        self.state.record(tx)
        LOGGER.info(f"Deposit {amount:.2f}", extra={'transaction_id': tx.id, 'quantity': amount})
        return TradeResult.ok(amount=amount, transaction=tx)

    def buy(
        self,
        symbol: str,
        notional: float,
        price: float,
        *,
        name: Optional[str] = None,
        order_kind: OrderKind = OrderKind.MARKET,
    ) -> TradeResult:
        """Spend `notional` USD (plus fee) on `symbol` at `price` plus slippage."""
        try:
            notional = validate_positive(notional, "notional")
            price = validate_positive(price, "price")
        except ValidationError as e:
            return TradeResult.fail(TradeError.INVALID_AMOUNT, str(e))

        fee = self.fee_for(notional)
        required = notional + fee
        if required > self.state.cash_balance:
            LOGGER.debug(
                f"Buy rejected for {symbol}: need {required:.2f}, have {self.state.cash_balance:.2f}",
                extra={'symbol': symbol, 'side': 'buy', 'reason': TradeError.INSUFFICIENT_BALANCE.value},
            )
            return TradeResult.fail(TradeError.INSUFFICIENT_BALANCE)

        executed = self._executed_price(price, OrderSide.BUY)
        slippage = executed - price
        bought = notional / executed

        existing = self.state.holding(symbol)
        if existing is not None:
            new_qty = existing.quantity + bought
            # weighted by cost contributed, not by price
            new_avg = (existing.quantity * existing.average_cost + notional) / new_qty
            holding = Holding(symbol, new_qty, new_avg, name or existing.name)
        else:
            holding = Holding(symbol, bought, executed, name)

        tx = Transaction(
            id=new_id(),
            kind=TransactionKind.BUY,
            symbol=symbol,
            quantity=bought,
            execution_price=executed,
            gross_value=notional,
            fee=fee,
            timestamp=self._clock(),
            slippage=slippage if slippage > 0 else None,
            order_kind=OrderKind(order_kind),
            name=holding.name or symbol,
        )
        self.state.cash_balance -= required
        self.state.holdings[symbol] = holding
        self.state.record(tx)

        LOGGER.info(
            f"Executed: buy {bought:.8f} {symbol} @ {executed:.2f}",
            extra={'transaction_id': tx.id, 'symbol': symbol, 'side': 'buy', 'quantity': bought, 'price': executed},
        )
        return TradeResult.ok(executed_price=executed, transaction=tx)

    def sell(
        self,
        symbol: str,
        quantity: float,
        price: float,
        *,
        order_kind: OrderKind = OrderKind.MARKET,
    ) -> TradeResult:
        """Sell `quantity` units of `symbol` at `price` minus slippage."""
        try:
            quantity = validate_positive(quantity, "quantity")
            price = validate_positive(price, "price")
        except ValidationError as e:
            return TradeResult.fail(TradeError.INVALID_AMOUNT, str(e))

        holding = self.state.holding(symbol)
        if holding is None or holding.quantity < quantity:
            LOGGER.debug(
                f"Sell rejected for {symbol}: requested {quantity}, held {self.state.position(symbol)}",
                extra={'symbol': symbol, 'side': 'sell', 'reason': TradeError.INSUFFICIENT_HOLDINGS.value},
            )
            return TradeResult.fail(TradeError.INSUFFICIENT_HOLDINGS)

        executed = self._executed_price(price, OrderSide.SELL)
        slippage = price - executed
        gross = quantity * executed
        fee = self.fee_for(gross)
        remaining = holding.quantity - quantity

        tx = Transaction(
            id=new_id(),
            kind=TransactionKind.SELL,
            symbol=symbol,
            quantity=quantity,
            execution_price=executed,
            gross_value=gross,
            fee=fee,
            timestamp=self._clock(),
            slippage=slippage if slippage > 0 else None,
            order_kind=OrderKind(order_kind),
            name=holding.name or symbol,
        )
        self.state.cash_balance += gross - fee
        if remaining < self.settings.dust_epsilon:
            del self.state.holdings[symbol]
        else:
            holding.quantity = remaining
        self.state.record(tx)

        LOGGER.info(
            f"Executed: sell {quantity:.8f} {symbol} @ {executed:.2f}",
            extra={'transaction_id': tx.id, 'symbol': symbol, 'side': 'sell', 'quantity': quantity, 'price': executed},
        )
        return TradeResult.ok(executed_price=executed, transaction=tx)

    def claim_daily_bonus(self, today: Optional[date] = None) -> TradeResult:
        """Credit the tier's daily bonus once per calendar day."""
        now = self._clock()
        today = today or now.date()

        error = self.bonus.check(self.state, today)
        if error is not None:
            return TradeResult.fail(error)

        amount = self.bonus.amount_for(self.state.tier)
        tx = cash_transaction(TransactionKind.BONUS, amount, now, "Daily Bonus")
        self.state.cash_balance += amount
        self.state.last_bonus_claim = today.isoformat()
        self.state.record(tx)
        LOGGER.info(f"Daily bonus {amount:.2f} credited", extra={'transaction_id': tx.id, 'quantity': amount})
        return TradeResult.ok(amount=amount, transaction=tx)

    def reset(self) -> None:
        """Restore the starting balance and drop holdings, orders, notes and bonus history.

        Tier and slippage settings are kept.
        """
        balance = self.settings.initial_balance
        self.state.cash_balance = balance
        self.state.initial_deposit = balance
        self.state.holdings.clear()
        self.state.transactions.clear()
        self.state.pending_orders.clear()
        self.state.journal_entries.clear()
        self.state.last_bonus_claim = None
        if balance > 0:
            self.state.record(cash_transaction(TransactionKind.DEPOSIT, balance, self._clock(), "Wallet Reset"))
        LOGGER.info("Wallet reset")

    def set_slippage(self, enabled: bool, percent: Optional[float] = None) -> TradeResult:
        if percent is not None:
            try:
                percent = validate_range(
                    percent, "slippage_percent", min_val=0.0, max_val=self.settings.max_slippage_percent
                )
            except ValidationError as e:
                return TradeResult.fail(TradeError.INVALID_AMOUNT, str(e))
            self.state.slippage_percent = percent
        self.state.slippage_enabled = bool(enabled)
        return TradeResult.ok()

    def set_tier(self, tier: UserTier | str) -> None:
        self.state.tier = UserTier(tier)
