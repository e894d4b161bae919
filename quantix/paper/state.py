"""Paper wallet state container.

Tracks cash, per-symbol holdings, the transaction log, pending conditional
orders and journal notes for one user. This module is pure data; execution
lives in ledger.py and orders.py.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional
import uuid

CASH_SYMBOL = "USD"


class TransactionKind(str, Enum):
    BUY = "buy"
    SELL = "sell"
    DEPOSIT = "deposit"
    BONUS = "bonus"


class OrderKind(str, Enum):
    """How an execution was requested. MARKET only appears on transactions."""
    MARKET = "market"
    LIMIT = "limit"
    STOP_LOSS = "stop-loss"
    TAKE_PROFIT = "take-profit"


class OrderSide(str, Enum):
    BUY = "buy"
    SELL = "sell"


class OrderStatus(str, Enum):
    PENDING = "pending"
    FILLED = "filled"
    CANCELLED = "cancelled"
    EXPIRED = "expired"

    @property
    def is_terminal(self) -> bool:
        return self is not OrderStatus.PENDING


class UserTier(str, Enum):
    FREE = "free"
    STARTER = "starter"
    PRO = "pro"
    ULTIMATE = "ultimate"


def new_id() -> str:
    return uuid.uuid4().hex


def local_now() -> datetime:
    """Timezone-aware wall clock in the local zone."""
    return datetime.now().astimezone()


@dataclass
class Holding:
    """A position in one asset. Exists only while quantity > 0."""
    symbol: str
    quantity: float
    average_cost: float
    name: Optional[str] = None

    @property
    def cost_basis(self) -> float:
        return self.quantity * self.average_cost


@dataclass(frozen=True)
class Transaction:
    """Immutable record of one executed cash or asset movement."""
    id: str
    kind: TransactionKind
    symbol: str
    quantity: float
    execution_price: float
    gross_value: float
    fee: float
    timestamp: datetime
    slippage: Optional[float] = None  # absolute price deviation, only when unfavorable
    order_kind: Optional[OrderKind] = None
    name: str = ""


@dataclass
class PendingOrder:
    """A conditional instruction awaiting a price trigger.

    ``amount`` is a USD notional for limit orders (either side) and an asset
    quantity for stop-loss / take-profit orders.
    """
    id: str
    kind: OrderKind
    side: OrderSide
    symbol: str
    amount: float
    target_price: float
    created_at: datetime
    expires_at: Optional[datetime] = None
    status: OrderStatus = OrderStatus.PENDING
    filled_at: Optional[datetime] = None
    name: Optional[str] = None

    @property
    def is_pending(self) -> bool:
        return self.status is OrderStatus.PENDING

    def sell_quantity(self) -> float:
        """Asset units this order sells when it fires."""
        if self.kind is OrderKind.LIMIT:
            return self.amount / self.target_price
        return self.amount

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at is not None and self.expires_at < now

    def transition(self, status: OrderStatus, when: Optional[datetime] = None) -> None:
        """Move a pending order to a terminal status.

        Raises:
            RuntimeError: If the order is already terminal.
        """
        if not self.is_pending:
            raise RuntimeError(f"Order {self.id} is already {self.status.value}")
        if not status.is_terminal:
            raise ValueError(f"Cannot transition order to {status.value}")
        self.status = status
        if status is OrderStatus.FILLED:
            self.filled_at = when


@dataclass
class JournalEntry:
    """Free-text note attached to a transaction by id (soft reference)."""
    id: str
    transaction_id: str
    note: str
    tags: List[str] = field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class WalletState:
    cash_balance: float = 500.0
    initial_deposit: float = 500.0  # P&L baseline; only deposits and resets move it
    holdings: Dict[str, Holding] = field(default_factory=dict)
    transactions: List[Transaction] = field(default_factory=list)  # most recent first
    pending_orders: List[PendingOrder] = field(default_factory=list)  # creation order
    journal_entries: List[JournalEntry] = field(default_factory=list)
    tier: UserTier = UserTier.FREE
    last_bonus_claim: Optional[str] = None  # ISO calendar date
    slippage_enabled: bool = True
    slippage_percent: float = 0.1

    def holding(self, symbol: str) -> Optional[Holding]:
        """Return the holding for symbol (None if not held)."""
        return self.holdings.get(symbol)

    def position(self, symbol: str) -> float:
        """Return units held for a symbol (0.0 if none)."""
        h = self.holdings.get(symbol)
        return float(h.quantity) if h else 0.0

    def record(self, tx: Transaction) -> None:
        """Prepend a transaction to the log."""
        self.transactions.insert(0, tx)

    def find_order(self, order_id: str) -> Optional[PendingOrder]:
        for order in self.pending_orders:
            if order.id == order_id:
                return order
        return None


def cash_transaction(
    kind: TransactionKind,
    amount: float,
    timestamp: datetime,
    name: str,
) -> Transaction:
    """Build a pure cash movement (deposit or bonus)."""
    return Transaction(
        id=new_id(),
        kind=kind,
        symbol=CASH_SYMBOL,
        quantity=amount,
        execution_price=1.0,
        gross_value=amount,
        fee=0.0,
        timestamp=timestamp,
        name=name,
    )


def seed_state(
    initial_balance: float,
    timestamp: datetime,
    *,
    name: str = "Initial Deposit",
    slippage_enabled: bool = True,
    slippage_percent: float = 0.1,
    tier: UserTier = UserTier.FREE,
) -> WalletState:
    """Create a fresh wallet funded with initial_balance."""
    state = WalletState(
        cash_balance=float(initial_balance),
        initial_deposit=float(initial_balance),
        tier=tier,
        slippage_enabled=slippage_enabled,
        slippage_percent=float(slippage_percent),
    )
    if initial_balance > 0:
        state.record(cash_transaction(TransactionKind.DEPOSIT, float(initial_balance), timestamp, name))
    return state
