"""Paper trading wallet module."""
from .state import (
    CASH_SYMBOL,
    Holding,
    Transaction,
    TransactionKind,
    PendingOrder,
    OrderKind,
    OrderSide,
    OrderStatus,
    JournalEntry,
    UserTier,
    WalletState,
    seed_state,
)
from .results import TradeError, TradeResult
from .slippage import SlippageModel, FixedSlippage
from .ledger import Ledger
from .orders import OrderBook, should_trigger
from .journal import Journal
from .bonus import DailyBonus
from .valuation import (
    PortfolioMetrics,
    HoldingValuation,
    get_portfolio_value,
    get_portfolio_metrics,
    get_holdings_with_value,
)
from .io import to_record, from_record, save_state, load_state
from .wallet import Wallet

__all__ = [
    "CASH_SYMBOL",
    "Holding",
    "Transaction",
    "TransactionKind",
    "PendingOrder",
    "OrderKind",
    "OrderSide",
    "OrderStatus",
    "JournalEntry",
    "UserTier",
    "WalletState",
    "seed_state",
    "TradeError",
    "TradeResult",
    "SlippageModel",
    "FixedSlippage",
    "Ledger",
    "OrderBook",
    "should_trigger",
    "Journal",
    "DailyBonus",
    "PortfolioMetrics",
    "HoldingValuation",
    "get_portfolio_value",
    "get_portfolio_metrics",
    "get_holdings_with_value",
    "to_record",
    "from_record",
    "save_state",
    "load_state",
    "Wallet",
]
