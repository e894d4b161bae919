"""Result objects returned by every wallet mutator.

Rejections are reported, never raised: a failed call carries a TradeError
code and leaves the wallet untouched.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .state import Transaction


class TradeError(str, Enum):
    INSUFFICIENT_BALANCE = "InsufficientBalance"
    INSUFFICIENT_HOLDINGS = "InsufficientHoldings"
    ALREADY_CLAIMED = "AlreadyClaimed"
    UPGRADE_REQUIRED = "UpgradeRequired"
    ORDER_NOT_FOUND = "OrderNotFound"
    ORDER_NOT_CANCELLABLE = "OrderNotCancellable"
    INVALID_AMOUNT = "InvalidAmount"


DEFAULT_MESSAGES = {
    TradeError.INSUFFICIENT_BALANCE: "Insufficient balance",
    TradeError.INSUFFICIENT_HOLDINGS: "Insufficient holdings",
    TradeError.ALREADY_CLAIMED: "Already claimed today",
    TradeError.UPGRADE_REQUIRED: "Upgrade to get daily bonus",
    TradeError.ORDER_NOT_FOUND: "Order not found",
    TradeError.ORDER_NOT_CANCELLABLE: "Order cannot be cancelled",
    TradeError.INVALID_AMOUNT: "Amount must be a positive number",
}


@dataclass
class TradeResult:
    """Outcome of a wallet operation.

    Only the fields relevant to the operation are populated: executed_price
    for buy/sell, order_id for order placement, amount for bonus claims.
    """
    success: bool
    error: Optional[TradeError] = None
    message: str = ""
    executed_price: Optional[float] = None
    order_id: Optional[str] = None
    amount: Optional[float] = None
    transaction: Optional[Transaction] = None

    def __bool__(self) -> bool:
        return self.success

    @classmethod
    def ok(cls, **fields) -> TradeResult:
        return cls(success=True, **fields)

    @classmethod
    def fail(cls, error: TradeError, message: Optional[str] = None) -> TradeResult:
        return cls(success=False, error=error, message=message or DEFAULT_MESSAGES[error])
