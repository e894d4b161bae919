"""Pending conditional orders (limit, stop-loss, take-profit) and the trigger pass.

Trigger rules against the current price p and the order's target t:
- LIMIT BUY:    p <= t
- LIMIT SELL:   p >= t
- STOP-LOSS:    p <= t   (always sell)
- TAKE-PROFIT:  p >= t   (always sell)

Triggered orders execute through the Ledger at the target price, not the
current price; slippage still applies on top. Affordability is checked at
placement only and re-checked by the Ledger at execution; funds are never
reserved, so an order whose execution fails simply stays pending.
"""
from __future__ import annotations
from datetime import datetime, timedelta
from typing import Callable, List, Mapping, Optional

from .ledger import Ledger
from .results import TradeError, TradeResult
from .state import OrderKind, OrderSide, OrderStatus, PendingOrder, local_now, new_id
from ..utils.logging import get_logger
from ..utils.validation import ValidationError, usable_price, validate_positive

LOGGER = get_logger(__name__)


def should_trigger(order: PendingOrder, price: float) -> bool:
    """Check whether the current price meets the order's trigger condition."""
    if order.kind is OrderKind.LIMIT:
        if order.side is OrderSide.BUY:
            return price <= order.target_price
        return price >= order.target_price
    if order.kind is OrderKind.STOP_LOSS:
        return price <= order.target_price
    if order.kind is OrderKind.TAKE_PROFIT:
        return price >= order.target_price
    return False


class OrderBook:
    """Stores pending orders in creation order and fires them via the Ledger."""

    def __init__(self, ledger: Ledger, clock: Callable[[], datetime] = local_now):
        self.ledger = ledger
        self._clock = clock

    @property
    def orders(self) -> List[PendingOrder]:
        return self.ledger.state.pending_orders

    def get_order(self, order_id: str) -> Optional[PendingOrder]:
        return self.ledger.state.find_order(order_id)

    def get_pending_orders_for_symbol(self, symbol: str) -> List[PendingOrder]:
        return [o for o in self.orders if o.symbol == symbol and o.is_pending]

    def place_limit_order(
        self,
        side: OrderSide | str,
        symbol: str,
        amount: float,
        target_price: float,
        *,
        name: Optional[str] = None,
    ) -> TradeResult:
        """Queue a limit order for `amount` USD notional, triggering at `target_price`.

        Expires after `limit_order_expiry_days`.
        """
        side = OrderSide(side)
        try:
            amount = validate_positive(amount, "amount")
            target_price = validate_positive(target_price, "target_price")
        except ValidationError as e:
            return TradeResult.fail(TradeError.INVALID_AMOUNT, str(e))

        if side is OrderSide.BUY:
            if not self.ledger.can_afford(amount):
                return TradeResult.fail(TradeError.INSUFFICIENT_BALANCE, "Insufficient balance for limit order")
        elif self.ledger.state.position(symbol) < amount / target_price:
            return TradeResult.fail(TradeError.INSUFFICIENT_HOLDINGS, "Insufficient holdings for limit order")

        now = self._clock()
        expiry = timedelta(days=self.ledger.settings.limit_order_expiry_days)
        holding = self.ledger.get_holding(symbol)
        order = PendingOrder(
            id=new_id(),
            kind=OrderKind.LIMIT,
            side=side,
            symbol=symbol,
            amount=amount,
            target_price=target_price,
            created_at=now,
            expires_at=now + expiry,
            name=name or (holding.name if holding else None),
        )
        return self._append(order)

    def place_stop_loss(self, symbol: str, quantity: float, stop_price: float) -> TradeResult:
        """Sell `quantity` units once the price falls to `stop_price` or below."""
        return self._place_exit(OrderKind.STOP_LOSS, symbol, quantity, stop_price)

    def place_take_profit(self, symbol: str, quantity: float, target_price: float) -> TradeResult:
        """Sell `quantity` units once the price rises to `target_price` or above."""
        return self._place_exit(OrderKind.TAKE_PROFIT, symbol, quantity, target_price)

    def _place_exit(self, kind: OrderKind, symbol: str, quantity: float, price: float) -> TradeResult:
        try:
            quantity = validate_positive(quantity, "quantity")
            price = validate_positive(price, "target_price")
        except ValidationError as e:
            return TradeResult.fail(TradeError.INVALID_AMOUNT, str(e))

        holding = self.ledger.get_holding(symbol)
        if holding is None or holding.quantity < quantity:
            return TradeResult.fail(
                TradeError.INSUFFICIENT_HOLDINGS, f"Insufficient holdings for {kind.value}"
            )

        order = PendingOrder(
            id=new_id(),
            kind=kind,
            side=OrderSide.SELL,
            symbol=symbol,
            amount=quantity,
            target_price=price,
            created_at=self._clock(),
            name=holding.name,
        )
        return self._append(order)

    def _append(self, order: PendingOrder) -> TradeResult:
        self.orders.append(order)
        LOGGER.info(
            f"Placed {order.kind.value} {order.side.value} {order.symbol} @ {order.target_price}",
            extra={
                'order_id': order.id,
                'symbol': order.symbol,
                'side': order.side.value,
                'quantity': order.amount,
                'price': order.target_price,
            },
        )
        return TradeResult.ok(order_id=order.id)

    def cancel_order(self, order_id: str) -> TradeResult:
        order = self.get_order(order_id)
        if order is None:
            return TradeResult.fail(TradeError.ORDER_NOT_FOUND)
        if not order.is_pending:
            return TradeResult.fail(TradeError.ORDER_NOT_CANCELLABLE)

        order.transition(OrderStatus.CANCELLED)
        LOGGER.info(f"Cancelled order {order_id}", extra={'order_id': order_id, 'symbol': order.symbol})
        return TradeResult.ok(order_id=order_id)

    def check_and_execute_orders(
        self,
        prices: Mapping[str, float],
        now: Optional[datetime] = None,
    ) -> List[PendingOrder]:
        """Evaluate every pending order against one price snapshot.

        Orders are visited in creation order and the Ledger re-reads balances
        and holdings for each execution, so an earlier fill in the same pass
        can make a later order unaffordable (it then stays pending).

        Returns:
            Orders that expired or filled during this pass.
        """
        now = now or self._clock()
        changed: List[PendingOrder] = []

        # snapshot the list: executions never add orders but callers might
        for order in list(self.orders):
            if not order.is_pending:
                continue

            if order.is_expired(now):
                order.transition(OrderStatus.EXPIRED)
                changed.append(order)
                LOGGER.info(
                    f"Order {order.id} expired",
                    extra={'order_id': order.id, 'symbol': order.symbol, 'reason': 'expired'},
                )
                continue

            price = usable_price(prices.get(order.symbol)) if prices else None
            if price is None or not should_trigger(order, price):
                continue

            result = self._execute(order)
            if not result.success:
                LOGGER.info(
                    f"Order {order.id} triggered but not executed: {result.message}",
                    extra={'order_id': order.id, 'symbol': order.symbol, 'reason': result.error.value},
                )
                continue

            order.transition(OrderStatus.FILLED, now)
            changed.append(order)
            LOGGER.info(
                f"Order {order.id} filled ({order.kind.value} {order.side.value} {order.symbol})",
                extra={
                    'order_id': order.id,
                    'transaction_id': result.transaction.id,
                    'symbol': order.symbol,
                    'side': order.side.value,
                    'price': result.executed_price,
                },
            )

        return changed

    def _execute(self, order: PendingOrder) -> TradeResult:
        if order.side is OrderSide.BUY:
            return self.ledger.buy(
                order.symbol, order.amount, order.target_price, name=order.name, order_kind=order.kind
            )
        return self.ledger.sell(order.symbol, order.sell_quantity(), order.target_price, order_kind=order.kind)
