"""Portfolio valuation against a caller-supplied price map.

Portfolio value is always cash + Σ quantity × price. A symbol without a
usable price contributes 0.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import List, Mapping

from .state import Holding, WalletState
from ..utils.validation import usable_price


@dataclass
class PortfolioMetrics:
    total_value: float
    total_cost: float
    profit_loss: float
    profit_loss_percent: float
    # No historical snapshots are kept, so day-over-day change is always 0
    day_change: float = 0.0
    day_change_percent: float = 0.0


@dataclass
class HoldingValuation:
    symbol: str
    name: str
    quantity: float
    average_cost: float
    current_price: float
    current_value: float
    cost_basis: float
    pnl: float
    pnl_percent: float


def _price(prices: Mapping[str, float], symbol: str) -> float:
    return usable_price(prices.get(symbol)) or 0.0


def get_portfolio_value(state: WalletState, prices: Mapping[str, float]) -> float:
    value = state.cash_balance
    for h in state.holdings.values():
        value += h.quantity * _price(prices, h.symbol)
    return value


def get_portfolio_metrics(state: WalletState, prices: Mapping[str, float]) -> PortfolioMetrics:
    """Total value, cost basis and P&L relative to the initial deposit."""
    total_value = get_portfolio_value(state, prices)
    total_cost = sum(h.cost_basis for h in state.holdings.values())
    profit_loss = total_value - state.initial_deposit
    profit_loss_percent = (profit_loss / state.initial_deposit) * 100 if state.initial_deposit > 0 else 0.0
    return PortfolioMetrics(
        total_value=total_value,
        total_cost=total_cost,
        profit_loss=profit_loss,
        profit_loss_percent=profit_loss_percent,
    )


def value_holding(holding: Holding, price: float) -> HoldingValuation:
    current_value = holding.quantity * price
    cost_basis = holding.cost_basis
    pnl = current_value - cost_basis
    return HoldingValuation(
        symbol=holding.symbol,
        name=holding.name or holding.symbol,
        quantity=holding.quantity,
        average_cost=holding.average_cost,
        current_price=price,
        current_value=current_value,
        cost_basis=cost_basis,
        pnl=pnl,
        pnl_percent=(pnl / cost_basis) * 100 if cost_basis > 0 else 0.0,
    )


def get_holdings_with_value(state: WalletState, prices: Mapping[str, float]) -> List[HoldingValuation]:
    """Per-holding valuation, largest current value first."""
    rows = [value_holding(h, _price(prices, h.symbol)) for h in state.holdings.values()]
    return sorted(rows, key=lambda r: r.current_value, reverse=True)
