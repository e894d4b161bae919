from __future__ import annotations
import pytest

from quantix.config.schemas import PaperTradingConfig
from quantix.paper.state import Holding, UserTier, WalletState
from quantix.paper.valuation import get_portfolio_metrics, get_portfolio_value, value_holding
from quantix.paper.wallet import Wallet


def test_value_is_cash_plus_marked_holdings(btc_wallet):
    assert btc_wallet.get_portfolio_value({"BTCUSDT": 60_000}) == pytest.approx(519.9)
    assert btc_wallet.get_portfolio_value({"BTCUSDT": 40_000}) == pytest.approx(479.9)


def test_metrics_profit(btc_wallet):
    m = btc_wallet.get_portfolio_metrics({"BTCUSDT": 60_000})
    assert m.total_value == pytest.approx(519.9)
    assert m.total_cost == pytest.approx(100)
    assert m.profit_loss == pytest.approx(19.9)
    assert m.profit_loss_percent == pytest.approx(3.98)
    assert m.day_change == 0
    assert m.day_change_percent == 0


def test_metrics_loss(btc_wallet):
    m = btc_wallet.get_portfolio_metrics({"BTCUSDT": 40_000})
    assert m.profit_loss == pytest.approx(-20.1)
    assert m.profit_loss < 0
    assert m.profit_loss_percent < 0


def test_fees_alone_show_as_loss(btc_wallet):
    m = btc_wallet.get_portfolio_metrics({"BTCUSDT": 50_000})
    assert m.profit_loss == pytest.approx(-0.1)


def test_deposit_does_not_count_as_profit(btc_wallet):
    btc_wallet.deposit(1_000)
    m = btc_wallet.get_portfolio_metrics({"BTCUSDT": 50_000})
    assert m.profit_loss == pytest.approx(-0.1)


def test_percent_is_zero_without_deposits(clock):
    w = Wallet(settings=PaperTradingConfig(initial_balance=0), clock=clock)
    w.set_tier(UserTier.PRO)
    assert w.claim_daily_bonus().success

    m = w.get_portfolio_metrics({})
    assert m.profit_loss == pytest.approx(100)
    assert m.profit_loss_percent == 0.0


def test_missing_price_values_holding_at_zero(btc_wallet):
    assert btc_wallet.get_portfolio_value({}) == pytest.approx(399.9)
    assert btc_wallet.get_portfolio_value({"BTCUSDT": float("nan")}) == pytest.approx(399.9)

    [row] = btc_wallet.get_holdings_with_value({})
    assert row.current_price == 0.0
    assert row.current_value == 0.0
    assert row.pnl == pytest.approx(-100)
    assert row.pnl_percent == pytest.approx(-100)


def test_holdings_sorted_by_current_value(rich_wallet):
    rich_wallet.buy("BTCUSDT", 1_000, 50_000, name="Bitcoin")
    rich_wallet.buy("ETHUSDT", 3_000, 3_000)

    rows = rich_wallet.get_holdings_with_value({"BTCUSDT": 50_000, "ETHUSDT": 3_000})

    assert [r.symbol for r in rows] == ["ETHUSDT", "BTCUSDT"]
    assert rows[0].name == "ETHUSDT"
    assert rows[1].name == "Bitcoin"
    assert rows[0].current_value == pytest.approx(3_000)


def test_value_holding_pnl():
    row = value_holding(Holding("SOLUSDT", 10, 100.0), 120.0)
    assert row.cost_basis == 1_000
    assert row.current_value == 1_200
    assert row.pnl == 200
    assert row.pnl_percent == pytest.approx(20)


def test_module_functions_on_plain_state():
    state = WalletState(cash_balance=0.0, initial_deposit=0.0)
    state.holdings["X"] = Holding("X", 2, 5.0)
    assert get_portfolio_value(state, {"X": 10}) == 20
    m = get_portfolio_metrics(state, {"X": 10})
    assert m.profit_loss == 20
    assert m.profit_loss_percent == 0.0
