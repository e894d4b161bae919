from __future__ import annotations
import threading

import pytest

from quantix.config import ConfigManager
from quantix.paper.results import TradeError
from quantix.paper.wallet import Wallet


def test_from_config_uses_paper_section(clock):
    config = ConfigManager.from_dict({"paper_trading": {"initial_balance": 1_000.0, "slippage_enabled": False}})
    w = Wallet.from_config(config, clock=clock)
    assert w.cash_balance == 1_000.0
    assert w.state.slippage_enabled is False
    assert w.state.transactions[0].name == "Initial Deposit"


def test_seeded_wallets_are_reproducible(clock):
    a = Wallet.from_config(ConfigManager(), seed=7, clock=clock)
    b = Wallet.from_config(ConfigManager(), seed=7, clock=clock)
    prices_a = [a.buy("BTCUSDT", 10, 50_000).executed_price for _ in range(5)]
    prices_b = [b.buy("BTCUSDT", 10, 50_000).executed_price for _ in range(5)]
    assert prices_a == prices_b
    assert all(50_000 <= p <= 50_050 for p in prices_a)


def test_wallets_are_independent(clock):
    a = Wallet(clock=clock)
    b = Wallet(clock=clock)
    a.deposit(100)
    assert b.cash_balance == 500


def test_concurrent_buys_never_overspend(wallet):
    results = []
    barrier = threading.Barrier(8)

    def worker():
        barrier.wait()
        for _ in range(10):
            results.append(wallet.buy("ETHUSDT", 10, 3_000))

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    filled = [r for r in results if r.success]
    # 49 buys of 10.01 fit in 500
    assert len(filled) == 49
    assert all(r.error is TradeError.INSUFFICIENT_BALANCE for r in results if not r.success)
    assert wallet.cash_balance == pytest.approx(500 - 49 * 10.01)
    assert wallet.cash_balance >= 0
    assert len(wallet.state.transactions) == 50


def test_trigger_pass_and_cancel_do_not_interleave(btc_wallet):
    order_id = btc_wallet.place_take_profit("BTCUSDT", 0.002, 55_000).order_id
    outcomes = {}

    def fire():
        outcomes["fired"] = btc_wallet.check_and_execute_orders({"BTCUSDT": 56_000})

    def cancel():
        outcomes["cancel"] = btc_wallet.cancel_order(order_id)

    threads = [threading.Thread(target=fire), threading.Thread(target=cancel)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    # exactly one of them wins
    assert bool(outcomes["fired"]) != outcomes["cancel"].success


def test_save_and_resume_from_config(tmp_path, btc_wallet, clock):
    state_path = tmp_path / "wallet_state.json"
    btc_wallet.save(state_path)
    config = ConfigManager.from_dict({
        "paper_trading": {"slippage_enabled": False},
        "storage": {"state_path": str(state_path)},
    })

    resumed = Wallet.from_config(config, resume=True, clock=clock)
    fresh = Wallet.from_config(config, clock=clock)

    assert resumed.get_holding("BTCUSDT").quantity == pytest.approx(0.002)
    assert resumed.cash_balance == pytest.approx(399.9)
    assert fresh.get_holding("BTCUSDT") is None
    assert Wallet.load(state_path, clock=clock).cash_balance == pytest.approx(399.9)


def test_resume_without_saved_state(tmp_path, clock):
    config = ConfigManager.from_dict({"storage": {"state_path": str(tmp_path / "none.json")}})
    assert Wallet.from_config(config, resume=True, clock=clock).cash_balance == 500
