from __future__ import annotations
import json
from pathlib import Path

import pytest

from quantix.config.schemas import PaperTradingConfig
from quantix.paper.io import from_record, load_state, save_state, to_record
from quantix.paper.state import OrderStatus, UserTier
from quantix.paper.wallet import Wallet


def test_save_load_roundtrip(tmp_path: Path, btc_wallet):
    btc_wallet.set_tier(UserTier.PRO)
    btc_wallet.claim_daily_bonus()
    order_id = btc_wallet.place_stop_loss("BTCUSDT", 0.001, 45_000).order_id
    btc_wallet.add_journal_note(btc_wallet.state.transactions[0].id, "bonus day", ["bonus"])

    p = tmp_path / "nested" / "state.json"
    save_state(btc_wallet.state, p)
    loaded = load_state(p)

    assert loaded.cash_balance == pytest.approx(btc_wallet.cash_balance)
    assert loaded.initial_deposit == 500
    assert loaded.holdings["BTCUSDT"].quantity == pytest.approx(0.002)
    assert loaded.holdings["BTCUSDT"].name == "Bitcoin"
    assert loaded.transactions == btc_wallet.state.transactions
    assert loaded.find_order(order_id).target_price == 45_000
    assert loaded.find_order(order_id).status is OrderStatus.PENDING
    assert loaded.journal_entries[0].tags == ["bonus"]
    assert loaded.tier is UserTier.PRO
    assert loaded.last_bonus_claim == "2025-01-15"
    assert loaded.slippage_enabled is False


def test_record_is_json_safe(btc_wallet):
    btc_wallet.place_limit_order("buy", "ETHUSDT", 50, 2_000)
    record = btc_wallet.to_record()
    assert json.loads(json.dumps(record)) == record


def test_terminal_orders_are_not_persisted(btc_wallet):
    keep = btc_wallet.place_stop_loss("BTCUSDT", 0.001, 45_000).order_id
    drop = btc_wallet.place_take_profit("BTCUSDT", 0.001, 60_000).order_id
    btc_wallet.cancel_order(drop)

    record = btc_wallet.to_record()

    assert [o["id"] for o in record["pending_orders"]] == [keep]


def test_transaction_cap_keeps_newest(rich_wallet):
    for _ in range(150):
        rich_wallet.buy("ETHUSDT", 10, 3_000)

    record = rich_wallet.to_record()

    assert len(rich_wallet.state.transactions) == 151
    assert len(record["transactions"]) == 100
    assert record["transactions"][0]["id"] == rich_wallet.state.transactions[0].id


def test_journal_cap_keeps_newest(wallet):
    for i in range(250):
        wallet.add_journal_note(f"tx{i}", f"note {i}")

    record = wallet.to_record()

    assert len(record["journal_entries"]) == 200
    assert record["journal_entries"][0]["note"] == "note 50"
    assert record["journal_entries"][-1]["note"] == "note 249"


def test_caps_follow_settings(clock):
    settings = PaperTradingConfig(slippage_enabled=False, max_transactions=2)
    w = Wallet(settings=settings, clock=clock)
    w.deposit(1)
    w.deposit(2)
    assert [t["gross_value"] for t in w.to_record()["transactions"]] == [2, 1]


def test_unsupported_version(wallet):
    record = to_record(wallet.state)
    record["version"] = 99
    with pytest.raises(ValueError):
        from_record(record)


def test_wallet_from_record_resumes_trading(btc_wallet, clock):
    order_id = btc_wallet.place_take_profit("BTCUSDT", 0.002, 55_000).order_id
    restored = Wallet.from_record(btc_wallet.to_record(), btc_wallet.settings, clock=clock)

    restored.check_and_execute_orders({"BTCUSDT": 56_000})

    assert restored.get_order(order_id).status is OrderStatus.FILLED
    assert restored.cash_balance == pytest.approx(509.79)
    # the source wallet is unaffected
    assert btc_wallet.get_order(order_id).is_pending
