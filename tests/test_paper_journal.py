from __future__ import annotations

from quantix.paper.journal import Journal
from quantix.paper.state import WalletState


def test_add_note(btc_wallet, clock):
    tx_id = btc_wallet.state.transactions[0].id

    entry = btc_wallet.add_journal_note(tx_id, "Breakout entry", ["breakout", "btc"])

    assert entry.transaction_id == tx_id
    assert entry.tags == ["breakout", "btc"]
    assert entry.created_at == clock.now
    assert entry.updated_at == clock.now
    assert btc_wallet.get_journal_for_transaction(tx_id) is entry


def test_update_note_keeps_tags_when_omitted(btc_wallet, clock):
    tx_id = btc_wallet.state.transactions[0].id
    entry = btc_wallet.add_journal_note(tx_id, "first", ["a"])
    clock.advance(hours=2)

    updated = btc_wallet.update_journal_note(entry.id, "second")

    assert updated is entry
    assert entry.note == "second"
    assert entry.tags == ["a"]
    assert entry.updated_at == clock.now
    assert entry.created_at < entry.updated_at


def test_update_note_replaces_tags(btc_wallet):
    entry = btc_wallet.add_journal_note(btc_wallet.state.transactions[0].id, "x", ["a"])
    btc_wallet.update_journal_note(entry.id, "y", [])
    assert entry.tags == []


def test_update_missing_note(wallet):
    assert wallet.update_journal_note("nope", "text") is None


def test_first_note_wins(btc_wallet):
    tx_id = btc_wallet.state.transactions[0].id
    first = btc_wallet.add_journal_note(tx_id, "one")
    btc_wallet.add_journal_note(tx_id, "two")
    assert btc_wallet.get_journal_for_transaction(tx_id) is first


def test_notes_never_touch_transactions(btc_wallet):
    before = list(btc_wallet.state.transactions)
    btc_wallet.add_journal_note("unknown-tx", "soft reference")
    assert btc_wallet.state.transactions == before
    assert btc_wallet.get_journal_for_transaction("missing") is None


def test_journal_on_bare_state():
    state = WalletState()
    journal = Journal(state)
    entry = journal.add_note("t1", "hello")
    assert state.journal_entries == [entry]
    assert journal.get_for_transaction("t1") is entry
