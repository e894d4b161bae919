"""Wallet state <-> storage record.

`to_record` / `from_record` are pure: they map a WalletState to a JSON-safe
dict and back without touching any storage. `save_state` / `load_state` are
the file-backed convenience layer on top.

The record holds exactly the load-bearing fields: balances, holdings, the
most recent transactions, non-terminal orders, the most recent journal
entries, tier, last bonus claim and slippage settings.
"""
from __future__ import annotations
import json
from dataclasses import asdict
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from .state import (
    Holding,
    JournalEntry,
    OrderKind,
    OrderSide,
    OrderStatus,
    PendingOrder,
    Transaction,
    TransactionKind,
    UserTier,
    WalletState,
)

RECORD_VERSION = 1
DEFAULT_MAX_TRANSACTIONS = 100
DEFAULT_MAX_JOURNAL_ENTRIES = 200


def _ts(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _parse_ts(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


def _transaction_to_dict(tx: Transaction) -> Dict[str, Any]:
    return {
        "id": tx.id,
        "kind": tx.kind.value,
        "symbol": tx.symbol,
        "quantity": tx.quantity,
        "execution_price": tx.execution_price,
        "gross_value": tx.gross_value,
        "fee": tx.fee,
        "timestamp": _ts(tx.timestamp),
        "slippage": tx.slippage,
        "order_kind": tx.order_kind.value if tx.order_kind else None,
        "name": tx.name,
    }


def _transaction_from_dict(d: Dict[str, Any]) -> Transaction:
    return Transaction(
        id=d["id"],
        kind=TransactionKind(d["kind"]),
        symbol=d["symbol"],
        quantity=float(d["quantity"]),
        execution_price=float(d["execution_price"]),
        gross_value=float(d["gross_value"]),
        fee=float(d["fee"]),
        timestamp=_parse_ts(d["timestamp"]),
        slippage=d.get("slippage"),
        order_kind=OrderKind(d["order_kind"]) if d.get("order_kind") else None,
        name=d.get("name", ""),
    )


def _order_to_dict(o: PendingOrder) -> Dict[str, Any]:
    return {
        "id": o.id,
        "kind": o.kind.value,
        "side": o.side.value,
        "symbol": o.symbol,
        "amount": o.amount,
        "target_price": o.target_price,
        "created_at": _ts(o.created_at),
        "expires_at": _ts(o.expires_at),
        "status": o.status.value,
        "filled_at": _ts(o.filled_at),
        "name": o.name,
    }


def _order_from_dict(d: Dict[str, Any]) -> PendingOrder:
    return PendingOrder(
        id=d["id"],
        kind=OrderKind(d["kind"]),
        side=OrderSide(d["side"]),
        symbol=d["symbol"],
        amount=float(d["amount"]),
        target_price=float(d["target_price"]),
        created_at=_parse_ts(d["created_at"]),
        expires_at=_parse_ts(d.get("expires_at")),
        status=OrderStatus(d.get("status", OrderStatus.PENDING.value)),
        filled_at=_parse_ts(d.get("filled_at")),
        name=d.get("name"),
    )


def _journal_to_dict(e: JournalEntry) -> Dict[str, Any]:
    return {
        "id": e.id,
        "transaction_id": e.transaction_id,
        "note": e.note,
        "tags": list(e.tags),
        "created_at": _ts(e.created_at),
        "updated_at": _ts(e.updated_at),
    }


def _journal_from_dict(d: Dict[str, Any]) -> JournalEntry:
    return JournalEntry(
        id=d["id"],
        transaction_id=d["transaction_id"],
        note=d["note"],
        tags=list(d.get("tags", [])),
        created_at=_parse_ts(d.get("created_at")),
        updated_at=_parse_ts(d.get("updated_at")),
    )


def to_record(
    state: WalletState,
    *,
    max_transactions: int = DEFAULT_MAX_TRANSACTIONS,
    max_journal_entries: int = DEFAULT_MAX_JOURNAL_ENTRIES,
) -> Dict[str, Any]:
    """Serialize the persisted subset of a wallet to a JSON-safe dict."""
    return {
        "version": RECORD_VERSION,
        "cash_balance": state.cash_balance,
        "initial_deposit": state.initial_deposit,
        "holdings": {sym: asdict(h) for sym, h in state.holdings.items()},
        "transactions": [_transaction_to_dict(t) for t in state.transactions[:max_transactions]],
        "pending_orders": [_order_to_dict(o) for o in state.pending_orders if o.is_pending],
        # journal is oldest-first; keep the newest entries
        "journal_entries": [_journal_to_dict(e) for e in state.journal_entries[-max_journal_entries:]],
        "tier": state.tier.value,
        "last_bonus_claim": state.last_bonus_claim,
        "slippage_enabled": state.slippage_enabled,
        "slippage_percent": state.slippage_percent,
    }


def from_record(record: Dict[str, Any]) -> WalletState:
    """Rebuild a WalletState from a record produced by to_record.

    Raises:
        ValueError: On an unsupported record version or unknown enum values.
    """
    version = record.get("version", RECORD_VERSION)
    if version != RECORD_VERSION:
        raise ValueError(f"Unsupported wallet record version: {version}")

    return WalletState(
        cash_balance=float(record["cash_balance"]),
        initial_deposit=float(record["initial_deposit"]),
        holdings={
            sym: Holding(
                symbol=h["symbol"],
                quantity=float(h["quantity"]),
                average_cost=float(h["average_cost"]),
                name=h.get("name"),
            )
            for sym, h in record.get("holdings", {}).items()
        },
        transactions=[_transaction_from_dict(t) for t in record.get("transactions", [])],
        pending_orders=[_order_from_dict(o) for o in record.get("pending_orders", [])],
        journal_entries=[_journal_from_dict(e) for e in record.get("journal_entries", [])],
        tier=UserTier(record.get("tier", UserTier.FREE.value)),
        last_bonus_claim=record.get("last_bonus_claim"),
        slippage_enabled=bool(record.get("slippage_enabled", True)),
        slippage_percent=float(record.get("slippage_percent", 0.1)),
    )


def save_state(state: WalletState, path: str | Path, **caps: int) -> None:
    """Write the wallet record as JSON, creating parent directories."""
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    with p.open("w", encoding="utf-8") as f:
        json.dump(to_record(state, **caps), f, indent=2)


def load_state(path: str | Path) -> WalletState:
    p = Path(path)
    with p.open("r", encoding="utf-8") as f:
        return from_record(json.load(f))
