"""Trade journal reporting.

Flattens a wallet's transaction log into a DataFrame with journal notes
attached, and summarizes what trading cost in fees and slippage.
"""
from __future__ import annotations
from typing import Any, Dict
import pandas as pd

from ..paper.state import TransactionKind, WalletState

COLUMNS = [
    "id", "timestamp", "kind", "order_kind", "symbol", "quantity",
    "price", "gross_value", "fee", "slippage", "note", "tags",
]


def transactions_frame(state: WalletState) -> pd.DataFrame:
    """One row per transaction, oldest first, with the first journal note per transaction."""
    notes: Dict[str, Any] = {}
    for entry in state.journal_entries:
        notes.setdefault(entry.transaction_id, entry)

    rows = []
    for tx in reversed(state.transactions):
        entry = notes.get(tx.id)
        rows.append({
            "id": tx.id,
            "timestamp": tx.timestamp,
            "kind": tx.kind.value,
            "order_kind": tx.order_kind.value if tx.order_kind else None,
            "symbol": tx.symbol,
            "quantity": tx.quantity,
            "price": tx.execution_price,
            "gross_value": tx.gross_value,
            "fee": tx.fee,
            "slippage": tx.slippage or 0.0,
            "note": entry.note if entry else None,
            "tags": list(entry.tags) if entry else [],
        })
    return pd.DataFrame(rows, columns=COLUMNS)


def cost_summary(state: WalletState) -> Dict[str, Any]:
    """Fees paid, slippage cost and trade counts.

    Slippage cost is price deviation × units, i.e. the cash lost to slippage.
    """
    df = transactions_frame(state)
    trades = df[df["kind"].isin([TransactionKind.BUY.value, TransactionKind.SELL.value])]
    if trades.empty:
        return {
            "trades": 0,
            "total_fees": 0.0,
            "slippage_cost": 0.0,
            "by_kind": {},
            "by_order_kind": {},
            "journaled": 0,
        }

    return {
        "trades": int(len(trades)),
        "total_fees": float(trades["fee"].sum()),
        "slippage_cost": float((trades["slippage"] * trades["quantity"]).sum()),
        "by_kind": {k: int(v) for k, v in trades["kind"].value_counts().items()},
        "by_order_kind": {k: int(v) for k, v in trades["order_kind"].value_counts().items()},
        "journaled": int(trades["note"].notna().sum()),
    }
