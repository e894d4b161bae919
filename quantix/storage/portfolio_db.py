"""DuckDB-backed mirror of a paper wallet (transactions, holdings, equity).

The JSON record in quantix.paper.io is the wallet's source of truth; this
database is an append-only history that dashboards and reports can query.
"""
from __future__ import annotations
from datetime import datetime, timezone
from pathlib import Path
from typing import Mapping, Optional
import duckdb  # type: ignore
import pandas as pd

from quantix.paper.state import WalletState
from quantix.paper.valuation import get_portfolio_value
from quantix.utils.logging import get_logger

LOGGER = get_logger(__name__)


def _utc(ts: datetime) -> datetime:
    """Naive UTC for TIMESTAMP columns; naive inputs are taken as UTC already."""
    if ts.tzinfo is None:
        return ts
    return ts.astimezone(timezone.utc).replace(tzinfo=None)


def connect(db_path: Optional[str | Path] = None):
    """Open (and create) the mirror database; storage.db_path when no path is given."""
    if db_path is None:
        from quantix.config.manager import get_config
        db_path = get_config().get("storage.db_path", "data/wallet.duckdb")
    p = Path(db_path)
    p.parent.mkdir(parents=True, exist_ok=True)
    con = duckdb.connect(str(p))
    ensure_schema(con)
    return con


def ensure_schema(con) -> None:  # type: ignore
    con.execute(
        """
        CREATE TABLE IF NOT EXISTS wallet_transactions (
            id VARCHAR PRIMARY KEY,
            wallet_id VARCHAR,
            ts TIMESTAMP,
            kind VARCHAR,
            order_kind VARCHAR,
            symbol VARCHAR,
            quantity DOUBLE,
            price DOUBLE,
            gross_value DOUBLE,
            fee DOUBLE,
            slippage DOUBLE
        );
        """
    )
    con.execute(
        """
        CREATE TABLE IF NOT EXISTS wallet_holdings (
            ts TIMESTAMP,
            wallet_id VARCHAR,
            symbol VARCHAR,
            quantity DOUBLE,
            average_cost DOUBLE
        );
        """
    )
    con.execute(
        """
        CREATE TABLE IF NOT EXISTS wallet_equity (
            ts TIMESTAMP,
            wallet_id VARCHAR,
            equity DOUBLE,
            cash DOUBLE
        );
        """
    )


def record_snapshot(
    con,
    *,
    ts: datetime,
    state: WalletState,
    prices: Mapping[str, float],
    wallet_id: str = "default",
) -> int:
    """Mirror the wallet into trades, holdings and equity tables.

    Transactions already stored (by id) are skipped, so calling this after
    every tick is safe. Returns the number of new transactions written.
    """
    known = {
        row[0]
        for row in con.execute(
            "SELECT id FROM wallet_transactions WHERE wallet_id = ?", (wallet_id,)
        ).fetchall()
    }
    written = 0
    # oldest first so insertion order follows execution order
    for tx in reversed(state.transactions):
        if tx.id in known:
            continue
        con.execute(
            """
            INSERT INTO wallet_transactions
            (id, wallet_id, ts, kind, order_kind, symbol, quantity, price, gross_value, fee, slippage)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                tx.id, wallet_id, _utc(tx.timestamp), tx.kind.value,
                tx.order_kind.value if tx.order_kind else None, tx.symbol,
                float(tx.quantity), float(tx.execution_price), float(tx.gross_value),
                float(tx.fee), tx.slippage,
            ),
        )
        written += 1

    for h in state.holdings.values():
        con.execute(
            """
            INSERT INTO wallet_holdings (ts, wallet_id, symbol, quantity, average_cost)
            VALUES (?, ?, ?, ?, ?)
            """,
            (_utc(ts), wallet_id, h.symbol, float(h.quantity), float(h.average_cost)),
        )

    equity = get_portfolio_value(state, prices)
    con.execute(
        """
        INSERT INTO wallet_equity (ts, wallet_id, equity, cash) VALUES (?, ?, ?, ?)
        """,
        (_utc(ts), wallet_id, float(equity), float(state.cash_balance)),
    )
    if written:
        LOGGER.info(f"Mirrored {written} new transactions for wallet {wallet_id}")
    return written


def load_equity_curve(con, wallet_id: str = "default") -> pd.DataFrame:
    return con.execute(
        "SELECT ts, equity, cash FROM wallet_equity WHERE wallet_id = ? ORDER BY ts",
        (wallet_id,),
    ).df()


def load_transactions(con, wallet_id: str = "default", symbol: Optional[str] = None) -> pd.DataFrame:
    query = "SELECT * FROM wallet_transactions WHERE wallet_id = ?"
    params = [wallet_id]
    if symbol is not None:
        query += " AND symbol = ?"
        params.append(symbol)
    return con.execute(query + " ORDER BY ts", params).df()
