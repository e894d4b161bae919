"""Storage module for Quantix.

DuckDB mirror of paper wallets for history queries and dashboards.
"""
from quantix.storage.portfolio_db import (
    connect,
    ensure_schema,
    record_snapshot,
    load_equity_curve,
    load_transactions,
)

__all__ = [
    "connect",
    "ensure_schema",
    "record_snapshot",
    "load_equity_curve",
    "load_transactions",
]
