"""Reporting utilities."""

from .trade_journal import transactions_frame, cost_summary

__all__ = [
    "transactions_frame",
    "cost_summary",
]
