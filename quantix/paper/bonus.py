"""Tier-gated daily cash bonus.

One claim per calendar day, compared as ISO date strings rather than a
24-hour window, so a claim at 23:59 allows another at 00:00.
"""
from __future__ import annotations
from datetime import date
from typing import Dict, Mapping, Optional

from .results import TradeError
from .state import UserTier, WalletState
from ..config.schemas import DEFAULT_DAILY_BONUS


class DailyBonus:
    """Bonus amount table and claim preconditions."""

    def __init__(self, amounts: Optional[Mapping[str, float]] = None):
        self.amounts: Dict[str, float] = dict(amounts if amounts is not None else DEFAULT_DAILY_BONUS)

    def amount_for(self, tier: UserTier) -> float:
        return float(self.amounts.get(UserTier(tier).value, 0.0))

    def check(self, state: WalletState, today: date) -> Optional[TradeError]:
        """Return the reason a claim is refused today, or None if allowed."""
        if state.last_bonus_claim == today.isoformat():
            return TradeError.ALREADY_CLAIMED
        if self.amount_for(state.tier) <= 0:
            return TradeError.UPGRADE_REQUIRED
        return None
