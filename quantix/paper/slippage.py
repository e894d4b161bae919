"""Simulated execution slippage.

Slippage is always unfavorable to the trader:
- BUY:  executed = price × (1 + u / 100)
- SELL: executed = price × (1 - u / 100)
with u drawn uniformly from [0, max_percent).

The random source is injected so tests can seed it or pin the draw.
"""
from __future__ import annotations
from typing import Optional
import numpy as np

from .state import OrderSide


class SlippageModel:
    """Uniform random slippage driven by a numpy Generator."""

    def __init__(self, rng: Optional[np.random.Generator] = None, seed: Optional[int] = None):
        self.rng = rng if rng is not None else np.random.default_rng(seed)

    def draw_percent(self, max_percent: float) -> float:
        """Slippage in percent of price for one execution."""
        if max_percent <= 0:
            return 0.0
        return float(self.rng.uniform(0.0, max_percent))

    def execution_price(self, price: float, max_percent: float, side: OrderSide) -> float:
        offset = price * (self.draw_percent(max_percent) / 100.0)
        return price + offset if side is OrderSide.BUY else price - offset


class FixedSlippage(SlippageModel):
    """Deterministic slippage at a fixed fraction of the allowed maximum.

    fraction=0 never slips, fraction=1 always takes the worst allowed price.
    """

    def __init__(self, fraction: float = 0.0):
        if not 0.0 <= fraction <= 1.0:
            raise ValueError(f"fraction must be within [0, 1], got {fraction}")
        super().__init__(seed=0)
        self.fraction = fraction

    def draw_percent(self, max_percent: float) -> float:
        if max_percent <= 0:
            return 0.0
        return max_percent * self.fraction
