"""
Pytest Configuration and Fixtures
==================================
Shared fixtures and configuration for all tests.
"""
import os
import sys
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path

import numpy as np
import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

# Keep test logs out of the working tree
os.environ.setdefault("QUANTIX_LOG_DIR", tempfile.mkdtemp(prefix="quantix-logs-"))

from quantix.config.schemas import PaperTradingConfig  # noqa: E402
from quantix.paper.slippage import SlippageModel  # noqa: E402
from quantix.paper.wallet import Wallet  # noqa: E402

START = datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Manually advanced wall clock."""

    def __init__(self, now: datetime = START):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def wallet(clock) -> Wallet:
    """Fresh $500 wallet with slippage disabled."""
    return Wallet(settings=PaperTradingConfig(slippage_enabled=False), clock=clock)


@pytest.fixture
def rich_wallet(clock) -> Wallet:
    """$100k wallet with slippage disabled."""
    settings = PaperTradingConfig(initial_balance=100_000.0, slippage_enabled=False)
    return Wallet(settings=settings, clock=clock)


@pytest.fixture
def btc_wallet(wallet) -> Wallet:
    """$500 wallet holding 0.002 BTC bought with $100 at 50,000."""
    result = wallet.buy("BTCUSDT", 100, 50_000, name="Bitcoin")
    assert result.success
    return wallet


@pytest.fixture
def seeded_slippage() -> SlippageModel:
    return SlippageModel(rng=np.random.default_rng(42))
