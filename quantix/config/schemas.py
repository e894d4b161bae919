"""Pydantic schemas for configuration validation."""
from __future__ import annotations
from typing import Dict
from pydantic import BaseModel, Field, field_validator


DEFAULT_DAILY_BONUS = {
    "free": 0.0,
    "starter": 50.0,
    "pro": 100.0,
    "ultimate": 2000.0,
}


class PaperTradingConfig(BaseModel):
    """Paper wallet ledger configuration."""
    initial_balance: float = Field(default=500.0, ge=0, description="Cash seeded on creation and reset")
    fee_rate: float = Field(default=0.001, ge=0, lt=1, description="Trading fee as a fraction of notional")
    slippage_enabled: bool = Field(default=True, description="Simulate unfavorable execution slippage")
    max_slippage_percent: float = Field(default=5.0, gt=0, lt=100, description="Upper bound accepted by set_slippage")
    slippage_percent: float = Field(default=0.1, ge=0, description="Maximum slippage in percent of price")
    limit_order_expiry_days: float = Field(default=7.0, gt=0, description="Lifetime of plain limit orders")
    dust_epsilon: float = Field(default=1e-8, gt=0, description="Holdings below this quantity are removed")
    max_transactions: int = Field(default=100, ge=1, description="Transactions kept in the persisted record")
    max_journal_entries: int = Field(default=200, ge=1, description="Journal entries kept in the persisted record")
    daily_bonus: Dict[str, float] = Field(
        default_factory=lambda: dict(DEFAULT_DAILY_BONUS),
        description="Daily bonus amount per subscription tier",
    )

    @field_validator("slippage_percent")
    @classmethod
    def validate_slippage_below_cap(cls, v, info):
        cap = info.data.get("max_slippage_percent")
        if cap is not None and v > cap:
            raise ValueError("slippage_percent must not exceed max_slippage_percent")
        return v

    @field_validator("daily_bonus")
    @classmethod
    def validate_bonus_amounts(cls, v):
        for tier, amount in v.items():
            if amount < 0:
                raise ValueError(f"daily bonus for tier '{tier}' must be non-negative")
        return v


class OrderMonitorConfig(BaseModel):
    """Background order-check poller configuration."""
    check_interval_seconds: float = Field(default=5.0, gt=0, description="Seconds between trigger passes")


class StorageConfig(BaseModel):
    """Where collaborators persist wallet state."""
    state_path: str = Field(default="data/wallet_state.json", description="JSON state record")
    db_path: str = Field(default="data/wallet.duckdb", description="DuckDB history mirror")


class Config(BaseModel):
    """Main configuration schema."""
    paper_trading: PaperTradingConfig = Field(default_factory=PaperTradingConfig)
    order_monitor: OrderMonitorConfig = Field(default_factory=OrderMonitorConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
