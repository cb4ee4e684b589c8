"""Trade model — one logged position with its frozen derived snapshot."""

from datetime import datetime, timezone

from sqlalchemy import Index
from sqlmodel import SQLModel, Field


class Trade(SQLModel, table=True):
    __tablename__ = "trade"
    __table_args__ = (
        Index("ix_trade_trader_number_unique", "trader_id", "trade_number", unique=True),
    )

    id: int | None = Field(default=None, primary_key=True)
    trader_id: int = Field(foreign_key="trader.id", index=True)
    trade_number: int

    # Inputs
    ticker: str = Field(max_length=30)
    date_entry: datetime
    price_entry: float
    price_stop: float
    price_tp: str | None = None  # "size@price, price, ..." partial take-profits
    contracts: float
    multiplier: float = 1.0

    # Exit side, editable after creation
    date_exit: datetime | None = None
    price_exit: float | None = None

    # Derived at creation time, never recomputed
    trade_r: float | None = None
    nett_r: float | None = None
    sum_r: float | None = None
    planned_risk_usd: float | None = None
    usd_at_risk: float | None = None
    risk_r_factor: float | None = None
    pnl_usd: float | None = None
    equity_before: float | None = None
    equity_after: float | None = None
    level: int = 0
    level_to_go: int = 0
    risk_pct: float | None = None
    normal_risk_pct: float | None = None
    power_norm: float | None = None

    # Review
    analysed: bool = False
    max_win_r: float | None = None
    reason_for_loss: str | None = None
    win_optimization: str | None = None
    screenshots: str | None = None
    tags: str | None = None
    notes: str | None = None

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
