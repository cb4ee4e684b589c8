"""Trader model — one journal participant and their risk configuration."""

from datetime import datetime, timezone
from sqlmodel import SQLModel, Field

from logbook.utils.constants import (
    DEFAULT_ACCOUNT_START,
    DEFAULT_BASE_RISK_PCT,
    DEFAULT_RISK_MULTIPLIER,
    DEFAULT_STEPSIZE_UP,
    DEFAULT_TARGET_EV,
)


class Trader(SQLModel, table=True):
    __tablename__ = "trader"

    id: int | None = Field(default=None, primary_key=True)
    name: str = Field(unique=True, index=True, max_length=50)
    pin_hash: str

    # Risk & sizing
    account_start: float = DEFAULT_ACCOUNT_START
    base_risk_pct: float = DEFAULT_BASE_RISK_PCT  # fraction of equity risked at level 0
    risk_multiplier: float = DEFAULT_RISK_MULTIPLIER  # per-level compounding factor
    stepsize_up: float = DEFAULT_STEPSIZE_UP  # cumulative R needed to level up
    target_ev: float = DEFAULT_TARGET_EV
    gamification_enabled: bool = True

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
