"""Pydantic schemas for Trade API."""

from datetime import datetime, timezone
from pydantic import BaseModel, Field, field_validator, model_validator


def _as_utc(value: datetime | None) -> datetime | None:
    """Naive timestamps are taken to be UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class TradeCreate(BaseModel):
    model_config = {"allow_inf_nan": False}

    ticker: str = Field(min_length=1, max_length=30)
    date_entry: datetime
    date_exit: datetime | None = None
    price_entry: float
    price_stop: float
    price_tp: str | None = None
    price_exit: float | None = None
    contracts: float = Field(gt=0)
    multiplier: float = Field(default=1.0, gt=0)
    max_win_r: float | None = None
    reason_for_loss: str | None = None
    win_optimization: str | None = None
    screenshots: str | None = None
    tags: str | None = None
    notes: str | None = None

    @field_validator("ticker")
    @classmethod
    def _normalize_ticker(cls, value: str) -> str:
        text = value.strip()
        if not text:
            raise ValueError("must not be empty")
        return text.upper()

    @field_validator("price_tp")
    @classmethod
    def _blank_tp_is_none(cls, value: str | None) -> str | None:
        if value is None:
            return None
        text = value.strip()
        return text or None

    @field_validator("date_entry", "date_exit")
    @classmethod
    def _normalize_dates(cls, value: datetime | None) -> datetime | None:
        return _as_utc(value)

    @model_validator(mode="after")
    def _validate_dates(self):
        if self.date_exit is None:
            return self
        if self.date_exit < self.date_entry:
            raise ValueError("date_exit must not be before date_entry")
        return self


class TradeUpdate(BaseModel):
    """Exit-side and review fields. Inputs and the derived snapshot are immutable."""

    model_config = {"allow_inf_nan": False}

    date_exit: datetime | None = None
    price_exit: float | None = None
    analysed: bool | None = None
    max_win_r: float | None = None
    reason_for_loss: str | None = None
    win_optimization: str | None = None
    screenshots: str | None = None
    tags: str | None = None
    notes: str | None = None

    @field_validator("date_exit")
    @classmethod
    def _normalize_exit(cls, value: datetime | None) -> datetime | None:
        return _as_utc(value)

    @field_validator("analysed")
    @classmethod
    def _analysed_not_null(cls, value: bool | None) -> bool:
        if value is None:
            raise ValueError("must not be null")
        return value


class TradeRead(BaseModel):
    id: int
    trader_id: int
    trade_number: int
    ticker: str
    date_entry: datetime
    date_exit: datetime | None
    price_entry: float
    price_stop: float
    price_tp: str | None
    price_exit: float | None
    contracts: float
    multiplier: float
    trade_r: float | None
    nett_r: float | None
    sum_r: float | None
    planned_risk_usd: float | None
    usd_at_risk: float | None
    risk_r_factor: float | None
    pnl_usd: float | None
    equity_before: float | None
    equity_after: float | None
    level: int
    level_to_go: int
    risk_pct: float | None
    normal_risk_pct: float | None
    power_norm: float | None
    analysed: bool
    max_win_r: float | None
    reason_for_loss: str | None
    win_optimization: str | None
    screenshots: str | None
    tags: str | None
    notes: str | None
    created_at: datetime

    model_config = {"from_attributes": True}
