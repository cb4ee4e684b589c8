"""Pydantic schemas for Trader API."""

from datetime import datetime
from pydantic import BaseModel, Field, field_validator

from logbook.utils.constants import DEFAULT_ACCOUNT_START, PIN_MAX_LENGTH, PIN_MIN_LENGTH


def _trim_name(value: str) -> str:
    text = value.strip()
    if not text:
        raise ValueError("must not be empty")
    return text


class TraderRegister(BaseModel):
    model_config = {"allow_inf_nan": False}

    name: str = Field(min_length=1, max_length=50)
    pin: str = Field(min_length=PIN_MIN_LENGTH, max_length=PIN_MAX_LENGTH)
    account_start: float = Field(default=DEFAULT_ACCOUNT_START, gt=0)

    @field_validator("name")
    @classmethod
    def _trim_required_name(cls, value: str) -> str:
        return _trim_name(value)


class TraderLogin(BaseModel):
    name: str = Field(min_length=1, max_length=50)
    pin: str = Field(min_length=1)

    @field_validator("name")
    @classmethod
    def _trim_required_name(cls, value: str) -> str:
        return _trim_name(value)


class TraderSettings(BaseModel):
    """Full, validated risk configuration for one trader."""

    model_config = {"allow_inf_nan": False}

    account_start: float = Field(gt=0)
    base_risk_pct: float = Field(gt=0, le=1)
    risk_multiplier: float = Field(gt=0)
    stepsize_up: float = Field(gt=0)
    target_ev: float
    gamification_enabled: bool


class TraderSettingsUpdate(BaseModel):
    model_config = {"allow_inf_nan": False}

    account_start: float | None = Field(default=None, gt=0)
    base_risk_pct: float | None = Field(default=None, gt=0, le=1)
    risk_multiplier: float | None = Field(default=None, gt=0)
    stepsize_up: float | None = Field(default=None, gt=0)
    target_ev: float | None = None
    gamification_enabled: bool | None = None


class TraderRead(BaseModel):
    id: int
    name: str
    account_start: float
    base_risk_pct: float
    risk_multiplier: float
    stepsize_up: float
    target_ev: float
    gamification_enabled: bool
    created_at: datetime

    model_config = {"from_attributes": True}
