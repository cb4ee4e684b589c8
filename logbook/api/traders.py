"""Trader settings API."""

from fastapi import APIRouter, Depends, HTTPException
from pydantic import ValidationError
from sqlmodel import Session, select

from logbook.database import get_session
from logbook.models.trader import Trader
from logbook.schemas.trader import TraderRead, TraderSettings, TraderSettingsUpdate
from logbook.api.deps import get_current_trader

router = APIRouter(prefix="/api/traders", tags=["traders"], dependencies=[Depends(get_current_trader)])


@router.get("", response_model=list[TraderRead])
def list_traders(session: Session = Depends(get_session)):
    return session.exec(select(Trader).order_by(Trader.id)).all()


@router.put("/me", response_model=TraderRead)
def update_settings(
    data: TraderSettingsUpdate,
    trader: Trader = Depends(get_current_trader),
    session: Session = Depends(get_session),
):
    update_data = data.model_dump(exclude_unset=True)

    # Validate the merged configuration so a partial update cannot leave it inconsistent.
    merged = {**trader.model_dump(), **update_data}
    try:
        TraderSettings.model_validate(merged)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors(include_url=False))

    for key, value in update_data.items():
        setattr(trader, key, value)

    session.add(trader)
    session.commit()
    session.refresh(trader)
    return trader
