"""Trade journal API."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session, select

from logbook.database import get_session
from logbook.models.trade import Trade
from logbook.models.trader import Trader
from logbook.schemas.trade import TradeCreate, TradeRead, TradeUpdate
from logbook.services import journal
from logbook.api.deps import get_current_trader

router = APIRouter(prefix="/api/trades", tags=["trades"], dependencies=[Depends(get_current_trader)])


def _owned_trade_or_error(session: Session, trade_id: int, trader: Trader) -> Trade:
    try:
        return journal.get_owned_trade(session, trade_id, trader)
    except journal.TradeNotFoundError:
        raise HTTPException(status_code=404, detail="Trade not found")
    except journal.NotTradeOwnerError:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Can only change your own trades",
        )


@router.get("", response_model=list[TradeRead])
def list_trades(
    trader_id: int | None = None,
    session: Session = Depends(get_session),
):
    if trader_id is not None:
        return journal.list_trader_trades(session, trader_id)
    stmt = select(Trade).order_by(Trade.date_entry.desc(), Trade.trade_number.desc())
    return session.exec(stmt).all()


@router.post("", response_model=TradeRead, status_code=201)
def create_trade(
    data: TradeCreate,
    trader: Trader = Depends(get_current_trader),
    session: Session = Depends(get_session),
):
    return journal.create_trade(session, trader, data)


@router.get("/{trade_id}", response_model=TradeRead)
def get_trade(trade_id: int, session: Session = Depends(get_session)):
    trade = session.get(Trade, trade_id)
    if not trade:
        raise HTTPException(status_code=404, detail="Trade not found")
    return trade


@router.put("/{trade_id}", response_model=TradeRead)
def update_trade(
    trade_id: int,
    data: TradeUpdate,
    trader: Trader = Depends(get_current_trader),
    session: Session = Depends(get_session),
):
    trade = _owned_trade_or_error(session, trade_id, trader)
    if not data.model_fields_set:
        raise HTTPException(status_code=400, detail="No fields to update")
    return journal.update_trade(session, trade, data)


@router.delete("/{trade_id}", status_code=204)
def delete_trade(
    trade_id: int,
    trader: Trader = Depends(get_current_trader),
    session: Session = Depends(get_session),
):
    trade = _owned_trade_or_error(session, trade_id, trader)
    journal.delete_trade(session, trade)
