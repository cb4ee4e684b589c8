"""Dashboard API — per-trader stats, level progress and equity curves."""

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from logbook.database import get_session
from logbook.models.trader import Trader
from logbook.services import journal
from logbook.api.deps import get_current_trader

router = APIRouter(prefix="/api/stats", tags=["stats"], dependencies=[Depends(get_current_trader)])


def _trader_or_404(session: Session, trader_id: int) -> Trader:
    trader = session.get(Trader, trader_id)
    if not trader:
        raise HTTPException(status_code=404, detail="Trader not found")
    return trader


@router.get("")
def all_stats(trader_id: int | None = None, session: Session = Depends(get_session)):
    """Summary cards for every trader, or one when trader_id is given."""
    stmt = select(Trader).order_by(Trader.id)
    if trader_id is not None:
        stmt = stmt.where(Trader.id == trader_id)
    return [journal.trader_summary(session, t) for t in session.exec(stmt).all()]


@router.get("/{trader_id}/levels")
def trader_levels(trader_id: int, session: Session = Depends(get_session)):
    return journal.level_history(session, _trader_or_404(session, trader_id))


@router.get("/{trader_id}/equity")
def trader_equity_curve(trader_id: int, session: Session = Depends(get_session)):
    return journal.equity_curve(session, _trader_or_404(session, trader_id))
