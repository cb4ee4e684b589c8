"""CSV export API."""

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlmodel import Session, select

from logbook.database import get_session
from logbook.models.trade import Trade
from logbook.models.trader import Trader
from logbook.services.export import export_filename, trades_to_csv
from logbook.api.deps import get_current_trader

router = APIRouter(prefix="/api/export", tags=["export"], dependencies=[Depends(get_current_trader)])


@router.get("")
def export_csv(trader_id: int | None = None, session: Session = Depends(get_session)):
    stmt = select(Trade, Trader.name).join(Trader, Trade.trader_id == Trader.id)
    if trader_id is not None:
        stmt = stmt.where(Trade.trader_id == trader_id).order_by(Trade.trade_number)
    else:
        stmt = stmt.order_by(Trader.name, Trade.trade_number)
    rows = session.exec(stmt).all()

    return Response(
        content=trades_to_csv(rows),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{export_filename()}"'},
    )
