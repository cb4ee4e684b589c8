"""Trade journal persistence.

Glues the pure calculators to the database: it loads a trader's history in
trade-number order, replays the level state machine, snapshots the derived
fields onto new trades and serves the per-trader dashboard aggregates.
"""

import logging
import math
import threading

from sqlmodel import Session, select, func

from logbook.models.trade import Trade
from logbook.models.trader import Trader
from logbook.schemas.trade import TradeCreate, TradeUpdate
from logbook.services.calculations import TradeInput, calculate_fields
from logbook.services.gamification import (
    GamificationSettings,
    calculate_level_for_each_trade,
    calculate_level_state,
)
from logbook.services.stats import calculate_stats
from logbook.utils.constants import MUTABLE_TRADE_FIELDS

logger = logging.getLogger(__name__)
_trader_locks: dict[int, threading.Lock] = {}
_trader_locks_guard = threading.Lock()


class JournalError(Exception):
    """Base class for journal errors surfaced to the API layer."""


class TradeNotFoundError(JournalError):
    pass


class NotTradeOwnerError(JournalError):
    pass


def _get_trader_lock(trader_id: int) -> threading.Lock:
    with _trader_locks_guard:
        lock = _trader_locks.get(trader_id)
        if lock is None:
            lock = threading.Lock()
            _trader_locks[trader_id] = lock
        return lock


def list_trader_trades(session: Session, trader_id: int) -> list[Trade]:
    """All trades of one trader, oldest first."""
    return session.exec(
        select(Trade)
        .where(Trade.trader_id == trader_id)
        .order_by(Trade.trade_number)
    ).all()


def next_trade_number(session: Session, trader_id: int) -> int:
    last = session.exec(
        select(func.max(Trade.trade_number)).where(Trade.trader_id == trader_id)
    ).one()
    return (last or 0) + 1


def equity_before(session: Session, trader: Trader) -> float:
    """Equity after the latest closed trade, or the starting balance."""
    last = session.exec(
        select(Trade)
        .where(Trade.trader_id == trader.id, Trade.equity_after.is_not(None))  # type: ignore[union-attr]
        .order_by(Trade.trade_number.desc())  # type: ignore[attr-defined]
    ).first()
    if last is None:
        return trader.account_start
    return last.equity_after


def closed_nett_rs(session: Session, trader_id: int) -> list[float]:
    return list(session.exec(
        select(Trade.nett_r)
        .where(Trade.trader_id == trader_id, Trade.nett_r.is_not(None))  # type: ignore[union-attr]
        .order_by(Trade.trade_number)
    ).all())


def create_trade(session: Session, trader: Trader, data: TradeCreate) -> Trade:
    """Log a new trade with its derived snapshot.

    Creation is serialized per trader so the equity and level replay always
    see every earlier trade.
    """
    lock = _get_trader_lock(trader.id)
    with lock:
        trade_number = next_trade_number(session, trader.id)
        equity = equity_before(session, trader)
        nett_rs = closed_nett_rs(session, trader.id)

        game_settings = GamificationSettings.from_trader(trader)
        level_state = calculate_level_state(nett_rs, game_settings)

        calculated = calculate_fields(
            TradeInput(
                price_entry=data.price_entry,
                price_stop=data.price_stop,
                price_exit=data.price_exit,
                contracts=data.contracts,
                multiplier=data.multiplier,
                price_tp=data.price_tp,
            ),
            equity,
            level_state.current_risk_pct,
            trader.base_risk_pct,
        )

        sum_r = sum(nett_rs)
        if calculated.nett_r is not None:
            sum_r += calculated.nett_r

        trade = Trade(
            trader_id=trader.id,
            trade_number=trade_number,
            **data.model_dump(),
            trade_r=calculated.trade_r,
            nett_r=calculated.nett_r,
            sum_r=round(sum_r, 4),
            planned_risk_usd=calculated.planned_risk_usd,
            usd_at_risk=calculated.usd_at_risk,
            risk_r_factor=calculated.risk_r_factor,
            pnl_usd=calculated.pnl_usd,
            equity_before=calculated.equity_before,
            equity_after=calculated.equity_after,
            level=level_state.level,
            level_to_go=math.ceil(level_state.r_to_next_level),
            risk_pct=calculated.risk_pct,
            normal_risk_pct=calculated.normal_risk_pct,
            power_norm=calculated.power_norm,
            analysed=False,
        )
        session.add(trade)
        session.commit()
        session.refresh(trade)

    logger.info(
        f"[{trader.name}] Trade #{trade.trade_number} {trade.ticker} logged "
        f"(nett_r={trade.nett_r}, level={trade.level}, risk_pct={trade.risk_pct})"
    )
    return trade


def get_owned_trade(session: Session, trade_id: int, trader: Trader) -> Trade:
    trade = session.get(Trade, trade_id)
    if trade is None:
        raise TradeNotFoundError(f"Trade {trade_id} not found")
    if trade.trader_id != trader.id:
        raise NotTradeOwnerError(f"Trade {trade_id} belongs to another trader")
    return trade


def update_trade(session: Session, trade: Trade, data: TradeUpdate) -> Trade:
    """Apply exit-side and review changes. The derived snapshot stays frozen."""
    update_data = data.model_dump(exclude_unset=True)
    for key, value in update_data.items():
        if key in MUTABLE_TRADE_FIELDS:
            setattr(trade, key, value)
    session.add(trade)
    session.commit()
    session.refresh(trade)
    return trade


def delete_trade(session: Session, trade: Trade):
    """Remove one trade. Later trades keep their numbers and snapshots."""
    logger.info(f"Deleting trade #{trade.trade_number} of trader {trade.trader_id}")
    session.delete(trade)
    session.commit()


def trader_summary(session: Session, trader: Trader) -> dict:
    """Stats, level state and equity for one trader's dashboard card."""
    trades = list_trader_trades(session, trader.id)
    stats = calculate_stats(trades)

    nett_rs = [t.nett_r for t in trades if t.nett_r is not None]
    level_state = calculate_level_state(nett_rs, GamificationSettings.from_trader(trader))

    current_equity = trader.account_start
    if trades and trades[-1].equity_after is not None:
        current_equity = trades[-1].equity_after

    unanalysed = sum(1 for t in trades if not t.analysed and t.nett_r is not None)

    return {
        "trader": {
            "id": trader.id,
            "name": trader.name,
            "account_start": trader.account_start,
            "target_ev": trader.target_ev,
        },
        "stats": stats,
        "level": level_state,
        "current_equity": current_equity,
        "unanalysed_count": unanalysed,
        "total_trades_count": len(trades),
    }


def level_history(session: Session, trader: Trader) -> list[dict]:
    """Level state after each closed trade, for the level progress chart."""
    closed = [t for t in list_trader_trades(session, trader.id) if t.nett_r is not None]
    states = calculate_level_for_each_trade(
        [t.nett_r for t in closed], GamificationSettings.from_trader(trader)
    )
    return [
        {
            "trade_number": t.trade_number,
            "nett_r": t.nett_r,
            "level": s.level,
            "cum_r_since_level": s.cum_r_since_level,
            "r_to_next_level": s.r_to_next_level,
            "risk_pct": s.current_risk_pct,
        }
        for t, s in zip(closed, states)
    ]


def equity_curve(session: Session, trader: Trader) -> list[dict]:
    """Equity after each closed trade, oldest first."""
    return [
        {
            "trade_number": t.trade_number,
            "date_entry": t.date_entry.isoformat(),
            "equity": round(t.equity_after, 2),
            "sum_r": t.sum_r,
        }
        for t in list_trader_trades(session, trader.id)
        if t.equity_after is not None
    ]
