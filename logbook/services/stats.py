"""Summary statistics over a trader's closed trades."""

from dataclasses import dataclass
from typing import Any, Iterable

import numpy as np


@dataclass
class TradeStats:
    total_trades: int = 0
    win_rate: float = 0.0
    avg_r_win: float = 0.0
    avg_r_loss: float = 0.0
    ev: float = 0.0
    sharpe: float = 0.0
    total_pnl: float = 0.0
    stdev: float = 0.0
    best_trade: float = 0.0
    worst_trade: float = 0.0
    avg_max_win_r: float = 0.0


def _field(trade: Any, name: str):
    if isinstance(trade, dict):
        return trade.get(name)
    return getattr(trade, name, None)


def calculate_stats(trades: Iterable[Any]) -> TradeStats:
    """Win rate, expectancy and a plain ev/stdev ratio over closed trades.

    Open trades (``nett_r is None``) are left out of every figure. A trade at
    exactly 0R counts as a loss.
    """
    closed = [t for t in trades if _field(t, "nett_r") is not None]
    if not closed:
        return TradeStats()

    rs = np.array([float(_field(t, "nett_r")) for t in closed])
    wins = rs[rs > 0]
    losses = rs[rs <= 0]

    ev = float(rs.mean())
    stdev = float(rs.std())  # population, ddof=0
    sharpe = ev / stdev if stdev > 0 else 0.0
    total_pnl = sum(float(_field(t, "pnl_usd") or 0.0) for t in closed)

    max_win_rs = [float(_field(t, "max_win_r")) for t in closed if _field(t, "max_win_r") is not None]
    avg_max_win_r = float(np.mean(max_win_rs)) if max_win_rs else 0.0

    return TradeStats(
        total_trades=len(closed),
        win_rate=round(len(wins) / len(rs), 4),
        avg_r_win=round(float(wins.mean()), 2) if wins.size else 0.0,
        avg_r_loss=round(float(losses.mean()), 2) if losses.size else 0.0,
        ev=round(ev, 2),
        sharpe=round(sharpe, 2),
        total_pnl=round(total_pnl, 2),
        stdev=round(stdev, 2),
        best_trade=round(float(rs.max()), 2),
        worst_trade=round(float(rs.min()), 2),
        avg_max_win_r=round(avg_max_win_r, 2),
    )
