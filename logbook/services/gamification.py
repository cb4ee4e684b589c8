"""Risk-level state machine.

Replays a trader's closed-trade ``nett_r`` history (oldest first) to find the
current escalation level and the risk percentage for the next trade. There is
no persisted running state: every caller replays the full history, so the
result only depends on the sequence and the settings passed in.
"""

from dataclasses import dataclass
from typing import Iterable, Iterator

from logbook.utils.constants import MIN_LEVEL


@dataclass(frozen=True)
class GamificationSettings:
    base_risk_pct: float
    risk_multiplier: float
    stepsize_up: float
    gamification_enabled: bool = True

    @classmethod
    def from_trader(cls, trader) -> "GamificationSettings":
        return cls(
            base_risk_pct=trader.base_risk_pct,
            risk_multiplier=trader.risk_multiplier,
            stepsize_up=trader.stepsize_up,
            gamification_enabled=trader.gamification_enabled,
        )


@dataclass(frozen=True)
class LevelState:
    level: int
    cum_r_since_level: float
    r_to_next_level: float
    current_risk_pct: float
    trades_since_level: int = 0


def get_risk_pct_for_level(base_risk_pct: float, risk_multiplier: float, level: int) -> float:
    """Risk only scales up: every level at or below 0 trades at the baseline."""
    if level <= 0:
        return base_risk_pct
    return base_risk_pct * risk_multiplier ** level


def _make_state(level: int, cum_r: float, trades: int, settings: GamificationSettings) -> LevelState:
    return LevelState(
        level=level,
        cum_r_since_level=round(cum_r, 4),
        r_to_next_level=round(max(0.0, settings.stepsize_up - cum_r), 2),
        current_risk_pct=get_risk_pct_for_level(
            settings.base_risk_pct, settings.risk_multiplier, level
        ),
        trades_since_level=trades,
    )


def _disabled_state(settings: GamificationSettings) -> LevelState:
    return LevelState(
        level=0,
        cum_r_since_level=0.0,
        r_to_next_level=settings.stepsize_up,
        current_risk_pct=settings.base_risk_pct,
        trades_since_level=0,
    )


def _replay(nett_rs: Iterable[float], settings: GamificationSettings) -> Iterator[LevelState]:
    """Yield the level state after each trade outcome.

    A loss that takes the running sum below zero drops one level and discards
    the deficit. Reaching ``stepsize_up`` climbs one level and carries the
    excess. Each outcome triggers at most one transition.
    """
    level = 0
    cum_r = 0.0
    trades = 0

    for nett_r in nett_rs:
        cum_r += nett_r
        trades += 1

        if cum_r < 0:
            level = max(level - 1, MIN_LEVEL)
            cum_r = 0.0
            trades = 0
        elif cum_r >= settings.stepsize_up:
            level += 1
            cum_r -= settings.stepsize_up
            trades = 0

        yield _make_state(level, cum_r, trades, settings)


def calculate_level_state(nett_rs: Iterable[float], settings: GamificationSettings) -> LevelState:
    """Level state after replaying the whole history."""
    if not settings.gamification_enabled:
        return _disabled_state(settings)

    state = _make_state(0, 0.0, 0, settings)
    for state in _replay(nett_rs, settings):
        pass
    return state


def calculate_level_for_each_trade(
    nett_rs: Iterable[float], settings: GamificationSettings
) -> list[LevelState]:
    """Level state after each trade; element ``k - 1`` matches the replay of the first ``k``."""
    if not settings.gamification_enabled:
        return [_disabled_state(settings) for _ in nett_rs]
    return list(_replay(nett_rs, settings))
