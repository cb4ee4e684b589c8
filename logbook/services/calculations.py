"""Trade field calculator.

Turns one trade's raw inputs plus the trader's equity and risk percentage at
the time of the trade into the derived risk/performance snapshot:
R-multiples, USD PnL and the planned-vs-actual risk comparison.

Everything here is pure. Missing optional inputs propagate as ``None``
through the dependent fields and zero denominators resolve to fixed
fallbacks, so ``calculate_fields`` is defined for every input.
"""

import math
from dataclasses import dataclass


@dataclass
class TradeInput:
    price_entry: float
    price_stop: float
    price_exit: float | None
    contracts: float
    multiplier: float = 1.0
    price_tp: str | None = None


@dataclass
class TakeProfit:
    """One partial take-profit tranche. ``size == 0`` means the size is unknown."""

    size: float
    price: float


@dataclass
class CalculatedFields:
    trade_r: float | None
    pnl_usd: float | None
    usd_at_risk: float
    planned_risk_usd: float
    risk_r_factor: float
    nett_r: float | None
    equity_before: float
    equity_after: float | None
    risk_pct: float
    normal_risk_pct: float
    power_norm: float


def is_long(entry: float, stop: float) -> bool:
    """A trade is long when the stop sits below the entry. Equal prices count as short."""
    return stop < entry


def direction_sign(entry: float, stop: float) -> int:
    return 1 if is_long(entry, stop) else -1


def _to_float(token: str) -> float | None:
    try:
        value = float(token)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def parse_take_profits(text: str | None) -> list[TakeProfit]:
    """Parse ``"2@105, 1@110, 115"`` into take-profit tranches.

    Bare prices get ``size=0``. Entries that are not numeric are dropped.
    """
    if not text:
        return []

    result = []
    for raw in text.split(","):
        token = raw.strip()
        if not token:
            continue
        if "@" in token:
            size_part, _, price_part = token.partition("@")
            size = _to_float(size_part.strip())
            price = _to_float(price_part.strip())
            if size is None or price is None:
                continue
            result.append(TakeProfit(size=size, price=price))
        else:
            price = _to_float(token)
            if price is None:
                continue
            result.append(TakeProfit(size=0.0, price=price))
    return result


def resolve_exit_fills(trade: TradeInput) -> list[tuple[float, float]] | None:
    """Resolve the exit into ``(size, price)`` fills, or ``None`` while the trade is open.

    Sized take-profits win over the single exit price. When they cover less
    than the full position, the single exit price (if any) closes the rest.
    Price-only take-profits carry no weight and are ignored here.
    """
    sized = [(tp.size, tp.price) for tp in parse_take_profits(trade.price_tp) if tp.size > 0]
    if sized:
        tp_size = sum(size for size, _ in sized)
        if tp_size < trade.contracts and trade.price_exit is not None:
            sized.append((trade.contracts - tp_size, trade.price_exit))
        return sized

    if trade.price_exit is None:
        return None
    return [(trade.contracts, trade.price_exit)]


def weighted_exit_price(fills: list[tuple[float, float]] | None) -> float | None:
    if not fills:
        return None
    total_size = sum(size for size, _ in fills)
    if total_size == 0:
        return None
    return sum(size * price for size, price in fills) / total_size


def _trade_r(trade: TradeInput, fills: list[tuple[float, float]] | None) -> float | None:
    exit_price = weighted_exit_price(fills)
    if exit_price is None:
        return None
    risk_per_unit = abs(trade.price_entry - trade.price_stop)
    if risk_per_unit == 0:
        return 0.0
    sign = direction_sign(trade.price_entry, trade.price_stop)
    return sign * (exit_price - trade.price_entry) / risk_per_unit


def _pnl(trade: TradeInput, fills: list[tuple[float, float]] | None) -> float | None:
    if fills is None:
        return None
    sign = direction_sign(trade.price_entry, trade.price_stop)
    return sum(
        sign * (price - trade.price_entry) * size * trade.multiplier
        for size, price in fills
    )


def calculate_trade_r(trade: TradeInput) -> float | None:
    """Price-derived R-multiple, unrounded. 0 when entry equals stop."""
    return _trade_r(trade, resolve_exit_fills(trade))


def calculate_pnl(trade: TradeInput) -> float | None:
    """Currency PnL summed over all exit fills, unrounded."""
    return _pnl(trade, resolve_exit_fills(trade))


def calculate_usd_at_risk(trade: TradeInput) -> float:
    return abs(trade.price_entry - trade.price_stop) * trade.contracts * trade.multiplier


def _round_opt(value: float | None, digits: int) -> float | None:
    return round(value, digits) if value is not None else None


def calculate_fields(
    trade: TradeInput,
    equity_before: float,
    current_risk_pct: float,
    base_risk_pct: float,
) -> CalculatedFields:
    """Compute the full derived snapshot for one trade.

    All arithmetic runs on unrounded values; rounding happens once when the
    result is assembled.
    """
    fills = resolve_exit_fills(trade)

    planned_risk_usd = equity_before * current_risk_pct
    usd_at_risk = calculate_usd_at_risk(trade)
    risk_r_factor = usd_at_risk / planned_risk_usd if planned_risk_usd > 0 else 1.0
    trade_r = _trade_r(trade, fills)
    pnl_usd = _pnl(trade, fills)
    nett_r = pnl_usd / planned_risk_usd if pnl_usd is not None and planned_risk_usd > 0 else None
    equity_after = equity_before + pnl_usd if pnl_usd is not None else None
    power_norm = current_risk_pct / base_risk_pct if base_risk_pct > 0 else 1.0

    return CalculatedFields(
        trade_r=_round_opt(trade_r, 4),
        pnl_usd=_round_opt(pnl_usd, 2),
        usd_at_risk=round(usd_at_risk, 2),
        planned_risk_usd=round(planned_risk_usd, 2),
        risk_r_factor=round(risk_r_factor, 2),
        nett_r=_round_opt(nett_r, 4),
        equity_before=round(equity_before, 2),
        equity_after=_round_opt(equity_after, 2),
        risk_pct=round(current_risk_pct, 6),
        normal_risk_pct=round(base_risk_pct, 6),
        power_norm=round(power_norm, 4),
    )
