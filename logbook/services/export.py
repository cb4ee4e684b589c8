"""CSV export of the journal."""

from datetime import datetime, timezone

import pandas as pd

from logbook.models.trade import Trade

# Column header -> Trade attribute
EXPORT_COLUMNS: list[tuple[str, str]] = [
    ("Trade #", "trade_number"),
    ("Ticker", "ticker"),
    ("Date Entry", "date_entry"),
    ("Date Exit", "date_exit"),
    ("Entry", "price_entry"),
    ("Stop", "price_stop"),
    ("TP", "price_tp"),
    ("Exit", "price_exit"),
    ("Contracts", "contracts"),
    ("Multiplier", "multiplier"),
    ("Trade R", "trade_r"),
    ("Nett R", "nett_r"),
    ("Sum R", "sum_r"),
    ("Planned Risk $", "planned_risk_usd"),
    ("$ at Risk", "usd_at_risk"),
    ("Risk Factor", "risk_r_factor"),
    ("PnL $", "pnl_usd"),
    ("Equity Before", "equity_before"),
    ("Equity After", "equity_after"),
    ("Level", "level"),
    ("Level to Go", "level_to_go"),
    ("Risk %", "risk_pct"),
    ("Normal Risk %", "normal_risk_pct"),
    ("Power/Norm", "power_norm"),
    ("Analysed", "analysed"),
    ("Max Win R", "max_win_r"),
    ("Reason for Loss", "reason_for_loss"),
    ("Win Optimization", "win_optimization"),
    ("Screenshots", "screenshots"),
    ("Tags", "tags"),
    ("Notes", "notes"),
]


def trades_to_frame(rows: list[tuple[Trade, str]]) -> pd.DataFrame:
    """Build the export table from ``(trade, trader_name)`` pairs."""
    records = []
    for trade, trader_name in rows:
        record = {"Trader": trader_name}
        for header, attr in EXPORT_COLUMNS:
            value = getattr(trade, attr)
            if attr == "analysed":
                value = "Yes" if value else "No"
            elif isinstance(value, datetime):
                value = value.isoformat()
            record[header] = value
        records.append(record)
    columns = ["Trader"] + [header for header, _ in EXPORT_COLUMNS]
    return pd.DataFrame.from_records(records, columns=columns)


def trades_to_csv(rows: list[tuple[Trade, str]]) -> str:
    return trades_to_frame(rows).to_csv(index=False, lineterminator="\n")


def export_filename(now: datetime | None = None) -> str:
    now = now or datetime.now(timezone.utc)
    return f"trading-logbook-{now.date().isoformat()}.csv"
