"""Database models."""

from logbook.models.trader import Trader
from logbook.models.trade import Trade

__all__ = [
    "Trader",
    "Trade",
]
