"""Shared constants and trader defaults."""

# Registration is capped; the journal is meant for a small accountability group.
MAX_TRADERS = 3

PIN_MIN_LENGTH = 4
PIN_MAX_LENGTH = 8

# Defaults applied to newly registered traders
DEFAULT_ACCOUNT_START = 10000.0
DEFAULT_BASE_RISK_PCT = 0.005
DEFAULT_RISK_MULTIPLIER = 1.5
DEFAULT_STEPSIZE_UP = 30.0
DEFAULT_TARGET_EV = 0.4

# Lowest escalation level the risk state machine can reach
MIN_LEVEL = -3

# Trade fields a trader may change after the trade has been logged.
MUTABLE_TRADE_FIELDS = (
    "date_exit",
    "price_exit",
    "analysed",
    "max_win_r",
    "reason_for_loss",
    "win_optimization",
    "screenshots",
    "tags",
    "notes",
)
