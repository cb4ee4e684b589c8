"""CLI tool for admin operations.

Usage:
    python -m logbook.cli init-db
    python -m logbook.cli create-trader
    python -m logbook.cli show-level <name>
"""

import sys
import getpass

from sqlmodel import Session, select, func

from logbook.database import engine, create_db_and_tables
from logbook.models.trader import Trader
from logbook.services.auth import hash_pin
from logbook.services.gamification import GamificationSettings, calculate_level_state
from logbook.services.journal import closed_nett_rs, equity_before
from logbook.utils.constants import MAX_TRADERS, PIN_MAX_LENGTH, PIN_MIN_LENGTH
from logbook.utils.logging import setup_logging


def init_db():
    create_db_and_tables()
    print("Tables created successfully.")


def create_trader():
    """Create a trader interactively."""
    create_db_and_tables()

    name = input("Name: ").strip()
    if not name:
        print("Name cannot be empty.")
        sys.exit(1)

    with Session(engine) as session:
        count = session.exec(select(func.count()).select_from(Trader)).one()
        if count >= MAX_TRADERS:
            print(f"Maximum {MAX_TRADERS} traders allowed.")
            sys.exit(1)
        existing = session.exec(
            select(Trader).where(func.lower(Trader.name) == name.lower())
        ).first()
        if existing:
            print(f"Trader '{existing.name}' already exists.")
            sys.exit(1)

    pin = getpass.getpass("PIN: ")
    pin_confirm = getpass.getpass("Confirm PIN: ")
    if pin != pin_confirm:
        print("PINs do not match.")
        sys.exit(1)
    if not PIN_MIN_LENGTH <= len(pin) <= PIN_MAX_LENGTH:
        print(f"PIN must be {PIN_MIN_LENGTH}-{PIN_MAX_LENGTH} characters.")
        sys.exit(1)

    account_start = input("Starting equity [10000]: ").strip()
    trader = Trader(name=name, pin_hash=hash_pin(pin))
    if account_start:
        try:
            trader.account_start = float(account_start)
        except ValueError:
            print(f"Invalid starting equity: {account_start}")
            sys.exit(1)

    with Session(engine) as session:
        session.add(trader)
        session.commit()

    print(f"\nTrader '{name}' created successfully.")


def show_level(name: str):
    """Replay a trader's history and print the current level state."""
    with Session(engine) as session:
        trader = session.exec(
            select(Trader).where(func.lower(Trader.name) == name.lower())
        ).first()
        if not trader:
            print(f"Trader '{name}' not found.")
            sys.exit(1)

        nett_rs = closed_nett_rs(session, trader.id)
        state = calculate_level_state(nett_rs, GamificationSettings.from_trader(trader))
        equity = equity_before(session, trader)

    print(f"Trader:          {trader.name}")
    print(f"Closed trades:   {len(nett_rs)}")
    print(f"Equity:          {equity:,.2f}")
    print(f"Level:           {state.level}")
    print(f"R since level:   {state.cum_r_since_level}")
    print(f"R to next level: {state.r_to_next_level}")
    print(f"Risk per trade:  {state.current_risk_pct:.4%}")


def main():
    setup_logging()
    if len(sys.argv) < 2:
        print("Usage: python -m logbook.cli <command>")
        print("Commands: init-db, create-trader, show-level <name>")
        sys.exit(1)

    command = sys.argv[1]
    if command == "init-db":
        init_db()
    elif command == "create-trader":
        create_trader()
    elif command == "show-level" and len(sys.argv) == 3:
        show_level(sys.argv[2])
    else:
        print(f"Unknown command: {' '.join(sys.argv[1:])}")
        sys.exit(1)


if __name__ == "__main__":
    main()
