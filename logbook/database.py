"""SQLModel database engine and session management."""

import logging
from pathlib import Path

from sqlalchemy import inspect
from sqlmodel import SQLModel, create_engine, Session

from logbook.config import settings

logger = logging.getLogger(__name__)

# SQLite needs check_same_thread=False; PostgreSQL does not
connect_args = {}
if settings.database_url.startswith("sqlite"):
    connect_args["check_same_thread"] = False

engine = create_engine(
    settings.database_url,
    echo=False,
    connect_args=connect_args,
)


def _ensure_sqlite_dir(url: str):
    """Create the parent directory of a file-backed SQLite database."""
    prefix = "sqlite:///"
    if not url.startswith(prefix) or url == f"{prefix}:memory:":
        return
    Path(url[len(prefix):]).parent.mkdir(parents=True, exist_ok=True)


def _run_migrations(bind=None):
    """Run lightweight schema migrations for databases created before the trade index."""
    from sqlalchemy import text

    bind = bind or engine
    inspector = inspect(bind)

    if "trade" not in inspector.get_table_names():
        return

    # Ensure per-trader trade numbers are unique
    existing_indexes = inspector.get_indexes("trade")
    has_unique_idx = any(
        idx["name"] == "ix_trade_trader_number_unique" for idx in existing_indexes
    )
    if not has_unique_idx:
        logger.info("Migrating: creating ix_trade_trader_number_unique")
        with bind.connect() as conn:
            conn.execute(text(
                "CREATE UNIQUE INDEX ix_trade_trader_number_unique "
                "ON trade (trader_id, trade_number)"
            ))
            conn.commit()


def create_db_and_tables(bind=None):
    """Create all tables. Called on startup."""
    import logbook.models  # noqa: F401  register tables on the metadata

    bind = bind or engine
    _ensure_sqlite_dir(str(bind.url))
    SQLModel.metadata.create_all(bind)
    _run_migrations(bind)


def get_session() -> Session:
    """Dependency that yields a database session."""
    with Session(engine) as session:
        yield session
