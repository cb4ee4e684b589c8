"""Shared fixtures: an in-memory database and an API client bound to it."""

import os

os.environ.setdefault("LOGBOOK_DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from logbook.database import create_db_and_tables, get_session
from logbook.main import app
from logbook.models.trader import Trader
from logbook.services.auth import hash_pin


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_db_and_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def trader(session):
    trader = Trader(name="Alice", pin_hash=hash_pin("1234"))
    session.add(trader)
    session.commit()
    session.refresh(trader)
    return trader


@pytest.fixture
def client(engine):
    def _get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = _get_session
    yield TestClient(app)
    app.dependency_overrides.clear()
