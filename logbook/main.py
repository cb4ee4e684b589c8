"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from logbook.config import settings
from logbook.database import create_db_and_tables
from logbook.utils.logging import setup_logging
from logbook.api import auth, traders, trades, stats, export, system


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    setup_logging()
    create_db_and_tables()
    yield


app = FastAPI(
    title="Trading Logbook",
    description="Multi-trader trade journal with risk-level gamification",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Mount routers
app.include_router(auth.router)
app.include_router(traders.router)
app.include_router(trades.router)
app.include_router(stats.router)
app.include_router(export.router)
app.include_router(system.router)
