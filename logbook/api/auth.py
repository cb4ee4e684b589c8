"""Authentication API — register, login, logout."""

import logging
import threading

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlmodel import Session, select, func

from logbook.database import get_session
from logbook.models.trader import Trader
from logbook.schemas.trader import TraderLogin, TraderRead, TraderRegister
from logbook.services.auth import create_access_token, hash_pin, verify_pin
from logbook.api.deps import clear_session_cookie, get_current_trader, set_session_cookie
from logbook.utils.constants import MAX_TRADERS

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])

# Serializes the trader-cap check with the insert
_registration_lock = threading.Lock()


def find_trader_by_name(session: Session, name: str) -> Trader | None:
    """Case-insensitive trader lookup."""
    return session.exec(
        select(Trader).where(func.lower(Trader.name) == name.lower())
    ).first()


@router.post("/register", response_model=TraderRead, status_code=201)
def register(body: TraderRegister, response: Response, session: Session = Depends(get_session)):
    with _registration_lock:
        count = session.exec(select(func.count()).select_from(Trader)).one()
        if count >= MAX_TRADERS:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Maximum {MAX_TRADERS} traders allowed",
            )

        if find_trader_by_name(session, body.name):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Name already taken",
            )

        trader = Trader(
            name=body.name,
            pin_hash=hash_pin(body.pin),
            account_start=body.account_start,
        )
        session.add(trader)
        session.commit()
        session.refresh(trader)
    logger.info(f"Registered trader '{trader.name}' (id={trader.id})")

    set_session_cookie(response, create_access_token(trader.id, trader.name))
    return trader


@router.post("/login", response_model=TraderRead)
def login(body: TraderLogin, response: Response, session: Session = Depends(get_session)):
    trader = find_trader_by_name(session, body.name)

    if not trader or not verify_pin(body.pin, trader.pin_hash):
        logger.warning(f"Failed login for '{body.name}'")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid name or PIN",
        )

    set_session_cookie(response, create_access_token(trader.id, trader.name))
    return trader


@router.post("/logout")
def logout(response: Response):
    clear_session_cookie(response)
    return {"success": True}


@router.get("/me", response_model=TraderRead)
def me(trader: Trader = Depends(get_current_trader)):
    return trader
