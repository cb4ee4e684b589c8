"""Shared API dependencies."""

from fastapi import Depends, HTTPException, Request, Response, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlmodel import Session

from logbook.config import settings
from logbook.database import get_session
from logbook.models.trader import Trader
from logbook.services.auth import decode_access_token

bearer_scheme = HTTPBearer(auto_error=False)


def set_session_cookie(response: Response, token: str):
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.jwt_expire_minutes * 60,
        httponly=True,
        samesite="lax",
        secure=settings.session_cookie_secure,
        path="/",
    )


def clear_session_cookie(response: Response):
    response.delete_cookie(key=settings.session_cookie_name, path="/")


def get_current_trader(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    session: Session = Depends(get_session),
) -> Trader:
    """Resolve the acting trader from the session cookie or a Bearer token."""
    token = request.cookies.get(settings.session_cookie_name)
    if token is None and credentials is not None:
        token = credentials.credentials
    if token is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
        )

    trader_id = decode_access_token(token)
    if trader_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )
    trader = session.get(Trader, trader_id)
    if trader is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Trader not found",
        )
    return trader
