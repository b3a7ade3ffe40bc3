# app/services/auth_services.py
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from email_validator import validate_email
from fastapi import Depends, Request, Response
from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import LoginRequired
from app.data.database import get_db
from app.models.auth_models import PasswordValidationError
from app.models.database_models.user import User
from app.services.database.user_database_services import get_user_by_email, get_user_by_id

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


def verify_password(plain_password, hashed_password):
    return bcrypt.checkpw(plain_password.encode('utf-8'), hashed_password.encode('utf-8') if isinstance(hashed_password, str) else hashed_password)


def hash_password(password):
    return bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt())


async def authenticate_user(db: AsyncSession, email: str, password: str):
    user = await get_user_by_email(db, email)
    if not user or not user.is_active:
        return False
    if not verify_password(password, user.hashed_password):
        return False
    return user


def normalize_email(email: str) -> str:
    """Canonical form used for both storing and looking up addresses. Raises EmailNotValidError."""
    return validate_email(email.strip(), check_deliverability=False).normalized


def _create_token(data: dict, token_type: str, expires_delta: timedelta) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + expires_delta
    to_encode.update({"exp": expire, "type": token_type})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None):
    return _create_token(data, "access", expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))


def create_refresh_token(data: dict, expires_delta: Optional[timedelta] = None):
    return _create_token(data, "refresh", expires_delta or timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS))


def decode_token(token: str, expected_type: str) -> int:
    """Returns the user id carried by a token, raising JWTError for anything invalid."""
    payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    if payload.get("type") != expected_type:
        raise JWTError("Invalid token type")
    subject = payload.get("sub")
    if not subject:
        raise JWTError("Invalid token payload")
    return int(subject)


def validate_password(password: str):
    if len(password) < MIN_PASSWORD_LENGTH:
        raise PasswordValidationError([f"Password should be at least {MIN_PASSWORD_LENGTH} characters."])
    return True


def set_session_cookies(response: Response, user: User) -> None:
    """Writes fresh access and refresh cookies for the user onto the response."""
    access_token_expires = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    refresh_token_expires = timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)
    response.set_cookie(
        key="access_token",
        value=create_access_token(data={"sub": str(user.id)}, expires_delta=access_token_expires),
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
        expires=int(access_token_expires.total_seconds()),
        path="/",
    )
    response.set_cookie(
        key="refresh_token",
        value=create_refresh_token(data={"sub": str(user.id)}, expires_delta=refresh_token_expires),
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
        expires=int(refresh_token_expires.total_seconds()),
        path="/",
    )


def apply_refreshed_session(request: Request, response: Response) -> Response:
    """
    Copies cookies re-issued by the refresh-token fallback onto a response the route built itself.
    FastAPI only merges the injected Response into responses it creates.
    """
    user = getattr(request.state, "refreshed_user", None)
    if user is not None:
        set_session_cookies(response, user)
    return response


def clear_session_cookies(response: Response) -> None:
    response.delete_cookie("access_token", path="/")
    response.delete_cookie("refresh_token", path="/")


async def get_current_user_from_cookie(
    request: Request, response: Response, db: AsyncSession = Depends(get_db)
) -> User:
    access_token = request.cookies.get("access_token")
    refresh_token = request.cookies.get("refresh_token")

    if access_token:
        try:
            user = await get_user_by_id(db, decode_token(access_token, "access"))
            if not user or not user.is_active:
                raise JWTError("User not found")
            return user
        except (JWTError, ValueError) as e:
            logger.debug("Access token error: %s", e)

    if refresh_token:
        try:
            user = await get_user_by_id(db, decode_token(refresh_token, "refresh"))
            if not user or not user.is_active:
                raise JWTError("User not found")
            set_session_cookies(response, user)
            request.state.refreshed_user = user
            return user
        except (JWTError, ValueError) as e:
            logger.debug("Refresh token error: %s", e)

    raise LoginRequired()
