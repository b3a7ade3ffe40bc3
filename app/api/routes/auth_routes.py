# app/api/routes/auth_routes.py
import logging
from typing import Optional

from email_validator import EmailNotValidError
from fastapi import APIRouter, Cookie, Depends, HTTPException, Response, status
from fastapi.responses import RedirectResponse
from fastapi_limiter.depends import RateLimiter
from jose import JWTError
from redis.asyncio import Redis
from redis.exceptions import RedisError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.dependencies import get_redis_client
from app.core.security import consume_auth_code, issue_auth_code
from app.data.database import get_db
from app.models.auth_models import AuthResponse, LoginRequest, PasswordValidationError, SignUpRequest
from app.models.database_models.user import User
from app.services.auth_services import (
    authenticate_user,
    clear_session_cookies,
    decode_token,
    get_current_user_from_cookie,
    hash_password,
    normalize_email,
    set_session_cookies,
    validate_password,
)
from app.services.database.user_database_services import (
    confirm_user_email,
    create_user,
    delete_user,
    get_user_by_id,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Authentication"])

signup_rate_limiter = RateLimiter(times=2, seconds=5)


@router.post("/signup", response_model=AuthResponse, dependencies=[Depends(signup_rate_limiter)])
async def signup(
    signup_data: SignUpRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
    redis_client: Redis = Depends(get_redis_client),
):
    """Register a new user, either signing them in or sending a confirmation link."""
    try:
        email = normalize_email(signup_data.email)
    except EmailNotValidError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    try:
        validate_password(signup_data.password)
    except PasswordValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    confirmed = not settings.REQUIRE_EMAIL_CONFIRMATION
    try:
        user = await create_user(db, email, hash_password(signup_data.password), email_confirmed=confirmed)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    if confirmed:
        set_session_cookies(response, user)
        return AuthResponse(success=True, message="Account created.", session=True)

    try:
        code = await issue_auth_code(redis_client, user.id)
    except RedisError as e:
        # An unconfirmed account without a code could never be confirmed.
        logger.error("Could not issue confirmation code for %s: %s", email, e)
        await delete_user(db, user.id)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Could not send confirmation email. Please try again.",
        )
    # No mail transport; the link is written to the log for delivery.
    logger.info("Confirmation link for %s: /api/auth/callback?code=%s", email, code)
    return AuthResponse(success=True, message="Check your email to confirm your account.")


@router.post("/login", response_model=AuthResponse)
async def login(login_data: LoginRequest, response: Response, db: AsyncSession = Depends(get_db)):
    """Sign a user in and set access and refresh tokens as HTTP-only cookies."""
    try:
        email = normalize_email(login_data.email)
    except EmailNotValidError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid login credentials")

    user = await authenticate_user(db, email, login_data.password)
    if not user:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid login credentials")
    if not user.email_confirmed:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email not confirmed")

    set_session_cookies(response, user)
    return AuthResponse(success=True, message="Logged in successfully", session=True)


@router.get("/callback")
async def auth_callback(
    code: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
    redis_client: Redis = Depends(get_redis_client),
):
    """Exchange a one-time authorization code for a session and continue to the dashboard."""
    response = RedirectResponse(url=settings.DASHBOARD_URL, status_code=status.HTTP_303_SEE_OTHER)
    if not code:
        return response

    user_id = await consume_auth_code(redis_client, code)
    if user_id is None:
        logger.info("Ignoring unknown or expired authorization code.")
        return response

    user = await confirm_user_email(db, user_id)
    if user and user.is_active:
        set_session_cookies(response, user)
    return response


@router.post("/logout")
async def logout():
    """Sign out by deleting the session cookies."""
    response = RedirectResponse(url=settings.LOGIN_URL, status_code=status.HTTP_303_SEE_OTHER)
    clear_session_cookies(response)
    return response


@router.get("/check-auth")
async def check_auth(user: User = Depends(get_current_user_from_cookie)):
    """Check if the user is authenticated."""
    return {"email": user.email, "success": True}


@router.post("/refresh", response_model=AuthResponse)
async def refresh_token_route(
    response: Response,
    refresh_token: str | None = Cookie(default=None),
    db: AsyncSession = Depends(get_db),
):
    """Re-issue the session cookies from a valid refresh token cookie."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate refresh token",
    )
    if refresh_token is None:
        raise credentials_exception

    try:
        user = await get_user_by_id(db, decode_token(refresh_token, "refresh"))
    except (JWTError, ValueError):
        raise credentials_exception
    if user is None or not user.is_active:
        raise credentials_exception

    set_session_cookies(response, user)
    return AuthResponse(success=True, message="Access token refreshed", session=True)
