# app/core/exceptions.py
from fastapi import Request
from fastapi.responses import RedirectResponse

from app.core.config import settings


class LoginRequired(Exception):
    """Raised when a request needs a signed-in user and none could be resolved."""


async def login_required_handler(request: Request, exc: LoginRequired):
    return RedirectResponse(url=settings.LOGIN_URL, status_code=303)
