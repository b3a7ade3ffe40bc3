# app/api/routes/journal_routes.py
from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import RedirectResponse
from google import genai
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.dependencies import get_llm_client, get_redis_client
from app.data.database import get_db
from app.models.database_models.user import User
from app.models.journal_models import DashboardView, ReflectionOutcome, TodayView
from app.services.auth_services import apply_refreshed_session, get_current_user_from_cookie
from app.services.journal_services import get_dashboard_view, get_today_view, submit_entry
from app.services.reflection_services import generate_weekly_reflection

router = APIRouter(tags=["Journal"])


@router.get("/dashboard", response_model=DashboardView)
async def dashboard(
    db: AsyncSession = Depends(get_db),
    redis_client: Redis = Depends(get_redis_client),
    user: User = Depends(get_current_user_from_cookie),
):
    """This week's reflection, past reflections and the most recent entries."""
    return await get_dashboard_view(db, redis_client, user)


@router.get("/today", response_model=TodayView)
async def today(
    db: AsyncSession = Depends(get_db),
    redis_client: Redis = Depends(get_redis_client),
    user: User = Depends(get_current_user_from_cookie),
):
    """Today's answers, for prefilling the entry form."""
    return await get_today_view(db, redis_client, user)


@router.post("/entries")
async def create_entry(
    request: Request,
    answer_1: str = Form(default=""),
    answer_2: str = Form(default=""),
    answer_3: str = Form(default=""),
    db: AsyncSession = Depends(get_db),
    redis_client: Redis = Depends(get_redis_client),
    user: User = Depends(get_current_user_from_cookie),
):
    """Save today's entry and return to the dashboard."""
    await submit_entry(db, redis_client, user, answer_1, answer_2, answer_3)
    response = RedirectResponse(url=settings.DASHBOARD_URL, status_code=status.HTTP_303_SEE_OTHER)
    return apply_refreshed_session(request, response)


@router.post("/reflections/generate", response_model=ReflectionOutcome)
async def generate_reflection(
    db: AsyncSession = Depends(get_db),
    redis_client: Redis = Depends(get_redis_client),
    llm_client: genai.Client | None = Depends(get_llm_client),
    user: User = Depends(get_current_user_from_cookie),
):
    """Generate this week's reflection if one is owed. Skips are reported, never raised."""
    return await generate_weekly_reflection(db, redis_client, user, llm_client)
