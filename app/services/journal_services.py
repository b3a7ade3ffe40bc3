# app/services/journal_services.py
import logging
from datetime import date, datetime, timedelta
from typing import Optional

import pytz
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.cache import (
    DASHBOARD_VIEW,
    TODAY_VIEW,
    get_cached_view,
    revalidate_path,
    set_cached_view,
)
from app.core.config import settings
from app.models.database_models.user import User
from app.models.journal_models import DashboardView, EntryRead, ReflectionRead, TodayView
from app.services.database.entry_database_services import (
    get_entry_for_date,
    get_recent_entries,
    upsert_entry,
)
from app.services.database.reflection_database_services import get_user_reflections

logger = logging.getLogger(__name__)

DASHBOARD_ENTRY_LIMIT = 7
DASHBOARD_REFLECTION_LIMIT = 12


def journal_today() -> date:
    """The current calendar day in the journal's time zone."""
    return datetime.now(pytz.timezone(settings.JOURNAL_TIMEZONE)).date()


def clean_answer(value: Optional[str]) -> str:
    return str(value or "").strip()


async def submit_entry(
    db: AsyncSession,
    redis_client: Redis,
    user: User,
    answer_1: Optional[str],
    answer_2: Optional[str],
    answer_3: Optional[str],
) -> date:
    """Stores today's answers for the user, replacing any earlier submission for the same day."""
    today = journal_today()
    await upsert_entry(
        db,
        user.id,
        today,
        clean_answer(answer_1),
        clean_answer(answer_2),
        clean_answer(answer_3),
    )
    logger.info("Saved entry for user %s on %s", user.id, today)

    await revalidate_path(redis_client, DASHBOARD_VIEW, user.id)
    await revalidate_path(redis_client, TODAY_VIEW, user.id)
    return today


async def get_today_view(db: AsyncSession, redis_client: Redis, user: User) -> TodayView:
    cached = await get_cached_view(redis_client, TODAY_VIEW, user.id)
    if cached:
        view = TodayView.model_validate_json(cached)
        if view.date == journal_today():
            return view

    today = journal_today()
    entry = await get_entry_for_date(db, user.id, today)
    if entry:
        view = TodayView(date=today, answer_1=entry.answer_1, answer_2=entry.answer_2, answer_3=entry.answer_3)
    else:
        view = TodayView(date=today)

    await set_cached_view(redis_client, TODAY_VIEW, user.id, view.model_dump_json())
    return view


def split_reflections(reflections, today: date):
    """
    Splits reflections (newest week first) into this week's reflection and the rest.
    The latest reflection counts as this week's when its week_start is within the last 7 days.
    """
    if not reflections:
        return None, []

    latest = reflections[0]
    current_week_start = today - timedelta(days=6)
    if latest.week_start >= current_week_start:
        return latest, list(reflections[1:])
    return None, list(reflections)


async def get_dashboard_view(db: AsyncSession, redis_client: Redis, user: User) -> DashboardView:
    today = journal_today()
    cached = await get_cached_view(redis_client, DASHBOARD_VIEW, user.id)
    if cached:
        view = DashboardView.model_validate_json(cached)
        # The current/past split depends on the day it was computed.
        if view.as_of == today:
            return view

    reflections = [
        ReflectionRead.model_validate(reflection)
        for reflection in await get_user_reflections(db, user.id, limit=DASHBOARD_REFLECTION_LIMIT)
    ]
    current, past = split_reflections(reflections, today)
    entries = await get_recent_entries(db, user.id, limit=DASHBOARD_ENTRY_LIMIT)

    view = DashboardView(
        email=user.email,
        as_of=today,
        current_reflection=current,
        past_reflections=past,
        entries=[EntryRead.model_validate(entry) for entry in entries],
    )
    await set_cached_view(redis_client, DASHBOARD_VIEW, user.id, view.model_dump_json())
    return view
