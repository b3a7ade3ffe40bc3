# app/services/database/reflection_database_services.py
from datetime import date
from typing import List, Optional

from sqlalchemy import desc, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.database_models.weekly_reflection import WeeklyReflection
from app.services.database.database_services import dialect_insert


async def get_reflection_for_week(db: AsyncSession, user_id: int, week_start: date) -> Optional[WeeklyReflection]:
    result = await db.execute(
        select(WeeklyReflection).filter(WeeklyReflection.user_id == user_id, WeeklyReflection.week_start == week_start)
    )
    return result.scalars().first()


async def insert_reflection_if_absent(db: AsyncSession, user_id: int, week_start: date, content: str) -> Optional[WeeklyReflection]:
    """
    Inserts a reflection unless one already exists for (user_id, week_start).
    Returns the new row, or None when another writer got there first.
    """
    stmt = (
        dialect_insert(db, WeeklyReflection)
        .values(user_id=user_id, week_start=week_start, content=content)
        .on_conflict_do_nothing(index_elements=["user_id", "week_start"])
        .returning(WeeklyReflection.id)
    )
    try:
        result = await db.execute(stmt)
        reflection_id = result.scalar_one_or_none()
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        raise

    if reflection_id is None:
        return None
    return await db.get(WeeklyReflection, reflection_id)


async def get_user_reflections(db: AsyncSession, user_id: int, limit: int = 12) -> List[WeeklyReflection]:
    result = await db.execute(
        select(WeeklyReflection)
        .filter(WeeklyReflection.user_id == user_id)
        .order_by(desc(WeeklyReflection.week_start))
        .limit(limit)
    )
    return result.scalars().all()
