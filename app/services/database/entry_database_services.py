# app/services/database/entry_database_services.py
from datetime import date
from typing import List, Optional

from sqlalchemy import desc, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.database_models.journal_entry import JournalEntry
from app.services.database.database_services import dialect_insert


async def upsert_entry(db: AsyncSession, user_id: int, entry_date: date, answer_1: str, answer_2: str, answer_3: str) -> None:
    """Creates the entry for (user_id, entry_date) or overwrites its answers."""
    answers = {"answer_1": answer_1, "answer_2": answer_2, "answer_3": answer_3}
    stmt = dialect_insert(db, JournalEntry).values(user_id=user_id, date=entry_date, **answers)
    stmt = stmt.on_conflict_do_update(index_elements=["user_id", "date"], set_={**answers, "updated_at": func.now()})
    try:
        await db.execute(stmt)
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        raise


async def get_recent_entries(db: AsyncSession, user_id: int, limit: int = 7) -> List[JournalEntry]:
    result = await db.execute(
        select(JournalEntry).filter(JournalEntry.user_id == user_id).order_by(desc(JournalEntry.date)).limit(limit)
    )
    return result.scalars().all()


async def get_entry_for_date(db: AsyncSession, user_id: int, entry_date: date) -> Optional[JournalEntry]:
    result = await db.execute(
        select(JournalEntry).filter(JournalEntry.user_id == user_id, JournalEntry.date == entry_date)
    )
    return result.scalars().first()
