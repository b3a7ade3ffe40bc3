# app/services/database/user_database_services.py
from typing import Optional

from sqlalchemy import exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.database_models.user import User


async def get_user_by_id(db: AsyncSession, user_id: int) -> Optional[User]:
    result = await db.execute(select(User).filter(User.id == user_id))
    return result.scalars().first()


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).filter(User.email == email))
    return result.scalars().first()


async def create_user(db: AsyncSession, email: str, hashed_password: bytes, email_confirmed: bool = False) -> User:
    result = await db.execute(select(exists().where(User.email == email)))
    if result.scalar():
        raise ValueError("User already registered")

    db_user = User(email=email, hashed_password=hashed_password, email_confirmed=email_confirmed)
    db.add(db_user)
    await db.commit()
    await db.refresh(db_user)
    return db_user


async def confirm_user_email(db: AsyncSession, user_id: int) -> Optional[User]:
    user = await get_user_by_id(db, user_id)
    if not user:
        return None
    if not user.email_confirmed:
        user.email_confirmed = True
        await db.commit()
        await db.refresh(user)
    return user


async def delete_user(db: AsyncSession, user_id: int) -> None:
    user = await get_user_by_id(db, user_id)
    if user:
        await db.delete(user)
        await db.commit()
