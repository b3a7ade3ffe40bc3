# app/models/database_models/user.py
from sqlalchemy import Boolean, Column, DateTime, Integer, LargeBinary, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.data.database import Base
from app.models.database_models.journal_entry import JournalEntry
from app.models.database_models.weekly_reflection import WeeklyReflection

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(LargeBinary, nullable=False)
    is_active = Column(Boolean, default=True)
    email_confirmed = Column(Boolean, default=False)
    created_at = Column(DateTime, server_default=func.now())

    entries = relationship("JournalEntry", back_populates="user")
    reflections = relationship("WeeklyReflection", back_populates="user")
