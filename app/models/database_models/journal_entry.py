# app/models/database_models/journal_entry.py
from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.data.database import Base


class JournalEntry(Base):
    __tablename__ = "entries"
    __table_args__ = (UniqueConstraint("user_id", "date", name="uq_entries_user_date"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    answer_1 = Column(Text, nullable=False, default="")
    answer_2 = Column(Text, nullable=False, default="")
    answer_3 = Column(Text, nullable=False, default="")
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="entries")
