# app/models/database_models/weekly_reflection.py
from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.data.database import Base


class WeeklyReflection(Base):
    __tablename__ = "reflections"
    __table_args__ = (UniqueConstraint("user_id", "week_start", name="uq_reflections_user_week"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    week_start = Column(Date, nullable=False)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    user = relationship("User", back_populates="reflections")
