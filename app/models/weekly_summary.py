from datetime import datetime

from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, JSON, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from app.core.base import Base
from app.models.exercise_entry import new_uuid


class WeeklySummary(Base):
    __tablename__ = "weekly_summaries"
    __table_args__ = (
        UniqueConstraint("user_id", "week_start", name="uq_weekly_summaries_user_week"),
    )

    id = Column(String(36), primary_key=True, default=new_uuid)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    week_start = Column(Date, nullable=False)
    total_duration = Column(Integer, default=0, nullable=False)
    exercise_stats = Column(JSON, default=dict, nullable=False)
    comparison_with_last_week = Column(Text, default="", nullable=False)
    improvement_suggestions = Column(Text, default="", nullable=False)
    generated_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="weekly_summaries")
