import uuid
from datetime import datetime

from sqlalchemy import Column, Integer, String, Date, DateTime, Float, ForeignKey, Text, Index
from sqlalchemy.orm import relationship

from app.core.base import Base


def new_uuid() -> str:
    return str(uuid.uuid4())


class ExerciseEntry(Base):
    """One persisted set of an exercise on a given day."""
    __tablename__ = "exercise_entries"
    __table_args__ = (
        Index("ix_exercise_entries_user_date", "user_id", "date"),
    )

    id = Column(String(36), primary_key=True, default=new_uuid)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    # Rows written by one form submission share this id; NULL for legacy rows
    submission_id = Column(String(36), nullable=True, index=True)
    set_index = Column(Integer, default=0, nullable=False)
    date = Column(Date, nullable=False)
    exercise = Column(String, nullable=False)
    count = Column(Integer, default=0, nullable=False)
    # Only the first set of a submission carries the total
    duration = Column(Integer, default=0, nullable=False)
    weight = Column(Float, nullable=True)
    feeling = Column(Text, default="", nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="exercise_entries")
