from datetime import datetime

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from app.core.base import Base
from app.models.exercise_entry import new_uuid

PRESET_EXERCISES = (
    "Push-ups",
    "Squats",
    "Pull-ups",
    "Sit-ups",
    "Plank",
    "Running",
    "Jump rope",
    "Dumbbell curls",
    "Deadlift",
    "Bench press",
)


class UserExercise(Base):
    """Custom exercise, or a hidden preset when is_hidden_preset is set."""
    __tablename__ = "user_exercises"
    __table_args__ = (
        UniqueConstraint("user_id", "exercise", name="uq_user_exercises_user_exercise"),
    )

    id = Column(String(36), primary_key=True, default=new_uuid)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    exercise = Column(String, nullable=False)
    is_hidden_preset = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="user_exercises")
