from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from app.core.base import Base
from datetime import datetime

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, nullable=False)
    password = Column(String, nullable=False)
    refresh_token = Column(String, nullable=True)
    refresh_token_expires = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    exercise_entries = relationship("ExerciseEntry", back_populates="user", cascade="all, delete")
    weekly_summaries = relationship("WeeklySummary", back_populates="user", cascade="all, delete")
    user_exercises = relationship("UserExercise", back_populates="user", cascade="all, delete")
