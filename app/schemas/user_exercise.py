from pydantic import BaseModel, field_validator
from typing import List
from datetime import datetime


class UserExerciseCreate(BaseModel):
    exercise: str

    @field_validator("exercise")
    @classmethod
    def exercise_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Exercise name is required")
        return value


class UserExerciseRead(BaseModel):
    id: str
    user_id: int
    exercise: str
    is_hidden_preset: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ExerciseCatalog(BaseModel):
    presets: List[str]
    custom: List[str]
    hidden_presets: List[str]
