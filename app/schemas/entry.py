from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import date as DateType, datetime


class ExerciseSet(BaseModel):
    # None (or 0) means bodyweight
    weight: Optional[float] = Field(default=None, ge=0)
    count: int = Field(default=0, ge=0)


class ExerciseFormData(BaseModel):
    date: DateType
    exercise: str
    sets: List[ExerciseSet] = Field(min_length=1)
    duration: int = Field(default=0, ge=0, description="Total minutes for the whole submission")
    feeling: str = ""

    @field_validator("exercise")
    @classmethod
    def exercise_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Exercise name is required")
        return value


class ExerciseRowPayload(BaseModel):
    """A single row ready to be inserted into exercise_entries."""
    submission_id: Optional[str] = None
    set_index: int = 0
    date: DateType
    exercise: str
    count: int
    duration: int
    weight: Optional[float] = None
    feeling: str = ""


class ExerciseEntryRead(BaseModel):
    id: str
    user_id: Optional[int] = None
    submission_id: Optional[str] = None
    set_index: int = 0
    date: DateType
    exercise: str
    count: int = 0
    duration: int = 0
    weight: Optional[float] = None
    feeling: str = ""
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class DayRecord(BaseModel):
    date: DateType
    entries: List[ExerciseEntryRead] = []
    total_duration: int = 0


class WeekData(BaseModel):
    week_start: DateType
    week_end: DateType
    days: List[DayRecord]
