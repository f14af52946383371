from pydantic import BaseModel, Field
from typing import Optional, List, Dict
from datetime import date as DateType, datetime


class WeekStats(BaseModel):
    total_duration: int = Field(default=0, alias="totalDuration")
    exercise_stats: Dict[str, int] = Field(default_factory=dict, alias="exerciseStats")

    class Config:
        populate_by_name = True


class SummaryEntry(BaseModel):
    """Entry fields the summary generator cares about; everything else is ignored."""
    date: DateType
    exercise: str
    count: int = 0
    duration: int = 0
    weight: Optional[float] = None
    feeling: str = ""


class SummaryRequest(BaseModel):
    # Optional on purpose: missing fields are answered with 400, not 422
    current_week_entries: Optional[List[SummaryEntry]] = Field(default=None, alias="currentWeekEntries")
    last_week_entries: Optional[List[SummaryEntry]] = Field(default=None, alias="lastWeekEntries")
    week_start: Optional[str] = Field(default=None, alias="weekStart")

    class Config:
        populate_by_name = True


class SummaryResult(BaseModel):
    week_start: str
    total_duration: int
    exercise_stats: Dict[str, int]
    comparison_with_last_week: str
    improvement_suggestions: str
    generated_at: datetime


class WeeklySummaryCreate(BaseModel):
    week_start: DateType
    total_duration: int = 0
    exercise_stats: Dict[str, int] = {}
    comparison_with_last_week: str = ""
    improvement_suggestions: str = ""
    generated_at: Optional[datetime] = None


class WeeklySummaryRead(BaseModel):
    id: str
    user_id: int
    week_start: DateType
    total_duration: int
    exercise_stats: Dict[str, int]
    comparison_with_last_week: str
    improvement_suggestions: str
    generated_at: datetime
    created_at: datetime

    class Config:
        from_attributes = True
