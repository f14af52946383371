from app.models.user import User
from app.models.exercise_entry import ExerciseEntry
from app.models.weekly_summary import WeeklySummary
from app.models.user_exercise import UserExercise, PRESET_EXERCISES

__all__ = [
    "User",
    "ExerciseEntry",
    "WeeklySummary",
    "UserExercise", "PRESET_EXERCISES",
]
