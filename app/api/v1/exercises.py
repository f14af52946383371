from fastapi import APIRouter, Depends, HTTPException, status

from app.core.dependencies import get_current_user, get_user_exercise_repository
from app.models.user import User
from app.models.user_exercise import PRESET_EXERCISES
from app.repositories.user_exercise_repository import UserExerciseRepository
from app.schemas.user_exercise import ExerciseCatalog, UserExerciseCreate, UserExerciseRead

router = APIRouter(tags=["exercises"])


@router.get("", response_model=ExerciseCatalog)
async def get_exercises(
        current_user: User = Depends(get_current_user),
        repo: UserExerciseRepository = Depends(get_user_exercise_repository),
):
    """Visible presets, custom exercises and the presets the user hid."""
    rows = await repo.list_for_user(current_user.id)
    hidden = {row.exercise for row in rows if row.is_hidden_preset}

    return ExerciseCatalog(
        presets=[name for name in PRESET_EXERCISES if name not in hidden],
        custom=[
            row.exercise for row in rows
            if not row.is_hidden_preset and row.exercise not in PRESET_EXERCISES
        ],
        hidden_presets=[name for name in PRESET_EXERCISES if name in hidden],
    )


@router.post("", response_model=UserExerciseRead, status_code=status.HTTP_201_CREATED)
async def add_exercise(
        data: UserExerciseCreate,
        current_user: User = Depends(get_current_user),
        repo: UserExerciseRepository = Depends(get_user_exercise_repository),
):
    return await repo.add_custom(current_user.id, data.exercise)


@router.post("/hide", response_model=UserExerciseRead)
async def hide_preset(
        data: UserExerciseCreate,
        current_user: User = Depends(get_current_user),
        repo: UserExerciseRepository = Depends(get_user_exercise_repository),
):
    try:
        return await repo.hide_preset(current_user.id, data.exercise)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/{exercise:path}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_exercise(
        exercise: str,
        current_user: User = Depends(get_current_user),
        repo: UserExerciseRepository = Depends(get_user_exercise_repository),
):
    if exercise in PRESET_EXERCISES:
        raise HTTPException(status_code=409, detail="Preset exercises can only be hidden")
    if not await repo.delete_custom(current_user.id, exercise):
        raise HTTPException(status_code=404, detail="Exercise not found")
