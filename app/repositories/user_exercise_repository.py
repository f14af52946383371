from datetime import datetime
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user_exercise import UserExercise, PRESET_EXERCISES


class UserExerciseRepository:
    """Custom exercises and hidden presets share the user_exercises table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_for_user(self, user_id: int) -> List[UserExercise]:
        result = await self.db.execute(
            select(UserExercise)
            .where(UserExercise.user_id == user_id)
            .order_by(UserExercise.created_at)
        )
        return list(result.scalars().all())

    async def get(self, user_id: int, exercise: str) -> Optional[UserExercise]:
        result = await self.db.execute(
            select(UserExercise).where(
                UserExercise.user_id == user_id,
                UserExercise.exercise == exercise,
            )
        )
        return result.scalar_one_or_none()

    async def add_custom(self, user_id: int, exercise: str) -> UserExercise:
        """Add a custom exercise. Re-adding a hidden preset only clears its flag."""
        existing = await self.get(user_id, exercise)
        if existing is not None:
            if existing.is_hidden_preset:
                existing.is_hidden_preset = False
                existing.updated_at = datetime.utcnow()
                await self.db.commit()
            return existing

        row = UserExercise(user_id=user_id, exercise=exercise, is_hidden_preset=False)
        self.db.add(row)
        await self.db.commit()
        await self.db.refresh(row)
        return row

    async def hide_preset(self, user_id: int, exercise: str) -> UserExercise:
        if exercise not in PRESET_EXERCISES:
            raise ValueError(f"'{exercise}' is not a preset exercise")

        existing = await self.get(user_id, exercise)
        if existing is not None:
            if not existing.is_hidden_preset:
                existing.is_hidden_preset = True
                existing.updated_at = datetime.utcnow()
                await self.db.commit()
            return existing

        row = UserExercise(user_id=user_id, exercise=exercise, is_hidden_preset=True)
        self.db.add(row)
        await self.db.commit()
        await self.db.refresh(row)
        return row

    async def delete_custom(self, user_id: int, exercise: str) -> bool:
        existing = await self.get(user_id, exercise)
        if existing is None or existing.is_hidden_preset:
            return False
        await self.db.delete(existing)
        await self.db.commit()
        return True
