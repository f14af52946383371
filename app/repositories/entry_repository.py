from datetime import date, datetime
from typing import List, Optional, Sequence

from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.exercise_entry import ExerciseEntry, new_uuid
from app.schemas.entry import ExerciseRowPayload


class EntryRepository:
    """exercise_entries access. Every query is scoped to the given user."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_for_range(self, user_id: int, start: date, end: date) -> List[ExerciseEntry]:
        result = await self.db.execute(
            select(ExerciseEntry)
            .where(
                ExerciseEntry.user_id == user_id,
                ExerciseEntry.date >= start,
                ExerciseEntry.date <= end,
            )
            .order_by(ExerciseEntry.date, ExerciseEntry.created_at, ExerciseEntry.set_index)
        )
        return list(result.scalars().all())

    async def get(self, user_id: int, entry_id: str) -> Optional[ExerciseEntry]:
        result = await self.db.execute(
            select(ExerciseEntry).where(
                ExerciseEntry.user_id == user_id,
                ExerciseEntry.id == entry_id,
            )
        )
        return result.scalar_one_or_none()

    async def get_submission(self, user_id: int, entry_id: str) -> List[ExerciseEntry]:
        """All rows of the submission ``entry_id`` belongs to, in set order."""
        entry = await self.get(user_id, entry_id)
        if entry is None:
            return []
        if entry.submission_id is None:
            return [entry]

        result = await self.db.execute(
            select(ExerciseEntry)
            .where(
                ExerciseEntry.user_id == user_id,
                ExerciseEntry.submission_id == entry.submission_id,
            )
            .order_by(ExerciseEntry.set_index, ExerciseEntry.created_at)
        )
        return list(result.scalars().all())

    def _build_rows(
            self,
            user_id: int,
            rows: Sequence[ExerciseRowPayload],
            submission_id: str,
            created_at: datetime,
    ) -> List[ExerciseEntry]:
        now = datetime.utcnow()
        return [
            ExerciseEntry(
                id=new_uuid(),
                user_id=user_id,
                submission_id=submission_id,
                set_index=row.set_index,
                date=row.date,
                exercise=row.exercise,
                count=row.count,
                duration=row.duration,
                weight=row.weight,
                feeling=row.feeling,
                created_at=created_at,
                updated_at=now,
            )
            for row in rows
        ]

    async def create_submission(self, user_id: int, rows: Sequence[ExerciseRowPayload]) -> List[ExerciseEntry]:
        submission_id = rows[0].submission_id if rows and rows[0].submission_id else new_uuid()
        entries = self._build_rows(user_id, rows, submission_id, datetime.utcnow())
        self.db.add_all(entries)
        await self.db.commit()
        return entries

    async def replace_submission(
            self,
            user_id: int,
            entry_id: str,
            rows: Sequence[ExerciseRowPayload],
    ) -> Optional[List[ExerciseEntry]]:
        """Delete the submission of ``entry_id`` and insert ``rows`` in its place.

        Both steps share one transaction. The new rows keep the submission id
        and creation time of the old group so the entry keeps its place in the
        day. Returns None when the entry does not exist for this user.
        """
        old_rows = await self.get_submission(user_id, entry_id)
        if not old_rows:
            return None

        first = old_rows[0]
        submission_id = first.submission_id or new_uuid()
        created_at = first.created_at

        await self.db.execute(
            delete(ExerciseEntry).where(
                ExerciseEntry.user_id == user_id,
                ExerciseEntry.id.in_([row.id for row in old_rows]),
            )
        )
        entries = self._build_rows(user_id, rows, submission_id, created_at)
        self.db.add_all(entries)
        await self.db.commit()
        return entries

    async def delete(self, user_id: int, entry_id: str) -> bool:
        result = await self.db.execute(
            delete(ExerciseEntry).where(
                ExerciseEntry.user_id == user_id,
                ExerciseEntry.id == entry_id,
            )
        )
        await self.db.commit()
        return result.rowcount > 0
