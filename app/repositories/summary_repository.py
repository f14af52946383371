import logging
from datetime import date, datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.weekly_summary import WeeklySummary
from app.schemas.summary import WeeklySummaryCreate

logger = logging.getLogger(__name__)


class SummaryRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_for_week(self, user_id: int, week_start: date) -> Optional[WeeklySummary]:
        result = await self.db.execute(
            select(WeeklySummary).where(
                WeeklySummary.user_id == user_id,
                WeeklySummary.week_start == week_start,
            )
        )
        return result.scalar_one_or_none()

    def _apply(self, summary: WeeklySummary, data: WeeklySummaryCreate) -> None:
        summary.total_duration = data.total_duration
        summary.exercise_stats = dict(data.exercise_stats)
        summary.comparison_with_last_week = data.comparison_with_last_week
        summary.improvement_suggestions = data.improvement_suggestions
        summary.generated_at = data.generated_at or datetime.utcnow()

    async def upsert(self, user_id: int, data: WeeklySummaryCreate) -> WeeklySummary:
        """Insert or overwrite the summary keyed by (user_id, week_start)."""
        summary = await self.get_for_week(user_id, data.week_start)
        if summary is None:
            summary = WeeklySummary(user_id=user_id, week_start=data.week_start, created_at=datetime.utcnow())
            self._apply(summary, data)
            self.db.add(summary)
            try:
                await self.db.commit()
                return summary
            except IntegrityError:
                # A concurrent request inserted the same week first
                await self.db.rollback()
                logger.info(f"Weekly summary {data.week_start} for user {user_id} already exists, updating")
                summary = await self.get_for_week(user_id, data.week_start)
                if summary is None:
                    raise

        self._apply(summary, data)
        await self.db.commit()
        return summary
