import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from app.core.dependencies import get_current_user, get_summary_repository
from app.models.user import User
from app.repositories.summary_repository import SummaryRepository
from app.schemas.summary import WeeklySummaryCreate, WeeklySummaryRead

router = APIRouter(tags=["summaries"])

logger = logging.getLogger(__name__)


@router.get("/{week_start}", response_model=Optional[WeeklySummaryRead])
async def get_weekly_summary(
        week_start: date,
        current_user: User = Depends(get_current_user),
        repo: SummaryRepository = Depends(get_summary_repository),
):
    """The stored summary for the week, or null when none was generated yet."""
    return await repo.get_for_week(current_user.id, week_start)


@router.put("", response_model=WeeklySummaryRead)
async def save_weekly_summary(
        summary: WeeklySummaryCreate,
        current_user: User = Depends(get_current_user),
        repo: SummaryRepository = Depends(get_summary_repository),
):
    """Upsert on (user, week_start): saving twice overwrites the first row."""
    try:
        return await repo.upsert(current_user.id, summary)
    except Exception as e:
        await repo.db.rollback()
        logger.error(f"Error saving weekly summary: {e}")
        raise HTTPException(status_code=500, detail=f"Error saving weekly summary: {str(e)}")
