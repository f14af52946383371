import logging
from datetime import date
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.core.dependencies import get_current_user, get_entry_repository
from app.models.user import User
from app.repositories.entry_repository import EntryRepository
from app.schemas.entry import ExerciseEntryRead, ExerciseFormData, WeekData
from app.services.day_records import build_week_data
from app.services.entry_shaping import rows_to_form, sets_to_rows
from app.utils.date_utils import get_week_end, get_week_start

router = APIRouter(tags=["entries"])

logger = logging.getLogger(__name__)


@router.get("", response_model=List[ExerciseEntryRead])
async def list_entries(
        start: date = Query(..., description="First day, inclusive"),
        end: date = Query(..., description="Last day, inclusive"),
        current_user: User = Depends(get_current_user),
        repo: EntryRepository = Depends(get_entry_repository),
):
    """Entries in [start, end] ordered by date, creation time and set position."""
    if end < start:
        raise HTTPException(status_code=400, detail="end must not be before start")
    return await repo.list_for_range(current_user.id, start, end)


@router.get("/week/{day}", response_model=WeekData)
async def get_week(
        day: date,
        current_user: User = Depends(get_current_user),
        repo: EntryRepository = Depends(get_entry_repository),
):
    """Seven day records (Monday..Sunday) of the week containing ``day``."""
    week_start = get_week_start(day)
    entries = await repo.list_for_range(current_user.id, week_start, get_week_end(week_start))
    return build_week_data(week_start, [ExerciseEntryRead.model_validate(e) for e in entries])


@router.post("", response_model=List[ExerciseEntryRead], status_code=status.HTTP_201_CREATED)
async def create_entries(
        form: ExerciseFormData,
        current_user: User = Depends(get_current_user),
        repo: EntryRepository = Depends(get_entry_repository),
):
    """One row per set; only the first row carries the duration."""
    try:
        return await repo.create_submission(current_user.id, sets_to_rows(form))
    except Exception as e:
        await repo.db.rollback()
        logger.error(f"Error creating entries: {e}")
        raise HTTPException(status_code=500, detail=f"Error saving entry: {str(e)}")


@router.get("/{entry_id}/form", response_model=ExerciseFormData)
async def get_entry_form(
        entry_id: str,
        current_user: User = Depends(get_current_user),
        repo: EntryRepository = Depends(get_entry_repository),
):
    """The whole submission of an entry, rebuilt as a form for editing."""
    rows = await repo.get_submission(current_user.id, entry_id)
    if not rows:
        raise HTTPException(status_code=404, detail="Entry not found")
    return rows_to_form(rows)


@router.put("/{entry_id}", response_model=List[ExerciseEntryRead])
async def replace_entries(
        entry_id: str,
        form: ExerciseFormData,
        current_user: User = Depends(get_current_user),
        repo: EntryRepository = Depends(get_entry_repository),
):
    """Delete the submission of ``entry_id`` and insert the edited sets."""
    try:
        entries = await repo.replace_submission(current_user.id, entry_id, sets_to_rows(form))
    except Exception as e:
        await repo.db.rollback()
        logger.error(f"Error updating entry {entry_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error updating entry: {str(e)}")

    if entries is None:
        raise HTTPException(status_code=404, detail="Entry not found")
    return entries


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_entry(
        entry_id: str,
        current_user: User = Depends(get_current_user),
        repo: EntryRepository = Depends(get_entry_repository),
):
    if not await repo.delete(current_user.id, entry_id):
        raise HTTPException(status_code=404, detail="Entry not found")
