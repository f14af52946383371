"""
In-memory state of the displayed week with optimistic mutations.

The store owns the entry list of one week, its per-day projection and
the week's AI summary. Mutations are applied locally first, then sent
through the gateway:

- success: a silent background reload replaces temporary ids with the
  server's ones;
- failure: the local change is undone (or the week is reloaded) and the
  ``notify`` callback receives a user-facing message.

Public methods never raise on gateway or validation failures; they
return ``False`` instead.

Every async result is checked against the week it was issued for, and
loads carry a generation number, so a response that lands after the user
moved to another week (or after a newer load) is dropped.
"""

import asyncio
import logging
import uuid
from bisect import insort
from datetime import date, datetime
from typing import Any, Callable, Dict, Iterable, List, Optional, Set, Union

from pydantic import ValidationError

from app.client.gateway import GatewayError, RemoteGateway
from app.schemas.entry import DayRecord, ExerciseEntryRead, ExerciseFormData, WeekData
from app.schemas.summary import WeeklySummaryCreate, WeeklySummaryRead
from app.services.day_records import build_week_data, entry_sort_key, group_entries_by_day
from app.services.entry_shaping import rows_to_form, select_submission, sets_to_rows
from app.services.summary_builder import build_summary_request, calculate_week_stats
from app.utils.date_utils import (
    get_next_week_start,
    get_previous_week_start,
    get_week_end,
    get_week_start,
)

logger = logging.getLogger(__name__)

TEMP_ID_PREFIX = "temp-"

Notifier = Callable[[str], None]


def _log_notification(message: str) -> None:
    logger.warning(f"Notification: {message}")


def is_temporary(entry: ExerciseEntryRead) -> bool:
    return entry.id.startswith(TEMP_ID_PREFIX)


class EntryStore:
    LOAD_FAILED = "Failed to load data, please check your network connection"
    SAVE_FAILED = "Failed to save, please try again"
    DELETE_FAILED = "Failed to delete, please try again"
    SUMMARY_FAILED = "Failed to generate summary, please check the API configuration"
    NOT_FOUND = "This entry no longer exists"

    def __init__(
            self,
            gateway: RemoteGateway,
            notify: Optional[Notifier] = None,
            week_start: Optional[date] = None,
    ):
        self.gateway = gateway
        self.notify = notify or _log_notification
        self.week_start: date = get_week_start(week_start or date.today())

        self._entries: List[ExerciseEntryRead] = []
        self._days: Dict[date, DayRecord] = {}
        self.summary: Optional[WeeklySummaryRead] = None

        self.is_loading = False
        self.is_generating_summary = False
        self.error: Optional[str] = None

        self._load_generation = 0
        self._background: Set[asyncio.Task] = set()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def entries(self) -> List[ExerciseEntryRead]:
        return list(self._entries)

    @property
    def days(self) -> Dict[date, DayRecord]:
        """Per-day records of the current entries; days without entries are absent."""
        return dict(self._days)

    @property
    def week_end(self) -> date:
        return get_week_end(self.week_start)

    def week_data(self) -> WeekData:
        return build_week_data(self.week_start, self._entries)

    def find(self, entry_id: str) -> Optional[ExerciseEntryRead]:
        return next((e for e in self._entries if e.id == entry_id), None)

    def form_for(self, entry_id: str) -> Optional[ExerciseFormData]:
        """The full submission of ``entry_id`` as an editable form."""
        rows = select_submission(self._entries, entry_id)
        return rows_to_form(rows) if rows else None

    def _set_entries(self, entries: Iterable[ExerciseEntryRead]) -> None:
        # The only place where the collection changes: the projection follows it
        self._entries = list(entries)
        self._days = group_entries_by_day(self._entries)

    def _in_week(self, day: date) -> bool:
        return self.week_start <= day <= self.week_end

    def _is_current(self, week: date) -> bool:
        return self.week_start == week

    @staticmethod
    def _with_inserted(
            entries: Iterable[ExerciseEntryRead],
            new_rows: Iterable[ExerciseEntryRead],
    ) -> List[ExerciseEntryRead]:
        result = list(entries)
        for row in new_rows:
            insort(result, row, key=entry_sort_key)
        return result

    @staticmethod
    def _placeholders(
            form: ExerciseFormData,
            submission_id: Optional[str],
            created_at: Optional[datetime] = None,
    ) -> List[ExerciseEntryRead]:
        now = datetime.utcnow()
        return [
            ExerciseEntryRead(
                id=f"{TEMP_ID_PREFIX}{uuid.uuid4()}",
                submission_id=row.submission_id,
                set_index=row.set_index,
                date=row.date,
                exercise=row.exercise,
                count=row.count,
                duration=row.duration,
                weight=row.weight,
                feeling=row.feeling,
                created_at=created_at or now,
                updated_at=now,
            )
            for row in sets_to_rows(form, submission_id)
        ]

    def _validate_form(self, form: Union[ExerciseFormData, Dict[str, Any]]) -> Optional[ExerciseFormData]:
        if isinstance(form, ExerciseFormData):
            return form
        try:
            return ExerciseFormData.model_validate(form)
        except ValidationError as e:
            message = e.errors()[0].get("msg", "Invalid entry")
            logger.info(f"Rejected entry form: {message}")
            self.notify(message)
            return None

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def load(self, week_start: Optional[date] = None, silent: bool = False) -> bool:
        """Replace entries and summary with the server's view of a week.

        ``silent`` reloads keep the loading flag down and do not notify.
        """
        week = get_week_start(week_start or self.week_start)
        self.week_start = week
        self._load_generation += 1
        generation = self._load_generation

        if not silent:
            self.is_loading = True
            self.error = None

        try:
            entries = await self.gateway.list_entries(week, get_week_end(week))
            summary = await self.gateway.get_weekly_summary(week)
        except GatewayError as e:
            if generation != self._load_generation:
                return False
            self.is_loading = False
            logger.error(f"Error loading week {week}: {e}")
            if not silent:
                self.error = self.LOAD_FAILED
                self.notify(self.LOAD_FAILED)
            return False

        if generation != self._load_generation:
            logger.debug(f"Dropping stale load of week {week}")
            return False

        self._set_entries(entries)
        self.summary = summary
        self.is_loading = False
        return True

    async def show_week(self, day: date) -> bool:
        return await self.load(get_week_start(day))

    async def previous_week(self) -> bool:
        return await self.load(get_previous_week_start(self.week_start))

    async def next_week(self) -> bool:
        return await self.load(get_next_week_start(self.week_start))

    async def this_week(self) -> bool:
        return await self.load(get_week_start(date.today()))

    async def _refresh(self, week: date) -> bool:
        if not self._is_current(week):
            return False
        return await self.load(week, silent=True)

    def _schedule_refresh(self, week: date) -> None:
        task = asyncio.create_task(self._refresh(week))
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    async def drain(self) -> None:
        """Wait for every scheduled background reload."""
        while self._background:
            await asyncio.gather(*list(self._background))

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def add(self, form: Union[ExerciseFormData, Dict[str, Any]]) -> bool:
        form = self._validate_form(form)
        if form is None:
            return False

        week = self.week_start
        placeholders = self._placeholders(form, submission_id=f"{TEMP_ID_PREFIX}{uuid.uuid4()}")
        if self._in_week(form.date):
            self._set_entries(self._with_inserted(self._entries, placeholders))

        try:
            await self.gateway.create_entries(form)
        except GatewayError as e:
            logger.error(f"Error adding entry: {e}")
            if self._is_current(week):
                placeholder_ids = {p.id for p in placeholders}
                self._set_entries(row for row in self._entries if row.id not in placeholder_ids)
                await self._refresh(week)
            self.notify(self.SAVE_FAILED)
            return False

        self._schedule_refresh(week)
        return True

    async def update(self, entry_id: str, form: Union[ExerciseFormData, Dict[str, Any]]) -> bool:
        """Replace the whole submission ``entry_id`` belongs to."""
        form = self._validate_form(form)
        if form is None:
            return False

        week = self.week_start
        old_rows = select_submission(self._entries, entry_id)
        old_ids = {row.id for row in old_rows}
        if old_rows:
            submission_id = old_rows[0].submission_id
            placeholders = self._placeholders(form, submission_id, created_at=old_rows[0].created_at)
        else:
            placeholders = self._placeholders(form, f"{TEMP_ID_PREFIX}{uuid.uuid4()}")

        remaining = [row for row in self._entries if row.id not in old_ids]
        visible = [p for p in placeholders if self._in_week(p.date)]
        self._set_entries(self._with_inserted(remaining, visible))

        try:
            await self.gateway.replace_entries(entry_id, form)
        except GatewayError as e:
            logger.error(f"Error updating entry {entry_id}: {e}")
            if self._is_current(week) and not await self._refresh(week) and self._is_current(week):
                placeholder_ids = {p.id for p in placeholders}
                restored = [row for row in self._entries if row.id not in placeholder_ids]
                missing = [row for row in old_rows if self.find(row.id) is None]
                self._set_entries(self._with_inserted(restored, missing))
            self.notify(self.NOT_FOUND if e.status_code == 404 else self.SAVE_FAILED)
            return False

        self._schedule_refresh(week)
        return True

    async def delete(self, entry_id: str) -> bool:
        entry = self.find(entry_id)
        if entry is None:
            self.notify(self.NOT_FOUND)
            return False

        week = self.week_start
        self._set_entries(row for row in self._entries if row.id != entry_id)

        try:
            await self.gateway.delete_entry(entry_id)
        except GatewayError as e:
            logger.error(f"Error deleting entry {entry_id}: {e}")
            if self._is_current(week) and self.find(entry_id) is None:
                self._set_entries(self._with_inserted(self._entries, [entry]))
            self.notify(self.DELETE_FAILED)
            return False

        self._schedule_refresh(week)
        return True

    # ------------------------------------------------------------------
    # Weekly summary
    # ------------------------------------------------------------------

    async def generate_summary(self) -> bool:
        """Ask the AI gateway for this week's summary and store it."""
        if self.is_generating_summary:
            return False

        self.is_generating_summary = True
        week = self.week_start
        current_entries = list(self._entries)

        try:
            previous_start = get_previous_week_start(week)
            last_week_entries = await self.gateway.list_entries(previous_start, get_week_end(previous_start))

            result = await self.gateway.generate_summary(
                build_summary_request(current_entries, last_week_entries or None, week)
            )

            # Totals come from the entries we sent, not from the model
            stats = calculate_week_stats(current_entries)
            saved = await self.gateway.save_weekly_summary(WeeklySummaryCreate(
                week_start=week,
                total_duration=stats.total_duration,
                exercise_stats=stats.exercise_stats,
                comparison_with_last_week=result.comparison_with_last_week,
                improvement_suggestions=result.improvement_suggestions,
                generated_at=result.generated_at,
            ))
        except (GatewayError, ValidationError) as e:
            logger.error(f"Error generating summary for week {week}: {e}")
            self.notify(self.SUMMARY_FAILED)
            return False
        finally:
            self.is_generating_summary = False

        if self._is_current(week):
            self.summary = saved
        return True
