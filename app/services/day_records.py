from datetime import date
from typing import Dict, Iterable, List, Sequence

from app.schemas.entry import DayRecord, ExerciseEntryRead, WeekData
from app.utils.date_utils import get_week_dates, get_week_start


def entry_sort_key(entry) -> tuple:
    """Date, then creation time, then position inside the submission."""
    return (entry.date, entry.created_at, entry.set_index)


def group_entries_by_day(entries: Iterable[ExerciseEntryRead]) -> Dict[date, DayRecord]:
    """Project an ordered entry list onto per-day records, keeping entry order."""
    records: Dict[date, DayRecord] = {}
    for entry in entries:
        record = records.get(entry.date)
        if record is None:
            record = DayRecord(date=entry.date, entries=[], total_duration=0)
            records[entry.date] = record
        record.entries.append(entry)
        record.total_duration += entry.duration
    return records


def build_week_data(week_start: date, entries: Sequence[ExerciseEntryRead]) -> WeekData:
    start = get_week_start(week_start)
    by_day = group_entries_by_day(entries)
    days: List[DayRecord] = [
        by_day.get(day) or DayRecord(date=day, entries=[], total_duration=0)
        for day in get_week_dates(start)
    ]
    return WeekData(week_start=start, week_end=days[-1].date, days=days)
