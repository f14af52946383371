"""
Conversion between the entry form and persisted exercise_entries rows.

A submission with N sets becomes N rows. Only the first row carries the
total duration so that summing duration over a week counts it once.
"""

from typing import List, Optional, Sequence

from app.schemas.entry import ExerciseFormData, ExerciseRowPayload, ExerciseSet


def sets_to_rows(form: ExerciseFormData, submission_id: Optional[str] = None) -> List[ExerciseRowPayload]:
    rows = []
    for index, exercise_set in enumerate(form.sets):
        rows.append(ExerciseRowPayload(
            submission_id=submission_id,
            set_index=index,
            date=form.date,
            exercise=form.exercise,
            count=exercise_set.count,
            duration=form.duration if index == 0 else 0,
            weight=exercise_set.weight,
            feeling=form.feeling,
        ))
    return rows


def select_submission(entries: Sequence, entry_id: str) -> List:
    """Rows belonging to the same submission as ``entry_id``, in set order.

    Rows without a submission id are treated as one-row submissions.
    Returns an empty list when ``entry_id`` is unknown.
    """
    target = next((e for e in entries if e.id == entry_id), None)
    if target is None:
        return []
    if target.submission_id is None:
        return [target]
    group = [e for e in entries if e.submission_id == target.submission_id]
    return sorted(group, key=lambda e: (e.set_index, e.created_at))


def rows_to_form(rows: Sequence) -> ExerciseFormData:
    if not rows:
        raise ValueError("Cannot build a form from an empty submission")

    ordered = sorted(rows, key=lambda e: (e.set_index, e.created_at))
    first = ordered[0]
    return ExerciseFormData(
        date=first.date,
        exercise=first.exercise,
        sets=[ExerciseSet(weight=row.weight, count=row.count) for row in ordered],
        duration=sum(row.duration for row in ordered),
        feeling=first.feeling or "",
    )
