"""
Weekly statistics and the prompt payload for the AI summary.

Everything here is pure: the same entries always give the same stats,
request body and prompt.
"""

import json
from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from app.schemas.summary import WeekStats


def calculate_week_stats(entries: Iterable) -> WeekStats:
    total_duration = 0
    exercise_stats: Dict[str, int] = {}

    for entry in entries:
        total_duration += entry.duration
        exercise_stats[entry.exercise] = exercise_stats.get(entry.exercise, 0) + entry.count

    return WeekStats(total_duration=total_duration, exercise_stats=exercise_stats)


def build_summary_request(
        current_week_entries: Sequence,
        last_week_entries: Optional[Sequence],
        week_start: Union[date, str],
) -> Dict[str, Any]:
    """Body of POST /generate-summary. An empty previous week is sent as null."""
    return {
        "currentWeekEntries": [e.model_dump(mode="json") for e in current_week_entries],
        "lastWeekEntries": (
            [e.model_dump(mode="json") for e in last_week_entries]
            if last_week_entries else None
        ),
        "weekStart": week_start.isoformat() if isinstance(week_start, date) else week_start,
    }


def _entry_details(entries: Sequence) -> List[Dict[str, Any]]:
    return [
        {
            "date": str(e.date),
            "exercise": e.exercise,
            "count": e.count,
            "weight": e.weight,
            "duration": e.duration,
            "feeling": e.feeling,
        }
        for e in entries
    ]


def build_summary_prompt(
        current_week_entries: Sequence,
        current_stats: WeekStats,
        last_week_stats: Optional[WeekStats] = None,
) -> str:
    if last_week_stats is not None:
        last_week_block = f"""LAST WEEK:
- Total training time: {last_week_stats.total_duration} minutes
- Exercise totals: {json.dumps(last_week_stats.exercise_stats, ensure_ascii=False, indent=2)}"""
    else:
        last_week_block = "LAST WEEK: no data"

    return f"""
You are a professional fitness coach assistant. Write an encouraging weekly summary based on the training data below.

THIS WEEK:
- Total training time: {current_stats.total_duration} minutes
- Exercise totals: {json.dumps(current_stats.exercise_stats, ensure_ascii=False, indent=2)}
- Detailed log: {json.dumps(_entry_details(current_week_entries), ensure_ascii=False, indent=2)}

{last_week_block}

The summary has two parts:

1. Week comparison (comparison_with_last_week):
   - total training time this week and the number of active days
   - changes compared to last week, if there is data for it
   - which exercises improved and which need more work
   - keep the tone encouraging

2. Suggestions (improvement_suggestions):
   - concrete, actionable improvements based on this week's data
   - new training ideas to try next week
   - tips for staying motivated

Reply in JSON with exactly this shape:
{{
  "comparison_with_last_week": "...",
  "improvement_suggestions": "..."
}}

Return only the JSON object and nothing else.
"""
