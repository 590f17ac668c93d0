"""
Task aggregation and hours budget

Both providers are queried together; their keys are resolved in a single
tracker lookup and split back by the source that suggested them.
"""

import asyncio
import math
from datetime import date

from .models import DisplayTask, Source, TaskGroups, TaskSuggestion


async def aggregate(project: str, day: date, history, tracker) -> TaskGroups:
    """
    Merge the suggestions of the git history and the tracker into groups.

    A key suggested by both sources ends up in both groups. If either
    provider fails the whole aggregation fails.
    """
    git_keys, jira_keys = await asyncio.gather(
        history.get_suggested_task_keys(project, day),
        tracker.get_suggested_task_keys(project, day),
    )

    suggestions = (
        [TaskSuggestion(key, Source.LOCAL_HISTORY) for key in git_keys]
        + [TaskSuggestion(key, Source.TRACKER) for key in jira_keys]
    )
    records = await tracker.find_tasks_with_keys([s.key for s in suggestions])

    groups = TaskGroups()
    for source in Source:
        suggested = {s.key for s in suggestions if s.origin is source}
        groups.by_source[source] = [
            DisplayTask(key=record.key, name=record.name, origin=source)
            for record in records
            if record.key in suggested
        ]
    return groups


async def already_logged(project: str, day: date, tracker) -> float:
    """Hours already logged on ``day``, 0 when nothing is logged yet"""
    worklogs = await tracker.get_worklogs(project, day)
    return sum((worklog.hours for worklog in worklogs), 0)


def hour_options(hours_per_day: int) -> list[int]:
    return list(range(hours_per_day, 0, -1))


def default_hours(hours_per_day: int, logged: float) -> int:
    """
    Hours already logged on the day, or a full day when nothing is logged.

    Fractional totals are rounded down onto the whole-hour options.
    """
    value = logged or hours_per_day
    return max(1, min(hours_per_day, math.floor(value)))
