"""Statistics and tag selection over serialized records.

Everything here is a pure function of records plus an explicit ``now`` so
the aggregations can be tested without the application. Top-N lists keep
encounter order for equal counts (Python's sort is stable).
"""

from __future__ import annotations

import math
from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import Dict, Iterable, List, Optional, Sequence

from omnifocus_mcp.core.omnifocus.dates import parse_iso
from omnifocus_mcp.core.omnifocus.models import (
    NameCount,
    NameRemaining,
    ProjectFacts,
    ProjectStats,
    StaleTag,
    Tag,
    TagListOptions,
    TagStats,
    Task,
    TaskStats,
)

TOP_N = 5
STALE_AFTER_DAYS = 30


def round_half_up(value: float, digits: int = 0) -> float:
    """Round with halves going up, e.g. 2.5 -> 3 and 2.25 -> 2.3 at one digit."""
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def _percent(part: int, whole: int) -> int:
    if whole == 0:
        return 0
    return int(round_half_up(part / whole * 100))


def _average(values: Sequence[float], digits: int = 1) -> float:
    if not values:
        return 0.0
    return round_half_up(sum(values) / len(values), digits)


def _top(counts: Dict[str, int], limit: int = TOP_N) -> List[NameCount]:
    # Counter preserves insertion order; sorted() is stable.
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [NameCount(name=name, task_count=count) for name, count in ranked[:limit]]


def _now(now: Optional[datetime]) -> datetime:
    return now if now is not None else datetime.now(timezone.utc)


def compute_task_stats(tasks: Iterable[Task], now: Optional[datetime] = None) -> TaskStats:
    """Summarize tasks into active/completed/flagged/overdue counts and top lists."""
    current = _now(now)
    tasks = list(tasks)

    active = [t for t in tasks if not t.completed and t.effectively_active]
    completed = [t for t in tasks if t.completed]
    flagged = [t for t in active if t.flagged]
    overdue = [t for t in active if t.due and parse_iso(t.due) < current]
    estimates = [t.estimated_minutes for t in tasks if t.estimated_minutes and t.estimated_minutes > 0]

    by_project: Counter = Counter()
    by_tag: Counter = Counter()
    for task in tasks:
        if not (task.completed or task.effectively_active):
            continue
        if task.project:
            by_project[task.project] += 1
        for tag in task.tags:
            by_tag[tag] += 1

    return TaskStats(
        total_tasks=len(tasks),
        active_tasks=len(active),
        completed_tasks=len(completed),
        flagged_tasks=len(flagged),
        overdue_active_tasks=len(overdue),
        avg_estimated_minutes=int(round_half_up(sum(estimates) / len(estimates))) if estimates else None,
        tasks_with_estimates=len(estimates),
        completion_rate=_percent(len(completed), len(completed) + len(active)),
        tasks_by_project=_top(by_project),
        tasks_by_tag=_top(by_tag),
    )


def compute_project_stats(projects: Iterable[ProjectFacts]) -> ProjectStats:
    """Summarize projects by status, ordering discipline and completion.

    A project counts as dropped when its status is dropped (or done) or its
    folder is inactive; otherwise it is on hold or active by status.
    """
    projects = list(projects)

    dropped = [p for p in projects if p.status == "dropped" or not p.folder_active]
    on_hold = [p for p in projects if p.status == "on hold" and p.folder_active]
    active = [p for p in projects if p.status == "active" and p.folder_active]
    sequential = [p for p in active if p.sequential]

    rates = [(p.task_count - p.remaining_count) / p.task_count * 100 for p in projects if p.task_count > 0]

    most_tasks = sorted(projects, key=lambda p: p.task_count, reverse=True)[:TOP_N]
    most_remaining = sorted(
        (p for p in projects if p.remaining_count > 0), key=lambda p: p.remaining_count, reverse=True
    )[:TOP_N]

    return ProjectStats(
        total_projects=len(projects),
        active_projects=len(active),
        on_hold_projects=len(on_hold),
        dropped_projects=len(dropped),
        sequential_projects=len(sequential),
        parallel_projects=len(active) - len(sequential),
        avg_tasks_per_project=_average([p.task_count for p in projects]),
        avg_remaining_per_project=_average([p.remaining_count for p in projects]),
        avg_completion_rate=int(round_half_up(sum(rates) / len(rates))) if rates else 0,
        projects_with_most_tasks=[NameCount(name=p.name, task_count=p.task_count) for p in most_tasks],
        projects_with_most_remaining=[
            NameRemaining(name=p.name, remaining_count=p.remaining_count) for p in most_remaining
        ],
    )


def _days_since(stamp: str, now: datetime) -> int:
    return int((now - parse_iso(stamp)) / timedelta(days=1))


def compute_tag_stats(tags: Iterable[Tag], now: Optional[datetime] = None) -> TagStats:
    """Summarize tag usage, including tags idle for more than thirty days."""
    current = _now(now)
    tags = list(tags)

    used = [t for t in tags if t.task_count > 0]
    most_used = sorted(tags, key=lambda t: t.task_count, reverse=True)[:TOP_N]
    least_used = sorted(used, key=lambda t: t.task_count)[:TOP_N]

    cutoff = current - timedelta(days=STALE_AFTER_DAYS)
    stale = [
        StaleTag(name=t.name, days_since_activity=_days_since(t.last_activity, current))
        for t in tags
        if t.last_activity and parse_iso(t.last_activity) < cutoff
    ]
    stale.sort(key=lambda s: s.days_since_activity, reverse=True)

    return TagStats(
        total_tags=len(tags),
        active_tags=sum(1 for t in tags if t.active),
        tags_with_tasks=len(used),
        unused_tags=len(tags) - len(used),
        avg_tasks_per_tag=_average([t.task_count for t in used]),
        most_used_tags=[NameCount(name=t.name, task_count=t.task_count) for t in most_used],
        least_used_tags=[NameCount(name=t.name, task_count=t.task_count) for t in least_used],
        stale_tags=stale,
    )


def select_tags(tags: Iterable[Tag], options: TagListOptions, now: Optional[datetime] = None) -> List[Tag]:
    """Apply the ``unused_days`` filter and the requested sort order.

    ``unused_days = N`` keeps tags with no recorded activity or whose last
    activity is more than N days old. Activity sort puts tags without
    activity last, in their original order.
    """
    selected = list(tags)

    if options.unused_days is not None:
        cutoff = _now(now) - timedelta(days=options.unused_days)
        selected = [t for t in selected if not t.last_activity or parse_iso(t.last_activity) < cutoff]

    if options.sort_by == "usage":
        selected.sort(key=lambda t: t.task_count, reverse=True)
    elif options.sort_by == "activity":
        with_activity = [t for t in selected if t.last_activity]
        without_activity = [t for t in selected if not t.last_activity]
        with_activity.sort(key=lambda t: parse_iso(t.last_activity), reverse=True)
        selected = with_activity + without_activity
    else:
        selected.sort(key=lambda t: (t.name.casefold(), t.name))

    return selected
