"""Pure triage logic - partitions tasks into time-relative buckets."""

from collections import Counter
from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import Enum

from .errors import ValidationError
from .tasks import Task, TaskStatus, resolve_snooze

# Upcoming covers today+1 .. today+6; scheduled starts at today+7.
UPCOMING_HORIZON_DAYS = 6
SCHEDULED_HORIZON_DAYS = 7

SCHEDULED_ORDERS = ("closest", "furthest")


class Bucket(Enum):
    """Triage bucket, in precedence order."""

    COMPLETED = "completed"
    OVERDUE = "overdue"
    DUE_TODAY = "due_today"
    UPCOMING = "upcoming"
    SCHEDULED = "scheduled"
    UNSCHEDULED = "unscheduled"


@dataclass
class TriageBuckets:
    """Result of classifying a task set against one day."""

    today: date
    overdue: list[Task] = field(default_factory=list)
    due_today: list[Task] = field(default_factory=list)
    upcoming: list[Task] = field(default_factory=list)
    scheduled: list[Task] = field(default_factory=list)
    completed: list[Task] = field(default_factory=list)
    unscheduled: list[Task] = field(default_factory=list)

    def get(self, bucket: Bucket) -> list[Task]:
        return getattr(self, bucket.value)

    def counts(self) -> dict[str, int]:
        return {b.value: len(self.get(b)) for b in Bucket}


def bucket_for(task: Task, today: date) -> Bucket:
    """
    Classify a single task.

    Precedence: done beats any date logic, then the due date decides.
    Expects a snooze-resolved task.
    """
    if task.status == TaskStatus.DONE:
        return Bucket.COMPLETED
    if task.due_date is None:
        return Bucket.UNSCHEDULED
    if task.due_date < today:
        return Bucket.OVERDUE
    if task.due_date == today:
        return Bucket.DUE_TODAY
    if task.due_date <= today + timedelta(days=UPCOMING_HORIZON_DAYS):
        return Bucket.UPCOMING
    if task.due_date >= today + timedelta(days=SCHEDULED_HORIZON_DAYS):
        return Bucket.SCHEDULED
    # Unreachable while the two horizons are adjacent.
    raise AssertionError(f"Task {task.id} fell between triage horizons")


def sort_scheduled(tasks: list[Task], order: str = "closest") -> list[Task]:
    """Sort by due date: closest first, or furthest first."""
    if order not in SCHEDULED_ORDERS:
        raise ValidationError(f"scheduled order must be one of: {', '.join(SCHEDULED_ORDERS)}")
    return sorted(tasks, key=lambda t: t.due_date, reverse=order == "furthest")


def sort_completed(tasks: list[Task]) -> list[Task]:
    """Most recently completed first."""
    return sorted(tasks, key=lambda t: t.updated_at, reverse=True)


def filter_completed_on(tasks: list[Task], day: date) -> list[Task]:
    """Keep completed tasks whose last write fell on the given day."""
    return [t for t in tasks if t.completed_on() == day]


def classify(
    tasks: list[Task],
    today: date,
    scheduled_order: str = "closest",
    completed_on: date | None = None,
) -> TriageBuckets:
    """
    Partition tasks into the six triage buckets.

    Pure function - no I/O. Every task lands in exactly one bucket; the
    completed_on filter narrows only the completed view.
    """
    if scheduled_order not in SCHEDULED_ORDERS:
        raise ValidationError(f"scheduled order must be one of: {', '.join(SCHEDULED_ORDERS)}")

    result = TriageBuckets(today=today)
    for task in tasks:
        resolved = resolve_snooze(task, today)
        result.get(bucket_for(resolved, today)).append(resolved)

    result.overdue.sort(key=lambda t: t.due_date)
    result.upcoming.sort(key=lambda t: t.due_date)
    result.scheduled = sort_scheduled(result.scheduled, scheduled_order)
    result.completed = sort_completed(result.completed)
    if completed_on is not None:
        result.completed = filter_completed_on(result.completed, completed_on)
    return result


def completions_by_day(tasks: list[Task], year: int, month: int) -> dict[date, int]:
    """Count done tasks per completion day within one month."""
    counts = Counter(
        t.completed_on()
        for t in tasks
        if t.is_done and t.updated_at.year == year and t.updated_at.month == month
    )
    return dict(sorted(counts.items()))
