"""Pure task domain logic - no I/O dependencies."""

from dataclasses import dataclass, replace
from datetime import date, datetime
from enum import Enum

from .errors import ValidationError


class TaskStatus(Enum):
    """Stored task status."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    DONE = "done"
    SNOOZED = "snoozed"


class TaskSource(Enum):
    """Where a task came from. Informational only."""

    MANUAL = "manual"
    ASSISTANT = "assistant"


VALID_STATUSES = [s.value for s in TaskStatus]


@dataclass
class Task:
    """A unit of work, filed under a project by name."""

    id: str
    title: str
    project: str
    status: TaskStatus
    created_at: datetime
    updated_at: datetime
    notes: str | None = None
    due_date: date | None = None
    snoozed_until: date | None = None
    source: TaskSource = TaskSource.MANUAL

    @property
    def is_done(self) -> bool:
        return self.status == TaskStatus.DONE

    def completed_on(self) -> date | None:
        """Calendar day the task was last written while done."""
        if not self.is_done:
            return None
        return self.updated_at.date()


def require_text(value: str | None, field: str) -> str:
    """Trim a required text field, rejecting empty values."""
    if value is None or not str(value).strip():
        raise ValidationError(f"{field} is required")
    return str(value).strip()


def parse_status(value: "TaskStatus | str") -> TaskStatus:
    """Coerce a status value, rejecting anything outside the four known ones."""
    if isinstance(value, TaskStatus):
        return value
    try:
        return TaskStatus(value)
    except ValueError:
        raise ValidationError(
            f"Invalid status. Must be one of: {', '.join(VALID_STATUSES)}"
        ) from None


def parse_source(value: "TaskSource | str | None") -> TaskSource:
    """Anything not recognisably assistant-originated is manual."""
    if isinstance(value, TaskSource):
        return value
    if value in ("assistant", "claude"):
        return TaskSource.ASSISTANT
    return TaskSource.MANUAL


def parse_date(value: "date | str | None", field: str) -> date | None:
    """Parse an optional YYYY-MM-DD calendar date."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value.strip())
    except (AttributeError, ValueError):
        raise ValidationError(f"{field} must be a date in YYYY-MM-DD format") from None


def resolve_snooze(task: Task, today: date) -> Task:
    """
    Project a lapsed snooze back to pending.

    A snooze lapses only once snoozed_until is strictly before today; a task
    snoozed until today is still snoozed. Read-time only, never persisted.
    """
    if (
        task.status == TaskStatus.SNOOZED
        and task.snoozed_until is not None
        and task.snoozed_until < today
    ):
        return replace(task, status=TaskStatus.PENDING)
    return task


def effective_status(task: Task, today: date) -> TaskStatus:
    """Status after applying the snooze lapse check."""
    return resolve_snooze(task, today).status

