"""Triage service - the synchronous contract callers use.

Reads go store -> snooze resolver -> classifier. Writes that introduce or
change a project name go through the project registry inside the same
store transaction as the task write.
"""

import logging
from datetime import date
from typing import Any

from .core.errors import NotFoundError, ValidationError
from .core.projects import Project
from .core.tasks import (
    Task,
    TaskSource,
    TaskStatus,
    parse_date,
    parse_source,
    parse_status,
    require_text,
    resolve_snooze,
)
from .core.triage import TriageBuckets, classify, completions_by_day
from .ports.clock import Clock
from .ports.task_store import TaskStore
from .registry import ProjectRegistry

logger = logging.getLogger(__name__)

# Marks an update argument the caller did not supply; None means "clear".
UNSET: Any = object()


class TriageService:
    """Task and project operations, with triage computed on every read."""

    def __init__(
        self,
        store: TaskStore,
        clock: Clock,
        registry: ProjectRegistry | None = None,
        scheduled_order: str = "closest",
    ):
        self.store = store
        self.clock = clock
        self.registry = registry or ProjectRegistry(store, clock)
        self.scheduled_order = scheduled_order

    # ---- tasks ----

    def create_task(
        self,
        title: str,
        project: str,
        notes: str | None = None,
        due_date: date | str | None = None,
        source: TaskSource | str = TaskSource.MANUAL,
    ) -> Task:
        """Create a pending task, creating its project if it is new."""
        title = require_text(title, "title")
        project = require_text(project, "project")
        due = parse_date(due_date, "due_date")

        with self.store.transaction():
            self.registry.ensure_exists(project)
            task = self.store.insert_task(
                title=title,
                project=project,
                status=TaskStatus.PENDING,
                created_at=self.clock.now(),
                notes=notes,
                due_date=due,
                source=parse_source(source),
            )

        logger.info(f"Created task {task.id} in {project!r}")
        return task

    def get_task(self, task_id: str) -> Task:
        task = self.store.get_task(task_id)
        if task is None:
            raise NotFoundError("Task", task_id)
        return resolve_snooze(task, self.clock.today())

    def update_task(
        self,
        task_id: str,
        *,
        title: str = UNSET,
        notes: str | None = UNSET,
        project: str = UNSET,
        status: TaskStatus | str = UNSET,
        due_date: date | str | None = UNSET,
        snoozed_until: date | str | None = UNSET,
    ) -> Task:
        """
        Apply a partial update in a single write.

        Only supplied fields change; notes, due_date and snoozed_until accept
        None to clear them. updated_at is always refreshed.
        """
        changes: dict[str, Any] = {}
        if title is not UNSET:
            changes["title"] = require_text(title, "title")
        if notes is not UNSET:
            changes["notes"] = notes
        if project is not UNSET:
            changes["project"] = require_text(project, "project")
        if status is not UNSET:
            changes["status"] = parse_status(status)
        if due_date is not UNSET:
            changes["due_date"] = parse_date(due_date, "due_date")
        if snoozed_until is not UNSET:
            changes["snoozed_until"] = parse_date(snoozed_until, "snoozed_until")

        if not changes:
            raise ValidationError("No fields provided to update")

        with self.store.transaction():
            if "project" in changes:
                self.registry.ensure_exists(changes["project"])
            task = self.store.update_task(task_id, changes, self.clock.now())
            if task is None:
                raise NotFoundError("Task", task_id)

        logger.debug(f"Updated task {task_id}: {', '.join(changes)}")
        return resolve_snooze(task, self.clock.today())

    def complete_task(self, task_id: str) -> Task:
        return self.update_task(task_id, status=TaskStatus.DONE)

    def reopen_task(self, task_id: str, due_date: date | str) -> Task:
        """Move a task back to pending with a new due date, in one write."""
        if parse_date(due_date, "due_date") is None:
            raise ValidationError("due_date is required to reopen a task")
        return self.update_task(task_id, status=TaskStatus.PENDING, due_date=due_date)

    def reschedule_task(self, task_id: str, due_date: date | str | None) -> Task:
        return self.update_task(task_id, due_date=due_date)

    def snooze_task(self, task_id: str, until: date | str) -> Task:
        """Snooze until a day; the task wakes up the day after."""
        if parse_date(until, "snoozed_until") is None:
            raise ValidationError("snoozed_until is required to snooze a task")
        return self.update_task(task_id, status=TaskStatus.SNOOZED, snoozed_until=until)

    def delete_task(self, task_id: str) -> None:
        if not self.store.delete_task(task_id):
            raise NotFoundError("Task", task_id)
        logger.info(f"Deleted task {task_id}")

    def list_tasks(
        self,
        project: str | None = None,
        status: TaskStatus | str | None = None,
    ) -> list[Task]:
        """
        Snapshot of tasks, newest first, with snoozes resolved.

        The status filter matches the effective status, so a lapsed snooze
        is listed as pending.
        """
        wanted = parse_status(status) if status else None
        today = self.clock.today()
        tasks = [resolve_snooze(t, today) for t in self.store.list_tasks(project or None)]
        if wanted is not None:
            tasks = [t for t in tasks if t.status == wanted]
        return tasks

    # ---- triage ----

    def triage(
        self,
        scheduled_order: str | None = None,
        completed_on: date | str | None = None,
    ) -> TriageBuckets:
        """Classify every task against today."""
        return classify(
            self.store.list_tasks(),
            self.clock.today(),
            scheduled_order=scheduled_order or self.scheduled_order,
            completed_on=parse_date(completed_on, "completed_on"),
        )

    def completion_activity(self, year: int, month: int) -> dict[date, int]:
        """Tasks completed per day of the given month."""
        if not 1 <= month <= 12:
            raise ValidationError("month must be between 1 and 12")
        return completions_by_day(self.store.list_tasks(), year, month)

    # ---- projects ----

    def list_projects(self) -> list[Project]:
        return self.registry.list_all()

    def create_project(self, name: str) -> Project:
        return self.registry.create(name)

    def rename_project(self, project_id: str, new_name: str) -> Project:
        return self.registry.rename(project_id, new_name)

    def delete_project(self, project_id: str) -> None:
        self.registry.delete(project_id)
