"""Task and project persistence interface."""

from contextlib import AbstractContextManager
from datetime import date, datetime
from typing import Any, Protocol

from action_center.core.projects import Project
from action_center.core.tasks import Task, TaskSource, TaskStatus


class TaskStore(Protocol):
    """
    Record of truth for tasks and projects.

    Every write method runs inside the caller's open transaction when there
    is one, or in a transaction of its own otherwise.
    """

    def transaction(self) -> AbstractContextManager[None]:
        """Group writes so they all land or none do."""
        ...

    def get_task(self, task_id: str) -> Task | None:
        ...

    def list_tasks(self, project: str | None = None) -> list[Task]:
        """Fresh snapshot, newest first."""
        ...

    def insert_task(
        self,
        *,
        title: str,
        project: str,
        status: TaskStatus,
        created_at: datetime,
        notes: str | None = None,
        due_date: date | None = None,
        source: TaskSource = TaskSource.MANUAL,
    ) -> Task:
        ...

    def update_task(self, task_id: str, changes: dict[str, Any], updated_at: datetime) -> Task | None:
        """Apply the given field changes in one statement. None if the task is missing."""
        ...

    def delete_task(self, task_id: str) -> bool:
        ...

    def reassign_tasks(self, old_project: str, new_project: str, updated_at: datetime) -> int:
        """Move every task filed under old_project, stamping updated_at. Returns the number moved."""
        ...

    def get_project(self, project_id: str) -> Project | None:
        ...

    def find_project(self, name: str) -> Project | None:
        ...

    def list_projects(self) -> list[Project]:
        ...

    def insert_project(self, name: str) -> Project:
        """Create a project, raising ConflictError if the name is taken."""
        ...

    def ensure_project(self, name: str) -> Project:
        """Create the project if missing; never modifies an existing one."""
        ...

    def rename_project(self, project_id: str, name: str) -> Project | None:
        """Rename a project row only, raising ConflictError if the name is taken."""
        ...

    def delete_project(self, project_id: str) -> bool:
        ...

    def task_counts(self) -> dict[str, int]:
        """Number of tasks per project name."""
        ...
