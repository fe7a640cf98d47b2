"""Project registry - the single place project names are created, renamed and removed.

Tasks hold their project by name, so every rename or delete here rewrites the
referencing tasks in the same store transaction and stamps their updated_at.
"""

import logging

from .core.errors import NotFoundError, ValidationError
from .core.projects import SENTINEL_PROJECT, Project, with_task_counts
from .core.tasks import require_text
from .ports.clock import Clock
from .ports.task_store import TaskStore

logger = logging.getLogger(__name__)


class ProjectRegistry:
    """Maintains unique project names and keeps task references consistent."""

    def __init__(self, store: TaskStore, clock: Clock, sentinel: str = SENTINEL_PROJECT):
        self.store = store
        self.clock = clock
        self.sentinel = sentinel

    def ensure_exists(self, name: str) -> Project:
        """Return the project with this name, creating it if needed."""
        return self.store.ensure_project(require_text(name, "project"))

    def create(self, name: str) -> Project:
        """Create a project explicitly. Duplicate names raise ConflictError."""
        project = self.store.insert_project(require_text(name, "name"))
        logger.info(f"Created project {project.name!r}")
        return project

    def get(self, project_id: str) -> Project:
        project = self.store.get_project(project_id)
        if project is None:
            raise NotFoundError("Project", project_id)
        return project

    def list_all(self) -> list[Project]:
        """All projects by name, with derived task counts."""
        with self.store.transaction():
            projects = self.store.list_projects()
            counts = self.store.task_counts()
        return with_task_counts(projects, counts)

    def rename(self, project_id: str, new_name: str) -> Project:
        """
        Rename a project and every task filed under its old name.

        Both writes share one transaction; a name clash with another project
        raises ConflictError and leaves everything unchanged.
        """
        new_name = require_text(new_name, "name")

        with self.store.transaction():
            project = self.get(project_id)
            old_name = project.name
            if old_name == new_name:
                return project

            renamed = self.store.rename_project(project_id, new_name)
            moved = self.store.reassign_tasks(old_name, new_name, self.clock.now())

        logger.info(f"Renamed project {old_name!r} to {new_name!r}, moved {moved} task(s)")
        return renamed

    def delete(self, project_id: str) -> None:
        """
        Delete a project, moving its tasks to the sentinel project.

        The sentinel is created first, tasks are reassigned next and the row
        is deleted last, all in one transaction. The sentinel itself cannot be
        deleted while it still holds tasks.
        """
        with self.store.transaction():
            project = self.get(project_id)

            if project.name == self.sentinel:
                held = self.store.task_counts().get(project.name, 0)
                if held:
                    raise ValidationError(
                        f"Cannot delete {self.sentinel!r} while it holds {held} task(s)"
                    )
                self.store.delete_project(project_id)
                moved = 0
            else:
                self.store.ensure_project(self.sentinel)
                moved = self.store.reassign_tasks(project.name, self.sentinel, self.clock.now())
                self.store.delete_project(project_id)

        logger.info(f"Deleted project {project.name!r}, moved {moved} task(s) to {self.sentinel!r}")
