"""SQLite adapter - persistence for tasks and projects."""

import logging
import sqlite3
import threading
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date, datetime
from pathlib import Path
from typing import Any

from action_center.core.errors import ConflictError, StorageError
from action_center.core.projects import Project
from action_center.core.tasks import Task, TaskSource, TaskStatus

logger = logging.getLogger(__name__)

TASK_FIELDS = ("title", "notes", "project", "status", "due_date", "snoozed_until")


def _new_id() -> str:
    return uuid.uuid4().hex


def _to_db(value: Any) -> Any:
    """Enums by value, dates and datetimes as ISO text."""
    if isinstance(value, (TaskStatus, TaskSource)):
        return value.value
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value


class SQLiteStore:
    """
    SQLite task store.

    Implements TaskStore protocol. Each transaction gets its own connection,
    held per thread, and opens with BEGIN IMMEDIATE so concurrent writers
    are serialized by the database lock. Reads outside a transaction use a
    short-lived autocommit connection.
    """

    def __init__(self, db_path: Path | str):
        self.db_path = Path(db_path).expanduser()
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._local = threading.local()
        self._initialize()
        logger.info(f"SQLiteStore ready at {self.db_path}")

    def _connect(self) -> sqlite3.Connection:
        # isolation_level=None: transactions are opened explicitly below.
        conn = sqlite3.connect(self.db_path, timeout=30.0, isolation_level=None)
        conn.row_factory = sqlite3.Row
        return conn

    def _initialize(self) -> None:
        with self.transaction():
            conn = self._local.conn
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS projects (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL UNIQUE
                )
                """
            )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS tasks (
                    id TEXT PRIMARY KEY,
                    title TEXT NOT NULL,
                    notes TEXT,
                    project TEXT NOT NULL,
                    status TEXT NOT NULL DEFAULT 'pending'
                        CHECK (status IN ('pending','in_progress','done','snoozed')),
                    due_date TEXT,
                    snoozed_until TEXT,
                    source TEXT NOT NULL DEFAULT 'manual',
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
                """
            )
            conn.execute("CREATE INDEX IF NOT EXISTS idx_tasks_project ON tasks(project)")
            conn.execute("CREATE INDEX IF NOT EXISTS idx_tasks_due ON tasks(due_date)")
            conn.execute("CREATE INDEX IF NOT EXISTS idx_tasks_status ON tasks(status)")

    # ---- transactions ----

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Run the block in one write transaction. Nested calls join the outer one."""
        if getattr(self._local, "conn", None) is not None:
            yield
            return

        conn = None
        try:
            conn = self._connect()
            conn.execute("BEGIN IMMEDIATE")
        except sqlite3.Error as e:
            if conn is not None:
                conn.close()
            logger.error(f"Failed to open transaction on {self.db_path}: {e}")
            raise StorageError("Storage unavailable") from e

        self._local.conn = conn
        try:
            yield
            conn.execute("COMMIT")
        except sqlite3.Error as e:
            self._rollback(conn)
            logger.error(f"Transaction rolled back: {e}")
            raise StorageError("Storage operation failed") from e
        except BaseException:
            self._rollback(conn)
            logger.debug("Transaction rolled back")
            raise
        finally:
            self._local.conn = None
            conn.close()

    @staticmethod
    def _rollback(conn: sqlite3.Connection) -> None:
        if conn.in_transaction:
            conn.execute("ROLLBACK")

    @contextmanager
    def _connection(self) -> Iterator[sqlite3.Connection]:
        """The open transaction's connection, or a fresh autocommit one."""
        current = getattr(self._local, "conn", None)
        if current is not None:
            yield current
            return

        conn = None
        try:
            conn = self._connect()
            yield conn
        except sqlite3.Error as e:
            logger.error(f"Read failed on {self.db_path}: {e}")
            raise StorageError("Storage operation failed") from e
        finally:
            if conn is not None:
                conn.close()

    @contextmanager
    def _writer(self) -> Iterator[sqlite3.Connection]:
        with self.transaction():
            yield self._local.conn

    # ---- row mapping ----

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        return Task(
            id=row["id"],
            title=row["title"],
            notes=row["notes"],
            project=row["project"],
            status=TaskStatus(row["status"]),
            due_date=date.fromisoformat(row["due_date"]) if row["due_date"] else None,
            snoozed_until=date.fromisoformat(row["snoozed_until"]) if row["snoozed_until"] else None,
            source=TaskSource(row["source"]),
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    @staticmethod
    def _row_to_project(row: sqlite3.Row) -> Project:
        return Project(id=row["id"], name=row["name"])

    # ---- tasks ----

    def get_task(self, task_id: str) -> Task | None:
        with self._connection() as conn:
            row = conn.execute("SELECT * FROM tasks WHERE id = ?", (task_id,)).fetchone()
        return self._row_to_task(row) if row else None

    def list_tasks(self, project: str | None = None) -> list[Task]:
        query = "SELECT * FROM tasks"
        params: list[Any] = []
        if project is not None:
            query += " WHERE project = ?"
            params.append(project)
        query += " ORDER BY created_at DESC, rowid DESC"
        with self._connection() as conn:
            rows = conn.execute(query, params).fetchall()
        return [self._row_to_task(row) for row in rows]

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
        task_id = _new_id()
        stamp = _to_db(created_at)
        with self._writer() as conn:
            conn.execute(
                """
                INSERT INTO tasks (id, title, notes, project, status, due_date,
                                   source, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (task_id, title, notes, project, _to_db(status), _to_db(due_date),
                 _to_db(source), stamp, stamp),
            )
            row = conn.execute("SELECT * FROM tasks WHERE id = ?", (task_id,)).fetchone()
        return self._row_to_task(row)

    def update_task(self, task_id: str, changes: dict[str, Any], updated_at: datetime) -> Task | None:
        unknown = set(changes) - set(TASK_FIELDS)
        if unknown:
            raise ValueError(f"Unknown task fields: {', '.join(sorted(unknown))}")

        fields = [f"{name} = ?" for name in changes]
        params = [_to_db(value) for value in changes.values()]
        fields.append("updated_at = ?")
        params.append(_to_db(updated_at))
        params.append(task_id)

        with self._writer() as conn:
            cursor = conn.execute(f"UPDATE tasks SET {', '.join(fields)} WHERE id = ?", params)
            if cursor.rowcount == 0:
                return None
            row = conn.execute("SELECT * FROM tasks WHERE id = ?", (task_id,)).fetchone()
        return self._row_to_task(row)

    def delete_task(self, task_id: str) -> bool:
        with self._writer() as conn:
            cursor = conn.execute("DELETE FROM tasks WHERE id = ?", (task_id,))
            return cursor.rowcount > 0

    def reassign_tasks(self, old_project: str, new_project: str, updated_at: datetime) -> int:
        with self._writer() as conn:
            cursor = conn.execute(
                "UPDATE tasks SET project = ?, updated_at = ? WHERE project = ?",
                (new_project, _to_db(updated_at), old_project),
            )
            return cursor.rowcount

    def task_counts(self) -> dict[str, int]:
        with self._connection() as conn:
            rows = conn.execute(
                "SELECT project, COUNT(*) AS n FROM tasks GROUP BY project"
            ).fetchall()
        return {row["project"]: row["n"] for row in rows}

    # ---- projects ----

    def get_project(self, project_id: str) -> Project | None:
        with self._connection() as conn:
            row = conn.execute("SELECT * FROM projects WHERE id = ?", (project_id,)).fetchone()
        return self._row_to_project(row) if row else None

    def find_project(self, name: str) -> Project | None:
        with self._connection() as conn:
            row = conn.execute("SELECT * FROM projects WHERE name = ?", (name,)).fetchone()
        return self._row_to_project(row) if row else None

    def list_projects(self) -> list[Project]:
        with self._connection() as conn:
            rows = conn.execute("SELECT * FROM projects ORDER BY name").fetchall()
        return [self._row_to_project(row) for row in rows]

    def insert_project(self, name: str) -> Project:
        project_id = _new_id()
        with self._writer() as conn:
            try:
                conn.execute("INSERT INTO projects (id, name) VALUES (?, ?)", (project_id, name))
            except sqlite3.IntegrityError:
                raise ConflictError(name) from None
        return Project(id=project_id, name=name)

    def ensure_project(self, name: str) -> Project:
        with self._writer() as conn:
            conn.execute(
                "INSERT OR IGNORE INTO projects (id, name) VALUES (?, ?)", (_new_id(), name)
            )
            row = conn.execute("SELECT * FROM projects WHERE name = ?", (name,)).fetchone()
        return self._row_to_project(row)

    def rename_project(self, project_id: str, name: str) -> Project | None:
        with self._writer() as conn:
            try:
                cursor = conn.execute(
                    "UPDATE projects SET name = ? WHERE id = ?", (name, project_id)
                )
            except sqlite3.IntegrityError:
                raise ConflictError(name) from None
            if cursor.rowcount == 0:
                return None
        return Project(id=project_id, name=name)

    def delete_project(self, project_id: str) -> bool:
        with self._writer() as conn:
            cursor = conn.execute("DELETE FROM projects WHERE id = ?", (project_id,))
            return cursor.rowcount > 0
