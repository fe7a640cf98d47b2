"""Functional core - pure business logic with no I/O."""

from .errors import (
    ActionCenterError,
    ConflictError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from .tasks import Task, TaskSource, TaskStatus, effective_status, resolve_snooze
from .projects import SENTINEL_PROJECT, Project
from .triage import Bucket, TriageBuckets, bucket_for, classify, completions_by_day

__all__ = [
    # Errors
    "ActionCenterError",
    "ConflictError",
    "NotFoundError",
    "StorageError",
    "ValidationError",
    # Tasks
    "Task",
    "TaskSource",
    "TaskStatus",
    "effective_status",
    "resolve_snooze",
    # Projects
    "SENTINEL_PROJECT",
    "Project",
    # Triage
    "Bucket",
    "TriageBuckets",
    "bucket_for",
    "classify",
    "completions_by_day",
]
