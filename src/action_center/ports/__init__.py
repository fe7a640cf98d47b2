"""Ports - interfaces/protocols for external dependencies."""

from .clock import Clock
from .task_store import TaskStore

__all__ = [
    "Clock",
    "TaskStore",
]
