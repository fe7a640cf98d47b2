"""Pure project domain logic - no I/O dependencies."""

from dataclasses import dataclass, replace

# Absorbs the tasks of deleted projects.
SENTINEL_PROJECT = "Uncategorised"


@dataclass
class Project:
    """A named grouping of tasks. The name is the only key tasks hold."""

    id: str
    name: str
    task_count: int = 0


def with_task_counts(projects: list[Project], counts: dict[str, int]) -> list[Project]:
    """Attach derived task counts, sorted by name."""
    return sorted(
        (replace(p, task_count=counts.get(p.name, 0)) for p in projects),
        key=lambda p: p.name,
    )
