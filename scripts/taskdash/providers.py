"""
Data providers for the dashboard.

The protocol defines the interface; implementations can be swapped
for testing or alternative storage.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol


@dataclass(frozen=True)
class Task:
    """Immutable snapshot of a stored task."""

    id: int
    title: str
    category: str
    created_at: datetime


class TaskStore(Protocol):
    """Protocol for loading and mutating the task list."""

    def load(self) -> tuple[Task, ...]:
        """Load every task, in stored order."""
        ...

    def append(self, title: str, category: str) -> Task:
        """Append a new task and return it with its assigned id."""
        ...

    def remove(self, task_id: int) -> bool:
        """Remove a task by id. Returns False if it was not found."""
        ...
