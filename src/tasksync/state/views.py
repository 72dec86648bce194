"""Derived views over the task collection.

Pure functions: nothing here is stored, every call recomputes from the
current list.
"""

from __future__ import annotations

from collections.abc import Sequence

from tasksync.models.task import Task, TaskFilter


def filter_tasks(tasks: Sequence[Task], filter_value: str) -> list[Task]:
    """Return the tasks visible under *filter_value*, in list order.

    Values other than ``active`` and ``completed`` show everything.
    """
    if filter_value == TaskFilter.ACTIVE:
        return [task for task in tasks if not task.completed]
    if filter_value == TaskFilter.COMPLETED:
        return [task for task in tasks if task.completed]
    return list(tasks)


def count_active(tasks: Sequence[Task]) -> int:
    return sum(1 for task in tasks if not task.completed)


def count_completed(tasks: Sequence[Task]) -> int:
    return sum(1 for task in tasks if task.completed)
