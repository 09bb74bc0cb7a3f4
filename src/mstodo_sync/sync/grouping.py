# src/mstodo_sync/sync/grouping.py

from __future__ import annotations

from collections.abc import Iterable

from .models import Task


def group_tasks_by_list(tasks: Iterable[Task]) -> dict[str, list[Task]]:
    """
    Group tasks by list display name.

    Group order is first appearance, task order within a group is input
    order. No sorting, no deduplication.
    """
    grouped: dict[str, list[Task]] = {}
    for task in tasks:
        grouped.setdefault(task.list_name, []).append(task)
    return grouped
