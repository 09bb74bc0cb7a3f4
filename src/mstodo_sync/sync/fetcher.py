# src/mstodo_sync/sync/fetcher.py

from __future__ import annotations

"""
Hierarchy fetcher.

Walks lists -> tasks -> checklist items one remote call at a time and
produces a flat, denormalized task sequence.

Failure scopes:
- no token:               Unauthenticated, nothing is sent
- list enumeration fails: the error propagates (no partial result)
- one list's tasks fail:  that list is omitted, recorded in `skipped`
- one task's checklist:   the task is kept with an empty checklist

The token is resolved once per run; Unauthenticated is never isolated.
Records without an id are dropped (they can neither be deduplicated nor
written back).
"""

import logging

from ..core.ports import TodoRemote
from ..graph.errors import TodoSyncError, Unauthenticated
from .models import (
    ChecklistItem,
    FetchLevel,
    FetchResult,
    SkippedFetch,
    Task,
    TaskList,
    remote_id,
)

logger = logging.getLogger(__name__)


async def _fetch_checklist(
        client: TodoRemote,
        task_list: TaskList,
        task_id: str,
        title: str,
        result: FetchResult,
) -> tuple[ChecklistItem, ...]:
    try:
        raw_items = await client.list_checklist_items(task_list.id, task_id)
    except Unauthenticated:
        raise
    except TodoSyncError as e:
        logger.warning("Failed to fetch checklist for task %s: %s", title, e.message)
        result.skipped.append(
            SkippedFetch(
                level=FetchLevel.CHECKLIST,
                list_id=task_list.id,
                list_name=task_list.display_name,
                task_id=task_id,
                task_title=title,
                reason=e.message,
            )
        )
        return ()

    items: list[ChecklistItem] = []
    for raw_item in raw_items:
        if remote_id(raw_item) is None:
            logger.warning("Checklist item without id in task %s ignored", title)
            continue
        items.append(ChecklistItem.from_remote(raw_item))
    return tuple(items)


async def _fetch_list_tasks(
        client: TodoRemote,
        task_list: TaskList,
        seen: set[tuple[str, str]],
        result: FetchResult,
) -> list[Task] | None:
    try:
        raw_tasks = await client.list_tasks(task_list.id)
    except Unauthenticated:
        raise
    except TodoSyncError as e:
        logger.warning("Failed to fetch tasks for list %s: %s", task_list.display_name, e.message)
        result.skipped.append(
            SkippedFetch(
                level=FetchLevel.TASKS,
                list_id=task_list.id,
                list_name=task_list.display_name,
                reason=e.message,
            )
        )
        return None

    out: list[Task] = []
    for raw_task in raw_tasks:
        task_id = remote_id(raw_task)
        title = str(raw_task.get("title") or "")
        if task_id is None:
            logger.warning("Task without id in list %s ignored: %s", task_list.display_name, title)
            continue
        key = (task_list.id, task_id)
        if key in seen:
            logger.debug("Duplicate task %s in list %s ignored", task_id, task_list.display_name)
            continue
        seen.add(key)

        items = await _fetch_checklist(client, task_list, task_id, title, result)
        out.append(Task.from_remote(raw_task, task_list, items))
    return out


async def fetch_hierarchy(client: TodoRemote) -> FetchResult:
    """
    Fetch every list, its tasks and their checklist items.

    Returns tasks in list order, then remote task order, plus a record of
    every isolated failure. An empty result is a success, not an error.
    """
    # Raises Unauthenticated before any request; pins the token for the run.
    client = client.pinned()

    raw_lists = await client.list_task_lists()

    result = FetchResult()
    seen: set[tuple[str, str]] = set()

    for raw_list in raw_lists:
        if remote_id(raw_list) is None:
            logger.warning("List without id ignored: %s", raw_list.get("displayName"))
            continue
        task_list = TaskList.from_remote(raw_list)
        tasks = await _fetch_list_tasks(client, task_list, seen, result)
        if tasks is not None:
            result.tasks.extend(tasks)

    logger.info(
        "Fetched %d tasks from %d lists (%d lists skipped, %d checklists degraded)",
        len(result.tasks),
        len(raw_lists),
        len(result.skipped_lists),
        len(result.skipped_checklists),
    )
    return result


async def fetch_all_tasks(client: TodoRemote) -> list[Task]:
    """Flat task sequence only (warnings are logged, not returned)."""
    result = await fetch_hierarchy(client)
    return result.tasks
