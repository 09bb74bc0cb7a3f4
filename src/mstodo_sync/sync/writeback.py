# src/mstodo_sync/sync/writeback.py

from __future__ import annotations

"""
Write-back of single leaf states to the remote service.

These helpers only touch remote state. They never update already fetched
Task/ChecklistItem objects: reflecting the change locally is the caller's
job, and if the caller does it before the write and the write fails, the
local view stays out of sync with the remote (no rollback happens here).
"""

import logging

from ..core.ports import TodoRemote
from .models import TaskStatus

logger = logging.getLogger(__name__)


async def set_task_completion(
        client: TodoRemote,
        task_id: str,
        list_id: str,
        completed: bool,
) -> None:
    """Set or clear completion. Never writes inProgress."""
    client = client.pinned()

    status = TaskStatus.for_completion(completed)
    await client.patch_task(list_id, task_id, status.value)
    logger.info("Updated task %s to %s", task_id, status.value)


async def set_checklist_item_checked(
        client: TodoRemote,
        task_id: str,
        list_id: str,
        item_id: str,
        checked: bool,
) -> None:
    client = client.pinned()

    await client.patch_checklist_item(list_id, task_id, item_id, bool(checked))
    logger.info("Updated checklist item %s to %s", item_id, "checked" if checked else "unchecked")
