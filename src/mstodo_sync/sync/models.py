# src/mstodo_sync/sync/models.py

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


def remote_id(raw: dict[str, Any]) -> str | None:
    """The record's `id` as a string, or None when missing/blank."""
    value = raw.get("id")
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _require_id(raw: dict[str, Any], kind: str) -> str:
    value = remote_id(raw)
    if value is None:
        raise ValueError(f"Remote {kind} has no id")
    return value


class TaskStatus(StrEnum):
    """
    Remote task status (Graph `status` field).

    Notes:
    - a local toggle only ever writes COMPLETED or NOT_STARTED
    - IN_PROGRESS is read-only from our side
    """

    NOT_STARTED = "notStarted"
    IN_PROGRESS = "inProgress"
    COMPLETED = "completed"

    @classmethod
    def from_remote(cls, raw: Any) -> TaskStatus:
        if not raw:
            return cls.NOT_STARTED
        try:
            return cls(raw)
        except ValueError:
            return cls.NOT_STARTED

    @classmethod
    def for_completion(cls, completed: bool) -> TaskStatus:
        return cls.COMPLETED if completed else cls.NOT_STARTED


class FetchLevel(StrEnum):
    TASKS = "tasks"
    CHECKLIST = "checklist"


@dataclass(frozen=True, slots=True)
class TaskList:
    id: str
    display_name: str

    @classmethod
    def from_remote(cls, raw: dict[str, Any]) -> TaskList:
        return cls(id=_require_id(raw, "list"), display_name=str(raw.get("displayName") or ""))


@dataclass(frozen=True, slots=True)
class ChecklistItem:
    id: str
    display_name: str
    is_checked: bool

    @classmethod
    def from_remote(cls, raw: dict[str, Any]) -> ChecklistItem:
        return cls(
            id=_require_id(raw, "checklist item"),
            display_name=str(raw.get("displayName") or ""),
            is_checked=bool(raw.get("isChecked", False)),
        )


@dataclass(frozen=True, slots=True)
class Task:
    id: str
    title: str
    status: TaskStatus

    # Denormalized at fetch time so grouping needs no join.
    list_id: str
    list_name: str

    # None = checklist fetch not attempted; () = attempted (possibly failed).
    checklist_items: tuple[ChecklistItem, ...] | None = None

    @property
    def completed(self) -> bool:
        return self.status is TaskStatus.COMPLETED

    @classmethod
    def from_remote(
            cls,
            raw: dict[str, Any],
            task_list: TaskList,
            checklist_items: tuple[ChecklistItem, ...] | None = None,
    ) -> Task:
        return cls(
            id=_require_id(raw, "task"),
            title=str(raw.get("title") or ""),
            status=TaskStatus.from_remote(raw.get("status")),
            list_id=task_list.id,
            list_name=task_list.display_name,
            checklist_items=checklist_items,
        )


@dataclass(frozen=True, slots=True)
class SkippedFetch:
    """One failure that was isolated instead of aborting the whole fetch."""

    level: FetchLevel
    list_id: str
    list_name: str
    reason: str
    task_id: str | None = None
    task_title: str | None = None


@dataclass(slots=True)
class FetchResult:
    tasks: list[Task] = field(default_factory=list)
    skipped: list[SkippedFetch] = field(default_factory=list)

    @property
    def skipped_lists(self) -> list[SkippedFetch]:
        return [s for s in self.skipped if s.level is FetchLevel.TASKS]

    @property
    def skipped_checklists(self) -> list[SkippedFetch]:
        return [s for s in self.skipped if s.level is FetchLevel.CHECKLIST]
