# src/mstodo_sync/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..sync.models import Task
from .ports import TodoRemote


@dataclass
class AppState:
    # Store Settings on the state for easy access in command handlers.
    settings: Any
    client: TodoRemote

    # Last rendered view, in display order; task number N is view[N - 1].
    view: list[Task] = field(default_factory=list)

    def task_by_number(self, number: int) -> Task | None:
        if 1 <= number <= len(self.view):
            return self.view[number - 1]
        return None

    def replace_task(self, old: Task, new: Task) -> None:
        for i, t in enumerate(self.view):
            if t.list_id == old.list_id and t.id == old.id:
                self.view[i] = new
                return
