# src/mstodo_sync/cli/render.py

from __future__ import annotations

from ..sync.models import Task

LOADING_TEXT = "Loading MS Todo tasks..."
EMPTY_TEXT = "No tasks found. Check your API token in settings."


def _box(checked: bool) -> str:
    return "[x]" if checked else "[ ]"


def render_grouped(grouped: dict[str, list[Task]]) -> tuple[str, list[Task]]:
    """
    Render grouped tasks as text.

    Returns the text and the tasks in display order (task N is item N - 1),
    so commands can resolve the numbers the user sees.
    """
    if not grouped:
        return EMPTY_TEXT, []

    lines: list[str] = []
    order: list[Task] = []
    for list_name, tasks in grouped.items():
        if lines:
            lines.append("")
        lines.append(f"## {list_name}")
        for task in tasks:
            order.append(task)
            n = len(order)
            lines.append(f"{n:>3}. {_box(task.completed)} {task.title}")
            for m, item in enumerate(task.checklist_items or (), start=1):
                lines.append(f"       {n}.{m} {_box(item.is_checked)} {item.display_name}")
    return "\n".join(lines), order


def render_error(err: Exception) -> str:
    msg = getattr(err, "message", None) or str(err) or err.__class__.__name__
    return f"Error loading tasks: {msg}"
