# src/mstodo_sync/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the sync core.

The fetcher and write-back helpers depend on these Protocols instead of the
concrete Graph client. This keeps the transport swappable and makes testing
easier (see tests/fakes.py).
"""

from typing import Any, Protocol

RemoteItem = dict[str, Any]
# Raw JSON object as returned by Graph: {"id": "...", "displayName": "...", ...}.


class CredentialStore(Protocol):
    """Supplies an opaque bearer token (or None when nothing is configured)."""
    def get_token(self) -> str | None: ...


class TodoRemote(Protocol):
    """Remote To Do operations (Microsoft Graph /me/todo)."""

    def has_credentials(self) -> bool: ...

    def pinned(self) -> TodoRemote:
        """Remote bound to the current token; raises Unauthenticated if there is none."""
        ...

    async def list_task_lists(self) -> list[RemoteItem]: ...
    async def list_tasks(self, list_id: str) -> list[RemoteItem]: ...
    async def list_checklist_items(self, list_id: str, task_id: str) -> list[RemoteItem]: ...

    async def patch_task(self, list_id: str, task_id: str, status: str) -> RemoteItem: ...
    async def patch_checklist_item(
            self,
            list_id: str,
            task_id: str,
            item_id: str,
            is_checked: bool,
    ) -> RemoteItem: ...
