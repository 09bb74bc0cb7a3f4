# src/mstodo_sync/graph/client.py

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from ..config import DEFAULT_GRAPH_BASE_URL
from ..core.credentials import StaticTokenStore, credentials_from_settings
from ..core.ports import CredentialStore, RemoteItem
from .errors import RemoteRejected, Unauthenticated, Unexpected, Unreachable

logger = logging.getLogger(__name__)


def _seg(value: str) -> str:
    """Quote one path segment (Graph ids may contain '=' or '/')."""
    return quote(str(value), safe="")


class GraphTodoClient:
    """
    Thin async wrapper around the Microsoft Graph To Do endpoints.

    IMPORTANT:
    - The token is read from the credential store per request and is only ever
      placed in the Authorization header. It is never logged.
    - No retries and no pagination: one HTTP call per method call.
    - Every failure leaves this class as a TodoSyncError subclass.
    """

    def __init__(
            self,
            credentials: CredentialStore,
            *,
            base_url: str = DEFAULT_GRAPH_BASE_URL,
            timeout: float | None = None,
            transport: httpx.AsyncBaseTransport | None = None,
            http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._credentials = credentials
        self._base_url = (base_url or DEFAULT_GRAPH_BASE_URL).rstrip("/")

        if http_client is not None:
            self._http = http_client
            return

        kwargs: dict[str, Any] = {}
        if timeout is not None:
            kwargs["timeout"] = httpx.Timeout(timeout)
        if transport is not None:
            kwargs["transport"] = transport
        self._http = httpx.AsyncClient(**kwargs)

    @property
    def base_url(self) -> str:
        return self._base_url

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> GraphTodoClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # ---- credentials ----

    def has_credentials(self) -> bool:
        return self._credentials.get_token() is not None

    def require_token(self) -> str:
        token = self._credentials.get_token()
        if token is None:
            raise Unauthenticated()
        return token

    def pinned(self) -> GraphTodoClient:
        """
        Client bound to the token as it is right now.

        Shares the HTTP connection pool; closing stays with the original client.
        """
        token = self.require_token()
        return GraphTodoClient(
            StaticTokenStore(token),
            base_url=self._base_url,
            http_client=self._http,
        )

    # ---- read operations ----

    async def list_task_lists(self) -> list[RemoteItem]:
        return await self._get_collection("/me/todo/lists")

    async def list_tasks(self, list_id: str) -> list[RemoteItem]:
        return await self._get_collection(f"/me/todo/lists/{_seg(list_id)}/tasks")

    async def list_checklist_items(self, list_id: str, task_id: str) -> list[RemoteItem]:
        return await self._get_collection(
            f"/me/todo/lists/{_seg(list_id)}/tasks/{_seg(task_id)}/checklistItems"
        )

    # ---- write operations ----

    async def patch_task(self, list_id: str, task_id: str, status: str) -> RemoteItem:
        return await self._request(
            "PATCH",
            f"/me/todo/lists/{_seg(list_id)}/tasks/{_seg(task_id)}",
            json={"status": str(status)},
        )

    async def patch_checklist_item(
            self,
            list_id: str,
            task_id: str,
            item_id: str,
            is_checked: bool,
    ) -> RemoteItem:
        return await self._request(
            "PATCH",
            f"/me/todo/lists/{_seg(list_id)}/tasks/{_seg(task_id)}/checklistItems/{_seg(item_id)}",
            json={"isChecked": bool(is_checked)},
        )

    # ---- low-level helpers ----

    async def _get_collection(self, path: str) -> list[RemoteItem]:
        body = await self._request("GET", path)
        value = body.get("value")
        if value is None:
            return []
        if not isinstance(value, list):
            raise Unexpected(f"Malformed collection response from {path}")
        return [item for item in value if isinstance(item, dict)]

    async def _request(self, method: str, path: str, *, json: Any = None) -> RemoteItem:
        token = self.require_token()
        headers = {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }
        url = self._base_url + path

        logger.debug("Graph %s %s", method, path)
        try:
            response = await self._http.request(method, url, headers=headers, json=json)
        except httpx.TransportError as e:
            logger.debug("Graph %s %s: transport error %s", method, path, e.__class__.__name__)
            raise Unreachable() from e
        except Exception as e:
            raise Unexpected(str(e) or None) from e

        if response.is_error:
            try:
                payload: Any = response.json()
            except ValueError:
                payload = None
            err = RemoteRejected.from_payload(payload, status_code=response.status_code)
            logger.debug("Graph %s %s: HTTP %s", method, path, response.status_code)
            raise err

        if not response.content:
            return {}
        try:
            data = response.json()
        except ValueError as e:
            raise Unexpected(f"Invalid JSON in response from {path}") from e
        return data if isinstance(data, dict) else {}


def create_graph_client(settings, credentials: CredentialStore | None = None) -> GraphTodoClient:
    """Build a client from explicit settings (base URL, timeout, token source)."""
    if credentials is None:
        credentials = credentials_from_settings(settings)
    return GraphTodoClient(
        credentials,
        base_url=getattr(settings, "graph_base_url", DEFAULT_GRAPH_BASE_URL),
        timeout=getattr(settings, "http_timeout_seconds", None),
    )
